#!/usr/bin/env python3
"""
Scene+ Points Summary Runner

Walks the Scene+ points history API for a date window and prints earned
points per category with their dollar equivalent.

Usage: python scripts/run_points_summary.py --start-date 2024-01-01 [--end-date 2024-06-30]
"""

import argparse
import sys
import yaml
from pathlib import Path
from datetime import date, datetime
from dotenv import load_dotenv

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Load environment variables
load_dotenv(project_root / "config" / ".env")

from core.exceptions import ConfigurationError, PointsApiError
from core.pagination import POLICIES
from exporters.points_summary_report import PointsSummaryReport
from importers.scene_importer import ScenePlusImporter


def load_config(config_path: str) -> dict:
    """Load configuration from YAML file."""
    with open(config_path, 'r') as f:
        return yaml.safe_load(f) or {}


def parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date '{value}' (expected YYYY-MM-DD)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Summarize earned Scene+ points by category")
    parser.add_argument('--start-date', type=parse_date, required=True,
                        help="Start of transaction date range (YYYY-MM-DD)")
    parser.add_argument('--end-date', type=parse_date, default=date.today(),
                        help="End of transaction date range (YYYY-MM-DD, default: today)")
    parser.add_argument('--strategy', choices=sorted(POLICIES),
                        help="Pagination strategy, overrides pagination.strategy in the config")
    parser.add_argument('--config', default=str(project_root / 'config' / 'points_config.yaml'),
                        help="Path to the YAML config file")
    parser.add_argument('--save-report', action='store_true',
                        help="Write the summary as JSON under paths.output_base")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.end_date < args.start_date:
        print(f"Error: end date {args.end_date} is before start date {args.start_date}")
        sys.exit(1)

    try:
        config = load_config(args.config)
    except (OSError, yaml.YAMLError) as e:
        print(f"Error: could not load config {args.config}: {e}")
        sys.exit(1)

    print(f"Fetching earned points from {args.start_date} to {args.end_date}")

    try:
        importer = ScenePlusImporter(config)
        summary = importer.summarize_points(args.start_date, args.end_date, strategy=args.strategy)

        reporter = PointsSummaryReport(config.get('paths', {}))
        reporter.print_summary(summary, log_file=importer.log_file)

        if args.save_report:
            report_file = reporter.export_json(summary)
            print(f"\nReport saved to: {report_file}")

    except ConfigurationError as e:
        print(f"❌ Configuration error: {e}")
        sys.exit(1)
    except PointsApiError as e:
        print(f"❌ Points history request failed: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n\n❌ Points summary cancelled by user")
        sys.exit(1)


if __name__ == "__main__":
    main()
