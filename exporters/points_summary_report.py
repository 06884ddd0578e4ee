import json
from decimal import Decimal
from pathlib import Path
from typing import Dict, List

from models.points_summary import PointsSummary


def format_dollars(points: int) -> str:
    """Dollar equivalent of points held in minor units: 1234 -> "$12.34"."""
    return f"${Decimal(points) / 100:.2f}"


def format_percentage(points: int, total_points: int) -> str:
    """Share of the grand total with two decimals: 250 of 1000 -> "25.00%"."""
    if total_points == 0:
        return "0.00%"
    return f"{Decimal(points) / Decimal(total_points) * 100:.2f}%"


class PointsSummaryReport:
    """Formats a PointsSummary for the console and writes it as JSON."""

    def __init__(self, output_config: Dict = None):
        self.output_config = output_config or {}

    def summary_lines(self, summary: PointsSummary) -> List[str]:
        """One line per non-empty category, then the grand total."""
        lines = []
        for category, points in summary.sorted_categories():
            lines.append(
                f"{category:15} {format_percentage(points, summary.total_points):>8} "
                f"{points:>10d} {format_dollars(points):>12}"
            )
        lines.append(
            f"{'TOTAL':15} {'':>8} {summary.total_points:>10d} {format_dollars(summary.total_points):>12}"
        )
        return lines

    def print_summary(self, summary: PointsSummary, log_file=None):
        print(f"\n🎯 Points Summary {summary.start_date} to {summary.end_date}")
        print(f"   Pages fetched: {summary.pages_fetched}")
        print(f"   Transactions counted: {summary.transactions_counted} of {summary.transactions_seen}")
        if summary.transactions_skipped:
            print(f"   ⚠️  Skipped (unparseable): {summary.transactions_skipped}")
            if log_file:
                print(f"   Warnings logged to: {log_file}")
        print(f"   Processing time: {summary.processing_time:.2f}s")
        print()
        for line in self.summary_lines(summary):
            print(line)

    def export_json(self, summary: PointsSummary) -> Path:
        """Export summary to <output_base>/<reports_subdir>/<run_id>.json."""
        output_base = Path(self.output_config.get('output_base', 'output'))
        reports_dir = output_base / self.output_config.get('reports_subdir', 'points_reports')
        reports_dir.mkdir(parents=True, exist_ok=True)

        report_file = reports_dir / f"{summary.run_id}.json"
        with open(report_file, 'w') as f:
            json.dump(summary.model_dump(mode='json'), f, indent=2, default=str)

        return report_file
