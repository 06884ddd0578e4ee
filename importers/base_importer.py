from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict
from models.page_result import PageResult
from models.points_summary import PointsSummary
from core.exceptions import ConfigurationError
from core.pagination import PaginationPolicy, build_policy
from core.points_aggregator import PointsAggregator
import asyncio
import time
import logging
import json
from datetime import date, datetime
from pathlib import Path


class BasePointsImporter(ABC):
    """Abstract base class for points history importers."""

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.platform = self._get_platform_name()
        self.logger = self._setup_logging()

    def _setup_logging(self) -> logging.Logger:
        """Setup logging for this importer."""
        logger = logging.getLogger(f"{self.platform}_importer")
        logger.setLevel(logging.INFO)

        # Clear existing handlers to avoid duplicates
        logger.handlers.clear()

        # Create logs directory if it doesn't exist
        logs_dir = Path(self.config.get('paths', {}).get('logs_dir', 'logs'))
        logs_dir.mkdir(parents=True, exist_ok=True)

        # Create file handler for this run
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        log_file = logs_dir / f"{self.platform}_{timestamp}.log"

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.INFO)

        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        file_handler.setFormatter(formatter)

        logger.addHandler(file_handler)
        self.log_file = log_file
        return logger

    @abstractmethod
    def _get_platform_name(self) -> str:
        """Return platform name for this importer."""
        pass

    @abstractmethod
    def source_identifier(self) -> str:
        """Return the endpoint this importer reads from."""
        pass

    @abstractmethod
    def iter_pages(self, policy: PaginationPolicy) -> AsyncIterator[PageResult]:
        """Yield pages one at a time until the policy says to stop."""
        pass

    def build_policy(self, start_date: date, end_date: date, strategy: str = None) -> PaginationPolicy:
        """Create the pagination policy for a run from config."""
        pagination = self.config.get('pagination', {})
        request = self.config.get('request', {})
        return build_policy(
            strategy or pagination.get('strategy', 'count'),
            start_date=start_date,
            end_date=end_date,
            page_size=pagination.get('page_size', 100),
            cards=request.get('cards'),
            categories=request.get('categories'),
        )

    def summarize_points(self, start_date: date, end_date: date, strategy: str = None) -> PointsSummary:
        """Main summary workflow with comprehensive logging."""
        start_time = time.time()
        run_timestamp = datetime.now()

        # Generate run ID
        run_id = f"{self.platform}_{run_timestamp.strftime('%Y%m%d_%H%M%S')}"

        if end_date < start_date:
            error_msg = f"End date {end_date} is before start date {start_date}"
            self.logger.error(error_msg)
            raise ConfigurationError(error_msg)

        policy = self.build_policy(start_date, end_date, strategy)

        self.logger.info(f"Starting points summary run: {run_id}")
        self.logger.info(f"Source: {self.source_identifier()}")
        self.logger.info(f"Window: {start_date} to {end_date}")
        self.logger.info(f"Pagination strategy: {policy.name}")

        try:
            window_start, window_end = policy.aggregation_window()
            aggregator = PointsAggregator(window_start, window_end, logger=self.logger)

            fetch_start = time.time()
            asyncio.run(self._fold_pages(policy, aggregator))
            fetch_time = time.time() - fetch_start

            self.logger.info(
                f"Folded {aggregator.transactions_seen} transactions from "
                f"{aggregator.pages_folded} pages in {fetch_time:.2f}s"
            )

            processing_time = time.time() - start_time

            summary = PointsSummary.from_aggregate(
                run_id=run_id,
                platform=self.platform,
                source_identifier=self.source_identifier(),
                start_date=start_date,
                end_date=end_date,
                strategy=policy.name,
                aggregator=aggregator,
                processing_time=processing_time
            )

            self._log_statistics(summary, fetch_time)

            self.logger.info(f"Points summary completed successfully: {run_id}")

            return summary

        except Exception as e:
            self.logger.error(f"Points summary failed: {str(e)}", exc_info=True)
            raise

    async def _fold_pages(self, policy: PaginationPolicy, aggregator: PointsAggregator):
        async for page in self.iter_pages(policy):
            aggregator.add_page(page)

    def _log_statistics(self, summary: PointsSummary, fetch_time: float):
        """Log detailed statistics about the run."""
        stats = {
            "run_id": summary.run_id,
            "platform": summary.platform,
            "run_date": summary.run_date.isoformat(),
            "source": summary.source_identifier,
            "window": [summary.start_date.isoformat(), summary.end_date.isoformat()],
            "strategy": summary.strategy,
            "pages_fetched": summary.pages_fetched,
            "transactions_seen": summary.transactions_seen,
            "transactions_counted": summary.transactions_counted,
            "transactions_skipped": summary.transactions_skipped,
            "points_by_category": summary.points_by_category,
            "total_points": summary.total_points,
            "timing": {
                "total_processing_time": summary.processing_time,
                "fetch_time": fetch_time,
                "transactions_per_second": summary.transactions_seen / summary.processing_time if summary.processing_time > 0 else 0
            }
        }

        self.logger.info("STATISTICS: " + json.dumps(stats, indent=2))
