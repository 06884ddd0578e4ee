import logging
from datetime import date
from typing import Dict, Iterable, Optional

from models.page_result import PageResult
from models.transaction import PointsTransaction


class PointsAggregator:
    """Filters earned transactions and sums their points per category."""

    def __init__(self,
                 start_date: Optional[date] = None,
                 end_date: Optional[date] = None,
                 logger: Optional[logging.Logger] = None):
        # Window is only enforced when both ends are set (boundary-scan runs)
        self.start_date = start_date
        self.end_date = end_date
        self.logger = logger or logging.getLogger(__name__)

        self.points_by_category: Dict[str, int] = {}
        self.total_points = 0
        self.pages_folded = 0
        self.transactions_seen = 0
        self.transactions_counted = 0
        self.transactions_skipped = 0

    @property
    def enforces_window(self) -> bool:
        return self.start_date is not None and self.end_date is not None

    def add_pages(self, pages: Iterable[PageResult]) -> "PointsAggregator":
        for page in pages:
            self.add_page(page)
        return self

    def add_page(self, page: PageResult):
        """Fold every transaction of a page, in arrival order."""
        for transaction in page.transactions:
            self.add_transaction(transaction)
        self.pages_folded += 1

    def add_transaction(self, transaction: PointsTransaction) -> bool:
        """Add a transaction to its bucket. Returns True if it was counted."""
        self.transactions_seen += 1

        if not transaction.is_earn:
            return False

        if self.enforces_window and not self._in_window(transaction):
            return False

        points = self._parse_points(transaction)
        if points is None:
            self.transactions_skipped += 1
            return False

        category = transaction.primary_category
        self.points_by_category[category] = self.points_by_category.get(category, 0) + points
        self.total_points += points
        self.transactions_counted += 1
        return True

    def _in_window(self, transaction: PointsTransaction) -> bool:
        day = transaction.transaction_day
        if day is None:
            self.logger.warning(
                f"Skipping transaction {transaction.point_id}: "
                f"unparseable date {transaction.transaction_date!r}"
            )
            self.transactions_skipped += 1
            return False
        return self.start_date <= day <= self.end_date

    def _parse_points(self, transaction: PointsTransaction) -> Optional[int]:
        try:
            return int((transaction.points or "").strip())
        except ValueError:
            self.logger.warning(
                f"Skipping transaction {transaction.point_id}: "
                f"invalid points value {transaction.points!r}"
            )
            return None
