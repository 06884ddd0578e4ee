from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional, Tuple

from core.exceptions import ConfigurationError
from models.page_result import PageResult, PointsHistoryRequest
from models.transaction import PointType


def total_pages(total_item_count: int, page_size: int) -> int:
    """Number of pages needed for total_item_count items (ceiling division)."""
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return -(-total_item_count // page_size)


class PaginationPolicy(ABC):
    """Builds page requests and decides when the page walk is finished."""

    name = ""

    def __init__(self,
                 start_date: date,
                 end_date: date,
                 page_size: int = 100,
                 cards: Optional[List[str]] = None,
                 categories: Optional[List[str]] = None):
        self.start_date = start_date
        self.end_date = end_date
        self.page_size = page_size
        self.cards = cards or ["ALL"]
        self.categories = categories or ["ALL"]

    @abstractmethod
    def build_request(self, page: int) -> PointsHistoryRequest:
        """Request body for the given 1-based page."""
        pass

    @abstractmethod
    def inspect(self, result: PageResult, page: int) -> Tuple[PageResult, bool]:
        """Return the page to deliver and whether page (1-based counter) is the last one."""
        pass

    def expected_pages(self, result: PageResult) -> Optional[int]:
        """Total page count if the first response reveals it, else None."""
        return None

    @abstractmethod
    def aggregation_window(self) -> Tuple[Optional[date], Optional[date]]:
        """Date window the aggregator must enforce, (None, None) if the server does."""
        pass


class CountPagination(PaginationPolicy):
    """Stops once the page counter reaches ceil(totalItemCount / pageSize)."""

    name = "count"

    def build_request(self, page: int) -> PointsHistoryRequest:
        return PointsHistoryRequest(
            types=[PointType.EARN.value],
            categories=self.categories,
            cards=self.cards,
            from_date=self.start_date.isoformat(),
            to_date=self.end_date.isoformat(),
            page=page,
            sort="ASC",
            limit=self.page_size,
        )

    def inspect(self, result: PageResult, page: int) -> Tuple[PageResult, bool]:
        return result, page >= total_pages(result.total_item_count, self.page_size)

    def expected_pages(self, result: PageResult) -> Optional[int]:
        return max(total_pages(result.total_item_count, self.page_size), 1)

    def aggregation_window(self):
        return None, None


class BoundaryScanPagination(PaginationPolicy):
    """Walks pages newest-first until a transaction predates the window."""

    name = "boundary"

    def build_request(self, page: int) -> PointsHistoryRequest:
        return PointsHistoryRequest(
            types=[PointType.EARN.value],
            categories=self.categories,
            cards=self.cards,
            from_date=f"{self.start_date.isoformat()}T00:00:00Z",
            to_date=f"{self.end_date.isoformat()}T23:59:59Z",
            page=page,
            sort="DESC",
        )

    def inspect(self, result: PageResult, page: int) -> Tuple[PageResult, bool]:
        if not result.transactions:
            return result, True

        for transaction in result.transactions:
            day = transaction.transaction_day
            if day is not None and day < self.start_date:
                return result.model_copy(update={"past_window": True}), True

        return result, False

    def aggregation_window(self):
        return self.start_date, self.end_date


POLICIES = {
    CountPagination.name: CountPagination,
    BoundaryScanPagination.name: BoundaryScanPagination,
}


def build_policy(strategy: str, **kwargs) -> PaginationPolicy:
    """Create the pagination policy registered under strategy."""
    policy_cls = POLICIES.get(strategy)
    if policy_cls is None:
        raise ConfigurationError(
            f"Unknown pagination strategy '{strategy}' (expected one of: {', '.join(POLICIES)})"
        )
    page_size = kwargs.get("page_size", 100)
    if not isinstance(page_size, int) or page_size <= 0:
        raise ConfigurationError(f"page_size must be a positive integer, got {page_size!r}")
    return policy_cls(**kwargs)
