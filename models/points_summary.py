from pydantic import BaseModel
from typing import Dict
from datetime import datetime, date


class PointsSummary(BaseModel):
    """Summary of earned points for one run over a date window."""

    run_id: str
    platform: str
    run_date: datetime
    source_identifier: str  # API endpoint
    start_date: date
    end_date: date
    strategy: str  # "count" or "boundary"
    pages_fetched: int
    transactions_seen: int
    transactions_counted: int
    transactions_skipped: int  # unparseable points or dates
    points_by_category: Dict[str, int]
    total_points: int
    processing_time: float

    @classmethod
    def from_aggregate(cls,
                       run_id: str,
                       platform: str,
                       source_identifier: str,
                       start_date: date,
                       end_date: date,
                       strategy: str,
                       aggregator,
                       processing_time: float) -> "PointsSummary":
        """Create summary from a finished PointsAggregator."""

        # Drop empty buckets (e.g. categories that only saw "0" point rows)
        by_category = {
            category: points
            for category, points in aggregator.points_by_category.items()
            if points != 0
        }

        return cls(
            run_id=run_id,
            platform=platform,
            run_date=datetime.now(),
            source_identifier=source_identifier,
            start_date=start_date,
            end_date=end_date,
            strategy=strategy,
            pages_fetched=aggregator.pages_folded,
            transactions_seen=aggregator.transactions_seen,
            transactions_counted=aggregator.transactions_counted,
            transactions_skipped=aggregator.transactions_skipped,
            points_by_category=by_category,
            total_points=aggregator.total_points,
            processing_time=processing_time
        )

    def sorted_categories(self):
        """Category buckets ordered by points descending, then name."""
        return sorted(self.points_by_category.items(), key=lambda item: (-item[1], item[0]))
