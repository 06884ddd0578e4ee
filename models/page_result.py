from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Any

from models.transaction import PointsTransaction


class PointsHistoryRequest(BaseModel):
    """Body of POST /api/customer/points/history."""

    model_config = ConfigDict(populate_by_name=True)

    types: List[str] = Field(alias="Types")
    categories: List[str] = Field(alias="Categories")
    cards: List[str] = Field(alias="Cards")
    from_date: str = Field(alias="FromDate")
    to_date: str = Field(alias="ToDate")
    page: int = Field(alias="Page")
    sort: str = Field(alias="Sort")  # "ASC" or "DESC"
    limit: Optional[int] = Field(default=None, alias="Limit")

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class PointsHistoryData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    points_history: List[PointsTransaction] = Field(default_factory=list, alias="pointsHistory")
    items_count: int = Field(default=0, alias="itemsCount")
    total_item_count: int = Field(default=0, alias="totalItemCount")
    page_number: int = Field(default=0, alias="pageNumber")
    error_details: Any = Field(default=None, alias="errorDetails")


class PointsHistoryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    data: PointsHistoryData
    validation_errors: Any = Field(default=None, alias="validationErrors")


class PageResult(BaseModel):
    """One fetched page, discarded once folded into the aggregate."""

    transactions: List[PointsTransaction]
    total_item_count: int
    page_number: int
    past_window: bool = False  # boundary-scan: page reached dates before the window

    @classmethod
    def from_response(cls, response: PointsHistoryResponse, requested_page: int) -> "PageResult":
        data = response.data
        return cls(
            transactions=data.points_history,
            total_item_count=data.total_item_count,
            page_number=data.page_number or requested_page,
        )
