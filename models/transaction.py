from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Any
from datetime import datetime, date
from enum import Enum


class PointType(str, Enum):
    ALL = "ALL"
    EARN = "EARN"
    REDEEM = "REDEEM"
    ADJUSTMENT = "ADJUSTMENT"
    TRANSFER = "TRANSFER"
    REVERSE = "REVERSE"


class Category(str, Enum):
    ALL = "ALL"
    DINING = "DINING"
    MOVIES = "MOVIES"
    SHOPPING = "SHOPPING"
    ENTERTAINMENT = "ENTERTAINMENT"
    TRANSIT = "TRANSIT"
    GROCERIES = "GROCERIES"
    TRAVEL = "TRAVEL"
    STREAMING = "STREAMING"
    GAS = "GAS"
    OTHER = "OTHER"


class PointsTransaction(BaseModel):
    """Single entry of a points history page, as returned by the API.

    Fields the aggregation reads are nullable so that one malformed entry is
    skipped with a warning instead of failing the whole page.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    point_id: Optional[str] = Field(default=None, alias="pointId")
    point_type: Optional[str] = Field(default=None, alias="pointCategory")  # EARN, REDEEM, ...
    description: Optional[str] = None
    location: Optional[str] = None
    brand: Any = None
    points: Optional[str] = None  # decimal string, e.g. "125"
    categories: List[str] = []
    multiplier: Optional[str] = None
    transaction_amount: Optional[str] = Field(default=None, alias="transactionAmount")
    point_date: Optional[str] = Field(default=None, alias="pointDate")
    transaction_date: Optional[str] = Field(default=None, alias="transactionDate")
    card: Optional[str] = None  # AXG, SCENE
    award_type: Any = Field(default=None, alias="awardType")
    partner_code: Optional[str] = Field(default=None, alias="partnerCode")
    icon_type_code: Optional[str] = Field(default=None, alias="iconTypeCode")

    @field_validator('point_id', 'points', mode='before')
    @classmethod
    def numbers_as_strings(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator('categories', mode='before')
    @classmethod
    def null_categories_as_empty(cls, value):
        return [] if value is None else value

    @property
    def is_earn(self) -> bool:
        return (self.point_type or "").upper() == PointType.EARN.value

    @property
    def primary_category(self) -> str:
        """First listed category; only index 0 is used for bucketing."""
        if not self.categories:
            return Category.OTHER.value
        return self.categories[0]

    @property
    def transaction_day(self) -> Optional[date]:
        """Calendar day of the transaction, or None if missing or unparseable."""
        if not self.transaction_date:
            return None
        # Only the date part is needed; time and offset formats vary
        date_part = self.transaction_date.strip().split('T')[0]
        try:
            return datetime.fromisoformat(date_part).date()
        except ValueError:
            return None
