"""Relationship Metric: affinity and gift data carried across conversion."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kinsync.models.calendar import CalendarDate


class RelationshipMetric(BaseModel):
    """
    Externally tracked relationship data for one named entity.

    Serialized by alias to keep the persisted layout
    ``{"points", "giftsThisWeek", "lastGiftDate"}``.
    """

    model_config = ConfigDict(populate_by_name=True)

    points: int = 0
    gifts_this_week: int = Field(default=0, ge=0, alias="giftsThisWeek")
    last_gift_date: Optional[str] = Field(default=None, alias="lastGiftDate")  # "day season year"

    @field_validator("last_gift_date")
    @classmethod
    def _check_gift_date(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            try:
                CalendarDate.parse_gift_date(value)
            except ValueError as e:
                raise ValueError(f"Invalid gift date {value!r}") from e
        return value

    def last_gift_calendar_date(self) -> Optional[CalendarDate]:
        if self.last_gift_date is None:
            return None
        return CalendarDate.parse_gift_date(self.last_gift_date)
