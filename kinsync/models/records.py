"""Identity Records: source records, derived records and their correspondence."""

from typing import Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from kinsync.models.calendar import Season


class SourceRecord(BaseModel):
    """A continuously existing household member. Read-only to the engine."""

    name: str                               # Unique within the active session
    age: int = Field(ge=0, default=0)       # Days old, advances once per day
    birth_order: int = Field(ge=0)          # Stable position assigned at creation
    gender_class: Literal[0, 1] = 0         # 0 = male, 1 = female
    guardian_id: Optional[str] = None

    def is_eligible(self, threshold: int) -> bool:
        return self.age >= threshold


class DerivedRecord(BaseModel):
    """A separately materialized entity standing in for a source record."""

    record_id: str = Field(default_factory=lambda: f"drv_{uuid4().hex[:12]}")
    name: str
    birthday_season: Season
    birthday_day: int = Field(ge=1, le=28)
    location: Optional[str] = None
    is_source_category: bool = False        # Host flags source-type entities

    @property
    def composite_key(self) -> str:
        return f"{self.birthday_season} {self.birthday_day}"


class CorrespondenceEntry(BaseModel):
    """Pairing of one source key with the derived record standing in for it."""

    model_config = ConfigDict(frozen=True)

    source_name: str
    derived: DerivedRecord
    created_tick: int
