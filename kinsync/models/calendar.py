"""Calendar Date: the host's 4-season, 28-day calendar."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

SEASONS = ("spring", "summer", "fall", "winter")
DAYS_PER_SEASON = 28
DAYS_PER_YEAR = DAYS_PER_SEASON * len(SEASONS)

Season = Literal["spring", "summer", "fall", "winter"]


class CalendarUnderflowError(ArithmeticError):
    """Raised when date arithmetic lands before spring 1, year 1."""
    pass


class CalendarDate(BaseModel):
    """A single day on the host calendar."""

    model_config = ConfigDict(frozen=True)

    day: int = Field(ge=1, le=DAYS_PER_SEASON)
    season: Season
    year: int = Field(ge=1, default=1)

    @classmethod
    def epoch(cls) -> "CalendarDate":
        return cls(day=1, season="spring", year=1)

    def days_since_epoch(self) -> int:
        return (
            (self.year - 1) * DAYS_PER_YEAR
            + SEASONS.index(self.season) * DAYS_PER_SEASON
            + (self.day - 1)
        )

    @classmethod
    def from_days_since_epoch(cls, total: int) -> "CalendarDate":
        if total < 0:
            raise CalendarUnderflowError(
                f"{total} days before the epoch cannot be represented"
            )
        year, remainder = divmod(total, DAYS_PER_YEAR)
        season_index, day = divmod(remainder, DAYS_PER_SEASON)
        return cls(day=day + 1, season=SEASONS[season_index], year=year + 1)

    def add_days(self, offset: int) -> "CalendarDate":
        """Shift this date by ``offset`` days (negative moves backwards)."""
        return self.from_days_since_epoch(self.days_since_epoch() + offset)

    @property
    def birthday_key(self) -> str:
        """Birthday rendering used for identity matching, e.g. ``"spring 5"``."""
        return f"{self.season} {self.day}"

    def to_gift_date(self) -> str:
        """Persisted rendering, e.g. ``"5 spring 2"``."""
        return f"{self.day} {self.season} {self.year}"

    @classmethod
    def parse_gift_date(cls, value: str) -> "CalendarDate":
        parts = value.split()
        if len(parts) != 3:
            raise ValueError(f"Expected 'day season year', got {value!r}")
        day, season, year = parts
        return cls(day=int(day), season=season.lower(), year=int(year))
