"""Derived attributes exposed to template consumers."""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class DerivedAttributeSnapshot(BaseModel):
    """Display attributes of one eligible source record. Rebuilt wholesale."""

    model_config = ConfigDict(frozen=True)

    name: str
    gender_label: str                       # "male" | "female"
    birthday: str                           # "season day"
    bed_slot: Optional[str] = None          # "<location> x y"
    guardian_name: Optional[str] = None


class BedSlot(BaseModel):
    """One of the fixed bed positions in the home location."""

    model_config = ConfigDict(frozen=True)

    label: str
    x: int
    y: int

    def render(self, location: str) -> str:
        return f"{location} {self.x} {self.y}"
