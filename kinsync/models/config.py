"""Conversion configuration."""

import json
from pathlib import Path
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConversionConfig(BaseModel):
    """
    Configuration for the reconciliation engine.

    Accepts the legacy config keys (``AgeWhenKidsAreModified``,
    ``ChildParentPairs``, ``ModdingCommands``) as aliases.
    """

    model_config = ConfigDict(populate_by_name=True)

    age_threshold: int = Field(default=54, ge=0, alias="AgeWhenKidsAreModified")
    guardian_overrides: Dict[str, str] = Field(default={}, alias="ChildParentPairs")
    modding_commands: bool = Field(default=True, alias="ModdingCommands")
    home_location: str = "FarmHouse"
    schedule_bed_stop: str = "BusStop -1 23 3"
    token_noun: str = "Child"
    token_noun_plural: str = "Children"

    @field_validator("guardian_overrides", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Optional[dict]) -> dict:
        return value or {}

    @classmethod
    def load(cls, path: Union[str, Path]) -> "ConversionConfig":
        """Read a JSON config file; a missing file yields the defaults."""
        path = Path(path)
        if not path.exists():
            return cls()
        return cls.model_validate(json.loads(path.read_text(encoding="utf-8")))
