"""Conversion State: the engine's explicitly owned mutable state."""

from typing import Dict, List, Optional, Set

from pydantic import BaseModel

from kinsync.models.records import CorrespondenceEntry, SourceRecord
from kinsync.models.snapshot import DerivedAttributeSnapshot


class ConversionState(BaseModel):
    """
    Everything the Reconciliation Cache remembers between ticks.
    Owned by exactly one cache; injected through its constructor.
    """

    correspondences: Dict[str, CorrespondenceEntry] = {}   # source name -> entry
    withdrawn: List[SourceRecord] = []                     # Corresponded, hidden from the household
    snapshot: Optional[List[DerivedAttributeSnapshot]] = None
    total_count: int = 0
    cache_tick: Optional[int] = None
    observed_derived_ids: Optional[Set[str]] = None

    def clear(self) -> None:
        """Drop every in-memory association."""
        self.correspondences = {}
        self.withdrawn = []
        self.snapshot = None
        self.total_count = 0
        self.cache_tick = None
        self.observed_derived_ids = None
