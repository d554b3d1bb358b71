"""Household: in-memory representation of the host's side of the world."""

from typing import Dict, List, Optional

from pydantic import BaseModel

from kinsync.models.calendar import CalendarDate
from kinsync.models.records import DerivedRecord, SourceRecord
from kinsync.models.relationship import RelationshipMetric


class Household(BaseModel):
    """What the host currently holds: residents, stand-ins, ledger, clock."""

    sources: List[SourceRecord] = []                        # Residents, in birth order
    withdrawn: List[SourceRecord] = []                      # Residents hidden behind a stand-in
    derived: Dict[str, DerivedRecord] = {}                  # record_id -> record present at home
    relationships: Dict[str, RelationshipMetric] = {}       # Ledger keyed by name
    beds: Dict[str, str] = {}                               # name -> rendered bed slot
    today: Optional[CalendarDate] = None
    loading: bool = False                                   # Load-transition window
    current_guardian: Optional[str] = None
    tick: int = 0
