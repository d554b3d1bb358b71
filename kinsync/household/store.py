"""
Household Store: the host's side of the world, as seen by the engine.

Updated by: host events (births, ageing, derived records materializing)
Queried by: Reconciliation Cache + Lifecycle Controller
"""

from typing import List, Optional

from kinsync.models.calendar import CalendarDate
from kinsync.models.household import Household
from kinsync.models.records import DerivedRecord, SourceRecord
from kinsync.models.relationship import RelationshipMetric


class HouseholdStore:
    """
    In-memory household.
    A real host supplies these collaborators from its own object model.
    """

    def __init__(
        self,
        today: Optional[CalendarDate] = None,
        current_guardian: Optional[str] = None,
    ):
        self._model = Household(today=today, current_guardian=current_guardian)

    @property
    def model(self) -> Household:
        """Get the current household."""
        return self._model

    @property
    def today(self) -> Optional[CalendarDate]:
        return self._model.today

    @property
    def loading(self) -> bool:
        return self._model.loading

    @property
    def tick(self) -> int:
        return self._model.tick

    def current_guardian(self) -> Optional[str]:
        return self._model.current_guardian

    # --- Source records ---

    def list_source_records(self) -> List[SourceRecord]:
        """Residents in birth order."""
        return sorted(self._model.sources, key=lambda r: r.birth_order)

    def get_source(self, name: str) -> Optional[SourceRecord]:
        return next((r for r in self._model.sources if r.name == name), None)

    def add_source(self, record: SourceRecord) -> None:
        """Insert or replace a resident by name."""
        self.remove_source(record.name)
        self._model.sources.append(record)

    def remove_source(self, name: str) -> bool:
        """Remove a resident from the household, hidden or not."""
        before = len(self._model.sources) + len(self._model.withdrawn)
        self._model.sources = [r for r in self._model.sources if r.name != name]
        self._model.withdrawn = [r for r in self._model.withdrawn if r.name != name]
        return len(self._model.sources) + len(self._model.withdrawn) != before

    def withdraw_source(self, record: SourceRecord) -> None:
        """
        Hide a resident whose stand-in has taken over.
        Hidden residents keep ageing until they are restored.
        """
        resident = self.get_source(record.name) or record
        self._model.sources = [r for r in self._model.sources if r.name != record.name]
        if self.get_withdrawn(record.name) is None:
            self._model.withdrawn.append(resident)
        self._model.beds.pop(record.name, None)

    def get_withdrawn(self, name: str) -> Optional[SourceRecord]:
        return next((r for r in self._model.withdrawn if r.name == name), None)

    def restore_source(self, record: SourceRecord) -> None:
        """Put a withdrawn resident back, unless it is already present."""
        hidden = self.get_withdrawn(record.name)
        self._model.withdrawn = [r for r in self._model.withdrawn if r.name != record.name]
        if self.get_source(record.name) is None:
            self._model.sources.append(hidden or record)

    def age_to_threshold(self, name: str, threshold: int) -> Optional[SourceRecord]:
        """Bump a resident's age up to ``threshold`` days if younger."""
        record = self.get_source(name)
        if record and record.age < threshold:
            record.age = threshold
        return record

    # --- Derived records ---

    def list_derived_records(self) -> List[DerivedRecord]:
        return list(self._model.derived.values())

    def materialize_derived(self, record: DerivedRecord) -> None:
        self._model.derived[record.record_id] = record

    def remove_derived(self, record_id: str) -> bool:
        return self._model.derived.pop(record_id, None) is not None

    # --- Relationship ledger ---

    def get_relationship(self, name: str) -> Optional[RelationshipMetric]:
        return self._model.relationships.get(name)

    def set_relationship(self, name: str, metric: RelationshipMetric) -> None:
        self._model.relationships[name] = metric

    # --- Placement & clock ---

    def send_to_bed(self, record: SourceRecord, bed_slot: Optional[str]) -> None:
        """Relocate a resident to its bed (None clears the placement)."""
        if bed_slot is None:
            self._model.beds.pop(record.name, None)
        else:
            self._model.beds[record.name] = bed_slot

    def bed_of(self, name: str) -> Optional[str]:
        return self._model.beds.get(name)

    def set_loading(self, loading: bool) -> None:
        self._model.loading = loading

    def set_current_guardian(self, name: Optional[str]) -> None:
        self._model.current_guardian = name

    def advance_tick(self) -> int:
        self._model.tick += 1
        return self._model.tick

    def advance_day(self) -> None:
        """Roll the date over and age every resident, hidden ones included."""
        if self._model.today is not None:
            self._model.today = self._model.today.add_days(1)
        for record in self._model.sources + self._model.withdrawn:
            record.age += 1

    def get_state_snapshot(self) -> dict:
        """Get a serializable snapshot of the household."""
        return self._model.model_dump(mode="json")
