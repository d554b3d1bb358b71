"""
Reconciliation Cache: keeps source records and their stand-ins in step.

Driven once per tick by whichever consumer asks first:
  OBSERVE new derived records → MATCH against eligible sources →
  PROMOTE matches into the correspondence table → SNAPSHOT attributes

Behavioral Contract:
- Idempotent within a tick: a repeat call with the same tick is a no-op.
- At most one correspondence per source key; the first mapping wins.
- Records below the age threshold never appear in the snapshot.
- Nothing here is fatal. Every anomaly is logged and skipped.
"""

import logging
import sqlite3
from typing import Callable, List, Optional

from kinsync.attributes.deriver import AttributeDeriver
from kinsync.household.store import HouseholdStore
from kinsync.identity.matcher import IdentityMatcher
from kinsync.models.config import ConversionConfig
from kinsync.models.records import CorrespondenceEntry, DerivedRecord, SourceRecord
from kinsync.models.relationship import RelationshipMetric
from kinsync.models.snapshot import DerivedAttributeSnapshot
from kinsync.models.state import ConversionState
from kinsync.relationships.store import RelationshipStore

logger = logging.getLogger(__name__)


class ReconciliationCache:
    """The stateful core: correspondence table plus a memoized snapshot."""

    def __init__(
        self,
        household: HouseholdStore,
        relationship_store: RelationshipStore,
        config: Optional[ConversionConfig] = None,
        state: Optional[ConversionState] = None,
        on_corresponded: Optional[Callable[[SourceRecord], None]] = None,
    ):
        self.household = household
        self.relationship_store = relationship_store
        self.config = config or ConversionConfig()
        self.state = state if state is not None else ConversionState()
        self.deriver = AttributeDeriver(self.config)
        self.matcher = IdentityMatcher(self._expected_birthday_key)
        self._on_corresponded = on_corresponded or household.withdraw_source

    # --- Refresh ---

    def refresh_if_stale(self, current_tick: int) -> bool:
        """
        Bring the snapshot up to date for ``current_tick``.
        Returns True if consumers must re-evaluate what they derived from it.
        """
        if self.state.cache_tick == current_tick:
            return False
        self.state.cache_tick = current_tick

        old_total = self.state.total_count
        old_snapshot = self.state.snapshot

        all_records = self.all_source_records()
        eligible = self._eligible(all_records)
        converted = self._detect_conversions(eligible, current_tick)

        self.state.total_count = len(all_records)
        self.state.snapshot = self.deriver.build_snapshot(
            eligible,
            all_records,
            reference_date=self.household.today,
            loading=self.household.loading,
            current_guardian_lookup=self.household.current_guardian,
        )

        return (
            old_total != self.state.total_count
            or self._is_changed(old_snapshot, self.state.snapshot)
            or converted
        )

    def all_source_records(self) -> List[SourceRecord]:
        """Withdrawn records first, then residents not yet converted."""
        records = list(self.state.withdrawn)
        withdrawn_names = {r.name for r in records}
        records.extend(
            r for r in self.household.list_source_records()
            if r.name not in withdrawn_names
        )
        return records

    def _eligible(self, records: List[SourceRecord]) -> List[SourceRecord]:
        return [r for r in records if r.is_eligible(self.config.age_threshold)]

    def _detect_conversions(
        self, eligible: List[SourceRecord], current_tick: int
    ) -> bool:
        """Match newly observed derived records. Returns True if any converted."""
        present = self.household.list_derived_records()
        previously_observed = self.state.observed_derived_ids or set()
        self.state.observed_derived_ids = {d.record_id for d in present}

        known_ids = {e.derived.record_id for e in self.state.correspondences.values()}
        converted = False

        for derived in present:
            if derived.record_id in previously_observed or derived.record_id in known_ids:
                continue
            for source in eligible:
                if not self.matcher.matches(source, derived):
                    continue
                logger.info("Detected stand-in %s for %s", derived.record_id, source.name)
                if self._promote(source, derived, current_tick):
                    converted = True
                break

        return converted

    def _promote(
        self, source: SourceRecord, derived: DerivedRecord, current_tick: int
    ) -> bool:
        existing = self.state.correspondences.get(source.name)
        if existing is not None:
            logger.warning(
                "Correspondence table already contains an entry for %s (%s); "
                "ignoring %s. This is probably a bug.",
                source.name, existing.derived.record_id, derived.record_id,
            )
            return False

        self.state.correspondences[source.name] = CorrespondenceEntry(
            source_name=source.name,
            derived=derived,
            created_tick=current_tick,
        )
        if all(r.name != source.name for r in self.state.withdrawn):
            self.state.withdrawn.append(source)
        self._on_corresponded(source)
        self._restore_relationship(source, derived)

        logger.info("Converted %s", source.name)
        return True

    def _restore_relationship(self, source: SourceRecord, derived: DerivedRecord) -> None:
        """Carry persisted gift data back onto the source's ledger entry."""
        try:
            persisted = self.relationship_store.read(derived.name)
        except (ValueError, sqlite3.Error) as e:
            # ValidationError is a ValueError: corrupt rows land here too.
            logger.warning("Could not load relationship data for %s: %s", derived.name, e)
            return

        if persisted is None:
            logger.debug("No relationship data persisted for %s", derived.name)
            return

        current = self.household.get_relationship(source.name) or RelationshipMetric()
        self.household.set_relationship(
            source.name,
            current.model_copy(update={
                "gifts_this_week": persisted.gifts_this_week,
                "last_gift_date": persisted.last_gift_date,
            }),
        )

    def _expected_birthday_key(self, source: SourceRecord) -> str:
        return self.deriver.derive_birthday(
            source, self.household.today, self.household.loading
        ).birthday_key

    @staticmethod
    def _is_changed(
        old: Optional[List[DerivedAttributeSnapshot]],
        new: Optional[List[DerivedAttributeSnapshot]],
    ) -> bool:
        """Positional, per-record structural comparison."""
        if old is None or new is None:
            return old is not new
        if len(old) != len(new):
            return True
        return any(a != b for a, b in zip(old, new))

    # --- Read surface ---

    def snapshot(self) -> Optional[List[DerivedAttributeSnapshot]]:
        """Read-only copy of the current snapshot."""
        if self.state.snapshot is None:
            return None
        return list(self.state.snapshot)

    def get_record(self, index: int) -> Optional[DerivedAttributeSnapshot]:
        snapshot = self.state.snapshot
        if snapshot is None or index < 0 or index >= len(snapshot):
            return None
        return snapshot[index]

    def is_ready(self, index: int) -> bool:
        return self.get_record(index) is not None

    def get_attribute(self, index: int, field: str) -> Optional[str]:
        """A single snapshot attribute, or None if the record isn't available."""
        record = self.get_record(index)
        if record is None:
            return None
        if field not in DerivedAttributeSnapshot.model_fields:
            raise KeyError(f"Unknown attribute: {field}")
        return getattr(record, field)

    def get_total_count(self) -> int:
        """All source records, including those not yet eligible."""
        return self.state.total_count

    def correspondences(self) -> List[CorrespondenceEntry]:
        return list(self.state.correspondences.values())

    # --- Lookups ---

    def is_counterpart(self, derived: DerivedRecord) -> bool:
        """Whether ``derived`` is a stand-in this cache has paired."""
        return any(
            e.derived.record_id == derived.record_id
            for e in self.state.correspondences.values()
        )

    def birth_order_of(self, name: str) -> int:
        """1-based position among converted records, -1 if not converted."""
        for position, record in enumerate(self.state.withdrawn, start=1):
            if record.name == name:
                return position
        return -1

    def guardian_id_of(self, name: str) -> Optional[str]:
        record = next((r for r in self.state.withdrawn if r.name == name), None)
        return record.guardian_id if record else None

    # --- Reset ---

    def clear(self) -> None:
        """Forget every correspondence and the cached snapshot."""
        self.state.clear()
