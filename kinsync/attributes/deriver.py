"""
Attribute Deriver: computes display attributes for eligible source records.

Birthday note: while the host is in its load-transition window the age
counter has already advanced but the reference date has not rolled over,
so one extra day is subtracted. This asymmetry is a known source of
off-by-one surprises; keep it exactly as is.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence

from kinsync.beds.layout import BedLayoutError, assign_bed
from kinsync.models.calendar import CalendarDate, CalendarUnderflowError
from kinsync.models.config import ConversionConfig
from kinsync.models.records import SourceRecord
from kinsync.models.snapshot import DerivedAttributeSnapshot

logger = logging.getLogger(__name__)

GENDER_LABELS = {0: "male", 1: "female"}


class AttributeDeriver:
    """Derives birthday, guardian, gender label and bed slot per record."""

    def __init__(self, config: Optional[ConversionConfig] = None):
        self.config = config or ConversionConfig()

    def derive_birthday(
        self,
        source: SourceRecord,
        reference_date: Optional[CalendarDate],
        loading: bool = False,
    ) -> CalendarDate:
        """
        ``reference_date - age`` days, one more while loading.
        Falls back to the epoch when there is no date or it would underflow.
        """
        if reference_date is None:
            return CalendarDate.epoch()

        offset = -source.age - 1 if loading else -source.age
        try:
            return reference_date.add_days(offset)
        except CalendarUnderflowError:
            logger.debug("Birthday of %s underflows the calendar", source.name)
            return CalendarDate.epoch()

    def derive_guardian(
        self,
        source: SourceRecord,
        overrides: Optional[Dict[str, str]] = None,
        current_guardian_lookup: Optional[Callable[[], Optional[str]]] = None,
    ) -> Optional[str]:
        """Explicit override first, then whoever the caller says is current."""
        if overrides is None:
            overrides = self.config.guardian_overrides
        if source.name in overrides:
            return overrides[source.name]
        if current_guardian_lookup is None:
            return None
        return current_guardian_lookup()

    def derive_gender_label(self, source: SourceRecord) -> str:
        return GENDER_LABELS[source.gender_class]

    def derive_bed(
        self, index: int, all_records: Sequence[SourceRecord]
    ) -> Optional[str]:
        try:
            slot = assign_bed(index, all_records, self.config.age_threshold)
        except BedLayoutError as e:
            logger.warning("Skipping bed slot for record %d: %s", index, e)
            return None
        return slot.render(self.config.home_location) if slot else None

    def build_snapshot(
        self,
        eligible: Sequence[SourceRecord],
        all_records: Sequence[SourceRecord],
        reference_date: Optional[CalendarDate],
        loading: bool = False,
        current_guardian_lookup: Optional[Callable[[], Optional[str]]] = None,
    ) -> List[DerivedAttributeSnapshot]:
        """One snapshot entry per eligible record, in order."""
        return [
            DerivedAttributeSnapshot(
                name=source.name,
                gender_label=self.derive_gender_label(source),
                birthday=self.derive_birthday(source, reference_date, loading).birthday_key,
                bed_slot=self.derive_bed(i, all_records),
                guardian_name=self.derive_guardian(
                    source, current_guardian_lookup=current_guardian_lookup
                ),
            )
            for i, source in enumerate(eligible)
        ]
