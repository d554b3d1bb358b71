"""kinsync data models."""

from kinsync.models.calendar import CalendarDate, CalendarUnderflowError
from kinsync.models.config import ConversionConfig
from kinsync.models.household import Household
from kinsync.models.records import CorrespondenceEntry, DerivedRecord, SourceRecord
from kinsync.models.relationship import RelationshipMetric
from kinsync.models.snapshot import BedSlot, DerivedAttributeSnapshot
from kinsync.models.state import ConversionState

__all__ = [
    "BedSlot",
    "CalendarDate",
    "CalendarUnderflowError",
    "ConversionConfig",
    "ConversionState",
    "CorrespondenceEntry",
    "DerivedAttributeSnapshot",
    "DerivedRecord",
    "Household",
    "RelationshipMetric",
    "SourceRecord",
]
