"""Schedule rewriting for stand-ins whose day ends at "bed"."""

import logging
from typing import Optional

from kinsync.models.config import ConversionConfig
from kinsync.models.records import DerivedRecord
from kinsync.reconciler.cache import ReconciliationCache

logger = logging.getLogger(__name__)


class ScheduleRewriter:
    """
    A stand-in's "bed" is never at home; its last stop is the configured
    off-site location instead.
    """

    def __init__(self, cache: ReconciliationCache, config: Optional[ConversionConfig] = None):
        self.cache = cache
        self.config = config or cache.config

    def rewrite(self, derived: DerivedRecord, raw_schedule: str) -> str:
        if not self.cache.is_counterpart(derived):
            logger.warning("Not rewriting schedule of unpaired record %s", derived.name)
            return raw_schedule

        if raw_schedule.endswith("bed"):
            return raw_schedule.replace("bed", self.config.schedule_bed_stop)
        return raw_schedule
