"""
Lifecycle Controller: decides when correspondences live and die.

Session boundaries:
  day start  → unconverted eligible residents are put to bed
  teardown   → gift data persisted, stand-ins removed, residents restored, full reset
  reset      → residents restored, in-memory state dropped; persisted data untouched
"""

import logging
import sqlite3
from typing import List

from kinsync.beds.layout import BedLayoutError, assign_bed
from kinsync.reconciler.cache import ReconciliationCache

logger = logging.getLogger(__name__)


class LifecycleController:
    """Applies session-boundary events to a Reconciliation Cache."""

    def __init__(self, cache: ReconciliationCache):
        self.cache = cache
        self.household = cache.household
        self.relationship_store = cache.relationship_store
        self.config = cache.config

    def on_session_teardown(self) -> List[str]:
        """
        Persist gift data for every stand-in, hand residents back to the
        household and reset. Clearing everything is a simplification: the
        next refresh rebuilds from whatever the household holds.

        Returns the names whose relationship data was persisted.
        """
        persisted = []
        for entry in self.cache.correspondences():
            self.household.remove_derived(entry.derived.record_id)

            metric = self.household.get_relationship(entry.derived.name)
            # No gift date means the ledger entry was never touched as a stand-in.
            if metric is None or metric.last_gift_date is None:
                continue
            try:
                self.relationship_store.write(entry.derived.name, metric)
                persisted.append(entry.derived.name)
            except sqlite3.Error as e:
                logger.warning(
                    "Could not persist relationship data for %s: %s",
                    entry.derived.name, e,
                )

        for record in self.cache.state.withdrawn:
            self.household.restore_source(record)

        self.cache.clear()
        logger.info("Session teardown: persisted %d relationship record(s)", len(persisted))
        return persisted

    def on_session_reset(self) -> None:
        """
        Drop all in-memory state unconditionally. Withdrawn residents go back
        to the household first; stand-ins still present are matched again on
        the next refresh. Nothing is persisted.
        """
        for record in self.cache.state.withdrawn:
            self.household.restore_source(record)
        self.cache.clear()
        logger.info("Session reset: conversion state cleared")

    def on_daily_boundary(self) -> List[str]:
        """
        Put every eligible, unconverted resident to bed so it is out of the
        way until its stand-in materializes. Returns the relocated names.
        """
        records = self.cache.all_source_records()
        eligible = [r for r in records if r.is_eligible(self.config.age_threshold)]

        relocated = []
        for index, record in enumerate(eligible):
            if record.name in self.cache.state.correspondences:
                continue
            try:
                slot = assign_bed(index, records, self.config.age_threshold)
            except BedLayoutError as e:
                logger.warning("Leaving %s where it is: %s", record.name, e)
                continue
            bed = slot.render(self.config.home_location) if slot else None
            self.household.send_to_bed(record, bed)
            relocated.append(record.name)
            logger.info("Moved %s to bed %s", record.name, bed)

        return relocated
