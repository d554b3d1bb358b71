"""Tests for the Lifecycle Controller."""

from kinsync.household.store import HouseholdStore
from kinsync.lifecycle.controller import LifecycleController
from kinsync.models.calendar import CalendarDate
from kinsync.models.config import ConversionConfig
from kinsync.models.records import DerivedRecord, SourceRecord
from kinsync.models.relationship import RelationshipMetric
from kinsync.reconciler.cache import ReconciliationCache
from kinsync.relationships.store import RelationshipStore

TODAY = CalendarDate(day=10, season="spring", year=4)


def _stand_in(source: SourceRecord) -> DerivedRecord:
    birthday = TODAY.add_days(-source.age)
    return DerivedRecord(
        name=source.name,
        birthday_season=birthday.season,
        birthday_day=birthday.day,
    )


class TestLifecycleController:
    def setup_method(self):
        self.household = HouseholdStore(today=TODAY, current_guardian="Abigail")
        self.relationships = RelationshipStore(db_path=":memory:")
        self.cache = ReconciliationCache(
            household=self.household,
            relationship_store=self.relationships,
            config=ConversionConfig(),
        )
        self.lifecycle = LifecycleController(self.cache)

        self.al = SourceRecord(name="Al", age=120, birth_order=0, gender_class=0)
        self.cy = SourceRecord(name="Cy", age=70, birth_order=1, gender_class=1)
        self.bo = SourceRecord(name="Bo", age=10, birth_order=2, gender_class=1)
        for record in (self.al, self.cy, self.bo):
            self.household.add_source(record)

    def _convert_al(self) -> DerivedRecord:
        derived = _stand_in(self.al)
        self.household.materialize_derived(derived)
        self.cache.refresh_if_stale(1)
        return derived

    def test_teardown_persists_gift_data(self):
        derived = self._convert_al()
        self.household.set_relationship(
            "Al", RelationshipMetric(points=500, gifts_this_week=1, last_gift_date="9 spring 4")
        )

        persisted = self.lifecycle.on_session_teardown()

        assert persisted == ["Al"]
        stored = self.relationships.read("Al")
        assert stored.gifts_this_week == 1
        assert stored.last_gift_date == "9 spring 4"
        assert self.household.remove_derived(derived.record_id) is False

    def test_teardown_restores_and_resets(self):
        self._convert_al()
        assert self.household.get_source("Al") is None

        self.lifecycle.on_session_teardown()

        assert self.household.get_source("Al") is not None
        assert self.household.list_derived_records() == []
        assert self.cache.correspondences() == []
        assert self.cache.snapshot() is None
        assert self.cache.state.withdrawn == []

    def test_teardown_without_gift_date_persists_nothing(self):
        self._convert_al()
        self.household.set_relationship("Al", RelationshipMetric(points=40))

        assert self.lifecycle.on_session_teardown() == []
        assert self.relationships.count() == 0

    def test_gift_data_survives_a_session(self):
        self._convert_al()
        self.household.set_relationship(
            "Al", RelationshipMetric(points=500, gifts_this_week=2, last_gift_date="9 spring 4")
        )
        self.lifecycle.on_session_teardown()

        # Next morning the ledger entry has been reset by the host
        self.household.set_relationship("Al", RelationshipMetric(points=500))
        self.household.materialize_derived(_stand_in(self.al))
        self.cache.refresh_if_stale(2)

        restored = self.household.get_relationship("Al")
        assert restored.gifts_this_week == 2
        assert restored.last_gift_date == "9 spring 4"

    def test_session_reset_keeps_persisted_data(self):
        self._convert_al()
        self.household.set_relationship(
            "Al", RelationshipMetric(points=1, last_gift_date="1 spring 4")
        )
        self.lifecycle.on_session_teardown()
        self._convert_al()

        self.lifecycle.on_session_reset()

        assert self.cache.correspondences() == []
        assert self.cache.state.cache_tick is None
        assert self.relationships.count() == 1

    def test_daily_boundary_beds_unconverted(self):
        relocated = self.lifecycle.on_daily_boundary()

        assert relocated == ["Al", "Cy"]
        assert self.household.bed_of("Al") == "FarmHouse 23 5"
        assert self.household.bed_of("Cy") == "FarmHouse 27 5"
        assert self.household.bed_of("Bo") is None

    def test_daily_boundary_skips_converted(self):
        self._convert_al()
        assert self.lifecycle.on_daily_boundary() == ["Cy"]

    def test_session_reset_restores_withdrawn(self):
        derived = self._convert_al()
        assert self.household.get_source("Al") is None

        self.lifecycle.on_session_reset()

        assert self.household.get_source("Al") is not None
        assert self.cache.state.withdrawn == []

        # The stand-in is still home, so it pairs again on the next refresh
        self.cache.refresh_if_stale(2)
        assert self.cache.get_total_count() == 3
        assert [e.derived.record_id for e in self.cache.correspondences()] == [derived.record_id]

    def test_reconverts_after_days_withdrawn(self):
        first = self._convert_al()
        self.household.advance_day()
        self.household.advance_day()
        self.lifecycle.on_session_teardown()

        restored = self.household.get_source("Al")
        assert restored.age == 122

        # The host brings back a stand-in with the same birthday as before
        stand_in = DerivedRecord(
            name="Al",
            birthday_season=first.birthday_season,
            birthday_day=first.birthday_day,
        )
        self.household.materialize_derived(stand_in)

        assert self.cache.refresh_if_stale(5) is True
        assert [e.source_name for e in self.cache.correspondences()] == ["Al"]
