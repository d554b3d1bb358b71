"""Tests for the bed assignment table."""

import pytest

from kinsync.beds.layout import (
    SLOT_A,
    SLOT_B,
    SLOT_C,
    SLOT_D,
    BedLayoutError,
    assign_bed,
)
from kinsync.models.records import SourceRecord

THRESHOLD = 54


def _household(*members):
    """members: (age, gender_class) tuples in birth order."""
    return [
        SourceRecord(name=f"kid{i}", age=age, birth_order=i, gender_class=cls)
        for i, (age, cls) in enumerate(members)
    ]


class TestAssignBed:
    def test_eligible_and_baby(self):
        records = [
            SourceRecord(name="Al", age=60, birth_order=0, gender_class=0),
            SourceRecord(name="Bo", age=10, birth_order=1, gender_class=1),
        ]
        assert assign_bed(0, records, THRESHOLD) == SLOT_A
        assert assign_bed(1, records, THRESHOLD) is None

    def test_two_eligible_use_second_bed(self):
        records = _household((60, 0), (60, 0))
        assert assign_bed(1, records, THRESHOLD) == SLOT_B

    def test_two_eligible_with_baby(self):
        records = _household((80, 1), (60, 0), (3, 1))
        assert assign_bed(1, records, THRESHOLD) == SLOT_B
        assert assign_bed(2, records, THRESHOLD) is None

    def test_first_two_same_class(self):
        records = _household((90, 0), (80, 0), (70, 1), (60, 1))
        assert [assign_bed(i, records, THRESHOLD) for i in range(4)] == [
            SLOT_A, SLOT_C, SLOT_B, SLOT_D,
        ]

    def test_first_two_differ_last_two_same(self):
        records = _household((90, 0), (80, 1), (70, 1), (60, 1))
        assert [assign_bed(i, records, THRESHOLD) for i in range(4)] == [
            SLOT_A, SLOT_B, SLOT_D, SLOT_C,
        ]

    def test_first_two_differ_last_two_differ(self):
        records = _household((90, 0), (80, 1), (70, 0), (60, 1))
        assert [assign_bed(i, records, THRESHOLD) for i in range(4)] == [
            SLOT_A, SLOT_B, SLOT_C, SLOT_D,
        ]

    def test_three_records_third_joins_matching_elder(self):
        assert assign_bed(2, _household((90, 0), (80, 1), (70, 0)), THRESHOLD) == SLOT_C
        assert assign_bed(2, _household((90, 0), (80, 1), (70, 1)), THRESHOLD) == SLOT_D

    def test_fifth_slot_fails_loudly(self):
        records = _household((90, 0), (80, 0), (70, 1), (60, 1), (55, 0))
        with pytest.raises(BedLayoutError):
            assign_bed(4, records, THRESHOLD)

    def test_none_iff_birth_number_exceeds_eligible(self):
        records = _household((90, 0), (80, 1), (20, 1), (5, 0))
        for index in range(len(records)):
            slot = assign_bed(index, records, THRESHOLD)
            assert (slot is None) == (index + 1 > 2)

    def test_deterministic(self):
        records = _household((90, 0), (80, 1), (70, 1), (60, 1))
        first = [assign_bed(i, records, THRESHOLD) for i in range(4)]
        second = [assign_bed(i, records, THRESHOLD) for i in range(4)]
        assert first == second

    def test_render(self):
        assert SLOT_A.render("FarmHouse") == "FarmHouse 23 5"
