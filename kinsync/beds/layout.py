"""
Bed Assignment: maps an eligible record's birth order to a bed slot.

The home has two double beds. Slots A/C share the first bed and B/D the
second; siblings of the same class are paired where the table allows.

Behavioral Contract:
- Pure: the same (index, records) always yields the same slot.
- Returns None when the record's birth number exceeds the eligible count.
- The table covers exactly four slots; a fifth raises BedLayoutError.
"""

from typing import List, Optional, Sequence

from kinsync.models.records import SourceRecord
from kinsync.models.snapshot import BedSlot

SLOT_A = BedSlot(label="A", x=23, y=5)
SLOT_B = BedSlot(label="B", x=27, y=5)
SLOT_C = BedSlot(label="C", x=22, y=5)
SLOT_D = BedSlot(label="D", x=26, y=5)

SLOTS: List[BedSlot] = [SLOT_A, SLOT_B, SLOT_C, SLOT_D]
MAX_BIRTH_NUMBER = len(SLOTS)


class BedLayoutError(ValueError):
    """Raised when a record needs a slot the fixed layout does not have."""
    pass


def assign_bed(
    index: int,
    records: Sequence[SourceRecord],
    age_threshold: int,
) -> Optional[BedSlot]:
    """
    Pick the bed slot for the eligible record at ``index``.

    ``records`` is the full ordered household, eligible or not.
    """
    birth_number = index + 1

    males = 0
    females = 0
    not_eligible = 0
    for record in records:
        if record.is_eligible(age_threshold):
            if record.gender_class == 0:
                males += 1
            else:
                females += 1
        else:
            not_eligible += 1

    if len(records) - not_eligible < birth_number:
        return None

    if birth_number == 1:
        return SLOT_A

    if birth_number > MAX_BIRTH_NUMBER:
        raise BedLayoutError(
            f"No bed slot for birth number {birth_number}; "
            f"layout holds {MAX_BIRTH_NUMBER}"
        )

    if males + females <= 2:
        return SLOT_B

    first, second, third = (r.gender_class for r in records[:3])
    if first == second:
        return {2: SLOT_C, 3: SLOT_B, 4: SLOT_D}[birth_number]

    if birth_number == 2:
        return SLOT_B

    if len(records) < 4:
        # Third sibling joins whichever elder shares its class.
        return SLOT_C if third == first else SLOT_D

    fourth = records[3].gender_class
    if third == fourth:
        return SLOT_D if birth_number == 3 else SLOT_C
    return SLOT_C if birth_number == 3 else SLOT_D
