"""Identity Matcher: decides whether a derived record stands in for a source record."""

import logging
from typing import Callable

from kinsync.models.records import DerivedRecord, SourceRecord

logger = logging.getLogger(__name__)


class IdentityMatcher:
    """
    Matches on name plus birthday ("season day").

    Two unrelated entities may share a name; the birthday guards against
    pairing them. A name match with a different birthday is reported and
    treated as no match.
    """

    def __init__(self, birthday_key: Callable[[SourceRecord], str]):
        self._birthday_key = birthday_key

    def matches(self, source: SourceRecord, derived: DerivedRecord) -> bool:
        if derived.is_source_category or derived.name != source.name:
            return False

        expected = self._birthday_key(source)
        if derived.composite_key != expected:
            logger.warning(
                "Found a corresponding record for %s with a different birthday. "
                "This might be a bug: %s != %s",
                source.name, derived.composite_key, expected,
            )
            return False

        return True
