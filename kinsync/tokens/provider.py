"""
Token Provider: the template-facing read surface.

Tokens are named ``<Ordinal><Noun><Field>`` (e.g. ``FirstChildName``,
``ThirdChildBirthday``) plus ``NumberTotal<Nouns>``. A token returns
None while its record isn't available, so templates depending on it are
simply not applied.
"""

from typing import Callable, Dict, List, Optional

from kinsync.models.config import ConversionConfig
from kinsync.reconciler.cache import ReconciliationCache

# Stopping at four: the bed layout holds four.
ORDINALS = ("First", "Second", "Third", "Fourth")

TOKEN_FIELDS = {
    "Name": "name",
    "Birthday": "birthday",
    "Bed": "bed_slot",
    "Gender": "gender_label",
    "Parent": "guardian_name",
}


class Token:
    """One registered token: a context refresher plus ready/value readers."""

    def __init__(
        self,
        name: str,
        update_context: Callable[[], bool],
        is_ready: Callable[[], bool],
        get_value: Callable[[], Optional[str]],
    ):
        self.name = name
        self.update_context = update_context
        self.is_ready = is_ready
        self.get_value = get_value

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "ready": self.is_ready(),
            "value": self.get_value(),
        }


class TokenProvider:
    """Registers and serves tokens backed by a Reconciliation Cache."""

    def __init__(
        self,
        cache: ReconciliationCache,
        tick_source: Callable[[], int],
        config: Optional[ConversionConfig] = None,
    ):
        self.cache = cache
        self.tick_source = tick_source
        self.config = config or cache.config
        self._tokens: Dict[str, Token] = {}
        self._register_tokens()

    def _register_tokens(self) -> None:
        noun = self.config.token_noun
        self._add(
            f"NumberTotal{self.config.token_noun_plural}",
            is_ready=lambda: self.cache.state.snapshot is not None,
            get_value=lambda: str(self.cache.get_total_count()),
        )
        for index, ordinal in enumerate(ORDINALS):
            for suffix, field in TOKEN_FIELDS.items():
                self._add_record_token(f"{ordinal}{noun}{suffix}", index, field)

    def _add(
        self,
        name: str,
        is_ready: Callable[[], bool],
        get_value: Callable[[], Optional[str]],
    ) -> None:
        self._tokens[name] = Token(
            name=name,
            update_context=self.update_context,
            is_ready=is_ready,
            get_value=get_value,
        )

    def _add_record_token(self, name: str, index: int, field: str) -> None:
        self._add(
            name,
            is_ready=lambda: self.cache.is_ready(index),
            get_value=lambda: self.cache.get_attribute(index, field),
        )

    def update_context(self) -> bool:
        """Refresh the cache for the current tick; True if tokens changed."""
        return self.cache.refresh_if_stale(self.tick_source())

    @property
    def names(self) -> List[str]:
        return list(self._tokens)

    def get(self, name: str) -> Optional[Token]:
        return self._tokens.get(name)

    def read(self, name: str) -> Optional[str]:
        """Refresh if stale, then read a token's value."""
        token = self._tokens.get(name)
        if token is None:
            raise KeyError(f"Unknown token: {name}")
        token.update_context()
        return token.get_value() if token.is_ready() else None

    def read_all(self) -> Dict[str, Optional[str]]:
        self.update_context()
        return {
            name: token.get_value() if token.is_ready() else None
            for name, token in self._tokens.items()
        }
