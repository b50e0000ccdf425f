"""Ordered key/value tables used to resolve enumeration-valued columns."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from csvmapper.ingest.number_parser import parse_number


@dataclass(frozen=True)
class EnumEntry:
    """One row of an enum table.

    ``value`` is what raw cells are compared against in value lookups and
    ``resolved`` is what a successful lookup returns. They differ only for
    ``enum.Enum`` classes, where the member is returned for its value.
    """
    key: str
    value: Any
    resolved: Any


@dataclass(frozen=True)
class EnumLookup:
    """Ordered (key, value) pairs with the two-pass key and value lookups."""
    entries: tuple[EnumEntry, ...]

    @classmethod
    def of(cls, source) -> "EnumLookup":
        """Build a lookup from an Enum class, a mapping or (key, value) pairs."""
        if isinstance(source, EnumLookup):
            return source
        if isinstance(source, type) and issubclass(source, Enum):
            return cls(tuple(
                EnumEntry(name, member.value, member)
                for name, member in source.__members__.items()
            ))
        if isinstance(source, Mapping):
            pairs: Iterable = source.items()
        else:
            pairs = source
        return cls(tuple(EnumEntry(str(key), value, value) for key, value in pairs))

    def by_key(self, raw: str | None) -> Any:
        """Resolve ``raw`` against the keys: exact first, then case-insensitive."""
        if raw is None:
            return None
        text = raw.strip()
        entry = self._find(lambda e: e.key == text)
        if entry is None:
            lowered = text.lower()
            entry = self._find(lambda e: e.key.lower() == lowered)
        return entry.resolved if entry is not None else None

    def by_value(self, raw: str | None) -> Any:
        """Resolve ``raw`` against the values: exact first, then lower-cased input.

        Only the input is lower-cased in the second pass, so a candidate value
        containing upper-case letters can only ever match exactly.
        """
        if raw is None:
            return None
        text = raw.strip()
        entry = self._find(lambda e: _loosely_equal(e.value, text))
        if entry is None:
            lowered = text.lower()
            entry = self._find(lambda e: _loosely_equal(e.value, lowered))
        return entry.resolved if entry is not None else None

    def _find(self, predicate) -> EnumEntry | None:
        for entry in self.entries:
            if predicate(entry):
                return entry
        return None


def _loosely_equal(value: Any, text: str) -> bool:
    """Compare an enum value with cell text; numbers compare numerically."""
    if value is None:
        return False
    if isinstance(value, str):
        return value == text
    if isinstance(value, (bool, int, float)):
        return parse_number(text) == float(value)
    return str(value) == text
