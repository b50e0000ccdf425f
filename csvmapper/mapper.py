"""Declarative CSV-to-record mapper.

Columns are registered one at a time with fluent helpers and then applied to
every row of a parsed file::

    mapper = (
        CsvMapper(record_factory=Trade, delimiter=";")
        .text("Symbol", "symbol")
        .float("Price", "price")
        .int("Qty", "quantity")
        .enum_text("Side", "side", Side)
    )
    trades = mapper.parse_string(text)
"""

import logging
from pathlib import Path
from typing import Any, Callable, Generic, TypeVar

from csvmapper.config import MapperOptions
from csvmapper.exceptions import DuplicateColumnError
from csvmapper.ingest.column_mapper import (
    ColumnMapping,
    MappingPlan,
    Transform,
    identity,
    normalize_source,
)
from csvmapper.ingest.csv_parser import RowDict, iter_rows
from csvmapper.ingest.enum_lookup import EnumLookup
from csvmapper.ingest.number_parser import floor_number, parse_localized_number
from csvmapper.ingest.reader import read_text, read_text_async

logger = logging.getLogger(__name__)

T = TypeVar("T")

# (parsed_value, original_raw, row) -> result
ValueTransform = Callable[[Any, str | None, RowDict], Any]


class CsvMapper(Generic[T]):
    """Builder that accumulates column mappings and parses text into records.

    Registration mutates the mapper in place and returns it for chaining.
    ``build()`` finalizes the registered columns into a MappingPlan; the
    parse methods call it implicitly whenever columns changed since the last
    build, so registering after a parse only affects later parses.
    """

    def __init__(
        self,
        options: MapperOptions | dict | None = None,
        *,
        record_factory: Callable[..., T] = dict,
        **overrides,
    ):
        self.options = MapperOptions.merged(options, **overrides)
        self.record_factory = record_factory
        self.columns: list[ColumnMapping] = []
        self._sources: set[str] = set()
        self._plan: MappingPlan | None = None

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def column(self, source: str, target: str, transform: Transform | None = None) -> "CsvMapper[T]":
        """Register ``transform(raw, row)`` as the mapping from ``source`` to ``target``.

        Raises DuplicateColumnError if ``source`` (trimmed) is already mapped.
        """
        key = normalize_source(source)
        if key in self._sources:
            raise DuplicateColumnError(source)
        self.columns.append(ColumnMapping(source, target, transform or identity))
        self._sources.add(key)
        self._plan = None
        logger.debug("Registered column %r -> %r", key, target)
        return self

    def text(self, source: str, target: str, transform: Transform | None = None) -> "CsvMapper[T]":
        return self.column(source, target, transform)

    def float(self, source: str, target: str, transform: ValueTransform | None = None) -> "CsvMapper[T]":
        """Register a numeric column.

        The first comma is read as a decimal point. Unparsable cells become
        NaN; ``transform(number, raw, row)`` still runs for them.
        """
        then = transform or identity

        def _convert(raw, row):
            return then(parse_localized_number(raw), raw, row)

        return self.column(source, target, _convert)

    def int(self, source: str, target: str, transform: ValueTransform | None = None) -> "CsvMapper[T]":
        """Register a numeric column whose value is floored (NaN stays NaN)."""
        then = transform or identity

        def _floored(number, raw, row):
            return then(floor_number(number), raw, row)

        return self.float(source, target, _floored)

    def enum_text(self, source: str, target: str, enum, transform: ValueTransform | None = None) -> "CsvMapper[T]":
        """Register a column resolved against the names (keys) of ``enum``.

        ``enum`` may be an Enum class, a mapping or (key, value) pairs. An
        exact key match wins over a case-insensitive one; no match gives None.
        """
        lookup = EnumLookup.of(enum)
        then = transform or identity

        def _resolve(raw, row):
            return then(lookup.by_key(raw), raw, row)

        return self.column(source, target, _resolve)

    def enum_value(self, source: str, target: str, enum, transform: ValueTransform | None = None) -> "CsvMapper[T]":
        """Register a column resolved against the values of ``enum``.

        The trimmed cell is compared as-is first, then lower-cased. The
        candidate values are never lower-cased.
        """
        lookup = EnumLookup.of(enum)
        then = transform or identity

        def _resolve(raw, row):
            return then(lookup.by_value(raw), raw, row)

        return self.column(source, target, _resolve)

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def build(self) -> MappingPlan:
        """Finalize the registered columns into a lookup plan."""
        if self._plan is None:
            self._plan = MappingPlan.from_columns(self.columns)
        return self._plan

    def parse_string(self, text: str) -> list[T]:
        """Parse CSV text into one record per data line."""
        plan = self.build()
        records = [
            self.record_factory(**plan.map_row(row))
            for row in iter_rows(text, self.options.delimiter)
        ]
        logger.debug("Parsed %d record(s) using %d mapped column(s)", len(records), len(self.columns))
        return records

    async def parse_file(self, csv_path: Path | str) -> list[T]:
        """Read ``csv_path`` without blocking the event loop and parse it."""
        text = await read_text_async(csv_path)
        logger.debug("Read %d character(s) from %s", len(text), csv_path)
        return self.parse_string(text)

    def parse_path(self, csv_path: Path | str) -> list[T]:
        """Synchronous counterpart of ``parse_file``."""
        return self.parse_string(read_text(csv_path))

    def fingerprint(self) -> str:
        """Stable text describing the configuration, used to key cached frames.

        Transforms are identified by module and qualified name, so two mappers
        differing only in an anonymous transform are not told apart.
        """
        parts = [repr(self.options.delimiter), _callable_name(self.record_factory)]
        for column in self.columns:
            parts.append(f"{column.key!r}->{column.target!r}:{_callable_name(column.transform)}")
        return "\n".join(parts)


def _callable_name(fn) -> str:
    return f"{getattr(fn, '__module__', '')}.{getattr(fn, '__qualname__', type(fn).__name__)}"
