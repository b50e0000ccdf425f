"""Column mappings and the finalized lookup used to apply them to rows."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from csvmapper.exceptions import DuplicateColumnError
from csvmapper.ingest.csv_parser import RowDict

logger = logging.getLogger(__name__)

Transform = Callable[[str | None, RowDict], Any]


def identity(value, *_):
    return value


def normalize_source(source: str) -> str:
    """Source names are compared after trimming surrounding whitespace."""
    return source.strip()


@dataclass(frozen=True)
class ColumnMapping:
    """Maps one source column to one target field through ``transform``."""
    source: str
    target: str
    transform: Transform = identity

    @property
    def key(self) -> str:
        return normalize_source(self.source)

    def apply(self, raw: str | None, row: RowDict) -> Any:
        return self.transform(raw, row)


@dataclass(frozen=True)
class MappingPlan:
    """Read-only source-name -> ColumnMapping lookup built from registered columns."""
    by_source: dict[str, ColumnMapping] = field(default_factory=dict)

    @classmethod
    def from_columns(cls, columns: list[ColumnMapping]) -> "MappingPlan":
        by_source: dict[str, ColumnMapping] = {}
        for column in columns:
            if column.key in by_source:
                raise DuplicateColumnError(column.source)
            by_source[column.key] = column
        logger.debug("Built mapping plan for %d column(s)", len(by_source))
        return cls(by_source)

    def lookup(self, field_name: str) -> ColumnMapping | None:
        return self.by_source.get(normalize_source(field_name))

    def map_row(self, row: RowDict) -> dict[str, Any]:
        """Map a raw row dict to target fields.

        Fields are visited in header order; unmapped fields are dropped and a
        later field mapped to the same target overwrites an earlier one.
        """
        fields: dict[str, Any] = {}
        for name, raw in row.items():
            column = self.lookup(name)
            if column is None:
                continue
            fields[column.target] = column.apply(raw, row)
        return fields
