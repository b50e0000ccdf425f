"""Polars frames from mapped records, with an mtime-checked parquet cache."""

import dataclasses
import logging
from enum import Enum
from pathlib import Path

import polars as pl

from csvmapper.config import CacheConfig

logger = logging.getLogger(__name__)


def _record_to_dict(record) -> dict:
    if isinstance(record, dict):
        data = record
    elif dataclasses.is_dataclass(record):
        data = dataclasses.asdict(record)
    elif hasattr(record, "_asdict"):
        data = record._asdict()
    else:
        data = vars(record)
    return {k: v.value if isinstance(v, Enum) else v for k, v in data.items()}


def to_frame(records: list) -> pl.DataFrame:
    """Convert mapped records (dicts, dataclasses, named tuples) to a DataFrame.

    The schema is inferred from every row: an ``int`` column that turns NaN
    anywhere becomes Float64 rather than failing on the late value.
    """
    if not records:
        return pl.DataFrame()
    return pl.DataFrame([_record_to_dict(r) for r in records], infer_schema_length=None)


def is_cache_fresh(cache_path: Path, csv_path: Path) -> bool:
    """A cached frame is usable while it is at least as new as its CSV."""
    try:
        cached_at = cache_path.stat().st_mtime
    except FileNotFoundError:
        return False
    return not csv_path.exists() or csv_path.stat().st_mtime <= cached_at


def cached_frame(mapper, csv_path: Path | str, config: CacheConfig | None = None) -> pl.DataFrame:
    """Parse ``csv_path`` with ``mapper`` into a DataFrame, reusing the parquet cache.

    Each (resolved path, mapper configuration) pair gets its own cache file,
    which is rebuilt whenever the CSV is newer than it.
    """
    if config is None:
        config = CacheConfig()
    csv_path = Path(csv_path)
    cache_path = config.frame_cache_path(csv_path, mapper.fingerprint())
    if is_cache_fresh(cache_path, csv_path):
        logger.debug("Using cached frame %s", cache_path)
        return pl.read_parquet(cache_path)

    df = to_frame(mapper.parse_path(csv_path))
    cache_path.parent.mkdir(parents=True, exist_ok=True)
    df.write_parquet(cache_path)
    logger.info("Cached %d row(s) from %s to %s", len(df), csv_path.name, cache_path.name)
    return df
