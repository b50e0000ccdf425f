"""Configuration dataclasses for the CSV mapper."""

import hashlib
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

from csvmapper.exceptions import ConfigurationError


@dataclass(frozen=True)
class MapperOptions:
    """Parse options for a single mapper."""
    delimiter: str = "\t"

    @classmethod
    def merged(cls, base: "MapperOptions | Mapping | None" = None, **overrides) -> "MapperOptions":
        """Merge partial overrides over ``base`` (or the defaults).

        ``base`` may itself be a partial mapping such as ``{"delimiter": ";"}``.
        """
        if isinstance(base, Mapping):
            overrides = {**base, **overrides}
            base = None
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigurationError(f"Unknown mapper option(s): {', '.join(unknown)}")
        options = replace(base or cls(), **overrides)
        if not isinstance(options.delimiter, str):
            raise ConfigurationError(f"Delimiter must be a string, got {options.delimiter!r}")
        return options


@dataclass
class CacheConfig:
    """Where parsed frames are cached as parquet."""
    project_root: Path = field(default_factory=Path.cwd)
    cache_dir: Path = field(default=None)

    def __post_init__(self):
        if self.cache_dir is None:
            self.cache_dir = self.project_root / "cache"
        self.cache_dir = Path(self.cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    def cache_path(self, filename: str) -> Path:
        return self.cache_dir / filename

    def frame_cache_path(self, csv_path: Path, fingerprint: str = "") -> Path:
        """Parquet file caching the frame parsed from ``csv_path``.

        The name is keyed on the resolved source path and on ``fingerprint``
        (the mapper configuration), so neither same-named files in other
        directories nor differently configured mappers share a cache file.
        """
        csv_path = Path(csv_path)
        digest = hashlib.sha1(f"{csv_path.resolve()}\0{fingerprint}".encode("utf-8")).hexdigest()
        return self.cache_path(f"{csv_path.stem}-{digest[:16]}.parquet")
