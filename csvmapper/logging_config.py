"""Rich-handler logging preset for scripts that use the mapper."""

import logging

from rich.logging import RichHandler

from csvmapper.exceptions import ConfigurationError

LOG_FORMAT = "%(name)-32s │ %(message)s"


def configure(level: int | str = logging.INFO) -> None:
    """Route log records through a RichHandler at ``level``."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ConfigurationError(f"Unknown log level: {level!r}")
        level = resolved
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        handlers=[RichHandler(rich_tracebacks=True, markup=False)],
        force=True,
    )
