"""Read CSV files into strings for the mapper."""

import asyncio
from pathlib import Path


def read_text(csv_path: Path | str) -> str:
    """Read a whole file as UTF-8 without translating line endings.

    Undecodable bytes are replaced rather than raising. OSErrors propagate.
    """
    with open(csv_path, "r", encoding="utf-8", errors="replace", newline="") as f:
        return f.read()


async def read_text_async(csv_path: Path | str) -> str:
    """Read a file in a worker thread so the event loop is not blocked."""
    return await asyncio.to_thread(read_text, csv_path)
