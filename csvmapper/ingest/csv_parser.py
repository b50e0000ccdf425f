"""Delimiter-based splitting of CSV text into row dicts.

There is no quoting support: every occurrence of the delimiter separates two
cells. Lines are split on '\\n' only, so CRLF input keeps its '\\r' in the last
header name and the last cell of every line.
"""

from typing import Iterator

RowDict = dict[str, str | None]


def split_fields(line: str, delimiter: str) -> list[str]:
    """Split one line on ``delimiter``; an empty delimiter yields single characters."""
    if delimiter == "":
        return list(line)
    return line.split(delimiter)


def split_lines(text: str) -> tuple[str, list[str]]:
    """Split text into (header_line, data_lines)."""
    header, *lines = text.split("\n")
    return header, lines


def parse_header(header: str, delimiter: str) -> list[str]:
    """Split the header line into trimmed column names, in position order."""
    return [name.strip() for name in split_fields(header, delimiter)]


def zip_row(header_names: list[str], cells: list[str]) -> RowDict:
    """Key cells by header position.

    Missing cells become None and cells past the last header are dropped. A
    repeated header name keeps its first position but the later cell's value.
    """
    row: RowDict = {}
    for index, name in enumerate(header_names):
        row[name] = cells[index] if index < len(cells) else None
    return row


def iter_rows(text: str, delimiter: str) -> Iterator[RowDict]:
    """Yield one RowDict per data line, in line order.

    A trailing newline yields a final row for the empty last line.
    """
    header, lines = split_lines(text)
    header_names = parse_header(header, delimiter)
    for line in lines:
        yield zip_row(header_names, split_fields(line, delimiter))


def parse_rows(text: str, delimiter: str = "\t") -> list[RowDict]:
    """Parse CSV text into a list of row dicts."""
    return list(iter_rows(text, delimiter))
