"""Parse raw numeric cells such as '3,14' or ' 1e3 ' into floats.

Unparsable input never raises; it yields NaN so bad cells show up in the
output instead of aborting the parse.
"""

import math
import re

NAN = float("nan")

_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$", re.ASCII)
_INFINITY_RE = re.compile(r"^([+-]?)Infinity$")
_RADIX_RE = re.compile(r"^0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$")

_RADIX_BASES = {"x": 16, "o": 8, "b": 2}


def localize_decimal(raw: str) -> str:
    """Replace the first comma with a period ('3,14' -> '3.14')."""
    return raw.replace(",", ".", 1)


def parse_number(s: str | None) -> float:
    """Parse a numeric literal, returning NaN when it is not one.

    Surrounding whitespace is ignored and a blank string counts as zero.
    Besides plain decimals this accepts exponents, signed ``Infinity`` and
    ``0x``/``0o``/``0b`` integer literals.
    """
    if s is None:
        return NAN
    s = s.strip()
    if not s:
        return 0.0
    if _DECIMAL_RE.match(s):
        return float(s)
    m = _INFINITY_RE.match(s)
    if m:
        return -math.inf if m.group(1) == "-" else math.inf
    m = _RADIX_RE.match(s)
    if m:
        digits = m.group(1)
        return float(int(digits[1:], _RADIX_BASES[digits[0].lower()]))
    return NAN


def parse_localized_number(raw: str | None) -> float:
    """Parse a cell that may use a comma as decimal separator."""
    if raw is None:
        return NAN
    return parse_number(localize_decimal(raw))


def floor_number(value: float) -> int | float:
    """Floor finite values to int; NaN and infinities pass through."""
    if math.isnan(value) or math.isinf(value):
        return value
    return math.floor(value)
