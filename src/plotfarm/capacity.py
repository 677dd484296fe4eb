"""Capacity string parsing and formatting.

Converts human-readable byte quantities such as ``"1500G"`` or ``"1.5Ki"``
into exact byte counts and back. Decimal prefixes (K = 1000) and binary
prefixes (Ki = 1024) are told apart by the ``i`` marker; units are matched
case-insensitively and a trailing ``B`` is optional.
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Optional

U64_MAX = 2**64 - 1

_PATTERN = re.compile(
    r"^(?P<magnitude>[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?P<unit>[A-Za-z]*)$"
)

_DECIMAL_UNITS = [("EB", 1000**6), ("PB", 1000**5), ("TB", 1000**4),
                  ("GB", 1000**3), ("MB", 1000**2), ("KB", 1000)]
_BINARY_UNITS = [("EiB", 1024**6), ("PiB", 1024**5), ("TiB", 1024**4),
                 ("GiB", 1024**3), ("MiB", 1024**2), ("KiB", 1024)]


def _build_unit_table() -> dict[str, int]:
    table = {"": 1, "b": 1}
    for name, multiplier in _DECIMAL_UNITS + _BINARY_UNITS:
        short = name[:-1].lower()  # "GB" -> "g", "GiB" -> "gi"
        table[short] = multiplier
        table[name.lower()] = multiplier
    return table


_UNITS = _build_unit_table()


class ParseError(ValueError):
    """A capacity string could not be converted to a byte count.

    Attributes:
        value: The offending input
        directory: Storage directory the value belongs to, when known
    """

    def __init__(self, message: str, value=None, directory: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.value = value
        self.directory = directory

    def __str__(self) -> str:
        if self.directory is not None:
            return f"{self.directory}: {self.message}"
        return self.message


class MalformedCapacityError(ParseError):
    """The input does not match the capacity grammar."""


class CapacityOverflowError(ParseError):
    """The byte count does not fit in an unsigned 64-bit integer."""


def parse_capacity(value: str) -> int:
    """Parse a capacity string into an exact byte count.

    Args:
        value: Capacity string, e.g. "1500G", "10GiB", "1.5K" or "4096"

    Returns:
        Number of bytes, rounded to the nearest byte

    Raises:
        MalformedCapacityError: If the string does not match the grammar
        CapacityOverflowError: If the result exceeds the u64 range
    """
    if not isinstance(value, str):
        raise MalformedCapacityError(
            f"Capacity must be a string, got {type(value).__name__}", value
        )

    match = _PATTERN.match(value.strip())
    if not match:
        raise MalformedCapacityError(f"Invalid capacity format: {value!r}", value)

    unit = match.group("unit")
    multiplier = _UNITS.get(unit.lower())
    if multiplier is None:
        raise MalformedCapacityError(
            f"Unknown capacity unit {unit!r} in {value!r}", value
        )

    digits = match.group("magnitude")
    # Product must stay exact before rounding
    with localcontext() as ctx:
        ctx.prec = len(digits) + 25
        try:
            magnitude = Decimal(digits)
        except InvalidOperation:
            raise MalformedCapacityError(f"Invalid capacity format: {value!r}", value)
        product = magnitude * multiplier
        num_bytes = int(product.to_integral_value(rounding=ROUND_HALF_UP))
    if num_bytes > U64_MAX:
        raise CapacityOverflowError(
            f"Capacity {value!r} exceeds the maximum of {U64_MAX} bytes", value
        )
    return num_bytes


def format_capacity(num_bytes: int) -> str:
    """Format a byte count using the largest unit that divides it exactly.

    The output always parses back to the same count, e.g. 1500 * 10**9
    becomes "1500GB" and 1024 becomes "1KiB".
    """
    if num_bytes < 0:
        raise MalformedCapacityError(
            f"Capacity cannot be negative: {num_bytes}", num_bytes
        )
    if num_bytes > U64_MAX:
        raise CapacityOverflowError(
            f"Capacity {num_bytes} exceeds the maximum of {U64_MAX} bytes", num_bytes
        )
    if num_bytes == 0:
        return "0B"

    best_name, best_multiplier = "B", 1
    for name, multiplier in _DECIMAL_UNITS + _BINARY_UNITS:
        if num_bytes % multiplier == 0 and multiplier > best_multiplier:
            best_name, best_multiplier = name, multiplier
    return f"{num_bytes // best_multiplier}{best_name}"


def humanize_capacity(num_bytes: int) -> str:
    """Format a byte count for display (lossy), e.g. "1.36 TiB"."""
    size = float(num_bytes)
    for unit in ["B", "KiB", "MiB", "GiB", "TiB", "PiB"]:
        if abs(size) < 1024.0:
            if unit == "B":
                return f"{int(size)} B"
            return f"{size:.2f} {unit}"
        size /= 1024.0
    return f"{size:.2f} EiB"
