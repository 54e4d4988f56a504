"""Lenient query-string parsing.

List and stats endpoints never reject a request because of a bad query
parameter: a value that does not parse is treated as if it was not sent,
and the service-level default applies instead.
"""

import re
from datetime import datetime

from telemetry.schemas.event import parse_rfc3339

# Optional sign and ASCII digits only, no whitespace or digit separators
INTEGER = re.compile(r"[+-]?[0-9]+")

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def parse_instant(value: str | None) -> datetime | None:
    """RFC3339 timestamp with an explicit offset, or None"""
    if not value:
        return None
    try:
        return parse_rfc3339(value)
    except ValueError:
        return None


def parse_int64(value: str | None) -> int | None:
    """Base-10 signed 64-bit integer, or None"""
    if not value or INTEGER.fullmatch(value) is None:
        return None
    parsed = int(value)
    if not INT64_MIN <= parsed <= INT64_MAX:
        return None
    return parsed


def parse_int(value: str | None, minimum: int) -> int | None:
    """Integer no smaller than ``minimum``, or None"""
    parsed = parse_int64(value)
    if parsed is None or parsed < minimum:
        return None
    return parsed
