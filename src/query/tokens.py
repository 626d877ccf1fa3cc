"""Numeric and clock token parsers.

Both parsers are total: they return `None` for anything they do not recognize and never raise.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal

_NUMBER = r"\d+(?:\.\d+)?"

_LAKH_RE = re.compile(rf"(?P<number>{_NUMBER})\s*(?:lakhs?|lacs?|l)")
_THOUSAND_RE = re.compile(rf"(?P<number>{_NUMBER})\s*k")
# Signed, leading-dot and exponent forms are accepted for a bare number only.
_PLAIN_RE = re.compile(r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:e[-+]?\d{1,3})?")

_HOUR_RE = re.compile(
    r"(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?\s*(?P<meridiem>am|pm)?",
    flags=re.IGNORECASE,
)


def _scale(number: str, factor: int) -> int:
    scaled = Decimal(number) * factor
    return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def parse_magnitude(token: str | None) -> int | float | None:
    """Parse amounts such as `"1,000"`, `"1k"`, `"1.5 lakh"` or `"2l"`.

    Suffixed values are rounded half-up to an integer. A plain number, including `"-5"`, `".5"`
    and `"1e3"`, is returned as-is (an `int` unless it carries a fractional part).
    """

    value = (token or "").replace(",", "").lower().strip()
    if not value:
        return None

    match = _LAKH_RE.fullmatch(value)
    if match:
        return _scale(match.group("number"), 100_000)

    match = _THOUSAND_RE.fullmatch(value)
    if match:
        return _scale(match.group("number"), 1_000)

    if _PLAIN_RE.fullmatch(value):
        number = Decimal(value)
        if number == number.to_integral_value():
            return int(number)
        return float(number)

    return None


def parse_hour(token: str | None) -> int | None:
    """Convert `"10pm"`, `"10:30 pm"`, `"12am"` or `"22:00"` into an hour in 0..24.

    Without an am/pm marker the hour is taken literally, so callers should only pass text that
    is already known to be a clock time.
    """

    match = _HOUR_RE.fullmatch((token or "").strip())
    if not match:
        return None

    hour = int(match.group("hour"))
    minute = match.group("minute")
    if minute is not None and int(minute) > 59:
        return None

    meridiem = (match.group("meridiem") or "").lower()
    if meridiem:
        if hour > 12:
            return None
        if meridiem == "pm" and hour < 12:
            hour += 12
        elif meridiem == "am" and hour == 12:
            hour = 0

    if hour > 24:
        return None
    return hour
