"""Calendar arithmetic and BCD helpers used by the CMOS real-time clock."""

from __future__ import annotations

from dataclasses import dataclass, replace

__all__ = ["RtcDate", "muldiv64", "days_in_month", "next_second", "to_bcd", "from_bcd"]

_MASK32 = 0xFFFF_FFFF
_MASK64 = 0xFFFF_FFFF_FFFF_FFFF

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


@dataclass(frozen=True)
class RtcDate:
    """A wall-clock date as held by the RTC.

    ``month`` counts from 0 (January) to 11 (December); ``year`` is the
    number of years since 1900.
    """

    second: int = 0
    minute: int = 0
    hour: int = 0
    day: int = 1
    month: int = 0
    year: int = 0


def muldiv64(a: int, b: int, c: int) -> int:
    """Return ``(a * b) // c`` for a 64-bit ``a`` and 32-bit ``b`` and ``c``.

    The intermediate product is exact; the result wraps to 64 bits.
    """
    a &= _MASK64
    b &= _MASK32
    c &= _MASK32
    if c == 0:
        raise ZeroDivisionError("muldiv64 divisor is zero")
    return ((a * b) // c) & _MASK64


def _is_leap(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(month: int, year: int) -> int:
    """Number of days in ``month`` (0-11) of the full calendar ``year``.

    Months outside 0-11 are treated as having 31 days.
    """
    if not 0 <= month < 12:
        return 31
    days = _DAYS_IN_MONTH[month]
    if month == 1 and _is_leap(year):
        days += 1
    return days


def next_second(date: RtcDate) -> RtcDate:
    """Return ``date`` advanced by one second, carrying into larger fields."""
    second, minute, hour = date.second + 1, date.minute, date.hour
    day, month, year = date.day, date.month, date.year

    if not 0 <= second < 60:
        second = 0
        minute += 1
        if not 0 <= minute < 60:
            minute = 0
            hour += 1
            if not 0 <= hour < 24:
                hour = 0
                month_days = days_in_month(month, year + 1900)
                day += 1
                if day < 1:
                    day = 1
                elif day > month_days:
                    day = 1
                    month += 1
                    if month >= 12:
                        month = 0
                        year += 1

    return replace(
        date, second=second, minute=minute, hour=hour, day=day, month=month, year=year
    )


def to_bcd(value: int, binary_mode: bool) -> int:
    """Encode ``value`` for a clock register, as BCD unless ``binary_mode``."""
    if binary_mode:
        return value
    tens, units = divmod(value, 10)
    return (tens << 4) | units


def from_bcd(value: int, binary_mode: bool) -> int:
    """Decode a clock register ``value``, from BCD unless ``binary_mode``."""
    if binary_mode:
        return value
    return (value >> 4) * 10 + (value & 0x0F)