"""Emulation of the MC146818 CMOS real-time clock seen by an x86 guest."""

from __future__ import annotations

from collections.abc import Callable
from enum import IntEnum
from typing import Protocol

from guestvm.rtcdate import RtcDate, from_bcd, muldiv64, next_second, to_bcd

__all__ = ["TimerId", "TimerBackend", "Mc146818Rtc"]

_TICKS_PER_SEC = 1_000_000_000
_RTC_CLOCK_HZ = 32768
_REINJECT_ON_ACK_COUNT = 20

_SECONDS = 0
_SECONDS_ALARM = 1
_MINUTES = 2
_MINUTES_ALARM = 3
_HOURS = 4
_HOURS_ALARM = 5
_DAY_OF_WEEK = 6
_DAY_OF_MONTH = 7
_MONTH = 8
_YEAR = 9
_REG_A = 10
_REG_B = 11
_REG_C = 12
_REG_D = 13

_ALARM_DONT_CARE = 0xC0

_REG_A_UIP = 0x80

_REG_B_SET = 0x80
_REG_B_PIE = 0x40
_REG_B_AIE = 0x20
_REG_B_UIE = 0x10
_REG_B_SQWE = 0x08
_REG_B_DM = 0x04
_REG_B_24H = 0x02

_REG_C_UF = 0x10
_REG_C_IRQF = 0x80
_REG_C_PF = 0x40
_REG_C_AF = 0x20

_IBM_CENTURY_BYTE = 0x32
_IBM_PS2_CENTURY_BYTE = 0x37

_TIME_REGISTERS = frozenset(
    {_SECONDS, _MINUTES, _HOURS, _DAY_OF_WEEK, _DAY_OF_MONTH, _MONTH, _YEAR}
)
_ALARM_REGISTERS = frozenset({_SECONDS_ALARM, _MINUTES_ALARM, _HOURS_ALARM})

_MASK32 = 0xFFFF_FFFF
_MASK16 = 0xFFFF


class TimerId(IntEnum):
    """The one-shot timers the clock drives; bit ``1 << id`` marks completion."""

    PERIODIC = 0
    COALESCED = 1
    SECOND = 2
    SECOND2 = 3


class TimerBackend(Protocol):
    """Source of time and one-shot timers, in nanoseconds."""

    def now(self) -> int:
        """Return the current time in nanoseconds."""
        ...

    def oneshot_absolute(self, timer: TimerId, deadline: int) -> None:
        """Arm ``timer`` to fire at the absolute time ``deadline``."""
        ...

    def stop(self, timer: TimerId) -> None:
        """Disarm ``timer``."""
        ...


class Mc146818Rtc:
    """CMOS clock state machine, accessed through an index port and a data port."""

    def __init__(
        self,
        timers: TimerBackend,
        set_irq_level: Callable[[bool], None],
        host_date: Callable[[], RtcDate],
        base_year: int = 1900,
    ) -> None:
        self._timers = timers
        self._set_irq_level = set_irq_level
        self._host_date = host_date
        self._td_hack = False

        self._cmos = bytearray(128)
        self._index = 0
        self._date = RtcDate()
        self.base_year = base_year
        self._next_periodic_time = 0
        self._next_second_time = 0
        self._reinject_count = 0
        self._irq_coalesced = 0
        self._period = 0

        self._initialise()
        self.reset()

    @property
    def date(self) -> RtcDate:
        """The date the clock currently holds."""
        return self._date

    @property
    def cmos(self) -> bytes:
        """A copy of the 128 bytes of CMOS memory."""
        return bytes(self._cmos)

    @property
    def index(self) -> int:
        """The register selected by the last write to the index port."""
        return self._index

    def _initialise(self) -> None:
        self._cmos[_REG_A] = 0x26
        self._cmos[_REG_B] = 0x02
        self._cmos[_REG_C] = 0x00
        self._cmos[_REG_D] = 0x80
        self._set_date_from_host()
        self._next_second_time = self._timers.now() + (_TICKS_PER_SEC * 99) // 100
        self._timers.oneshot_absolute(TimerId.SECOND2, self._next_second_time)

    @property
    def _binary(self) -> bool:
        return bool(self._cmos[_REG_B] & _REG_B_DM)

    def _raise_irq(self) -> None:
        self._set_irq_level(True)

    def _lower_irq(self) -> None:
        self._set_irq_level(False)

    def _encode(self, value: int) -> int:
        return to_bcd(value, self._binary) & 0xFF

    def _decode(self, value: int) -> int:
        return from_bcd(value, self._binary)

    def _set_time(self) -> None:
        cmos = self._cmos
        hour = self._decode(cmos[_HOURS] & 0x7F)
        if not cmos[_REG_B] & _REG_B_24H and cmos[_HOURS] & 0x80:
            hour += 12
        self._date = RtcDate(
            second=self._decode(cmos[_SECONDS]),
            minute=self._decode(cmos[_MINUTES]),
            hour=hour,
            day=self._decode(cmos[_DAY_OF_MONTH]),
            month=self._decode(cmos[_MONTH]) - 1,
            year=self._decode(cmos[_YEAR]) + self.base_year - 1900,
        )

    def _copy_date(self) -> None:
        cmos = self._cmos
        date = self._date
        cmos[_SECONDS] = self._encode(date.second)
        cmos[_MINUTES] = self._encode(date.minute)
        if cmos[_REG_B] & _REG_B_24H:
            cmos[_HOURS] = self._encode(date.hour)
        else:
            hours = self._encode(date.hour % 12)
            if date.hour >= 12:
                hours |= 0x80
            cmos[_HOURS] = hours
        cmos[_DAY_OF_MONTH] = self._encode(date.day)
        cmos[_MONTH] = self._encode(date.month)
        cmos[_YEAR] = self._encode((date.year - self.base_year) % 100)

    def _set_date_from_host(self) -> None:
        date = self._host_date()
        self.set_date(date)
        century = self._encode(int(date.year / 100) + 19)
        self.set_memory(_IBM_CENTURY_BYTE, century)
        self.set_memory(_IBM_PS2_CENTURY_BYTE, century)

    def _coalesced_timer_update(self) -> None:
        if self._irq_coalesced == 0:
            self._timers.stop(TimerId.COALESCED)
            return
        divisions = min(self._irq_coalesced, 7) + 1
        next_clock = self._timers.now() + muldiv64(
            self._period // divisions, _TICKS_PER_SEC, _RTC_CLOCK_HZ
        )
        self._timers.oneshot_absolute(TimerId.COALESCED, next_clock)

    def _coalesced_timer(self) -> None:
        if self._irq_coalesced:
            self._cmos[_REG_C] |= 0xC0
            self._raise_irq()
        self._coalesced_timer_update()

    def _timer_update(self, current_time: int) -> None:
        cmos = self._cmos
        period_code = cmos[_REG_A] & 0x0F
        if period_code and cmos[_REG_B] & _REG_B_PIE:
            if period_code <= 2:
                period_code += 7
            period = 1 << (period_code - 1)
            if period != self._period:
                self._irq_coalesced = ((self._irq_coalesced * self._period) // period) & _MASK32
            self._period = period
            cur_clock = muldiv64(current_time, _RTC_CLOCK_HZ, _TICKS_PER_SEC)
            next_irq_clock = (cur_clock & ~(period - 1)) + period
            self._next_periodic_time = (
                muldiv64(next_irq_clock, _TICKS_PER_SEC, _RTC_CLOCK_HZ) + 1
            )
            self._timers.oneshot_absolute(TimerId.PERIODIC, self._next_periodic_time)
        else:
            self._irq_coalesced = 0
            self._timers.stop(TimerId.PERIODIC)

    def _periodic_timer(self) -> None:
        cmos = self._cmos
        self._timer_update(self._next_periodic_time)
        if cmos[_REG_B] & _REG_B_PIE:
            cmos[_REG_C] |= 0xC0
            if self._td_hack and self._reinject_count >= _REINJECT_ON_ACK_COUNT:
                self._reinject_count = 0
            self._raise_irq()
        if cmos[_REG_B] & _REG_B_SQWE:
            self._raise_irq()

    def _update_second(self) -> None:
        cmos = self._cmos
        if cmos[_REG_A] & 0x70 != 0x20:
            self._next_second_time += _TICKS_PER_SEC
            self._timers.oneshot_absolute(TimerId.SECOND, self._next_second_time)
            return
        self._date = next_second(self._date)
        if not cmos[_REG_B] & _REG_B_SET:
            cmos[_REG_A] |= _REG_A_UIP
        delay = max(_TICKS_PER_SEC // 100, 1)
        self._timers.oneshot_absolute(TimerId.SECOND2, self._next_second_time + delay)

    def _alarm_matches(self, register: int, current: int) -> bool:
        value = self._cmos[register]
        return value & 0xC0 == _ALARM_DONT_CARE or self._decode(value) == current

    def _update_second2(self) -> None:
        cmos = self._cmos
        if not cmos[_REG_B] & _REG_B_SET:
            self._copy_date()

        if cmos[_REG_B] & _REG_B_AIE:
            date = self._date
            if (
                self._alarm_matches(_SECONDS_ALARM, date.second)
                and self._alarm_matches(_MINUTES_ALARM, date.minute)
                and self._alarm_matches(_HOURS_ALARM, date.hour)
            ):
                cmos[_REG_C] |= 0xA0
                self._raise_irq()

        cmos[_REG_C] |= _REG_C_UF
        if cmos[_REG_B] & _REG_B_UIE:
            cmos[_REG_C] |= _REG_C_IRQF
            self._raise_irq()

        cmos[_REG_A] &= ~_REG_A_UIP & 0xFF
        self._next_second_time += _TICKS_PER_SEC
        self._timers.oneshot_absolute(TimerId.SECOND, self._next_second_time)

    def read_port(self, port: int) -> int:
        """Read a byte from the index port (even) or the data port (odd)."""
        if port & 1 == 0:
            return 0xFF
        cmos = self._cmos
        index = self._index
        value = cmos[index]
        if index == _REG_C:
            self._lower_irq()
            if self._irq_coalesced and self._reinject_count < _REINJECT_ON_ACK_COUNT:
                self._reinject_count = (self._reinject_count + 1) & _MASK16
                self._raise_irq()
                return value
            cmos[_REG_C] = 0x00
        return value

    def write_port(self, port: int, value: int) -> None:
        """Write a byte to the index port (even) or the data port (odd)."""
        cmos = self._cmos
        if port & 1 == 0:
            self._index = value & 0x7F
            return

        index = self._index
        if index in _ALARM_REGISTERS:
            cmos[index] = value & 0xFF
        elif index in _TIME_REGISTERS:
            cmos[index] = value & 0xFF
            if not cmos[_REG_B] & _REG_B_SET:
                self._set_time()
        elif index == _REG_A:
            cmos[_REG_A] = ((value & ~_REG_A_UIP) | (cmos[_REG_A] & _REG_A_UIP)) & 0xFF
            self._timer_update(self._timers.now())
        elif index == _REG_B:
            if value & _REG_B_SET:
                cmos[_REG_A] &= ~_REG_A_UIP & 0xFF
                value &= ~_REG_B_UIE
            elif cmos[_REG_B] & _REG_B_SET:
                self._set_time()
            format_changed = (cmos[_REG_B] ^ value) & (_REG_B_DM | _REG_B_24H)
            cmos[_REG_B] = value & 0xFF
            if format_changed and not value & _REG_B_SET:
                self._copy_date()
            self._timer_update(self._timers.now())
        elif index in (_REG_C, _REG_D):
            pass
        else:
            cmos[index] = value & 0xFF

    def port_in(self, port: int, size: int) -> int:
        """Handle a guest port read; only single-byte accesses are allowed."""
        if size != 1:
            raise ValueError("reads from CMOS ports must be of size 1")
        return self.read_port(port)

    def port_out(self, port: int, size: int, value: int) -> None:
        """Handle a guest port write; only single-byte accesses are allowed."""
        if size != 1:
            raise ValueError("writes to CMOS ports must be of size 1")
        self.write_port(port, value)

    def timer_interrupt(self, completed: int) -> None:
        """Run the handlers of every timer whose bit is set in ``completed``."""
        if completed & (1 << TimerId.PERIODIC):
            self._periodic_timer()
        if completed & (1 << TimerId.COALESCED):
            self._coalesced_timer()
        if completed & (1 << TimerId.SECOND):
            self._update_second()
        if completed & (1 << TimerId.SECOND2):
            self._update_second2()

    def reset(self) -> None:
        """Clear interrupt enables and pending flags and lower the interrupt line."""
        self._cmos[_REG_B] &= ~(_REG_B_PIE | _REG_B_AIE | _REG_B_SQWE) & 0xFF
        self._cmos[_REG_C] &= ~(_REG_C_UF | _REG_C_IRQF | _REG_C_PF | _REG_C_AF) & 0xFF
        self._lower_irq()
        if self._td_hack:
            self._irq_coalesced = 0

    def set_date(self, date: RtcDate) -> None:
        """Set the clock to ``date`` and refresh the time registers."""
        self._date = date
        self._copy_date()

    def set_memory(self, addr: int, value: int) -> None:
        """Store ``value`` at CMOS address ``addr``; addresses outside 0-127 are ignored."""
        if 0 <= addr <= 127:
            self._cmos[addr] = value & 0xFF