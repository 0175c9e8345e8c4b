import pytest

from guestvm.rtc import Mc146818Rtc, TimerId
from guestvm.rtcdate import RtcDate, next_second, to_bcd

INDEX_PORT = 0x70
DATA_PORT = 0x71

SECONDS, SECONDS_ALARM, MINUTES, MINUTES_ALARM, HOURS, HOURS_ALARM = range(6)
DAY_OF_MONTH, MONTH, YEAR = 7, 8, 9
REG_A, REG_B, REG_C, REG_D = 10, 11, 12, 13

HOST_DATE = RtcDate(second=45, minute=30, hour=13, day=15, month=5, year=124)
START = 5_000_000_000


class FakeTimers:
    def __init__(self, now=START):
        self.current = now
        self.deadlines = {}
        self.stopped = set()

    def now(self):
        return self.current

    def oneshot_absolute(self, timer, deadline):
        self.deadlines[timer] = deadline
        self.stopped.discard(timer)

    def stop(self, timer):
        self.deadlines.pop(timer, None)
        self.stopped.add(timer)


@pytest.fixture
def setup():
    timers = FakeTimers()
    levels = []
    rtc = Mc146818Rtc(timers, levels.append, lambda: HOST_DATE, 1900)
    return rtc, timers, levels


def read(rtc, index):
    rtc.write_port(INDEX_PORT, index)
    return rtc.read_port(DATA_PORT)


def write(rtc, index, value):
    rtc.write_port(INDEX_PORT, index)
    rtc.write_port(DATA_PORT, value)


def fire(rtc, timer):
    rtc.timer_interrupt(1 << timer)


def test_initial_registers(setup):
    rtc, _, _ = setup
    assert read(rtc, REG_A) == 0x26
    assert read(rtc, REG_B) == 0x02
    assert read(rtc, REG_D) == 0x80


def test_initial_second_timer_within_one_second(setup):
    _, timers, levels = setup
    deadline = timers.deadlines[TimerId.SECOND2]
    assert START < deadline < START + 1_000_000_000
    assert levels[-1] is False


def test_host_date_loaded_as_bcd(setup):
    rtc, _, _ = setup
    assert rtc.date == HOST_DATE
    assert read(rtc, SECONDS) == to_bcd(HOST_DATE.second, False)
    assert read(rtc, MINUTES) == to_bcd(HOST_DATE.minute, False)
    assert read(rtc, HOURS) == to_bcd(HOST_DATE.hour, False)
    assert read(rtc, DAY_OF_MONTH) == to_bcd(HOST_DATE.day, False)


def test_century_bytes_agree(setup):
    rtc, _, _ = setup
    assert read(rtc, 0x32) == read(rtc, 0x37)
    assert rtc.cmos[0x32] == read(rtc, 0x32)


def test_index_port_reads_ff(setup):
    rtc, _, _ = setup
    assert rtc.read_port(INDEX_PORT) == 0xFF


def test_index_is_masked_to_seven_bits(setup):
    rtc, _, _ = setup
    rtc.write_port(INDEX_PORT, 0x80 | REG_D)
    assert rtc.index == REG_D


def test_alarm_register_round_trip(setup):
    rtc, _, _ = setup
    write(rtc, MINUTES_ALARM, 0x17)
    assert read(rtc, MINUTES_ALARM) == 0x17


def test_generic_register_round_trip(setup):
    rtc, _, _ = setup
    write(rtc, 0x40, 0x5A)
    assert read(rtc, 0x40) == 0x5A


def test_register_c_and_d_are_read_only(setup):
    rtc, _, _ = setup
    write(rtc, REG_D, 0x00)
    write(rtc, REG_C, 0xFF)
    assert read(rtc, REG_D) == 0x80
    assert read(rtc, REG_C) == 0x00


def test_uip_bit_is_read_only(setup):
    rtc, _, _ = setup
    write(rtc, REG_A, 0x26 | 0x80)
    assert read(rtc, REG_A) == 0x26


def test_writing_time_register_updates_date(setup):
    rtc, _, _ = setup
    write(rtc, SECONDS, 0x10)
    assert rtc.date.second == 10
    assert rtc.date.minute == HOST_DATE.minute


def test_set_mode_defers_time_update(setup):
    rtc, _, _ = setup
    write(rtc, REG_B, 0x82)
    write(rtc, SECONDS, 0x10)
    assert rtc.date.second == HOST_DATE.second
    write(rtc, REG_B, 0x02)
    assert rtc.date.second == 10


def test_set_mode_clears_update_interrupt_enable(setup):
    rtc, _, _ = setup
    write(rtc, REG_B, 0x80 | 0x10 | 0x02)
    assert read(rtc, REG_B) & 0x10 == 0


def test_binary_mode_rewrites_registers(setup):
    rtc, _, _ = setup
    write(rtc, REG_B, 0x06)
    assert read(rtc, SECONDS) == HOST_DATE.second
    assert read(rtc, MINUTES) == HOST_DATE.minute
    assert read(rtc, HOURS) == HOST_DATE.hour


def test_twelve_hour_mode_sets_pm_bit(setup):
    rtc, _, _ = setup
    write(rtc, REG_B, 0x00)
    hours = read(rtc, HOURS)
    assert hours & 0x80
    assert hours & 0x7F == to_bcd(HOST_DATE.hour % 12, False)


def test_twelve_hour_round_trip_through_set_time(setup):
    rtc, _, _ = setup
    write(rtc, REG_B, 0x00)
    write(rtc, HOURS, read(rtc, HOURS))
    assert rtc.date.hour == HOST_DATE.hour


def test_periodic_interrupt(setup):
    rtc, timers, levels = setup
    write(rtc, REG_B, 0x42)
    first = timers.deadlines[TimerId.PERIODIC]
    assert first > START
    fire(rtc, TimerId.PERIODIC)
    assert levels[-1] is True
    assert timers.deadlines[TimerId.PERIODIC] > first
    assert read(rtc, REG_C) == 0xC0
    assert levels[-1] is False
    assert read(rtc, REG_C) == 0x00


def test_disabling_periodic_stops_timer(setup):
    rtc, timers, _ = setup
    write(rtc, REG_B, 0x42)
    write(rtc, REG_B, 0x02)
    assert TimerId.PERIODIC in timers.stopped
    assert TimerId.PERIODIC not in timers.deadlines


def test_zero_rate_disables_periodic(setup):
    rtc, timers, _ = setup
    write(rtc, REG_B, 0x42)
    write(rtc, REG_A, 0x20)
    assert TimerId.PERIODIC in timers.stopped


def test_second_update_cycle(setup):
    rtc, timers, _ = setup
    fire(rtc, TimerId.SECOND2)
    first_second = timers.deadlines[TimerId.SECOND]
    fire(rtc, TimerId.SECOND)
    assert rtc.date == next_second(HOST_DATE)
    assert read(rtc, REG_A) & 0x80
    assert timers.deadlines[TimerId.SECOND2] > first_second
    fire(rtc, TimerId.SECOND2)
    assert read(rtc, REG_A) & 0x80 == 0
    assert read(rtc, SECONDS) == to_bcd(rtc.date.second, False)
    assert timers.deadlines[TimerId.SECOND] > first_second


def test_update_flag_set_after_second(setup):
    rtc, _, levels = setup
    fire(rtc, TimerId.SECOND2)
    assert read(rtc, REG_C) & 0x10
    assert True not in levels


def test_update_interrupt_enabled(setup):
    rtc, _, levels = setup
    write(rtc, REG_B, 0x12)
    fire(rtc, TimerId.SECOND2)
    assert levels[-1] is True
    assert read(rtc, REG_C) & 0x90 == 0x90


def test_oscillator_stopped_does_not_advance(setup):
    rtc, timers, _ = setup
    write(rtc, REG_A, 0x06)
    fire(rtc, TimerId.SECOND2)
    before = timers.deadlines[TimerId.SECOND]
    fire(rtc, TimerId.SECOND)
    assert rtc.date == HOST_DATE
    assert timers.deadlines[TimerId.SECOND] > before


def test_alarm_dont_care_fires(setup):
    rtc, _, levels = setup
    for register in (SECONDS_ALARM, MINUTES_ALARM, HOURS_ALARM):
        write(rtc, register, 0xC0)
    write(rtc, REG_B, 0x22)
    fire(rtc, TimerId.SECOND2)
    assert levels[-1] is True
    assert read(rtc, REG_C) & 0xA0 == 0xA0


def test_alarm_mismatch_does_not_fire(setup):
    rtc, _, levels = setup
    write(rtc, SECONDS_ALARM, to_bcd((HOST_DATE.second + 5) % 60, False))
    write(rtc, MINUTES_ALARM, 0xC0)
    write(rtc, HOURS_ALARM, 0xC0)
    write(rtc, REG_B, 0x22)
    fire(rtc, TimerId.SECOND2)
    assert True not in levels
    assert read(rtc, REG_C) & 0x20 == 0


def test_reset_clears_enables_and_flags(setup):
    rtc, _, levels = setup
    write(rtc, REG_B, 0x62)
    fire(rtc, TimerId.SECOND2)
    rtc.reset()
    assert read(rtc, REG_B) == 0x02
    assert read(rtc, REG_C) == 0x00
    assert levels[-1] is False


def test_set_date_refreshes_registers(setup):
    rtc, _, _ = setup
    new_date = RtcDate(second=7, minute=8, hour=9, day=10, month=2, year=124)
    rtc.set_date(new_date)
    assert rtc.date == new_date
    assert read(rtc, SECONDS) == to_bcd(7, False)
    assert read(rtc, DAY_OF_MONTH) == to_bcd(10, False)


def test_set_memory_ignores_out_of_range(setup):
    rtc, _, _ = setup
    before = rtc.cmos
    rtc.set_memory(128, 0x11)
    rtc.set_memory(-1, 0x11)
    assert rtc.cmos == before
    rtc.set_memory(0x50, 0x11)
    assert read(rtc, 0x50) == 0x11


def test_port_in_and_out(setup):
    rtc, _, _ = setup
    rtc.port_out(INDEX_PORT, 1, REG_D)
    assert rtc.port_in(DATA_PORT, 1) == 0x80


@pytest.mark.parametrize("size", [0, 2, 4])
def test_port_in_rejects_wide_access(setup, size):
    rtc, _, _ = setup
    with pytest.raises(ValueError):
        rtc.port_in(DATA_PORT, size)


@pytest.mark.parametrize("size", [0, 2, 4])
def test_port_out_rejects_wide_access(setup, size):
    rtc, _, _ = setup
    with pytest.raises(ValueError):
        rtc.port_out(DATA_PORT, size, 0)


def test_base_year_offsets_year_register():
    timers = FakeTimers()
    rtc = Mc146818Rtc(timers, lambda level: None, lambda: HOST_DATE, 1980)
    write(rtc, YEAR, read(rtc, YEAR))
    assert rtc.date.year == HOST_DATE.year
    assert rtc.base_year == 1980