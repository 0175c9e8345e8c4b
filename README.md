# guestvm

Building blocks for a virtual machine monitor that runs guest operating
systems. The package has five modules:

- `guestvm.rtcdate`: calendar arithmetic for a real-time clock. It holds the
  frozen `RtcDate` value (`month` counts from 0, `year` counts from 1900) and
  the helpers `next_second`, `days_in_month`, `to_bcd`, `from_bcd` and
  `muldiv64`.
- `guestvm.rtc`: an emulated MC146818 CMOS real-time clock, `Mc146818Rtc`.
  The clock reaches its host through three things you supply: a
  `TimerBackend` that gives it the current time and one-shot timers (each
  named by a `TimerId`), a callable that sets the guest's interrupt line, and
  a callable that returns the host's date as an `RtcDate`.
- `guestvm.interrupts`: interrupt number tables for the Tegra K1, X1 and X2
  boards (`Tk1Irq`, `Tx1Irq`, `Tx2Irq`, plus `TX1_MAX_IRQ`,
  `TX2_GIC_LIC_INTID_BASE`, `TX2_PPI_VTIMER` and `TX2_MAX_IRQ`).
  `irq_name(platform, number)` returns the name of an interrupt and raises
  `ValueError` for an unknown board or an unassigned number.
- `guestvm.smc`: the ZynqMP secure monitor call function identifiers,
  `SmcFunction`. `describe(function_id)` returns the name of an identifier
  and raises `ValueError` for an unknown one.
- `guestvm.platforms`: for each supported ARM board, the device-tree nodes a
  guest keeps, keeps disabled, keeps with their subtree, or keeps with their
  subtree disabled, together with its GIC node path and interrupt settings
  (`Platform`, `get_platform`, `platform_names`).

The package has no dependencies beyond the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Emulating the CMOS clock

```python
from guestvm.rtc import Mc146818Rtc, TimerBackend, TimerId
from guestvm.rtcdate import RtcDate


class Timers(TimerBackend):
    def __init__(self):
        self.time = 0
        self.deadlines = {}

    def now(self):
        return self.time

    def oneshot_absolute(self, timer, deadline):
        self.deadlines[timer] = deadline

    def stop(self, timer):
        self.deadlines.pop(timer, None)


timers = Timers()
irq_levels = []
rtc = Mc146818Rtc(
    timers,
    irq_levels.append,
    lambda: RtcDate(second=0, minute=30, hour=12, day=1, month=0, year=124),
    1900,
)

rtc.port_out(0x70, 1, 0x04)      # select the hours register
print(hex(rtc.port_in(0x71, 1)))  # 0x12: BCD, 24-hour mode
```

The guest reaches the clock through the index port (even address) and the
data port (odd address); reading the index port returns `0xFF`. `port_in`
and `port_out` accept only single-byte accesses and raise `ValueError` for
any other size; `read_port` and `write_port` skip that check.

Times are in nanoseconds. When host timers fire, pass `timer_interrupt` a
bit mask with bit `1 << timer_id` set for each completed `TimerId`
(`PERIODIC`, `COALESCED`, `SECOND`, `SECOND2`). The clock re-arms its timers
through the backend and raises or lowers the interrupt line through the
callable you gave it. Reading register C acknowledges pending interrupts.

Other members: `reset()` clears interrupt enables and pending flags and
lowers the line; `set_date(date)` sets the clock and its time registers;
`set_memory(addr, value)` writes a CMOS byte (addresses outside 0–127 are
ignored). The `date`, `cmos` and `index` properties expose the current
state. On start-up the clock takes the host date and also writes the
century to CMOS bytes `0x32` and `0x37`.

## Platform tables

```python
from guestvm.platforms import get_platform, platform_names

print(platform_names())
tk1 = get_platform("tk1", tk1_insecure=False, petalinux_2018_3=False)
print(tk1.gic_node_path)
print(tk1.linux_pt_irqs)
print(tk1.all_kept_paths())
```

Board names are matched case-insensitively; an unknown name raises
`ValueError`. `tk1_insecure=True` hands the TK1's secure devices to the
guest instead of keeping them disabled, and `petalinux_2018_3=True` selects
the older zynqmp GIC node path. A `free_plat_interrupts` entry of `-1` marks
a board with no free interrupt. `Platform.constants` holds board-specific
numbers such as `IRQ_SPI_OFFSET` or `MAX_IRQ`.

## What the package does not do

There is no command-line program. The clock is a state machine only: it
does not attach itself to a hypervisor, trap port accesses or run timers on
its own — your code must forward port accesses and timer completions to it.
The platform tables describe which device-tree nodes to keep; the package
does not read, edit or write device trees.