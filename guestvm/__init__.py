"""Emulated MC146818 CMOS clock, ARM board device-tree and interrupt tables, and ZynqMP SMC identifiers."""

__version__ = "0.1.0"
__all__ = ["interrupts", "platforms", "rtc", "rtcdate", "smc"]