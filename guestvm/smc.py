"""Secure monitor call function identifiers of the Zynq UltraScale+ firmware."""

from __future__ import annotations

from enum import IntEnum

__all__ = ["SmcFunction", "describe"]


class SmcFunction(IntEnum):
    """Function identifiers of the platform-management and IPI mailbox calls."""

    PM_GET_API_VERSION = 0xC2000001
    PM_SET_CONFIGURATION = 0xC2000002
    PM_GET_NODE_STATUS = 0xC2000003
    PM_GET_OPERATING_CHARACTERISTIC = 0xC2000004
    PM_REGISTER_NOTIFIER = 0xC2000005
    PM_REQUEST_SUSPEND = 0xC2000006
    PM_SELF_SUSPEND = 0xC2000007
    PM_FORCE_POWERDOWN = 0xC2000008
    PM_ABORT_SUSPEND = 0xC2000009
    PM_REQUEST_WAKEUP = 0xC200000A
    PM_SET_WAKEUP_SOURCE = 0xC200000B
    PM_SYSTEM_SHUTDOWN = 0xC200000C
    PM_REQUEST_NODE = 0xC200000D
    PM_RELEASE_NODE = 0xC200000E
    PM_SET_REQUIREMENT = 0xC200000F
    PM_SET_MAX_LATENCY = 0xC2000010
    PM_RESET_ASSERT = 0xC2000011
    PM_RESET_GET_STATUS = 0xC2000012
    PM_MMIO_WRITE = 0xC2000013
    PM_MMIO_READ = 0xC2000014
    PM_INIT_FINALIZE = 0xC2000015
    PM_FPGA_LOAD = 0xC2000016
    PM_FPGA_GET_STATUS = 0xC2000017
    PM_GET_CHIPID = 0xC2000018
    PM_SECURE_SHA = 0xC200001A
    PM_SECURE_RSA = 0xC200001B
    PM_PINCTRL_REQUEST = 0xC200001C
    PM_PINCTRL_RELEASE = 0xC200001D
    PM_PINCTRL_GET_FUNCTION = 0xC200001E
    PM_PINCTRL_SET_FUNCTION = 0xC200001F
    PM_PINCTRL_CONFIG_PARAM_GET = 0xC2000020
    PM_PINCTRL_CONFIG_PARAM_SET = 0xC2000021
    PM_IOCTL = 0xC2000022
    PM_QUERY_DATA = 0xC2000023
    PM_CLOCK_ENABLE = 0xC2000024
    PM_CLOCK_DISABLE = 0xC2000025
    PM_CLOCK_GETSTATE = 0xC2000026
    PM_CLOCK_SETDIVIDER = 0xC2000027
    PM_CLOCK_GETDIVIDER = 0xC2000028
    PM_CLOCK_SETRATE = 0xC2000029
    PM_CLOCK_GETRATE = 0xC200002A
    PM_CLOCK_SETPARENT = 0xC200002B
    PM_CLOCK_GETPARENT = 0xC200002C
    PM_SECURE_IMAGE = 0xC200002D
    PM_FPGA_READ = 0xC200002E
    PM_SECURE_AES = 0xC200002F
    PM_CLOCK_PLL_GETPARAM = 0xC2000030
    PM_REGISTER_ACCESS = 0xC2000034
    PM_EFUSE_ACCESS = 0xC2000035
    PM_ADD_SUBSYSTEM = 0xC2000036
    PM_FEATURE_CHECK = 0xC200003F
    PM_API_MAX = 0xC2000040

    IPI_MAILBOX_OPEN = 0x82001000
    IPI_MAILBOX_RELEASE = 0x82001001
    IPI_MAILBOX_STATUS_ENQUIRY = 0x82001002
    IPI_MAILBOX_NOTIFY = 0x82001003
    IPI_MAILBOX_ACK = 0x82001004
    IPI_MAILBOX_ENABLE_IRQ = 0x82001005
    IPI_MAILBOX_DISABLE_IRQ = 0x82001006

    PM_GET_TRUSTZONE_VERSION = 0xC2000A03


def describe(function_id: int) -> str:
    """Return the name of the SMC function ``function_id``.

    Raises ValueError if the identifier is not a known function.
    """
    try:
        return SmcFunction(function_id).name
    except ValueError:
        raise ValueError(f"unknown SMC function 0x{function_id:08X}") from None