"""Interrupt numbers of the Tegra boards that host ARM guests."""

from __future__ import annotations

from enum import IntEnum

__all__ = [
    "Tk1Irq",
    "Tx1Irq",
    "Tx2Irq",
    "TX1_MAX_IRQ",
    "TX2_GIC_LIC_INTID_BASE",
    "TX2_PPI_VTIMER",
    "TX2_MAX_IRQ",
    "irq_name",
]


class Tk1Irq(IntEnum):
    """Interrupt lines of the Tegra K1."""

    VTIMER = 27
    TMR1 = 32
    TMR2 = 33
    RTC = 34
    CEC = 35
    SHR_SEM_INBOX_FULL = 36
    SHR_SEM_INBOX_EMPTY = 37
    SHR_SEM_OUTBOX_FULL = 38
    SHR_SEM_OUTBOX_EMPTY = 39
    VDE_UCQ = 40
    VDE_SYNC_TOKEN = 41
    VDE_BSEV = 42
    VDE_BSEA = 43
    VDE_SXE = 44
    SATA_RX_STAT = 45
    SDMMC1 = 46
    SDMMC2 = 47
    VDE = 49
    AVP_UCQ = 50
    SDMMC3 = 51
    USB = 52
    USB2 = 53
    SATA_CTL = 55
    VCP = 57
    APB_DMA_CPU = 58
    AHB_DMA_CPU = 59
    ARB_SEM_GNT_COP = 60
    ARB_SEM_GNT_CPU = 61
    OWR = 62
    SDMMC4 = 63
    GPIO1 = 64
    GPIO2 = 65
    GPIO3 = 66
    GPIO4 = 67
    UARTA = 68
    UARTB = 69
    I2C = 70
    USB3_HOST = 71
    USB3_HOST_SMI = 72
    TMR3 = 73
    TMR4 = 74
    USB3_HOST_PME = 75
    USB3_DEV_HOST = 76
    ACTMON = 77
    UARTC = 78
    HSI = 79
    THERMAL = 80
    XUSB_PADCTL = 81
    TSEC = 82
    EDP = 83
    VFIR = 84
    I2C5 = 85
    STAT_MON = 86
    GPIO5 = 87
    USB3_DEV_SMI = 88
    USB3_DEV_PME = 89
    SE = 90
    SPI1 = 91
    APB_DMA_COP = 92
    AHB_DMA_COP = 93
    CLDVFS = 94
    I2C6 = 95
    HOST1X_SYNCPT_COP = 96
    HOST1X_SYNCPT_CPU = 97
    HOST1X_GEN_COP = 98
    HOST1X_GEN_CPU = 99
    MSENC = 100
    VI = 101
    ISPB = 102
    ISP = 103
    VIC = 104
    DISPLAY = 105
    DISPLAYB = 106
    HDMI = 107
    SOR = 108
    EMC = 110
    SPI6 = 111
    HDA = 113
    SPI2 = 114
    SPI3 = 115
    I2C2 = 116
    PMU_EXT = 118
    GPIO6 = 119
    GPIO7 = 121
    UARTD = 122
    I2C3 = 124
    SW = 127
    SNOR = 128
    USB3 = 129
    PCIE_INT = 130
    PCIE_MSI = 131
    PCIE_WAKE = 132
    AVP_CACHE = 133
    AUDIO_CLUSTER = 135
    APB_DMA_CH0 = 136
    APB_DMA_CH1 = 137
    APB_DMA_CH2 = 138
    APB_DMA_CH3 = 139
    APB_DMA_CH4 = 140
    APB_DMA_CH5 = 141
    APB_DMA_CH6 = 142
    APB_DMA_CH7 = 143
    APB_DMA_CH8 = 144
    APB_DMA_CH9 = 145
    APB_DMA_CH10 = 146
    APB_DMA_CH11 = 147
    APB_DMA_CH12 = 148
    APB_DMA_CH13 = 149
    APB_DMA_CH14 = 150
    APB_DMA_CH15 = 151
    I2C4 = 152
    TMR5 = 153
    HIER_GROUP1_COP = 154
    WDT_CPU = 155
    WDT_AVP = 156
    GPIO8 = 157
    CAR = 158
    HIER_GROUP1_CPU = 159
    APB_DMA_CH16 = 160
    APB_DMA_CH17 = 161
    APB_DMA_CH18 = 162
    APB_DMA_CH19 = 163
    APB_DMA_CH20 = 164
    APB_DMA_CH21 = 165
    APB_DMA_CH22 = 166
    APB_DMA_CH23 = 167
    APB_DMA_CH24 = 168
    APB_DMA_CH25 = 169
    APB_DMA_CH26 = 170
    APB_DMA_CH27 = 171
    APB_DMA_CH28 = 172
    APB_DMA_CH29 = 173
    APB_DMA_CH30 = 174
    APB_DMA_CH31 = 175
    CPU0_PMU = 176
    CPU1_PMU = 177
    CPU2_PMU = 178
    CPU3_PMU = 179
    SDMMC1_SYS = 180
    SDMMC2_SYS = 181
    SDMMC3_SYS = 182
    SDMMC4_SYS = 183
    TMR6 = 184
    TMR7 = 185
    TMR8 = 186
    TMR9 = 187
    TMR0 = 188
    GPU = 189
    GPU_NONSTALL = 190
    ARDPAUX = 191


class Tx1Irq(IntEnum):
    """Interrupt lines of the Tegra X1; reserved lines have no member."""

    VTIMER = 27
    PPI_15 = 31
    TMR1 = 32
    TMR2 = 33
    RTC = 34
    CEC = 35
    SHR_SEM_INBOX_FULL = 36
    SHR_SEM_INBOX_EMPTY = 37
    SHR_SEM_OUTBOX_FULL = 38
    SHR_SEM_OUTBOX_EMPTY = 39
    NVJPEG = 40
    NVDEC = 41
    QUAD_SPI = 42
    DPAUX_INT1 = 43
    SATA_RX_STAT = 45
    SDMMC1 = 46
    SDMMC2 = 47
    VGPIO_INT = 48
    VII12C_INT = 49
    SDMMC3 = 51
    USB = 52
    USB2 = 53
    SATA_CTL = 55
    PMC_INT = 56
    FC_INT = 57
    APB_DMA_CPU = 58
    ARB_SEM_GNT_COP = 60
    ARB_SEM_GNT_CPU = 61
    SDMMC4 = 63
    GPIO1 = 64
    GPIO2 = 65
    GPIO3 = 66
    GPIO4 = 67
    UARTA = 68
    UARTB = 69
    I2C = 70
    USB3_HOST_INT = 71
    USB3_HOST_SMI = 72
    TMR3 = 73
    TMR4 = 74
    USB3_HOST_PME = 75
    USB3_DEV_HOST = 76
    ACTMON = 77
    UARTC = 78
    THERMAL = 80
    XUSB_PADCTL = 81
    TSEC = 82
    EDP = 83
    I2C5 = 85
    GPIO5 = 87
    USB3_DEV_SMI = 88
    USB3_DEV_PME = 89
    SE = 90
    SPI1 = 91
    APB_DMA_COP = 92
    CLDVFS = 94
    I2C6 = 95
    HOST1X_SYNCPT_COP = 96
    HOST1X_SYNCPT_CPU = 97
    HOST1X_GEN_COP = 98
    HOST1X_GEN_CPU = 99
    NVENC = 100
    VI = 101
    ISPB = 102
    ISP = 103
    VIC = 104
    DISPLAY = 105
    DISPLAYB = 106
    SOR1 = 107
    SOR = 108
    MC = 109
    EMC = 110
    TSECB = 112
    HDA = 113
    SPI2 = 114
    SPI3 = 115
    I2C2 = 116
    PMU_EXT = 118
    GPIO6 = 119
    GPIO7 = 121
    UARTD = 122
    I2C3 = 124
    SPI4 = 125
    DTV = 128
    PCIE_INT = 130
    PCIE_MSI = 131
    AVP_CACHE = 133
    APE_INT1 = 134
    APE_INT0 = 135
    APB_DMA_CH0 = 136
    APB_DMA_CH1 = 137
    APB_DMA_CH2 = 138
    APB_DMA_CH3 = 139
    APB_DMA_CH4 = 140
    APB_DMA_CH5 = 141
    APB_DMA_CH6 = 142
    APB_DMA_CH7 = 143
    APB_DMA_CH8 = 144
    APB_DMA_CH9 = 145
    APB_DMA_CH10 = 146
    APB_DMA_CH11 = 147
    APB_DMA_CH12 = 148
    APB_DMA_CH13 = 149
    APB_DMA_CH14 = 150
    APB_DMA_CH15 = 151
    I2C4 = 152
    TMR5 = 153
    WDT_CPU = 155
    WDT_AVP = 156
    GPIO8 = 157
    CAR = 158
    APB_DMA_CH16 = 160
    APB_DMA_CH17 = 161
    APB_DMA_CH18 = 162
    APB_DMA_CH19 = 163
    APB_DMA_CH20 = 164
    APB_DMA_CH21 = 165
    APB_DMA_CH22 = 166
    APB_DMA_CH23 = 167
    APB_DMA_CH24 = 168
    APB_DMA_CH25 = 169
    APB_DMA_CH26 = 170
    APB_DMA_CH27 = 171
    APB_DMA_CH28 = 172
    APB_DMA_CH29 = 173
    APB_DMA_CH30 = 174
    APB_DMA_CH31 = 175
    CPU0_PMU_INTR = 176
    CPU1_PMU_INTR = 177
    CPU2_PMU_INTR = 178
    CPU3_PMU_INTR = 179
    SDMMC1_SYS = 180
    SDMMC2_SYS = 181
    SDMMC3_SYS = 182
    SDMMC4_SYS = 183
    TMR6 = 184
    TMR7 = 185
    TMR8 = 186
    TMR9 = 187
    TMR0 = 188
    GPU = 189
    GPU_NONSTALL = 190
    DPAUX = 191
    MPCORE_AXIERRIRQ = 192
    MPCORE_INTERRIRQ = 193
    EVENT_GPIO_A = 194
    EVENT_GPIO_B = 195
    EVENT_GPIO_C = 196
    FLOW_RSN_CPU = 200
    FLOW_RSM_COP = 201
    TMR_SHARED = 202
    MPCORE_CTIIRQ0 = 203
    MPCORE_CTIIRQ1 = 204
    MPCORE_CTIIRQ2 = 205
    MPCORE_CTIIRQ3 = 206
    MSELECT_ERROR = 207
    TMR10 = 208
    TMR11 = 209
    TMR12 = 210
    TMR13 = 211


TX1_MAX_IRQ = 224

# The legacy interrupt controller's lines start at this GIC input.
TX2_GIC_LIC_INTID_BASE = 32
TX2_PPI_VTIMER = 27
TX2_MAX_IRQ = TX2_GIC_LIC_INTID_BASE + 287

_TX2_LINES = (
    *(f"TOP_TKE_SHARED{n}" for n in range(10)),
    "RTC",
    "LIC_GTE_0",
    "LIC_GTE_1",
    "AON_GTE",
    "BPMP_WDT_REMOTE",
    "SPE_WDT_REMOTE",
    "SCE_WDT_REMOTE",
    "TOP_WDT_REMOTE",
    "AOWDT_REMOTE",
    "RESERVED_19",
    "DSIA",
    "DSIB",
    "DSIC",
    "DSID",
    "RESERVED_24",
    "I2C",
    *(f"I2C{n}" for n in range(2, 11)),
    "QSPI",
    *(f"SPI{n}" for n in range(1, 5)),
    "CAN1_0",
    "CAN1_1",
    "CAN2_0",
    "CAN2_1",
    "UFSHC",
    *(f"GPIO{bank}_{line}" for bank in range(5) for line in range(3)),
    "AON_GPIO_0",
    "AON_GPIO_1",
    *(f"SDMMC{n}" for n in range(1, 5)),
    *(f"SDMMC{n}_SYS" for n in range(1, 5)),
    "GPU_STALL",
    "GPU_NONSTALL",
    "PCIE_INT",
    "PCIE_MSI",
    "PCIE_WAKE",
    *(f"CENTRAL_DMA_CH{n}" for n in range(32)),
    "CENTRAL_DMA_COMMON",
    *(f"SIMON{n}" for n in range(4)),
    *(f"UART{letter}" for letter in "ABCDEFG"),
    "NVCSI",
)

Tx2Irq = IntEnum(
    "Tx2Irq",
    [(name, TX2_GIC_LIC_INTID_BASE + offset) for offset, name in enumerate(_TX2_LINES)],
    module=__name__,
)
Tx2Irq.__doc__ = "Interrupt lines of the Tegra X2, numbered from the first LIC input."

_PLATFORMS: dict[str, type[IntEnum]] = {
    "tk1": Tk1Irq,
    "tx1": Tx1Irq,
    "tx2": Tx2Irq,
}


def irq_name(platform: str, number: int) -> str:
    """Return the name of interrupt ``number`` on ``platform`` (tk1, tx1 or tx2).

    Raises ValueError for an unknown platform or an unassigned interrupt.
    """
    try:
        table = _PLATFORMS[platform.lower()]
    except KeyError:
        raise ValueError(f"unknown platform: {platform!r}") from None
    try:
        return table(number).name
    except ValueError:
        raise ValueError(f"no interrupt {number} on {platform}") from None