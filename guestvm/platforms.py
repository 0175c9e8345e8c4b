"""Device-tree pass-through settings of the ARM boards that host Linux guests."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from guestvm.interrupts import TX1_MAX_IRQ, TX2_GIC_LIC_INTID_BASE, TX2_MAX_IRQ, Tk1Irq

__all__ = ["Platform", "get_platform", "platform_names"]

_IRQ_SPI_OFFSET = 32


@dataclass(frozen=True)
class Platform:
    """What a board keeps, disables and passes through from the host device tree.

    A ``free_plat_interrupts`` entry of -1 marks a board with no free interrupt.
    """

    name: str
    gic_node_path: str
    linux_pt_irqs: tuple[int, ...] = ()
    free_plat_interrupts: tuple[int, ...] = ()
    keep_devices: tuple[str, ...] = ()
    keep_device_and_disable: tuple[str, ...] = ()
    keep_device_and_subtree: tuple[str, ...] = ()
    keep_device_and_subtree_and_disable: tuple[str, ...] = ()
    linux_bootcmdline: str | None = None
    linux_stdout: str | None = None
    constants: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )

    def all_kept_paths(self) -> tuple[str, ...]:
        """Every path the board keeps in any form, in order, without repeats."""
        paths = (
            *self.keep_devices,
            *self.keep_device_and_disable,
            *self.keep_device_and_subtree,
            *self.keep_device_and_subtree_and_disable,
        )
        return tuple(dict.fromkeys(paths))


def _constants(**values: int) -> Mapping[str, int]:
    return MappingProxyType(dict(values))


def _paths(text: str) -> tuple[str, ...]:
    """Split a whitespace-separated block of device-tree paths, keeping order."""
    return tuple(text.split())


def _spi(*lines: int) -> tuple[int, ...]:
    return tuple(line + _IRQ_SPI_OFFSET for line in lines)


def _exynos5410() -> Platform:
    return Platform(
        name="exynos5410",
        gic_node_path="/soc/interrupt-controller@10481000",
        free_plat_interrupts=_spi(92, 93, 101, 102),
        keep_devices=_paths(
            """
            /soc/chipid@10000000 /soc/interrupt-controller@10481000
            /soc/interrupt-controller@10440000 /soc/usb@12110000 /soc/phy@12130000
            /soc/serial@12c00000 /soc/serial@12c10000 /soc/serial@12c20000
            /xxti /cpus/cpu@0 /soc/clock-controller@10010000
            /soc/syscon@10050000 /soc/memory-controller@12250000
            """
        ),
        keep_device_and_subtree=_paths(
            """
            /soc/mmc@12200000 /soc/mmc@12220000
            /soc/system-controller@10040000 /soc/sysram@2020000
            """
        ),
        constants=_constants(
            IRQ_SPI_OFFSET=_IRQ_SPI_OFFSET,
            VUSB_ADDRESS=0x33330000,
            VUSB_IRQ=198,
            VUSB_NINDEX=5,
            VUSB_NBADGE=0x123,
        ),
    )


def _exynos5422() -> Platform:
    return Platform(
        name="exynos5422",
        gic_node_path="/soc/interrupt-controller@10481000",
        free_plat_interrupts=_spi(92, 93, 101, 102),
        keep_devices=_paths(
            """
            /fixed-rate-clocks/oscclk /timer /soc/chipid@10000000
            /soc/interrupt-controller@10481000
            """
        ),
        constants=_constants(IRQ_SPI_OFFSET=_IRQ_SPI_OFFSET),
    )


def _odroidc2() -> Platform:
    gic = "/soc/interrupt-controller@c4301000"
    return Platform(
        name="odroidc2",
        gic_node_path=gic,
        free_plat_interrupts=_spi(50),
        keep_device_and_subtree=(gic,),
        constants=_constants(IRQ_SPI_OFFSET=_IRQ_SPI_OFFSET),
    )


def _qemu_arm_virt() -> Platform:
    gic = "/intc@8000000"
    return Platform(
        name="qemu-arm-virt",
        gic_node_path=gic,
        free_plat_interrupts=_spi(50),
        keep_devices=_paths("/timer /apb-pclk /platform@c000000 /pmu /flash@0 /psci"),
        keep_device_and_subtree=(gic,),
        constants=_constants(IRQ_SPI_OFFSET=_IRQ_SPI_OFFSET),
    )


_TK1_GIC = "/interrupt-controller@50041000"

_TK1_SECURED_DEVICES = _paths(
    """
    /timer@60005000 /actmon@6000c800 /dma@60020000 /rtc@7000e000 /fuse@7000f800
    /emc@7001b000 /sata@70020000 /hda@70030000 /ahub@70300000
    """
)

_TK1_SECURED_SUBTREES = _paths(
    "/host1x@50000000 /i2c@7000c000 /i2c@7000d000 /padctl@7009f000"
)

_TK1_DISABLED = _paths(
    """
    /gpu@0,57000000 /flow-controller@60007000
    /serial@70006000 /serial@70006040 /serial@70006200 /pwm@7000a000
    /i2c@7000c000 /i2c@7000c400 /i2c@7000c500 /i2c@7000c700
    /i2c@7000d000 /i2c@7000d000/pmic@40 /i2c@7000d100
    /spi@7000d400 /spi@7000d600 /spi@7000d800 /spi@7000da00 /spi@7000dc00 /spi@7000de00
    /pmc@7000e400 /memory-controller@70019000 /padctl@7009f000
    /sdhci@700b0000 /sdhci@700b0200 /sdhci@700b0400
    /clock@70110000 /thermal-sensor@700e2000 /usb-phy@7d000000 /sound
    """
)

_TK1_KEPT = (_TK1_GIC,) + _paths(
    """
    /clock@60006000 /gpio@6000d000 /apbmisc@70000800 /pinmux@70000868
    /serial@70006300 /sdhci@700b0600 /usb-phy@7d004000 /usb-phy@7d008000
    /pmu /timer /aliases
    """
)

_TK1_SUBTREES = _paths(
    "/thermal-zones /clocks /gpio-keys /regulators /spi@7000da00 /pmc@7000e400"
)


def _tk1(insecure: bool) -> Platform:
    kept = _TK1_KEPT
    disabled = _TK1_DISABLED
    subtrees = _TK1_SUBTREES
    if insecure:
        kept += _TK1_SECURED_DEVICES
        subtrees += _TK1_SECURED_SUBTREES
        disabled_subtrees: tuple[str, ...] = ("/pcie@1003000",)
    else:
        disabled += _TK1_SECURED_DEVICES
        disabled_subtrees = ("/pcie@1003000", *_TK1_SECURED_SUBTREES)
    return Platform(
        name="tk1",
        gic_node_path=_TK1_GIC,
        linux_pt_irqs=(int(Tk1Irq.SDMMC4), int(Tk1Irq.UARTD)),
        free_plat_interrupts=(-1,),
        keep_devices=kept,
        keep_device_and_disable=disabled,
        keep_device_and_subtree=subtrees,
        keep_device_and_subtree_and_disable=disabled_subtrees,
    )


def _tx1() -> Platform:
    gic = "/interrupt-controller@50041000"
    return Platform(
        name="tx1",
        gic_node_path=gic,
        free_plat_interrupts=(-1,),
        keep_devices=(gic,)
        + _paths(
            """
            /gpu@57000000 /serial@70006300 /timer@60005000 /flow-controller@60007000
            /dma@60020000 /apbmisc@70000800 /pmu@7000a000 /i2c@7000c700
            /fuse@7000f800 /usb@70090000 /sdhci@700b0000 /sdhci@700b0600
            /mipi@700e3000 /timer /aliases /psci
            """
        ),
        keep_device_and_disable=_paths(
            """
            /serial@70006040 /serial@70006200 /serial@70006300
            /i2c@7000c000 /i2c@7000c500 /i2c@7000d100 /i2c@7000d400
            /i2c@7000d600 /i2c@7000d800 /i2c@7000da00 /hda@70030000
            /sdhci@700b0200 /sdhci@700b0400 /spi@70410000
            /usb@7d000000 /usb-phy@7d000000 /usb@7d004000 /usb-phy@7d004000
            """
        ),
        keep_device_and_subtree=_paths(
            """
            /pcie@1003000 /host1x@50000000 /thermal-zones /pinmux@700008d4
            /i2c@7000c400 /i2c@7000d000 /pmc@7000e400 /padctl@7009f000
            /thermal-sensor@700e2000 /thermal-zones /clocks /regulators /gpio-keys
            """
        ),
        keep_device_and_subtree_and_disable=("/aconnect@702c0000",),
        constants=_constants(MAX_IRQ=TX1_MAX_IRQ),
    )


def _tx2() -> Platform:
    gic = "/interrupt-controller@3881000"
    keep_before_gic = _paths(
        """
        /arm-pmu /denver-pmu /aliases /spi@3210000 /spi@3230000 /spi@3240000
        /pwm@3280000 /pwm@3290000 /pwm@32a0000 /pwm@c340000
        /serial@3100000 /serial@3110000 /serial@c280000 /serial@3130000
        /combined-uart /interrupt-controller /tegra-rtcpu-trace /tegra_safety_ivc
        /tegra-aon-ivc-echo /aondbg /timer /rtc@c2a0000 /tegra-carveouts
        /mc_sid@2c00000 /smmu_test /mc /usb_cd /mailbox@3538000 /xotg
        /xhci@3530000 /xudc@3550000 /kfuse@0x3830000 /tachometer@39c0000
        """
    )
    keep_after_gic = _paths(
        """
        /tegra186-pm-irq /timer@3020000 /clock@5000000 /se_elp@3ad0000
        /tegra-hsp@c150000 /tegra-hsp@3c00000 /dma@2600000 /adma@2930000
        /agic-controller@2a41000 /hda@3510000 /adsp@2993000 /tegra_fiq_debugger
        /mttcan@c310000 /mttcan@c320000 /cpuidle /cpufreq@e070000 /bwmgr /hardwood
        /cluster_clk_priv@e090000
        /axi2apb@2390000 /axi2apb@23a0000 /axi2apb@23b0000 /axi2apb@23c0000 /axi2apb@23d0000
        /axip2p@2100000 /axip2p@2110000 /axip2p@2120000 /axip2p@2130000 /axip2p@2140000
        /axip2p@2150000 /axip2p@2160000 /axip2p@2170000 /axip2p@2180000 /axip2p@2190000
        /tegra-serr /tegra-firmwares /tegra-mce /nvdumper /hsp_top /pfsd /pwm-fan
        /thermal-fan-est /vi-bypass@15700000 /tegra_cec /soft_watchdog /bluedroid_pm
        /e3326_lens_ov5693@P5V27C /lens_imx274@A6V26 /bcmdhd_wlan
        /sdhci@3420000 /ufshci@2450000
        /pwm@32c0000 /pwm@32d0000 /pwm@32e0000 /pwm@32f0000
        /serial@3150000 /serial@c290000 /ether_qos_virt_test@2490000 /trusty
        /rtcpu@2993000 /sce@b000000 /aon_spi@c260000 /mttcan0-ivc /mttcan1-ivc
        /reserved-memory/generic_carveout /max16984-cdp /pmc@c370000 /pmc-iopower
        /interrupt-controller@3000000 /spi@3270000 /tegra-hsp@b150000 /chipid@100000
        /miscreg@00100000 /sound_ref /eqos_ape@2990000 /watchdog@30c0000
        /roc-flush@e080000 /generic-system-config /dpaux0 /dpaux1
        /tegra-pmc-blink-pwm /dummy-cool-dev /bcmdhd_pcie_wlan
        """
    )
    subtrees = _paths(
        """
        /sdhci@3460000 /sdhci@3440000 /sdhci@3420000 /sdhci@3400000
        /pinmux@2430000 /ahci-sata@3507000 /ufshci@2450000
        /i2c@3160000 /i2c@c240000 /i2c@3180000 /i2c@3190000 /bpmp_i2c
        /i2c@31b0000 /i2c@31c0000 /i2c@c250000 /i2c@31e0000
        /spdif_dit /spi@c260000 /ether_qos@2490000 /power-domain /trusty
        /thermal-zones /rtcpu@b000000 /sce-ivc-channels /rtcpu@2993000
        /ape-ivc-channels /sce@b000000 /actmon@d230000 /aon@c160000
        /reserved-memory /iommu@12000000 /pinctrl@3520000 /host1x /mipical /bpmp
        /gpio@2200000 /gpio@c2f0000 /pcie-controller@10003000
        /sound /ahub /adsp_audio /clocks /stm@8070000
        /ptm@9840000 /ptm@9940000 /ptm@9a40000 /ptm@9b40000 /ptm_bpmp@8a1c000
        /funnel_bccplex@9010000 /funnel_major@8010000 /replicator@0x8040000
        /etf@8030000 /tpiu@8060000 /etr@8050000 /funnel_minor@8820000
        /efuse@3820000 /i2c@31a0000 /csi_mipical /fixed-regulators
        /external-connection /backlight /mods-simple-bus /tfesd /bthrot_cdev
        /gpio-keys /tegra-camera-platform /plugin-manager /eeprom-manager
        /firmware /psci
        """
    )
    return Platform(
        name="tx2",
        gic_node_path=gic,
        free_plat_interrupts=(220 + TX2_GIC_LIC_INTID_BASE,),
        keep_devices=(*keep_before_gic, gic, *keep_after_gic),
        keep_device_and_subtree=subtrees,
        constants=_constants(
            GIC_LIC_INTID_BASE=TX2_GIC_LIC_INTID_BASE,
            MAX_IRQ=TX2_MAX_IRQ,
        ),
    )


def _zynq_family(name: str, gic: str) -> Platform:
    return Platform(
        name=name,
        gic_node_path=gic,
        free_plat_interrupts=(-1,),
        keep_devices=("/timer",),
        keep_device_and_subtree=(gic,),
        linux_bootcmdline="",
        linux_stdout="",
    )


_AMBA_GIC = "/amba_apu@0/interrupt-controller@f9010000"


def _ultra96v2() -> Platform:
    return _zynq_family("ultra96v2", _AMBA_GIC)


def _zynqmp(petalinux_2018_3: bool) -> Platform:
    gic = _AMBA_GIC if petalinux_2018_3 else "/axi/interrupt-controller@f9010000"
    return _zynq_family("zynqmp", gic)


_BUILDERS = {
    "exynos5410": _exynos5410,
    "exynos5422": _exynos5422,
    "odroidc2": _odroidc2,
    "qemu-arm-virt": _qemu_arm_virt,
    "tx1": _tx1,
    "tx2": _tx2,
    "ultra96v2": _ultra96v2,
}

_NAMES = tuple(sorted((*_BUILDERS, "tk1", "zynqmp")))


def get_platform(
    name: str, tk1_insecure: bool = False, petalinux_2018_3: bool = False
) -> Platform:
    """Return the settings of the board ``name``.

    ``tk1_insecure`` hands the TK1's secure devices to the guest;
    ``petalinux_2018_3`` selects the older zynqmp device-tree layout.
    Raises ValueError for an unknown board.
    """
    key = name.lower()
    if key == "tk1":
        return _tk1(tk1_insecure)
    if key == "zynqmp":
        return _zynqmp(petalinux_2018_3)
    try:
        builder = _BUILDERS[key]
    except KeyError:
        raise ValueError(f"unknown platform: {name!r}") from None
    return builder()


def platform_names() -> tuple[str, ...]:
    """Names of every known board, in alphabetical order."""
    return _NAMES