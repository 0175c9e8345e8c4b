import pytest

from guestvm.platforms import Platform, get_platform, platform_names


def test_platform_names_are_sorted_and_complete():
    names = platform_names()
    assert list(names) == sorted(names)
    assert set(names) == {
        "exynos5410",
        "exynos5422",
        "odroidc2",
        "qemu-arm-virt",
        "tk1",
        "tx1",
        "tx2",
        "ultra96v2",
        "zynqmp",
    }


@pytest.mark.parametrize("name", platform_names())
def test_every_platform_loads_under_its_name(name):
    platform = get_platform(name)
    assert platform.name == name
    assert platform.gic_node_path.startswith("/")


@pytest.mark.parametrize("name", platform_names())
def test_all_kept_paths_is_union_without_repeats(name):
    platform = get_platform(name)
    paths = platform.all_kept_paths()
    assert len(paths) == len(set(paths))
    assert set(paths) == set(
        platform.keep_devices
        + platform.keep_device_and_disable
        + platform.keep_device_and_subtree
        + platform.keep_device_and_subtree_and_disable
    )


@pytest.mark.parametrize("name", platform_names())
def test_gic_node_is_always_kept(name):
    platform = get_platform(name)
    assert platform.gic_node_path in platform.all_kept_paths()


def test_gic_paths_fixed_by_source():
    assert get_platform("qemu-arm-virt").gic_node_path == "/intc@8000000"
    assert get_platform("odroidc2").gic_node_path == "/soc/interrupt-controller@c4301000"
    assert get_platform("tx2").gic_node_path == "/interrupt-controller@3881000"


def test_lookup_is_case_insensitive():
    assert get_platform("TX1") == get_platform("tx1")


def test_unknown_platform_raises():
    with pytest.raises(ValueError):
        get_platform("no-such-board")


def test_zynqmp_gic_depends_on_petalinux_layout():
    assert get_platform("zynqmp").gic_node_path == "/axi/interrupt-controller@f9010000"
    old = get_platform("zynqmp", petalinux_2018_3=True)
    assert old.gic_node_path == "/amba_apu@0/interrupt-controller@f9010000"
    assert old.keep_device_and_subtree == (old.gic_node_path,)


def test_zynq_boards_have_empty_linux_strings():
    for name in ("zynqmp", "ultra96v2"):
        platform = get_platform(name)
        assert platform.linux_bootcmdline == ""
        assert platform.linux_stdout == ""
    assert get_platform("tx2").linux_bootcmdline is None


def test_tk1_secure_devices_move_between_lists():
    secure = get_platform("tk1")
    insecure = get_platform("tk1", tk1_insecure=True)
    assert "/rtc@7000e000" in secure.keep_device_and_disable
    assert "/rtc@7000e000" not in secure.keep_devices
    assert "/rtc@7000e000" in insecure.keep_devices
    assert "/rtc@7000e000" not in insecure.keep_device_and_disable
    assert "/host1x@50000000" in secure.keep_device_and_subtree_and_disable
    assert "/host1x@50000000" in insecure.keep_device_and_subtree
    assert insecure.keep_device_and_subtree_and_disable == ("/pcie@1003000",)
    assert set(secure.all_kept_paths()) == set(insecure.all_kept_paths())


def test_tk1_passes_through_sdmmc4_and_uartd():
    assert get_platform("tk1").linux_pt_irqs == (63, 122)


def test_boards_without_free_interrupts_use_minus_one():
    for name in ("tk1", "tx1", "zynqmp", "ultra96v2"):
        assert get_platform(name).free_plat_interrupts == (-1,)


def test_spi_offset_free_interrupts():
    for name in ("exynos5410", "exynos5422"):
        platform = get_platform(name)
        offset = platform.constants["IRQ_SPI_OFFSET"]
        assert platform.free_plat_interrupts == tuple(
            n + offset for n in (92, 93, 101, 102)
        )
    odroid = get_platform("odroidc2")
    assert odroid.free_plat_interrupts == (50 + odroid.constants["IRQ_SPI_OFFSET"],)


def test_exynos5410_vusb_constants():
    constants = get_platform("exynos5410").constants
    assert constants["VUSB_ADDRESS"] == 0x33330000
    assert constants["VUSB_IRQ"] == 198
    assert constants["VUSB_NBADGE"] == 0x123


def test_tx2_free_interrupt_uses_lic_base():
    platform = get_platform("tx2")
    base = platform.constants["GIC_LIC_INTID_BASE"]
    assert platform.free_plat_interrupts == (220 + base,)
    assert platform.constants["MAX_IRQ"] == base + 287


def test_tx1_duplicate_entries_collapse():
    platform = get_platform("tx1")
    assert platform.keep_device_and_subtree.count("/thermal-zones") == 2
    assert platform.all_kept_paths().count("/thermal-zones") == 1
    assert platform.all_kept_paths().count("/serial@70006300") == 1


def test_all_kept_paths_keeps_first_occurrence_order():
    platform = Platform(
        name="custom",
        gic_node_path="/gic",
        keep_devices=("/a", "/gic"),
        keep_device_and_disable=("/b", "/a"),
        keep_device_and_subtree=("/c",),
    )
    assert platform.all_kept_paths() == ("/a", "/gic", "/b", "/c")


def test_platforms_are_immutable():
    platform = get_platform("odroidc2")
    with pytest.raises(AttributeError):
        platform.name = "other"
    assert platform.name == "odroidc2"
    assert platform == get_platform("odroidc2")