[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "guestvm"
version = "0.1.0"
description = "Emulated MC146818 CMOS real-time clock and ARM guest platform tables for virtual machine monitors"
requires-python = ">=3.10"
keywords = ["virtualization", "rtc", "mc146818", "cmos", "device-tree", "arm", "smc", "tegra", "zynqmp"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["guestvm"]

[tool.pytest.ini_options]
addopts = "-ra"
