"""Constants for pyvfkit: launcher flag names, variant tags and defaults."""

from typing import Final

# ============================================================================
# Launcher Flags
# ============================================================================

FLAG_CPUS: Final[str] = "--cpus"
FLAG_MEMORY: Final[str] = "--memory"
FLAG_KERNEL: Final[str] = "--kernel"
FLAG_INITRD: Final[str] = "--initrd"
FLAG_KERNEL_CMDLINE: Final[str] = "--kernel-cmdline"
FLAG_BOOTLOADER: Final[str] = "--bootloader"
FLAG_DEVICE: Final[str] = "--device"
FLAG_TIMESYNC: Final[str] = "--timesync"

# ============================================================================
# Variant Tags
# ============================================================================
# First comma-separated component of a --bootloader / --device value.

BOOTLOADER_LINUX: Final[str] = "linux"
BOOTLOADER_EFI: Final[str] = "efi"

DEVICE_VSOCK: Final[str] = "virtio-vsock"
DEVICE_BLK: Final[str] = "virtio-blk"
DEVICE_RNG: Final[str] = "virtio-rng"
DEVICE_NET: Final[str] = "virtio-net"
DEVICE_SERIAL: Final[str] = "virtio-serial"
DEVICE_FS: Final[str] = "virtio-fs"

TIMESYNC: Final[str] = "timesync"

# ============================================================================
# Command-Line Defaults
# ============================================================================

DEFAULT_CPUS: Final[int] = 1
"""Default number of virtual CPUs for --cpus."""

DEFAULT_MEMORY_MIB: Final[int] = 512
"""Default guest RAM for --memory, in mebibytes."""

MIB: Final[int] = 1024 * 1024
"""Bytes per mebibyte (command line takes MiB, VirtualMachine stores bytes)."""

DEFAULT_VFKIT_BIN: Final[str] = "vfkit"
"""Launcher executable, resolved through PATH when not absolute."""
