"""Component models for a vfkit virtual machine.

A VirtualMachine holds a CPU/memory budget, one bootloader and an ordered
list of devices.  Each bootloader and device is a small pydantic model with
a ``kind`` discriminator naming its variant tag on the launcher command line.
Models only hold values; validation of required fields and rendering into
launcher tokens happens in pyvfkit.cmdline.

Example:
    ```python
    from pyvfkit.models import new_efi_bootloader, new_virtio_blk, new_virtual_machine

    vm = new_virtual_machine(2, 2 * 1024**3, new_efi_bootloader("/tmp/efi-store", create=True))
    vm.add_device(new_virtio_blk("/tmp/disk.img"))
    vm.to_cmdline()
    ```
"""

from __future__ import annotations

import re
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pyvfkit.exceptions import InvalidHardwareAddressError

# ============================================================================
# Hardware Addresses
# ============================================================================
# Accepted forms (IEEE 802 MAC-48, EUI-48, EUI-64, 20-octet IPoIB):
#   00:00:5e:00:53:01   00-00-5e-00-53-01   0000.5e00.5301

_MAC_OCTET_COUNTS = (6, 8, 20)
_HEX_PAIR = re.compile(r"[0-9a-fA-F]{2}")
_HEX_QUAD = re.compile(r"[0-9a-fA-F]{4}")


def parse_mac(text: str) -> str:
    """Parse a hardware address into lowercase colon-separated form.

    Args:
        text: MAC address in colon, hyphen or dotted-quad notation

    Returns:
        Normalized address, e.g. "00:00:5e:00:53:01"

    Raises:
        InvalidHardwareAddressError: If text is not a valid hardware address
    """
    octets: list[str] = []
    if len(text) > 2 and text[2] in ":-":  # noqa: PLR2004
        parts = text.split(text[2])
        if all(_HEX_PAIR.fullmatch(part) for part in parts):
            octets = parts
    elif len(text) > 4 and text[4] == ".":  # noqa: PLR2004
        parts = text.split(".")
        if all(_HEX_QUAD.fullmatch(part) for part in parts):
            octets = [octet for part in parts for octet in (part[:2], part[2:])]

    if len(octets) not in _MAC_OCTET_COUNTS:
        raise InvalidHardwareAddressError(
            f"Invalid MAC address: {text!r}",
            context={"mac_address": text},
        )
    return ":".join(octet.lower() for octet in octets)


# ============================================================================
# Bootloaders
# ============================================================================


class VmComponent(BaseModel):
    """Base class for all VM components (bootloaders, devices, timesync)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: str = Field(description="Variant tag on the launcher command line")


class LinuxBootloader(VmComponent):
    """Direct kernel boot: kernel image, initrd and kernel command line.

    All three fields are required.  On ARM64 the kernel must be uncompressed.
    """

    kind: Literal["linux"] = Field(default="linux")  # type: ignore[assignment]
    vmlinuz_path: str = Field(default="", description="Path to the guest kernel")
    kernel_cmdline: str = Field(default="", description="Guest kernel command line")
    initrd_path: str = Field(default="", description="Path to the guest initrd")


class EFIBootloader(VmComponent):
    """EFI boot with a variable store file."""

    kind: Literal["efi"] = Field(default="efi")  # type: ignore[assignment]
    efi_variable_store_path: str = Field(default="", description="Path to the EFI variable store")
    create_variable_store: bool = Field(default=False, description="Create the store file if missing")


Bootloader = Annotated[LinuxBootloader | EFIBootloader, Field(discriminator="kind")]

# ============================================================================
# Devices
# ============================================================================


class VirtioVsock(VmComponent):
    """virtio-vsock device for 2-way host/guest communication.

    Attributes:
        port: vsock port (see `man vsock`)
        socket_url: Path to the host unix socket bridged to the vsock port
        listen: True when the host listens for guest connections,
            False when the guest listens and the host connects
    """

    kind: Literal["virtio-vsock"] = Field(default="virtio-vsock")  # type: ignore[assignment]
    port: int = Field(default=0, ge=0)
    socket_url: str = ""
    listen: bool = False


class VirtioBlk(VmComponent):
    """Disk device backed by a raw image file."""

    kind: Literal["virtio-blk"] = Field(default="virtio-blk")  # type: ignore[assignment]
    image_path: str = ""


class VirtioRng(VmComponent):
    """Random number generator feeding entropy to the guest."""

    kind: Literal["virtio-rng"] = Field(default="virtio-rng")  # type: ignore[assignment]


class VirtioNet(VmComponent):
    """Network device.  Only NAT networking is supported by the launcher."""

    kind: Literal["virtio-net"] = Field(default="virtio-net")  # type: ignore[assignment]
    nat: bool = True
    mac_address: str | None = Field(default=None, description="Normalized MAC address (None = launcher picks)")

    @field_validator("mac_address", mode="before")
    @classmethod
    def validate_mac_address(cls, v: str | None) -> str | None:
        """Normalize the MAC address; empty string means unset."""
        if not v:
            return None
        return parse_mac(v)


class VirtioSerial(VmComponent):
    """Serial port whose guest output is written to a log file."""

    kind: Literal["virtio-serial"] = Field(default="virtio-serial")  # type: ignore[assignment]
    log_file: str = ""


class VirtioFs(VmComponent):
    """Directory shared with the guest.

    Mount it in the guest with `mount -t virtiofs <mount_tag> /some/dir`.
    """

    kind: Literal["virtio-fs"] = Field(default="virtio-fs")  # type: ignore[assignment]
    shared_dir: str = ""
    mount_tag: str = ""


class TimeSync(VmComponent):
    """Sync guest time after host sleep (needs qemu-guest-agent on a vsock port)."""

    kind: Literal["timesync"] = Field(default="timesync")  # type: ignore[assignment]
    vsock_port: int = Field(default=0, ge=0, description="qemu-guest-agent vsock port (0 = unset)")


Device = Annotated[
    VirtioVsock | VirtioBlk | VirtioRng | VirtioNet | VirtioSerial | VirtioFs | TimeSync,
    Field(discriminator="kind"),
]

# ============================================================================
# Virtual Machine
# ============================================================================


class VirtualMachine(BaseModel):
    """Top-level VM description: resources, bootloader and devices.

    vcpus and memory_bytes of 0 omit --cpus / --memory and leave the choice
    to the launcher.  A missing bootloader is only reported when encoding.
    """

    model_config = ConfigDict(extra="forbid")

    vcpus: int = Field(default=0, ge=0, description="Number of virtual CPUs (0 = launcher default)")
    memory_bytes: int = Field(default=0, ge=0, description="Guest RAM in bytes (0 = launcher default)")
    bootloader: Bootloader | None = None
    devices: list[Device] = Field(default_factory=list)

    def add_device(self, dev: Device) -> None:
        """Append a device; order is kept and duplicates are allowed."""
        self.devices.append(dev)

    def to_cmdline(self) -> list[str]:
        """Encode this VM into launcher tokens (see pyvfkit.cmdline.build_cmdline)."""
        from pyvfkit.cmdline import build_cmdline  # noqa: PLC0415

        return build_cmdline(self)


# ============================================================================
# Constructors
# ============================================================================


def new_virtual_machine(vcpus: int, memory_bytes: int, bootloader: LinuxBootloader | EFIBootloader | None) -> VirtualMachine:
    return VirtualMachine(vcpus=vcpus, memory_bytes=memory_bytes, bootloader=bootloader)


def new_linux_bootloader(vmlinuz_path: str, kernel_cmdline: str, initrd_path: str) -> LinuxBootloader:
    return LinuxBootloader(vmlinuz_path=vmlinuz_path, kernel_cmdline=kernel_cmdline, initrd_path=initrd_path)


def new_efi_bootloader(efi_variable_store_path: str, create: bool = False) -> EFIBootloader:
    return EFIBootloader(efi_variable_store_path=efi_variable_store_path, create_variable_store=create)


def new_virtio_vsock(port: int, socket_url: str, listen: bool = False) -> VirtioVsock:
    return VirtioVsock(port=port, socket_url=socket_url, listen=listen)


def new_virtio_blk(image_path: str) -> VirtioBlk:
    return VirtioBlk(image_path=image_path)


def new_virtio_rng() -> VirtioRng:
    return VirtioRng()


def new_virtio_net(mac_address: str = "") -> VirtioNet:
    """Create a NAT network device.

    Raises:
        InvalidHardwareAddressError: If mac_address is set but does not parse
    """
    return VirtioNet(nat=True, mac_address=parse_mac(mac_address) if mac_address else None)


def new_virtio_serial(log_file: str) -> VirtioSerial:
    return VirtioSerial(log_file=log_file)


def new_virtio_fs(shared_dir: str, mount_tag: str = "") -> VirtioFs:
    return VirtioFs(shared_dir=shared_dir, mount_tag=mount_tag)


def new_timesync(vsock_port: int = 0) -> TimeSync:
    return TimeSync(vsock_port=vsock_port)

