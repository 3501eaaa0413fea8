"""pyvfkit: build vfkit command lines from Python.

Describe a virtual machine (CPUs, memory, bootloader, virtio devices) and
turn it into the argument list the vfkit launcher expects.

Quick Start:
    ```python
    import subprocess

    from pyvfkit import build_argv, new_linux_bootloader, new_virtio_net, new_virtual_machine

    bootloader = new_linux_bootloader("/vm/vmlinuz", "console=hvc0 root=/dev/vda", "/vm/initrd")
    vm = new_virtual_machine(vcpus=2, memory_bytes=2 * 1024**3, bootloader=bootloader)
    vm.add_device(new_virtio_net("52:54:00:12:34:56"))

    subprocess.run(build_argv(vm), check=True)
    ```

Repeated list flags:
    ```python
    from pyvfkit import StringListValue

    value = StringListValue()
    value.set('"one,two"')
    value.set("three")
    value.get_slice()  # ["one,two", "three"]
    ```
"""

from pyvfkit.cmdline import build_argv, build_cmdline, render
from pyvfkit.exceptions import (
    FlagConflictError,
    InputValidationError,
    InvalidHardwareAddressError,
    MissingBootloaderError,
    MissingRequiredFieldError,
    PermanentError,
    SpecSyntaxError,
    UnsupportedConfigurationError,
    VfkitError,
    VmConfigError,
)
from pyvfkit.list_value import StringListValue, join_list, split_list
from pyvfkit.models import (
    EFIBootloader,
    LinuxBootloader,
    TimeSync,
    VirtioBlk,
    VirtioFs,
    VirtioNet,
    VirtioRng,
    VirtioSerial,
    VirtioVsock,
    VirtualMachine,
    new_efi_bootloader,
    new_linux_bootloader,
    new_timesync,
    new_virtio_blk,
    new_virtio_fs,
    new_virtio_net,
    new_virtio_rng,
    new_virtio_serial,
    new_virtio_vsock,
    new_virtual_machine,
    parse_mac,
)
from pyvfkit.options import VmOptions
from pyvfkit.settings import Settings
from pyvfkit.spec_parser import parse_bootloader, parse_device, parse_timesync

__all__ = [
    "EFIBootloader",
    "FlagConflictError",
    "InputValidationError",
    "InvalidHardwareAddressError",
    "LinuxBootloader",
    "MissingBootloaderError",
    "MissingRequiredFieldError",
    "PermanentError",
    "Settings",
    "SpecSyntaxError",
    "StringListValue",
    "TimeSync",
    "UnsupportedConfigurationError",
    "VfkitError",
    "VirtioBlk",
    "VirtioFs",
    "VirtioNet",
    "VirtioRng",
    "VirtioSerial",
    "VirtioVsock",
    "VirtualMachine",
    "VmConfigError",
    "VmOptions",
    "build_argv",
    "build_cmdline",
    "join_list",
    "new_efi_bootloader",
    "new_linux_bootloader",
    "new_timesync",
    "new_virtio_blk",
    "new_virtio_fs",
    "new_virtio_net",
    "new_virtio_rng",
    "new_virtio_serial",
    "new_virtio_vsock",
    "new_virtual_machine",
    "parse_bootloader",
    "parse_device",
    "parse_mac",
    "parse_timesync",
    "render",
    "split_list",
]

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyvfkit")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"
