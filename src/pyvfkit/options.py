"""Parsed vfkit command-line surface and its conversion to a VirtualMachine.

VmOptions holds the flags exactly as given (memory in MiB, raw device
specs); to_virtual_machine() validates flag combinations and decodes every
spec into the component models.

Flag rules:
    - --kernel, --initrd and --kernel-cmdline go together or not at all
    - that group is mutually exclusive with --bootloader
    - one of the two boot methods is required
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pyvfkit import constants
from pyvfkit.exceptions import FlagConflictError
from pyvfkit.list_value import StringListValue
from pyvfkit.models import LinuxBootloader, VirtualMachine
from pyvfkit.spec_parser import parse_bootloader, parse_device, parse_timesync

_KERNEL_FLAGS = ("--kernel", "--initrd", "--kernel-cmdline")


class VmOptions(BaseModel):
    """Command-line options of the vfkit launcher.

    Attributes:
        vcpus: --cpus, number of virtual CPUs
        memory_mib: --memory, guest RAM in MiB
        vmlinuz_path: --kernel
        kernel_cmdline: --kernel-cmdline
        initrd_path: --initrd
        bootloader: --bootloader elements (None when the flag is absent)
        timesync: --timesync value (None when the flag is absent)
        devices: --device values, one raw spec per occurrence
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    vcpus: int = Field(default=constants.DEFAULT_CPUS, ge=0)
    memory_mib: int = Field(default=constants.DEFAULT_MEMORY_MIB, ge=0)

    # None means the flag was not given; "" is an explicit empty value
    vmlinuz_path: str | None = None
    kernel_cmdline: str | None = None
    initrd_path: str | None = None

    bootloader: StringListValue | None = None

    timesync: str | None = None

    devices: list[str] = Field(default_factory=list)

    def validate_flags(self) -> None:
        """Check boot flag combinations.

        Raises:
            FlagConflictError: Partial kernel group, kernel group combined
                with --bootloader, or no boot method at all
        """
        kernel_values = (self.vmlinuz_path, self.initrd_path, self.kernel_cmdline)
        given = [flag for flag, value in zip(_KERNEL_FLAGS, kernel_values, strict=True) if value is not None]

        if given and self.bootloader is not None:
            raise FlagConflictError(
                f"{', '.join(given)} cannot be used together with --bootloader",
                context={"flags": [*given, "--bootloader"]},
            )
        if given and len(given) != len(_KERNEL_FLAGS):
            missing = [flag for flag in _KERNEL_FLAGS if flag not in given]
            raise FlagConflictError(
                f"{', '.join(_KERNEL_FLAGS)} must be given together (missing {', '.join(missing)})",
                context={"flags": given, "missing": missing},
            )
        if not given and self.bootloader is None:
            raise FlagConflictError(
                "No bootloader: use --bootloader or --kernel/--initrd/--kernel-cmdline",
                context={"flags": []},
            )

    def to_virtual_machine(self) -> VirtualMachine:
        """Build the VirtualMachine these options describe.

        Devices keep command-line order; --timesync is appended last.

        Raises:
            FlagConflictError: See validate_flags()
            SpecSyntaxError: A --bootloader/--device/--timesync value is malformed
            InvalidHardwareAddressError: A virtio-net mac does not parse
        """
        self.validate_flags()

        if self.bootloader is not None:
            bootloader = parse_bootloader(self.bootloader.get_slice())
        else:
            bootloader = LinuxBootloader(
                vmlinuz_path=self.vmlinuz_path or "",
                kernel_cmdline=self.kernel_cmdline or "",
                initrd_path=self.initrd_path or "",
            )

        vm = VirtualMachine(
            vcpus=self.vcpus,
            memory_bytes=self.memory_mib * constants.MIB,
            bootloader=bootloader,
        )
        for raw in self.devices:
            vm.add_device(parse_device(raw))
        if self.timesync is not None:
            vm.add_device(parse_timesync(self.timesync))
        return vm
