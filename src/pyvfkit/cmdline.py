"""vfkit command line builder.

Turns a VirtualMachine into the ordered argument list the vfkit launcher
expects.  Token layout is a wire contract with the launcher:

    [--cpus N] [--memory N]
    --kernel P --initrd P --kernel-cmdline S | --bootloader efi,variable-store=P[,create]
    (--device virtio-vsock,port=N,socketURL=S,{listen|connect})*
    (--device virtio-blk,path=P)*
    (--device virtio-rng)*
    (--device virtio-net,nat[,mac=ADDR])*
    (--device virtio-serial,logFilePath=P)*
    (--device virtio-fs,sharedDir=P[,mountTag=S])*
    [--timesync [vsockPort=N]]

Devices are emitted in insertion order; nothing is reordered or merged.
Encoding is all-or-nothing: the first invalid component raises and no
tokens are returned.
"""

from typing import assert_never

from pyvfkit import constants
from pyvfkit._logging import get_logger
from pyvfkit.exceptions import MissingBootloaderError, MissingRequiredFieldError, UnsupportedConfigurationError
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
)
from pyvfkit.settings import Settings

logger = get_logger(__name__)

Component = (
    LinuxBootloader | EFIBootloader | VirtioVsock | VirtioBlk | VirtioRng | VirtioNet | VirtioSerial | VirtioFs | TimeSync
)


def _missing(component: str, field: str, message: str) -> MissingRequiredFieldError:
    return MissingRequiredFieldError(message, component=component, field=field)


def _device(value: str) -> list[str]:
    return [constants.FLAG_DEVICE, value]


def render(component: Component) -> list[str]:  # noqa: PLR0911, PLR0912
    """Validate a component and render it into launcher tokens.

    Only field presence is checked (non-empty strings, non-zero ports);
    paths are not checked for existence.

    Args:
        component: Bootloader, device or timesync model

    Returns:
        Launcher tokens for this component

    Raises:
        MissingRequiredFieldError: A required field is empty or zero
        UnsupportedConfigurationError: virtio-net without NAT
    """
    match component:
        case LinuxBootloader():
            if not component.vmlinuz_path:
                raise _missing(constants.BOOTLOADER_LINUX, "vmlinuz_path", "Missing kernel path")
            if not component.initrd_path:
                raise _missing(constants.BOOTLOADER_LINUX, "initrd_path", "Missing initrd path")
            if not component.kernel_cmdline:
                raise _missing(constants.BOOTLOADER_LINUX, "kernel_cmdline", "Missing kernel command line")
            return [
                constants.FLAG_KERNEL,
                component.vmlinuz_path,
                constants.FLAG_INITRD,
                component.initrd_path,
                constants.FLAG_KERNEL_CMDLINE,
                component.kernel_cmdline,
            ]

        case EFIBootloader():
            if not component.efi_variable_store_path:
                raise _missing(constants.BOOTLOADER_EFI, "efi_variable_store_path", "Missing EFI store path")
            value = f"{constants.BOOTLOADER_EFI},variable-store={component.efi_variable_store_path}"
            if component.create_variable_store:
                value += ",create"
            return [constants.FLAG_BOOTLOADER, value]

        case VirtioVsock():
            if component.port == 0:
                raise _missing(constants.DEVICE_VSOCK, "port", "virtio-vsock needs both a port and a socket URL")
            if not component.socket_url:
                raise _missing(constants.DEVICE_VSOCK, "socket_url", "virtio-vsock needs both a port and a socket URL")
            direction = "listen" if component.listen else "connect"
            return _device(
                f"{constants.DEVICE_VSOCK},port={component.port},socketURL={component.socket_url},{direction}"
            )

        case VirtioBlk():
            if not component.image_path:
                raise _missing(constants.DEVICE_BLK, "image_path", "virtio-blk needs the path to a disk image")
            return _device(f"{constants.DEVICE_BLK},path={component.image_path}")

        case VirtioRng():
            return _device(constants.DEVICE_RNG)

        case VirtioNet():
            if not component.nat:
                raise UnsupportedConfigurationError(
                    "virtio-net only supports 'nat' networking",
                    context={"component": constants.DEVICE_NET},
                )
            value = f"{constants.DEVICE_NET},nat"
            if component.mac_address:
                value += f",mac={component.mac_address}"
            return _device(value)

        case VirtioSerial():
            if not component.log_file:
                raise _missing(constants.DEVICE_SERIAL, "log_file", "virtio-serial needs the path to the log file")
            return _device(f"{constants.DEVICE_SERIAL},logFilePath={component.log_file}")

        case VirtioFs():
            if not component.shared_dir:
                raise _missing(
                    constants.DEVICE_FS, "shared_dir", "virtio-fs needs the path to the directory to share"
                )
            value = f"{constants.DEVICE_FS},sharedDir={component.shared_dir}"
            if component.mount_tag:
                value += f",mountTag={component.mount_tag}"
            return _device(value)

        case TimeSync():
            # An unset port still emits the flag, with an empty value
            value = f"vsockPort={component.vsock_port}" if component.vsock_port != 0 else ""
            return [constants.FLAG_TIMESYNC, value]

        case _:
            assert_never(component)


def build_cmdline(vm: VirtualMachine, *, memory_unit: int = 1) -> list[str]:
    """Build the launcher argument list for vm.

    Args:
        vm: Virtual machine description (not modified)
        memory_unit: Bytes per unit of the --memory value.  The default
            emits memory_bytes literally; the vfkit binary itself takes
            mebibytes (constants.MIB).

    Returns:
        Ordered launcher tokens (without the launcher binary)

    Raises:
        MissingBootloaderError: vm has no bootloader
        MissingRequiredFieldError: A component lacks a required field
        UnsupportedConfigurationError: A component uses an unsupported mode, or
            memory_bytes is not a whole number of memory_unit
    """
    args: list[str] = []

    if vm.vcpus != 0:
        args.extend([constants.FLAG_CPUS, str(vm.vcpus)])
    if vm.memory_bytes != 0:
        memory, remainder = divmod(vm.memory_bytes, memory_unit)
        if remainder:
            raise UnsupportedConfigurationError(
                f"Memory size {vm.memory_bytes} is not a multiple of {memory_unit} bytes",
                context={"memory_bytes": vm.memory_bytes, "memory_unit": memory_unit},
            )
        args.extend([constants.FLAG_MEMORY, str(memory)])

    if vm.bootloader is None:
        raise MissingBootloaderError("Missing bootloader configuration")
    args.extend(render(vm.bootloader))

    for dev in vm.devices:
        args.extend(render(dev))

    logger.debug(
        "Built vfkit command line",
        extra={
            "bootloader": vm.bootloader.kind,
            "devices": [dev.kind for dev in vm.devices],
            "token_count": len(args),
        },
    )
    return args


def build_argv(vm: VirtualMachine, settings: Settings | None = None, *, memory_unit: int = 1) -> list[str]:
    """Build the full launcher argv: the vfkit binary followed by build_cmdline(vm).

    The launcher is not started here; hand the result to subprocess.
    """
    settings = settings or Settings()
    return [str(settings.vfkit_bin), *build_cmdline(vm, memory_unit=memory_unit)]
