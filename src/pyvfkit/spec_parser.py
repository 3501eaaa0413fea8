"""Decoder for raw bootloader, device and timesync spec strings.

Each --device occurrence is one raw spec ``kind,key=value,...`` split with
the same quote-aware rules as StringListValue.  Bare words (``nat``,
``create``, ``listen``) are boolean flags.  A value may be quoted to carry
commas, e.g. ``linux,kernel=/vmlinuz,initrd=/initrd,cmdline="console=hvc0,115200"``.

Forms:
    linux,kernel=P,initrd=P,cmdline=S
    efi,variable-store=P[,create]
    virtio-vsock,port=N,socketURL=S[,listen|,connect]
    virtio-blk,path=P
    virtio-rng
    virtio-net,nat[,mac=ADDR]
    virtio-serial,logFilePath=P
    virtio-fs,sharedDir=P[,mountTag=S]
    (timesync) [vsockPort=N]
"""

from collections.abc import Callable

from pyvfkit import constants
from pyvfkit._logging import get_logger
from pyvfkit.exceptions import SpecSyntaxError
from pyvfkit.list_value import split_list, unquote
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
    parse_mac,
)

logger = get_logger(__name__)

DeviceModel = VirtioVsock | VirtioBlk | VirtioRng | VirtioNet | VirtioSerial | VirtioFs
BootloaderModel = LinuxBootloader | EFIBootloader


def parse_options(elements: list[str]) -> tuple[str, dict[str, str | None]]:
    """Split spec elements into the variant tag and its options.

    Args:
        elements: Decoded list elements, variant tag first

    Returns:
        (kind, options) where bare flags map to None

    Raises:
        SpecSyntaxError: Empty spec, empty key or duplicate key
    """
    if not elements or not elements[0]:
        raise SpecSyntaxError("Empty spec: expected a variant name", context={"elements": elements})

    kind, *rest = elements
    options: dict[str, str | None] = {}
    for element in rest:
        key, sep, value = element.partition("=")
        if not key:
            raise SpecSyntaxError(f"Empty option name in {kind!r} spec: {element!r}", context={"kind": kind})
        if key in options:
            raise SpecSyntaxError(f"Duplicate option {key!r} in {kind!r} spec", context={"kind": kind, "option": key})
        options[key] = unquote(value) if sep else None
    return kind, options


class _SpecOptions:
    """Consumes the options of one spec; leftovers are reported by finish()."""

    def __init__(self, kind: str, options: dict[str, str | None]) -> None:
        self.kind = kind
        self._options = dict(options)

    def _error(self, message: str, key: str) -> SpecSyntaxError:
        return SpecSyntaxError(message, context={"kind": self.kind, "option": key})

    def value(self, key: str) -> str:
        """Pop a key=value option ("" when absent)."""
        if key not in self._options:
            return ""
        value = self._options.pop(key)
        if value is None:
            raise self._error(f"{self.kind}: option {key!r} needs a value ({key}=...)", key)
        return value

    def flag(self, key: str) -> bool:
        """Pop a bare boolean option."""
        if key not in self._options:
            return False
        if self._options.pop(key) is not None:
            raise self._error(f"{self.kind}: option {key!r} does not take a value", key)
        return True

    def integer(self, key: str) -> int:
        """Pop a non-negative decimal option (0 when absent)."""
        text = self.value(key)
        if not text:
            return 0
        if not text.isdecimal():
            raise self._error(f"{self.kind}: option {key!r} must be a non-negative integer, got {text!r}", key)
        return int(text)

    def finish(self) -> None:
        if self._options:
            unknown = sorted(self._options)
            raise SpecSyntaxError(
                f"{self.kind}: unknown option(s) {', '.join(unknown)}",
                context={"kind": self.kind, "options": unknown},
            )


# ============================================================================
# Devices
# ============================================================================


def _parse_vsock(opts: _SpecOptions) -> VirtioVsock:
    port = opts.integer("port")
    socket_url = opts.value("socketURL")
    listen = opts.flag("listen")
    connect = opts.flag("connect")
    if listen and connect:
        raise SpecSyntaxError(
            f"{constants.DEVICE_VSOCK}: 'listen' and 'connect' are mutually exclusive",
            context={"kind": constants.DEVICE_VSOCK},
        )
    return VirtioVsock(port=port, socket_url=socket_url, listen=listen)


def _parse_blk(opts: _SpecOptions) -> VirtioBlk:
    return VirtioBlk(image_path=opts.value("path"))


def _parse_rng(opts: _SpecOptions) -> VirtioRng:  # noqa: ARG001
    return VirtioRng()


def _parse_net(opts: _SpecOptions) -> VirtioNet:
    nat = opts.flag("nat")
    mac = opts.value("mac")
    # parse_mac raises InvalidHardwareAddressError directly instead of a ValidationError
    return VirtioNet(nat=nat, mac_address=parse_mac(mac) if mac else None)


def _parse_serial(opts: _SpecOptions) -> VirtioSerial:
    return VirtioSerial(log_file=opts.value("logFilePath"))


def _parse_fs(opts: _SpecOptions) -> VirtioFs:
    return VirtioFs(shared_dir=opts.value("sharedDir"), mount_tag=opts.value("mountTag"))


_DEVICE_PARSERS: dict[str, Callable[[_SpecOptions], DeviceModel]] = {
    constants.DEVICE_VSOCK: _parse_vsock,
    constants.DEVICE_BLK: _parse_blk,
    constants.DEVICE_RNG: _parse_rng,
    constants.DEVICE_NET: _parse_net,
    constants.DEVICE_SERIAL: _parse_serial,
    constants.DEVICE_FS: _parse_fs,
}


def parse_device(raw: str) -> DeviceModel:
    """Decode one --device value into a device model.

    Required fields are not checked here; encoding reports them.

    Raises:
        SpecSyntaxError: Unknown device, unknown option or malformed value
        InvalidHardwareAddressError: virtio-net mac does not parse
    """
    kind, options = parse_options(split_list(raw))
    parser = _DEVICE_PARSERS.get(kind)
    if parser is None:
        raise SpecSyntaxError(
            f"Unknown device type: {kind!r}",
            context={"kind": kind, "supported": sorted(_DEVICE_PARSERS)},
        )
    opts = _SpecOptions(kind, options)
    device = parser(opts)
    opts.finish()
    logger.debug("Parsed device spec", extra={"kind": kind, "spec": raw})
    return device


# ============================================================================
# Bootloaders
# ============================================================================


def _parse_linux(opts: _SpecOptions) -> LinuxBootloader:
    return LinuxBootloader(
        vmlinuz_path=opts.value("kernel"),
        initrd_path=opts.value("initrd"),
        kernel_cmdline=opts.value("cmdline"),
    )


def _parse_efi(opts: _SpecOptions) -> EFIBootloader:
    return EFIBootloader(
        efi_variable_store_path=opts.value("variable-store"),
        create_variable_store=opts.flag("create"),
    )


_BOOTLOADER_PARSERS: dict[str, Callable[[_SpecOptions], BootloaderModel]] = {
    constants.BOOTLOADER_LINUX: _parse_linux,
    constants.BOOTLOADER_EFI: _parse_efi,
}


def parse_bootloader(elements: list[str]) -> BootloaderModel:
    """Decode the elements of a --bootloader flag into a bootloader model.

    Args:
        elements: StringListValue contents, e.g. ["efi", "variable-store=/s", "create"]

    Raises:
        SpecSyntaxError: Unknown bootloader, unknown option or malformed value
    """
    kind, options = parse_options(elements)
    parser = _BOOTLOADER_PARSERS.get(kind)
    if parser is None:
        raise SpecSyntaxError(
            f"Unknown bootloader type: {kind!r}",
            context={"kind": kind, "supported": sorted(_BOOTLOADER_PARSERS)},
        )
    opts = _SpecOptions(kind, options)
    bootloader = parser(opts)
    opts.finish()
    return bootloader


def parse_timesync(raw: str) -> TimeSync:
    """Decode a --timesync value ("" or "vsockPort=N")."""
    _, options = parse_options([constants.TIMESYNC, *split_list(raw)])
    opts = _SpecOptions(constants.TIMESYNC, options)
    timesync = TimeSync(vsock_port=opts.integer("vsockPort"))
    opts.finish()
    return timesync
