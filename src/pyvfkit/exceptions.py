"""Exception hierarchy for pyvfkit.

All exceptions inherit from VfkitError base class.

Hierarchy:
    VfkitError (base)
    ├── PermanentError (configuration will not encode as-is)
    │   └── VmConfigError
    │       ├── MissingRequiredFieldError      ← empty path / zero port
    │       ├── MissingBootloaderError         ← VM has no bootloader
    │       └── UnsupportedConfigurationError  ← e.g. non-NAT networking
    └── InputValidationError (caller-bug marker base)
        ├── InvalidHardwareAddressError        ← MAC string does not parse
        ├── SpecSyntaxError                    ← malformed device/bootloader spec
        └── FlagConflictError                  ← incompatible command-line flags
"""

from __future__ import annotations

from typing import Any


class VfkitError(Exception):
    """Base exception for all pyvfkit errors with structured context.

    Attributes:
        message: Human-readable error message
        context: Dictionary of structured error context for logging/debugging
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class PermanentError(VfkitError):
    """Base for errors that won't go away without changing the configuration."""


class VmConfigError(PermanentError):
    """Invalid VM configuration.

    Raised while encoding a VirtualMachine or one of its components into
    launcher tokens.  Encoding is all-or-nothing: when this is raised no
    tokens are returned.
    """


class MissingRequiredFieldError(VmConfigError):
    """A required field of a bootloader or device is empty or zero.

    Attributes:
        component: Variant tag of the component (e.g. "virtio-vsock")
        field: Name of the missing field
    """

    def __init__(
        self,
        message: str,
        component: str,
        field: str,
        context: dict[str, Any] | None = None,
    ):
        ctx = dict(context or {})
        ctx.update({"component": component, "field": field})
        super().__init__(message, ctx)
        self.component = component
        self.field = field


class MissingBootloaderError(VmConfigError):
    """VirtualMachine has no bootloader attached."""


class UnsupportedConfigurationError(VmConfigError):
    """Field combination the launcher does not support (e.g. non-NAT virtio-net)."""


class InputValidationError(VfkitError):
    """Base for input validation errors (caller bugs, not encoder failures).

    The caller passed text that cannot be turned into a component; it
    should fix the input and retry.
    """


class InvalidHardwareAddressError(InputValidationError, ValueError):
    """MAC address string failed to parse.

    Also a ValueError so pydantic validators report it as a ValidationError.
    """


class SpecSyntaxError(InputValidationError):
    """Raw device/bootloader/timesync spec string is malformed.

    Raised for unknown variant tags, unknown or duplicate keys, and
    values of the wrong type.
    """


class FlagConflictError(InputValidationError):
    """Command-line flags were combined in a way the launcher rejects.

    Example: --kernel given together with --bootloader, or --kernel
    without --initrd and --kernel-cmdline.
    """
