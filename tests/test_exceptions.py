"""Tests for the pyvfkit exception hierarchy."""

from pyvfkit.exceptions import (
    InputValidationError,
    InvalidHardwareAddressError,
    MissingRequiredFieldError,
    PermanentError,
    VfkitError,
    VmConfigError,
)


class TestMissingRequiredFieldError:
    """Tests for MissingRequiredFieldError context handling."""

    def test_context_holds_component_and_field(self) -> None:
        exc = MissingRequiredFieldError("Missing kernel path", component="linux", field="vmlinuz_path")
        assert exc.context == {"component": "linux", "field": "vmlinuz_path"}
        assert (exc.component, exc.field) == ("linux", "vmlinuz_path")

    def test_caller_context_not_mutated(self) -> None:
        context = {"spec": "virtio-blk"}
        exc = MissingRequiredFieldError("Missing path", component="virtio-blk", field="image_path", context=context)
        assert context == {"spec": "virtio-blk"}
        assert exc.context == {"spec": "virtio-blk", "component": "virtio-blk", "field": "image_path"}


class TestHierarchy:
    """Tests for the marker bases."""

    def test_config_errors_are_permanent(self) -> None:
        assert issubclass(MissingRequiredFieldError, VmConfigError)
        assert issubclass(VmConfigError, PermanentError)

    def test_mac_error_is_input_and_value_error(self) -> None:
        assert issubclass(InvalidHardwareAddressError, InputValidationError)
        assert issubclass(InvalidHardwareAddressError, ValueError)

    def test_message_and_default_context(self) -> None:
        exc = VfkitError("boom")
        assert str(exc) == "boom"
        assert exc.message == "boom"
        assert exc.context == {}
