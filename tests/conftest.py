"""Shared pytest fixtures for pyvfkit tests."""

import os

import pytest

from pyvfkit.models import EFIBootloader, LinuxBootloader, new_efi_bootloader, new_linux_bootloader


@pytest.fixture(autouse=True)
def clean_pyvfkit_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep PYVFKIT_* settings from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("PYVFKIT_") and name != "PYVFKIT_LOG_LEVEL":
            monkeypatch.delenv(name)


@pytest.fixture
def linux_bootloader() -> LinuxBootloader:
    return new_linux_bootloader("/vm/vmlinuz", "console=hvc0 root=/dev/vda", "/vm/initrd.img")


@pytest.fixture
def efi_bootloader() -> EFIBootloader:
    return new_efi_bootloader("/vm/efi-store", create=True)
