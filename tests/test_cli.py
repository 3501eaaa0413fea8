"""Tests for the pyvfkit command-line interface.

Drives the click command in-process with CliRunner.
"""

import json

import pytest
from click.testing import CliRunner

from pyvfkit.cli import EXIT_CLI_ERROR, EXIT_CONFIG_ERROR, EXIT_SUCCESS, format_argv, main

EFI = ["-b", "efi,variable-store=/vm/efi-store,create"]


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestFormatArgv:
    """Tests for format_argv()."""

    def test_shell(self) -> None:
        assert format_argv(["vfkit", "--kernel-cmdline", "console=hvc0 quiet"], False) == (
            "vfkit --kernel-cmdline 'console=hvc0 quiet'"
        )

    def test_json(self) -> None:
        assert json.loads(format_argv(["vfkit", "--cpus", "2"], True)) == ["vfkit", "--cpus", "2"]


class TestMain:
    """Tests for flag handling and output."""

    def test_help(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == EXIT_SUCCESS
        assert "--device" in result.output

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == EXIT_SUCCESS
        assert "pyvfkit" in result.output

    def test_defaults(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--json", *EFI])
        assert result.exit_code == EXIT_SUCCESS, result.output
        assert json.loads(result.output) == [
            "vfkit",
            "--cpus",
            "1",
            "--memory",
            "512",
            "--bootloader",
            "efi,variable-store=/vm/efi-store,create",
        ]

    def test_kernel_boot_with_devices(self, runner: CliRunner) -> None:
        args = [
            "--json",
            "--no-binary",
            "-k",
            "/vm/vmlinuz",
            "-i",
            "/vm/initrd",
            "-C",
            "console=hvc0",
            "-c",
            "2",
            "-m",
            "1024",
            "-d",
            "virtio-blk,path=/vm/disk.img",
            "-d",
            "virtio-net,nat,mac=52:54:00:AB:CD:EF",
            "-t",
            "vsockPort=1234",
        ]
        result = runner.invoke(main, args)
        assert result.exit_code == EXIT_SUCCESS, result.output
        assert json.loads(result.output) == [
            "--cpus",
            "2",
            "--memory",
            "1024",
            "--kernel",
            "/vm/vmlinuz",
            "--initrd",
            "/vm/initrd",
            "--kernel-cmdline",
            "console=hvc0",
            "--device",
            "virtio-blk,path=/vm/disk.img",
            "--device",
            "virtio-net,nat,mac=52:54:00:ab:cd:ef",
            "--timesync",
            "vsockPort=1234",
        ]

    def test_shell_output(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--no-binary", "-c", "0", "-m", "0", *EFI, "-d", "virtio-rng"])
        assert result.exit_code == EXIT_SUCCESS, result.output
        assert result.output.strip() == "--bootloader efi,variable-store=/vm/efi-store,create --device virtio-rng"

    def test_binary_from_settings(self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PYVFKIT_VFKIT_BIN", "/opt/homebrew/bin/vfkit")
        result = runner.invoke(main, ["--json", *EFI])
        assert result.exit_code == EXIT_SUCCESS, result.output
        assert json.loads(result.output)[0] == "/opt/homebrew/bin/vfkit"

    def test_defaults_from_settings(self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PYVFKIT_DEFAULT_CPUS", "4")
        monkeypatch.setenv("PYVFKIT_DEFAULT_MEMORY_MIB", "2048")
        result = runner.invoke(main, ["--json", "--no-binary", *EFI])
        assert result.exit_code == EXIT_SUCCESS, result.output
        assert json.loads(result.output)[:4] == ["--cpus", "4", "--memory", "2048"]

    def test_quoted_bootloader_value(self, runner: CliRunner) -> None:
        args = ["--json", "--no-binary", "-b", 'linux,kernel=/k,initrd=/i,cmdline="console=hvc0,115200"']
        result = runner.invoke(main, args)
        assert result.exit_code == EXIT_SUCCESS, result.output
        assert json.loads(result.output)[-2:] == ["--kernel-cmdline", "console=hvc0,115200"]

    def test_output_is_stable_when_fed_back(self, runner: CliRunner) -> None:
        """Printed argv parses back into the identical argv."""
        args = [*EFI, "-m", "2048", "-d", "virtio-fs,sharedDir=/Users,mountTag=home", "-t", ""]
        first = runner.invoke(main, ["--json", "--no-binary", *args])
        assert first.exit_code == EXIT_SUCCESS, first.output
        argv = json.loads(first.output)
        assert argv[argv.index("--memory") + 1] == "2048"

        second = runner.invoke(main, ["--json", "--no-binary", *argv])
        assert second.exit_code == EXIT_SUCCESS, second.output
        assert json.loads(second.output) == argv


class TestErrors:
    """Tests for error reporting and exit codes."""

    def test_no_bootloader(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["-d", "virtio-rng"])
        assert result.exit_code == EXIT_CLI_ERROR
        assert "No bootloader" in result.output

    def test_kernel_with_bootloader(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["-k", "/k", *EFI])
        assert result.exit_code == EXIT_CLI_ERROR
        assert "--bootloader" in result.output

    def test_empty_kernel_with_bootloader(self, runner: CliRunner) -> None:
        """An explicitly empty --kernel still counts as given."""
        result = runner.invoke(main, ["-k", "", *EFI])
        assert result.exit_code == EXIT_CLI_ERROR
        assert "cannot be used together with --bootloader" in result.output

    def test_empty_bootloader_with_kernel(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["-k", "/k", "-i", "/i", "-C", "quiet", "-b", ""])
        assert result.exit_code == EXIT_CLI_ERROR
        assert "cannot be used together with --bootloader" in result.output

    def test_invalid_environment_setting(self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PYVFKIT_DEFAULT_CPUS", "many")
        result = runner.invoke(main, EFI)
        assert result.exit_code == EXIT_CLI_ERROR
        assert "Invalid environment configuration" in result.output

    def test_unknown_device(self, runner: CliRunner) -> None:
        result = runner.invoke(main, [*EFI, "-d", "virtio-gpu"])
        assert result.exit_code == EXIT_CLI_ERROR
        assert "Unknown device type" in result.output

    def test_bad_mac(self, runner: CliRunner) -> None:
        result = runner.invoke(main, [*EFI, "-d", "virtio-net,nat,mac=zz"])
        assert result.exit_code == EXIT_CLI_ERROR

    def test_negative_cpus(self, runner: CliRunner) -> None:
        result = runner.invoke(main, [*EFI, "-c", "-1"])
        assert result.exit_code == EXIT_CLI_ERROR

    def test_missing_device_path(self, runner: CliRunner) -> None:
        result = runner.invoke(main, [*EFI, "-d", "virtio-blk"])
        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "virtio-blk needs the path to a disk image" in result.output

    def test_vsock_without_port(self, runner: CliRunner) -> None:
        result = runner.invoke(main, [*EFI, "-d", "virtio-vsock,socketURL=/tmp/vsock.sock"])
        assert result.exit_code == EXIT_CONFIG_ERROR

    def test_nat_required(self, runner: CliRunner) -> None:
        result = runner.invoke(main, [*EFI, "-d", "virtio-net"])
        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "nat" in result.output
