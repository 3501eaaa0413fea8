"""Command-line interface for pyvfkit.

Parses the vfkit launcher flags, validates them into a VirtualMachine and
prints the normalized launcher argument vector.

Usage:
    pyvfkit -k vmlinuz -i initrd -C "console=hvc0" -d virtio-rng
    pyvfkit -b efi,variable-store=efi.store,create -d virtio-blk,path=disk.img
    pyvfkit --json -b efi,variable-store=efi.store -d virtio-net,nat | jq .
"""

from __future__ import annotations

import json
import logging
import shlex
import sys
from typing import NoReturn

import click
from pydantic import ValidationError

from pyvfkit import __version__, constants
from pyvfkit._logging import configure_logging
from pyvfkit.cmdline import build_argv, build_cmdline
from pyvfkit.exceptions import FlagConflictError, InputValidationError, VmConfigError
from pyvfkit.list_value import StringListValue
from pyvfkit.options import VmOptions
from pyvfkit.settings import Settings

# Exit codes following Unix conventions
EXIT_SUCCESS = 0
EXIT_CLI_ERROR = 2
EXIT_CONFIG_ERROR = 125


def format_error(title: str, message: str, suggestions: list[str] | None = None) -> str:
    """Format an error message following What → Why → Fix pattern.

    Args:
        title: Short error title
        message: Detailed explanation
        suggestions: Optional list of suggestions to fix the issue

    Returns:
        Formatted error string
    """
    lines = [
        click.style(f"Error: {title}", fg="red", bold=True),
        "",
        f"  {message}",
    ]

    if suggestions:
        lines.extend(["", "  Suggestions:"])
        lines.extend(f"    • {suggestion}" for suggestion in suggestions)

    return "\n".join(lines)


def format_argv(argv: list[str], json_output: bool) -> str:
    """Render the launcher argv as a shell command line or a JSON list."""
    if json_output:
        return json.dumps(argv)
    return shlex.join(argv)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-k", "--kernel", "vmlinuz_path", default=None, help="Path to the virtual machine linux kernel")
@click.option("-i", "--initrd", "initrd_path", default=None, help="Path to the virtual machine initrd")
@click.option("-C", "--kernel-cmdline", "kernel_cmdline", default=None, help="Linux kernel command line")
@click.option("-b", "--bootloader", "bootloader", multiple=True, help="Bootloader configuration (comma-separated)")
@click.option("-c", "--cpus", type=click.IntRange(min=0), default=None, help="Number of virtual CPUs  [default: 1]")
@click.option(
    "-m", "--memory", type=click.IntRange(min=0), default=None, help="Virtual machine RAM size in MiB  [default: 512]"
)
@click.option("-t", "--timesync", default=None, help="Sync guest time when host wakes up from sleep (vsockPort=N)")
@click.option("-d", "--device", "devices", multiple=True, help="Device spec, e.g. virtio-blk,path=disk.img (repeatable)")
@click.option("--json", "json_output", is_flag=True, help="Output the argument vector as JSON")
@click.option("--no-binary", is_flag=True, help="Omit the vfkit executable from the output")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("-q", "--quiet", is_flag=True, help="Only log errors")
@click.version_option(__version__, "-V", "--version", prog_name="pyvfkit")
def main(
    vmlinuz_path: str | None,
    initrd_path: str | None,
    kernel_cmdline: str | None,
    bootloader: tuple[str, ...],
    cpus: int | None,
    memory: int | None,
    timesync: str | None,
    devices: tuple[str, ...],
    json_output: bool,
    no_binary: bool,
    verbose: bool,
    quiet: bool,
) -> NoReturn:
    """Validate vfkit flags and print the launcher command line.

    Each --device value is one device spec; --bootloader values are
    comma-separated lists where double quotes protect embedded commas.

    Examples:

    \b
      pyvfkit -k vmlinuz -i initrd -C "console=hvc0" -d virtio-rng
      pyvfkit -b efi,variable-store=efi.store,create -d virtio-blk,path=disk.img
      pyvfkit -b efi,variable-store=efi.store -d virtio-fs,sharedDir=/Users,mountTag=home
    """
    configure_logging(level=logging.DEBUG if verbose else None, quiet=quiet)
    try:
        settings = Settings()
    except ValidationError as exc:
        click.echo(
            format_error(
                "Invalid environment configuration",
                str(exc),
                ["Check the PYVFKIT_* environment variables"],
            ),
            err=True,
        )
        sys.exit(EXIT_CLI_ERROR)

    options = VmOptions(
        vcpus=cpus if cpus is not None else settings.default_cpus,
        memory_mib=memory if memory is not None else settings.default_memory_mib,
        vmlinuz_path=vmlinuz_path,
        initrd_path=initrd_path,
        kernel_cmdline=kernel_cmdline,
        bootloader=StringListValue.from_occurrences(bootloader) if bootloader else None,
        timesync=timesync,
        devices=list(devices),
    )

    try:
        vm = options.to_virtual_machine()
    except FlagConflictError as exc:
        raise click.UsageError(exc.message) from exc
    except InputValidationError as exc:
        click.echo(
            format_error(
                "Invalid argument",
                exc.message,
                ["Run 'pyvfkit --help' for the supported device and bootloader forms"],
            ),
            err=True,
        )
        sys.exit(EXIT_CLI_ERROR)

    try:
        # The vfkit binary takes --memory in MiB, the unit the flag was given in
        if no_binary:
            argv = build_cmdline(vm, memory_unit=constants.MIB)
        else:
            argv = build_argv(vm, settings, memory_unit=constants.MIB)
    except VmConfigError as exc:
        click.echo(
            format_error(
                "Invalid virtual machine configuration",
                exc.message,
                ["Every path option (path=, logFilePath=, sharedDir=, ...) needs a value"],
            ),
            err=True,
        )
        sys.exit(EXIT_CONFIG_ERROR)

    click.echo(format_argv(argv, json_output))
    sys.exit(EXIT_SUCCESS)


if __name__ == "__main__":
    main()
