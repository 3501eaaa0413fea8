"""Runtime configuration from environment variables."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from pyvfkit import constants


class Settings(BaseSettings):
    """Runtime configuration from environment variables.

    All settings can be overridden via environment variables with PYVFKIT_ prefix.
    Example: PYVFKIT_VFKIT_BIN=/opt/homebrew/bin/vfkit
    """

    model_config = SettingsConfigDict(
        env_prefix="PYVFKIT_",
        extra="ignore",
    )

    vfkit_bin: Path = Path(constants.DEFAULT_VFKIT_BIN)

    # Command-line defaults (--cpus / --memory)
    default_cpus: int = Field(default=constants.DEFAULT_CPUS, ge=1)
    default_memory_mib: int = Field(default=constants.DEFAULT_MEMORY_MIB, ge=1)
