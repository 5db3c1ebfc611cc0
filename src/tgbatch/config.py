"""Settings loaded from the environment using pydantic-settings."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tgbatch.errors import ConfigError

COMMAND_PLAN = "plan"
COMMAND_APPLY = "apply"
COMMAND_VALIDATE = "validate"

COMMANDS: tuple[str, ...] = (COMMAND_VALIDATE, COMMAND_PLAN, COMMAND_APPLY)

# The only command that also tears down removed modules.
DESTRUCTIVE_COMMAND = COMMAND_APPLY


class Settings(BaseSettings):
    """Step inputs, read from environment variables of the same name."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    work_dir: str
    base_branch: str
    command: str
    repo_url: str

    tool: str = "terragrunt"
    output_key: str = "COMMAND_OUTPUT"
    export_output: bool = True
    debug: bool = False

    @field_validator("command")
    @classmethod
    def _known_command(cls, value: str) -> str:
        value = value.strip()
        if value not in COMMANDS:
            raise ValueError(f"invalid command: {value}")
        return value


def load_settings(**overrides: Any) -> Settings:
    """
    Load settings from the environment; non-None `overrides` win.

    Raises:
        ConfigError: if a required value is missing or invalid.
    """
    values = {k: v for k, v in overrides.items() if v is not None}
    try:
        return Settings(**values)
    except ValidationError as exc:
        raise ConfigError(f"parse step config: {exc}", cause=exc) from exc
