"""Run settings merged from CLI flags, ``PCORDER_*`` env vars and ``pcorder.toml``.

Later sources lose: a CLI flag beats an env var, an env var beats the
TOML file, and the TOML file beats the defaults in
:mod:`pcorder.config.models`.
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, TomlConfigSettingsSource

from pcorder.config.discovery import find_config
from pcorder.config.models import CardsConfig, PluginsConfig, ReportConfig

# The TOML file chosen by from_cli(), read while the settings are built.
_active_toml: ContextVar[Path | None] = ContextVar("_active_toml", default=None)


def resolve_config(config_path: str | None, root: Path | None) -> tuple[Path | None, Path]:
    """Pick the config file and the run root.

    An explicit *config_path* that does not exist means "no file", not a
    fallback to discovery. Without a *root*, the run is anchored at the
    config file's directory, or the CWD when there is none.
    """
    if config_path:
        candidate = Path(config_path)
        toml_path = candidate if candidate.is_file() else None
    else:
        toml_path = find_config(root)

    if root is None:
        root = toml_path.parent if toml_path else Path.cwd()
    return toml_path, root


class PcOrderSettings(BaseSettings):
    """Everything a single ``pcorder`` invocation is configured with.

    Attributes:
        root: Directory the run is anchored at.
        config_path: The ``pcorder.toml`` actually read, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PCORDER_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    cards: CardsConfig = Field(default_factory=CardsConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml = TomlConfigSettingsSource(settings_cls, toml_file=_active_toml.get())
        return init_settings, env_settings, toml

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> PcOrderSettings:
        """Build settings for a CLI run; *cli_flags* take priority over everything.

        Raises:
            click.ClickException: the config file is not valid TOML.
        """
        toml_path, resolved_root = resolve_config(config_path, root)
        token = _active_toml.set(toml_path)
        try:
            return cls(root=resolved_root, config_path=toml_path, **cli_flags)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in {toml_path}: {exc}"
            raise click.ClickException(msg) from exc
        finally:
            _active_toml.reset(token)
