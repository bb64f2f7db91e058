"""Configuration loading, legacy migration and first-run setup.

Reads `~/.config/try/config` (JSON). Older versions stored only the base
path as plain text; such files are migrated on load. `TRY_PATH` in the
environment always wins over the stored path.
"""

import logging
import os
import shutil
from pathlib import Path

import click
from pydantic import BaseModel, ConfigDict, ValidationError

from try_picker import constants
from try_picker.exceptions import ConfigError

logger = logging.getLogger(__name__)


class TryConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    path: str = ""
    shell: str = ""


def config_path() -> Path:
    override = os.environ.get("TRY_CONFIG_DIR")
    base = Path(override) if override else constants.CONFIG_DIR
    return base / constants.CONFIG_FILE_NAME


def _migrate_legacy(raw: str) -> TryConfig:
    """Old config files hold a bare path instead of JSON."""
    path = raw.strip()
    if not path or path.startswith(("{", "[")):
        return TryConfig()
    logger.info("Migrating config from plain-text format", extra={"path": path})
    return TryConfig(path=path)


def load_config() -> TryConfig:
    path = config_path()
    try:
        raw = path.read_text()
    except FileNotFoundError:
        return TryConfig()
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e

    try:
        return TryConfig.model_validate_json(raw)
    except ValidationError:
        return _migrate_legacy(raw)


def save_config(config: TryConfig) -> Path:
    """Write config as JSON. Returns the path written."""
    path = config_path()
    tmp = path.with_suffix(".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(config.model_dump_json(indent=2))
        tmp.rename(path)
    except OSError as e:
        raise ConfigError(f"Failed to write config file {path}: {e}") from e
    return path


def resolve_base_path(config: TryConfig | None) -> Path | None:
    """TRY_PATH, then the stored path. None means first run."""
    env_path = os.environ.get("TRY_PATH")
    if env_path:
        return Path(env_path).expanduser()
    if config is not None and config.path:
        return Path(config.path).expanduser()
    return None


def resolve_shell(config: TryConfig | None) -> str:
    if config is not None and config.shell:
        return config.shell
    return os.environ.get("SHELL") or constants.DEFAULT_SHELL


def prompt_for_setup() -> TryConfig:
    """Ask where experiments live (and optionally which shell), then save."""
    click.echo(click.style("Welcome to try!", fg="yellow", bold=True))
    click.echo("\ntry needs a directory to store your experiments.")
    click.echo("It will be created if it doesn't exist.\n")

    raw = click.prompt("Where should experiments be stored?", default=str(constants.DEFAULT_TRIES_DIR))
    base = Path(raw.strip() or str(constants.DEFAULT_TRIES_DIR)).expanduser().resolve()
    config = TryConfig(path=str(base))

    current_shell = os.environ.get("SHELL") or constants.DEFAULT_SHELL
    click.echo(f"\nCurrent SHELL: {current_shell}")
    shell = click.prompt("Override shell (press Enter to use $SHELL)", default="", show_default=False).strip()
    if shell:
        if shutil.which(shell):
            config.shell = shell
            click.echo(f"Shell set to: {shell}")
        else:
            click.echo(f"Shell '{shell}' not found, using $SHELL")

    try:
        written = save_config(config)
        click.echo(f"\nExperiments will be stored in: {base}")
        click.echo(f"(You can change these settings by editing {written})\n")
    except ConfigError as e:
        click.echo(f"Warning: {e}", err=True)
    return config
