import logging
import subprocess
from datetime import datetime
from pathlib import Path

import click

from try_picker.config import TryConfig, resolve_shell
from try_picker.exceptions import ShellLaunchError, TryError
from try_picker.models import Action, CloneRepository, CreateDirectory, EnterDirectory
from try_picker.services.catalog import touch
from try_picker.services.clone import clone_repository

logger = logging.getLogger(__name__)


def _touch(path: Path, now: datetime | None, quiet: bool) -> None:
    try:
        touch(path, now)
    except OSError as e:
        logger.warning("Failed to update access time", extra={"path": str(path), "error": str(e)})
        if not quiet:
            click.echo(f"Warning: couldn't update access time: {e}", err=True)


def launch_shell(path: Path, config: TryConfig | None, message: str) -> int:
    """Run an interactive shell rooted at path and wait for it to exit."""
    shell = resolve_shell(config)
    click.echo(f"\n{message} {path.name}\n")
    try:
        result = subprocess.run([shell], cwd=path)
    except OSError as e:
        raise ShellLaunchError(f"Error launching shell {shell}: {e}") from e
    return result.returncode


def hand_off(path: Path, config: TryConfig | None, select_only: bool, message: str) -> int:
    if select_only:
        click.echo(str(path))
        return 0
    return launch_shell(path, config, message)


def handle_action(
    action: Action,
    config: TryConfig | None,
    select_only: bool = False,
    now: datetime | None = None,
) -> int:
    """Carry out a terminal action and hand the resulting path over.

    Returns the exit code to use. Raises TryError subclasses (clone errors,
    directory creation, shell launch) for the caller to report.
    """
    if isinstance(action, EnterDirectory):
        _touch(action.path, now, quiet=select_only)
        return hand_off(action.path, config, select_only, "Entering")

    if isinstance(action, CreateDirectory):
        try:
            action.path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise TryError(f"Error creating directory: {e}") from e
        _touch(action.path, now, quiet=select_only)
        return hand_off(action.path, config, select_only, "Created and entering")

    if isinstance(action, CloneRepository):
        click.echo(f"Cloning {action.url} into {action.path.name}...", err=True)
        clone_repository(action.url, action.path)
        return hand_off(action.path, config, select_only, "Successfully cloned and entering")

    return 0
