import logging
import os
import sys
from datetime import date
from pathlib import Path

import click

from try_picker import __version__
from try_picker.config import load_config, prompt_for_setup, resolve_base_path
from try_picker.exceptions import ConfigError, TryError
from try_picker.services.clone import perform_clone
from try_picker.services.shell import handle_action, hand_off

EPILOG = """\b
Navigation:
  Up/Down, Ctrl+j/k   Navigate entries
  Enter               Select directory or create new
  Ctrl+N              Create new experiment (quick)
  Ctrl+D              Delete selected directory
  Backspace           Delete search character
  Ctrl+U              Clear search
  Esc or q            Cancel and exit

\b
Configuration:
  Set TRY_PATH to change the base directory.
  Settings live in ~/.config/try/config.

\b
Examples:
  try                                       Launch selector
  try neural                                Search for "neural"
  try github.com/user/repo                  Shows clone option
  try --clone https://github.com/user/repo  Clone directly
  cd $(try -s)                              Use with cd in current shell
"""


def _configure_logging() -> None:
    level = os.environ.get("TRY_LOG_LEVEL")
    if level:
        logging.basicConfig(level=level.upper(), stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")


def _isatty(stream) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


def _has_terminal(select_only: bool) -> bool:
    """Select-only mode pipes stdout, so the UI needs stdin and stderr instead."""
    out = sys.stderr if select_only else sys.stdout
    return _isatty(sys.stdin) and _isatty(out)


def _resolve_base(path_override: str | None):
    """Config plus base directory, prompting on first run."""
    try:
        config = load_config()
    except ConfigError as e:
        click.echo(f"Warning: {e}", err=True)
        config = None
    if path_override:
        return config, Path(path_override).expanduser()
    base = resolve_base_path(config)
    if base is None:
        config = prompt_for_setup()
        base = Path(config.path)
    return config, base


@click.command(context_settings={"help_option_names": ["-h", "--help"]}, epilog=EPILOG)
@click.argument("query", nargs=-1)
@click.option("--select-only", "-s", is_flag=True, help="Print the selected path instead of launching a shell")
@click.option("--clone", "-c", "clone_url", default=None, metavar="URL", help="Clone a repository directly")
@click.option("--path", "path_override", default=None, help="Base directory for this run (overrides TRY_PATH)")
@click.version_option(__version__, prog_name="try")
def cli(query: tuple[str, ...], select_only: bool, clone_url: str | None, path_override: str | None) -> None:
    """try - quick experiment directories.

    Fuzzy-find, create, clone and delete dated experiment folders.
    """
    _configure_logging()
    config, base = _resolve_base(path_override)

    if clone_url:
        try:
            target = perform_clone(clone_url, base, date.today())
            code = hand_off(target, config, select_only, "Successfully cloned and entering")
        except TryError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
        sys.exit(code)

    if not _has_terminal(select_only):
        click.echo("Error: try requires an interactive terminal", err=True)
        sys.exit(1)

    try:
        base.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        click.echo(f"Error creating directory {base}: {e}", err=True)

    # Lazy import: TryApp pulls in Textual, which is slow to load.
    from try_picker.app import TryApp

    app = TryApp(base, query=" ".join(query).strip())
    action = app.run()
    if action is None:
        return

    try:
        code = handle_action(action, config, select_only=select_only)
    except TryError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    sys.exit(code)


def main() -> None:
    cli()
