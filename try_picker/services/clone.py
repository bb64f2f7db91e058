import logging
import shutil
import subprocess
from collections.abc import Callable
from datetime import date
from pathlib import Path

from try_picker.constants import CLONE_TIMEOUT_S, DATE_FORMAT
from try_picker.exceptions import (
    CloneFailedError,
    CloneTimeoutError,
    CloneToolMissingError,
    DirectoryCreateError,
    InvalidRepositoryURLError,
)
from try_picker.services.repo_url import derive_folder_name, recognize

logger = logging.getLogger(__name__)

GIT = "git"


def _remove_partial(target: Path) -> None:
    if target.exists():
        shutil.rmtree(target, ignore_errors=True)


def clone_repository(url: str, target_dir: Path | str, timeout: float = CLONE_TIMEOUT_S) -> None:
    """Shallow-clone url into target_dir under a hard deadline.

    The clone inherits our stdout/stderr so git's progress stays visible.
    On failure or timeout target_dir is removed before raising, so no
    partial clone is left behind.
    """
    git = shutil.which(GIT)
    if git is None:
        raise CloneToolMissingError(GIT)

    target = Path(target_dir)
    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryCreateError(str(target), str(e)) from e

    logger.info("Cloning repository", extra={"url": url, "target": str(target), "timeout": timeout})
    proc = subprocess.Popen([git, "clone", "--depth", "1", url, str(target)])
    try:
        returncode = proc.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        proc.kill()
        # Reap before removing so git cannot write into the directory afterwards
        proc.wait()
        _remove_partial(target)
        logger.warning("Clone timed out", extra={"url": url, "timeout": timeout})
        raise CloneTimeoutError(timeout) from None
    except BaseException:
        proc.kill()
        proc.wait()
        _remove_partial(target)
        raise

    if returncode != 0:
        _remove_partial(target)
        logger.warning("Clone failed", extra={"url": url, "returncode": returncode})
        raise CloneFailedError(f"git exited with status {returncode}", returncode=returncode)


def dated_name(today: date, name: str) -> str:
    return f"{today.strftime(DATE_FORMAT)}-{name}"


def resolve_clone_path(
    base_path: Path | str,
    url: str,
    today: date,
    exists: Callable[[Path], bool] = Path.exists,
) -> Path:
    """`{date}-{repo}` under base_path, with the first free `-2`, `-3`, ... suffix if taken."""
    candidate = Path(base_path) / dated_name(today, derive_folder_name(url))
    if not exists(candidate):
        return candidate
    suffix = 2
    while True:
        numbered = candidate.with_name(f"{candidate.name}-{suffix}")
        if not exists(numbered):
            return numbered
        suffix += 1


def perform_clone(url: str, base_path: Path | str, today: date, timeout: float = CLONE_TIMEOUT_S) -> Path:
    """Recognize, place and clone a repository URL given on the command line."""
    ok, clone_url = recognize(url)
    if not ok:
        raise InvalidRepositoryURLError(url)
    target = resolve_clone_path(base_path, clone_url, today)
    clone_repository(clone_url, target, timeout=timeout)
    return target
