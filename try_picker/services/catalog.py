import logging
import os
import shutil
from datetime import datetime, timezone
from pathlib import Path

from try_picker.models import CatalogEntry

logger = logging.getLogger(__name__)


def _created_at(stat: os.stat_result) -> datetime:
    """Birth time where the platform records it, otherwise modification time."""
    ts = getattr(stat, "st_birthtime", None)
    if ts is None:
        ts = stat.st_mtime
    return datetime.fromtimestamp(ts, tz=timezone.utc)


def scan(base_path: Path | str) -> list[CatalogEntry]:
    """List the immediate subdirectories of base_path, sorted by name.

    An unreadable or missing base path yields an empty list.
    """
    base = Path(base_path)
    try:
        children = sorted(os.scandir(base), key=lambda e: e.name)
    except OSError:
        logger.debug("Base path not readable, treating as empty", extra={"path": str(base)}, exc_info=True)
        return []

    entries: list[CatalogEntry] = []
    for child in children:
        try:
            if not child.is_dir():
                continue
            stat = child.stat()
        except OSError:
            logger.debug("Skipping unreadable entry", extra={"name": child.name})
            continue
        entries.append(
            CatalogEntry(
                name=child.name,
                path=base / child.name,
                created_at=_created_at(stat),
                accessed_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            )
        )
    return entries


def touch(path: Path | str, now: datetime | None = None) -> None:
    """Refresh a directory's modification time, the recency signal used for scoring."""
    ts = (now or datetime.now(timezone.utc)).timestamp()
    os.utime(path, (ts, ts))


def remove_entry(path: Path | str) -> None:
    """Recursively delete a candidate directory. Raises OSError on failure."""
    shutil.rmtree(path)
    logger.info("Deleted experiment directory", extra={"path": str(path)})
    logger.info("Deleted directory", extra={"path": str(path)})
