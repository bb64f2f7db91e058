from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from try_picker.models import CatalogEntry
from try_picker.selector import SelectorEnv

NOW = datetime(2025, 8, 14, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def base_dir(tmp_path: Path) -> Path:
    base = tmp_path / "tries"
    base.mkdir()
    return base


@pytest.fixture()
def make_entry(base_dir: Path):
    def _make(
        name: str,
        created_ago: timedelta = timedelta(days=30),
        accessed_ago: timedelta = timedelta(days=30),
    ) -> CatalogEntry:
        return CatalogEntry(
            name=name,
            path=base_dir / name,
            created_at=NOW - created_ago,
            accessed_at=NOW - accessed_ago,
        )

    return _make


@pytest.fixture()
def fake_env() -> SelectorEnv:
    """SelectorEnv over an in-memory catalog.

    Tests mutate `env.catalog` to change what scans return and
    `env.existing` to simulate paths already on disk.
    """
    catalog: list[CatalogEntry] = []
    removed: list[Path] = []
    existing: set[Path] = set()

    def scan(path: Path) -> list[CatalogEntry]:
        return list(catalog)

    def remove(path: Path) -> None:
        removed.append(path)
        catalog[:] = [e for e in catalog if e.path != path]

    env = SelectorEnv(scan=scan, remove=remove, exists=lambda p: p in existing, now=lambda: NOW)
    env.catalog = catalog
    env.removed = removed
    env.existing = existing
    return env
