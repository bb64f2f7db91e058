"""Keyboard-driven selection state machine.

`transition` takes the current SelectorState and one KeyEvent and returns
the next state plus the Action it produced. Filesystem access and the clock
come from a SelectorEnv, so every transition can be exercised in tests
without touching a real terminal.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from try_picker.constants import ALLOWED_INPUT_CHARS
from try_picker.models import (
    Action,
    Browsing,
    CatalogEntry,
    CloneRepository,
    ConfirmingDelete,
    CreateDirectory,
    EnterDirectory,
    KeyEvent,
    NamingNew,
    NoAction,
    SelectorState,
)
from try_picker.services import catalog
from try_picker.services.clone import dated_name, resolve_clone_path
from try_picker.services.repo_url import recognize
from try_picker.services.scoring import rank

logger = logging.getLogger(__name__)

QUIT_KEYS = {"escape", "ctrl+c", "q"}
UP_KEYS = {"up", "ctrl+p", "ctrl+k"}
DOWN_KEYS = {"down", "ctrl+j"}
DELETE_KEYS = {"ctrl+d", "delete"}
QUICK_NEW_KEY = "ctrl+n"
CLEAR_KEY = "ctrl+u"
CONFIRM_DELETE_KEYS = {"y", "Y"}
CANCEL_NAMING_KEYS = {"escape", "ctrl+c"}


def _now() -> datetime:
    return datetime.now().astimezone()


@dataclass
class SelectorEnv:
    scan: Callable[[Path], list[CatalogEntry]] = catalog.scan
    remove: Callable[[Path], None] = catalog.remove_entry
    exists: Callable[[Path], bool] = Path.exists
    now: Callable[[], datetime] = _now


def is_valid_input(text: str | None) -> bool:
    """Non-empty and made only of letters, digits, `-_.:/@` and space."""
    return bool(text) and all(ch in ALLOWED_INPUT_CHARS for ch in text)


def slugify(text: str) -> str:
    return text.replace(" ", "-")


def initial_state(base_path: Path | str, query: str = "", env: SelectorEnv | None = None) -> SelectorState:
    env = env or SelectorEnv()
    base = Path(base_path)
    entries = tuple(env.scan(base))
    query = slugify(query)
    return SelectorState(
        base_path=base,
        entries=entries,
        query=query,
        ranked=tuple(rank(entries, query, env.now())),
    )


def transition(state: SelectorState, event: KeyEvent, env: SelectorEnv) -> tuple[SelectorState, Action]:
    if state.finished:
        return state, state.action

    if isinstance(state.mode, NamingNew):
        new_state = _naming_new(state, state.mode, event, env)
    elif isinstance(state.mode, ConfirmingDelete):
        new_state = _confirming_delete(state, state.mode, event, env)
    else:
        new_state = _browsing(state, event, env)
    return new_state, new_state.action


# Shared helpers


def _with_query(state: SelectorState, query: str, env: SelectorEnv) -> SelectorState:
    return state.model_copy(update={
        "query": query,
        "ranked": tuple(rank(state.entries, query, env.now())),
        "cursor": 0,
        "status": "",
    })


def _finish(state: SelectorState, action: Action) -> SelectorState:
    return state.model_copy(update={"action": action, "finished": True, "mode": Browsing()})


def _create_or_clone(state: SelectorState, env: SelectorEnv) -> SelectorState:
    """What confirming the create row does: clone, create, or ask for a name."""
    if not state.query:
        return state.model_copy(update={"mode": NamingNew(), "status": ""})

    today = env.now().date()
    is_repo, clone_url = recognize(state.query)
    if is_repo:
        path = resolve_clone_path(state.base_path, clone_url, today, exists=env.exists)
        return _finish(state, CloneRepository(url=clone_url, path=path))

    path = state.base_path / dated_name(today, slugify(state.query))
    return _finish(state, CreateDirectory(path=path))


# Modes


def _browsing(state: SelectorState, event: KeyEvent, env: SelectorEnv) -> SelectorState:
    key = event.key

    if key in QUIT_KEYS:
        return _finish(state, NoAction())

    if key == "enter":
        entry = state.selected_entry
        if entry is not None:
            return _finish(state, EnterDirectory(path=entry.path))
        return _create_or_clone(state, env)

    if key == QUICK_NEW_KEY:
        return _create_or_clone(state, env)

    if key in DELETE_KEYS:
        entry = state.selected_entry
        if entry is None:
            return state
        return state.model_copy(update={"mode": ConfirmingDelete(target=entry), "status": ""})

    if key in UP_KEYS:
        return state.model_copy(update={"cursor": max(state.cursor - 1, 0)})

    if key in DOWN_KEYS:
        return state.model_copy(update={"cursor": min(state.cursor + 1, len(state.ranked))})

    if key == "backspace":
        if not state.query:
            return state
        return _with_query(state, state.query[:-1], env)

    if key == CLEAR_KEY:
        return _with_query(state, "", env)

    if is_valid_input(event.character):
        return _with_query(state, state.query + event.character, env)

    return state


def _naming_new(state: SelectorState, mode: NamingNew, event: KeyEvent, env: SelectorEnv) -> SelectorState:
    key = event.key

    if key in CANCEL_NAMING_KEYS:
        return state.model_copy(update={"mode": Browsing()})

    if key == "enter":
        if not mode.buffer:
            return state
        path = state.base_path / dated_name(env.now().date(), slugify(mode.buffer))
        return _finish(state, CreateDirectory(path=path))

    if key == "backspace":
        return state.model_copy(update={"mode": NamingNew(buffer=mode.buffer[:-1])})

    if is_valid_input(event.character):
        return state.model_copy(update={"mode": NamingNew(buffer=mode.buffer + event.character)})

    return state


def _confirming_delete(state: SelectorState, mode: ConfirmingDelete, event: KeyEvent, env: SelectorEnv) -> SelectorState:
    if event.key not in CONFIRM_DELETE_KEYS and event.character not in CONFIRM_DELETE_KEYS:
        return state.model_copy(update={"mode": Browsing()})

    target = mode.target
    try:
        env.remove(target.path)
    except OSError as e:
        logger.warning("Failed to delete directory", extra={"path": str(target.path), "error": str(e)})
        return state.model_copy(update={"mode": Browsing(), "status": f"Could not delete {target.name}: {e.strerror or e}"})

    entries = tuple(env.scan(state.base_path))
    ranked = tuple(rank(entries, state.query, env.now()))
    cursor = max(min(state.cursor, len(ranked) - 1), 0)
    return state.model_copy(update={
        "entries": entries,
        "ranked": ranked,
        "cursor": cursor,
        "mode": Browsing(),
        "status": f"Deleted {target.name}",
    })
