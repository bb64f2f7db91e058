import logging
from datetime import datetime

from rich.text import Text
from textual.events import Key, Paste
from textual.message import Message
from textual.widget import Widget

from try_picker.constants import CHROME_ROWS, DATE_FORMAT, MIN_VISIBLE_ROWS
from try_picker.models import (
    Action,
    CatalogEntry,
    ConfirmingDelete,
    KeyEvent,
    NamingNew,
    SelectorState,
)
from try_picker.selector import SelectorEnv, transition
from try_picker.services.repo_url import derive_folder_name, recognize
from try_picker.services.scoring import has_date_prefix, match_positions

logger = logging.getLogger(__name__)

TITLE = "📁 Try - Quick Experiment Directories"
HELP_NAV = "↑↓/Ctrl+j,k: Navigate  Enter: Select  Ctrl+N: Quick new  Ctrl+D: Delete"
HELP_QUIT = "ESC/q: Quit"

STYLE_TITLE = "bold color(220)"
STYLE_SEARCH = "bold color(86)"
STYLE_DIM = "color(240)"
STYLE_SEPARATOR = "color(237)"
STYLE_CURSOR = "bold color(220)"
STYLE_MATCH = "bold color(220)"
STYLE_SELECTED = "bold on color(236)"
STYLE_CREATE = "bold color(114)"
STYLE_DANGER = "bold color(196)"
STYLE_WARNING = "color(214)"
STYLE_PROMPT = "bold color(141)"


def format_relative_time(then: datetime, now: datetime) -> str:
    seconds = (now - then).total_seconds()
    hours = seconds / 3600
    if seconds < 10:
        return "just now"
    if seconds < 3600:
        return f"{int(seconds // 60)}m ago"
    if hours < 24:
        return f"{int(hours)}h ago"
    if hours < 24 * 30:
        return f"{int(hours // 24)}d ago"
    if hours < 24 * 365:
        return f"{int(hours // (24 * 30))}mo ago"
    return f"{int(hours // (24 * 365))}y ago"


def visible_rows(height: int) -> int:
    return max(height - CHROME_ROWS, MIN_VISIBLE_ROWS)


def adjust_scroll(cursor: int, offset: int, visible: int) -> int:
    """Smallest change to offset that keeps cursor inside the visible window."""
    if cursor < offset:
        return cursor
    if cursor >= offset + visible:
        return cursor - visible + 1
    return offset


def highlight_name(name: str, query: str) -> Text:
    """Name with the date prefix dimmed and the characters matched by scoring highlighted."""
    text = Text(name)
    if has_date_prefix(name):
        text.stylize(STYLE_DIM, 0, 11)
    for pos in match_positions(name, query):
        text.stylize(STYLE_MATCH, pos, pos + 1)
    return text


def _pad_between(left: Text, right: Text, width: int) -> Text:
    padding = width - left.cell_len - right.cell_len
    line = left.copy()
    if padding > 0:
        line.append(" " * padding)
    line.append_text(right)
    return line


def render_entry(entry: CatalogEntry, query: str, selected: bool, width: int, now: datetime) -> Text:
    left = Text("📁 ")
    name = highlight_name(entry.name, query)
    if selected:
        name.stylize(STYLE_SELECTED)
    left.append_text(name)
    meta = Text(f" {format_relative_time(entry.accessed_at, now)}, score: {entry.score:.1f}", style=STYLE_DIM)
    return _pad_between(left, meta, width - 2)


def create_row_label(query: str) -> tuple[str, str]:
    """(icon, label) for the synthetic last row."""
    is_repo, url = recognize(query)
    if is_repo:
        return "📦", f"Clone: {derive_folder_name(url)}"
    if not query:
        return "✨", "Create new experiment..."
    return "✨", f"Create: {query}"


def render_create_row(query: str, selected: bool) -> Text:
    icon, label = create_row_label(query)
    text = Text(f"{icon} ")
    text.append(label, style=STYLE_CREATE)
    if selected:
        text.stylize(STYLE_SELECTED, 2)
    return text


def _separator(width: int) -> Text:
    return Text("─" * max(width - 1, 0), style=STYLE_SEPARATOR)


def render_confirm_delete(mode: ConfirmingDelete) -> Text:
    out = Text()
    out.append(TITLE + "\n\n", style=STYLE_TITLE)
    out.append("⚠️  Delete Directory\n\n", style=STYLE_DANGER)
    out.append("Are you sure you want to delete this directory?\n\n")
    out.append(f"  {mode.target.name}\n", style=STYLE_WARNING)
    out.append(f"  {mode.target.path}\n\n", style=STYLE_DIM)
    out.append("This action cannot be undone!\n\n", style=STYLE_DANGER)
    out.append("Press 'y' to confirm, any other key to cancel", style=STYLE_DIM)
    return out


def render_naming_new(mode: NamingNew, now: datetime) -> Text:
    out = Text()
    out.append(TITLE + "\n\n", style=STYLE_TITLE)
    out.append("New directory name:\n", style=STYLE_PROMPT)
    out.append(now.strftime(DATE_FORMAT) + "-", style=STYLE_DIM)
    out.append(mode.buffer + "\n\n")
    out.append("Enter: Create  ESC: Cancel", style=STYLE_DIM)
    return out


def render_state(state: SelectorState, width: int, height: int, scroll_offset: int, now: datetime) -> Text:
    if isinstance(state.mode, ConfirmingDelete):
        return render_confirm_delete(state.mode)
    if isinstance(state.mode, NamingNew):
        return render_naming_new(state.mode, now)

    out = Text()
    out.append(TITLE + "\n", style=STYLE_TITLE)
    out.append_text(_separator(width))
    out.append("\nSearch: ", style=STYLE_SEARCH)
    out.append(state.query)
    if not state.query:
        out.append(" (type to filter)", style=STYLE_DIM)
    out.append("\n")
    out.append_text(_separator(width))
    out.append("\n")

    total = len(state.ranked) + 1
    visible = visible_rows(height)
    end = min(scroll_offset + visible, total)
    for idx in range(scroll_offset, end):
        if idx == len(state.ranked) and state.ranked:
            out.append("\n")
        selected = idx == state.cursor
        out.append("→ " if selected else "  ", style=STYLE_CURSOR)
        if idx < len(state.ranked):
            out.append_text(render_entry(state.ranked[idx], state.query, selected, width, now))
        else:
            out.append_text(render_create_row(state.query, selected))
        out.append("\n")

    if total > visible:
        out.append_text(_separator(width))
        out.append(f"\n[{scroll_offset + 1}-{end}/{total}]\n", style=STYLE_DIM)

    out.append_text(_separator(width))
    out.append("\n")
    if state.status:
        out.append(state.status + "\n", style=STYLE_WARNING)
    out.append(HELP_NAV + "\n", style=STYLE_DIM)
    out.append(HELP_QUIT, style=STYLE_DIM)
    return out


class PickerView(Widget, can_focus=True):
    """Shows the ranked experiments and forwards every key to the state machine."""

    DEFAULT_CSS = """
    PickerView {
        width: 1fr;
        height: 1fr;
        padding: 0 1;
    }
    """

    class Finished(Message):
        """Posted once the state machine has produced its final action."""

        def __init__(self, action: Action) -> None:
            self.action = action
            super().__init__()

    def __init__(self, state: SelectorState, env: SelectorEnv | None = None) -> None:
        super().__init__()
        self.state = state
        self._env = env or SelectorEnv()
        self._scroll_offset = 0

    def render(self) -> Text:
        return render_state(
            self.state,
            width=self.content_size.width or 80,
            height=self.content_size.height or 24,
            scroll_offset=self._scroll_offset,
            now=self._env.now(),
        )

    def feed(self, event: KeyEvent) -> None:
        self.state, action = transition(self.state, event, self._env)
        self._scroll_offset = adjust_scroll(
            self.state.cursor,
            min(self._scroll_offset, len(self.state.ranked)),
            visible_rows(self.content_size.height or 24),
        )
        self.refresh()
        if self.state.finished:
            logger.debug("Selection finished", extra={"action": action.kind})
            self.post_message(self.Finished(action))

    def on_key(self, event: Key) -> None:
        event.prevent_default()
        event.stop()
        self.feed(KeyEvent(key=event.key, character=event.character))

    def on_paste(self, event: Paste) -> None:
        event.stop()
        if event.text:
            self.feed(KeyEvent(key="paste", character=event.text))
