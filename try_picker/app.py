import logging
from pathlib import Path

from textual.app import App, ComposeResult

from try_picker.models import Action, NoAction, SelectorState
from try_picker.selector import SelectorEnv, initial_state
from try_picker.widgets.picker import PickerView

logger = logging.getLogger(__name__)


class TryApp(App[Action | None]):
    """Full-screen picker. Exits with the chosen action, or None when aborted."""

    TITLE = "try"
    ENABLE_COMMAND_PALETTE = False

    DEFAULT_CSS = """
    Screen {
        background: $background;
    }
    """

    def __init__(self, base_path: Path | str, query: str = "", env: SelectorEnv | None = None) -> None:
        super().__init__()
        self._env = env or SelectorEnv()
        self._initial: SelectorState = initial_state(base_path, query, self._env)

    def compose(self) -> ComposeResult:
        yield PickerView(self._initial, self._env)

    def on_mount(self) -> None:
        self.query_one(PickerView).focus()

    def on_picker_view_finished(self, event: PickerView.Finished) -> None:
        if isinstance(event.action, NoAction):
            self.exit(None)
        else:
            self.exit(event.action)
