"""Two-input comparison screen.

The screen hosts two editable inputs (FIRST on the left, SECOND on the right)
and a diff panel that shows either the split or the unified view. Every edit,
and every change of a watched file on disk, is forwarded to a
RecomputeScheduler; the panel is redrawn when the scheduler publishes.

Keys: F2 toggles split/unified, F3 switches between the diff and the inputs.
"""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import Screen
from textual.widgets import Label, Static, TabbedContent, TabPane, TextArea

from delta_text.utils.config import config
from delta_text.utils.diff_render import render_split, render_stats, render_unified
from delta_text.utils.error_handling import log_ui_error, log_watchdog_error
from delta_text.utils.io import FileLoadError, FileReadResult, load_input_file
from delta_text.utils.logger import log
from delta_text.utils.recompute_scheduler import ComputeOutcome, InputSlot, RecomputeScheduler, SchedulerState
from delta_text.utils.watchdog import watch_file
from delta_text.widgets.footer import Footer
from delta_text.widgets.header import Header

VIEW_SPLIT = "split"
VIEW_UNIFIED = "unified"

_INPUT_IDS = {
    InputSlot.FIRST: "first-input",
    InputSlot.SECOND: "second-input",
}
_DEFAULT_LABELS = {
    InputSlot.FIRST: "First text",
    InputSlot.SECOND: "Second text",
}

WAITING_FOR_INPUT = "Load or type text in both inputs to compare them."
PROCESSING = "Processing..."
STALE_RESULT = "An input was emptied; this diff is out of date."
COMPUTE_ERROR_TITLE = "Error calculating diff"
COMPUTE_ERROR_MESSAGE = "There was an error comparing the texts. Please try again with smaller inputs."


class CompareScreen(Screen):
    """Compare two texts live in split or unified view."""

    BINDINGS = [
        ("f2", "toggle_view", "Toggle view"),
        ("f3", "switch_tab", "Diff/Inputs"),
    ]

    DEFAULT_CSS = """
    #diff-status {
        height: 1;
        padding: 0 1;
    }
    #split-view {
        height: 1fr;
    }
    #split-view > .diff-column {
        width: 1fr;
        height: 1fr;
        border: round $primary;
        margin: 0 1;
    }
    #unified-view {
        height: 1fr;
        border: round $primary;
        margin: 0 1;
    }
    .column-title {
        text-style: bold;
        padding: 0 1;
    }
    #inputs-row {
        height: 1fr;
    }
    #inputs-row > .input-panel {
        width: 1fr;
        height: 1fr;
        margin: 0 1;
    }
    .input-panel TextArea {
        height: 1fr;
    }
    """

    def __init__(
        self,
        first: FileReadResult | None = None,
        second: FileReadResult | None = None,
        *,
        view_mode: str = VIEW_SPLIT,
        watch: bool = True,
        debounce_ms: int | None = None,
    ) -> None:
        super().__init__()
        if view_mode not in (VIEW_SPLIT, VIEW_UNIFIED):
            raise ValueError(f"view_mode must be '{VIEW_SPLIT}' or '{VIEW_UNIFIED}', got {view_mode!r}")
        self._sources: dict[InputSlot, FileReadResult | None] = {InputSlot.FIRST: first, InputSlot.SECOND: second}
        self.view_mode = view_mode
        self._watch = watch
        self._stop_watchers: list = []
        self._last_outcome: ComputeOutcome | None = None
        self._status: str | Text = WAITING_FOR_INPUT
        self.scheduler = RecomputeScheduler(debounce_ms=debounce_ms)

    def compose(self) -> ComposeResult:
        yield Header(page_name="Compare")
        with TabbedContent(initial="diff-tab", id="tabs"):
            with TabPane("Diff", id="diff-tab"):
                yield Static(WAITING_FOR_INPUT, id="diff-status")
                with Horizontal(id="split-view"):
                    with VerticalScroll(classes="diff-column"):
                        yield Label(self._label(InputSlot.FIRST), id="left-title", classes="column-title")
                        yield Static("", id="left-text")
                    with VerticalScroll(classes="diff-column"):
                        yield Label(self._label(InputSlot.SECOND), id="right-title", classes="column-title")
                        yield Static("", id="right-text")
                with VerticalScroll(id="unified-view"):
                    yield Static("", id="unified-text")
            with TabPane("Inputs", id="inputs-tab"):
                with Horizontal(id="inputs-row"):
                    for slot in InputSlot:
                        with Vertical(classes="input-panel"):
                            yield Label(self._label(slot), classes="column-title")
                            yield TextArea(self._initial_text(slot), id=_INPUT_IDS[slot])
        yield Footer(self._footer_text(), classes="footer")

    def on_mount(self) -> None:
        self.scheduler.on_views_ready(self._on_views_ready)
        self.scheduler.on_state_changed(self._on_state_changed)
        self._apply_view_mode()
        for slot in InputSlot:
            self.scheduler.on_input_changed(slot, self._initial_text(slot))
            source = self._sources[slot]
            if self._watch and source is not None:
                self._start_watching(slot, source.path)

    def on_unmount(self) -> None:
        self.scheduler.close()
        for stop in self._stop_watchers:
            stop()
        self._stop_watchers.clear()

    # Input handling

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        slot = self._slot_for(event.text_area.id)
        if slot is None:
            return
        self.scheduler.on_input_changed(slot, event.text_area.text)
        if not self.scheduler.inputs_ready:
            self._clear_views()

    def _start_watching(self, slot: InputSlot, path: str) -> None:
        def on_change() -> None:
            # Runs on the watchdog timer thread
            self.app.call_from_thread(self.reload_input, slot)

        try:
            self._stop_watchers.append(watch_file(path, on_change, debounce_ms=config.debounce_ms))
        except (OSError, RuntimeError) as e:
            log_watchdog_error(path, "starting observer", e)

    def reload_input(self, slot: InputSlot) -> None:
        """Re-read a watched input file and feed it to the editor and the scheduler."""
        source = self._sources[slot]
        if source is None:
            return
        try:
            result = load_input_file(source.path)
        except FileLoadError as e:
            log_ui_error(f"{slot.value} editor", "reloading input", e)
            self.notify(str(e), title="Error reading file", severity="error")
            return
        self._sources[slot] = result
        editor = self.query_one(f"#{_INPUT_IDS[slot]}", TextArea)
        if editor.text != result.content:
            editor.load_text(result.content)
            self.scheduler.on_input_changed(slot, result.content)
            log.info(f"[UI] Reloaded {result.path}")

    # Scheduler callbacks

    def _on_state_changed(self, state: SchedulerState) -> None:
        if state is SchedulerState.COMPUTING:
            self._set_status(PROCESSING)

    def _on_views_ready(self, outcome: ComputeOutcome) -> None:
        self._last_outcome = outcome
        if not outcome.ok:
            self._set_status("" if self.scheduler.inputs_ready else WAITING_FOR_INPUT)
            self.notify(COMPUTE_ERROR_MESSAGE, title=COMPUTE_ERROR_TITLE, severity="error")
            return
        self._render_views()
        if not self.scheduler.inputs_ready:
            # Computed before an input was emptied
            self._set_status(STALE_RESULT)

    # Rendering

    def _render_views(self) -> None:
        outcome = self._last_outcome
        if outcome is None or outcome.views is None:
            return
        views = outcome.views
        self._set_status(render_stats(views.stats))
        left, right = render_split(views.split)
        self.query_one("#left-text", Static).update(left)
        self.query_one("#right-text", Static).update(right)
        self.query_one("#unified-text", Static).update(render_unified(views.unified))

    def _clear_views(self) -> None:
        self._last_outcome = None
        self._set_status(WAITING_FOR_INPUT)
        for widget_id in ("#left-text", "#right-text", "#unified-text"):
            self.query_one(widget_id, Static).update("")

    def _set_status(self, message: str | Text) -> None:
        self._status = message
        self.query_one("#diff-status", Static).update(message)

    def _apply_view_mode(self) -> None:
        self.query_one("#split-view").display = self.view_mode == VIEW_SPLIT
        self.query_one("#unified-view").display = self.view_mode == VIEW_UNIFIED
        self.query_one(Footer).set_text(self._footer_text())

    # Actions

    def action_toggle_view(self) -> None:
        self.view_mode = VIEW_UNIFIED if self.view_mode == VIEW_SPLIT else VIEW_SPLIT
        self._apply_view_mode()

    def action_switch_tab(self) -> None:
        tabs = self.query_one("#tabs", TabbedContent)
        tabs.active = "inputs-tab" if tabs.active == "diff-tab" else "diff-tab"

    # Helpers

    def _initial_text(self, slot: InputSlot) -> str:
        source = self._sources[slot]
        return source.content if source is not None else ""

    def _label(self, slot: InputSlot) -> str:
        source = self._sources[slot]
        return source.name if source is not None else _DEFAULT_LABELS[slot]

    @staticmethod
    def _slot_for(widget_id: str | None) -> InputSlot | None:
        for slot, input_id in _INPUT_IDS.items():
            if input_id == widget_id:
                return slot
        return None

    def _footer_text(self) -> str:
        other = VIEW_UNIFIED if self.view_mode == VIEW_SPLIT else VIEW_SPLIT
        return (
            f" [orange1]F2[/orange1] Switch to {other} view"
            "    [orange1]F3[/orange1] Diff/Inputs"
            "    [orange1]Ctrl+Q[/orange1] Quit"
        )
