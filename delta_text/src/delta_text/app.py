from __future__ import annotations

from textual.app import App

from delta_text.screens.compare_screen import VIEW_SPLIT, CompareScreen
from delta_text.utils.io import FileReadResult
from delta_text.utils.logger import log


class DeltaTextApp(App):
    """Textual application hosting the comparison screen."""

    TITLE = "Delta Text"
    DEFAULT_CSS = """
    Screen {
        background: $surface-darken-3;
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
        """Initialize the application.

        Args:
            first: Loaded first input, or None to start with an empty editor
            second: Loaded second input, or None to start with an empty editor
            view_mode: Initial diff view ("split" or "unified")
            watch: Reload inputs when their files change on disk
            debounce_ms: Override of the configured debounce interval
        """
        super().__init__()
        self.theme = "textual-dark"
        self._first = first
        self._second = second
        self._view_mode = view_mode
        self._watch = watch
        self._debounce_ms = debounce_ms

    def on_mount(self) -> None:
        log.attach_app(self)
        self.push_screen(
            CompareScreen(
                self._first,
                self._second,
                view_mode=self._view_mode,
                watch=self._watch,
                debounce_ms=self._debounce_ms,
            )
        )

    def on_unmount(self) -> None:
        log.detach_app(self)
