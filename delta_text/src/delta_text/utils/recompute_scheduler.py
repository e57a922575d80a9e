"""Debounced recomputation of diff views on an asyncio event loop.

The scheduler is a three-state machine:

- ``IDLE``: nothing pending.
- ``PENDING``: a debounce timer is armed; every new input restarts it.
- ``COMPUTING``: the pipeline runs on the texts captured when the timer
  fired. Input arriving now is remembered and a fresh debounce cycle starts
  once the computation has published its result.

Guarantees: at most one armed timer and at most one computation at a time,
and a result is never published after a newer debounce cycle has started,
except for the computation that was already running when the input arrived.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .config import config
from .edit_script import ComputationFailure, DiffViews
from .error_handling import log_computation_error, log_scheduler_error
from .logger import log
from .view_projector import build_views


class InputSlot(Enum):
    """Which of the two compared texts an input-change event refers to."""

    FIRST = "first"
    SECOND = "second"


class SchedulerState(Enum):
    IDLE = "idle"
    PENDING = "pending"
    COMPUTING = "computing"


@dataclass(frozen=True)
class ComputeOutcome:
    """Result delivered to subscribers: either views or the failure that prevented them."""

    views: DiffViews | None = None
    error: ComputationFailure | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


ViewsCallback = Callable[[ComputeOutcome], None]
StateCallback = Callable[[SchedulerState], None]
Pipeline = Callable[[str, str], DiffViews]


class RecomputeScheduler:
    """Decide when to run diff -> cleanup -> project for a live pair of texts.

    Must be driven from inside a running event loop (for example a Textual
    app's message handlers).
    """

    def __init__(
        self,
        debounce_ms: int | None = None,
        *,
        pipeline: Pipeline = build_views,
        use_worker: bool | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """Create a scheduler.

        Args:
            debounce_ms: Quiet period before computing (defaults to ``config.debounce_ms``)
            pipeline: Callable turning two texts into DiffViews
            use_worker: Run the pipeline in the loop's thread-pool executor
                (defaults to ``config.use_worker``)
            loop: Event loop to schedule on (defaults to the running loop)
        """
        if debounce_ms is None:
            debounce_ms = config.debounce_ms
        if debounce_ms < 0:
            raise ValueError(f"debounce_ms must not be negative, got {debounce_ms}")
        self._debounce = debounce_ms / 1000.0
        self._pipeline = pipeline
        self._use_worker = config.use_worker if use_worker is None else use_worker
        self._loop = loop

        self._texts: dict[InputSlot, str] = {InputSlot.FIRST: "", InputSlot.SECOND: ""}
        self._state = SchedulerState.IDLE
        self._timer: asyncio.TimerHandle | None = None
        self._deadline: float | None = None
        self._task: asyncio.Task | None = None
        self._changed_while_computing = False
        self._closed = False
        self._idle = asyncio.Event()
        self._idle.set()

        self._views_callbacks: list[ViewsCallback] = []
        self._state_callbacks: list[StateCallback] = []

    # Public surface

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def deadline(self) -> float | None:
        """Loop-clock time at which the armed timer fires, or None."""
        return self._deadline

    @property
    def debounce_seconds(self) -> float:
        return self._debounce

    @property
    def inputs_ready(self) -> bool:
        """True when both texts are non-empty, i.e. a computation may be scheduled."""
        return bool(self._texts[InputSlot.FIRST] and self._texts[InputSlot.SECOND])

    def text(self, slot: InputSlot) -> str:
        return self._texts[InputSlot(slot)]

    def on_input_changed(self, slot: InputSlot, text: str) -> None:
        """Record the latest full text of one input and (re)arm the debounce timer."""
        if not isinstance(text, str):
            raise TypeError(f"text must be a string, got {type(text).__name__}")
        slot = InputSlot(slot)
        self._texts[slot] = text
        log.debug(f"[SCHED] {slot.value} input changed ({len(text)} chars) while {self._state.value}")

        if self._closed:
            return
        if self._state is SchedulerState.COMPUTING:
            self._changed_while_computing = True
            return
        self._restart_debounce()

    def on_views_ready(self, callback: ViewsCallback) -> Callable[[], None]:
        """Subscribe to computation outcomes. Returns an unsubscribe function."""
        self._views_callbacks.append(callback)
        return lambda: self._remove(self._views_callbacks, callback)

    def on_state_changed(self, callback: StateCallback) -> Callable[[], None]:
        """Subscribe to state transitions. Returns an unsubscribe function."""
        self._state_callbacks.append(callback)
        return lambda: self._remove(self._state_callbacks, callback)

    def cancel(self) -> None:
        """Drop a pending computation. A running computation is not interrupted."""
        if self._state is SchedulerState.PENDING:
            self._cancel_timer()
            self._set_state(SchedulerState.IDLE)

    def close(self) -> None:
        """Cancel any pending timer and stop scheduling further work."""
        self.cancel()
        self._closed = True
        self._changed_while_computing = False
        self._views_callbacks.clear()
        self._state_callbacks.clear()

    async def wait_idle(self) -> None:
        """Wait until no timer is armed and no computation is running."""
        while True:
            await self._idle.wait()
            # A subscriber may have re-armed the timer before this waiter resumed
            if self._state is SchedulerState.IDLE:
                return

    # State machine

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _restart_debounce(self) -> None:
        self._cancel_timer()
        if not self.inputs_ready:
            self._set_state(SchedulerState.IDLE)
            return
        loop = self._get_loop()
        self._deadline = loop.time() + self._debounce
        self._timer = loop.call_at(self._deadline, self._on_deadline)
        self._set_state(SchedulerState.PENDING)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._deadline = None

    def _on_deadline(self) -> None:
        self._timer = None
        self._deadline = None
        first = self._texts[InputSlot.FIRST]
        second = self._texts[InputSlot.SECOND]
        self._changed_while_computing = False
        self._set_state(SchedulerState.COMPUTING)
        # The computation starts on a later loop turn so observers can react to COMPUTING first
        self._task = self._get_loop().create_task(self._compute(first, second))

    async def _compute(self, first: str, second: str) -> None:
        log.debug(f"[SCHED] Computing diff of {len(first)} vs {len(second)} chars")
        try:
            if self._use_worker:
                views = await self._get_loop().run_in_executor(None, self._pipeline, first, second)
            else:
                views = self._pipeline(first, second)
        except ComputationFailure as e:
            log_computation_error(len(first), len(second), e)
            outcome = ComputeOutcome(error=e)
        except asyncio.CancelledError:
            self._task = None
            self._set_state(SchedulerState.IDLE)
            raise
        except Exception as e:
            # Any pipeline error reaches subscribers through the same channel
            log_computation_error(len(first), len(second), e)
            failure = ComputationFailure(f"pipeline raised {type(e).__name__}: {e}")
            failure.__cause__ = e
            outcome = ComputeOutcome(error=failure)
        else:
            outcome = ComputeOutcome(views=views)

        self._task = None
        self._set_state(SchedulerState.IDLE)
        self._publish(outcome)

        if self._changed_while_computing and not self._closed:
            self._changed_while_computing = False
            self._restart_debounce()

    def _set_state(self, state: SchedulerState) -> None:
        if state is SchedulerState.IDLE:
            self._idle.set()
        else:
            self._idle.clear()
        if state is self._state:
            return
        self._state = state
        for callback in list(self._state_callbacks):
            try:
                callback(state)
            except Exception as e:
                log_scheduler_error("notifying state listener", e)

    def _publish(self, outcome: ComputeOutcome) -> None:
        for callback in list(self._views_callbacks):
            try:
                callback(outcome)
            except Exception as e:
                log_scheduler_error("publishing views", e)

    @staticmethod
    def _remove(callbacks: list, callback: Callable) -> None:
        try:
            callbacks.remove(callback)
        except ValueError:
            pass
