"""Tests for the live comparison screen."""

import pytest
from textual.widgets import TabbedContent, TextArea

from delta_text.app import DeltaTextApp
from delta_text.screens.compare_screen import (
    COMPUTE_ERROR_TITLE,
    STALE_RESULT,
    VIEW_SPLIT,
    VIEW_UNIFIED,
    WAITING_FOR_INPUT,
    CompareScreen,
)
from delta_text.utils.edit_script import ComputationFailure, EditTag
from delta_text.utils.io import load_input_file
from delta_text.utils.recompute_scheduler import InputSlot, SchedulerState


async def compare_screen(pilot):
    """The CompareScreen pushed by the app once mounting has finished."""
    await pilot.pause()
    return pilot.app.screen


async def settle(pilot, screen):
    """Let pending messages run, then wait for the scheduler to go idle."""
    await pilot.pause()
    await screen.scheduler.wait_idle()
    await pilot.pause()


def test_rejects_unknown_view_mode():
    with pytest.raises(ValueError):
        CompareScreen(view_mode="sideways")


@pytest.mark.asyncio
async def test_initial_inputs_are_compared(loaded_inputs):
    first, second = loaded_inputs
    app = DeltaTextApp(first, second, watch=False, debounce_ms=0)

    async with app.run_test() as pilot:
        screen = await compare_screen(pilot)
        assert isinstance(screen, CompareScreen)
        await settle(pilot, screen)

        outcome = screen._last_outcome
        assert outcome is not None and outcome.ok
        assert outcome.views.split.left == ((EditTag.DELETE, "c"), (EditTag.EQUAL, "at"))
        assert outcome.views.split.right == ((EditTag.INSERT, "b"), (EditTag.EQUAL, "at"))
        assert screen.query_one("#first-input", TextArea).text == "cat"


@pytest.mark.asyncio
async def test_f2_toggles_between_views(loaded_inputs):
    first, second = loaded_inputs
    app = DeltaTextApp(first, second, watch=False, debounce_ms=0)

    async with app.run_test() as pilot:
        screen = await compare_screen(pilot)
        await settle(pilot, screen)
        assert screen.view_mode == VIEW_SPLIT
        assert screen.query_one("#split-view").display
        assert not screen.query_one("#unified-view").display

        await pilot.press("f2")
        assert screen.view_mode == VIEW_UNIFIED
        assert screen.query_one("#unified-view").display
        assert not screen.query_one("#split-view").display

        await pilot.press("f2")
        assert screen.view_mode == VIEW_SPLIT


@pytest.mark.asyncio
async def test_f3_switches_tabs(loaded_inputs):
    first, second = loaded_inputs
    app = DeltaTextApp(first, second, watch=False, debounce_ms=0)

    async with app.run_test() as pilot:
        screen = await compare_screen(pilot)
        tabs = screen.query_one("#tabs", TabbedContent)
        assert tabs.active == "diff-tab"
        await pilot.press("f3")
        assert tabs.active == "inputs-tab"
        await pilot.press("f3")
        assert tabs.active == "diff-tab"


@pytest.mark.asyncio
async def test_editing_an_input_recomputes(loaded_inputs):
    first, second = loaded_inputs
    app = DeltaTextApp(first, second, watch=False, debounce_ms=0)

    async with app.run_test() as pilot:
        screen = await compare_screen(pilot)
        await settle(pilot, screen)

        editor = screen.query_one("#second-input", TextArea)
        editor.insert("s", editor.document.end)
        await settle(pilot, screen)

        assert screen.scheduler.text(InputSlot.SECOND) == "bats"
        assert screen._last_outcome.views.unified[-1] == (EditTag.INSERT, "s")


@pytest.mark.asyncio
async def test_clearing_an_input_clears_the_views(loaded_inputs):
    first, second = loaded_inputs
    app = DeltaTextApp(first, second, watch=False, debounce_ms=0)

    async with app.run_test() as pilot:
        screen = await compare_screen(pilot)
        await settle(pilot, screen)

        screen.query_one("#first-input", TextArea).clear()
        await settle(pilot, screen)

        assert screen._last_outcome is None
        assert screen.scheduler.state is SchedulerState.IDLE
        assert screen._status == WAITING_FOR_INPUT


@pytest.mark.asyncio
async def test_result_for_emptied_input_is_marked_out_of_date(loaded_inputs):
    first, second = loaded_inputs
    app = DeltaTextApp(first, second, watch=False, debounce_ms=0)

    async with app.run_test() as pilot:
        screen = await compare_screen(pilot)
        await settle(pilot, screen)

        emptied = []

        def empty_first_while_computing(state):
            if state is SchedulerState.COMPUTING and not emptied:
                emptied.append(state)
                screen.scheduler.on_input_changed(InputSlot.FIRST, "")
                screen._clear_views()

        screen.scheduler.on_state_changed(empty_first_while_computing)
        screen.scheduler.on_input_changed(InputSlot.SECOND, "rat")
        await settle(pilot, screen)

        assert emptied
        assert screen._last_outcome.ok
        assert screen._last_outcome.views.split.right[0] == (EditTag.INSERT, "r")
        assert screen._status == STALE_RESULT
        assert screen.scheduler.state is SchedulerState.IDLE


@pytest.mark.asyncio
async def test_failure_notifies_user(loaded_inputs, monkeypatch):
    first, second = loaded_inputs
    app = DeltaTextApp(first, second, watch=False, debounce_ms=0)

    async with app.run_test() as pilot:
        screen = await compare_screen(pilot)
        await settle(pilot, screen)

        notices = []
        monkeypatch.setattr(screen, "notify", lambda message, **kwargs: notices.append(kwargs))

        def exhausted(first_text, second_text):
            raise ComputationFailure("out of memory")

        screen.scheduler._pipeline = exhausted
        screen.scheduler.on_input_changed(InputSlot.SECOND, "rat")
        await settle(pilot, screen)

        assert not screen._last_outcome.ok
        assert notices and notices[0]["title"] == COMPUTE_ERROR_TITLE
        assert notices[0]["severity"] == "error"


@pytest.mark.asyncio
async def test_reload_picks_up_file_changes(input_files):
    first_path, second_path = input_files
    app = DeltaTextApp(load_input_file(first_path), load_input_file(second_path), watch=False, debounce_ms=0)

    async with app.run_test() as pilot:
        screen = await compare_screen(pilot)
        await settle(pilot, screen)

        with open(second_path, "w", encoding="utf-8") as f:
            f.write("hello cruel world\n")
        screen.reload_input(InputSlot.SECOND)
        await settle(pilot, screen)

        assert screen.query_one("#second-input", TextArea).text == "hello cruel world\n"
        assert screen.scheduler.text(InputSlot.SECOND) == "hello cruel world\n"
        assert screen._last_outcome.ok
