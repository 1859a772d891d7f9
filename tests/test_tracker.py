"""Unit tests for the WindowTracker state machine."""

import logging

import pytest

from pip_follow.models import (
    MoveWindowCommand,
    UnrecognizedEvent,
    WindowClosed,
    WindowDescriptor,
    WindowOpenedOrChanged,
    WorkspaceActivated,
)
from pip_follow.tracker import TrackerState, WindowTracker


def opened(window_id, title=None, app_id=None):
    return WindowOpenedOrChanged(window=WindowDescriptor(id=window_id, title=title, app_id=app_id))


# ============================================================================
# Seeding
# ============================================================================

class TestSeed:
    """Test picking the initial window from a snapshot."""

    def test_starts_idle(self, tracker):
        assert tracker.tracked is None
        assert tracker.state.is_tracking is False

    def test_first_match_wins(self, tracker):
        windows = [
            WindowDescriptor(id=10, title="Picture-in-Picture", app_id="firefox"),
            WindowDescriptor(id=11, title="Picture-in-Picture", app_id="firefox"),
        ]

        assert tracker.seed(windows) == 10
        assert tracker.tracked == 10

    def test_no_match_stays_idle(self, tracker, browser_window):
        assert tracker.seed([browser_window, WindowDescriptor(id=4)]) is None
        assert tracker.tracked is None

    def test_empty_snapshot(self, tracker):
        assert tracker.seed([]) is None
        assert tracker.tracked is None

    def test_ignored_windows_logged_by_title_or_id(self, tracker, caplog):
        caplog.set_level(logging.DEBUG, logger="pip_follow.tracker")

        tracker.seed([WindowDescriptor(id=1), WindowDescriptor(id=3, title="Terminal")])

        assert 'Ignoring window "1"' in caplog.text
        assert 'Ignoring window "Terminal"' in caplog.text

    def test_stops_after_first_match(self, tracker, pip_window):
        def windows():
            yield pip_window
            raise AssertionError("snapshot iterated past first match")

        assert tracker.seed(windows()) == pip_window.id


# ============================================================================
# Window lifecycle
# ============================================================================

class TestWindowOpenedOrChanged:
    """Test tracking on open/change events."""

    def test_matching_window_tracked_from_idle(self, tracker):
        assert tracker.handle(opened(2, "Picture-in-Picture", "firefox")) is None
        assert tracker.tracked == 2

    def test_title_change_into_match(self, tracker):
        tracker.handle(opened(2, "Mozilla Firefox", "firefox"))
        assert tracker.tracked is None

        tracker.handle(opened(2, "Picture-in-Picture", "firefox"))
        assert tracker.tracked == 2

    def test_non_matching_change_keeps_tracking(self, tracker, pip_window):
        tracker.seed([pip_window])

        tracker.handle(opened(5, "Terminal", "foot"))

        assert tracker.tracked == pip_window.id

    def test_tracked_window_that_stops_matching_stays_tracked(self, tracker, pip_window):
        tracker.seed([pip_window])

        tracker.handle(opened(pip_window.id, "Mozilla Firefox", "firefox"))

        assert tracker.tracked == pip_window.id

    def test_newer_matching_window_replaces_tracked(self, tracker, pip_window):
        tracker.seed([pip_window])

        tracker.handle(opened(9, "Picture-in-Picture", "firefox"))

        assert tracker.tracked == 9

    def test_rematch_of_tracked_window_is_noop(self, tracker, pip_window, caplog):
        tracker.seed([pip_window])
        caplog.set_level(logging.INFO, logger="pip_follow.tracker")

        tracker.handle(WindowOpenedOrChanged(window=pip_window))

        assert tracker.tracked == pip_window.id
        assert "matched patterns" not in caplog.text


class TestWindowClosed:
    """Test untracking on close events."""

    def test_closing_tracked_window_goes_idle(self, tracker, pip_window):
        tracker.seed([pip_window])

        assert tracker.handle(WindowClosed(id=pip_window.id)) is None
        assert tracker.tracked is None

    def test_closing_other_window_keeps_tracking(self, tracker, pip_window):
        tracker.seed([pip_window])

        tracker.handle(WindowClosed(id=99))

        assert tracker.tracked == pip_window.id

    def test_close_while_idle(self, tracker):
        tracker.handle(WindowClosed(id=1))

        assert tracker.tracked is None


# ============================================================================
# Workspace focus
# ============================================================================

class TestWorkspaceActivated:
    """Test move commands on workspace activation."""

    def test_focused_workspace_moves_tracked_window(self, tracker, pip_window):
        tracker.seed([pip_window])

        command = tracker.handle(WorkspaceActivated(workspace_id=7, focused=True))

        assert command == MoveWindowCommand(window_id=pip_window.id, workspace_id=7, focus=False)

    def test_unfocused_activation_ignored(self, tracker, pip_window):
        tracker.seed([pip_window])

        assert tracker.handle(WorkspaceActivated(workspace_id=7, focused=False)) is None
        assert tracker.tracked == pip_window.id

    @pytest.mark.parametrize("focused", [True, False])
    def test_idle_never_moves(self, tracker, focused):
        assert tracker.handle(WorkspaceActivated(workspace_id=3, focused=focused)) is None
        assert tracker.tracked is None

    def test_workspace_names_pass_through(self, tracker, pip_window):
        tracker.seed([pip_window])

        command = tracker.handle(WorkspaceActivated(workspace_id="2:web", focused=True))

        assert command.workspace_id == "2:web"

    def test_one_command_per_event(self, tracker, pip_window):
        tracker.seed([pip_window])

        commands = [
            tracker.handle(WorkspaceActivated(workspace_id=ws, focused=True))
            for ws in (1, 2, 1)
        ]

        assert [c.workspace_id for c in commands] == [1, 2, 1]
        assert tracker.tracked == pip_window.id


class TestOtherEvents:
    """Unrecognized events pass through untouched."""

    def test_unrecognized_event_ignored(self, tracker, pip_window):
        tracker.seed([pip_window])

        assert tracker.handle(UnrecognizedEvent(kind="WindowFocusChanged")) is None
        assert tracker.tracked == pip_window.id

    def test_explicit_state_object(self, pip_matcher):
        state = TrackerState(tracked=42)
        tracker = WindowTracker(pip_matcher, state)

        tracker.handle(WindowClosed(id=42))

        assert state.tracked is None


class TestPictureInPictureScenario:
    """Full sequence: seed, follow, close, ignore."""

    def test_scenario(self, tracker):
        tracker.seed([
            WindowDescriptor(id=1, title=None),
            WindowDescriptor(id=2, title="Picture-in-Picture", app_id="firefox"),
        ])
        assert tracker.tracked == 2

        command = tracker.handle(WorkspaceActivated(workspace_id=7, focused=True))
        assert command == MoveWindowCommand(window_id=2, workspace_id=7, focus=False)

        assert tracker.handle(WindowClosed(id=2)) is None
        assert tracker.tracked is None

        assert tracker.handle(WorkspaceActivated(workspace_id=7, focused=True)) is None
