"""Tests for the pure upload state transitions."""

from pathlib import Path

import pytest

from src.upload.preview import PreviewHandle
from src.upload.state import (
    DragStateChanged,
    SelectionAccepted,
    SelectionCleared,
    SubmissionFailed,
    SubmissionStarted,
    SubmissionSucceeded,
    TaskToggled,
    UploadState,
    reduce,
    retired_session,
)


def _preview(name: str) -> PreviewHandle:
    return PreviewHandle(handle_id=name, path=Path("/tmp") / f"{name}.jpg")


@pytest.fixture
def ready_state(jpeg_file):
    return reduce(UploadState(), SelectionAccepted(jpeg_file, _preview("a"), "key-a"))


def test_initial_state_is_idle():
    state = UploadState()
    assert state.status == "IDLE"
    assert state.idempotency_key is None
    assert state.selected_tasks == {"RESIZE", "THUMBNAIL"}
    assert state.can_submit is False


def test_selection_creates_ready_session(ready_state, jpeg_file):
    session = ready_state.session
    assert ready_state.status == "READY"
    assert session.file == jpeg_file
    assert session.idempotency_key == "key-a"
    assert session.selected_tasks == {"RESIZE", "THUMBNAIL"}
    assert session.result is None
    assert ready_state.can_submit is True


def test_new_selection_resets_tasks_and_retires_session(ready_state, png_file):
    edited = reduce(ready_state, TaskToggled("WATERMARK"))
    replaced = reduce(edited, SelectionAccepted(png_file, _preview("b"), "key-b"))

    assert replaced.session.selected_tasks == {"RESIZE", "THUMBNAIL"}
    assert replaced.idempotency_key == "key-b"
    assert retired_session(edited, replaced) is edited.session


def test_reselection_with_repeated_key_still_retires_session(ready_state, png_file):
    replaced = reduce(ready_state, SelectionAccepted(png_file, _preview("b"), "key-a"))

    assert replaced.idempotency_key == "key-a"
    assert retired_session(ready_state, replaced) is ready_state.session
    assert retired_session(replaced, reduce(replaced, TaskToggled("WATERMARK"))) is None


def test_toggle_keeps_key_and_status(ready_state):
    state = reduce(ready_state, TaskToggled("WATERMARK"))
    state = reduce(state, TaskToggled("RESIZE"))

    assert state.idempotency_key == "key-a"
    assert state.status == "READY"
    assert state.selected_tasks == {"THUMBNAIL", "WATERMARK"}
    assert retired_session(ready_state, state) is None


def test_toggle_without_session_is_noop():
    state = UploadState()
    assert reduce(state, TaskToggled("WATERMARK")) is state


def test_empty_task_set_blocks_submission(ready_state):
    state = reduce(ready_state, TaskToggled("RESIZE"))
    state = reduce(state, TaskToggled("THUMBNAIL"))

    assert state.selected_tasks == frozenset()
    assert state.can_submit is False
    assert reduce(state, SubmissionStarted("key-a")) is state


def test_submission_started_is_single_flight(ready_state):
    submitting = reduce(ready_state, SubmissionStarted("key-a"))
    assert submitting.status == "SUBMITTING"
    assert submitting.session.attempts == 1
    assert submitting.can_submit is False

    # A second start while submitting changes nothing
    assert reduce(submitting, SubmissionStarted("key-a")) is submitting


def test_success_populates_result(ready_state):
    state = reduce(ready_state, SubmissionStarted("key-a"))
    state = reduce(state, SubmissionSucceeded("key-a", "j1", "p1"))

    assert state.status == "SUCCEEDED"
    assert state.result.success is True
    assert (state.result.job_id, state.result.photo_id) == ("j1", "p1")
    assert state.can_submit is False


def test_failure_allows_retry_with_same_key(ready_state):
    state = reduce(ready_state, SubmissionStarted("key-a"))
    state = reduce(state, SubmissionFailed("key-a", "Network error: boom"))

    assert state.status == "FAILED"
    assert state.result.message == "Network error: boom"
    assert state.can_submit is True

    retry = reduce(state, SubmissionStarted("key-a"))
    assert retry.status == "SUBMITTING"
    assert retry.idempotency_key == "key-a"
    assert retry.session.attempts == 2
    assert retry.result is None


def test_stale_results_are_ignored(ready_state, png_file):
    submitting = reduce(ready_state, SubmissionStarted("key-a"))
    replaced = reduce(submitting, SelectionAccepted(png_file, _preview("b"), "key-b"))

    assert reduce(replaced, SubmissionSucceeded("key-a", "j1", "p1")) is replaced
    assert reduce(replaced, SubmissionFailed("key-a", "late")) is replaced


def test_result_without_pending_submission_is_ignored(ready_state):
    assert reduce(ready_state, SubmissionSucceeded("key-a", "j1", "p1")) is ready_state


def test_clear_discards_session(ready_state):
    toggled = reduce(ready_state, TaskToggled("WATERMARK"))
    cleared = reduce(toggled, SelectionCleared())

    assert cleared.session is None
    assert cleared.status == "IDLE"
    assert cleared.idempotency_key is None
    assert cleared.selected_tasks == {"RESIZE", "THUMBNAIL"}
    assert cleared.can_submit is False
    assert retired_session(toggled, cleared) is toggled.session


def test_drag_state_does_not_touch_session(ready_state):
    state = reduce(ready_state, DragStateChanged(True))
    assert state.drag_active is True
    assert state.session is ready_state.session
    assert reduce(state, DragStateChanged(False)).drag_active is False


def test_unknown_event_raises():
    with pytest.raises(TypeError):
        reduce(UploadState(), object())
