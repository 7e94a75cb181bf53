"""Upload session state and its pure transition function.

``reduce(state, event)`` never performs side effects. Key generation,
preview creation and network calls happen in the controller, which feeds
their outcomes back in as events.
"""

from dataclasses import dataclass, replace
from typing import FrozenSet, Literal, Optional, Union

from .files import SelectedFile
from .preview import PreviewHandle
from .tasks import DEFAULT_TASKS, toggle_task


SessionStatus = Literal["IDLE", "READY", "SUBMITTING", "SUCCEEDED", "FAILED"]

SUBMITTABLE_STATUSES = ("READY", "FAILED")


@dataclass(frozen=True)
class UploadResult:
    """Outcome of the latest submission attempt."""
    success: bool
    job_id: Optional[str] = None
    photo_id: Optional[str] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class UploadSession:
    """One selected file and everything needed to upload it."""
    file: SelectedFile
    preview: PreviewHandle
    idempotency_key: str
    selected_tasks: FrozenSet[str] = DEFAULT_TASKS
    status: SessionStatus = "READY"
    result: Optional[UploadResult] = None
    attempts: int = 0


@dataclass(frozen=True)
class UploadState:
    """Everything the upload component knows at one instant."""
    session: Optional[UploadSession] = None
    drag_active: bool = False

    @property
    def status(self) -> SessionStatus:
        return self.session.status if self.session else "IDLE"

    @property
    def selected_tasks(self) -> FrozenSet[str]:
        return self.session.selected_tasks if self.session else DEFAULT_TASKS

    @property
    def idempotency_key(self) -> Optional[str]:
        return self.session.idempotency_key if self.session else None

    @property
    def result(self) -> Optional[UploadResult]:
        return self.session.result if self.session else None

    @property
    def can_submit(self) -> bool:
        session = self.session
        return (
            session is not None
            and session.status in SUBMITTABLE_STATUSES
            and bool(session.selected_tasks)
        )


# Events


@dataclass(frozen=True)
class SelectionAccepted:
    file: SelectedFile
    preview: PreviewHandle
    idempotency_key: str


@dataclass(frozen=True)
class SelectionCleared:
    pass


@dataclass(frozen=True)
class TaskToggled:
    task_id: str


@dataclass(frozen=True)
class DragStateChanged:
    active: bool


@dataclass(frozen=True)
class SubmissionStarted:
    idempotency_key: str


@dataclass(frozen=True)
class SubmissionSucceeded:
    idempotency_key: str
    job_id: str
    photo_id: str


@dataclass(frozen=True)
class SubmissionFailed:
    idempotency_key: str
    message: str


UploadEvent = Union[
    SelectionAccepted,
    SelectionCleared,
    TaskToggled,
    DragStateChanged,
    SubmissionStarted,
    SubmissionSucceeded,
    SubmissionFailed,
]


def _is_pending(session: Optional[UploadSession], idempotency_key: str) -> bool:
    """True if a result for idempotency_key belongs to the live, submitting session."""
    return (
        session is not None
        and session.status == "SUBMITTING"
        and session.idempotency_key == idempotency_key
    )


def reduce(state: UploadState, event: UploadEvent) -> UploadState:
    """Apply one event and return the next state."""
    session = state.session

    if isinstance(event, SelectionAccepted):
        new_session = UploadSession(
            file=event.file,
            preview=event.preview,
            idempotency_key=event.idempotency_key,
        )
        return replace(state, session=new_session)

    if isinstance(event, SelectionCleared):
        return replace(state, session=None)

    if isinstance(event, DragStateChanged):
        return replace(state, drag_active=event.active)

    if isinstance(event, TaskToggled):
        if session is None:
            return state
        tasks = toggle_task(session.selected_tasks, event.task_id)
        return replace(state, session=replace(session, selected_tasks=tasks))

    if isinstance(event, SubmissionStarted):
        if not state.can_submit or session.idempotency_key != event.idempotency_key:
            return state
        return replace(
            state,
            session=replace(session, status="SUBMITTING", result=None, attempts=session.attempts + 1),
        )

    if isinstance(event, SubmissionSucceeded):
        if not _is_pending(session, event.idempotency_key):
            return state
        result = UploadResult(success=True, job_id=event.job_id, photo_id=event.photo_id)
        return replace(state, session=replace(session, status="SUCCEEDED", result=result))

    if isinstance(event, SubmissionFailed):
        if not _is_pending(session, event.idempotency_key):
            return state
        result = UploadResult(success=False, message=event.message)
        return replace(state, session=replace(session, status="FAILED", result=result))

    raise TypeError(f"Unknown upload event: {event!r}")


def retired_session(before: UploadState, after: UploadState) -> Optional[UploadSession]:
    """Return the session that a transition discarded, if any.

    Sessions are told apart by their preview handle, which each accepted
    selection creates afresh; keys come from a pluggable factory.
    """
    old = before.session
    if old is None:
        return None
    new = after.session
    if new is None or new.preview.handle_id != old.preview.handle_id:
        return old
    return None
