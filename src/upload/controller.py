"""Upload session controller: owns the state and runs the submission protocol."""

import logging
import threading
import time
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .client import GENERIC_FAILURE_MESSAGE, UploadClient, UploadError
from .files import SelectedFile
from .input_unifier import FileInputControl, InputUnifier
from .preview import PreviewStore
from .state import (
    DragStateChanged,
    SelectionAccepted,
    SelectionCleared,
    SubmissionFailed,
    SubmissionStarted,
    SubmissionSucceeded,
    TaskToggled,
    UploadEvent,
    UploadState,
    reduce,
    retired_session,
)

logger = logging.getLogger(__name__)


StateListener = Callable[[UploadState], None]


def generate_idempotency_key() -> str:
    """Return a key unique to one upload session."""
    return f"{time.time_ns()}-{uuid.uuid4().hex[:12]}"


class CancellationToken:
    """Marks a pending submission whose response must be discarded."""

    def __init__(self):
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> bool:
        """Cancel the token. Returns False if it was already cancelled."""
        if self._event.is_set():
            return False
        self._event.set()
        return True


@dataclass
class PendingSubmission:
    """The single in-flight request of a session."""
    idempotency_key: str
    token: CancellationToken = field(default_factory=CancellationToken)
    future: Optional[Future] = None

    def cancel(self) -> bool:
        if self.future is not None:
            self.future.cancel()
        return self.token.cancel()


class UploadController:
    """Explicit state container for one upload component.

    Every change goes through ``reduce``; the controller performs the side
    effects around it (preview handles, key generation, the network call)
    and notifies listeners with the new state, in transition order.
    """

    def __init__(
        self,
        client: UploadClient,
        previews: Optional[PreviewStore] = None,
        executor: Optional[ThreadPoolExecutor] = None,
        key_factory: Callable[[], str] = generate_idempotency_key,
    ):
        self.client = client
        self.previews = previews or PreviewStore()
        self.key_factory = key_factory
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="upload")
        self._lock = threading.RLock()
        self._state = UploadState()
        self._pending: Optional[PendingSubmission] = None
        self._listeners: List[StateListener] = []
        self._closed = False

    @property
    def state(self) -> UploadState:
        return self._state

    @property
    def pending(self) -> Optional[PendingSubmission]:
        return self._pending

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def input_unifier(self, file_input: Optional[FileInputControl] = None) -> InputUnifier:
        """Return an input unifier wired to this controller."""
        return InputUnifier(
            on_selected=self.select,
            on_cleared=self.clear,
            on_drag_active=self.set_drag_active,
            file_input=file_input,
        )

    def select(self, file: SelectedFile) -> UploadState:
        """Start a new session for an accepted file, retiring the current one."""
        self._ensure_open()
        with self._lock:
            preview = self.previews.create(file)
            key = self.key_factory()
            logger.debug(f"New upload session for {file.name} (key={key})")
            before, after = self._apply(SelectionAccepted(file=file, preview=preview, idempotency_key=key))
            return self._notify(before, after)

    def clear(self) -> UploadState:
        return self._dispatch(SelectionCleared())

    def toggle_task(self, task_id: str) -> UploadState:
        return self._dispatch(TaskToggled(task_id))

    def set_drag_active(self, active: bool) -> UploadState:
        return self._dispatch(DragStateChanged(active))

    def submit(self) -> Optional[Future]:
        """Send the live session, unless a submission is not allowed right now.

        Returns:
            Future resolving to the state after the response, or None if the
            call was refused (no session, empty task set, or already
            submitting).
        """
        self._ensure_open()
        with self._lock:
            state = self._state
            if not state.can_submit:
                logger.debug(f"Submit refused in state {state.status}")
                return None

            session = state.session
            pending = PendingSubmission(idempotency_key=session.idempotency_key)
            self._pending = pending
            before, after = self._apply(SubmissionStarted(session.idempotency_key))

            logger.info(
                f"Submitting {session.file.name} attempt {after.session.attempts} (key={session.idempotency_key})"
            )
            # Task set is read from the live session, so edits made after a
            # failed attempt are honored on retry
            pending.future = self._executor.submit(
                self._run_submission,
                pending,
                session.file,
                session.selected_tasks,
            )

            self._notify(before, after)
            return pending.future

    def submit_and_wait(self, timeout: Optional[float] = None) -> UploadState:
        """Submit and block until the response has been applied."""
        future = self.submit()
        if future is not None:
            future.result(timeout=timeout)
        return self._state

    def close(self) -> None:
        """Tear down: retire the session, cancel pending work, free resources."""
        if self._closed:
            return
        self.clear()
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=False, cancel_futures=True)
        self.previews.close()
        self.client.close()

    def __enter__(self) -> "UploadController":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _run_submission(self, pending: PendingSubmission, file: SelectedFile, task_ids) -> UploadState:
        key = pending.idempotency_key
        try:
            receipt = self.client.upload(file, task_ids, key)
        except UploadError as e:
            logger.info(f"Upload failed (key={key}): {e}")
            event = SubmissionFailed(idempotency_key=key, message=str(e))
        except Exception as e:
            logger.exception(f"Unexpected error during upload (key={key})")
            event = SubmissionFailed(idempotency_key=key, message=f"{GENERIC_FAILURE_MESSAGE}: {e}")
        else:
            logger.info(f"Upload accepted (key={key}): job {receipt.job_id}, photo {receipt.photo_id}")
            event = SubmissionSucceeded(idempotency_key=key, job_id=receipt.job_id, photo_id=receipt.photo_id)

        with self._lock:
            if pending.token.cancelled:
                logger.warning(f"Discarding response for cancelled submission (key={key})")
                return self._state
            if self._pending is pending:
                self._pending = None
            before, after = self._apply(event)
            return self._notify(before, after)

    def _dispatch(self, event: UploadEvent) -> UploadState:
        with self._lock:
            before, after = self._apply(event)
            return self._notify(before, after)

    def _apply(self, event: UploadEvent):
        """Reduce one event and release whatever the transition retired. Caller holds the lock."""
        before = self._state
        after = reduce(before, event)
        self._state = after

        retired = retired_session(before, after)
        if retired is not None:
            self.previews.release(retired.preview)
            # Only the retired session can have a request in flight
            pending = self._pending
            if pending is not None:
                if pending.cancel():
                    logger.info(f"Cancelled pending submission (key={pending.idempotency_key})")
                self._pending = None
        return before, after

    def _notify(self, before: UploadState, after: UploadState) -> UploadState:
        """Deliver a new state to listeners. Caller holds the lock, so delivery order matches transition order."""
        if after is not before:
            for listener in list(self._listeners):
                listener(after)
        return after

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("Upload controller is closed")
