"""HTTP client for the PhotoBlast upload endpoint."""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

import requests

from .config import ClientConfig
from .files import SelectedFile
from .tasks import serialize_tasks

logger = logging.getLogger(__name__)


GENERIC_FAILURE_MESSAGE = "Upload failed"


class UploadError(Exception):
    """Raised when an upload attempt does not produce a job."""

    pass


class UploadRejected(UploadError):
    """Raised when the server answers with a non-success status."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class UploadReceipt:
    """Identifiers the backend assigns to an accepted upload."""
    job_id: str
    photo_id: str


class UploadClient:
    """Posts one file per call with an idempotency header."""

    def __init__(self, config: Optional[ClientConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or ClientConfig()
        self.session = session or requests.Session()

    def build_url(self, task_ids: Iterable[str]) -> str:
        """Return the upload URL with the catalog-ordered task list."""
        # Commas stay literal: tasks=RESIZE,THUMBNAIL
        return f"{self.config.upload_url}?tasks={serialize_tasks(task_ids)}"

    def upload(self, file: SelectedFile, task_ids: Iterable[str], idempotency_key: str) -> UploadReceipt:
        """Upload a file and return the job it created.

        Args:
            file: Content to send as the ``file`` multipart field.
            task_ids: Processing tasks to request.
            idempotency_key: Key identifying this logical upload across retries.

        Returns:
            UploadReceipt with the job and photo ids.

        Raises:
            UploadError: On transport failure or an unusable response.
            UploadRejected: If the server rejects the upload.
        """
        url = self.build_url(task_ids)
        headers = {self.config.idempotency_header: idempotency_key}
        files = {"file": (file.name, file.data, file.content_type)}

        logger.info(f"POST {url} ({file.size_bytes} bytes, key={idempotency_key})")

        try:
            resp = self.session.post(url, files=files, headers=headers, timeout=self.config.timeout)
        except requests.RequestException as e:
            raise UploadError(f"Network error: {e}") from e

        payload = _json_body(resp)

        if not resp.ok:
            message = payload.get("message") or GENERIC_FAILURE_MESSAGE
            raise UploadRejected(message, resp.status_code)

        job_id = payload.get("jobId")
        photo_id = payload.get("photoId")
        if not job_id:
            raise UploadError("Invalid upload response: missing jobId")

        return UploadReceipt(job_id=str(job_id), photo_id=str(photo_id) if photo_id is not None else "")

    def close(self) -> None:
        self.session.close()


def _json_body(resp: requests.Response) -> dict:
    """Decode a JSON object body, tolerating empty or non-JSON responses."""
    try:
        data = resp.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
