"""Preview handles for rendering a selected image before upload.

A preview handle is a local file exposed as a ``file://`` URL. Decodable
images are stored downscaled; anything Pillow cannot open is stored as-is,
since the content type check is the only gate on what gets selected.

Handles are host resources: whoever retires a session must release its
handle, and each handle is released at most once.
"""

import io
import logging
import shutil
import tempfile
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from .files import SelectedFile

logger = logging.getLogger(__name__)


PREVIEW_MAX_SIZE = (1024, 1024)


@dataclass(frozen=True)
class PreviewHandle:
    """Revocable reference to a locally stored preview."""
    handle_id: str
    path: Path

    @property
    def url(self) -> str:
        return self.path.as_uri()


def _render_preview(file: SelectedFile, max_size: Tuple[int, int]) -> Optional[Tuple[bytes, str]]:
    """Downscale an image for display. Returns (png bytes, suffix) or None if undecodable."""
    try:
        with Image.open(io.BytesIO(file.data)) as img:
            img.thumbnail(max_size)
            if img.mode not in ("RGB", "RGBA", "L", "LA"):
                img = img.convert("RGBA")
            buf = io.BytesIO()
            img.save(buf, format="PNG")
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as e:
        logger.debug(f"Cannot render preview for {file.name}: {e}")
        return None
    return buf.getvalue(), ".png"


class PreviewStore:
    """Creates and releases preview handles under a private directory."""

    def __init__(self, root: Optional[Path] = None, max_size: Tuple[int, int] = PREVIEW_MAX_SIZE):
        """Initialize store. A temporary directory is created lazily if root is None."""
        self._root = Path(root) if root is not None else None
        self._owns_root = root is None
        self.max_size = max_size
        self._live: Dict[str, PreviewHandle] = {}
        self.created_count = 0
        self.released_count = 0

    @property
    def root(self) -> Path:
        if self._root is None:
            self._root = Path(tempfile.mkdtemp(prefix="photoblast-preview-"))
        return self._root

    @property
    def live_count(self) -> int:
        return len(self._live)

    def is_live(self, handle: PreviewHandle) -> bool:
        return handle.handle_id in self._live

    def create(self, file: SelectedFile) -> PreviewHandle:
        """Store a preview of the file and return its handle."""
        self.root.mkdir(parents=True, exist_ok=True)

        rendered = _render_preview(file, self.max_size)
        if rendered is None:
            content, suffix = file.data, file.suffix.lower()
        else:
            content, suffix = rendered

        handle_id = uuid.uuid4().hex
        path = self.root / f"{handle_id}{suffix}"
        path.write_bytes(content)

        handle = PreviewHandle(handle_id=handle_id, path=path)
        self._live[handle_id] = handle
        self.created_count += 1
        logger.debug(f"Created preview {handle_id} for {file.name}")
        return handle

    def release(self, handle: PreviewHandle) -> bool:
        """Release a preview handle.

        Returns:
            True if the handle was live and is now released, False if it
            had already been released.
        """
        if self._live.pop(handle.handle_id, None) is None:
            return False

        handle.path.unlink(missing_ok=True)
        self.released_count += 1
        logger.debug(f"Released preview {handle.handle_id}")
        return True

    def release_all(self) -> int:
        """Release every live handle and return how many were released."""
        released = 0
        for handle in list(self._live.values()):
            if self.release(handle):
                released += 1
        return released

    def close(self) -> None:
        """Release all handles and remove the store directory if it was created here."""
        self.release_all()
        if self._owns_root and self._root is not None:
            shutil.rmtree(self._root, ignore_errors=True)
            self._root = None
