"""Selected file handle and content-type checks."""

import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class SelectedFile:
    """Binary content picked or dropped by the user."""
    name: str
    content_type: str
    data: bytes = field(repr=False)

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    @property
    def suffix(self) -> str:
        return Path(self.name).suffix

    @classmethod
    def from_path(cls, path: Path, content_type: Optional[str] = None) -> "SelectedFile":
        """Read a file from disk.

        The declared content type is guessed from the file name when the
        caller does not supply one, which mirrors what a browser does for a
        picked file.
        """
        path = Path(path)
        if content_type is None:
            content_type = guess_content_type(path.name)
        return cls(name=path.name, content_type=content_type, data=path.read_bytes())


def guess_content_type(filename: str) -> str:
    """Guess a content type from a file name."""
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or DEFAULT_CONTENT_TYPE


def is_image_type(content_type: Optional[str]) -> bool:
    """Return True if content_type belongs to the image/* class."""
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type.startswith("image/") and len(media_type) > len("image/")
