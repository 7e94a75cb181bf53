"""Collapse file-picker, drag-and-drop and clear actions into one selection signal."""

import logging
from typing import Callable, Literal, Optional, Protocol

from .files import SelectedFile, is_image_type

logger = logging.getLogger(__name__)


DragPhase = Literal["enter", "over", "leave"]


class DragEvent(Protocol):
    """Host drag/drop event whose default handling can be suppressed."""

    def prevent_default(self) -> None:
        ...

    def stop_propagation(self) -> None:
        ...


class FileInputControl(Protocol):
    """Native file-input control that remembers the last picked value."""

    def reset(self) -> None:
        """Forget the current value so picking the same file fires again."""
        ...


class InputUnifier:
    """Validates candidates from every input channel and forwards accepted ones."""

    def __init__(
        self,
        on_selected: Callable[[SelectedFile], None],
        on_cleared: Callable[[], None],
        on_drag_active: Optional[Callable[[bool], None]] = None,
        file_input: Optional[FileInputControl] = None,
    ):
        self.on_selected = on_selected
        self.on_cleared = on_cleared
        self.on_drag_active = on_drag_active
        self.file_input = file_input
        self.drag_active = False

    def on_file_picked(self, raw_file: Optional[SelectedFile]) -> bool:
        """Handle a file-picker change. Returns True if the file was accepted."""
        return self._accept(raw_file, "picker")

    def on_dropped(self, raw_file: Optional[SelectedFile], event: Optional[DragEvent] = None) -> bool:
        """Handle a drop. Returns True if the file was accepted."""
        _suppress(event)
        self._set_drag_active(False)
        return self._accept(raw_file, "drop")

    def on_drag_state_change(self, phase: DragPhase, event: Optional[DragEvent] = None) -> None:
        """Track the drop-target highlight. Never touches the session."""
        _suppress(event)
        if phase in ("enter", "over"):
            self._set_drag_active(True)
        elif phase == "leave":
            self._set_drag_active(False)
        else:
            raise ValueError(f"Unknown drag phase: {phase}")

    def on_clear(self) -> None:
        """Drop the current selection and reset the native control."""
        if self.file_input is not None:
            self.file_input.reset()
        self.on_cleared()

    def _accept(self, raw_file: Optional[SelectedFile], channel: str) -> bool:
        if raw_file is None:
            return False
        if not is_image_type(raw_file.content_type):
            # Non-image candidates are ignored, not reported
            logger.debug(f"Ignored {channel} candidate {raw_file.name!r} ({raw_file.content_type})")
            return False
        self.on_selected(raw_file)
        return True

    def _set_drag_active(self, active: bool) -> None:
        if active == self.drag_active:
            return
        self.drag_active = active
        if self.on_drag_active is not None:
            self.on_drag_active(active)


def _suppress(event: Optional[DragEvent]) -> None:
    if event is not None:
        event.prevent_default()
        event.stop_propagation()
