"""Drop target widget feeding Qt drag-and-drop events into an InputUnifier."""

from pathlib import Path
from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import QFrame, QLabel, QLineEdit, QVBoxLayout

from src.upload.files import SelectedFile
from src.upload.input_unifier import InputUnifier


class QtDragEvent:
    """Adapts a Qt drag event to the prevent/stop interface."""

    def __init__(self, event):
        self.event = event

    def prevent_default(self) -> None:
        if hasattr(self.event, "acceptProposedAction"):
            self.event.acceptProposedAction()

    def stop_propagation(self) -> None:
        self.event.accept()


class PickedPathField(QLineEdit):
    """Read-only field naming the selected file, standing in for a file input."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setReadOnly(True)
        self.setPlaceholderText("No file selected")

    def reset(self) -> None:
        self.clear()


def file_from_drop(event) -> Optional[SelectedFile]:
    """Return the first local file carried by a drop, if any."""
    mime = event.mimeData()
    if not mime.hasUrls():
        return None
    for url in mime.urls():
        if url.isLocalFile():
            path = Path(url.toLocalFile())
            if path.is_file():
                return SelectedFile.from_path(path)
    return None


class DropZone(QFrame):
    """Shows the preview or a drop hint; clicking an empty zone opens the picker."""

    clicked = Signal()

    IDLE_STYLE = "DropZone { border: 2px dashed #888; border-radius: 8px; }"
    ACTIVE_STYLE = "DropZone { border: 2px dashed #2a7ae2; border-radius: 8px; background: #eaf2fd; }"

    def __init__(self, unifier: InputUnifier, parent=None):
        super().__init__(parent)
        self.unifier = unifier
        self.has_preview = False
        self.setAcceptDrops(True)
        self.setMinimumSize(420, 300)
        self.setStyleSheet(self.IDLE_STYLE)

        layout = QVBoxLayout(self)
        self.image_label = QLabel()
        self.image_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.image_label)
        self.show_hint()

    def show_hint(self):
        self.has_preview = False
        self.image_label.setPixmap(QPixmap())
        self.image_label.setText("+\nDrag & drop an image here\nor click to browse")

    def show_preview(self, path: Path):
        self.has_preview = True
        pixmap = QPixmap(str(path))
        if pixmap.isNull():
            self.image_label.setText(path.name)
            return
        self.image_label.setPixmap(
            pixmap.scaled(self.width() - 24, self.height() - 24, Qt.KeepAspectRatio, Qt.SmoothTransformation)
        )

    def set_active(self, active: bool):
        self.setStyleSheet(self.ACTIVE_STYLE if active else self.IDLE_STYLE)

    def mousePressEvent(self, event):
        if not self.has_preview:
            self.clicked.emit()
        super().mousePressEvent(event)

    def dragEnterEvent(self, event):
        self.unifier.on_drag_state_change("enter", QtDragEvent(event))

    def dragMoveEvent(self, event):
        self.unifier.on_drag_state_change("over", QtDragEvent(event))

    def dragLeaveEvent(self, event):
        self.unifier.on_drag_state_change("leave", QtDragEvent(event))

    def dropEvent(self, event):
        self.unifier.on_dropped(file_from_drop(event), QtDragEvent(event))
