"""Main window for selecting, configuring and uploading one image."""

from pathlib import Path
from typing import Dict, Optional

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QCheckBox,
    QFileDialog,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from src.upload.client import UploadClient
from src.upload.config import load_config
from src.upload.controller import UploadController
from src.upload.files import SelectedFile
from src.upload.tasks import PROCESSING_TASKS

from .drop_zone import DropZone, PickedPathField


class UploadWindow(QMainWindow):
    """Upload form backed by an UploadController."""

    # Emitted from any thread; delivered on the GUI thread
    state_changed = Signal()

    def __init__(self, controller: Optional[UploadController] = None):
        super().__init__()
        self.setWindowTitle("PhotoBlast")
        self.resize(560, 640)

        self.controller = controller or UploadController(UploadClient(load_config()))
        self.controller.subscribe(lambda _state: self.state_changed.emit())
        self.state_changed.connect(self.render_state)

        self.task_boxes: Dict[str, QCheckBox] = {}
        self.shown_preview = None

        self.setup_ui()
        self.render_state()

    def setup_ui(self):
        """Initialize UI components."""
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QVBoxLayout(central_widget)

        title = QLabel("<h1>PhotoBlast</h1><p>Upload and process your images</p>")
        layout.addWidget(title)

        # Drop zone and picker
        self.path_field = PickedPathField()
        self.unifier = self.controller.input_unifier(file_input=self.path_field)

        self.drop_zone = DropZone(self.unifier)
        self.drop_zone.clicked.connect(self.browse)
        layout.addWidget(self.drop_zone, 1)

        picker_row = QHBoxLayout()
        picker_row.addWidget(self.path_field, 1)
        browse_btn = QPushButton("Browse...")
        browse_btn.clicked.connect(self.browse)
        picker_row.addWidget(browse_btn)
        self.remove_btn = QPushButton("Remove")
        self.remove_btn.clicked.connect(self.unifier.on_clear)
        picker_row.addWidget(self.remove_btn)
        layout.addLayout(picker_row)

        # Task checkboxes in catalog order
        tasks_group = QGroupBox("Processing Tasks")
        tasks_layout = QVBoxLayout()
        for task in PROCESSING_TASKS:
            box = QCheckBox(f"{task.label} - {task.description}")
            box.clicked.connect(lambda _checked, task_id=task.id: self.controller.toggle_task(task_id))
            self.task_boxes[task.id] = box
            tasks_layout.addWidget(box)
        tasks_group.setLayout(tasks_layout)
        layout.addWidget(tasks_group)

        self.upload_btn = QPushButton("Upload & Process")
        self.upload_btn.clicked.connect(self.controller.submit)
        layout.addWidget(self.upload_btn)

        self.result_label = QLabel()
        self.result_label.setWordWrap(True)
        layout.addWidget(self.result_label)

    def browse(self):
        """Open the native picker."""
        path, _ = QFileDialog.getOpenFileName(
            self, "Select Image", "", "Images (*.png *.jpg *.jpeg *.gif *.webp *.bmp)"
        )
        if not path:
            return
        self.unifier.on_file_picked(SelectedFile.from_path(Path(path)))

    def render_state(self):
        """Refresh every widget from the controller's current state."""
        state = self.controller.state
        session = state.session

        self.drop_zone.set_active(state.drag_active)

        preview = session.preview if session else None
        if preview != self.shown_preview:
            if preview is None:
                self.drop_zone.show_hint()
            else:
                self.drop_zone.show_preview(preview.path)
            self.shown_preview = preview
        # Names the live file whichever input path selected it
        self.path_field.setText(session.file.name if session else "")
        self.remove_btn.setEnabled(session is not None)

        for task_id, box in self.task_boxes.items():
            box.setEnabled(session is not None)
            box.setChecked(task_id in state.selected_tasks)

        self.upload_btn.setEnabled(state.can_submit)
        self.upload_btn.setText("Uploading..." if state.status == "SUBMITTING" else "Upload & Process")

        result = state.result
        if result is None:
            self.result_label.clear()
            self.result_label.setStyleSheet("")
        elif result.success:
            self.result_label.setText(
                f"Upload successful!\nJob ID: {result.job_id}\nPhoto ID: {result.photo_id}"
            )
            self.result_label.setStyleSheet("color: #1b7f3b;")
        else:
            self.result_label.setText(result.message or "Upload failed")
            self.result_label.setStyleSheet("color: #b3261e;")

    def closeEvent(self, event):
        self.controller.close()
        super().closeEvent(event)
