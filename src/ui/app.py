"""Application launcher for the upload window."""

import sys
from PySide6.QtWidgets import QApplication

from .upload_window import UploadWindow


def main():
    """Launch the upload application."""
    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("PhotoBlast")

    window = UploadWindow()
    window.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
