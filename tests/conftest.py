from __future__ import annotations

import pytest
from PySide6.QtCore import QCoreApplication


@pytest.fixture(scope="session")
def qapp() -> QCoreApplication:
    """Single QCoreApplication shared by every test that needs Qt objects."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication(["presence-tests"])
    app.setApplicationName("presence")
    app.setApplicationVersion("0.1.0")
    return app
