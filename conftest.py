"""Shared pytest fixtures for Qt application lifecycle."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtCore import QCoreApplication  # noqa: E402
from PySide6.QtWidgets import QApplication  # noqa: E402


@pytest.fixture(scope="session")
def app():
    """Provide a single QApplication for all tests."""
    instance = QApplication.instance()
    if instance is None:
        instance = QApplication(sys.argv)

    yield instance

    QCoreApplication.processEvents()
