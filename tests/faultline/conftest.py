"""Shared fixtures for faultline tests."""

from __future__ import annotations

import logging
import os
from typing import Iterator

import pytest

from packages.faultline.collections.gatherer import reset_gatherer
from packages.faultline.defaults import reset_defaults
from packages.faultline.logging.config import JsonFormatter, PlainFormatter
from packages.faultline.logging.context import clear_context


@pytest.fixture(autouse=True)
def _isolate_process_state() -> Iterator[None]:
    """Reset process-wide defaults, gatherer and logging context around each test."""
    reset_defaults()
    reset_gatherer()
    clear_context()
    yield
    reset_defaults()
    reset_gatherer()
    clear_context()


@pytest.fixture(autouse=True)
def _clear_faultline_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ``FAULTLINE_`` variables from the outer shell out of every test."""
    for name in list(os.environ):
        if name.upper().startswith("FAULTLINE_"):
            monkeypatch.delenv(name)


@pytest.fixture
def restore_root_logging() -> Iterator[logging.Logger]:
    """Drop handlers installed by ``configure_logging`` and restore the root level."""
    root = logging.getLogger()
    level = root.level
    yield root
    for handler in list(root.handlers):
        if isinstance(handler.formatter, (JsonFormatter, PlainFormatter)):
            root.removeHandler(handler)
    root.setLevel(level)
