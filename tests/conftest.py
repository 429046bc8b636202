"""Shared pytest fixtures for the full ldstrpatch test suite."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def _reset_loguru_sinks() -> Iterator[None]:
    """Detach sinks added by `RunLogger` so later tests never log into closed streams."""

    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")


@pytest.fixture
def captured_warnings() -> Iterator[list[str]]:
    """Collect loguru WARNING+ messages emitted during a test."""

    messages: list[str] = []
    handler_id = logger.add(messages.append, level="WARNING", format="{message}")
    yield messages
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def _clear_ldstrpatch_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep `LDSTRPATCH_*` variables from the calling shell out of CLI tests."""

    for key in list(os.environ):
        if key.startswith("LDSTRPATCH_"):
            monkeypatch.delenv(key)
