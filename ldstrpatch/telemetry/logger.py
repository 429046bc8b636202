"""Structured run logging utilities.

Responsibilities:
- Route every `loguru` record of a CLI run to one plain-text sink.
- Emit one `[phase]` line per stage event so runs can be grepped and diffed.

Line format:
`[phase] level=<LEVEL> stage=<stage> event=<start|complete|failure> key=value...`
with keys sorted and values reduced to shell-safe tokens.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

from loguru import logger

_SAFE_PUNCTUATION = frozenset("-_.:/")


def _token(value: object) -> str:
    """Render one context value as a stable, shell-safe token."""

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Path):
        value = value.name
    raw = "" if value is None else str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in _SAFE_PUNCTUATION else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    return "".join(f" {key}={_token(context[key])}" for key in sorted(context))


class RunLogger:
    """Own the run's loguru sink and write stage events to it."""

    def __init__(self, sink: TextIO | None = None, level: str = "INFO") -> None:
        """Replace existing loguru sinks with `sink` at `level`.

        Library modules log through `loguru.logger` directly; after this call
        their records land in the same stream as the stage events.
        """

        self.level = level
        self._sink = sink or sys.stdout
        logger.remove()
        logger.add(self._sink, format="{message}", level=level, colorize=False)

    def _emit(self, level: str, event: str, stage: str, **context: object) -> None:
        logger.log(
            level,
            f"[phase] level={level} stage={stage} event={event}{_format_context(context)}",
        )

    def log_stage_start(self, stage: str, **context: object) -> None:
        """Emit a stage-start event with its inputs."""

        self._emit("INFO", "start", stage, **context)

    def log_stage_complete(self, stage: str, **counters: object) -> None:
        """Emit a stage-complete event with result counters."""

        self._emit("INFO", "complete", stage, **counters)

    def log_stage_failure(self, stage: str, error_type: str) -> None:
        """Emit a stage-failure event naming only the exception type."""

        self._emit("ERROR", "failure", stage, error_type=error_type)
