"""Stage telemetry helpers for the ldstrpatch pipeline.

Responsibilities:
- Wrap one stage action with start, complete, and failure events.
- Attach result counters to the complete event when a stage provides them.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TypeVar

from ..telemetry.logger import RunLogger

_StageResult = TypeVar("_StageResult")


class PipelineTelemetryMixin:
    """Provide `_run_stage` to pipeline classes holding an optional `RunLogger`."""

    _run_logger: RunLogger | None

    def _run_stage(
        self,
        stage_name: str,
        action: Callable[[], _StageResult],
        summarize: Callable[[_StageResult], Mapping[str, object]] | None = None,
        **context: object,
    ) -> _StageResult:
        """Run one named stage and emit its telemetry events.

        Args:
            stage_name: Stage label used in events and errors.
            action: Zero-argument callable performing the stage.
            summarize: Optional mapping of the stage result to counters for the
                complete event.
            **context: Inputs reported with the start event.
        """

        run_logger = self._run_logger
        if run_logger is not None:
            run_logger.log_stage_start(stage_name, **context)
        try:
            result = action()
        except Exception as exc:
            if run_logger is not None:
                run_logger.log_stage_failure(stage_name, type(exc).__name__)
            raise
        if run_logger is not None:
            counters = dict(summarize(result)) if summarize is not None else {}
            run_logger.log_stage_complete(stage_name, **counters)
        return result
