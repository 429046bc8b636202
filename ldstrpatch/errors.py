"""Domain exceptions for normalizer, pipeline, and CLI diagnostics."""

from __future__ import annotations


class PatchStageError(RuntimeError):
    """Raised when a specific pipeline stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped pipeline error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class NormalizerError(RuntimeError):
    """Base class for `LdstrNormalizer` usage and input errors."""


class UnterminatedInputError(NormalizerError):
    """Raised in strict mode when input ends inside an open construct."""

    def __init__(self, state: str) -> None:
        """Initialize with the state machine mode active at end of stream."""

        super().__init__(f"Input ended inside an unterminated construct (state `{state}`).")
        self.state = state


class NormalizerClosedError(NormalizerError):
    """Raised when text is written to a normalizer after end of stream."""
