"""Streaming `ldstr` literal normalizer for disassembled IL text.

Responsibilities:
- Collapse `ldstr "a"+ "b"` concatenation chains into one contiguous literal.
- Relocate block comments found between fragments after the merged literal.
- Reproduce every other input character unchanged, across arbitrary chunking.

Key types:
- `NormalizerState`: the mode of the character-driven state machine.
- `LoadContext`: accumulation state for one open `ldstr` instruction.
- `LdstrNormalizer`: the chunk-fed driver with `write(chunk)` / `write(None)`.

Malformed input is never rejected by default: end of stream produces a
best-effort reconstruction of whatever was accumulated. `strict=True` turns an
unterminated construct at end of stream into `UnterminatedInputError`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from loguru import logger

from ..errors import NormalizerClosedError, NormalizerError, UnterminatedInputError

LOAD_KEYWORD = "ldstr"
_QUOTE = '"'
_BACKSLASH = "\\"


class NormalizerState(Enum):
    """Mode of the normalizer state machine."""

    DEFAULT = "default"
    COMMENT_START = "comment_start"
    IN_COMMENT = "in_comment"
    COMMENT_END = "comment_end"
    LOAD_FOUND = "load_found"
    IN_LITERAL = "in_literal"
    LITERAL_END = "literal_end"
    CONCATENATING = "concatenating"


_UNTERMINATED_STATES = frozenset(
    {
        NormalizerState.LOAD_FOUND,
        NormalizerState.IN_LITERAL,
        NormalizerState.COMMENT_START,
        NormalizerState.IN_COMMENT,
        NormalizerState.COMMENT_END,
    }
)
_COMMENT_STATES = frozenset(
    {
        NormalizerState.COMMENT_START,
        NormalizerState.IN_COMMENT,
        NormalizerState.COMMENT_END,
    }
)


def _partial_keyword_length(text: str) -> int:
    """Return the length of the longest suffix of `text` that starts the load keyword."""

    for length in range(min(len(text), len(LOAD_KEYWORD) - 1), 0, -1):
        if LOAD_KEYWORD.startswith(text[-length:]):
            return length
    return 0


@dataclass(slots=True)
class LoadContext:
    """Accumulation state for one `ldstr` instruction being merged.

    Attributes:
        open_quote_offset: Index of the first opening quote in the held buffer,
            or `-1` while no quote has been seen.
        combined_literal: Escaped body of every closed fragment so far.
        fragment_buffer: Escaped body of the fragment currently being scanned.
        pending_comments: Verbatim block comments seen between fragments.
        escape_pending: Whether the previous literal character was a backslash.
        trailing_whitespace: Whitespace seen after the last closing quote.
        fragment_count: Number of closed fragments.
    """

    open_quote_offset: int = -1
    combined_literal: str = ""
    fragment_buffer: str = ""
    pending_comments: list[str] = field(default_factory=list)
    escape_pending: bool = False
    trailing_whitespace: str = ""
    fragment_count: int = 0


class LdstrNormalizer:
    """Merge fragmented `ldstr` literals in a chunked stream of IL text.

    One instance processes one stream: call `write` with each chunk in order,
    then `write(None)` once to flush. Every call returns the text that is fully
    resolved so far; concatenating all returned text yields the normalized
    stream.
    """

    def __init__(self, strict: bool = False) -> None:
        """Initialize an idle state machine.

        Args:
            strict: Raise `UnterminatedInputError` at end of stream when a
                literal, comment, or `ldstr` prefix is still open, instead of
                emitting a best-effort reconstruction.
        """

        self.strict = strict
        self.instructions_seen = 0
        self.instructions_merged = 0
        self._state = NormalizerState.DEFAULT
        self._return_state = NormalizerState.DEFAULT
        self._context: LoadContext | None = None
        self._held = ""
        self._comment = ""
        self._finished = False
        self._handlers = {
            NormalizerState.DEFAULT: self._handle_default,
            NormalizerState.COMMENT_START: self._handle_comment_start,
            NormalizerState.IN_COMMENT: self._handle_in_comment,
            NormalizerState.COMMENT_END: self._handle_comment_end,
            NormalizerState.LOAD_FOUND: self._handle_load_found,
            NormalizerState.IN_LITERAL: self._handle_in_literal,
            NormalizerState.LITERAL_END: self._handle_literal_end,
            NormalizerState.CONCATENATING: self._handle_concatenating,
        }

    @property
    def state(self) -> NormalizerState:
        """Return the current state machine mode."""

        return self._state

    @property
    def in_load(self) -> bool:
        """Return whether an `ldstr` instruction is currently being accumulated."""

        return self._context is not None

    @property
    def finished(self) -> bool:
        """Return whether the end-of-stream marker has been processed."""

        return self._finished

    def write(self, chunk: str | None) -> str:
        """Feed one chunk, or `None` for end of stream, and return resolved text."""

        if chunk is None:
            return self._end_of_stream()
        if self._finished:
            raise NormalizerClosedError("Cannot write text after end of stream.")

        parts: list[str] = []
        for char in chunk:
            emitted = self._handlers[self._state](char)
            if emitted:
                parts.append(emitted)

        # Outside a load, held text can never become part of a literal, except
        # for a keyword prefix the next chunk may complete.
        if self._context is None and self._held:
            keep = _partial_keyword_length(self._held)
            parts.append(self._held[: len(self._held) - keep])
            self._held = self._held[len(self._held) - keep :]
        return "".join(parts)

    def close(self) -> str:
        """Signal end of stream and return the final flushed text."""

        return self.write(None)

    def _end_of_stream(self) -> str:
        """Finalize any open instruction once, honoring strict mode."""

        if self._finished:
            return ""
        self._finished = True

        state = self._state
        if state in _UNTERMINATED_STATES:
            if self.strict:
                raise UnterminatedInputError(state.value)
            logger.warning(
                "Input ended inside an unterminated construct (state={}); "
                "emitting a partial reconstruction.",
                state.value,
            )

        context = self._context
        if state is NormalizerState.LOAD_FOUND and context is not None:
            # No opening quote yet: nothing to merge, keep the prefix verbatim.
            self._context = None
        elif state is NormalizerState.IN_LITERAL and context is not None:
            # A dangling backslash is dropped so it cannot escape the closing quote.
            context.combined_literal += context.fragment_buffer
            context.fragment_buffer = ""
            context.escape_pending = False

        output = self._finalize()
        if state in _COMMENT_STATES:
            output += self._comment
            self._comment = ""
        self._state = NormalizerState.DEFAULT
        return output

    def _finalize(self) -> str:
        """Render the open instruction, or flush held text when none is open."""

        context = self._context
        if context is None:
            leftover = self._held
            self._held = ""
            return leftover

        prefix = self._held[: context.open_quote_offset + 1]
        comments = " ".join(comment.strip() for comment in context.pending_comments)
        comments_text = f" {comments}" if comments else ""
        output = (
            f"{prefix}{context.combined_literal}{_QUOTE}"
            f"{comments_text}{context.trailing_whitespace}"
        )

        self.instructions_seen += 1
        if context.fragment_count > 1:
            self.instructions_merged += 1
        self._context = None
        self._held = ""
        return output

    def _start_comment(self) -> None:
        """Record the return mode and begin a candidate block comment."""

        self._return_state = self._state
        self._state = NormalizerState.COMMENT_START
        self._comment = "/"

    def _end_load(self, text: str) -> str:
        """Finalize the open load and reprocess `text` as ordinary input."""

        output = self._finalize()
        self._state = NormalizerState.DEFAULT
        for char in text:
            output += self._handlers[self._state](char)
        return output

    def _handle_default(self, char: str) -> str:
        self._held += char
        if not self._held.endswith(LOAD_KEYWORD):
            return ""

        output = self._held[: -len(LOAD_KEYWORD)]
        self._held = LOAD_KEYWORD
        self._context = LoadContext()
        self._state = NormalizerState.LOAD_FOUND
        return output

    def _handle_comment_start(self, char: str) -> str:
        if char == "*":
            self._comment += char
            self._state = NormalizerState.IN_COMMENT
            return ""

        # A lone `/` after a literal is an unexpected token: it ends the load.
        pushed_back = self._comment + char
        self._comment = ""
        self._state = self._return_state
        if self._context is None:
            self._held += pushed_back
            return ""
        return self._end_load(pushed_back)

    def _handle_in_comment(self, char: str) -> str:
        self._comment += char
        if char == "*":
            self._state = NormalizerState.COMMENT_END
        return ""

    def _handle_comment_end(self, char: str) -> str:
        self._comment += char
        if char == "/":
            if self._context is not None:
                self._context.pending_comments.append(self._comment)
                self._context.trailing_whitespace = ""
            else:
                self._held += self._comment
            self._comment = ""
            self._state = self._return_state
        elif char != "*":
            self._state = NormalizerState.IN_COMMENT
        return ""

    def _open_context(self) -> LoadContext:
        """Return the open load context; load modes are never entered without one."""

        if self._context is None:
            raise NormalizerError(
                f"Mode `{self._state.value}` reached without an open ldstr instruction."
            )
        return self._context

    def _handle_load_found(self, char: str) -> str:
        self._held += char
        if char == _QUOTE:
            self._open_context().open_quote_offset = len(self._held) - 1
            self._state = NormalizerState.IN_LITERAL
        return ""

    def _handle_in_literal(self, char: str) -> str:
        context = self._open_context()
        if context.escape_pending:
            context.fragment_buffer += _BACKSLASH + char
            context.escape_pending = False
        elif char == _BACKSLASH:
            context.escape_pending = True
        elif char == _QUOTE:
            context.combined_literal += context.fragment_buffer
            context.fragment_buffer = ""
            context.fragment_count += 1
            self._state = NormalizerState.LITERAL_END
        else:
            context.fragment_buffer += char
        return ""

    def _handle_literal_end(self, char: str) -> str:
        context = self._open_context()
        if char == "+":
            context.trailing_whitespace = ""
            self._state = NormalizerState.CONCATENATING
        elif char == "/":
            self._start_comment()
        elif char.isspace():
            context.trailing_whitespace += char
        else:
            return self._end_load(char)
        return ""

    def _handle_concatenating(self, char: str) -> str:
        if char == _QUOTE:
            self._state = NormalizerState.IN_LITERAL
        elif char == "/":
            self._start_comment()
        elif not char.isspace() and char != "+":
            return self._end_load(char)
        return ""
