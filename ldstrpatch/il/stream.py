"""Chunked drivers around `LdstrNormalizer`.

Responsibilities:
- Feed text chunks from strings, iterables, async iterables, or files.
- Always send exactly one end-of-stream marker after the last chunk.
"""

from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from pathlib import Path

from loguru import logger

from ..models.datatypes import NormalizeReport
from .normalizer import LdstrNormalizer

DEFAULT_CHUNK_SIZE_CHARS = 65536


def normalize_text(text: str, strict: bool = False) -> str:
    """Normalize a complete IL text held in memory."""

    normalizer = LdstrNormalizer(strict=strict)
    return normalizer.write(text) + normalizer.write(None)


def iter_normalized(
    chunks: Iterable[str], normalizer: LdstrNormalizer | None = None
) -> Iterator[str]:
    """Yield non-empty normalized output for each chunk, then the final flush."""

    active = normalizer if normalizer is not None else LdstrNormalizer()
    for chunk in chunks:
        output = active.write(chunk)
        if output:
            yield output
    tail = active.write(None)
    if tail:
        yield tail


async def aiter_normalized(
    chunks: AsyncIterable[str], normalizer: LdstrNormalizer | None = None
) -> AsyncIterator[str]:
    """Async counterpart of `iter_normalized` for cooperative pipelines."""

    active = normalizer if normalizer is not None else LdstrNormalizer()
    async for chunk in chunks:
        output = active.write(chunk)
        if output:
            yield output
    tail = active.write(None)
    if tail:
        yield tail


def read_chunks(path: Path, chunk_size_chars: int = DEFAULT_CHUNK_SIZE_CHARS) -> Iterator[str]:
    """Yield decoded UTF-8 text from a file in fixed-size character chunks."""

    if chunk_size_chars <= 0:
        raise ValueError("`chunk_size_chars` must be a positive integer.")
    with path.open("r", encoding="utf-8", newline="") as handle:
        while True:
            chunk = handle.read(chunk_size_chars)
            if not chunk:
                return
            yield chunk


def normalize_file(
    input_path: Path,
    output_path: Path,
    chunk_size_chars: int = DEFAULT_CHUNK_SIZE_CHARS,
    strict: bool = False,
) -> NormalizeReport:
    """Stream an IL text file through the normalizer into `output_path`."""

    if not input_path.is_file():
        raise FileNotFoundError(f"Input file not found: `{input_path}`.")

    normalizer = LdstrNormalizer(strict=strict)
    chars_read = 0
    chars_written = 0

    def _counted_chunks() -> Iterator[str]:
        nonlocal chars_read
        for chunk in read_chunks(input_path, chunk_size_chars):
            chars_read += len(chunk)
            yield chunk

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8", newline="") as sink:
        for output in iter_normalized(_counted_chunks(), normalizer):
            sink.write(output)
            chars_written += len(output)

    logger.debug(
        "Normalized {} -> {} ({} merged of {} ldstr instructions).",
        input_path,
        output_path,
        normalizer.instructions_merged,
        normalizer.instructions_seen,
    )
    return NormalizeReport(
        input_path=input_path,
        output_path=output_path,
        chars_read=chars_read,
        chars_written=chars_written,
        instructions_seen=normalizer.instructions_seen,
        instructions_merged=normalizer.instructions_merged,
    )
