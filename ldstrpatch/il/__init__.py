"""IL disassembly processing components.

This package provides the streaming `ldstr` normalizer, its chunked drivers,
literal escape helpers, and the disassembly patcher.
"""

from .normalizer import LdstrNormalizer, LoadContext, NormalizerState
from .patcher import DisassemblyPatcher
from .stream import aiter_normalized, iter_normalized, normalize_file, normalize_text

__all__ = [
    "LdstrNormalizer",
    "LoadContext",
    "NormalizerState",
    "DisassemblyPatcher",
    "normalize_text",
    "iter_normalized",
    "aiter_normalized",
    "normalize_file",
]
