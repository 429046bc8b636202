"""Top-level package for ldstrpatch.

This package merges `ldstr` string literals that ildasm splits across lines
and applies scoped regex replacements to the resulting disassembly. The
streaming entry point is `LdstrNormalizer`.
"""

from .il.normalizer import LdstrNormalizer

__all__ = ["LdstrNormalizer", "__version__"]

__version__ = "0.1.0"
