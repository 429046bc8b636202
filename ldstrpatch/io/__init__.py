"""Input/output components for ldstrpatch.

This package contains the filesystem store used to read and write a
disassembly workspace.
"""

from .storage import ArtifactStore

__all__ = ["ArtifactStore"]
