"""ldstrpatch pipeline package.

This package contains orchestration and stage telemetry helpers for the
normalize, replace-urls, and patch commands.
"""

from .orchestrator import LdstrPatchPipeline

__all__ = ["LdstrPatchPipeline"]
