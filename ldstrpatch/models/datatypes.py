"""Core datatypes shared across ldstrpatch modules.

Responsibilities:
- Represent immutable records returned by normalize and patch stages.
- Provide explicit typing for CLI rendering and tests.

Key types:
- `NormalizeReport`, `ReplacementRecord`, and `PatchReport`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class NormalizeReport:
    """Summary of one streamed normalization run.

    Attributes:
        input_path: Source IL text file.
        output_path: Written normalized IL text file.
        chars_read: Number of characters consumed from the input.
        chars_written: Number of characters written to the output.
        instructions_seen: Number of `ldstr` instructions finalized.
        instructions_merged: Number of those built from more than one fragment.
    """

    input_path: Path
    output_path: Path
    chars_read: int
    chars_written: int
    instructions_seen: int
    instructions_merged: int


@dataclass(frozen=True, slots=True)
class ReplacementRecord:
    """One substitution applied by the disassembly patcher.

    Attributes:
        target: Replacement target kind (`ldstr`, `field`, or `resource`).
        location: Line label, field name, or resource file name.
        original: Value before replacement (`None` for resources).
        replaced: Value after replacement (`None` for resources).
    """

    target: str
    location: str
    original: str | None = None
    replaced: str | None = None


@dataclass(frozen=True, slots=True)
class PatchReport:
    """Outcome of one patch run over a disassembly workspace.

    Attributes:
        il_path: Normalized IL text file that was scanned.
        output_dir: Directory that received patched artifacts.
        records: Ordered substitutions that were applied.
        written_paths: Artifacts written, empty when nothing changed.
    """

    il_path: Path
    output_dir: Path
    records: tuple[ReplacementRecord, ...] = field(default_factory=tuple)
    written_paths: tuple[Path, ...] = field(default_factory=tuple)

    def count(self, target: str) -> int:
        """Return the number of substitutions for one target kind."""

        return sum(1 for record in self.records if record.target == target)

    @property
    def ldstr_count(self) -> int:
        """Number of patched `ldstr` operands."""

        return self.count("ldstr")

    @property
    def field_count(self) -> int:
        """Number of patched static literal string fields."""

        return self.count("field")

    @property
    def resource_count(self) -> int:
        """Number of patched `.js` resources."""

        return self.count("resource")

    @property
    def total(self) -> int:
        """Total number of substitutions across all targets."""

        return len(self.records)
