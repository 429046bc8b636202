"""Scoped string replacement over a disassembly workspace.

Responsibilities:
- Rewrite `ldstr` operands and static literal string field constants in
  normalized IL text.
- Rewrite dumped `.js` text resources found next to the IL file.
- Write patched artifacts only when at least one substitution occurred.

Replacements run on decoded literal values and are re-escaped afterwards, so
patterns are written against the strings the program sees. The IL text must be
normalized first; a fragmented `ldstr` chain is matched one fragment at a time.
"""

from __future__ import annotations

import re
from pathlib import Path

from loguru import logger

from ..io.storage import ArtifactStore
from ..models.datatypes import PatchReport, ReplacementRecord
from ..text.replace import ScopedReplacement
from .literals import escape_literal, unescape_literal

_LITERAL_BODY = r'(?P<body>(?:[^"\\\n]|\\.)*)'
_LDSTR_RE = re.compile(r'(?P<prefix>\bldstr\s+")' + _LITERAL_BODY + '"')
_LITERAL_FIELD_RE = re.compile(
    r'(?P<prefix>\.field\s+[^\n=]*?\bstatic\b[^\n=]*?\bliteral\s+string\s+'
    r'(?P<name>[^\s=]+)\s*=\s*(?:string\s*\(\s*)?")'
    + _LITERAL_BODY
    + '"'
)
_IL_LABEL_RE = re.compile(r"\b(IL_[0-9A-Fa-f]+)\s*:")
_RESOURCE_SUFFIX = ".js"


class DisassemblyPatcher:
    """Apply one `ScopedReplacement` to IL strings, literal fields, and resources."""

    def __init__(self, replacement: ScopedReplacement) -> None:
        """Initialize the patcher with a compiled replacement rule."""

        self.replacement = replacement

    def patch_ldstr_operands(self, il_text: str) -> tuple[str, list[ReplacementRecord]]:
        """Rewrite matching `ldstr` operands and return the new text and records."""

        records: list[ReplacementRecord] = []

        def _rewrite(match: re.Match[str]) -> str:
            original = unescape_literal(match.group("body"))
            logger.debug("Checking IL string: {!r}", original)
            changed, replaced = self.replacement.apply(original)
            if not changed:
                return match.group(0)

            location = _instruction_label(il_text, match.start())
            logger.info("Replaced IL string at {}: {!r} -> {!r}", location, original, replaced)
            records.append(
                ReplacementRecord(
                    target="ldstr",
                    location=location,
                    original=original,
                    replaced=replaced,
                )
            )
            return f'{match.group("prefix")}{escape_literal(replaced)}"'

        return _LDSTR_RE.sub(_rewrite, il_text), records

    def patch_literal_fields(self, il_text: str) -> tuple[str, list[ReplacementRecord]]:
        """Rewrite matching static literal string field constants."""

        records: list[ReplacementRecord] = []

        def _rewrite(match: re.Match[str]) -> str:
            name = match.group("name")
            original = unescape_literal(match.group("body"))
            logger.debug("Checking literal field {}: {!r}", name, original)
            changed, replaced = self.replacement.apply(original)
            if not changed:
                return match.group(0)

            logger.info("Replaced literal field {}: {!r} -> {!r}", name, original, replaced)
            records.append(
                ReplacementRecord(
                    target="field",
                    location=name,
                    original=original,
                    replaced=replaced,
                )
            )
            return f'{match.group("prefix")}{escape_literal(replaced)}"'

        return _LITERAL_FIELD_RE.sub(_rewrite, il_text), records

    def patch_resources(
        self, store: ArtifactStore
    ) -> tuple[dict[Path, str], list[ReplacementRecord]]:
        """Rewrite `.js` resources in a store and return changed contents by path."""

        patched: dict[Path, str] = {}
        records: list[ReplacementRecord] = []
        for relative_path in store.list_files(_RESOURCE_SUFFIX):
            logger.debug("Checking JS resource: {}", relative_path)
            content = store.load_text(relative_path)
            changed, replaced = self.replacement.apply(content)
            if not changed:
                continue
            logger.info("Replaced content in JS resource: {}", relative_path)
            patched[relative_path] = replaced
            records.append(ReplacementRecord(target="resource", location=str(relative_path)))
        return patched, records

    def patch(
        self,
        il_path: Path,
        output_dir: Path | None = None,
        resolve_dir: Path | None = None,
    ) -> PatchReport:
        """Patch one IL file and its resources, writing results only on change.

        Args:
            il_path: Normalized IL text file.
            output_dir: Destination for patched artifacts, defaulting to
                `<il dir>/patched`.
            resolve_dir: Directory holding dumped resources, defaulting to the
                IL file's directory.

        Raises:
            FileNotFoundError: If `il_path` does not exist.
        """

        source_store = ArtifactStore(il_path.parent)
        if not source_store.exists(Path(il_path.name)):
            raise FileNotFoundError(f"IL file not found: `{il_path}`.")

        resource_store = ArtifactStore(resolve_dir if resolve_dir is not None else il_path.parent)
        target_dir = output_dir if output_dir is not None else il_path.parent / "patched"

        il_text = source_store.load_text(Path(il_path.name))
        il_text, ldstr_records = self.patch_ldstr_operands(il_text)
        il_text, field_records = self.patch_literal_fields(il_text)
        patched_resources, resource_records = self.patch_resources(resource_store)

        records = tuple(ldstr_records + field_records + resource_records)
        if not records:
            logger.info("No matching strings or resources found in {}.", il_path)
            return PatchReport(il_path=il_path, output_dir=target_dir)

        output_store = ArtifactStore(target_dir)
        written = [output_store.save_text(Path(il_path.name), il_text)]
        for relative_path, content in patched_resources.items():
            written.append(output_store.save_text(relative_path, content))
        logger.info("Saved {} patched artifact(s) to {}.", len(written), target_dir)
        return PatchReport(
            il_path=il_path,
            output_dir=target_dir,
            records=records,
            written_paths=tuple(written),
        )


def _instruction_label(text: str, offset: int) -> str:
    """Return the `IL_xxxx` label of the line containing `offset`, or its line number."""

    line_start = text.rfind("\n", 0, offset) + 1
    label = _IL_LABEL_RE.search(text, line_start, offset)
    if label is not None:
        return label.group(1)
    line_number = text.count("\n", 0, offset) + 1
    return f"line {line_number}"
