"""Disassembly workspace storage.

Responsibilities:
- Provide UTF-8 text access to IL files and dumped resources under one root.
- Enumerate resource files by suffix in deterministic order.
"""

from __future__ import annotations

from pathlib import Path


class ArtifactStore:
    """Filesystem-backed text artifact store rooted at one directory."""

    def __init__(self, root: Path) -> None:
        """Initialize the store with a root directory."""

        self.root = root

    def save_text(self, relative_path: Path, content: str) -> Path:
        """Save text content and return final path."""

        path = self.root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8", newline="")
        return path

    def load_text(self, relative_path: Path) -> str:
        """Load text content from artifact storage."""

        path = self.root / relative_path
        with path.open("r", encoding="utf-8", newline="") as handle:
            return handle.read()

    def exists(self, relative_path: Path) -> bool:
        """Return whether the given artifact exists as a regular file."""

        return (self.root / relative_path).is_file()

    def list_files(self, suffix: str) -> list[Path]:
        """Return root-relative file paths with a case-insensitive suffix, sorted."""

        if not self.root.is_dir():
            return []
        wanted = suffix.lower()
        return sorted(
            path.relative_to(self.root)
            for path in self.root.iterdir()
            if path.is_file() and path.name.lower().endswith(wanted)
        )
