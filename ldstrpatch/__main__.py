"""Module entrypoint for running ldstrpatch as ``python -m ldstrpatch``."""

from __future__ import annotations

from ldstrpatch.cli import main


if __name__ == "__main__":
    main()
