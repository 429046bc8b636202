"""Unit tests for the disassembly workspace artifact store."""

from pathlib import Path

from ldstrpatch.io.storage import ArtifactStore


def test_artifact_store_round_trips_text_without_newline_translation(tmp_path: Path) -> None:
    """Saved text should be loaded back byte-for-byte, including CRLF endings."""

    store = ArtifactStore(tmp_path / "nested")

    path = store.save_text(Path("app.il"), "nop\r\nret\n")

    assert path == tmp_path / "nested" / "app.il"
    assert path.read_bytes() == b"nop\r\nret\n"
    assert store.load_text(Path("app.il")) == "nop\r\nret\n"
    assert store.exists(Path("app.il"))
    assert not store.exists(Path("other.il"))

    (tmp_path / "nested" / "sub.il").mkdir()
    assert not store.exists(Path("sub.il"))


def test_artifact_store_lists_files_by_suffix(tmp_path: Path) -> None:
    """Suffix matching is case-insensitive and results are sorted."""

    for name in ("b.js", "A.JS", "c.txt"):
        (tmp_path / name).write_text("x", encoding="utf-8")
    (tmp_path / "dir.js").mkdir()

    store = ArtifactStore(tmp_path)

    assert store.list_files(".js") == [Path("A.JS"), Path("b.js")]
    assert ArtifactStore(tmp_path / "missing").list_files(".js") == []
