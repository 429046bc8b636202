"""Smoke tests for the normalize-then-patch workflow."""

from pathlib import Path

from typer.testing import CliRunner

from ldstrpatch.cli import app


def test_normalize_then_patch_rewrites_fragmented_url(tmp_path: Path) -> None:
    """A URL split across `ldstr` fragments can only be patched after normalization."""

    runner = CliRunner()
    raw_il = tmp_path / "raw.il"
    normalized_il = tmp_path / "work" / "app.il"
    raw_il.write_text(
        '    IL_0000: ldstr "https://www.mb3admin.com/admin/ser"+\r\n'
        '    "vice/registration/validate"\r\n'
        "    IL_0005: ret\r\n",
        encoding="utf-8",
        newline="",
    )
    patch_args = [
        "patch",
        str(normalized_il),
        "--match-pattern",
        r"https://[^/\"\s]*mb3admin\.com/admin/service[^\s\"]*",
        "--replace-regex",
        r"^https://[^/]+/",
        "--replace-content",
        "https://mirror.example/",
    ]

    normalize_result = runner.invoke(app, ["normalize", str(raw_il), str(normalized_il)])
    patch_result = runner.invoke(app, patch_args)

    assert normalize_result.exit_code == 0, normalize_result.output
    assert patch_result.exit_code == 0, patch_result.output
    assert "Replaced 1 IL string(s)" in patch_result.output
    assert (tmp_path / "work" / "patched" / "app.il").read_bytes() == (
        b'    IL_0000: ldstr "https://mirror.example/admin/service/registration/validate"\r\n'
        b"    IL_0005: ret\r\n"
    )


def test_help_lists_all_commands() -> None:
    """Top-level help should list every command."""

    result = CliRunner().invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("normalize", "replace-urls", "patch"):
        assert command in result.output
