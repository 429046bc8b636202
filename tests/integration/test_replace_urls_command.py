"""Integration tests for the `replace-urls` CLI command."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from ldstrpatch.cli import app

_SCRIPT = (
    'const a = "https://mb3admin.com/admin/service/appstore/register";\n'
    'const b = "https://cdn.example/static/app.js";\n'
)


def test_replace_urls_command_writes_redirected_file(tmp_path: Path) -> None:
    """Targeted URLs are redirected and the output file is written."""

    input_path = tmp_path / "main.js"
    output_path = tmp_path / "out" / "main.js"
    input_path.write_text(_SCRIPT, encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "replace-urls",
            str(input_path),
            str(output_path),
            "--target-url",
            "https://mb3admin.com/admin/service/appstore/register",
            "--replacement-url",
            "https://mirror.example/",
        ],
    )

    assert result.exit_code == 0, result.output
    assert f"Written file: {output_path}" in result.output
    assert output_path.read_text(encoding="utf-8") == (
        'const a = "https://mirror.example/admin/service/appstore/register";\n'
        'const b = "https://cdn.example/static/app.js";\n'
    )


def test_replace_urls_command_leaves_unmatched_files_alone(tmp_path: Path) -> None:
    """No output file is written when no targeted URL occurs."""

    input_path = tmp_path / "main.js"
    output_path = tmp_path / "main.out.js"
    input_path.write_text(_SCRIPT, encoding="utf-8")
    config_path = tmp_path / "ldstrpatch.yml"
    config_path.write_text(
        "target_urls: https://unused.example/x\nreplacement_url: https://mirror.example/\n",
        encoding="utf-8",
    )
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["replace-urls", str(input_path), str(output_path), "--config", str(config_path)],
    )

    assert result.exit_code == 0, result.output
    assert f"Unchanged: {input_path}" in result.output
    assert not output_path.exists()


def test_replace_urls_command_requires_replacement_url(tmp_path: Path) -> None:
    """Missing replacement prefix fails at the config stage."""

    input_path = tmp_path / "main.js"
    input_path.write_text(_SCRIPT, encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "replace-urls",
            str(input_path),
            str(tmp_path / "out.js"),
            "--target-url",
            "https://mb3admin.com/admin",
        ],
    )

    assert result.exit_code == 1
    assert "replace-urls failed at stage `config`" in result.output
    assert "`replacement_url` must be provided." in result.output


def test_replace_urls_command_reports_missing_input(tmp_path: Path) -> None:
    """A missing input file fails at the replace-urls stage without writing output."""

    output_path = tmp_path / "out.js"

    result = CliRunner().invoke(
        app,
        [
            "replace-urls",
            str(tmp_path / "missing.js"),
            str(output_path),
            "--target-url",
            "https://mb3admin.com/admin",
            "--replacement-url",
            "https://mirror.example/",
        ],
    )

    assert result.exit_code == 1
    assert "replace-urls failed at stage `replace-urls`" in result.output
    assert "Input file not found" in result.output
    assert not output_path.exists()
