"""Integration tests for the `normalize` CLI command."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from ldstrpatch.cli import app

_FRAGMENTED_IL = (
    "  .method public hidebysig static string ApiUrl() cil managed\n"
    "  {\n"
    '    IL_0000: ldstr "https://www.mb3admin.com/admin/ser"+\n'
    '    "vice/registration/validate" /* split */\n'
    '    IL_0005: ldstr "single"\n'
    "    IL_000a: ret\n"
    "  }\n"
)


def test_normalize_command_merges_fragments_and_prints_summary(tmp_path: Path) -> None:
    """Normalize should write merged output and report instruction counts."""

    input_path = tmp_path / "app.il"
    output_path = tmp_path / "out" / "app.normalized.il"
    input_path.write_text(_FRAGMENTED_IL, encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(
        app, ["normalize", str(input_path), str(output_path), "--chunk-size", "7"]
    )

    assert result.exit_code == 0, result.output
    assert f"Processing {input_path}..." in result.output
    assert f"Processed file saved to: {output_path}" in result.output
    assert "ldstr instructions: 2 (merged: 1)" in result.output
    assert "[phase] level=INFO stage=normalize event=start input=app.il" in result.output
    assert "[phase] level=INFO stage=normalize event=complete merged=1 seen=2" in result.output

    normalized = output_path.read_text(encoding="utf-8")
    assert (
        '    IL_0000: ldstr "https://www.mb3admin.com/admin/service/registration/validate"'
        " /* split */\n"
    ) in normalized
    assert '    IL_0005: ldstr "single"\n' in normalized
    assert normalized.endswith("    IL_000a: ret\n  }\n")


def test_normalize_command_reads_defaults_from_config_file(tmp_path: Path) -> None:
    """`--config` values apply unless overridden on the command line."""

    input_path = tmp_path / "cut.il"
    input_path.write_text('IL_0000: ldstr "unterminated', encoding="utf-8")
    config_path = tmp_path / "ldstrpatch.yml"
    config_path.write_text("strict: true\nchunk_size_chars: 4\n", encoding="utf-8")
    runner = CliRunner()

    strict_result = runner.invoke(
        app,
        ["normalize", str(input_path), str(tmp_path / "strict.il"), "--config", str(config_path)],
    )
    lenient_result = runner.invoke(
        app,
        [
            "normalize",
            str(input_path),
            str(tmp_path / "lenient.il"),
            "--config",
            str(config_path),
            "--lenient",
        ],
    )

    assert strict_result.exit_code == 1
    assert "normalize failed at stage `normalize`" in strict_result.output
    assert "rerun without `--strict`" in strict_result.output
    assert lenient_result.exit_code == 0, lenient_result.output
    assert (tmp_path / "lenient.il").read_text(encoding="utf-8") == (
        'IL_0000: ldstr "unterminated"'
    )
