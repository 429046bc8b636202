"""Command-line interface for ldstrpatch.

Responsibilities:
- Expose user-facing commands for normalize, replace-urls, and patch.
- Merge environment, config file, and CLI values into `LdstrPatchConfig`.
- Run pipeline stages and render their results.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import echo_normalize_summary, echo_patch_summary, exit_with_command_error
from .config import ConfigLoader, LdstrPatchConfig
from .errors import PatchStageError
from .pipeline import LdstrPatchPipeline
from .telemetry.logger import RunLogger

app = typer.Typer(
    name="ldstrpatch",
    no_args_is_help=True,
    help="Normalize and patch string constants in .NET IL disassembly.",
)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to YAML config file with command defaults."),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", help="Log every candidate string checked."),
]


def _load_config(config_path: Path | None) -> LdstrPatchConfig:
    """Layer `LDSTRPATCH_*` environment values under an optional YAML config file.

    Precedence is CLI option > config file > environment > default; CLI options
    are applied by each command on top of the returned config.
    """

    try:
        env_config = ConfigLoader.from_env(os.environ)
    except ValueError as exc:
        raise PatchStageError(
            stage="config",
            detail=f"Invalid environment configuration: {exc}",
            hint="Fix or unset the offending `LDSTRPATCH_*` variable and rerun.",
        ) from exc

    if config_path is None:
        return env_config

    try:
        return ConfigLoader.from_yaml(config_path, base=env_config)
    except FileNotFoundError as exc:
        raise PatchStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise PatchStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc
    except Exception as exc:
        raise PatchStageError(
            stage="config",
            detail=f"Failed to load config file `{config_path}`: {exc}",
            hint="Verify YAML syntax and file permissions.",
        ) from exc


def _run_logger(verbose: bool) -> RunLogger:
    """Create the run logger at the requested verbosity."""

    return RunLogger(level="DEBUG" if verbose else "INFO")


@app.command("normalize")
def normalize_command(
    input_path: Annotated[Path, typer.Argument(help="ildasm text dump to read.")],
    output_path: Annotated[Path, typer.Argument(help="Normalized IL file to write.")],
    chunk_size: Annotated[
        int | None,
        typer.Option("--chunk-size", help="Characters read per chunk (overrides config)."),
    ] = None,
    strict: Annotated[
        bool | None,
        typer.Option(
            "--strict/--lenient",
            help="Fail when input ends inside a literal or comment instead of best effort.",
        ),
    ] = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Join `ldstr` string literals split across lines into single literals."""

    typer.echo(f"Processing {input_path}...")
    try:
        config = _load_config(config_file).with_overrides(
            chunk_size_chars=chunk_size,
            strict=strict,
        )
        pipeline = LdstrPatchPipeline(run_logger=_run_logger(verbose))
        report = pipeline.normalize(input_path, output_path, config)
    except Exception as exc:
        exit_with_command_error("normalize", exc)

    echo_normalize_summary(report)


@app.command("replace-urls")
def replace_urls_command(
    input_path: Annotated[Path, typer.Argument(help="Text file to read.")],
    output_path: Annotated[Path, typer.Argument(help="File to write when URLs change.")],
    target_urls: Annotated[
        list[str] | None,
        typer.Option("--target-url", help="URL to redirect; repeat for several."),
    ] = None,
    replacement_url: Annotated[
        str | None,
        typer.Option("--replacement-url", help="Replacement prefix ending with `/`."),
    ] = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Redirect the host of targeted URLs in a text file."""

    try:
        config = _load_config(config_file).with_overrides(
            target_urls=tuple(target_urls) if target_urls else None,
            replacement_url=replacement_url,
        )
        pipeline = LdstrPatchPipeline(run_logger=_run_logger(verbose))
        written = pipeline.replace_urls(input_path, output_path, config)
    except Exception as exc:
        exit_with_command_error("replace-urls", exc)

    if written:
        typer.echo(f"Written file: {output_path}")
    else:
        typer.echo(f"Unchanged: {input_path}")


@app.command("patch")
def patch_command(
    il_path: Annotated[Path, typer.Argument(help="Normalized IL file to patch.")],
    match_pattern: Annotated[
        str | None,
        typer.Option(
            "--match-pattern",
            help="Regex identifying candidate strings or resource content to rewrite.",
        ),
    ] = None,
    replace_regex: Annotated[
        str | None,
        typer.Option(
            "--replace-regex",
            help="Regex applied only inside spans matched by `--match-pattern`.",
        ),
    ] = None,
    replace_content: Annotated[
        str | None,
        typer.Option(
            "--replace-content",
            help="Replacement text; may use capture groups like `$1`.",
        ),
    ] = None,
    resolve_dir: Annotated[
        Path | None,
        typer.Option("--resolve-dir", help="Directory holding dumped `.js` resources."),
    ] = None,
    out: Annotated[
        Path | None,
        typer.Option("--out", help="Output directory for patched artifacts."),
    ] = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Find and replace strings in IL operands, literal fields, and JS resources."""

    try:
        config = _load_config(config_file).with_overrides(
            match_pattern=match_pattern,
            replace_pattern=replace_regex,
            replacement=replace_content,
            resolve_dir=resolve_dir,
            output_dir=out,
        )
        pipeline = LdstrPatchPipeline(run_logger=_run_logger(verbose))
        report = pipeline.patch(il_path, config)
    except Exception as exc:
        exit_with_command_error("patch", exc)

    echo_patch_summary(report)


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
