"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics
and per-command result summaries.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import PatchStageError
from .models.datatypes import NormalizeReport, PatchReport


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, PatchStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_normalize_summary(report: NormalizeReport) -> None:
    """Print normalized output path and merge counts."""

    typer.echo(f"Processed file saved to: {report.output_path}")
    typer.echo(
        f"ldstr instructions: {report.instructions_seen} "
        f"(merged: {report.instructions_merged})"
    )


def echo_patch_summary(report: PatchReport) -> None:
    """Print per-target replacement counts and written artifacts."""

    if report.total == 0:
        typer.echo("No matching strings or resources found to replace.")
        return

    typer.echo(
        f"Replaced {report.ldstr_count} IL string(s), {report.field_count} literal field(s) "
        f"and modified {report.resource_count} resource(s)."
    )
    for path in report.written_paths:
        typer.echo(f"Written: {path}")
