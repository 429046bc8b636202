"""Pipeline orchestration for ldstrpatch.

Responsibilities:
- Run normalize, URL replacement, and patch stages with telemetry.
- Map stage failures to `PatchStageError` with actionable hints.

Key types:
- `LdstrPatchPipeline`: orchestration facade used by the CLI.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from ..config import LdstrPatchConfig
from ..errors import PatchStageError, UnterminatedInputError
from ..il.patcher import DisassemblyPatcher
from ..il.stream import normalize_file
from ..io.storage import ArtifactStore
from ..models.datatypes import NormalizeReport, PatchReport
from ..telemetry.logger import RunLogger
from ..text.replace import ScopedReplacement, replace_urls
from .telemetry import PipelineTelemetryMixin


class LdstrPatchPipeline(PipelineTelemetryMixin):
    """Coordinate the stages of one ldstrpatch command."""

    def __init__(self, run_logger: RunLogger | None = None) -> None:
        """Initialize optional runtime logging hooks."""

        self._run_logger = run_logger

    def normalize(
        self, input_path: Path, output_path: Path, config: LdstrPatchConfig
    ) -> NormalizeReport:
        """Merge fragmented `ldstr` literals of `input_path` into `output_path`."""

        self._validate(config.validate)
        return self._run_stage(
            "normalize",
            lambda: self._normalize(input_path, output_path, config),
            summarize=lambda report: {
                "seen": report.instructions_seen,
                "merged": report.instructions_merged,
            },
            input=input_path,
        )

    def replace_urls(
        self, input_path: Path, output_path: Path, config: LdstrPatchConfig
    ) -> bool:
        """Redirect targeted URLs in a text file; return whether output was written."""

        self._validate(config.validate_url_replacement)
        return self._run_stage(
            "replace-urls",
            lambda: self._replace_urls(input_path, output_path, config),
            summarize=lambda written: {"written": written},
            input=input_path,
        )

    def patch(self, il_path: Path, config: LdstrPatchConfig) -> PatchReport:
        """Apply the scoped replacement to an IL file and its resources."""

        self._validate(config.validate_patch)
        return self._run_stage(
            "patch",
            lambda: self._patch(il_path, config),
            summarize=lambda report: {
                "ldstr": report.ldstr_count,
                "fields": report.field_count,
                "resources": report.resource_count,
            },
            input=il_path,
        )

    @staticmethod
    def _validate(check: Callable[[], None]) -> None:
        """Run a config validation callable and map failures to the `config` stage."""

        try:
            check()
        except ValueError as exc:
            raise PatchStageError(
                stage="config",
                detail=f"Invalid configuration: {exc}",
                hint="Fix option or config file values and rerun.",
            ) from exc

    def _normalize(
        self, input_path: Path, output_path: Path, config: LdstrPatchConfig
    ) -> NormalizeReport:
        try:
            return normalize_file(
                input_path,
                output_path,
                chunk_size_chars=config.chunk_size_chars,
                strict=config.strict,
            )
        except FileNotFoundError as exc:
            raise PatchStageError(
                stage="normalize",
                detail=f"Input file not found: `{input_path}`.",
                hint="Pass the path of an ildasm text dump.",
            ) from exc
        except UnterminatedInputError as exc:
            raise PatchStageError(
                stage="normalize",
                detail=f"Failed to normalize `{input_path}`: {exc}",
                hint="Check that the IL dump is complete, or rerun without `--strict`.",
            ) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise PatchStageError(
                stage="normalize",
                detail=f"Failed to normalize `{input_path}`: {exc}",
                hint="Verify the input is readable UTF-8 text and the output path is writable.",
            ) from exc

    def _replace_urls(
        self, input_path: Path, output_path: Path, config: LdstrPatchConfig
    ) -> bool:
        store = ArtifactStore(input_path.parent)
        relative_path = Path(input_path.name)
        if not store.exists(relative_path):
            raise PatchStageError(
                stage="replace-urls",
                detail=f"Input file not found: `{input_path}`.",
                hint="Pass an existing text file path.",
            )
        content = store.load_text(relative_path)

        try:
            output = replace_urls(
                content,
                url_pattern=config.url_pattern,
                target_urls=config.target_urls,
                host_pattern=config.host_pattern,
                replacement_url=config.replacement_url or "",
            )
        except ValueError as exc:
            raise PatchStageError(
                stage="replace-urls",
                detail=str(exc),
                hint="Fix `url_pattern`/`host_pattern` and rerun.",
            ) from exc

        if output is None:
            return False
        ArtifactStore(output_path.parent).save_text(Path(output_path.name), output)
        return True

    def _patch(self, il_path: Path, config: LdstrPatchConfig) -> PatchReport:
        try:
            replacement = ScopedReplacement(
                match_pattern=config.match_pattern or "",
                replace_pattern=config.replace_pattern or "",
                replacement=config.replacement or "",
            )
            return DisassemblyPatcher(replacement).patch(
                il_path,
                output_dir=config.output_dir,
                resolve_dir=config.resolve_dir,
            )
        except FileNotFoundError as exc:
            raise PatchStageError(
                stage="patch",
                detail=str(exc),
                hint="Normalize the ildasm output first and pass the resulting `.il` path.",
            ) from exc
        except ValueError as exc:
            raise PatchStageError(
                stage="patch",
                detail=str(exc),
                hint="Check `--match-pattern`, `--replace-regex`, and `--replace-content`.",
            ) from exc
