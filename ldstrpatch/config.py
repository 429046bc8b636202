"""Configuration model and loaders for ldstrpatch.

Responsibilities:
- Define runtime configuration as a typed dataclass.
- Provide loader entry points for file- and environment-based configuration.
- Validate per-command requirements before any stage runs.

Key types:
- `LdstrPatchConfig`: normalized runtime settings for normalize, patch, and
  URL replacement commands.
- `ConfigLoader`: static construction helpers for `LdstrPatchConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .il.stream import DEFAULT_CHUNK_SIZE_CHARS
from .parsing import (
    normalize_optional_string,
    parse_permissive_boolean,
    split_whitespace_list,
)
from .text.replace import DEFAULT_HOST_PATTERN, DEFAULT_URL_PATTERN


@dataclass(slots=True)
class LdstrPatchConfig:
    """Runtime configuration for one ldstrpatch command.

    Attributes:
        match_pattern: Outer pattern selecting candidate spans for patching.
        replace_pattern: Inner pattern applied only within outer matches.
        replacement: Replacement template; supports `$1`/`${name}` references.
        resolve_dir: Directory holding dumped resources, defaulting to the IL
            file's directory.
        output_dir: Destination for patched artifacts.
        chunk_size_chars: Read size for streamed normalization.
        strict: Fail on unterminated literals/comments at end of input.
        target_urls: URLs whose matches are redirected by `replace-urls`.
        replacement_url: Prefix that replaces the host of targeted URLs.
        url_pattern: Pattern selecting candidate URLs.
        host_pattern: Pattern for the prefix replaced inside a targeted URL.
    """

    match_pattern: str | None = None
    replace_pattern: str | None = None
    replacement: str | None = None
    resolve_dir: Path | None = None
    output_dir: Path | None = None
    chunk_size_chars: int = DEFAULT_CHUNK_SIZE_CHARS
    strict: bool = False
    target_urls: tuple[str, ...] = ()
    replacement_url: str | None = None
    url_pattern: str = DEFAULT_URL_PATTERN
    host_pattern: str = DEFAULT_HOST_PATTERN

    def validate(self) -> None:
        """Validate values shared by all commands."""

        if self.chunk_size_chars <= 0:
            raise ValueError("`chunk_size_chars` must be a positive integer.")
        self._require_non_empty(self.url_pattern, "url_pattern")
        self._require_non_empty(self.host_pattern, "host_pattern")
        url = self.replacement_url
        if url is not None and (not url.startswith("http") or not url.endswith("/")):
            raise ValueError("`replacement_url` must start with `http` and end with `/`.")

    def validate_patch(self) -> None:
        """Validate values required by the `patch` command."""

        self.validate()
        self._require_non_empty(self.match_pattern, "match_pattern")
        self._require_non_empty(self.replace_pattern, "replace_pattern")
        if self.replacement is None:
            raise ValueError("`replacement` must be provided.")

    def validate_url_replacement(self) -> None:
        """Validate values required by the `replace-urls` command."""

        self.validate()
        if not self.target_urls:
            raise ValueError("`target_urls` must list at least one URL.")
        if self.replacement_url is None:
            raise ValueError("`replacement_url` must be provided.")

    def with_overrides(self, **overrides: object) -> LdstrPatchConfig:
        """Return a copy with every non-`None` override applied."""

        applied = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **applied)

    @staticmethod
    def _require_non_empty(value: str | None, field_name: str) -> None:
        """Validate that a string field is present and not blank."""

        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"`{field_name}` must be a non-empty string.")


class ConfigLoader:
    """Factory methods for creating `LdstrPatchConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "match_pattern",
            "replace_pattern",
            "replacement",
            "resolve_dir",
            "output_dir",
            "chunk_size_chars",
            "strict",
            "target_urls",
            "replacement_url",
            "url_pattern",
            "host_pattern",
        }
    )

    @staticmethod
    def from_yaml(path: Path, base: LdstrPatchConfig | None = None) -> LdstrPatchConfig:
        """Create a validated config from a YAML file.

        Keys present in the file replace the matching `base` values; absent keys
        keep them. Without `base`, absent keys take the dataclass defaults.
        """

        path_text = path.read_text(encoding="utf-8")
        payload = yaml.safe_load(path_text)
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return ConfigLoader._build_config_from_mapping(
            payload, source_label=f"YAML `{path}`", base=base
        )

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> LdstrPatchConfig:
        """Create a validated config from `LDSTRPATCH_*` environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env

        chunk_size = ConfigLoader._optional_env_positive_int(
            env_map, "LDSTRPATCH_CHUNK_SIZE_CHARS"
        )
        strict = ConfigLoader._optional_env_boolean(env_map, "LDSTRPATCH_STRICT")
        resolve_dir = ConfigLoader._optional_env_string(env_map, "LDSTRPATCH_RESOLVE_DIR")
        output_dir = ConfigLoader._optional_env_string(env_map, "LDSTRPATCH_OUTPUT_DIR")

        config = LdstrPatchConfig(
            match_pattern=env_map.get("LDSTRPATCH_MATCH_PATTERN") or None,
            replace_pattern=env_map.get("LDSTRPATCH_REPLACE_PATTERN") or None,
            replacement=env_map.get("LDSTRPATCH_REPLACEMENT"),
            resolve_dir=Path(resolve_dir) if resolve_dir is not None else None,
            output_dir=Path(output_dir) if output_dir is not None else None,
            chunk_size_chars=chunk_size or DEFAULT_CHUNK_SIZE_CHARS,
            strict=strict or False,
            target_urls=split_whitespace_list(env_map.get("LDSTRPATCH_TARGET_URLS")),
            replacement_url=ConfigLoader._optional_env_string(
                env_map, "LDSTRPATCH_REPLACEMENT_URL"
            ),
            url_pattern=env_map.get("LDSTRPATCH_URL_PATTERN") or DEFAULT_URL_PATTERN,
            host_pattern=env_map.get("LDSTRPATCH_HOST_PATTERN") or DEFAULT_HOST_PATTERN,
        )
        config.validate()
        return config

    @staticmethod
    def _build_config_from_mapping(
        payload: Mapping[str, Any], source_label: str, base: LdstrPatchConfig | None = None
    ) -> LdstrPatchConfig:
        """Build a validated config from a parsed mapping payload."""

        ConfigLoader._validate_yaml_keys(payload, source_label)

        resolve_dir = ConfigLoader._optional_non_empty_string(payload, "resolve_dir")
        output_dir = ConfigLoader._optional_non_empty_string(payload, "output_dir")
        config = LdstrPatchConfig(
            match_pattern=ConfigLoader._optional_raw_string(
                payload, "match_pattern", source_label
            ),
            replace_pattern=ConfigLoader._optional_raw_string(
                payload, "replace_pattern", source_label
            ),
            replacement=ConfigLoader._optional_raw_string(payload, "replacement", source_label),
            resolve_dir=Path(resolve_dir) if resolve_dir is not None else None,
            output_dir=Path(output_dir) if output_dir is not None else None,
            chunk_size_chars=ConfigLoader._optional_positive_int(
                payload,
                "chunk_size_chars",
                source_label,
                default=DEFAULT_CHUNK_SIZE_CHARS,
            ),
            strict=ConfigLoader._optional_boolean(payload, "strict", source_label, default=False),
            target_urls=ConfigLoader._optional_string_list(payload, "target_urls", source_label),
            replacement_url=ConfigLoader._optional_non_empty_string(payload, "replacement_url"),
            url_pattern=ConfigLoader._optional_raw_string(payload, "url_pattern", source_label)
            or DEFAULT_URL_PATTERN,
            host_pattern=ConfigLoader._optional_raw_string(payload, "host_pattern", source_label)
            or DEFAULT_HOST_PATTERN,
        )
        if base is not None:
            config = replace(base, **{str(key): getattr(config, str(key)) for key in payload})
        config.validate()
        return config

    @staticmethod
    def _validate_yaml_keys(payload: Mapping[str, Any], source_label: str) -> None:
        """Reject keys the config model does not define."""

        unknown = sorted(
            str(key) for key in set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS)
        )
        if unknown:
            key_list = ", ".join(unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

    @staticmethod
    def _optional_non_empty_string(payload: Mapping[str, Any], key: str) -> str | None:
        """Read an optional string field and normalize blank values to `None`."""

        if key not in payload:
            return None
        return normalize_optional_string(payload[key])

    @staticmethod
    def _optional_raw_string(
        payload: Mapping[str, Any], key: str, source_label: str
    ) -> str | None:
        """Read an optional string field verbatim, keeping surrounding whitespace."""

        if key not in payload or payload[key] is None:
            return None
        value = payload[key]
        if not isinstance(value, str):
            raise ValueError(f"{source_label} field `{key}` must be a string.")
        return value

    @staticmethod
    def _optional_positive_int(
        payload: Mapping[str, Any], key: str, source_label: str, default: int
    ) -> int:
        """Read and validate a positive integer payload field."""

        if key not in payload:
            return default

        raw_value = payload[key]
        if isinstance(raw_value, bool):
            raise ValueError(f"{source_label} field `{key}` must be a positive integer.")
        if isinstance(raw_value, int):
            parsed = raw_value
        else:
            normalized = normalize_optional_string(raw_value)
            if normalized is None:
                return default
            try:
                parsed = int(normalized)
            except ValueError as exc:
                raise ValueError(
                    f"{source_label} field `{key}` must be a positive integer."
                ) from exc

        if parsed <= 0:
            raise ValueError(f"{source_label} field `{key}` must be a positive integer.")
        return parsed

    @staticmethod
    def _optional_boolean(
        payload: Mapping[str, Any], key: str, source_label: str, default: bool
    ) -> bool:
        """Read and validate a boolean field from a payload."""

        if key not in payload:
            return default

        parsed = parse_permissive_boolean(payload[key])
        if parsed is None:
            raise ValueError(
                f"{source_label} field `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed

    @staticmethod
    def _optional_string_list(
        payload: Mapping[str, Any], key: str, source_label: str
    ) -> tuple[str, ...]:
        """Read a list of strings, or one whitespace-separated string."""

        if key not in payload:
            return ()
        raw = payload[key]
        if raw is not None and not isinstance(raw, (str, list, tuple)):
            raise ValueError(f"{source_label} field `{key}` must be a list of strings.")
        return split_whitespace_list(raw)

    @staticmethod
    def _optional_env_string(env: Mapping[str, str], key: str) -> str | None:
        """Read and normalize optional string environment variable values."""

        if key not in env:
            return None
        return normalize_optional_string(env.get(key))

    @staticmethod
    def _optional_env_positive_int(env: Mapping[str, str], key: str) -> int | None:
        """Read an optional positive integer from environment mapping."""

        raw_value = ConfigLoader._optional_env_string(env, key)
        if raw_value is None:
            return None
        try:
            parsed = int(raw_value)
        except ValueError as exc:
            raise ValueError(f"Environment variable `{key}` must be a positive integer.") from exc
        if parsed <= 0:
            raise ValueError(f"Environment variable `{key}` must be a positive integer.")
        return parsed

    @staticmethod
    def _optional_env_boolean(env: Mapping[str, str], key: str) -> bool | None:
        """Read an optional boolean from environment mapping."""

        if key not in env:
            return None
        parsed = parse_permissive_boolean(env.get(key))
        if parsed is None:
            raise ValueError(
                f"Environment variable `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed
