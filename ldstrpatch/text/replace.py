"""Regex-based replacement rules for string constants and text payloads.

Responsibilities:
- Apply a replacement only inside spans selected by an outer match pattern.
- Rewrite the host prefix of targeted URLs in plain text files.

Key types:
- `ScopedReplacement`: compiled outer/inner pattern pair with a replacement template.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

DEFAULT_URL_PATTERN = r"https://[^/\s\"'<>]+[/a-zA-Z0-9]+"
DEFAULT_HOST_PATTERN = r"^https://[^/]+/"

_DOTNET_REFERENCE_RE = re.compile(r"\$(?:\$|\{(\w+)\}|(\d+))")


def translate_replacement_template(template: str) -> str:
    """Convert .NET-style back-references (`$1`, `${name}`, `$$`) to Python syntax.

    Python-style references (`\\1`, `\\g<name>`) pass through unchanged.
    """

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1) or match.group(2)
        if name is None:
            return "$"
        return f"\\g<{name}>"

    return _DOTNET_REFERENCE_RE.sub(_substitute, template)


def _compile(pattern: str, option_name: str) -> re.Pattern[str]:
    """Compile a user pattern and name the option in the error message."""

    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ValueError(f"Invalid regular expression for `{option_name}`: {exc}") from exc


class ScopedReplacement:
    """Replace content only within spans matched by an outer pattern.

    The inner pattern never runs over the whole input, so text outside an outer
    match is left untouched even when it would match the inner pattern.
    """

    def __init__(self, match_pattern: str, replace_pattern: str, replacement: str) -> None:
        """Compile both patterns and translate the replacement template."""

        self.match_pattern = match_pattern
        self.replace_pattern = replace_pattern
        self.replacement = replacement
        self._match_re = _compile(match_pattern, "match_pattern")
        self._replace_re = _compile(replace_pattern, "replace_pattern")
        self._template = translate_replacement_template(replacement)

    def apply(self, text: str) -> tuple[bool, str]:
        """Return whether any matched span changed, and the rewritten text."""

        changed = False

        def _rewrite_span(match: re.Match[str]) -> str:
            nonlocal changed
            original = match.group(0)
            try:
                rewritten = self._replace_re.sub(self._template, original)
            except (re.error, IndexError) as exc:
                raise ValueError(
                    f"Invalid replacement template `{self.replacement}`: {exc}"
                ) from exc
            if rewritten != original:
                changed = True
            return rewritten

        output = self._match_re.sub(_rewrite_span, text)
        return changed, output


def replace_urls(
    content: str,
    *,
    url_pattern: str,
    target_urls: Iterable[str],
    host_pattern: str,
    replacement_url: str,
) -> str | None:
    """Rewrite the host prefix of matched URLs contained in a target URL.

    Args:
        content: Text to scan.
        url_pattern: Pattern selecting candidate URLs.
        target_urls: URLs whose matches should be redirected.
        host_pattern: Pattern for the prefix replaced inside each selected URL.
        replacement_url: Replacement prefix, for example `https://mirror.example/`.

    Returns:
        The rewritten text, or `None` when no URL was replaced.

    Raises:
        TypeError: If `content` is not a string.
    """

    if not isinstance(content, str):
        raise TypeError("Content must be a string.")

    targets = tuple(target_urls)
    url_re = _compile(url_pattern, "url_pattern")
    host_re = _compile(host_pattern, "host_pattern")
    modified = False

    def _redirect(match: re.Match[str]) -> str:
        nonlocal modified
        url = match.group(0)
        if not any(url in target for target in targets):
            return url
        modified = True
        return host_re.sub(lambda _: replacement_url, url, count=1)

    output = url_re.sub(_redirect, content)
    return output if modified else None
