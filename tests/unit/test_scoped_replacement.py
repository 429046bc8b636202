"""Unit tests for scoped regex replacement and URL redirection."""

from __future__ import annotations

import pytest

from ldstrpatch.text.replace import (
    DEFAULT_HOST_PATTERN,
    DEFAULT_URL_PATTERN,
    ScopedReplacement,
    replace_urls,
    translate_replacement_template,
)

_MB3_MATCH = r"https://[^/\"\s]*mb3admin\.com[^\s\"]*"


def test_scoped_replacement_rewrites_only_inside_outer_matches() -> None:
    """The inner pattern must not touch text outside the outer match spans."""

    rule = ScopedReplacement(r"\[[^\]]*\]", "a", "o")

    assert rule.apply("banana [banana]") == (True, "banana [bonono]")


def test_scoped_replacement_redirects_matched_url_host() -> None:
    """A URL selected by the outer pattern should get its host prefix replaced."""

    rule = ScopedReplacement(_MB3_MATCH, DEFAULT_HOST_PATTERN, "https://mirror.example/")

    changed, output = rule.apply(
        "see https://www.mb3admin.com/admin/service and https://other.com/admin/service"
    )

    assert changed is True
    assert output == "see https://mirror.example/admin/service and https://other.com/admin/service"


def test_scoped_replacement_reports_no_change_when_inner_pattern_misses() -> None:
    """An outer match whose content is unchanged should not count as a replacement."""

    rule = ScopedReplacement(r"v\d+", "x", "y")

    assert rule.apply("release v12") == (False, "release v12")


def test_scoped_replacement_supports_dotnet_back_references() -> None:
    """`$1` and `${name}` templates should behave like .NET replacement strings."""

    numbered = ScopedReplacement(r"v\d+\.\d+", r"v(\d+)\.(\d+)", "v$2.$1")
    named = ScopedReplacement(r"id=\d+", r"id=(?P<num>\d+)", "num:${num}")

    assert numbered.apply("version v1.2") == (True, "version v2.1")
    assert named.apply("?id=42&x=1") == (True, "?num:42&x=1")


def test_translate_replacement_template_handles_escaped_dollar_and_python_syntax() -> None:
    """`$$` yields a literal dollar; Python references pass through unchanged."""

    assert translate_replacement_template("$$1") == "$1"
    assert translate_replacement_template(r"\1-\g<name>") == r"\1-\g<name>"
    assert translate_replacement_template("$0") == r"\g<0>"


def test_scoped_replacement_names_invalid_pattern_option() -> None:
    """Invalid patterns should fail with the offending option named."""

    with pytest.raises(ValueError, match="`match_pattern`"):
        ScopedReplacement("(", "a", "b")
    with pytest.raises(ValueError, match="`replace_pattern`"):
        ScopedReplacement("a", "[", "b")


def test_scoped_replacement_rejects_unknown_group_reference() -> None:
    """A template referencing a missing group should raise a `ValueError`."""

    rule = ScopedReplacement("abc", "b", "$3")

    with pytest.raises(ValueError, match="Invalid replacement template"):
        rule.apply("abc")


def test_replace_urls_redirects_only_targeted_urls() -> None:
    """Only URLs contained in a target URL should be redirected."""

    content = (
        'fetch("https://mb3admin.com/admin/service/x");\n'
        'fetch("https://keep.example/admin/service/x");\n'
    )

    output = replace_urls(
        content,
        url_pattern=DEFAULT_URL_PATTERN,
        target_urls=["https://mb3admin.com/admin/service/x/extra"],
        host_pattern=DEFAULT_HOST_PATTERN,
        replacement_url="https://mirror.example/",
    )

    assert output == (
        'fetch("https://mirror.example/admin/service/x");\n'
        'fetch("https://keep.example/admin/service/x");\n'
    )


def test_replace_urls_returns_none_without_targets_matched() -> None:
    """No replacement should be signalled with `None`."""

    output = replace_urls(
        "https://keep.example/a",
        url_pattern=DEFAULT_URL_PATTERN,
        target_urls=["https://mb3admin.com/admin"],
        host_pattern=DEFAULT_HOST_PATTERN,
        replacement_url="https://mirror.example/",
    )

    assert output is None


def test_replace_urls_rejects_non_string_content() -> None:
    """Content must be text."""

    with pytest.raises(TypeError, match="Content must be a string"):
        replace_urls(
            b"https://mb3admin.com/",  # type: ignore[arg-type]
            url_pattern=DEFAULT_URL_PATTERN,
            target_urls=[],
            host_pattern=DEFAULT_HOST_PATTERN,
            replacement_url="https://mirror.example/",
        )
