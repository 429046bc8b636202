"""IL string literal escape helpers.

ildasm writes string operands as C-style quoted literals. These helpers turn a
literal body into its string value and back so that replacements run on the
value the runtime would see rather than on escape sequences.
"""

from __future__ import annotations

_SIMPLE_ESCAPES = {
    "\\": "\\",
    '"': '"',
    "'": "'",
    "?": "?",
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}
_ENCODE_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
}
_OCTAL_DIGITS = frozenset("01234567")


def unescape_literal(body: str) -> str:
    """Decode the escaped body of an IL string literal (without quotes).

    Supports the simple C escapes, `\\?` and up to three octal digits. An
    unknown escape keeps its character; a trailing lone backslash is kept.
    """

    decoded: list[str] = []
    index = 0
    length = len(body)
    while index < length:
        char = body[index]
        if char != "\\":
            decoded.append(char)
            index += 1
            continue
        if index + 1 >= length:
            decoded.append(char)
            break

        marker = body[index + 1]
        if marker in _OCTAL_DIGITS:
            end = index + 1
            while end < length and end < index + 4 and body[end] in _OCTAL_DIGITS:
                end += 1
            decoded.append(chr(int(body[index + 1 : end], 8)))
            index = end
            continue

        decoded.append(_SIMPLE_ESCAPES.get(marker, marker))
        index += 2
    return "".join(decoded)


def escape_literal(value: str) -> str:
    """Encode a string value as the body of an IL string literal."""

    return "".join(_ENCODE_ESCAPES.get(char, char) for char in value)
