"""A small, forgiving scanner for the flat JSON written by the recent-ROM list."""

from __future__ import annotations

from typing import Optional

_ESCAPES = {'"': '\\"', "\\": "\\\\", "\n": "\\n", "\r": "\\r", "\t": "\\t"}
_UNESCAPES = {'"': '"', "\\": "\\", "n": "\n", "r": "\r", "t": "\t"}
_JSON_WHITESPACE = " \t\n\v\f\r"
_TIME_MAX = 2**63 - 1


def escape_json_string(text: str) -> str:
    """Escape quotes, backslashes, newlines, carriage returns and tabs."""
    return "".join(_ESCAPES.get(char, char) for char in text)


def unescape_json_string(text: str) -> str:
    """Undo ``escape_json_string``; unknown escapes keep the escaped character."""
    result: list[str] = []
    chars = iter(text)
    for char in chars:
        if char != "\\":
            result.append(char)
            continue
        escaped = next(chars, None)
        if escaped is None:
            result.append(char)
        else:
            result.append(_UNESCAPES.get(escaped, escaped))
    return "".join(result)


def _is_escaped(text: str, pos: int) -> bool:
    count = 0
    while pos > 0 and text[pos - 1] == "\\":
        count += 1
        pos -= 1
    return count % 2 == 1


def _find_string_end(text: str, opening_quote: int) -> Optional[int]:
    for index in range(opening_quote + 1, len(text)):
        if text[index] == '"' and not _is_escaped(text, index):
            return index
    return None


def _skip_whitespace(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in _JSON_WHITESPACE:
        pos += 1
    return pos


def find_matching_delimiter(
    text: str, start: int, open_char: str, close_char: str
) -> Optional[int]:
    """Index of the delimiter closing the one at ``start``, ignoring quoted text.

    Returns None when the text ends before the nesting is closed.
    """
    inside_string = False
    depth = 0
    for index in range(max(start, 0), len(text)):
        char = text[index]
        if char == '"' and not _is_escaped(text, index):
            inside_string = not inside_string
            continue
        if inside_string:
            continue
        if char == open_char:
            depth += 1
        elif char == close_char:
            depth -= 1
            if depth == 0:
                return index
    return None


def _find_value_start(object_text: str, key: str) -> Optional[int]:
    index = 0
    while index < len(object_text):
        if object_text[index] != '"' or _is_escaped(object_text, index):
            index += 1
            continue
        key_end = _find_string_end(object_text, index)
        if key_end is None:
            return None
        current_key = unescape_json_string(object_text[index + 1:key_end])
        index = key_end + 1
        if current_key != key:
            continue
        colon = _skip_whitespace(object_text, key_end + 1)
        if colon >= len(object_text) or object_text[colon] != ":":
            continue
        value_start = _skip_whitespace(object_text, colon + 1)
        return value_start if value_start < len(object_text) else None
    return None


def extract_string_value(object_text: str, key: str) -> Optional[str]:
    """String stored under ``key`` in ``object_text``, or None if absent."""
    start = _find_value_start(object_text, key)
    if start is None or object_text[start] != '"':
        return None
    end = _find_string_end(object_text, start)
    if end is None:
        return None
    return unescape_json_string(object_text[start + 1:end])


def extract_integer_value(object_text: str, key: str) -> Optional[int]:
    """Non-negative integer stored under ``key``, or None if absent or too large."""
    start = _find_value_start(object_text, key)
    if start is None:
        return None
    end = start
    while end < len(object_text) and object_text[end] in "0123456789":
        end += 1
    if end == start:
        return None
    value = int(object_text[start:end])
    if value > _TIME_MAX:
        return None
    return value