"""Balanced-construct scanning shared by every parsing component.

All helpers work on plain ``str`` indices (0-based). A result of ``-1`` means
"not found"; none of them raise on malformed input.
"""

from __future__ import annotations

from .smallset import IDENT_CHARS, IDENT_START, WHITESPACE


def find_matching_close(text: str, start: int, open_char: str, close_char: str) -> int:
    """Return the index of the delimiter closing a group opened just before ``start``.

    Nesting of ``open_char``/``close_char`` is tracked; single- and double-quoted
    runs are opaque, and a quote preceded by a backslash does not end its run.
    Returns -1 when the text ends first.
    """
    depth = 1
    in_string = None
    length = len(text)
    pos = start
    while pos < length:
        c = text[pos]
        if in_string is not None:
            if c == in_string and text[pos - 1] != "\\":
                in_string = None
        elif c == '"' or c == "'":
            in_string = c
        elif c == open_char:
            depth += 1
        elif c == close_char:
            depth -= 1
            if depth == 0:
                return pos
        pos += 1
    return -1


def extract_brace_content(text: str, start: int) -> tuple[str | None, int]:
    """Return ``(content, close_index)`` for the ``{...}`` group at ``start``."""
    if start >= len(text) or text[start] != "{":
        return None, -1
    close = find_matching_close(text, start + 1, "{", "}")
    if close < 0:
        return None, -1
    return text[start + 1 : close], close


def skip_whitespace(text: str, pos: int) -> int:
    length = len(text)
    while pos < length and text[pos] in WHITESPACE:
        pos += 1
    return pos


def skip_identifier(text: str, pos: int) -> int:
    length = len(text)
    while pos < length and text[pos] in IDENT_CHARS:
        pos += 1
    return pos


def _skip_group(text: str, pos: int, open_char: str, close_char: str) -> int:
    # Unterminated groups run to the end of the text.
    close = find_matching_close(text, pos + 1, open_char, close_char)
    if close < 0:
        return len(text)
    return close + 1


def skip_inline_expression(text: str, pos: int) -> int:
    """Skip an embedded expression whose sigil sits just before ``pos``.

    Handles ``@(...)``, ``@[...]`` and ``@Name`` followed by any chain of
    ``.member``, ``[index]`` and ``(call)`` suffixes. Returns the index of the
    first character after the expression (``pos`` itself when nothing matched).
    """
    length = len(text)
    if pos >= length:
        return pos

    c = text[pos]
    if c == "(":
        return _skip_group(text, pos, "(", ")")
    if c == "[":
        return _skip_group(text, pos, "[", "]")
    if c not in IDENT_START:
        return pos

    pos = skip_identifier(text, pos)
    while pos < length:
        c = text[pos]
        if c == ".":
            pos = skip_identifier(text, pos + 1)
        elif c == "[":
            pos = _skip_group(text, pos, "[", "]")
        elif c == "(":
            pos = _skip_group(text, pos, "(", ")")
        else:
            break
    return pos


def _indent_width(line: str) -> int:
    return len(line) - len(line.lstrip(" \t"))


def dedent_block(text: str) -> str:
    """Remove the minimum common leading whitespace of the non-blank lines.

    Blank lines before the first non-blank line are dropped; later blank lines
    are kept as empty lines.
    """
    lines = text.split("\n")
    margin = min((_indent_width(line) for line in lines if line.strip()), default=0)
    out: list[str] = []
    for line in lines:
        if line.strip():
            out.append(line[margin:])
        elif out:
            out.append("")
    return "\n".join(out)


def indent_block(text: str, prefix: str) -> list[str]:
    """Prefix every non-blank line; blank lines after the first become empty."""
    out: list[str] = []
    for line in text.split("\n"):
        if line.strip():
            out.append(prefix + line)
        elif out:
            out.append("")
    return out
