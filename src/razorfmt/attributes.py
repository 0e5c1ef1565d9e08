"""Attribute parsing and printing.

Values may embed Razor expressions (``class="@(x ? "a" : "b")"``); quotes that
belong to such an expression never terminate the attribute value.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from .config import Config
from .constants import SIGIL
from .scanner import skip_inline_expression, skip_whitespace
from .smallset import ATTR_NAME_CHARS, QUOTES, WHITESPACE
from .tokens import Attribute

_EQUALS_PATTERN = re.compile(r"\s*=\s*")


def _match_name(text: str, pos: int) -> int:
    start = pos + 1 if text.startswith(SIGIL, pos) else pos
    end = start
    length = len(text)
    while end < length and text[end] in ATTR_NAME_CHARS:
        end += 1
    if end == start:
        return pos
    return end


def _skip_to_whitespace(text: str, pos: int) -> int:
    length = len(text)
    while pos < length and text[pos] not in WHITESPACE:
        pos += 1
    return pos


def _find_value_end(text: str, pos: int, quote: str) -> int:
    length = len(text)
    while pos < length:
        c = text[pos]
        if c == quote:
            return pos
        if c == SIGIL:
            pos = skip_inline_expression(text, pos + 1)
        else:
            pos += 1
    return -1


def parse_attributes(attr_string: str) -> list[Attribute]:
    """Parse an attribute-list substring into ordered records.

    Never raises: an unterminated quote takes the rest of the string, and a run
    that cannot start an attribute name is kept as a boolean attribute.
    """
    attrs: list[Attribute] = []
    length = len(attr_string)
    pos = 0
    while pos < length:
        pos = skip_whitespace(attr_string, pos)
        if pos >= length:
            break

        name_end = _match_name(attr_string, pos)
        if name_end == pos:
            end = _skip_to_whitespace(attr_string, pos)
            attrs.append(Attribute(attr_string[pos:end]))
            pos = end
            continue

        name = attr_string[pos:name_end]
        pos = name_end

        match = _EQUALS_PATTERN.match(attr_string, pos)
        if match is None:
            attrs.append(Attribute(name))
            continue
        pos = match.end()

        quote = attr_string[pos : pos + 1]
        if quote in QUOTES:
            value_start = pos + 1
            value_end = _find_value_end(attr_string, value_start, quote)
            if value_end < 0:
                attrs.append(Attribute(name, attr_string[value_start:], quote))
                break
            attrs.append(Attribute(name, attr_string[value_start:value_end], quote))
            pos = value_end + 1
        else:
            end = pos
            if attr_string.startswith(SIGIL, pos):
                end = skip_inline_expression(attr_string, pos + 1)
            end = _skip_to_whitespace(attr_string, end)
            attrs.append(Attribute(name, attr_string[pos:end], '"'))
            pos = end

    return attrs


def inline_length(tag_name: str, attrs: Sequence[Attribute], is_self_closing: bool) -> int:
    """Width of ``<tag a="b" c>`` (or ``... />``) rendered on one line."""
    length = 1 + len(tag_name)
    for attr in attrs:
        length += 1 + len(attr.render())
    return length + (3 if is_self_closing else 1)


def should_stack_attributes(
    attrs: Sequence[Attribute],
    tag_name: str,
    is_self_closing: bool,
    config: Config,
    indent_width: int = 0,
) -> bool:
    if not attrs:
        return False
    if len(attrs) > config.max_attributes_per_line:
        return True
    if config.max_line_length > 0:
        return indent_width + inline_length(tag_name, attrs, is_self_closing) > config.max_line_length
    return False


def format_stacked(
    attrs: Sequence[Attribute],
    tag_name: str,
    is_self_closing: bool,
    config: Config,
    force_inline: bool = False,
    indent_width: int = 0,
) -> str:
    """Render an opening tag inline or with one attribute per line.

    Stacked output has the tag name alone on the first line, each attribute on
    its own line one indent unit deeper, and ``>``/``/>`` alone on the last
    line. Lines carry no base indentation; the caller adds it.
    """
    if not tag_name:
        return ""

    closing = " />" if is_self_closing else ">"
    if not attrs:
        return f"<{tag_name}{closing}"

    if force_inline or not should_stack_attributes(attrs, tag_name, is_self_closing, config, indent_width):
        parts = [f"<{tag_name}"]
        parts.extend(f" {attr.render()}" for attr in attrs)
        parts.append(closing)
        return "".join(parts)

    attr_indent = " " * config.indent_size
    lines = [f"<{tag_name}"]
    lines.extend(attr_indent + attr.render() for attr in attrs)
    lines.append("/>" if is_self_closing else ">")
    return "\n".join(lines)
