"""Recognizers for Razor line directives and control-flow blocks.

Recognition and structural parsing share one scan, so the span a token covers
and the structure the formatter renders from it can never disagree. Results are
shallow: bodies stay raw text and are only re-tokenized when rendered.
"""

from __future__ import annotations

import re

from .constants import (
    CASE_KEYWORD,
    CHAIN_CATCH,
    CHAIN_ELSE,
    CHAIN_ELSE_IF,
    CHAIN_FINALLY,
    CHAIN_WHILE,
    CONTROL_FLOW_KEYWORDS,
    DEFAULT_KEYWORD,
    DO_KEYWORD,
    LINE_DIRECTIVES,
    OPAQUE_CODE_KEYWORDS,
    SECTION_KEYWORD,
    SIGIL,
    USING_KEYWORD,
)
from .scanner import extract_brace_content, find_matching_close, skip_identifier, skip_whitespace
from .smallset import IDENT_CHARS, IDENT_START, LETTERS, QUOTES
from .tokens import Chain, ParsedControlFlow, SwitchCase

_ELSE_IF_PATTERN = re.compile(r"else\s*if\s*\(")
_ELSE_PATTERN = re.compile(r"else\s*\{")
_CATCH_PATTERN = re.compile(r"catch\s*(?=[({])")
_FINALLY_PATTERN = re.compile(r"finally\s*\{")
_WHILE_PATTERN = re.compile(r"while\s*\(")

_CASE_PATTERN = re.compile(r"case\s")
_DEFAULT_PATTERN = re.compile(r"default\s*:")

# A switch label may only follow one of these (or start a line)
_LABEL_PRECEDERS = frozenset(";}>")

_NOT_FOUND = (-1, None)


def consume_line_directive(text: str, pos: int) -> int:
    """Return the end (exclusive, newline not included) of a line directive at ``pos``.

    The identifier after the sigil must be an exact lowercase line-directive
    keyword not followed by ``.``, ``(`` or ``[``. Returns -1 otherwise.
    """
    if not text.startswith(SIGIL, pos):
        return -1
    start = pos + 1
    if start >= len(text) or text[start] not in LETTERS:
        return -1

    id_end = skip_identifier(text, start)
    if text[start:id_end] not in LINE_DIRECTIVES:
        return -1
    if text[id_end : id_end + 1] in (".", "(", "["):
        return -1

    newline = text.find("\n", id_end)
    if newline < 0:
        return len(text)
    return newline


def _scan_condition(text, pos):
    # pos is at "("; returns the condition including its parentheses
    close = find_matching_close(text, pos + 1, "(", ")")
    if close < 0:
        return None, -1
    return text[pos : close + 1], close + 1


def _scan_body(text, pos):
    pos = skip_whitespace(text, pos)
    body, close = extract_brace_content(text, pos)
    if body is None:
        return None, -1
    return body, close + 1


def _match_chain(text, pos, keyword):
    match = _ELSE_IF_PATTERN.match(text, pos)
    if match:
        condition, after = _scan_condition(text, match.end() - 1)
        if condition is None:
            return _NOT_FOUND
        body, end = _scan_body(text, after)
        if body is None:
            return _NOT_FOUND
        return end, Chain(f"{CHAIN_ELSE_IF} {condition}", body)

    match = _ELSE_PATTERN.match(text, pos)
    if match:
        body, end = _scan_body(text, match.end() - 1)
        if body is None:
            return _NOT_FOUND
        return end, Chain(CHAIN_ELSE, body)

    match = _CATCH_PATTERN.match(text, pos)
    if match:
        after = match.end()
        header = CHAIN_CATCH
        if text[after] == "(":
            condition, after = _scan_condition(text, after)
            if condition is None:
                return _NOT_FOUND
            header = f"{CHAIN_CATCH} {condition}"
        body, end = _scan_body(text, after)
        if body is None:
            return _NOT_FOUND
        return end, Chain(header, body)

    match = _FINALLY_PATTERN.match(text, pos)
    if match:
        body, end = _scan_body(text, match.end() - 1)
        if body is None:
            return _NOT_FOUND
        return end, Chain(CHAIN_FINALLY, body)

    if keyword == DO_KEYWORD:
        match = _WHILE_PATTERN.match(text, pos)
        if match:
            condition, after = _scan_condition(text, match.end() - 1)
            if condition is None:
                return _NOT_FOUND
            end = skip_whitespace(text, after)
            end = end + 1 if text.startswith(";", end) else after
            return end, Chain(f"{CHAIN_WHILE} {condition}", is_trailing_while=True)

    return _NOT_FOUND


def _scan_control_flow(text, pos):
    """Shared scan behind ``consume_control_flow`` and ``parse_control_flow``.

    Returns ``(end, parsed)``; ``end`` is -1 when nothing was recognized and
    ``parsed`` is None for comments and opaque code blocks.
    """
    length = len(text)
    if not text.startswith(SIGIL, pos) or pos + 1 >= length:
        return _NOT_FOUND

    start = pos + 1
    c = text[start]

    if c == "{":
        body, close = extract_brace_content(text, start)
        if body is None:
            return _NOT_FOUND
        return close + 1, ParsedControlFlow("", SIGIL, body)

    if c == "*":
        close = text.find("*@", start + 1)
        if close < 0:
            return length, None
        return close + 2, None

    if c not in LETTERS:
        return _NOT_FOUND

    id_end = skip_identifier(text, start)
    keyword = text[start:id_end]
    if keyword not in CONTROL_FLOW_KEYWORDS:
        return _NOT_FOUND

    pos = skip_whitespace(text, id_end)
    if keyword == USING_KEYWORD and not text.startswith("(", pos):
        return _NOT_FOUND

    section_name = None
    if keyword == SECTION_KEYWORD:
        if pos >= length or text[pos] not in IDENT_START:
            return _NOT_FOUND
        name_end = skip_identifier(text, pos)
        section_name = text[pos:name_end]
        pos = skip_whitespace(text, name_end)

    condition = None
    if text.startswith("(", pos):
        condition, pos = _scan_condition(text, pos)
        if condition is None:
            return _NOT_FOUND

    body, end = _scan_body(text, pos)
    if body is None:
        return _NOT_FOUND

    if keyword in OPAQUE_CODE_KEYWORDS:
        return end, None

    if section_name is not None:
        header = f"{SIGIL}{SECTION_KEYWORD} {section_name}"
        if condition is not None:
            header = f"{header} {condition}"
    elif condition is not None:
        header = f"{SIGIL}{keyword} {condition}"
    else:
        header = f"{SIGIL}{keyword}"

    parsed = ParsedControlFlow(keyword, header, body)
    while True:
        chain_end, chain = _match_chain(text, skip_whitespace(text, end), keyword)
        if chain is None:
            break
        parsed.chains.append(chain)
        end = chain_end
        if chain.is_trailing_while:
            break

    return end, parsed


def consume_control_flow(text: str, pos: int) -> int:
    """Return the end (exclusive) of the control-flow construct at ``pos``, or -1.

    Recognizes ``@{ ... }``, ``@* ... *@`` and keyword blocks with their chains.
    """
    end, _ = _scan_control_flow(text, pos)
    return end


def parse_control_flow(content: str) -> ParsedControlFlow | None:
    """Split a captured block into header, raw body and chains.

    Returns None for comments, ``@code``/``@functions`` blocks and anything that
    does not scan as a control-flow block.
    """
    end, parsed = _scan_control_flow(content, 0)
    if end < 0:
        return None
    return parsed


def _at_label_boundary(body, pos):
    if pos > 0 and body[pos - 1] in IDENT_CHARS:
        return False
    i = pos - 1
    while i >= 0 and body[i] in " \t":
        i -= 1
    return i < 0 or body[i] == "\n" or body[i] in _LABEL_PRECEDERS


def _find_label_colon(body, pos):
    depth = 0
    in_string = None
    length = len(body)
    while pos < length:
        c = body[pos]
        if in_string is not None:
            if c == in_string and body[pos - 1] != "\\":
                in_string = None
        elif c in QUOTES:
            in_string = c
        elif c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
        elif c == ":" and depth == 0:
            return pos
        pos += 1
    return -1


def _find_next_label(body, pos):
    # Quotes are not tracked here: apostrophes are common in markup prose.
    depth = 0
    length = len(body)
    while pos < length:
        c = body[pos]
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
        elif (
            depth == 0
            and (c == "c" or c == "d")
            and _at_label_boundary(body, pos)
            and (_CASE_PATTERN.match(body, pos) or _DEFAULT_PATTERN.match(body, pos))
        ):
            return pos
        pos += 1
    return length


def parse_switch_cases(body: str) -> list[SwitchCase] | None:
    """Split a switch body into its ``case``/``default`` sections.

    Labels are only recognized at brace depth 0, so property patterns such as
    ``case { IsLoading: true }:`` keep their braces. Returns None when some text
    cannot be assigned to a label.
    """
    cases: list[SwitchCase] = []
    length = len(body)
    pos = skip_whitespace(body, 0)
    while pos < length:
        if _CASE_PATTERN.match(body, pos):
            colon = _find_label_colon(body, pos + len(CASE_KEYWORD))
            if colon < 0:
                return None
            label = f"{CASE_KEYWORD} {body[pos + len(CASE_KEYWORD) : colon].strip()}"
            pos = colon + 1
        else:
            match = _DEFAULT_PATTERN.match(body, pos)
            if match is None:
                return None
            label = DEFAULT_KEYWORD
            pos = match.end()

        while pos < length and body[pos] in " \t":
            pos += 1
        end = _find_next_label(body, pos)
        cases.append(SwitchCase(label, body[pos:end].rstrip()))
        pos = skip_whitespace(body, end)

    return cases
