"""Contracts for the external formatters and the glue around them.

The core never runs an external formatter itself. Callers pass callables that
follow :class:`CodeFormatter` / :class:`StyleFormatter`; a failing callable only
downgrades the region it was asked to format and leaves a
:class:`~razorfmt.tokens.FormatWarning` behind.
"""

from __future__ import annotations

import logging
from typing import Protocol

from .constants import SIGIL
from .scanner import dedent_block, extract_brace_content, indent_block
from .tokens import FormatWarning

logger = logging.getLogger(__name__)

CODE_FORMATTER_ERROR = "code-formatter-error"
STYLE_FORMATTER_ERROR = "style-formatter-error"


class CodeFormatter(Protocol):
    def __call__(self, text: str) -> tuple[str | None, str | None]: ...


class StyleFormatter(Protocol):
    def __call__(self, text: str, indent_size: int) -> str: ...


def passthrough_style(text: str, indent_size: int) -> str:
    """Default style collaborator: hands the text back unchanged."""
    return text


def extract_code_block(block: str) -> str | None:
    """Return the text between the braces of ``@code { ... }`` (or None)."""
    brace = block.find("{")
    if brace < 0:
        return None
    content, _ = extract_brace_content(block, brace)
    return content


def wrap_code_block(formatted: str, indent_size: int, keyword: str = "code") -> str:
    """Put formatted code back inside ``@keyword { }``, indented by ``indent_size``."""
    body = dedent_block(formatted).rstrip()
    if not body:
        return f"{SIGIL}{keyword} {{\n}}"
    lines = indent_block(body, " " * indent_size)
    return f"{SIGIL}{keyword} {{\n" + "\n".join(lines) + "\n}"


def reindent_style(formatted: str, prefix: str) -> list[str]:
    """Re-indent collaborator output so it sits under its tag at ``prefix``."""
    return indent_block(dedent_block(formatted).rstrip(), prefix)


def invoke_code_formatter(
    code_formatter: CodeFormatter | None,
    text: str,
    warnings: list[FormatWarning],
    line: int | None = None,
) -> str | None:
    """Run the code collaborator; failures become a warning and a None result."""
    if code_formatter is None:
        return None
    try:
        formatted, error = code_formatter(text)
    except Exception as exc:
        formatted, error = None, f"{type(exc).__name__}: {exc}"
    if error is None and formatted is None:
        error = "code formatter returned no output"
    if error is not None:
        logger.warning("Code formatter failed%s: %s", f" at line {line}" if line else "", error)
        warnings.append(FormatWarning(CODE_FORMATTER_ERROR, str(error), line))
        return None
    return formatted


def invoke_style_formatter(
    style_formatter: StyleFormatter,
    text: str,
    indent_size: int,
    warnings: list[FormatWarning],
) -> str:
    """Run the style collaborator; on failure the input text is returned."""
    try:
        formatted = style_formatter(text, indent_size)
    except Exception as exc:
        logger.warning("Style formatter failed: %s: %s", type(exc).__name__, exc)
        warnings.append(FormatWarning(STYLE_FORMATTER_ERROR, f"{type(exc).__name__}: {exc}"))
        return text
    if formatted is None:
        return text
    return formatted
