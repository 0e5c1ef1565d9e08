"""Whole-document pipeline and the public ``format`` entry point.

A document is split into line-aligned regions: opaque ``@code``/``@functions``
blocks, which only the code collaborator may touch, and the markup between
them, which goes through :func:`~razorfmt.formatter.format_markup`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from .collaborators import CodeFormatter, StyleFormatter, invoke_code_formatter, wrap_code_block
from .config import DEFAULT_CONFIG, Config
from .formatter import format_markup
from .scanner import find_matching_close
from .tokens import FormatWarning

logger = logging.getLogger(__name__)

_CODE_BLOCK_PATTERN = re.compile(r"(?<![\w@])@(code|functions)\s*\{")


@dataclass(frozen=True, slots=True)
class CodeRegion:
    keyword: str
    start_line: int  # 0-based, inclusive
    end_line: int  # 0-based, inclusive
    body: str


@dataclass(slots=True)
class FormatResult:
    text: str
    warnings: list[FormatWarning] = field(default_factory=list)


def _line_start(text: str, pos: int) -> int:
    return text.rfind("\n", 0, pos) + 1


def _line_end(text: str, pos: int) -> int:
    end = text.find("\n", pos)
    return len(text) if end < 0 else end


def find_code_regions(text: str) -> list[CodeRegion]:
    """Locate ``@code { }`` / ``@functions { }`` blocks that own whole lines.

    A block shares no line with other content: nothing but whitespace may
    precede the sigil or follow the closing brace. Blocks that do not qualify,
    or whose braces never balance, stay part of the markup.
    """
    regions: list[CodeRegion] = []
    pos = 0
    while True:
        match = _CODE_BLOCK_PATTERN.search(text, pos)
        if match is None:
            break
        brace = match.end() - 1
        close = find_matching_close(text, brace + 1, "{", "}")
        if close < 0:
            break

        start = _line_start(text, match.start())
        end = _line_end(text, close)
        if text[start : match.start()].strip() or text[close + 1 : end].strip():
            pos = close + 1
            continue

        regions.append(
            CodeRegion(
                keyword=match.group(1),
                start_line=text.count("\n", 0, start),
                end_line=text.count("\n", 0, close),
                body=text[brace + 1 : close],
            )
        )
        pos = end
    return regions


class _DocumentWriter:
    __slots__ = ("code_formatter", "config", "lines", "style_formatter", "warnings")

    def __init__(self, config, code_formatter, style_formatter):
        self.config = config
        self.code_formatter = code_formatter
        self.style_formatter = style_formatter
        self.lines = []
        self.warnings = []

    def markup(self, chunk, after_code, before_code):
        if not chunk:
            return
        text = "\n".join(chunk)
        if not (self.config.format_html and text.strip()):
            self.lines.extend(chunk)
            return

        formatted = format_markup(
            text,
            self.config,
            code_formatter=self.code_formatter,
            style_formatter=self.style_formatter,
            warnings=self.warnings,
        )
        # One blank line survives on each side that touches a code block.
        if after_code and not chunk[0].strip():
            self.lines.append("")
        self.lines.extend(formatted.split("\n"))
        if before_code and not chunk[-1].strip():
            self.lines.append("")

    def code(self, region, source_lines):
        original = source_lines[region.start_line : region.end_line + 1]
        formatted = invoke_code_formatter(self.code_formatter, region.body, self.warnings, region.start_line + 1)
        if formatted is None:
            self.lines.extend(original)
            return

        if self.config.blank_line_before_code and self.lines and self.lines[-1].strip():
            self.lines.append("")
        block = wrap_code_block(formatted, self.config.code_indent_size, region.keyword)
        self.lines.extend(block.split("\n"))


def format_document(
    text: str,
    config: Config | None = None,
    *,
    code_formatter: CodeFormatter | None = None,
    style_formatter: StyleFormatter | None = None,
) -> FormatResult:
    """Format a complete Razor document and collect non-fatal warnings."""
    config = config or DEFAULT_CONFIG
    crlf = "\r\n" in text
    if crlf:
        text = text.replace("\r\n", "\n")
    trailing_newline = text.endswith("\n")
    if trailing_newline:
        text = text[:-1]

    source_lines = text.split("\n")
    regions = find_code_regions(text)
    logger.debug("Formatting document: %d lines, %d code regions", len(source_lines), len(regions))

    writer = _DocumentWriter(config, code_formatter, style_formatter)
    cursor = 0
    for region in regions:
        writer.markup(source_lines[cursor : region.start_line], cursor > 0, True)
        writer.code(region, source_lines)
        cursor = region.end_line + 1
    writer.markup(source_lines[cursor:], cursor > 0, False)

    output = "\n".join(writer.lines)
    if trailing_newline:
        output += "\n"
    if crlf:
        output = output.replace("\n", "\r\n")
    return FormatResult(output, writer.warnings)


def format(
    text: str,
    config: Config | None = None,
    *,
    code_formatter: CodeFormatter | None = None,
    style_formatter: StyleFormatter | None = None,
) -> str:
    """Format a Razor document. Never raises for any input string."""
    return format_document(text, config, code_formatter=code_formatter, style_formatter=style_formatter).text
