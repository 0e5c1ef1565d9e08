"""Token-stream formatter.

Walks the tokens once with an indent counter and a few lookback flags that only
decide where blank lines go. Control-flow bodies are rendered by running the
whole tokenizer + formatter pipeline again on the de-indented body text.
"""

import logging
import re

from .attributes import format_stacked, should_stack_attributes
from .collaborators import invoke_code_formatter, invoke_style_formatter, passthrough_style, reindent_style
from .config import DEFAULT_CONFIG
from .constants import BREAK_STATEMENT, PRESERVE_CONTENT_ELEMENTS, STYLE_ELEMENT, SWITCH_KEYWORD
from .directives import parse_control_flow, parse_switch_cases
from .scanner import dedent_block, indent_block
from .tokenizer import tokenize
from .tokens import FormatWarning, TokenKind

logger = logging.getLogger(__name__)

MAX_DEPTH_EXCEEDED = "max-depth-exceeded"

_TRAILING_BREAK_PATTERN = re.compile(r"(.*?)(?:^|\s)break\s*;\s*\Z", re.DOTALL)


class Formatter:
    __slots__ = (
        "code_formatter",
        "config",
        "depth",
        "indent_level",
        "just_opened",
        "last_was_block",
        "lines",
        "seen_first_root_tag",
        "seen_root_directive",
        "style_formatter",
        "unit",
        "warnings",
    )

    def __init__(self, config=None, code_formatter=None, style_formatter=None, depth=0, warnings=None):
        self.config = config or DEFAULT_CONFIG
        self.code_formatter = code_formatter
        self.style_formatter = style_formatter or passthrough_style
        self.depth = depth
        self.warnings = warnings if warnings is not None else []
        self.unit = " " * self.config.indent_size
        self._reset()

    def _reset(self):
        self.lines = []
        self.indent_level = 0
        self.last_was_block = False
        self.just_opened = False
        self.seen_root_directive = False
        self.seen_first_root_tag = False

    def run(self, tokens):
        self._reset()
        i = 0
        count = len(tokens)
        while i < count:
            token = tokens[i]
            kind = token.kind
            if kind == TokenKind.TAG_OPEN:
                i = self._open_tag(tokens, i)
            elif kind == TokenKind.TAG_SELF_CLOSE:
                self._self_closing_tag(token)
            elif kind == TokenKind.TAG_CLOSE:
                self._close_tag(token)
            elif kind == TokenKind.TEXT:
                self._text(token)
            elif kind == TokenKind.COMMENT:
                self._comment(token.raw_content)
            elif kind == TokenKind.DOCTYPE:
                self._add(token.raw_content.strip())
            elif kind == TokenKind.DIRECTIVE_LINE:
                self._directive(token)
            elif kind == TokenKind.CONTROL_FLOW_BLOCK:
                self._control_flow(token)
            i += 1
        return "\n".join(self.lines)

    # ---------------------
    # Output helpers
    # ---------------------

    def _indent(self):
        return self.unit * self.indent_level

    def _add(self, line):
        if line:
            self.lines.append(line)

    def _add_blank(self):
        if self.lines and self.lines[-1] != "":
            self.lines.append("")

    def _extend(self, lines):
        for line in lines:
            if line:
                self._add(line)
            else:
                self._add_blank()

    def _before_content(self):
        if self.last_was_block:
            self._add_blank()
            self.last_was_block = False
        self.just_opened = False

    def _before_tag(self):
        self._before_content()
        if self.indent_level == 0 and not self.seen_first_root_tag:
            if self.seen_root_directive:
                self._add_blank()
            self.seen_first_root_tag = True

    # ---------------------
    # Tags
    # ---------------------

    def _open_tag(self, tokens, index):
        token = tokens[index]
        tag = token.tag
        lower = tag.lower()
        self._before_tag()
        indent = self._indent()

        if lower in PRESERVE_CONTENT_ELEMENTS:
            close = self._find_close(tokens, index, lower)
            if close >= 0:
                content = "".join(t.raw_content for t in tokens[index + 1 : close])
                if lower == STYLE_ELEMENT:
                    self._style_element(token, content, indent)
                else:
                    open_tag = format_stacked(token.attributes, tag, False, self.config, force_inline=True)
                    self._add(f"{indent}{open_tag}{content}</{tag}>")
                return close

        parts, close = self._inline_children(tokens, index, lower)
        if close >= 0:
            self._inline_element(token, " ".join(parts), indent)
            return close

        width = len(indent)
        for line in format_stacked(token.attributes, tag, False, self.config, indent_width=width).split("\n"):
            self._add(indent + line)
        self.indent_level += 1
        self.just_opened = True
        return index

    def _find_close(self, tokens, index, lower):
        for j in range(index + 1, len(tokens)):
            t = tokens[j]
            if t.kind == TokenKind.TAG_CLOSE and t.tag.lower() == lower:
                return j
        return -1

    def _inline_children(self, tokens, index, lower):
        """Collect single-line text up to the matching close tag.

        Returns ``(parts, close_index)``; ``close_index`` is -1 when any child is
        something other than single-line text.
        """
        parts = []
        for j in range(index + 1, len(tokens)):
            t = tokens[j]
            if t.kind == TokenKind.TAG_CLOSE and t.tag.lower() == lower:
                return parts, j
            if t.kind != TokenKind.TEXT or "\n" in t.raw_content:
                break
            part = t.raw_content.strip()
            if part:
                parts.append(part)
        return parts, -1

    def _inline_element(self, token, content, indent):
        tag = token.tag
        width = len(indent)
        closing = f"{content}</{tag}>"
        if should_stack_attributes(token.attributes, tag, False, self.config, width):
            lines = format_stacked(token.attributes, tag, False, self.config, indent_width=width).split("\n")
            for line in lines[:-1]:
                self._add(indent + line)
            self._add(indent + lines[-1] + closing)
        else:
            self._add(indent + format_stacked(token.attributes, tag, False, self.config, force_inline=True) + closing)

    def _style_element(self, token, content, indent):
        tag = token.tag
        open_tag = format_stacked(token.attributes, tag, False, self.config, force_inline=True)
        source = dedent_block(content).rstrip()
        if not (self.config.style.enabled and source):
            self._add(f"{indent}{open_tag}{content}</{tag}>")
            return

        size = self.config.style_indent_size
        formatted = invoke_style_formatter(self.style_formatter, source, size, self.warnings)
        self._add(indent + open_tag)
        self._extend(reindent_style(formatted, indent + " " * size))
        self._add(f"{indent}</{tag}>")

    def _self_closing_tag(self, token):
        self._before_tag()
        indent = self._indent()
        formatted = format_stacked(token.attributes, token.tag, True, self.config, indent_width=len(indent))
        for line in formatted.split("\n"):
            self._add(indent + line)

    def _close_tag(self, token):
        self.last_was_block = False
        self.just_opened = False
        self.indent_level = max(0, self.indent_level - 1)
        self._add(f"{self._indent()}</{token.tag}>")

    # ---------------------
    # Text, comments and directives
    # ---------------------

    def _text(self, token):
        trimmed = token.raw_content.strip()
        if not trimmed:
            return
        self._before_content()
        indent = self._indent()
        for line in trimmed.split("\n"):
            line = line.strip()
            if line:
                self._add(indent + line)
            else:
                self._add_blank()

    def _comment(self, raw):
        self._before_content()
        self._add(self._indent() + raw.strip())

    def _directive(self, token):
        self._before_content()
        trimmed = token.raw_content.strip()
        if self.indent_level == 0:
            self._add(trimmed)
            self.seen_root_directive = True
        else:
            self._add(self._indent() + trimmed)

    # ---------------------
    # Control flow
    # ---------------------

    def _control_flow(self, token):
        raw = token.raw_content
        if raw.startswith("@*"):
            self._comment(raw)
            return
        if self.lines and not self.just_opened:
            self._add_blank()
        self.just_opened = False
        self._extend(self._render_control_flow(raw, self._indent()))
        self.last_was_block = True

    def _render_control_flow(self, raw, indent):
        if self.depth >= self.config.max_depth:
            logger.debug("Nesting deeper than %d; emitting block unformatted", self.config.max_depth)
            self.warnings.append(
                FormatWarning(MAX_DEPTH_EXCEEDED, f"nesting deeper than {self.config.max_depth} levels")
            )
            return [indent + raw.strip()]

        parsed = parse_control_flow(raw)
        if parsed is None:
            return [indent + raw.strip()]

        inner = indent + self.unit
        if not parsed.keyword:
            lines = [indent + "@{"]
            formatted = invoke_code_formatter(self.code_formatter, parsed.body_text, self.warnings)
            if formatted is not None:
                lines.extend(indent_block(dedent_block(formatted).rstrip(), inner))
            else:
                lines.extend(self._render_body(parsed.body_text, inner))
            lines.append(indent + "}")
            return lines

        if parsed.keyword == SWITCH_KEYWORD:
            cases = parse_switch_cases(parsed.body_text)
            if cases is not None:
                lines = [indent + parsed.header_text, indent + "{"]
                for case in cases:
                    lines.append(f"{inner}{case.label_text}:")
                    lines.extend(self._render_case(case.content_text, inner + self.unit))
                lines.append(indent + "}")
                return lines

        lines = [indent + parsed.header_text, indent + "{"]
        lines.extend(self._render_body(parsed.body_text, inner))
        lines.append(indent + "}")
        for chain in parsed.chains:
            if chain.is_trailing_while:
                lines[-1] = f"{indent}}} {chain.header_text};"
                continue
            lines.append(indent + chain.header_text)
            lines.append(indent + "{")
            lines.extend(self._render_body(chain.body_text, inner))
            lines.append(indent + "}")
        return lines

    def _render_body(self, body, prefix):
        text = dedent_block(body)
        if not text.strip():
            return []
        formatted = format_markup(
            text,
            self.config,
            code_formatter=self.code_formatter,
            style_formatter=self.style_formatter,
            depth=self.depth + 1,
            warnings=self.warnings,
        )
        return indent_block(formatted, prefix)

    def _render_case(self, content, prefix):
        match = _TRAILING_BREAK_PATTERN.match(content)
        if match is None:
            return self._render_body(content, prefix)
        lines = self._render_body(match.group(1), prefix)
        lines.append(prefix + BREAK_STATEMENT)
        return lines


def format_markup(
    text,
    config=None,
    *,
    code_formatter=None,
    style_formatter=None,
    depth=0,
    warnings=None,
):
    """Format markup-only text (``@code`` regions are not split out here)."""
    formatter = Formatter(config, code_formatter, style_formatter, depth, warnings)
    return formatter.run(tokenize(text))
