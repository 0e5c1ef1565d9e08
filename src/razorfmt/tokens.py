from __future__ import annotations

from enum import Enum


class _StrEnum(str, Enum):
    """Backport of enum.StrEnum (Python 3.11+)."""


class TokenKind(_StrEnum):
    TAG_OPEN = "TagOpen"
    TAG_CLOSE = "TagClose"
    TAG_SELF_CLOSE = "TagSelfClose"
    TEXT = "Text"
    COMMENT = "Comment"
    DOCTYPE = "Doctype"
    DIRECTIVE_LINE = "DirectiveLine"
    CONTROL_FLOW_BLOCK = "ControlFlowBlock"


class Attribute:
    __slots__ = ("name", "quote", "value")

    def __init__(self, name, value=None, quote=None):
        self.name = name
        self.value = value
        self.quote = quote

    def render(self):
        if self.value is None:
            return self.name
        quote = self.quote or '"'
        return f"{self.name}={quote}{self.value}{quote}"

    def __repr__(self):
        return f"Attribute({self.name!r}, {self.value!r}, {self.quote!r})"

    def __eq__(self, other):
        if not isinstance(other, Attribute):
            return NotImplemented
        return self.name == other.name and self.value == other.value and self.quote == other.quote

    __hash__ = None


class Token:
    __slots__ = ("attributes", "is_void", "kind", "raw_content", "tag")

    def __init__(self, kind, raw_content, tag=None, attributes=None, is_void=False):
        self.kind = kind
        self.raw_content = raw_content
        self.tag = tag
        self.attributes = attributes if attributes is not None else []
        self.is_void = bool(is_void)

    def __repr__(self):
        preview = self.raw_content if len(self.raw_content) <= 40 else self.raw_content[:37] + "..."
        if self.tag is not None:
            return f"<{self.kind.value}:{self.tag} {preview!r}>"
        return f"<{self.kind.value} {preview!r}>"


class Chain:
    """A continuation clause (else/catch/finally/while) of a control-flow block."""

    __slots__ = ("body_text", "header_text", "is_trailing_while")

    def __init__(self, header_text, body_text=None, is_trailing_while=False):
        self.header_text = header_text
        self.body_text = body_text
        self.is_trailing_while = bool(is_trailing_while)

    def __repr__(self):
        return f"Chain({self.header_text!r})"


class ParsedControlFlow:
    """Shallow structure of a control-flow capture; bodies stay raw text."""

    __slots__ = ("body_text", "chains", "header_text", "keyword")

    def __init__(self, keyword, header_text, body_text, chains=None):
        self.keyword = keyword
        self.header_text = header_text
        self.body_text = body_text
        self.chains = chains if chains is not None else []

    def __repr__(self):
        chains = ", ".join(chain.header_text for chain in self.chains)
        return f"ParsedControlFlow({self.header_text!r}, chains=[{chains}])"


class SwitchCase:
    __slots__ = ("content_text", "label_text")

    def __init__(self, label_text, content_text):
        self.label_text = label_text
        self.content_text = content_text

    def __repr__(self):
        return f"SwitchCase({self.label_text!r})"


class FormatWarning:
    """A non-fatal problem met while formatting, with optional line information."""

    __slots__ = ("code", "line", "message")

    def __init__(self, code, message=None, line=None):
        self.code = code
        self.line = line
        self.message = message or code

    def __repr__(self):
        if self.line is not None:
            return f"FormatWarning({self.code!r}, line={self.line})"
        return f"FormatWarning({self.code!r})"

    def __str__(self):
        prefix = f"({self.line}): " if self.line is not None else ""
        if self.message != self.code:
            return f"{prefix}{self.code} - {self.message}"
        return f"{prefix}{self.code}"

    def __eq__(self, other):
        if not isinstance(other, FormatWarning):
            return NotImplemented
        return self.code == other.code and self.line == other.line

    __hash__ = None
