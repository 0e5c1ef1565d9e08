"""Formatter configuration.

The defaults follow the JetBrains Rider Razor style: four-space indentation and
one attribute per line once a tag carries more than one attribute.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from typing import Any

from .constants import DEFAULT_MAX_DEPTH


@dataclass(frozen=True, slots=True)
class StyleConfig:
    """Handling of ``<style>`` element content."""

    # When False the content is preserved verbatim.
    enabled: bool = False

    # Indent unit handed to the style collaborator and used to re-indent its
    # output under the tag. None means "same as Config.indent_size".
    indent_size: int | None = None

    def __post_init__(self) -> None:
        if self.indent_size is not None and self.indent_size < 1:
            raise ValueError(f"style.indent_size must be positive, got {self.indent_size}")


@dataclass(frozen=True, slots=True)
class Config:
    indent_size: int = 4

    # Tags with more attributes than this are stacked one attribute per line.
    max_attributes_per_line: int = 1

    style: StyleConfig = field(default_factory=StyleConfig)

    # Stack attributes when the inline tag would exceed this width (0 disables).
    max_line_length: int = 0

    # Nested bodies deeper than this are emitted unreformatted.
    max_depth: int = DEFAULT_MAX_DEPTH

    # Document pipeline switches.
    format_html: bool = True
    code_indent_size: int = 4
    blank_line_before_code: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.style, Mapping):
            object.__setattr__(self, "style", StyleConfig(**self.style))
        if self.indent_size < 1:
            raise ValueError(f"indent_size must be positive, got {self.indent_size}")
        if self.max_attributes_per_line < 0:
            raise ValueError(f"max_attributes_per_line must be non-negative, got {self.max_attributes_per_line}")
        if self.max_line_length < 0:
            raise ValueError(f"max_line_length must be non-negative, got {self.max_line_length}")
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if self.code_indent_size < 0:
            raise ValueError(f"code_indent_size must be non-negative, got {self.code_indent_size}")

    @property
    def style_indent_size(self) -> int:
        return self.style.indent_size or self.indent_size

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None, base: Config | None = None) -> Config:
        """Merge user options over ``base`` (or the defaults).

        Nested ``style`` options are merged key by key. Unknown keys raise
        ``ValueError``.
        """
        base = base or cls()
        if not options:
            return base

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

        updates = dict(options)
        style = updates.get("style")
        if isinstance(style, Mapping):
            style_known = {f.name for f in fields(StyleConfig)}
            style_unknown = sorted(set(style) - style_known)
            if style_unknown:
                raise ValueError(f"Unknown style configuration keys: {', '.join(style_unknown)}")
            updates["style"] = replace(base.style, **style)
        return replace(base, **updates)


DEFAULT_CONFIG = Config()
