from .collaborators import CodeFormatter, StyleFormatter, passthrough_style
from .config import DEFAULT_CONFIG, Config, StyleConfig
from .document import FormatResult, format, format_document
from .formatter import Formatter, format_markup
from .tokenizer import Tokenizer, tokenize
from .tokens import Attribute, FormatWarning, Token, TokenKind

__all__ = [
    "DEFAULT_CONFIG",
    "Attribute",
    "CodeFormatter",
    "Config",
    "FormatResult",
    "FormatWarning",
    "Formatter",
    "StyleConfig",
    "StyleFormatter",
    "Token",
    "TokenKind",
    "Tokenizer",
    "format",
    "format_document",
    "format_markup",
    "passthrough_style",
    "tokenize",
]
