"""Razor Grammar Constants

This module defines the closed sets that drive every branching decision of the
tokenizer and formatter. Membership never changes at runtime; anything outside
these sets is handled as plain markup or text.

Usage:
    from razorfmt.constants import VOID_ELEMENTS, CONTROL_FLOW_KEYWORDS

References:
    - https://html.spec.whatwg.org/multipage/syntax.html#void-elements
    - https://learn.microsoft.com/aspnet/core/mvc/views/razor
"""

# The character that introduces directives and expressions
SIGIL = "@"

# HTML Element Sets (matched against the lowercased tag name)
VOID_ELEMENTS = frozenset(
    [
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    ]
)

# Inner text of these elements is never reformatted
PRESERVE_CONTENT_ELEMENTS = frozenset(
    [
        "script",
        "style",
        "pre",
        "textarea",
    ]
)

# The preserve-content element whose text may go to the style collaborator
STYLE_ELEMENT = "style"

# Razor line directives, consumed to the end of the line (exact lowercase)
LINE_DIRECTIVES = frozenset(
    [
        "inject",
        "using",
        "namespace",
        "page",
        "model",
        "inherits",
        "implements",
        "layout",
        "attribute",
        "preservewhitespace",
        "typeparam",
        "rendermode",
    ]
)

# Razor keywords followed by a braced body and optional chains
CONTROL_FLOW_KEYWORDS = frozenset(
    [
        "if",
        "for",
        "foreach",
        "while",
        "do",
        "switch",
        "try",
        "lock",
        "using",  # statement form only: @using (...) { }
        "code",
        "functions",
        "section",
    ]
)

# Blocks holding C# members; never reformatted as markup
OPAQUE_CODE_KEYWORDS = frozenset(["code", "functions"])

# Chain headers, in lookahead order
CHAIN_ELSE_IF = "else if"
CHAIN_ELSE = "else"
CHAIN_CATCH = "catch"
CHAIN_FINALLY = "finally"
CHAIN_WHILE = "while"

# Only this root keyword accepts a trailing `while (...);` chain
DO_KEYWORD = "do"
SWITCH_KEYWORD = "switch"
SECTION_KEYWORD = "section"
USING_KEYWORD = "using"

# Switch-case labels and the statement kept verbatim at the end of a case
CASE_KEYWORD = "case"
DEFAULT_KEYWORD = "default"
BREAK_STATEMENT = "break;"

# Recursion limit for re-entering the pipeline on nested bodies
DEFAULT_MAX_DEPTH = 64
