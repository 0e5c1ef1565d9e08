"""ASCII character classes backed by a single integer bitmask."""

import string


class SmallCharSet:
    __slots__ = ("_mask",)

    def __init__(self, chars):
        mask = 0
        for c in chars:
            code = ord(c)
            if code >= 128:
                raise ValueError("SmallCharSet only supports ASCII")
            mask |= 1 << code
        self._mask = mask

    def contains(self, c):
        if not c:
            return False
        code = ord(c)
        if code >= 128:
            return False
        return (self._mask >> code) & 1 == 1

    __contains__ = contains

    def union(self, other):
        merged = SmallCharSet("")
        merged._mask = self._mask | other._mask
        return merged

    __or__ = union

    def __repr__(self):
        chars = "".join(chr(code) for code in range(128) if (self._mask >> code) & 1)
        return f"SmallCharSet({chars!r})"


LETTERS = SmallCharSet(string.ascii_letters)
DIGITS = SmallCharSet(string.digits)
WHITESPACE = SmallCharSet(" \t\n\r\f\v")

# Identifier characters of the embedded language
IDENT_START = LETTERS | SmallCharSet("_")
IDENT_CHARS = IDENT_START | DIGITS

# Attribute names: letters, digits, `_`, `:`, `.`, `-` (after an optional sigil)
ATTR_NAME_CHARS = IDENT_CHARS | SmallCharSet(":.-")

# Tag names start with a letter, then letters, digits, `_`, `:`, `.`, `-`
TAG_NAME_CHARS = ATTR_NAME_CHARS

QUOTES = SmallCharSet("\"'")
