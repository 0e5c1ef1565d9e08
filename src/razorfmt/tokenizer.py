from .attributes import parse_attributes
from .constants import PRESERVE_CONTENT_ELEMENTS, SIGIL, VOID_ELEMENTS
from .directives import consume_control_flow, consume_line_directive
from .scanner import skip_inline_expression, skip_whitespace
from .smallset import LETTERS, QUOTES, TAG_NAME_CHARS
from .tokens import Token, TokenKind


class Tokenizer:
    """Single forward pass over Razor/HTML text.

    Every emitted token is a contiguous slice of the input, so joining the
    ``raw_content`` of all tokens gives the input back. Malformed constructs
    degrade to Text tokens instead of raising.
    """

    __slots__ = ("buffer", "length", "pos", "tokens")

    def __init__(self):
        self.buffer = ""
        self.length = 0
        self.pos = 0
        self.tokens = []

    def run(self, text):
        self.buffer = text or ""
        self.length = len(self.buffer)
        self.pos = 0
        self.tokens = []

        while self.pos < self.length:
            c = self.buffer[self.pos]
            if c == SIGIL and self._consume_razor():
                continue
            if c == "<":
                if self._consume_comment() or self._consume_doctype():
                    continue
                if self._consume_close_tag() or self._consume_open_tag():
                    continue
            self._consume_text()

        return self.tokens

    # ---------------------
    # Helpers
    # ---------------------

    def _emit(self, kind, end, **fields):
        self.tokens.append(Token(kind, self.buffer[self.pos : end], **fields))
        self.pos = end

    def _emit_remainder(self):
        self._emit(TokenKind.TEXT, self.length)

    def _starts_construct(self, pos):
        buffer = self.buffer
        c = buffer[pos]
        if c == "<":
            nxt = buffer[pos + 1 : pos + 2]
            return nxt in LETTERS or nxt == "/" or nxt == "!"
        if c == SIGIL:
            return consume_control_flow(buffer, pos) >= 0 or consume_line_directive(buffer, pos) >= 0
        return False

    def _scan_tag_end(self, pos):
        # Quote-aware search for ">"; embedded @expressions are skipped whole
        # so their quotes and ">" do not count.
        buffer = self.buffer
        length = self.length
        in_quote = None
        while pos < length:
            c = buffer[pos]
            if in_quote is not None:
                if c == in_quote:
                    in_quote = None
                elif c == SIGIL:
                    pos = skip_inline_expression(buffer, pos + 1)
                    continue
            elif c in QUOTES:
                in_quote = c
            elif c == SIGIL:
                pos = skip_inline_expression(buffer, pos + 1)
                continue
            elif c == ">":
                return pos
            pos += 1
        return -1

    # ---------------------
    # Constructs
    # ---------------------

    def _consume_razor(self):
        end = consume_control_flow(self.buffer, self.pos)
        if end >= 0:
            self._emit(TokenKind.CONTROL_FLOW_BLOCK, end)
            return True
        end = consume_line_directive(self.buffer, self.pos)
        if end >= 0:
            self._emit(TokenKind.DIRECTIVE_LINE, end)
            return True
        return False

    def _consume_comment(self):
        if not self.buffer.startswith("<!--", self.pos):
            return False
        end = self.buffer.find("-->", self.pos + 4)
        if end < 0:
            self._emit_remainder()
        else:
            self._emit(TokenKind.COMMENT, end + 3)
        return True

    def _consume_doctype(self):
        if self.buffer[self.pos : self.pos + 9].upper() != "<!DOCTYPE":
            return False
        end = self.buffer.find(">", self.pos + 9)
        if end < 0:
            self._emit_remainder()
        else:
            self._emit(TokenKind.DOCTYPE, end + 1)
        return True

    def _consume_close_tag(self):
        buffer = self.buffer
        if not buffer.startswith("</", self.pos):
            return False
        end = buffer.find(">", self.pos + 2)
        if end < 0:
            self._emit_remainder()
            return True

        name_start = skip_whitespace(buffer, self.pos + 2)
        name_end = name_start
        if name_end < end and buffer[name_end] in LETTERS:
            while name_end < end and buffer[name_end] in TAG_NAME_CHARS:
                name_end += 1
        if name_end == name_start:
            self._emit(TokenKind.TEXT, end + 1)
        else:
            self._emit(TokenKind.TAG_CLOSE, end + 1, tag=buffer[name_start:name_end])
        return True

    def _consume_open_tag(self):
        buffer = self.buffer
        pos = self.pos
        if buffer[pos + 1 : pos + 2] not in LETTERS:
            return False

        end = self._scan_tag_end(pos + 1)
        if end < 0:
            self._emit_remainder()
            return True

        name_end = pos + 1
        while name_end < end and buffer[name_end] in TAG_NAME_CHARS:
            name_end += 1
        tag = buffer[pos + 1 : name_end]

        attr_string = buffer[name_end:end].rstrip()
        self_closing = attr_string.endswith("/")
        if self_closing:
            attr_string = attr_string[:-1]

        is_void = tag.lower() in VOID_ELEMENTS
        kind = TokenKind.TAG_SELF_CLOSE if self_closing or is_void else TokenKind.TAG_OPEN
        self._emit(kind, end + 1, tag=tag, attributes=parse_attributes(attr_string), is_void=is_void)
        if kind == TokenKind.TAG_OPEN and tag.lower() in PRESERVE_CONTENT_ELEMENTS:
            self._consume_raw_text(tag.lower())
        return True

    def _consume_raw_text(self, name):
        # Content of script/style/pre/textarea is one Text token up to "</name".
        # Without a closing tag the content is tokenized as usual.
        buffer = self.buffer
        pos = buffer.find("</", self.pos)
        while pos >= 0:
            after = pos + 2 + len(name)
            if buffer[pos + 2 : after].lower() == name and buffer[after : after + 1] not in TAG_NAME_CHARS:
                break
            pos = buffer.find("</", pos + 2)
        if pos > self.pos:
            self._emit(TokenKind.TEXT, pos)

    def _consume_text(self):
        # Always take the current character, then run to the next construct.
        pos = self.pos + 1
        buffer = self.buffer
        length = self.length
        while pos < length:
            c = buffer[pos]
            if (c == "<" or c == SIGIL) and self._starts_construct(pos):
                break
            pos += 1
        self._emit(TokenKind.TEXT, pos)


def tokenize(text):
    """Tokenize Razor/HTML text into a list of tokens."""
    return Tokenizer().run(text)
