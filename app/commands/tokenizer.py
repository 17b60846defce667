"""On-demand scanner for command argument text.

The tokenizer never splits the whole input up front. The binder drives it one
token at a time, which lets it peek at a flag, decide whether the flag is
declared, and either consume it or re-read the same position as a value. It
also lets the binder stop at any point and take the untouched remainder.

Token forms:
    flag    `-name`, only at the start of input or after whitespace. One
            following "=" or whitespace character is consumed with it.
    quoted  `"..."` with backslash escapes; runs to end of input when the
            closing quote is missing.
    bare    a run of non-whitespace characters, taken literally.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

QUOTE = '"'
ESCAPE = "\\"
FLAG_MARKER = "-"
FLAG_VALUE_SEPARATOR = "="


class TokenKind(Enum):
    FLAG = "flag"
    QUOTED = "quoted"
    BARE = "bare"


@dataclass(frozen=True)
class Token:
    """A lexical fragment.

    Attributes:
        kind: TokenKind
        text: Flag name, or the decoded value
        start: Offset of the first character in the source text
        end: Offset just past the token (and past a flag's separator)
    """

    kind: TokenKind
    text: str
    start: int
    end: int


class Tokenizer:
    """Scan `text` from left to right.

    Example:
        tokenizer = Tokenizer('-reason "spam bot" 12')
        flag = tokenizer.peek_flag()      # Token(FLAG, "reason", 0, 8)
        tokenizer.advance(flag)
        tokenizer.read_value().text       # "spam bot"
        tokenizer.remainder()             # "12"
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    @property
    def exhausted(self) -> bool:
        return self.pos >= len(self.text)

    def skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def advance(self, token: Token) -> None:
        """Move past a previously peeked token."""
        self.pos = token.end

    def peek_flag(self) -> Optional[Token]:
        """Return the flag starting at the current position, if any.

        Does not move the scan position.
        """
        text, pos = self.text, self.pos
        if pos >= len(text) or text[pos] != FLAG_MARKER:
            return None
        if pos > 0 and not text[pos - 1].isspace():
            return None

        end = pos + 1
        while (
            end < len(text)
            and not text[end].isspace()
            and text[end] != FLAG_VALUE_SEPARATOR
        ):
            end += 1
        name = text[pos + 1 : end]

        # one separator belongs to the flag
        if end < len(text) and (
            text[end] == FLAG_VALUE_SEPARATOR or text[end].isspace()
        ):
            end += 1
        return Token(TokenKind.FLAG, name, pos, end)

    def peek_value(self) -> Optional[Token]:
        """Return the quoted or bare value at the current position.

        Returns None at end of input or when the current character is
        whitespace. Does not move the scan position.
        """
        text, pos = self.text, self.pos
        if pos >= len(text) or text[pos].isspace():
            return None
        if text[pos] == QUOTE:
            return self._scan_quoted(pos)

        end = pos
        while end < len(text) and not text[end].isspace():
            end += 1
        return Token(TokenKind.BARE, text[pos:end], pos, end)

    def read_value(self) -> Optional[Token]:
        """Consume and return the value at the current position."""
        token = self.peek_value()
        if token is not None:
            self.advance(token)
        return token

    def remainder(self) -> str:
        """Consume everything left, verbatim."""
        rest = self.text[self.pos :]
        self.pos = len(self.text)
        return rest

    def _scan_quoted(self, start: int) -> Token:
        text = self.text
        pos = start + 1
        chars = []
        while pos < len(text) and text[pos] != QUOTE:
            # escape drops itself and keeps the next character literally
            if text[pos] == ESCAPE and pos + 1 < len(text):
                pos += 1
            chars.append(text[pos])
            pos += 1
        if pos < len(text):
            pos += 1  # closing quote
        return Token(TokenKind.QUOTED, "".join(chars), start, pos)
