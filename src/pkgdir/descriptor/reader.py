"""Reader for the Janet data syntax used by pkgs.janet and project.janet.

Produces plain Python values for atoms (str, int, float, bool, None),
:class:`Symbol` and :class:`Keyword` for names, and :class:`Compound` for
parenthesized, bracketed and braced forms.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pkgdir.errors import ReadError


class Symbol(str):
    def __repr__(self) -> str:
        return f"Symbol({str(self)!r})"


class Keyword(str):
    def __repr__(self) -> str:
        return f"Keyword({str(self)!r})"


@dataclass(frozen=True)
class Compound:
    """A delimited form: ``(...)``, ``[...]`` or ``{...}``.

    ``kind`` is the opening delimiter; ``mutable`` records a leading ``@``.
    """

    kind: str
    items: tuple
    line: int = 0
    mutable: bool = False

    @property
    def head(self) -> object:
        return self.items[0] if self.items else None

    def is_call(self, *names: str) -> bool:
        """True for a ``(name ...)`` form whose head is one of ``names``."""
        return (
            self.kind == "("
            and isinstance(self.head, Symbol)
            and self.head in names
        )


CLOSERS = {"(": ")", "[": "]", "{": "}"}

QUOTE_PREFIXES = {
    "'": "quote",
    "~": "quasiquote",
    ",": "unquote",
    ";": "splice",
}

STRING_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "f": "\f",
    "v": "\v",
    "e": "\x1b",
    '"': '"',
    "\\": "\\",
}

# Characters that end a bare token.
DELIMITERS = set("()[]{}\"'`~,;@") | set(" \t\r\n\f\v")

_INT_RE = re.compile(r"[+-]?(0x[0-9a-fA-F][0-9a-fA-F_]*|[0-9][0-9_]*)$")
_FLOAT_RE = re.compile(
    r"[+-]?([0-9][0-9_]*(\.[0-9_]*)?|\.[0-9][0-9_]*)([eE][+-]?[0-9]+)?$"
)

# Lengths of the \x, \u and \U escapes.
HEX_ESCAPES = {"x": 2, "u": 4, "U": 6}


class Reader:
    """Single-pass recursive descent reader over a source string."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0
        self._line = 1

    def _error(self, message: str) -> ReadError:
        return ReadError(message, self._line)

    def _peek(self) -> str:
        if self._pos < len(self._text):
            return self._text[self._pos]
        return ""

    def _advance(self) -> str:
        ch = self._text[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
        return ch

    def _skip_whitespace(self) -> None:
        while self._pos < len(self._text):
            ch = self._peek()
            if ch == "#":
                while self._pos < len(self._text) and self._peek() != "\n":
                    self._advance()
            elif ch.isspace():
                self._advance()
            else:
                break

    def read_all(self) -> list:
        forms = []
        while True:
            self._skip_whitespace()
            if self._pos >= len(self._text):
                return forms
            forms.append(self.read_form())

    def read_form(self) -> object:
        self._skip_whitespace()
        ch = self._peek()
        if not ch:
            raise self._error("unexpected end of input")
        if ch in CLOSERS:
            return self._read_compound(mutable=False)
        if ch in ")]}":
            raise self._error(f"unexpected {ch!r}")
        if ch == "@":
            self._advance()
            nxt = self._peek()
            if nxt in CLOSERS:
                return self._read_compound(mutable=True)
            if nxt == '"':
                return self._read_string()
            if nxt == "`":
                return self._read_long_string()
            raise self._error("'@' must precede a delimited form or string")
        if ch in QUOTE_PREFIXES:
            line = self._line
            self._advance()
            inner = self.read_form()
            return Compound("(", (Symbol(QUOTE_PREFIXES[ch]), inner), line)
        if ch == '"':
            return self._read_string()
        if ch == "`":
            return self._read_long_string()
        return self._read_token()

    def _read_compound(self, mutable: bool) -> Compound:
        line = self._line
        opener = self._advance()
        closer = CLOSERS[opener]
        items = []
        while True:
            self._skip_whitespace()
            ch = self._peek()
            if not ch:
                raise ReadError(f"unterminated {opener!r} opened here", line)
            if ch == closer:
                self._advance()
                break
            if ch in ")]}":
                raise self._error(f"expected {closer!r}, got {ch!r}")
            items.append(self.read_form())
        if opener == "{" and len(items) % 2:
            raise ReadError("struct literal has an odd number of forms", line)
        return Compound(opener, tuple(items), line, mutable)

    def _read_string(self) -> str:
        line = self._line
        self._advance()
        out: list[str] = []
        while True:
            if self._pos >= len(self._text):
                raise ReadError("unterminated string", line)
            ch = self._advance()
            if ch == '"':
                return "".join(out)
            if ch != "\\":
                out.append(ch)
                continue
            if self._pos >= len(self._text):
                raise ReadError("unterminated string", line)
            esc = self._advance()
            if esc in STRING_ESCAPES:
                out.append(STRING_ESCAPES[esc])
            elif esc in HEX_ESCAPES:
                out.append(self._read_hex_escape(esc))
            else:
                raise self._error(f"unknown escape \\{esc}")

    def _read_hex_escape(self, esc: str) -> str:
        count = HEX_ESCAPES[esc]
        digits = self._text[self._pos:self._pos + count]
        if len(digits) != count or not all(c in "0123456789abcdefABCDEF" for c in digits):
            raise self._error(f"bad \\{esc} escape")
        self._pos += count
        code = int(digits, 16)
        if code > 0x10FFFF:
            raise self._error(f"\\{esc}{digits} is outside the unicode range")
        return chr(code)

    def _read_long_string(self) -> str:
        line = self._line
        start = self._pos
        while self._peek() == "`":
            self._advance()
        fence = self._text[start:self._pos]
        end = self._text.find(fence, self._pos)
        if end < 0:
            raise ReadError("unterminated long string", line)
        body = self._text[self._pos:end]
        while self._pos < end + len(fence):
            self._advance()
        return body

    def _read_token(self) -> object:
        start = self._pos
        while self._pos < len(self._text) and self._peek() not in DELIMITERS:
            self._advance()
        token = self._text[start:self._pos]
        if not token:
            raise self._error(f"unexpected {self._peek()!r}")
        try:
            return parse_atom(token)
        except ValueError as e:
            raise self._error(f"bad token {token!r}: {e}") from e


def parse_atom(token: str) -> object:
    """Convert a bare token to a Python value, Keyword, or Symbol."""
    if token == "true":
        return True
    if token == "false":
        return False
    if token == "nil":
        return None
    if token.startswith(":"):
        return Keyword(token[1:])
    if _INT_RE.match(token):
        digits = token.replace("_", "")
        if "0x" in digits:
            return int(digits.replace("0x", "", 1), 16)
        return int(digits, 10)
    if any(c.isdigit() for c in token) and _FLOAT_RE.match(token):
        return float(token.replace("_", ""))
    return Symbol(token)


def read_forms(text: str) -> list:
    """Parse every top-level form in ``text``."""
    return Reader(text).read_all()
