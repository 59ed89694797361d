"""S-expressions: a tiny token tree, its parser and its printer.

The exception message heuristics read an exception's textual rendering as
an s-expression, so this module only needs the subset of the syntax those
renderings use: bare atoms, double-quoted atoms with backslash escapes,
parenthesized lists and ``;`` line comments.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from .exceptions import SexpParseError

_DELIMITERS = frozenset('()";')
_SIMPLE_ESCAPES = {
    "\\": "\\",
    '"': '"',
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    " ": " ",
}
_ESCAPE_OUT = {v: k for k, v in _SIMPLE_ESCAPES.items() if k != " "}


@dataclass(frozen=True)
class Atom:
    """A leaf token."""

    text: str


@dataclass(frozen=True)
class SexpList:
    """A parenthesized sequence of s-expressions."""

    items: tuple["Sexp", ...] = ()


Sexp: TypeAlias = Atom | SexpList


class _Parser:
    """Recursive-descent parser over a single string."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def parse_single(self) -> Sexp:
        self._skip_blank()
        if self.pos >= len(self.text):
            raise SexpParseError("empty input")
        result = self._parse_sexp()
        self._skip_blank()
        if self.pos < len(self.text):
            raise SexpParseError(
                f"trailing content at offset {self.pos}: {self.text[self.pos:]!r}"
            )
        return result

    def _skip_blank(self) -> None:
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch.isspace():
                self.pos += 1
            elif ch == ";":
                newline = text.find("\n", self.pos)
                self.pos = len(text) if newline == -1 else newline + 1
            else:
                break

    def _parse_sexp(self) -> Sexp:
        ch = self.text[self.pos]
        if ch == "(":
            return self._parse_list()
        if ch == ")":
            raise SexpParseError(f"unexpected ')' at offset {self.pos}")
        if ch == '"':
            return self._parse_quoted()
        return self._parse_bare()

    def _parse_list(self) -> SexpList:
        start = self.pos
        self.pos += 1  # consume "("
        items: list[Sexp] = []
        while True:
            self._skip_blank()
            if self.pos >= len(self.text):
                raise SexpParseError(f"unclosed '(' at offset {start}")
            if self.text[self.pos] == ")":
                self.pos += 1
                return SexpList(tuple(items))
            items.append(self._parse_sexp())

    def _parse_quoted(self) -> Atom:
        start = self.pos
        self.pos += 1  # consume opening quote
        text = self.text
        chars: list[str] = []
        while self.pos < len(text):
            ch = text[self.pos]
            if ch == '"':
                self.pos += 1
                return Atom("".join(chars))
            if ch == "\\":
                chars.append(self._parse_escape())
                continue
            chars.append(ch)
            self.pos += 1
        raise SexpParseError(f"unterminated string at offset {start}")

    def _parse_escape(self) -> str:
        text = self.text
        self.pos += 1  # consume backslash
        if self.pos >= len(text):
            raise SexpParseError("dangling escape at end of input")
        ch = text[self.pos]
        if ch in _SIMPLE_ESCAPES:
            self.pos += 1
            return _SIMPLE_ESCAPES[ch]
        if ch == "\n":
            # Line continuation: drop the newline and leading blanks.
            self.pos += 1
            while self.pos < len(text) and text[self.pos] in " \t":
                self.pos += 1
            return ""
        if ch.isdigit():
            digits = text[self.pos:self.pos + 3]
            if len(digits) == 3 and digits.isdigit() and int(digits) < 256:
                self.pos += 3
                return chr(int(digits))
        if ch == "x":
            digits = text[self.pos + 1:self.pos + 3]
            try:
                value = int(digits, 16)
            except ValueError:
                value = None
            if value is not None and len(digits) == 2:
                self.pos += 3
                return chr(value)
        # Unknown escapes are kept literally, backslash included.
        return "\\"

    def _parse_bare(self) -> Atom:
        start = self.pos
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch.isspace() or ch in _DELIMITERS:
                break
            self.pos += 1
        return Atom(text[start:self.pos])


def parse(text: str) -> Sexp:
    """Parse ``text`` as exactly one s-expression.

    Raises:
        SexpParseError: If the text is empty, malformed or holds more than
            one s-expression.
    """
    return _Parser(text).parse_single()


def _needs_quotes(text: str) -> bool:
    if not text:
        return True
    return any(ch.isspace() or ch in _DELIMITERS or ch == "\\" or not ch.isprintable()
               for ch in text)


def _quote(text: str) -> str:
    out = ['"']
    for ch in text:
        if ch in _ESCAPE_OUT:
            out.append("\\" + _ESCAPE_OUT[ch])
        elif not ch.isprintable() and ord(ch) < 256:
            out.append(f"\\{ord(ch):03d}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)


def to_string(sexp: Sexp) -> str:
    """Print an s-expression on one line, quoting atoms only when needed."""
    out: list[str] = []
    # Pending work: s-expressions still to print, or literal separators.
    stack: list[Sexp | str] = [sexp]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            out.append(item)
        elif isinstance(item, Atom):
            out.append(_quote(item.text) if _needs_quotes(item.text) else item.text)
        else:
            out.append("(")
            stack.append(")")
            for i in range(len(item.items) - 1, -1, -1):
                stack.append(item.items[i])
                if i:
                    stack.append(" ")
    return "".join(out)


def of_value(value: Any) -> Sexp:
    """Convert a plain Python value into an s-expression.

    Strings become atoms, lists/tuples become lists, sets become lists in
    sorted printed order, mappings become lists of ``(key value)`` pairs
    and anything else becomes the atom of its ``repr``. A container that
    contains itself is cut off with the atom ``...``.
    """
    return _of_value(value, set())


def _of_value(value: Any, active: set[int]) -> Sexp:
    if isinstance(value, Atom | SexpList):
        return value
    if isinstance(value, str):
        return Atom(value)
    if isinstance(value, bool | int | float):
        return Atom(repr(value))
    if not isinstance(value, Mapping | list | tuple | set | frozenset):
        return Atom(repr(value))

    if id(value) in active:
        return Atom("...")
    active.add(id(value))
    try:
        if isinstance(value, Mapping):
            return SexpList(tuple(
                SexpList((_of_value(k, active), _of_value(v, active)))
                for k, v in value.items()
            ))
        items = [_of_value(item, active) for item in value]
        if isinstance(value, set | frozenset):
            items.sort(key=to_string)
        return SexpList(tuple(items))
    finally:
        active.discard(id(value))
