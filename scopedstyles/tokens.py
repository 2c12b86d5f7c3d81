"""Tokenizer producing a token tree with source spans, plus group rendering."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Union


class TokenizeError(ValueError):
    """Raised when source text cannot be split into a valid token tree."""


@dataclass(frozen=True)
class Span:
    """Start and end position of a token; lines are 1-based, columns 0-based."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int


class Delimiter(enum.Enum):
    PARENTHESIS = ("(", ")")
    BRACE = ("{", "}")
    BRACKET = ("[", "]")
    NONE = ("", "")

    @property
    def opening(self) -> str:
        return self.value[0]

    @property
    def closing(self) -> str:
        return self.value[1]


@dataclass(frozen=True)
class Ident:
    text: str
    span: Span

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Punct:
    char: str
    span: Span

    def __str__(self) -> str:
        return self.char


@dataclass(frozen=True)
class Literal:
    text: str
    span: Span

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Group:
    delimiter: Delimiter
    tokens: tuple = field(default_factory=tuple)
    span: Span = Span(0, 0, 0, 0)

    def __str__(self) -> str:
        inner = tokens_to_string(self.tokens)
        if self.delimiter is Delimiter.NONE:
            return inner
        if not inner:
            return self.delimiter.opening + self.delimiter.closing
        return f"{self.delimiter.opening} {inner} {self.delimiter.closing}"


Token = Union[Ident, Punct, Literal, Group]

_OPENERS = {d.opening: d for d in Delimiter if d is not Delimiter.NONE}
_CLOSERS = {d.closing: d for d in Delimiter if d is not Delimiter.NONE}


@dataclass
class SpaceTracker:
    """Remembers where the previous token ended to decide on a separating space."""

    line: int = 0
    col: int = 0

    def spacing(self, span: Span) -> str:
        """Return ' ' if the token starts after a gap on the same line, then advance."""
        gap = " " if self.line == span.start_line and span.start_col > self.col else ""
        self.line = span.end_line
        self.col = span.end_col
        return gap


class _Lexer:
    def __init__(self, source: str) -> None:
        self.src = source
        self.pos = 0
        self.line = 1
        self.col = 0

    def peek(self, offset: int = 0) -> str:
        i = self.pos + offset
        return self.src[i] if i < len(self.src) else ""

    def advance(self, count: int = 1) -> str:
        taken = self.src[self.pos:self.pos + count]
        for ch in taken:
            if ch == "\n":
                self.line += 1
                self.col = 0
            else:
                self.col += 1
        self.pos += len(taken)
        return taken

    def skip_trivia(self) -> None:
        while self.pos < len(self.src):
            ch = self.peek()
            if ch.isspace():
                self.advance()
            elif ch == "/" and self.peek(1) == "/":
                while self.pos < len(self.src) and self.peek() != "\n":
                    self.advance()
            elif ch == "/" and self.peek(1) == "*":
                start = (self.line, self.col)
                self.advance(2)
                depth = 1
                while depth:
                    if self.pos >= len(self.src):
                        raise TokenizeError(f"unterminated block comment at line {start[0]}")
                    if self.peek() == "/" and self.peek(1) == "*":
                        depth += 1
                        self.advance(2)
                    elif self.peek() == "*" and self.peek(1) == "/":
                        depth -= 1
                        self.advance(2)
                    else:
                        self.advance()
            else:
                return

    def read_tokens(self, closer: str | None) -> tuple[list, tuple[int, int] | None]:
        tokens: list = []
        while True:
            self.skip_trivia()
            if self.pos >= len(self.src):
                if closer is not None:
                    raise TokenizeError(f"missing closing {closer!r}")
                return tokens, None
            ch = self.peek()
            if ch in _CLOSERS:
                if ch != closer:
                    raise TokenizeError(
                        f"unexpected {ch!r} at line {self.line} column {self.col}"
                    )
                end = (self.line, self.col + 1)
                self.advance()
                return tokens, end
            tokens.append(self.read_token())

    def read_token(self) -> Token:
        line, col = self.line, self.col
        ch = self.peek()
        if ch in _OPENERS:
            delim = _OPENERS[ch]
            self.advance()
            inner, end = self.read_tokens(delim.closing)
            return Group(delim, tuple(inner), Span(line, col, end[0], end[1]))
        text = self.read_literal_text()
        if text is not None:
            return Literal(text, Span(line, col, self.line, self.col))
        if ch.isalpha() or ch == "_":
            start = self.pos
            while self.peek() and (self.peek().isalnum() or self.peek() == "_"):
                self.advance()
            return Ident(self.src[start:self.pos], Span(line, col, self.line, self.col))
        self.advance()
        return Punct(ch, Span(line, col, self.line, self.col))

    def read_literal_text(self) -> str | None:
        ch = self.peek()
        start = self.pos
        if ch.isdigit():
            self.read_number()
            return self.src[start:self.pos]
        prefix = 0
        if ch == "b" and self.peek(1) in ('"', "'", "r"):
            prefix = 1
        if self.peek(prefix) == "r":
            hashes = 0
            while self.peek(prefix + 1 + hashes) == "#":
                hashes += 1
            if self.peek(prefix + 1 + hashes) == '"':
                self.advance(prefix + 2 + hashes)
                terminator = '"' + "#" * hashes
                end = self.src.find(terminator, self.pos)
                if end < 0:
                    raise TokenizeError("unterminated raw string literal")
                self.advance(end - self.pos + len(terminator))
                return self.src[start:self.pos]
            return None
        if self.peek(prefix) == '"':
            self.advance(prefix + 1)
            while True:
                c = self.peek()
                if not c:
                    raise TokenizeError("unterminated string literal")
                self.advance()
                if c == "\\":
                    self.advance()
                elif c == '"':
                    return self.src[start:self.pos]
        if self.peek(prefix) == "'":
            if self.peek(prefix + 1) == "\\":
                end = self.src.find("'", self.pos + prefix + 3)
                if end < 0:
                    raise TokenizeError("unterminated character literal")
                self.advance(end - self.pos + 1)
                return self.src[start:self.pos]
            if self.peek(prefix + 1) and self.peek(prefix + 2) == "'":
                self.advance(prefix + 3)
                return self.src[start:self.pos]
        return None

    def read_number(self) -> None:
        seen_dot = False
        while True:
            c = self.peek()
            if c.isalnum() or c == "_":
                self.advance()
            elif c == "." and not seen_dot and self.peek(1).isdigit():
                seen_dot = True
                self.advance()
            elif (
                c in "+-"
                and self.src[self.pos - 1] in "eE"
                and self.peek(1).isdigit()
                and not self.src[:self.pos].lower().endswith("x")
            ):
                self.advance()
            else:
                return


def tokenize(source: str) -> list:
    """Split source text into a token tree, dropping whitespace and comments."""
    tokens, _ = _Lexer(source).read_tokens(None)
    return tokens


def tokens_to_string(tokens: Iterable[Token]) -> str:
    """Render tokens separated by single spaces."""
    return " ".join(str(token) for token in tokens)


def iter_tokens(tokens: Iterable[Token]) -> Iterator[Token]:
    """Yield every token, descending into groups depth first."""
    for token in tokens:
        yield token
        if isinstance(token, Group):
            yield from iter_tokens(token.tokens)


def parse_group(group: Group) -> str:
    """Render a group as text, keeping at most one space where the source had a gap."""
    tracker = SpaceTracker()
    parts = [group.delimiter.opening]
    for token in group.tokens:
        parts.append(tracker.spacing(token.span))
        if isinstance(token, Group):
            parts.append(parse_group(token))
        elif isinstance(token, Literal):
            parts.append(token.text.lstrip("r").strip("#"))
        else:
            parts.append(str(token))
    parts.append(group.delimiter.closing or " ")
    return "".join(parts)