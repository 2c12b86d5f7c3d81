"""Entry points that turn CSS or stylesheet files into scope names and scoped CSS."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from scopedstyles.rules import build_style_from_tokens
from scopedstyles.scope import Scope
from scopedstyles.text import build_style_from_str
from scopedstyles.tokens import tokenize, tokens_to_string

PathArg = Union[str, "os.PathLike[str]"]

_TEST_SCOPE = "test"


def _read(path: PathArg) -> str:
    if isinstance(path, str):
        path = path.strip('"')
    return Path(path).read_text(encoding="utf-8")


def style(css: str) -> str:
    """Return the class name that scopes the given inline CSS."""
    return Scope.from_seed(tokens_to_string(tokenize(css))).name()


def style_sheet(path: PathArg) -> str:
    """Return the class name that scopes the stylesheet stored at path."""
    return Scope.from_seed(_read(path)).name()


def style_str(css: str) -> tuple[str, str]:
    """Return a fresh random class name and the inline CSS scoped with it."""
    scope = Scope.random()
    scoped, _ = build_style_from_tokens(tokenize(css), scope)
    return scope.name(), scoped


def style_sheet_str(path: PathArg) -> tuple[str, str]:
    """Return a fresh random class name and the stylesheet at path scoped with it."""
    content = _read(path)
    scope = Scope.random()
    return scope.name(), build_style_from_str(content, scope)


def style_test(css: str) -> str:
    """Scope inline CSS with the fixed class name 'test'."""
    scoped, _ = build_style_from_tokens(tokenize(css), Scope(_TEST_SCOPE))
    return scoped


def style_sheet_test(path: PathArg) -> str:
    """Scope the stylesheet at path with the fixed class name 'test'."""
    return build_style_from_str(_read(path), Scope(_TEST_SCOPE))