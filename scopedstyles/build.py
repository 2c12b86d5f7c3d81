"""Collect the scoped CSS of style macros found in source files into one stylesheet."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from scopedstyles.rules import build_style_from_tokens
from scopedstyles.scope import Scope
from scopedstyles.text import build_style_from_str
from scopedstyles.tokens import (
    Delimiter,
    Group,
    Ident,
    Punct,
    TokenizeError,
    tokenize,
    tokens_to_string,
)

log = logging.getLogger(__name__)

PathArg = Union[str, Path]

DEFAULT_OUTPUT = Path("target") / "stylers_out.css"
DEFAULT_SEARCH_DIR = Path("src")


class BuildError(Exception):
    """Raised when the build parameters are unusable or the build cannot finish."""


@dataclass(frozen=True)
class BuildParams:
    """Where to look for source files and where to write the collected CSS."""

    output_path: Path
    search_dir: Path

    @staticmethod
    def builder() -> "BuildParamsBuilder":
        return BuildParamsBuilder()


@dataclass(frozen=True)
class BuildParamsBuilder:
    """Step-by-step construction of BuildParams, checking each path as it is given."""

    output_path: Optional[Path] = None
    search_dir: Optional[Path] = None

    def with_output_path(self, path: PathArg) -> "BuildParamsBuilder":
        """Use path as the output file, creating it and its directories if missing."""
        path = Path(path)
        if not path.is_file():
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as err:
                log.warning(
                    "Was trying to create output directory for the specified "
                    "output path %r, but failed: %s",
                    str(path),
                    err,
                )
            try:
                path.open("x", encoding="utf-8").close()
            except OSError as err:
                raise BuildError(
                    f"Couldn't create output file at path {str(path)!r}: {err}"
                ) from err
        return replace(self, output_path=path)

    def with_search_dir(self, path: PathArg) -> "BuildParamsBuilder":
        """Use path as the directory searched for .rs files."""
        path = Path(path)
        if not path.is_dir():
            raise BuildError(
                f"Search dir {str(path)!r} does not exist, or is not a directory path"
            )
        return replace(self, search_dir=path)

    def finish(self) -> BuildParams:
        """Fill in the defaults under the working directory and return the parameters."""
        builder = self
        if builder.output_path is None:
            try:
                builder = builder.with_output_path(Path.cwd() / DEFAULT_OUTPUT)
            except BuildError as err:
                raise BuildError(f"Couldn't use default output path: {err}") from err
        if builder.search_dir is None:
            try:
                builder = builder.with_search_dir(Path.cwd() / DEFAULT_SEARCH_DIR)
            except BuildError as err:
                raise BuildError(f"Couldn't use default search dir: {err}") from err
        return BuildParams(output_path=builder.output_path, search_dir=builder.search_dir)


def _is_punct(token, char: str) -> bool:
    return isinstance(token, Punct) and token.char == char


def _function_bodies(tokens: Iterable) -> Iterator[Group]:
    """Yield the body of every top-level function item."""
    stream = iter(tokens)
    for token in stream:
        if not (isinstance(token, Ident) and token.text == "fn"):
            continue
        for current in stream:
            if _is_punct(current, ";"):
                break
            if isinstance(current, Group) and current.delimiter is Delimiter.BRACE:
                yield current
                break


def _starts_statement(previous) -> bool:
    if previous is None or _is_punct(previous, ";"):
        return True
    # A block expression or an attribute may directly precede a statement.
    return isinstance(previous, Group) and previous.delimiter in (
        Delimiter.BRACE,
        Delimiter.BRACKET,
    )


def _let_statements(body: Group) -> Iterator[list]:
    """Yield the tokens after `let` of every let statement in a block."""
    previous = None
    current: Optional[list] = None
    for token in body.tokens:
        if current is not None:
            if _is_punct(token, ";"):
                yield current
                current = None
            else:
                current.append(token)
        elif isinstance(token, Ident) and token.text == "let" and _starts_statement(previous):
            current = []
        previous = token


def _initializer(let_tokens: list) -> list:
    """Return the tokens after the `=` that separates pattern and initializer."""
    depth = 0
    previous = None
    for position, token in enumerate(let_tokens):
        if isinstance(token, Punct):
            if token.char == "<":
                depth += 1
            elif token.char == ">" and not _is_punct(previous, "-"):
                depth -= 1
            elif token.char == "=" and depth <= 0:
                return let_tokens[position + 1:]
        previous = token
    return []


def _macro_call(init: list) -> Optional[tuple[str, Group]]:
    """Return the macro name and its argument group if init is exactly `path!(...)`."""
    if len(init) < 3:
        return None
    *path, bang, group = init
    if not (isinstance(group, Group) and _is_punct(bang, "!")):
        return None
    if not isinstance(path[-1], Ident):
        return None
    if any(not isinstance(t, Ident) and not _is_punct(t, ":") for t in path):
        return None
    return path[-1].text, group


def _scoped_inline(group: Group) -> str:
    scope = Scope.from_seed(tokens_to_string(group.tokens))
    css, _ = build_style_from_tokens(list(group.tokens), scope)
    return css


def _scoped_sheet(group: Group) -> str:
    file_path = tokens_to_string(group.tokens).strip('"')
    try:
        content = Path(file_path).read_text(encoding="utf-8")
    except OSError as err:
        raise BuildError(f"Expected to read file {file_path!r}: {err}") from err
    return build_style_from_str(content, Scope.from_seed(content))


def collect_styles(source: str) -> list[str]:
    """Return the scoped CSS of each `let x = style!{...}` or `style_sheet!(...)` in order.

    Only let statements directly inside top-level functions are considered.
    """
    try:
        tokens = tokenize(source)
    except TokenizeError as err:
        raise BuildError(f"Couldn't parse source: {err}") from err

    styles: list[str] = []
    for body in _function_bodies(tokens):
        for let_tokens in _let_statements(body):
            call = _macro_call(_initializer(let_tokens))
            if call is None:
                continue
            name, group = call
            if name == "style":
                styles.append(_scoped_inline(group))
            elif name == "style_sheet":
                styles.append(_scoped_sheet(group))
            elif "style" in name:
                log.debug(
                    "Macro %r is not a known style macro; use either `style` or `style_sheet`",
                    name,
                )
    return styles


def _source_files(search_dir: Path) -> list[Path]:
    return sorted(search_dir.glob("**/*.rs"))


def build(params: BuildParams) -> str:
    """Scope every style macro under the search dir and write the CSS to the output file.

    Returns the CSS that was written.
    """
    log.info(
        "Building scoped css output from %s into %s", params.search_dir, params.output_path
    )
    parts: list[str] = []
    files_read = 0
    for path in _source_files(params.search_dir):
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as err:
            log.warning("Skipping %s, which can't be read: %s", path, err)
            continue
        log.debug("Processing file %s", path)
        try:
            styles = collect_styles(content)
        except BuildError as err:
            raise BuildError(f"{path}: {err}") from err
        files_read += 1
        parts.extend(styles)

    css = "".join(parts)
    try:
        params.output_path.write_text(css, encoding="utf-8")
    except OSError as err:
        raise BuildError(f"Error writing output CSS: {err}") from err
    log.info("Finished: %d files read, %d macros processed", files_read, len(parts))
    return css


def main(argv=None) -> int:
    """Command entry point: build the collected stylesheet."""
    parser = argparse.ArgumentParser(
        prog="scopedstyles-build",
        description="Collect scoped CSS from style macros in .rs files.",
    )
    parser.add_argument(
        "--output", default=str(Path(".") / DEFAULT_OUTPUT), help="file to write the CSS to"
    )
    parser.add_argument(
        "--search-dir",
        default=str(Path(".") / DEFAULT_SEARCH_DIR),
        help="directory searched for .rs files",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="show debug output")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    try:
        params = (
            BuildParams.builder()
            .with_output_path(args.output)
            .with_search_dir(args.search_dir)
            .finish()
        )
        build(params)
    except (BuildError, ValueError) as err:
        print(f"error: {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())