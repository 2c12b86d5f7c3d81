"""Style rules, at-rules and style sheets built from a token tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Union

from scopedstyles.declaration import StyleDeclaration
from scopedstyles.scope import Scope
from scopedstyles.tokens import (
    Delimiter,
    Group,
    Ident,
    Literal,
    Punct,
    SpaceTracker,
    parse_group,
    tokenize,
)

# At-rules whose block holds declarations rather than nested style rules.
_FLAT_AT_RULES = (
    "@page",
    "@font-face",
    "keyframes",
    "@counter-style",
    "@font-feature-values",
    "@property",
)


def _is_brace(token) -> bool:
    return isinstance(token, Group) and token.delimiter is Delimiter.BRACE


def scope_selector(selector_text: str, scope: Scope) -> tuple[str, set[str]]:
    """Append the scope class to every part of a selector.

    Returns the scoped selector and the set of selector parts that were found.
    """
    cls = scope.selector()
    selectors: set[str] = set()
    source = ""
    temp = ""
    sel_len = len(selector_text)
    punct_start = False
    pseudo = False
    bracket_open = False
    deep = False
    deep_open = False
    was_deep_open = False

    for i, c in enumerate(selector_text, 1):
        # Selectors read from files may span several lines.
        if c == "\n":
            continue

        # Whitespace right after a :deep(...) is kept as a single space each.
        if was_deep_open:
            if c.isspace():
                source += " "
            else:
                source += c
                was_deep_open = False
            continue

        if bracket_open:
            if c == "]":
                bracket_open = False
                source += c
                if not deep_open:
                    source += cls
                temp += c
                selectors.add(temp)
                temp = ""
            else:
                source += c
                temp += c
            continue
        if c == "[":
            bracket_open = True
            source += c
            temp += c
            continue

        # Whatever sits inside :deep(...) is used unscoped.
        if deep_open and c != ")":
            source += c
            continue
        if deep_open and c == ")":
            deep = False
            deep_open = False
            was_deep_open = True
            continue
        if deep and c == "(":
            deep_open = True
            continue
        if deep:
            continue
        if c == ":" and selector_text[i:i + 4] == "deep":
            deep = True
            continue

        # A pseudo class runs until whitespace or the end of the selector.
        if pseudo:
            if c == " " or i == sel_len:
                source += c
                pseudo = False
                if c != " ":
                    temp += c
                selectors.add(temp)
                temp = ""
            else:
                source += c
                temp += c
            continue
        if c == ":":
            pseudo = True
            source += cls + c
            temp += c
            continue

        # Whitespace after a combinator is dropped.
        if punct_start:
            if c.isspace():
                continue
            punct_start = False
        if c in ",+~>|":
            source += cls + c
            punct_start = True
            selectors.add(temp)
            temp = ""
            continue

        if c == "*":
            source += cls
            selectors.add("*")
            continue

        if i == sel_len:
            source += c + cls
            temp += c
            selectors.add(temp)
            temp = ""
            continue

        if c == " ":
            source += cls + " "
            selectors.add(temp)
            temp = ""
        else:
            source += c
            temp += c

    if ":root" in source:
        source = ":root"
    return source, selectors


@dataclass
class StyleRule:
    """A selector followed by a declaration block."""

    selector_text: str = ""
    style: StyleDeclaration = field(default_factory=StyleDeclaration)
    selectors: set = field(default_factory=set)

    @classmethod
    def from_tokens(cls, tokens: Iterable, scope: Scope) -> "StyleRule":
        """Parse the tokens of a single style rule."""
        rule = cls()
        tracker = SpaceTracker()
        selector = ""
        for token in tokens:
            if isinstance(token, Group):
                if token.delimiter is Delimiter.BRACE:
                    rule.selector_text, rule.selectors = scope_selector(selector, scope)
                    rule.style = StyleDeclaration.from_group(token)
                else:
                    selector += tracker.spacing(token.span)
                    selector += parse_group(token)
            elif isinstance(token, Ident):
                selector += tracker.spacing(token.span)
                selector += token.text
            elif isinstance(token, Literal):
                selector += tracker.spacing(token.span)
                selector += token.text.strip('"')
            elif isinstance(token, Punct):
                # Spacing matters only before '.', '#' and ':'; a gap there
                # means a descendant selector or a :deep directive.
                if token.char in ".#:":
                    selector += tracker.spacing(token.span)
                else:
                    tracker.line = token.span.end_line
                    tracker.col = token.span.end_col
                selector += token.char
        return rule

    def css_text(self) -> str:
        return self.selector_text + self.style.text


@dataclass
class AtRule:
    """An at-rule, possibly nested, with the style rules it encloses."""

    rules: list = field(default_factory=list)
    at_rules: list = field(default_factory=list)

    @classmethod
    def from_tokens(cls, tokens: Iterable, scope: Scope) -> "AtRule":
        """Parse the tokens of a single at-rule, nested at-rules included."""
        rule = cls()
        rule._parse(tokens, scope)
        return rule

    def _parse(self, tokens: Iterable, scope: Scope) -> None:
        tracker = SpaceTracker()
        at_rule = ""
        for token in tokens:
            if isinstance(token, Group):
                if token.delimiter is Delimiter.BRACE:
                    first = token.tokens[0] if token.tokens else None
                    nested_at = isinstance(first, Punct) and first.char == "@"
                    if any(name in at_rule for name in _FLAT_AT_RULES):
                        at_rule += parse_group(token)
                    elif nested_at:
                        # Inner at-rules are recorded before the outer one.
                        self._parse(token.tokens, scope)
                    else:
                        sheet = StyleSheet.from_tokens(token.tokens, scope)
                        self.rules.extend(sheet.rules)
                    self.at_rules.append(at_rule)
                    at_rule = ""
                else:
                    at_rule += tracker.spacing(token.span)
                    at_rule += parse_group(token)
            elif isinstance(token, (Ident, Literal)):
                at_rule += tracker.spacing(token.span)
                at_rule += token.text
            elif isinstance(token, Punct):
                at_rule += tracker.spacing(token.span)
                at_rule += token.char
                # A regular at-rule ends with a semicolon and has no block.
                if token.char == ";":
                    self.at_rules.append(at_rule)

    def css_text(self) -> str:
        text = "".join(f"{prelude}{{" for prelude in reversed(self.at_rules))
        if self.rules:
            text += "".join(rule.css_text() for rule in self.rules)
            text += "}" * len(self.at_rules)
        return text.strip("{")


Rule = Union[StyleRule, AtRule]


@dataclass
class StyleSheet:
    """An ordered list of rules and the selector parts they use."""

    rules: list = field(default_factory=list)
    selectors: set = field(default_factory=set)

    @classmethod
    def from_tokens(cls, tokens: Iterable, scope: Scope) -> "StyleSheet":
        """Split a token stream into style rules and at-rules."""
        sheet = cls()
        pending: list = []
        is_at_rule = False
        count = 0
        for token in tokens:
            count += 1
            pending.append(token)
            if _is_brace(token):
                count = 0
                if is_at_rule:
                    sheet.rules.append(AtRule.from_tokens(pending, scope))
                    is_at_rule = False
                else:
                    style_rule = StyleRule.from_tokens(pending, scope)
                    sheet.rules.append(style_rule)
                    sheet.selectors |= style_rule.selectors
                pending = []
            elif isinstance(token, Punct):
                if token.char == "@" and count == 1:
                    is_at_rule = True
                if is_at_rule and token.char == ";":
                    sheet.rules.append(AtRule.from_tokens(pending, scope))
                    is_at_rule = False
                    pending = []
        return sheet

    def css_text(self) -> str:
        return "".join(rule.css_text() for rule in self.rules)


def build_style_from_tokens(tokens, scope: Scope) -> tuple[str, set[str]]:
    """Render scoped CSS from tokens (or source text) and return it with its selectors."""
    if isinstance(tokens, str):
        tokens = tokenize(tokens)
    sheet = StyleSheet.from_tokens(tokens, scope)
    return sheet.css_text(), sheet.selectors