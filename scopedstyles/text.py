"""Scoped CSS built from plain stylesheet text, as read from a .css file."""

from __future__ import annotations

from scopedstyles.declaration import StyleDeclaration
from scopedstyles.rules import _FLAT_AT_RULES, AtRule, StyleRule, StyleSheet, scope_selector
from scopedstyles.scope import Scope


class CssSyntaxError(ValueError):
    """Raised when stylesheet text has a block or comment that is not closed."""


def _join_lines(text: str) -> str:
    return "".join(line.strip() for line in text.split("\n"))


def strip_comments(text: str) -> str:
    """Remove every /* ... */ comment from the text."""
    while "/*" in text:
        head, rest = text.split("/*", 1)
        if "*/" not in rest:
            raise CssSyntaxError("unterminated comment: missing '*/'")
        _, tail = rest.split("*/", 1)
        text = head + tail
    return text


def style_rule_from_text(block: str, scope: Scope) -> StyleRule:
    """Parse one `selector { declarations }` block."""
    selector_text, sep, body = block.partition("{")
    if not sep:
        raise CssSyntaxError(f"expected a selector followed by '{{' in {block.strip()!r}")
    selector, selectors = scope_selector(selector_text.strip(), scope)
    return StyleRule(
        selector_text=selector,
        style=StyleDeclaration.from_text("{" + body),
        selectors=selectors,
    )


def at_rule_from_text(block: str, scope: Scope) -> AtRule:
    """Parse one at-rule block, following nested at-rules down to their style rules."""
    rule = AtRule()
    if block.strip().endswith(";"):
        rule.at_rules.append(_join_lines(block))
    else:
        remaining = block
        while True:
            prelude, sep, declaration = remaining.partition("{")
            if not sep:
                raise CssSyntaxError(f"expected '{{' in at-rule {block.strip()!r}")
            body, sep, _ = declaration.strip().rpartition("}")
            if not sep:
                raise CssSyntaxError(f"expected '}}' closing at-rule {block.strip()!r}")
            if any(name in prelude for name in _FLAT_AT_RULES):
                rule.at_rules.append(f"{prelude}{{{_join_lines(body)}}}")
                break
            rule.at_rules.append(prelude)
            if body.startswith("@"):
                remaining = body
                continue
            rule.rules = stylesheet_from_text(body, scope).rules
            break
    # Outermost at-rule comes last, as in the token-based parser.
    rule.at_rules.reverse()
    return rule


def stylesheet_from_text(text: str, scope: Scope) -> StyleSheet:
    """Split stylesheet text into style rules and at-rules."""
    sheet = StyleSheet()
    chunk: list[str] = []
    blank = True
    is_at_rule = False
    openings = closings = 0

    for ch in strip_comments(text):
        if blank and ch == "@":
            is_at_rule = True
        if ch == "{":
            openings += 1
        elif ch == "}":
            closings += 1
        chunk.append(ch)
        if not ch.isspace():
            blank = False

        finished = False
        if ch == ";" and is_at_rule and openings == 0:
            sheet.rules.append(at_rule_from_text("".join(chunk).strip(), scope))
            finished = True
        elif ch == "}" and openings and openings == closings:
            block = "".join(chunk).strip()
            if is_at_rule:
                sheet.rules.append(at_rule_from_text(block, scope))
            else:
                style_rule = style_rule_from_text(block, scope)
                sheet.rules.append(style_rule)
                sheet.selectors |= style_rule.selectors
            finished = True

        if finished:
            chunk = []
            blank = True
            is_at_rule = False
            openings = closings = 0
    return sheet


def build_style_from_str(text: str, scope: Scope) -> str:
    """Render the scoped CSS of a whole stylesheet given as text."""
    return stylesheet_from_text(text, scope).css_text()