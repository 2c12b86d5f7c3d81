"""Style declaration blocks: the `{property: value; ...}` part of a rule."""

from __future__ import annotations

from dataclasses import dataclass

from scopedstyles.tokens import Delimiter, Group, Ident, Literal, Punct, SpaceTracker

ALL_PROPERTIES: tuple[str, ...] = (
    "accent-color", "align-content", "align-items", "align-self", "all",
    "animation", "animation-delay", "animation-direction", "animation-duration",
    "animation-fill-mode", "animation-iteration-count", "animation-name",
    "animation-play-state", "animation-timing-function", "aspect-ratio",
    "backdrop-filter", "backface-visibility", "background",
    "background-attachment", "background-blend-mode", "background-clip",
    "background-color", "background-image", "background-origin",
    "background-position", "background-position-x", "background-position-y",
    "background-repeat", "background-size", "block-size", "border",
    "border-block", "border-block-color", "border-block-end-color",
    "border-block-end-style", "border-block-end-width",
    "border-block-start-color", "border-block-start-style",
    "border-block-start-width", "border-block-style", "border-block-width",
    "border-bottom", "border-bottom-color", "border-bottom-left-radius",
    "border-bottom-right-radius", "border-bottom-style", "border-bottom-width",
    "border-collapse", "border-color", "border-image", "border-image-outset",
    "border-image-repeat", "border-image-slice", "border-image-source",
    "border-image-width", "border-inline", "border-inline-color",
    "border-inline-end-color", "border-inline-end-style",
    "border-inline-end-width", "border-inline-start-color",
    "border-inline-start-style", "border-inline-start-width",
    "border-inline-style", "border-inline-width", "border-left",
    "border-left-color", "border-left-style", "border-left-width",
    "border-radius", "border-right", "border-right-color",
    "border-right-style", "border-right-width", "border-spacing",
    "border-style", "border-top", "border-top-color", "border-top-left-radius",
    "border-top-right-radius", "border-top-style", "border-top-width",
    "border-width", "bottom", "box-decoration-break", "box-reflect",
    "box-shadow", "box-sizing", "break-after", "break-before", "break-inside",
    "caption-side", "caret-color", "clear", "clip", "color", "column-count",
    "column-fill", "column-gap", "column-rule", "column-rule-color",
    "column-rule-style", "column-rule-width", "column-span", "column-width",
    "columns", "content", "counter-increment", "counter-reset", "cursor",
    "direction", "display", "empty-cells", "filter", "flex", "flex-basis",
    "flex-direction", "flex-flow", "flex-grow", "flex-shrink", "flex-wrap",
    "float", "font", "font-family", "font-feature-settings", "font-kerning",
    "font-language-override", "font-size", "font-size-adjust", "font-stretch",
    "font-style", "font-synthesis", "font-variant", "font-variant-alternates",
    "font-variant-caps", "font-variant-east-asian", "font-variant-ligatures",
    "font-variant-numeric", "font-variant-position", "font-weight", "gap",
    "grid", "grid-area", "grid-auto-columns", "grid-auto-flow",
    "grid-auto-rows", "grid-column", "grid-column-end", "grid-column-gap",
    "grid-column-start", "grid-gap", "grid-row", "grid-row-end",
    "grid-row-gap", "grid-row-start", "grid-template", "grid-template-areas",
    "grid-template-columns", "grid-template-rows", "hanging-punctuation",
    "height", "hyphens", "image-rendering", "inline-size", "inset",
    "inset-block", "inset-block-end", "inset-block-start", "inset-inline",
    "inset-inline-end", "inset-inline-start", "isolation", "justify-content",
    "justify-items", "justify-self", "left", "letter-spacing", "line-break",
    "line-height", "list-style", "list-style-image", "list-style-position",
    "list-style-type", "margin", "margin-block", "margin-block-end",
    "margin-block-start", "margin-bottom", "margin-inline",
    "margin-inline-end", "margin-inline-start", "margin-left", "margin-right",
    "margin-top", "mask", "mask-clip", "mask-composite", "mask-image",
    "mask-mode", "mask-origin", "mask-position", "mask-repeat", "mask-size",
    "mask-type", "max-height", "max-width", "@media", "max-block-size",
    "max-inline-size", "min-block-size", "min-inline-size", "min-height",
    "min-width", "mix-blend-mode", "object-fit", "object-position", "opacity",
    "order", "orphans", "outline", "outline-color", "outline-offset",
    "outline-style", "outline-width", "overflow", "overflow-anchor",
    "overflow-wrap", "overflow-x", "overflow-y", "overscroll-behavior",
    "overscroll-behavior-block", "overscroll-behavior-inline",
    "overscroll-behavior-x", "overscroll-behavior-y", "padding",
    "padding-block", "padding-block-end", "padding-block-start",
    "padding-bottom", "padding-inline", "padding-inline-end",
    "padding-inline-start", "padding-left", "padding-right", "padding-top",
    "page-break-after", "page-break-before", "page-break-inside",
    "paint-order", "perspective", "perspective-origin", "place-content",
    "place-items", "place-self", "pointer-events", "position", "quotes",
    "resize", "right", "rotate", "row-gap", "scale", "scrollbar-width",
    "scrollbar-color", "scroll-behavior", "scroll-margin",
    "scroll-margin-block", "scroll-margin-block-end",
    "scroll-margin-block-start", "scroll-margin-bottom",
    "scroll-margin-inline", "scroll-margin-inline-end",
    "scroll-margin-inline-start", "scroll-margin-left", "scroll-margin-right",
    "scroll-margin-top", "scroll-padding", "scroll-padding-block",
    "scroll-padding-block-end", "scroll-padding-block-start",
    "scroll-padding-bottom", "scroll-padding-inline",
    "scroll-padding-inline-end", "scroll-padding-inline-start",
    "scroll-padding-left", "scroll-padding-right", "scroll-padding-top",
    "scroll-snap-align", "scroll-snap-stop", "scroll-snap-type", "tab-size",
    "table-layout", "text-align", "text-align-last", "text-combine-upright",
    "text-decoration", "text-decoration-color", "text-decoration-line",
    "text-decoration-style", "text-decoration-thickness", "text-emphasis",
    "text-indent", "text-justify", "text-orientation", "text-overflow",
    "text-shadow", "text-transform", "text-underline-position", "top",
    "transform", "transform-origin", "transform-style", "transition",
    "transition-delay", "transition-duration", "transition-property",
    "transition-timing-function", "translate", "unicode-bidi", "user-select",
    "vertical-align", "visibility", "white-space", "widows", "width",
    "word-break", "word-spacing", "word-wrap", "writing-mode", "z-index",
    # SVG properties
    "accent-height", "accumulate", "additive", "alignment-baseline",
    "alphabetic", "amplitude", "arabic-form", "ascent", "attributeName",
    "attributeType", "azimuth", "baseFrequency", "baseline-shift",
    "baseProfile", "bbox", "begin", "bias", "by", "calcMode", "cap-height",
    "class", "clipPathUnits", "clip-path", "clip-rule", "color-interpolation",
    "color-interpolation-filters", "color-profile", "color-rendering",
    "contentScriptType", "contentStyleType", "crossorigin", "cx", "cy", "d",
    "decelerate", "descent", "diffuseConstant", "divisor",
    "dominant-baseline", "dur", "dx", "dy", "edgeMode", "elevation",
    "enable-background", "end", "exponent", "fill", "fill-opacity",
    "fill-rule", "filterRes", "filterUnits", "flood-color", "flood-opacity",
    "format", "from", "fr", "fx", "fy", "g1", "g2", "glyph-name",
    "glyph-orientation-horizontal", "glyph-orientation-vertical", "glyphRef",
    "gradientTransform", "gradientUnits", "hanging", "href", "hreflang",
    "horiz-adv-x", "horiz-origin-x", "id", "ideographic", "in", "in2",
    "intercept", "k", "k1", "k2", "k3", "k4", "kernelMatrix",
    "kernelUnitLength", "kerning", "keyPoints", "keySplines", "keyTimes",
    "lang", "lengthAdjust", "lighting-color", "limitingConeAngle", "local",
    "marker-end", "marker-mid", "marker-start", "markerHeight", "markerUnits",
    "markerWidth", "maskContentUnits", "maskUnits", "mathematical", "max",
    "media", "method", "min", "mode", "name", "numOctaves", "offset",
    "operator", "orient", "orientation", "origin", "overline-position",
    "overline-thickness", "panose-1", "path", "pathLength",
    "patternContentUnits", "patternTransform", "patternUnits", "ping",
    "points", "pointsAtX", "pointsAtY", "pointsAtZ", "preserveAlpha",
    "preserveAspectRatio", "primitiveUnits", "r", "radius", "referrerPolicy",
    "refX", "refY", "rel", "rendering-intent", "repeatCount", "repeatDur",
    "requiredExtensions", "requiredFeatures", "restart", "result", "rx", "ry",
    "seed", "shape-rendering", "slope", "spacing", "specularConstant",
    "specularExponent", "speed", "spreadMethod", "startOffset",
    "stdDeviation", "stemh", "stemv", "stitchTiles", "stop-color",
    "stop-opacity", "strikethrough-position", "strikethrough-thickness",
    "string", "stroke", "stroke-dasharray", "stroke-dashoffset",
    "stroke-linecap", "stroke-linejoin", "stroke-miterlimit",
    "stroke-opacity", "stroke-width", "style", "surfaceScale",
    "systemLanguage", "tabindex", "tableValues", "target", "targetX",
    "targetY", "text-anchor", "text-rendering", "textLength",
    "transform-box", "to", "type", "u1", "u2", "underline-position",
    "underline-thickness", "unicode", "unicode-range", "units-per-em",
    "v-alphabetic", "v-hanging", "v-ideographic", "v-mathematical", "values",
    "vector-effect", "version", "vert-adv-y", "vert-origin-x",
    "vert-origin-y", "viewBox", "viewTarget", "widths", "x", "x-height", "x1",
    "x2", "xChannelSelector", "xlink:actuate", "xlink:arcrole", "xlink:role",
    "xlink:show", "xlink:title", "xlink:type", "xml:base", "xml:lang",
    "xml:space", "y", "y1", "y2", "yChannelSelector", "z", "zoomAndPan",
)

_KNOWN_PROPERTIES = frozenset(ALL_PROPERTIES)


class PropertyError(ValueError):
    """Raised for an unknown property name or a declaration missing its semicolon."""

    def __init__(self, message: str, line: int, suggestion: str | None = None) -> None:
        super().__init__(message)
        self.line = line
        self.suggestion = suggestion


def _levenshtein(a: str, b: str) -> int:
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        current = [i]
        for j, cb in enumerate(b, 1):
            current.append(
                min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + (ca != cb))
            )
        previous = current
    return previous[-1]


def validate_property(name: str) -> tuple[bool, str | None]:
    """Check a property name; when unknown, also return the closest known name."""
    bare = name[len("-webkit-"):] if name.startswith("-webkit-") else name
    if bare in _KNOWN_PROPERTIES or bare.startswith("--"):
        return True, None
    suggestion = min(ALL_PROPERTIES, key=lambda known: _levenshtein(name, known))
    return False, suggestion


def parse_property_group(group: Group, raw_str: bool) -> str:
    """Render a group inside a property value, honouring raw_str() wrapping."""
    tracker = SpaceTracker()
    closing = " "
    parts: list[str] = []
    if group.delimiter is Delimiter.PARENTHESIS:
        # The parentheses right after raw_str are dropped.
        if not raw_str:
            parts.append("(")
            closing = ")"
    elif group.delimiter is not Delimiter.NONE:
        parts.append(group.delimiter.opening)
        closing = group.delimiter.closing

    for token in group.tokens:
        parts.append(tracker.spacing(token.span))
        if isinstance(token, Group):
            rendered = parse_property_group(token, raw_str)
            if raw_str:
                rendered = rendered.strip("()")
                raw_str = False
            parts.append(rendered)
        elif isinstance(token, Ident):
            if token.text == "raw_str":
                raw_str = True
            parts.append(token.text)
        elif isinstance(token, Literal):
            literal = token.text.lstrip("r").strip("#")
            if not raw_str:
                literal = literal.strip('"')
            parts.append(literal)
            raw_str = False
        elif isinstance(token, Punct):
            parts.append(token.char)
    parts.append(closing)
    return "".join(parts).strip()


@dataclass
class StyleDeclaration:
    """The rendered text of one declaration block, braces included."""

    text: str = ""

    def __str__(self) -> str:
        return self.text

    @classmethod
    def from_group(cls, group: Group) -> "StyleDeclaration":
        """Validate and render a brace group of `property: value;` pairs."""
        tracker = SpaceTracker()
        body = ["{"]
        current = ""
        in_value = False
        raw_str = False

        for token in group.tokens:
            if isinstance(token, Group):
                current += tracker.spacing(token.span)
                current += parse_property_group(token, raw_str)
                raw_str = False
            elif isinstance(token, Ident):
                current += tracker.spacing(token.span)
                if token.text == "raw_str":
                    raw_str = True
                else:
                    current += token.text
            elif isinstance(token, Literal):
                current += tracker.spacing(token.span)
                current += token.text.lstrip("r").strip('#"')
            elif isinstance(token, Punct):
                ch = token.char
                if ch == ":":
                    if in_value:
                        line = tracker.line - 1
                        raise PropertyError(f"Missing semicolon in line {line}", line)
                    in_value = True
                    valid, suggestion = validate_property(current)
                    if not valid:
                        raise PropertyError(
                            f"Did you mean to use {suggestion} property "
                            f"at line number {tracker.line}",
                            tracker.line,
                            suggestion,
                        )
                current += tracker.spacing(token.span)
                current += ch
                if ch == ";":
                    body.append(current)
                    current = ""
                    in_value = False
        body.append("}")
        return cls("".join(body))

    @classmethod
    def from_text(cls, text: str) -> "StyleDeclaration":
        """Render a declaration block read from a stylesheet file, joining its lines."""
        return cls("".join(line.strip() for line in text.split("\n")))