"""Lightweight SVG text extraction and CSS class inlining helpers."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field

DEFAULT_FONT_FAMILY = "Segoe UI"
MAX_FONT_SIZE = 72.0
FONT_SCALE_FACTOR = 12.0

# A dot that does not cross line terminators, as in ECMAScript regexes.
_ANY = r"[^\n\r\u2028\u2029]"

_CLASS_RULE = re.compile(_ANY + r"([A-Za-z0-9_-]+)\s*\{([^}]*)\}")
_CLASS_ATTR = re.compile(r'class\s*=\s*"([^"]*)"')
_STYLE_ATTR = re.compile(r'style\s*=\s*"([^"]*)"')
_ATTR_DOUBLE = re.compile(r'([A-Za-z_:][A-Za-z0-9_.:-]*)\s*=\s*"([^"]*)"')
_ATTR_SINGLE = re.compile(r"([A-Za-z_:][A-Za-z0-9_.:-]*)\s*=\s*'([^']*)'")
_STYLE_BLOCK = re.compile(r"<style[^>]*>([\s\S]*?)</style>")
_TEXT_ELEMENT = re.compile(
    r"<\s*text\b([^>]*)>([^\u2028\u2029]*?)<\s*/\s*text\s*>", re.IGNORECASE
)
_TSPAN_CLOSE = re.compile(r"<\s*/\s*tspan\s*>", re.IGNORECASE)
_TSPAN_OPEN = re.compile(r"<\s*tspan\b[^>]*>", re.IGNORECASE)
_ANY_TAG = re.compile(r"<[^>]+>")
_FONT_SIZE_PX = re.compile(r"([0-9]+(?:" + _ANY + r"[0-9]+)?)px")
_HEAVY_WEIGHT = re.compile(r"(?:^|\s)([6-9]00)(?:\s|\Z)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_HEX_PREFIX = re.compile(r"\s*([+-]?)([0-9a-fA-F]*)")


class TextAlignment(enum.Enum):
    """Horizontal alignment of an overlay text run."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass(frozen=True)
class Color:
    """An ARGB colour with 8-bit channels."""

    a: int
    r: int
    g: int
    b: int


BLACK = Color(255, 0, 0, 0)
WHITE = Color(255, 255, 255, 255)


@dataclass
class SvgTextOverlay:
    """A text run extracted from an SVG document."""

    text: str
    x: float = 0.0
    y: float = 0.0
    font_size: float = 12.0
    bold: bool = False
    color: Color = field(default_factory=lambda: BLACK)
    font_family: str = DEFAULT_FONT_FAMILY
    text_alignment: TextAlignment = TextAlignment.LEFT


def _parse_float_prefix(text: str) -> float:
    """Parse the leading number of text, returning 0.0 when there is none."""
    match = _FLOAT_PREFIX.match(text)
    if not match:
        return 0.0
    return float(match.group(1))


def _parse_hex_byte(text: str) -> int:
    """Parse a leading hexadecimal number and truncate it to one byte."""
    match = _HEX_PREFIX.match(text)
    digits = match.group(2) if match else ""
    if not digits:
        return 0
    value = int(digits, 16)
    if match.group(1) == "-":
        value = -value
    return value & 0xFF


def _hex_digit(ch: str) -> int:
    try:
        return int(ch, 16)
    except ValueError:
        return 0


def round_to_int(value: float) -> int:
    """Round half away from zero."""
    return int(value + (-0.5 if value < 0.0 else 0.5))


def trim(value: str) -> str:
    """Strip leading and trailing whitespace."""
    return value.strip()


def normalize_font_family_name(font_family: str) -> str:
    """Reduce a CSS font-family list to its first, unquoted family name."""
    font_family = trim(font_family)
    if not font_family:
        return DEFAULT_FONT_FAMILY

    font_family = trim(font_family.split(",", 1)[0])
    if font_family.endswith(";"):
        font_family = trim(font_family[:-1])

    if len(font_family) >= 2 and font_family[0] == font_family[-1] and font_family[0] in "\"'":
        font_family = font_family[1:-1]

    font_family = trim(font_family)
    return font_family or DEFAULT_FONT_FAMILY


def _escape_attribute_value(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace('"', "&quot;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


def _with_terminator(declarations: str) -> str:
    if declarations and not declarations.endswith(";"):
        return declarations + ";"
    return declarations


def _inline_tag(tag: str, class_styles: dict[str, str]) -> str:
    class_match = _CLASS_ATTR.search(tag)
    if not class_match:
        return tag

    merged = "".join(
        class_styles[name] for name in class_match.group(1).split() if name in class_styles
    )
    if not merged:
        return tag

    tag = _CLASS_ATTR.sub("", tag)
    style_match = _STYLE_ATTR.search(tag)
    if style_match:
        current = _with_terminator(trim(style_match.group(1)))
        new_style = 'style="' + _escape_attribute_value(current + merged) + '"'
        return _STYLE_ATTR.sub(lambda _m: new_style, tag, count=1)

    insert_pos = len(tag) - 1 if len(tag) > 1 else len(tag)
    if tag.endswith("/>"):
        insert_pos = len(tag) - 2
    return tag[:insert_pos] + ' style="' + _escape_attribute_value(merged) + '"' + tag[insert_pos:]


def inline_svg_class_styles(svg_text: str) -> str:
    """Move the class rules of the first <style> block into inline style attributes."""
    style_open, style_close = "<style>", "</style>"
    style_start = svg_text.find(style_open)
    if style_start < 0:
        return svg_text

    css_start = style_start + len(style_open)
    style_end = svg_text.find(style_close, css_start)
    if style_end < 0:
        return svg_text

    class_styles: dict[str, str] = {}
    for match in _CLASS_RULE.finditer(svg_text[css_start:style_end]):
        class_styles[match.group(1)] = _with_terminator(trim(match.group(2)))

    if not class_styles:
        return svg_text

    output = svg_text[:style_start] + svg_text[style_end + len(style_close):]

    pieces: list[str] = []
    pos = 0
    while True:
        tag_start = output.find("<", pos)
        if tag_start < 0:
            pieces.append(output[pos:])
            break
        pieces.append(output[pos:tag_start])
        tag_end = output.find(">", tag_start)
        if tag_end < 0:
            pieces.append(output[tag_start:])
            break
        pieces.append(_inline_tag(output[tag_start:tag_end + 1], class_styles))
        pos = tag_end + 1

    return "".join(pieces)


def parse_css_declarations(declaration_block: str) -> dict[str, str]:
    """Parse 'key: value; ...' into a dict, skipping malformed or empty entries."""
    declarations: dict[str, str] = {}
    for item in declaration_block.split(";"):
        item = trim(item)
        if not item or ":" not in item:
            continue
        key, value = item.split(":", 1)
        key, value = trim(key), trim(value)
        if key and value:
            declarations[key] = value
    return declarations


def parse_xml_attributes(attr_text: str) -> dict[str, str]:
    """Parse name="value" and name='value' pairs; single-quoted ones win on clashes."""
    attrs = {m.group(1): m.group(2) for m in _ATTR_DOUBLE.finditer(attr_text)}
    attrs.update({m.group(1): m.group(2) for m in _ATTR_SINGLE.finditer(attr_text)})
    return attrs


def decode_xml_entities(text: str) -> str:
    """Decode the five predefined XML entities."""
    return (
        text.replace("&lt;", "<")
        .replace("&gt;", ">")
        .replace("&quot;", '"')
        .replace("&apos;", "'")
        .replace("&amp;", "&")
    )


def parse_svg_color(value: str, fallback: Color) -> Color:
    """Parse #rgb, #rrggbb, black or white; anything else yields fallback."""
    color = trim(value)
    if not color:
        return fallback
    if color[0] == "#":
        if len(color) == 4:
            r, g, b = (_hex_digit(ch) * 17 for ch in color[1:4])
            return Color(255, r, g, b)
        if len(color) == 7:
            r, g, b = (_parse_hex_byte(color[i:i + 2]) for i in (1, 3, 5))
            return Color(255, r, g, b)
    if color == "black":
        return BLACK
    if color == "white":
        return WHITE
    return fallback


def apply_font_shorthand(
    font_value: str, font_size: float, bold: bool, font_family: str
) -> tuple[float, bool, str]:
    """Apply a CSS font shorthand; returns the updated (font_size, bold, font_family)."""
    size_match = _FONT_SIZE_PX.search(font_value)
    if size_match:
        font_size = _parse_float_prefix(size_match.group(1))
        family = trim(font_value[size_match.end():])
        if family:
            font_family = family

    if "bold" in font_value or _HEAVY_WEIGHT.search(font_value):
        bold = True
    return font_size, bold, font_family


def _class_declarations(svg_text: str) -> dict[str, dict[str, str]]:
    style_match = _STYLE_BLOCK.search(svg_text)
    if not style_match:
        return {}
    return {
        m.group(1): parse_css_declarations(m.group(2))
        for m in _CLASS_RULE.finditer(style_match.group(1))
    }


def _alignment_for(anchor: str, current: TextAlignment) -> TextAlignment:
    if anchor == "middle":
        return TextAlignment.CENTER
    if anchor == "end":
        return TextAlignment.RIGHT
    return current


def _is_bold_weight(weight: str) -> bool:
    return weight in ("bold", "700")


def parse_svg_text_overlays(svg_text: str) -> list[SvgTextOverlay]:
    """Extract the non-empty <text> elements of an SVG document with their styling."""
    class_declarations = _class_declarations(svg_text)
    overlays: list[SvgTextOverlay] = []

    for match in _TEXT_ELEMENT.finditer(svg_text):
        content = _TSPAN_CLOSE.sub("", match.group(2))
        content = _TSPAN_OPEN.sub("", content)
        content = _ANY_TAG.sub("", content)
        text = trim(decode_xml_entities(content))
        if not text:
            continue

        item = SvgTextOverlay(text=text)
        attrs = parse_xml_attributes(match.group(1))

        # Earlier sources win: class rules first, then the inline style.
        merged: dict[str, str] = {}
        for class_name in attrs.get("class", "").split():
            for key, value in class_declarations.get(class_name, {}).items():
                merged.setdefault(key, value)
        if "style" in attrs:
            for key, value in parse_css_declarations(attrs["style"]).items():
                merged.setdefault(key, value)

        if "x" in attrs:
            item.x = _parse_float_prefix(attrs["x"])
        if "y" in attrs:
            item.y = _parse_float_prefix(attrs["y"])

        for source in (attrs, merged):
            if "fill" in source:
                item.color = parse_svg_color(source["fill"], item.color)
        for source in (attrs, merged):
            if "font-size" in source:
                item.font_size = _parse_float_prefix(source["font-size"])
        for source in (attrs, merged):
            if "font-family" in source:
                item.font_family = source["font-family"]
        for source in (attrs, merged):
            if "font-weight" in source:
                item.bold = _is_bold_weight(source["font-weight"])

        if "font" in merged:
            item.font_size, item.bold, item.font_family = apply_font_shorthand(
                merged["font"], item.font_size, item.bold, item.font_family
            )

        for source in (attrs, merged):
            if "text-anchor" in source:
                item.text_alignment = _alignment_for(source["text-anchor"], item.text_alignment)

        item.font_family = normalize_font_family_name(item.font_family)
        overlays.append(item)

    return overlays


def get_font_size(width: float) -> float:
    """Font size for a banner spanning the given width, capped at MAX_FONT_SIZE."""
    return min(width / FONT_SCALE_FACTOR, MAX_FONT_SIZE)