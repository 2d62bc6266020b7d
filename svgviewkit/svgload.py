"""Turns loaded SVG bytes into text, overlays and renderer-ready XML."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from svgviewkit.svgtext import (
    SvgTextOverlay,
    inline_svg_class_styles,
    parse_svg_text_overlays,
    parse_xml_attributes,
)

_UTF16_LE_BOM = b"\xff\xfe"
_PREVIEW_CHARS = 32
_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)
_SVG_ROOT = re.compile(r"<svg\b([^>]*)>")
_LENGTH = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)\s*(?:px)?\s*$")
_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


@dataclass
class PreparedSvg:
    """Decoded SVG text with its extracted overlays and class-inlined XML."""

    text: str
    xml: str
    overlays: list[SvgTextOverlay] = field(default_factory=list)
    text_tag_count: int = 0

    @property
    def summary(self) -> str:
        xml_chars = len(self.text.encode("utf-16-le")) // 2
        return (
            f"[LoadSvg] xmlChars={xml_chars} textTags={self.text_tag_count}"
            f" overlaysParsed={len(self.overlays)}"
        )


def decode_svg_bytes(data: bytes) -> str:
    """Decode UTF-16LE (with BOM) or NUL-terminated UTF-8 SVG bytes."""
    if data[:2] == _UTF16_LE_BOM:
        body = data[2:]
        return body[: len(body) - len(body) % 2].decode("utf-16-le", errors="replace")

    text = data.split(b"\0", 1)[0].decode("utf-8", errors="replace")
    text = text.replace('encoding="utf-8', 'encoding="utf-16')
    return text.replace('encoding="UTF-8', 'encoding="UTF-16')


def count_text_tags(text: str) -> int:
    """Count '<text' occurrences, ignoring case."""
    return text.lower().count("<text")


def _parse_length(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    match = _LENGTH.match(value)
    return float(match.group(1)) if match else None


def _parse_view_box(value: Optional[str]) -> Optional[tuple[float, float]]:
    if value is None:
        return None
    parts = [p for p in re.split(r"[\s,]+", value.strip()) if p]
    if len(parts) != 4 or not all(_NUMBER.match(p) for p in parts):
        return None
    return float(parts[2]), float(parts[3])


def svg_document_size(
    text: str, fallback_width: float, fallback_height: float
) -> tuple[float, float]:
    """Size of the root <svg>: width/height, else the viewBox, else the fallback."""
    root = _SVG_ROOT.search(_COMMENT.sub("", text))
    if root is None:
        return float(fallback_width), float(fallback_height)

    attrs = parse_xml_attributes(root.group(1))
    width = _parse_length(attrs.get("width"))
    height = _parse_length(attrs.get("height"))
    if width is not None and height is not None:
        return width, height

    view_box = _parse_view_box(attrs.get("viewBox"))
    if view_box is not None:
        return view_box
    return float(fallback_width), float(fallback_height)


def prepare_svg(data: bytes) -> PreparedSvg:
    """Decode SVG bytes, extract text overlays and inline class styles."""
    text = decode_svg_bytes(data)
    return PreparedSvg(
        text=text,
        xml=inline_svg_class_styles(text),
        overlays=parse_svg_text_overlays(text),
        text_tag_count=count_text_tags(text),
    )


def format_overlay_log(overlays: Iterable[SvgTextOverlay], limit: int = 5) -> list[str]:
    """One diagnostic line for each of the first limit overlays."""
    lines: list[str] = []
    for index, item in enumerate(overlays):
        if index >= limit:
            break
        lines.append(
            f"  [Text#{index}] x={item.x:g} y={item.y:g} font={item.font_family}"
            f" size={item.font_size:g} bold={1 if item.bold else 0}"
            f" text={item.text[:_PREVIEW_CHARS]}"
        )
    return lines