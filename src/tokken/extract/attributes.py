"""Readers for the optional visual attributes a node may carry."""

from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Any

from tokken.core.colors import figma_color_to_hex

from .walker import DesignNode


def _solid_paints(paints: Any) -> Iterator[dict[str, Any]]:
    if not isinstance(paints, list):
        return
    for paint in paints:
        if (
            isinstance(paint, dict)
            and paint.get("type") == "SOLID"
            and paint.get("color")
            and paint.get("visible", True) is not False
        ):
            yield paint


def solid_colors(node: DesignNode) -> Iterator[str]:
    """Hex of every visible solid fill, then every visible solid stroke."""
    for paint in _solid_paints(node.get("fills")):
        yield figma_color_to_hex(paint["color"])
    for paint in _solid_paints(node.get("strokes")):
        yield figma_color_to_hex(paint["color"])


def first_solid_fill(node: DesignNode) -> dict[str, Any] | None:
    """First SOLID fill regardless of visibility (how published fills are stored)."""
    fills = node.get("fills")
    if not isinstance(fills, list):
        return None
    for fill in fills:
        if isinstance(fill, dict) and fill.get("type") == "SOLID" and fill.get("color"):
            return fill
    return None


def visible_effects(node: DesignNode) -> Iterator[dict[str, Any]]:
    effects = node.get("effects")
    if not isinstance(effects, list):
        return
    for effect in effects:
        if isinstance(effect, dict) and effect.get("visible", True) is not False:
            yield effect


def effect_key(effect: dict[str, Any]) -> str:
    """Value identity for an effect, independent of key order."""
    return json.dumps(effect, sort_keys=True, default=str)


def text_style(node: DesignNode) -> dict[str, Any] | None:
    """The type style of a TEXT node, ``None`` for anything else."""
    style = node.get("style")
    if node.get("type") == "TEXT" and isinstance(style, dict) and style:
        return style
    return None


def typography_key(style: dict[str, Any]) -> str:
    return f"{style.get('fontFamily')}-{style.get('fontSize')}-{style.get('fontWeight')}"


def has_auto_layout(node: DesignNode) -> bool:
    mode = node.get("layoutMode")
    return bool(mode) and mode != "NONE"
