"""
Published style resolution.

The file payload lists published styles as metadata only (name, type, node
id). The values live on the node that defines each style, and those nodes
are often pruned from the document tree, so missing ids are fetched in one
extra ``/nodes`` call before resolving.

Styles whose node never turns up, or whose node lacks the expected attribute,
are dropped: files legitimately carry stale or unused declarations.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from tokken.core.colors import figma_color_to_hex
from tokken.core.models import (
    PublishedColorStyle,
    PublishedEffectStyle,
    PublishedGridStyle,
    PublishedStyles,
    PublishedTextStyle,
)

from .attributes import first_solid_fill
from .walker import DesignNode, index_nodes

logger = logging.getLogger(__name__)

NodeFetcher = Callable[[list[str]], Awaitable[Mapping[str, DesignNode]]]


def _resolve_color(style_id: str, name: str, node: DesignNode) -> PublishedColorStyle | None:
    fill = first_solid_fill(node)
    if fill is None:
        return None
    color = fill["color"]
    opacity = fill.get("opacity")
    if opacity is None:
        opacity = color.get("a", 1)
    return PublishedColorStyle(
        name=name,
        hex=figma_color_to_hex(color),
        opacity=opacity,
        style_id=style_id,
    )


def _resolve_text(style_id: str, name: str, node: DesignNode) -> PublishedTextStyle | None:
    style = node.get("style")
    if not style:
        return None
    return PublishedTextStyle(
        name=name,
        font_family=style.get("fontFamily") or "Unknown",
        font_size=style.get("fontSize") or 0,
        font_weight=style.get("fontWeight") or 400,
        line_height=style.get("lineHeightPx") or None,
        letter_spacing=style.get("letterSpacing") or None,
        style_id=style_id,
    )


def _resolve_effect(style_id: str, name: str, node: DesignNode) -> PublishedEffectStyle | None:
    effects = node.get("effects")
    if not isinstance(effects, list):
        return None
    return PublishedEffectStyle(name=name, effects=effects, style_id=style_id)


def _resolve_grid(style_id: str, name: str, node: DesignNode) -> PublishedGridStyle | None:
    grids = node.get("layoutGrids")
    if not grids:
        return None
    return PublishedGridStyle(name=name, grids=grids, style_id=style_id)


class StyleResolver:
    """Resolves style metadata to concrete values.

    Args:
        fetch_nodes: Coroutine returning ``{id: node}`` for the requested ids.
            Called at most once per :meth:`resolve`, and only when some
            defining nodes are absent from the document.
    """

    def __init__(self, fetch_nodes: NodeFetcher):
        self._fetch_nodes = fetch_nodes

    async def resolve(
        self, document: DesignNode, styles_meta: Mapping[str, Mapping[str, Any]]
    ) -> PublishedStyles:
        node_map = index_nodes(document)
        logger.info("Styles in API response: %d", len(styles_meta))

        missing = [style_id for style_id in styles_meta if style_id not in node_map]
        if missing:
            logger.info("%d style nodes not in document tree, fetching by id", len(missing))
            fetched = await self._fetch_nodes(missing)
            node_map.update(fetched)
            logger.info("Fetched %d style nodes", len(fetched))

        colors: list[PublishedColorStyle] = []
        text_styles: list[PublishedTextStyle] = []
        effect_styles: list[PublishedEffectStyle] = []
        grid_styles: list[PublishedGridStyle] = []

        for style_id, meta in styles_meta.items():
            node = node_map.get(style_id)
            if node is None:
                continue
            name = meta.get("name", "")
            style_type = meta.get("styleType")
            if style_type == "FILL":
                if color := _resolve_color(style_id, name, node):
                    colors.append(color)
            elif style_type == "TEXT":
                if text := _resolve_text(style_id, name, node):
                    text_styles.append(text)
            elif style_type == "EFFECT":
                if effect := _resolve_effect(style_id, name, node):
                    effect_styles.append(effect)
            elif style_type == "GRID":
                if grid := _resolve_grid(style_id, name, node):
                    grid_styles.append(grid)

        logger.info(
            "Published styles: %d colour, %d text, %d effect, %d grid",
            len(colors),
            len(text_styles),
            len(effect_styles),
            len(grid_styles),
        )
        return PublishedStyles(
            colors=colors,
            text_styles=text_styles,
            effect_styles=effect_styles,
            grid_styles=grid_styles,
        )
