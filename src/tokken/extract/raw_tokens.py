"""
Raw token traversal.

Counts every colour, font combination and effect used anywhere in the
document, whether or not it was published as a style. The colour counts are
the palette the theme deriver falls back to when a file publishes no colour
styles.
"""

from __future__ import annotations

import logging
from typing import Any

from tokken.core.models import RawTokens, RawTypography

from .attributes import effect_key, solid_colors, text_style, typography_key, visible_effects
from .walker import DesignNode, walk

logger = logging.getLogger(__name__)


class _RawTokenAccumulator:
    """Per-run collection state; one instance per traversal."""

    def __init__(self) -> None:
        self.colors: dict[str, int] = {}
        self.typography: dict[str, RawTypography] = {}
        self.effects: list[dict[str, Any]] = []
        self._seen_effects: set[str] = set()

    def visit(self, node: DesignNode) -> None:
        for hex_color in solid_colors(node):
            self.colors[hex_color] = self.colors.get(hex_color, 0) + 1

        style = text_style(node)
        if style is not None:
            key = typography_key(style)
            if key not in self.typography:
                self.typography[key] = RawTypography(
                    font_family=style.get("fontFamily"),
                    font_size=style.get("fontSize"),
                    font_weight=style.get("fontWeight"),
                    line_height=style.get("lineHeightPx") or None,
                    letter_spacing=style.get("letterSpacing") or None,
                )

        for effect in visible_effects(node):
            key = effect_key(effect)
            if key not in self._seen_effects:
                self._seen_effects.add(key)
                self.effects.append(effect)

    def result(self) -> RawTokens:
        return RawTokens(colors=self.colors, typography=self.typography, effects=self.effects)


def extract_raw_tokens(document: DesignNode) -> RawTokens:
    """Collect raw colour usage, typography and effects from the whole tree."""
    accumulator = _RawTokenAccumulator()
    walk(document, accumulator.visit)
    tokens = accumulator.result()
    logger.info(
        "Raw tokens: %d colours, %d typography, %d effects",
        len(tokens.colors),
        len(tokens.typography),
        len(tokens.effects),
    )
    return tokens
