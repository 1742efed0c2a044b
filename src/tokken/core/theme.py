"""
Brand theme derivation.

Picks background, text and accent roles from a file's colour palette and
builds dark-mode and light-mode palettes whose accents are each readable on
their own background. Files with too few colours get :data:`FALLBACK_THEME`.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable

from .colors import (
    WHITE,
    adjust_brand_for_contrast,
    brand_colors,
    is_hex_color,
    lighten,
    luminance,
    saturation,
)
from .models import BrandRamp, PublishedStyles, RawTokens, ThemePalette

logger = logging.getLogger(__name__)

FALLBACK_ACCENT = "#d0bcfe"
FALLBACK_BACKGROUND = "#141218"
FALLBACK_TEXT_MUTED = "#938f99"
SUCCESS = "#a8db8f"

# Minimum saturation for an auto-picked accent; greyer palettes use the fallback.
MIN_ACCENT_SATURATION = 0.1

# Channel offsets from the darkest colour for the elevation ramp.
SOFT_STEP = 8
SURFACE_STEP = 10
ELEVATED_STEP = 18
MUTE_STEP = 26
BORDER_STEP = 40


def _fallback_theme() -> ThemePalette:
    light = brand_colors(FALLBACK_ACCENT, WHITE)
    return ThemePalette(
        background=FALLBACK_BACKGROUND,
        bg_soft="#211f26",
        bg_surface="#1d1b20",
        bg_elevated="#232028",
        bg_mute="#2b2930",
        border="#49454f",
        text_primary="#e6e0e9",
        text_secondary="#cac4d0",
        text_muted=FALLBACK_TEXT_MUTED,
        accent=FALLBACK_ACCENT,
        accent_dark="#381e72",
        accent_light=light.brand1,
        accent_dark_light=light.brand3,
        success=SUCCESS,
        brand_dark=BrandRamp(
            brand1=FALLBACK_ACCENT,
            brand2="#b69df8",
            brand3="#9a82db",
            brand_soft="rgba(208, 188, 254, 0.14)",
        ),
        brand_light=light,
    )


FALLBACK_THEME = _fallback_theme()


def theme_source_colors(published: PublishedStyles | None, raw: RawTokens | None) -> list[str]:
    """Colours the theme is derived from.

    Published colour styles win when the file has any; otherwise every colour
    observed in the tree is used.
    """
    if published is not None and published.colors:
        return [style.hex for style in published.colors]
    if raw is not None:
        return list(raw.colors)
    return []


def _pick_accent(by_luminance: list[str]) -> str:
    n = len(by_luminance)
    mid_range = by_luminance[math.floor(n * 0.2) : math.ceil(n * 0.8)]
    accent = FALLBACK_ACCENT
    max_saturation = 0.0
    for hex_color in mid_range:
        sat = saturation(hex_color)
        if sat > max_saturation:
            max_saturation = sat
            accent = hex_color
    if max_saturation < MIN_ACCENT_SATURATION:
        return FALLBACK_ACCENT
    return accent


def derive_theme(colors: Iterable[str], seed: str | None = None) -> ThemePalette:
    """Derive light/dark theme roles from a palette.

    Args:
        colors: Candidate hex colours. Anything that is not ``#rrggbb`` is
            ignored; duplicates (case-insensitive) count once.
        seed: Optional brand colour overriding the auto-picked accent.

    Returns:
        A :class:`ThemePalette`; :data:`FALLBACK_THEME` when fewer than three
        distinct valid colours are available.
    """
    distinct = list(dict.fromkeys(c.lower() for c in colors if is_hex_color(c)))
    if len(distinct) < 3:
        logger.info("Only %d usable colours, using fallback theme", len(distinct))
        return FALLBACK_THEME

    by_luminance = sorted(distinct, key=luminance)
    darkest = by_luminance[0]
    lightest = by_luminance[-1]

    raw_accent = _pick_accent(by_luminance)
    if seed is not None:
        if is_hex_color(seed):
            raw_accent = seed.lower()
        else:
            logger.warning("Ignoring invalid brand colour %r (expected #rrggbb)", seed)

    accent = adjust_brand_for_contrast(raw_accent, darkest)
    light = brand_colors(raw_accent, WHITE)
    logger.debug("Accent %s -> dark %s, light %s", raw_accent, accent, light.brand1)

    lightest_luminance = luminance(lightest)
    return ThemePalette(
        background=darkest,
        bg_soft=lighten(darkest, SOFT_STEP),
        bg_surface=lighten(darkest, SURFACE_STEP),
        bg_elevated=lighten(darkest, ELEVATED_STEP),
        bg_mute=lighten(darkest, MUTE_STEP),
        border=lighten(darkest, BORDER_STEP),
        text_primary=lightest,
        text_secondary=lighten(lightest, -30) if lightest_luminance > 0.7 else lightest,
        text_muted=lighten(lightest, -70) if lightest_luminance > 0.5 else FALLBACK_TEXT_MUTED,
        accent=accent,
        accent_dark=lighten(accent, -60),
        accent_light=light.brand1,
        accent_dark_light=light.brand3,
        success=SUCCESS,
        brand_dark=brand_colors(accent),
        brand_light=light,
    )
