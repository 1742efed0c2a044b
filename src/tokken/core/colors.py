"""
Pure-Python colour math for brand theming.

Hex/RGB/HSL conversion, perceptual and WCAG luminance, contrast ratios, and
the contrast adjuster that nudges a brand colour's lightness until it is
readable on a given background. No external colour libraries required.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any

from .models import BrandRamp

WHITE = "#ffffff"
BLACK = "#000000"

# WCAG 2.x AA thresholds: body text and large UI (buttons, icons).
MIN_TEXT_CONTRAST = 4.5
MIN_BUTTON_CONTRAST = 3.0

_SEARCH_ITERATIONS = 30
_HEX6_RE = re.compile(r"^#[0-9a-fA-F]{6}$")
_HEX_BODY_RE = re.compile(r"^(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

RGB = tuple[int, int, int]


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives, matching the design tool's exporter."""
    return math.floor(value + 0.5)


def _clamp_channel(value: float) -> int:
    return max(0, min(255, round_half_up(value)))


# =============================================================================
# Hex / RGB
# =============================================================================


def is_hex_color(value: object) -> bool:
    """True for a canonical ``#rrggbb`` string (either case)."""
    return isinstance(value, str) and bool(_HEX6_RE.match(value))


def hex_to_rgb(hex_color: str) -> RGB:
    """Parse ``#rgb``/``#rrggbb`` (leading ``#`` optional) into 0-255 channels.

    Raises:
        ValueError: If the string is not 3 or 6 hex digits.
    """
    body = hex_color.strip().removeprefix("#")
    if not _HEX_BODY_RE.match(body):
        raise ValueError(f"Invalid hex colour: {hex_color!r}")
    if len(body) == 3:
        body = "".join(ch * 2 for ch in body)
    n = int(body, 16)
    return (n >> 16) & 255, (n >> 8) & 255, n & 255


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Format 0-255 channels as lowercase ``#rrggbb`` (clamped)."""
    return "#" + "".join(f"{_clamp_channel(v):02x}" for v in (r, g, b))


def normalize_hex(hex_color: str) -> str:
    """Canonical lowercase ``#rrggbb`` form of any accepted hex string."""
    return rgb_to_hex(*hex_to_rgb(hex_color))


def figma_color_to_hex(color: Mapping[str, Any]) -> str:
    """Convert a design-tool ``{r, g, b}`` colour (0-1 floats) to hex."""
    return rgb_to_hex(
        float(color.get("r", 0)) * 255,
        float(color.get("g", 0)) * 255,
        float(color.get("b", 0)) * 255,
    )


# =============================================================================
# HSL
# =============================================================================


def rgb_to_hsl(r: int, g: int, b: int) -> tuple[float, float, float]:
    """Convert 0-255 RGB to HSL.

    Returns:
        ``(hue, saturation, lightness)`` with hue in degrees ``[0, 360)`` and
        saturation/lightness in ``[0, 1]``. Unrounded, so a round-trip through
        :func:`hsl_to_rgb` reproduces the input channels.
    """
    rf, gf, bf = r / 255, g / 255, b / 255
    hi = max(rf, gf, bf)
    lo = min(rf, gf, bf)
    lightness = (hi + lo) / 2
    delta = hi - lo
    if delta == 0:
        return 0.0, 0.0, lightness

    saturation = delta / (1 - abs(2 * lightness - 1))
    if hi == rf:
        hue = ((gf - bf) / delta) % 6
    elif hi == gf:
        hue = (bf - rf) / delta + 2
    else:
        hue = (rf - gf) / delta + 4
    return (hue * 60) % 360, min(saturation, 1.0), lightness


def hsl_to_rgb(hue: float, saturation: float, lightness: float) -> RGB:
    """Convert HSL (hue in degrees, s/l in 0-1) to rounded 0-255 RGB."""
    chroma = (1 - abs(2 * lightness - 1)) * saturation
    sector = (hue % 360) / 60
    x = chroma * (1 - abs(sector % 2 - 1))
    if sector < 1:
        rgb = (chroma, x, 0.0)
    elif sector < 2:
        rgb = (x, chroma, 0.0)
    elif sector < 3:
        rgb = (0.0, chroma, x)
    elif sector < 4:
        rgb = (0.0, x, chroma)
    elif sector < 5:
        rgb = (x, 0.0, chroma)
    else:
        rgb = (chroma, 0.0, x)
    m = lightness - chroma / 2
    r, g, b = ((channel + m) * 255 for channel in rgb)
    return _clamp_channel(r), _clamp_channel(g), _clamp_channel(b)


def hex_to_hsl(hex_color: str) -> tuple[float, float, float]:
    return rgb_to_hsl(*hex_to_rgb(hex_color))


def hsl_to_hex(hue: float, saturation: float, lightness: float) -> str:
    return rgb_to_hex(*hsl_to_rgb(hue, saturation, lightness))


# =============================================================================
# Luminance & contrast
# =============================================================================


def luminance(hex_color: str) -> float:
    """Perceptual luminance (0-1) for "is this light or dark" heuristics."""
    r, g, b = hex_to_rgb(hex_color)
    return (0.299 * r + 0.587 * g + 0.114 * b) / 255


def saturation(hex_color: str) -> float:
    """HSV-style saturation ``(max - min) / max``; 0 for black and greys."""
    r, g, b = hex_to_rgb(hex_color)
    hi = max(r, g, b) / 255
    lo = min(r, g, b) / 255
    if hi == 0:
        return 0.0
    return (hi - lo) / hi


def _linearize(channel: int) -> float:
    c = channel / 255
    if c <= 0.03928:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(hex_color: str) -> float:
    """WCAG relative luminance (gamma-corrected, 0-1)."""
    r, g, b = hex_to_rgb(hex_color)
    return 0.2126 * _linearize(r) + 0.7152 * _linearize(g) + 0.0722 * _linearize(b)


def contrast_ratio(a: str, b: str) -> float:
    """WCAG contrast ratio between two colours, 1.0 to 21.0, order-independent."""
    la = relative_luminance(a)
    lb = relative_luminance(b)
    lighter, darker = max(la, lb), min(la, lb)
    return (lighter + 0.05) / (darker + 0.05)


# =============================================================================
# Brand adjustment
# =============================================================================


def lighten(hex_color: str, amount: float) -> str:
    """Shift every channel by ``amount`` (negative darkens), clamped to 0-255."""
    r, g, b = hex_to_rgb(hex_color)
    return rgb_to_hex(r + amount, g + amount, b + amount)


def _meets_contrast(
    color: str, background: str, min_text_contrast: float, min_button_contrast: float
) -> tuple[bool, bool]:
    return (
        contrast_ratio(color, background) >= min_text_contrast,
        contrast_ratio(color, WHITE) >= min_button_contrast,
    )


def adjust_brand_for_contrast(
    seed: str,
    background: str,
    min_text_contrast: float = MIN_TEXT_CONTRAST,
    min_button_contrast: float = MIN_BUTTON_CONTRAST,
) -> str:
    """Return the colour closest in lightness to ``seed`` that is readable.

    Readable means at least ``min_text_contrast`` against ``background`` (brand
    coloured text and links) and at least ``min_button_contrast`` against
    white (white labels on brand-filled buttons). Hue and saturation are held
    fixed; only HSL lightness is binary-searched.

    A seed that already passes both checks is returned unchanged, so the
    function is idempotent whenever a readable result exists. If no readable
    lightness is found (a mid-grey background such as ``#333333`` can leave
    no window) the last probe is returned rather than raising; that fallback
    is not idempotent, since a second call searches again from it.

    Args:
        seed: Brand colour as hex.
        background: Background colour the brand must sit on.
        min_text_contrast: Minimum ratio against the background.
        min_button_contrast: Minimum ratio against white.

    Returns:
        Lowercase ``#rrggbb``.
    """
    seed = normalize_hex(seed)
    background = normalize_hex(background)
    text_ok, button_ok = _meets_contrast(seed, background, min_text_contrast, min_button_contrast)
    if text_ok and button_ok:
        return seed

    hue, sat, original_lightness = hex_to_hsl(seed)
    background_is_light = luminance(background) > 0.5

    lo, hi = 0.0, 1.0
    best: str | None = None
    best_distance = math.inf
    probe = seed
    for _ in range(_SEARCH_ITERATIONS):
        mid = (lo + hi) / 2
        probe = hsl_to_hex(hue, sat, mid)
        text_ok, button_ok = _meets_contrast(
            probe, background, min_text_contrast, min_button_contrast
        )
        if text_ok and button_ok:
            distance = abs(mid - original_lightness)
            if distance < best_distance:
                best, best_distance = probe, distance
            # Keep narrowing toward the designer's lightness.
            if mid < original_lightness:
                lo = mid
            else:
                hi = mid
        elif not text_ok:
            if background_is_light:
                hi = mid
            else:
                lo = mid
        else:
            # Too light for a white button label.
            hi = mid

    return best if best is not None else probe


def brand_colors(seed: str, background: str | None = None) -> BrandRamp:
    """Derive the four-step brand ramp from one colour.

    ``brand1`` is the seed, contrast-adjusted against ``background`` when one
    is given. ``brand2``/``brand3`` are 20 and 40 channel steps darker and
    ``brand_soft`` is a 14% translucent tint for hover backgrounds.
    """
    brand1 = adjust_brand_for_contrast(seed, background) if background else normalize_hex(seed)
    r, g, b = hex_to_rgb(brand1)
    return BrandRamp(
        brand1=brand1,
        brand2=lighten(brand1, -20),
        brand3=lighten(brand1, -40),
        brand_soft=f"rgba({r}, {g}, {b}, 0.14)",
    )
