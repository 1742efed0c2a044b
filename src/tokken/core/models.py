"""
Extraction model types.

Everything the extractor produces: published styles, raw token usage,
components with their harvested styles, theme variables, exported assets and
the derived brand theme. Python attributes are snake_case; JSON output uses
the camelCase names the documentation generator reads (``nodeId``,
``fontFamily``, ``pageOrder``).

Every field a downstream consumer reads is optional or defaulted, because any
extraction phase can legitimately come back empty.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

_FROZEN = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)
_MUTABLE = ConfigDict(alias_generator=to_camel, populate_by_name=True)

# Component names made only of these characters (and carrying no variants or
# properties) are treated as icons. A heuristic: the design file has no
# authoritative icon flag.
ICON_NAME_PATTERN = r"^[a-z0-9_/\-]+$"
_ICON_NAME_RE = re.compile(ICON_NAME_PATTERN)

# =============================================================================
# Component styles
# =============================================================================


class Padding(BaseModel):
    model_config = _FROZEN

    top: float = 0
    right: float = 0
    bottom: float = 0
    left: float = 0


class TypographyEntry(BaseModel):
    """One distinct font/size/weight combination."""

    model_config = _FROZEN

    font_family: str | None = None
    font_size: float | None = None
    font_weight: float | None = None
    line_height: float | None = None


class Offset(BaseModel):
    model_config = _FROZEN

    x: float = 0
    y: float = 0


class RGBAColor(BaseModel):
    """Design-tool colour, channels 0-1."""

    model_config = _FROZEN

    r: float = 0
    g: float = 0
    b: float = 0
    a: float = 1


class ComponentEffect(BaseModel):
    """Shadow or blur used inside a component."""

    model_config = _FROZEN

    type: str
    offset: Offset | None = None
    radius: float | None = None
    spread: float | None = None
    color: RGBAColor | None = None


class LayoutEntry(BaseModel):
    """Auto-layout direction and alignment."""

    model_config = _FROZEN

    mode: str
    main_axis_align: str | None = None
    cross_axis_align: str | None = None


class SpacingTokens(BaseModel):
    model_config = _FROZEN

    paddings: list[Padding] = Field(default_factory=list)
    gaps: list[float] = Field(default_factory=list)


class BorderTokens(BaseModel):
    model_config = _FROZEN

    radii: list[int | tuple[int, int, int, int]] = Field(default_factory=list)
    stroke_weights: list[float] = Field(default_factory=list)


class ComponentStyle(BaseModel):
    """
    Deduplicated visual values found inside one component's subtree.

    Example:
        ComponentStyle(
            colors=["#6750a4", "#ffffff"],
            typography=[TypographyEntry(font_family="Roboto", font_size=14, font_weight=500)],
            spacing=SpacingTokens(paddings=[Padding(top=10, right=24, bottom=10, left=24)], gaps=[8]),
            borders=BorderTokens(radii=[100], stroke_weights=[1]),
        )
    """

    model_config = _FROZEN

    colors: list[str] = Field(default_factory=list)
    typography: list[TypographyEntry] = Field(default_factory=list)
    spacing: SpacingTokens = Field(default_factory=SpacingTokens)
    borders: BorderTokens = Field(default_factory=BorderTokens)
    effects: list[ComponentEffect] = Field(default_factory=list)
    layout: list[LayoutEntry] = Field(default_factory=list)


# =============================================================================
# Components
# =============================================================================


class PropertyDefinition(BaseModel):
    """A declared component property (variant axis, boolean, text, swap)."""

    model_config = _FROZEN

    type: str
    default_value: Any = None
    options: list[str] | None = None


class ExtractedComponent(BaseModel):
    """
    A published component, or a whole variant set merged into one entry.

    ``variants`` is empty for standalone components. For variant sets it
    holds every sibling variant's full name, and ``node_id`` is the first
    variant's node (not the set container) so image export shows a real
    variant.
    """

    model_config = _FROZEN

    name: str
    description: str = ""
    variants: list[str] = Field(default_factory=list)
    properties: dict[str, PropertyDefinition] = Field(default_factory=dict)
    node_id: str
    group: str | None = None
    set_name: str | None = None
    styles: ComponentStyle | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_icon(self) -> bool:
        """Best-effort icon test: no variants, no properties, lowercase path-like name.

        The design file carries no authoritative icon flag, so a plain
        standalone component named like ``arrow/left`` is exported as SVG.
        """
        return (
            not self.variants
            and not self.properties
            and _ICON_NAME_RE.fullmatch(self.name) is not None
        )


# =============================================================================
# Published styles
# =============================================================================


class PublishedColorStyle(BaseModel):
    model_config = _FROZEN

    name: str
    hex: str
    opacity: float = 1.0
    style_id: str


class PublishedTextStyle(BaseModel):
    model_config = _FROZEN

    name: str
    font_family: str = "Unknown"
    font_size: float = 0
    font_weight: float = 400
    line_height: float | None = None
    letter_spacing: float | None = None
    style_id: str


class PublishedEffectStyle(BaseModel):
    model_config = _FROZEN

    name: str
    effects: list[dict[str, Any]] = Field(default_factory=list)
    style_id: str


class PublishedGridStyle(BaseModel):
    model_config = _FROZEN

    name: str
    grids: list[dict[str, Any]] = Field(default_factory=list)
    style_id: str


class PublishedStyles(BaseModel):
    """Styles a designer promoted to the team library, resolved to values."""

    model_config = _FROZEN

    colors: list[PublishedColorStyle] = Field(default_factory=list)
    text_styles: list[PublishedTextStyle] = Field(default_factory=list)
    effect_styles: list[PublishedEffectStyle] = Field(default_factory=list)
    grid_styles: list[PublishedGridStyle] = Field(default_factory=list)


# =============================================================================
# Raw tokens
# =============================================================================


class RawTypography(BaseModel):
    model_config = _FROZEN

    font_family: str | None = None
    font_size: float | None = None
    font_weight: float | None = None
    line_height: float | None = None
    letter_spacing: float | None = None


class RawTokens(BaseModel):
    """Every value observed anywhere in the tree, published or not.

    ``colors`` is the palette: hex -> number of fills/strokes using it.
    """

    model_config = _MUTABLE

    colors: dict[str, int] = Field(default_factory=dict)
    typography: dict[str, RawTypography] = Field(default_factory=dict)
    effects: list[dict[str, Any]] = Field(default_factory=list)


# =============================================================================
# Theme variables
# =============================================================================


class ThemeVariable(BaseModel):
    model_config = _FROZEN

    name: str
    type: str
    values_by_mode: dict[str, Any] = Field(default_factory=dict)


class ThemeCollection(BaseModel):
    model_config = _FROZEN

    name: str
    modes: list[str] = Field(default_factory=list)
    variables: list[ThemeVariable] = Field(default_factory=list)


class ThemeData(BaseModel):
    model_config = _FROZEN

    collections: list[ThemeCollection] = Field(default_factory=list)


# =============================================================================
# Derived brand theme
# =============================================================================


class BrandRamp(BaseModel):
    """Primary brand colour plus two darker steps and a translucent tint."""

    model_config = _FROZEN

    brand1: str
    brand2: str
    brand3: str
    brand_soft: str


class ThemePalette(BaseModel):
    """
    Light/dark colour roles for the generated documentation site.

    ``accent`` is readable on ``background`` (dark mode); ``accent_light`` is
    readable on white (light mode). The two are derived independently and may
    differ from each other and from the seed colour.
    """

    model_config = _FROZEN

    background: str
    bg_soft: str
    bg_surface: str
    bg_elevated: str
    bg_mute: str
    border: str
    text_primary: str
    text_secondary: str
    text_muted: str
    accent: str
    accent_dark: str
    accent_light: str
    accent_dark_light: str
    success: str
    brand_dark: BrandRamp
    brand_light: BrandRamp


# =============================================================================
# Output model
# =============================================================================


class FrameExport(BaseModel):
    model_config = _FROZEN

    id: str
    name: str
    filename: str


class DesignSystem(BaseModel):
    """The complete result of one extraction run."""

    model_config = _MUTABLE

    file_key: str
    file_name: str
    figma_url: str
    extracted_at: str
    published_styles: PublishedStyles = Field(default_factory=PublishedStyles)
    raw_tokens: RawTokens = Field(default_factory=RawTokens)
    components: list[ExtractedComponent] = Field(default_factory=list)
    page_order: list[str] = Field(default_factory=list)
    themes: ThemeData | None = None
    component_images: dict[str, str] = Field(default_factory=dict)
    icon_svgs: dict[str, str] = Field(default_factory=dict)
    frames: list[FrameExport] = Field(default_factory=list)
    theme: ThemePalette | None = None


class ManifestCounts(BaseModel):
    model_config = _FROZEN

    published_color_styles: int = 0
    published_text_styles: int = 0
    published_effect_styles: int = 0
    published_grid_styles: int = 0
    published_components: int = 0
    raw_colors: int = 0
    raw_typography: int = 0
    raw_effects: int = 0
    theme_collections: int = 0
    component_images: int = 0
    icon_svgs: int = 0


class Manifest(BaseModel):
    model_config = _FROZEN

    file_key: str
    file_name: str
    figma_url: str
    extracted_at: str
    frames: list[FrameExport] = Field(default_factory=list)
    counts: ManifestCounts = Field(default_factory=ManifestCounts)
