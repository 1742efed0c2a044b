"""
DESIGN_SYSTEM.md generation.

A human-readable summary of an extraction: colours, typography, effects,
theme variables, the component inventory with per-component details, grids
and the derived brand theme. Sections with nothing to show are omitted.
"""

from __future__ import annotations

import json
from typing import Any

from tokken.core.colors import figma_color_to_hex, round_half_up
from tokken.core.models import (
    ComponentStyle,
    DesignSystem,
    ExtractedComponent,
    ThemeCollection,
    ThemePalette,
)

DASH = "—"
DESCRIPTION_LIMIT = 60


def _num(value: Any) -> str:
    """Render 14.0 as ``14`` and 1.5 as ``1.5``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _px(value: float | None, rounded: bool = False) -> str:
    if not value:
        return DASH
    return f"{round_half_up(value) if rounded else _num(value)}px"


def _percent(value: float) -> str:
    return f"{round_half_up(value * 100)}%"


def format_effect(effect: dict[str, Any]) -> str:
    effect_type = effect.get("type")
    if effect_type in ("DROP_SHADOW", "INNER_SHADOW"):
        offset = effect.get("offset") or {}
        color = effect.get("color")
        color_text = (
            f"{figma_color_to_hex(color)}/{_percent(color.get('a', 1))}" if color else DASH
        )
        return (
            f"x:{_num(offset.get('x', 0))} y:{_num(offset.get('y', 0))} "
            f"blur:{_num(effect.get('radius', 0))} spread:{_num(effect.get('spread', 0))} "
            f"color:{color_text}"
        )
    if effect_type in ("LAYER_BLUR", "BACKGROUND_BLUR"):
        return f"radius:{_num(effect.get('radius', 0))}"
    return json.dumps(effect, separators=(",", ":"))


def format_grid(grid: dict[str, Any]) -> str:
    pattern = grid.get("pattern")
    if pattern in ("COLUMNS", "ROWS"):
        return (
            f"count:{_num(grid.get('count', DASH))}, "
            f"gutter:{_num(grid.get('gutterSize', DASH))}px, "
            f"offset:{_num(grid.get('offset', 0))}px, "
            f"alignment:{grid.get('alignment', DASH)}"
        )
    if pattern == "GRID":
        return f"size:{_num(grid.get('sectionSize', DASH))}px"
    return json.dumps(grid, separators=(",", ":"))


# =============================================================================
# Sections
# =============================================================================


def _color_section(ds: DesignSystem) -> list[str]:
    lines = ["## Color Palette", ""]
    published = sorted(ds.published_styles.colors, key=lambda s: s.name.casefold())
    if published:
        lines.append("### Published Color Styles")
        lines.append("")
        lines.append("| Name | Hex | Opacity |")
        lines.append("|------|-----|---------|")
        for style in published:
            lines.append(f"| {style.name} | `{style.hex}` | {_percent(style.opacity)} |")
        lines.append("")

    if ds.raw_tokens.colors:
        lines.append("### All Colors Found")
        lines.append("")
        lines.append("| Hex | Usage Count |")
        lines.append("|-----|-------------|")
        for hex_color, count in sorted(ds.raw_tokens.colors.items(), key=lambda kv: -kv[1]):
            lines.append(f"| `{hex_color}` | {count} |")
        lines.append("")
    return lines


def _typography_section(ds: DesignSystem) -> list[str]:
    lines = ["## Typography", ""]
    published = sorted(ds.published_styles.text_styles, key=lambda s: s.name.casefold())
    if published:
        lines.append("### Published Text Styles")
        lines.append("")
        lines.append("| Name | Font | Size | Weight | Line Height | Letter Spacing |")
        lines.append("|------|------|------|--------|-------------|----------------|")
        for style in published:
            lines.append(
                f"| {style.name} | {style.font_family} | {_num(style.font_size)}px "
                f"| {_num(style.font_weight)} | {_px(style.line_height, rounded=True)} "
                f"| {_px(style.letter_spacing)} |"
            )
        lines.append("")

    if ds.raw_tokens.typography:
        lines.append("### All Typography Found")
        lines.append("")
        lines.append("| Font | Size | Weight | Line Height | Letter Spacing |")
        lines.append("|------|------|--------|-------------|----------------|")
        for t in sorted(ds.raw_tokens.typography.values(), key=lambda t: t.font_size or 0):
            lines.append(
                f"| {t.font_family} | {_num(t.font_size)}px | {_num(t.font_weight)} "
                f"| {_px(t.line_height, rounded=True)} | {_px(t.letter_spacing)} |"
            )
        lines.append("")
    return lines


def _effects_section(ds: DesignSystem) -> list[str]:
    effect_styles = ds.published_styles.effect_styles
    raw_effects = ds.raw_tokens.effects
    if not effect_styles and not raw_effects:
        return []

    lines = ["## Shadows & Effects", ""]
    if effect_styles:
        lines.append("### Published Effect Styles")
        lines.append("")
        lines.append("| Name | Type | Values |")
        lines.append("|------|------|--------|")
        for style in effect_styles:
            for effect in style.effects:
                lines.append(f"| {style.name} | {effect.get('type')} | {format_effect(effect)} |")
        lines.append("")

    if raw_effects:
        lines.append("### All Effects Found")
        lines.append("")
        lines.append("| Type | Values |")
        lines.append("|------|--------|")
        for effect in raw_effects:
            lines.append(f"| {effect.get('type')} | {format_effect(effect)} |")
        lines.append("")
    return lines


def _collection_lines(collection: ThemeCollection) -> list[str]:
    lines = [f"### {collection.name}", f"Modes: {', '.join(collection.modes)}", ""]
    modes = collection.modes
    color_vars = [v for v in collection.variables if v.type == "COLOR"]
    other_vars = [v for v in collection.variables if v.type != "COLOR"]

    if color_vars:
        lines.append("#### Color Variables")
        lines.append("")
        lines.append(f"| Variable | {' | '.join(modes)} |")
        lines.append(f"|----------|{'|'.join('-----' for _ in modes)}|")
        for var in color_vars:
            values = " | ".join(f"`{var.values_by_mode.get(m, DASH)}`" for m in modes)
            lines.append(f"| {var.name} | {values} |")
        lines.append("")

    if other_vars:
        lines.append("#### Other Variables")
        lines.append("")
        lines.append(f"| Variable | Type | {' | '.join(modes)} |")
        lines.append(f"|----------|------|{'|'.join('-----' for _ in modes)}|")
        for var in other_vars:
            values = " | ".join(_num(var.values_by_mode.get(m, DASH)) for m in modes)
            lines.append(f"| {var.name} | {var.type} | {values} |")
        lines.append("")
    return lines


def _themes_section(ds: DesignSystem) -> list[str]:
    if ds.themes is None or not ds.themes.collections:
        return []
    lines = ["## Themes", ""]
    for collection in ds.themes.collections:
        lines.extend(_collection_lines(collection))
    return lines


def _style_lines(styles: ComponentStyle) -> list[str]:
    lines: list[str] = []
    if styles.colors:
        lines.append("**Colors used:**")
        lines.append(", ".join(f"`{c}`" for c in styles.colors))
        lines.append("")

    if styles.typography:
        lines.append("**Typography:**")
        lines.append("")
        lines.append("| Font | Size | Weight | Line Height |")
        lines.append("|------|------|--------|-------------|")
        for t in styles.typography:
            lines.append(
                f"| {t.font_family} | {_num(t.font_size)}px | {_num(t.font_weight)} "
                f"| {_px(t.line_height, rounded=True)} |"
            )
        lines.append("")

    spacing = styles.spacing
    if spacing.paddings or spacing.gaps:
        lines.append("**Spacing:**")
        lines.append("")
        if spacing.paddings:
            lines.append("| Top | Right | Bottom | Left |")
            lines.append("|-----|-------|--------|------|")
            for p in spacing.paddings:
                lines.append(
                    f"| {_num(p.top)}px | {_num(p.right)}px | {_num(p.bottom)}px | {_num(p.left)}px |"
                )
            lines.append("")
        if spacing.gaps:
            lines.append(f"Gaps: {', '.join(f'`{_num(g)}px`' for g in spacing.gaps)}")
            lines.append("")

    borders = styles.borders
    if borders.radii or borders.stroke_weights:
        lines.append("**Borders:**")
        lines.append("")
        if borders.radii:
            radii = ", ".join(
                f"`{'/'.join(str(c) for c in r)}px`" if isinstance(r, tuple) else f"`{r}px`"
                for r in borders.radii
            )
            lines.append(f"Border radius: {radii}")
            lines.append("")
        if borders.stroke_weights:
            weights = ", ".join(f"`{_num(w)}px`" for w in borders.stroke_weights)
            lines.append(f"Stroke weights: {weights}")
            lines.append("")

    if styles.effects:
        lines.append("**Effects:**")
        lines.append("")
        lines.append("| Type | Offset | Blur | Spread | Color |")
        lines.append("|------|--------|------|--------|-------|")
        for e in styles.effects:
            offset = f"{_num(e.offset.x)}, {_num(e.offset.y)}" if e.offset else DASH
            color = figma_color_to_hex(e.color.model_dump()) if e.color else DASH
            radius = _num(e.radius) if e.radius is not None else DASH
            spread = _num(e.spread) if e.spread is not None else DASH
            lines.append(f"| {e.type} | {offset} | {radius} | {spread} | `{color}` |")
        lines.append("")

    if styles.layout:
        lines.append("**Layout:**")
        lines.append("")
        for layout in styles.layout:
            parts = [layout.mode]
            if layout.main_axis_align:
                parts.append(f"main: {layout.main_axis_align}")
            if layout.cross_axis_align:
                parts.append(f"cross: {layout.cross_axis_align}")
            lines.append(f"- {', '.join(parts)}")
        lines.append("")
    return lines


def _component_detail(comp: ExtractedComponent, image: str | None) -> list[str]:
    lines = [f"#### {comp.name}", ""]
    if image:
        lines.extend([f"![{comp.name}]({image})", ""])
    if comp.description:
        lines.extend([comp.description, ""])
    if comp.variants:
        lines.append(f"**Variants** ({len(comp.variants)}):")
        lines.extend(f"- {variant}" for variant in comp.variants)
        lines.append("")
    if comp.properties:
        lines.append("**Properties:**")
        lines.append("")
        lines.append("| Property | Type | Default |")
        lines.append("|----------|------|---------|")
        for name, prop in comp.properties.items():
            default = DASH if prop.default_value is None else prop.default_value
            lines.append(f"| {name} | {prop.type} | {default} |")
        lines.append("")
    if comp.styles is not None:
        lines.extend(_style_lines(comp.styles))
    return lines


def _components_section(ds: DesignSystem) -> list[str]:
    if not ds.components:
        return []
    lines = ["## Components", "", "### Component Inventory", ""]
    lines.append("| Name | Page | Description | Variants |")
    lines.append("|------|------|-------------|----------|")
    for comp in ds.components:
        if comp.description:
            desc = comp.description[:DESCRIPTION_LIMIT]
            if len(comp.description) > DESCRIPTION_LIMIT:
                desc += "..."
        else:
            desc = DASH
        variants = f"{len(comp.variants)} variants" if comp.variants else DASH
        lines.append(f"| {comp.name} | {comp.group or DASH} | {desc} | {variants} |")
    lines.append("")

    detailed = [c for c in ds.components if c.variants or c.properties]
    if detailed:
        lines.extend(["### Component Details", ""])
        for comp in detailed:
            lines.extend(_component_detail(comp, ds.component_images.get(comp.name)))
    return lines


def _grid_section(ds: DesignSystem) -> list[str]:
    grid_styles = ds.published_styles.grid_styles
    if not grid_styles:
        return []
    lines = ["## Grid System", "", "| Name | Type | Details |", "|------|------|---------|"]
    for style in grid_styles:
        for grid in style.grids:
            lines.append(f"| {style.name} | {grid.get('pattern')} | {format_grid(grid)} |")
    lines.append("")
    return lines


def _theme_section(theme: ThemePalette | None) -> list[str]:
    if theme is None:
        return []
    lines = ["## Brand Theme", "", "| Role | Dark | Light |", "|------|------|-------|"]
    rows = [
        ("Background", theme.background, "#ffffff"),
        ("Text", theme.text_primary, DASH),
        ("Accent", theme.accent, theme.accent_light),
        ("Accent (dark)", theme.accent_dark, theme.accent_dark_light),
        ("Brand 1", theme.brand_dark.brand1, theme.brand_light.brand1),
        ("Brand 2", theme.brand_dark.brand2, theme.brand_light.brand2),
        ("Brand 3", theme.brand_dark.brand3, theme.brand_light.brand3),
    ]
    for role, dark, light in rows:
        light_cell = DASH if light == DASH else f"`{light}`"
        lines.append(f"| {role} | `{dark}` | {light_cell} |")
    lines.append("")
    return lines


def render_design_system(ds: DesignSystem) -> str:
    """Render the whole DESIGN_SYSTEM.md document."""
    lines = [
        f"# Design System {DASH} {ds.file_name}",
        "",
        f"> Extracted from Figma on {ds.extracted_at[:10]}",
    ]
    if ds.figma_url:
        lines.append(f"> Source: {ds.figma_url}")
    lines.append("")

    lines.extend(_color_section(ds))
    lines.extend(_typography_section(ds))
    lines.extend(_effects_section(ds))
    lines.extend(_themes_section(ds))
    lines.extend(_components_section(ds))
    lines.extend(_grid_section(ds))
    lines.extend(_theme_section(ds.theme))
    return "\n".join(lines)
