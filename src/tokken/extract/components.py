"""
Component extraction.

Turns the file's component metadata into :class:`ExtractedComponent` records:

- Components whose name (or whose variant set's name) starts with ``.`` are
  private and skipped.
- Variants sharing a ``componentSetId`` are merged into one record.
- Each record is tagged with the page it lives on, and carries the colours,
  type, spacing, borders, effects and layouts found in its subtree.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from tokken.core.colors import round_half_up
from tokken.core.models import (
    BorderTokens,
    ComponentEffect,
    ComponentStyle,
    ExtractedComponent,
    LayoutEntry,
    Offset,
    Padding,
    PropertyDefinition,
    RGBAColor,
    SpacingTokens,
    TypographyEntry,
)

from .attributes import (
    effect_key,
    has_auto_layout,
    solid_colors,
    text_style,
    typography_key,
    visible_effects,
)
from .walker import DesignNode, children_of, index_nodes, iter_nodes, walk

logger = logging.getLogger(__name__)

PRIVATE_PREFIX = "."


@dataclass
class ComponentExtraction:
    """Components sorted by name, plus page names in file order."""

    components: list[ExtractedComponent] = field(default_factory=list)
    page_order: list[str] = field(default_factory=list)


# =============================================================================
# Style harvesting
# =============================================================================


class _StyleAccumulator:
    """Value-deduplicated style sets for one component."""

    def __init__(self) -> None:
        self.colors: dict[str, None] = {}
        self.typography: dict[str, TypographyEntry] = {}
        self.paddings: dict[tuple[float, float, float, float], Padding] = {}
        self.gaps: set[float] = set()
        self.radii: dict[tuple[float, ...], None] = {}
        self.stroke_weights: set[float] = set()
        self.effects: dict[str, ComponentEffect] = {}
        self.layouts: dict[tuple[str, str, str], LayoutEntry] = {}

    def visit(self, node: DesignNode) -> None:
        for hex_color in solid_colors(node):
            self.colors.setdefault(hex_color, None)

        style = text_style(node)
        if style is not None:
            key = typography_key(style)
            if key not in self.typography:
                self.typography[key] = TypographyEntry(
                    font_family=style.get("fontFamily"),
                    font_size=style.get("fontSize"),
                    font_weight=style.get("fontWeight"),
                    line_height=style.get("lineHeightPx") or None,
                )

        if has_auto_layout(node):
            self._visit_auto_layout(node)

        corner_radii = node.get("rectangleCornerRadii")
        corner_radius = node.get("cornerRadius")
        if corner_radii:
            self.radii.setdefault(tuple(float(v) for v in corner_radii), None)
        elif corner_radius is not None and corner_radius > 0:
            self.radii.setdefault((float(corner_radius),), None)

        stroke_weight = node.get("strokeWeight")
        if stroke_weight is not None and stroke_weight >= 0.5:
            self.stroke_weights.add(round_half_up(stroke_weight * 10) / 10)

        for effect in visible_effects(node):
            key = effect_key(effect)
            if key not in self.effects:
                self.effects[key] = _component_effect(effect)

    def _visit_auto_layout(self, node: DesignNode) -> None:
        padding = (
            node.get("paddingTop") or 0,
            node.get("paddingRight") or 0,
            node.get("paddingBottom") or 0,
            node.get("paddingLeft") or 0,
        )
        if any(side > 0 for side in padding) and padding not in self.paddings:
            top, right, bottom, left = padding
            self.paddings[padding] = Padding(top=top, right=right, bottom=bottom, left=left)

        gap = node.get("itemSpacing")
        if gap is not None and gap > 0:
            self.gaps.add(gap)

        mode = node["layoutMode"]
        main = node.get("primaryAxisAlignItems") or ""
        cross = node.get("counterAxisAlignItems") or ""
        self.layouts.setdefault(
            (mode, main, cross),
            LayoutEntry(mode=mode, main_axis_align=main or None, cross_axis_align=cross or None),
        )

    def _rounded_radii(self) -> list[int | tuple[int, int, int, int]]:
        radii: list[int | tuple[int, int, int, int]] = []
        seen: set[tuple[int, ...]] = set()
        for key in self.radii:
            parts = tuple(round_half_up(v) for v in key)
            if parts in seen:
                continue
            seen.add(parts)
            if len(parts) == 4:
                radii.append((parts[0], parts[1], parts[2], parts[3]))
            else:
                radii.append(parts[0])
        radii.sort(key=lambda r: r if isinstance(r, int) else r[0])
        return radii

    def result(self) -> ComponentStyle:
        return ComponentStyle(
            colors=list(self.colors),
            typography=sorted(self.typography.values(), key=lambda t: t.font_size or 0),
            spacing=SpacingTokens(paddings=list(self.paddings.values()), gaps=sorted(self.gaps)),
            borders=BorderTokens(
                radii=self._rounded_radii(),
                stroke_weights=sorted(self.stroke_weights),
            ),
            effects=list(self.effects.values()),
            layout=list(self.layouts.values()),
        )


def _component_effect(effect: dict[str, Any]) -> ComponentEffect:
    offset = effect.get("offset")
    color = effect.get("color")
    return ComponentEffect(
        type=effect.get("type", "UNKNOWN"),
        offset=Offset(x=offset.get("x", 0), y=offset.get("y", 0)) if offset else None,
        radius=effect.get("radius"),
        spread=effect.get("spread"),
        color=(
            RGBAColor(
                r=color.get("r", 0),
                g=color.get("g", 0),
                b=color.get("b", 0),
                a=color["a"] if color.get("a") is not None else 1,
            )
            if color
            else None
        ),
    )


def harvest_component_styles(node: DesignNode) -> ComponentStyle:
    """Collect the visual values used inside a component.

    For a variant set only the variant children are walked: the set
    container's own padding, border and radius belong to the editor frame,
    not to the design.
    """
    accumulator = _StyleAccumulator()
    if node.get("type") == "COMPONENT_SET" and "children" in node:
        for child in children_of(node):
            walk(child, accumulator.visit)
    else:
        walk(node, accumulator.visit)
    return accumulator.result()


# =============================================================================
# Extraction
# =============================================================================


def _property_definitions(node: DesignNode | None) -> dict[str, PropertyDefinition]:
    if node is None:
        return {}
    definitions = node.get("componentPropertyDefinitions") or {}
    return {
        name: PropertyDefinition(
            type=definition.get("type", "UNKNOWN"),
            default_value=definition.get("defaultValue"),
            options=definition.get("variantOptions"),
        )
        for name, definition in definitions.items()
    }


def _page_groups(document: DesignNode) -> tuple[dict[str, str], list[str]]:
    """Tag every node below a page with that page's name."""
    groups: dict[str, str] = {}
    page_order: list[str] = []
    for page in children_of(document):
        page_name = page.get("name", "")
        page_order.append(page_name)
        for top_child in children_of(page):
            for node in iter_nodes(top_child):
                node_id = node.get("id")
                if node_id is not None:
                    groups[node_id] = page_name
    return groups, page_order


@dataclass
class _VariantSet:
    name: str
    description: str
    variants: list[str] = field(default_factory=list)
    variant_node_ids: list[str] = field(default_factory=list)


def extract_components(file_data: dict[str, Any]) -> ComponentExtraction:
    """Build the component catalogue from a fetched file.

    Args:
        file_data: Files API payload with ``document``, ``components`` and
            (optionally) ``componentSets``.

    Returns:
        Components sorted case-insensitively by name, and the page order.
    """
    document: DesignNode = file_data.get("document") or {}
    components_meta: dict[str, dict[str, Any]] = file_data.get("components") or {}
    sets_meta: dict[str, dict[str, Any]] = file_data.get("componentSets") or {}

    node_map = index_nodes(document)
    groups, page_order = _page_groups(document)

    variant_sets: dict[str, _VariantSet] = {}
    extracted: list[ExtractedComponent] = []

    for node_id, meta in components_meta.items():
        name = meta.get("name", "")
        if name.startswith(PRIVATE_PREFIX):
            continue

        set_id = meta.get("componentSetId")
        if set_id:
            set_meta = sets_meta.get(set_id)
            if set_meta and set_meta.get("name", "").startswith(PRIVATE_PREFIX):
                continue
            variant_set = variant_sets.get(set_id)
            if variant_set is None:
                variant_set = _VariantSet(
                    name=set_meta.get("name", "") if set_meta else name.split("/")[0],
                    description=(set_meta or {}).get("description") or "",
                )
                variant_sets[set_id] = variant_set
            variant_set.variants.append(name)
            variant_set.variant_node_ids.append(node_id)
            continue

        node = node_map.get(node_id)
        extracted.append(
            ExtractedComponent(
                name=name,
                description=meta.get("description") or "",
                properties=_property_definitions(node),
                node_id=node_id,
                group=groups.get(node_id),
                styles=harvest_component_styles(node) if node is not None else None,
            )
        )

    for set_id, variant_set in variant_sets.items():
        node = node_map.get(set_id)
        extracted.append(
            ExtractedComponent(
                name=variant_set.name,
                description=variant_set.description,
                variants=variant_set.variants,
                properties=_property_definitions(node),
                node_id=variant_set.variant_node_ids[0],
                group=groups.get(set_id) or groups.get(variant_set.variant_node_ids[0]),
                set_name=variant_set.name,
                styles=harvest_component_styles(node) if node is not None else None,
            )
        )

    extracted.sort(key=lambda c: c.name.casefold())
    logger.info(
        "Components: %d (%d variant sets)", len(extracted), len(variant_sets)
    )
    return ComponentExtraction(components=extracted, page_order=page_order)
