"""Tests for writing extraction results to disk."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from tokken.core.models import (
    ComponentStyle,
    DesignSystem,
    ExtractedComponent,
    FrameExport,
    PropertyDefinition,
    PublishedColorStyle,
    PublishedGridStyle,
    PublishedStyles,
    PublishedTextStyle,
    RawTokens,
    RawTypography,
    ThemeCollection,
    ThemeData,
    ThemeVariable,
)
from tokken.core.theme import derive_theme
from tokken.output.markdown import format_effect, format_grid, render_design_system
from tokken.output.writer import (
    MANIFEST_FILENAME,
    MARKDOWN_FILENAME,
    TOKENS_FILENAME,
    build_manifest,
    design_tokens_document,
    load_theme_colors,
    write_outputs,
)

SHADOW = {
    "type": "DROP_SHADOW",
    "offset": {"x": 0, "y": 2},
    "radius": 4,
    "spread": 0,
    "color": {"r": 0, "g": 0, "b": 0, "a": 0.25},
}


def _design_system(**overrides: Any) -> DesignSystem:
    values: dict[str, Any] = {
        "file_key": "AbC123xyz",
        "file_name": "Demo Design System",
        "figma_url": "https://www.figma.com/design/AbC123xyz/Demo",
        "extracted_at": "2024-05-17T09:30:00+00:00",
        "published_styles": PublishedStyles(
            colors=[
                PublishedColorStyle(name="Primary", hex="#6750a4", opacity=0.9, style_id="3:1"),
            ],
            text_styles=[
                PublishedTextStyle(
                    name="Body/Medium",
                    font_family="Roboto",
                    font_size=14,
                    font_weight=500,
                    line_height=20,
                    letter_spacing=0.1,
                    style_id="3:2",
                )
            ],
        ),
        "raw_tokens": RawTokens(
            colors={"#ffffff": 4, "#6750a4": 2},
            typography={
                "Roboto-14-500": RawTypography(font_family="Roboto", font_size=14, font_weight=500)
            },
        ),
        "components": [
            ExtractedComponent(
                name="Button",
                description="Primary action",
                variants=["State=Default", "State=Hover"],
                properties={"State": PropertyDefinition(type="VARIANT", default_value="Default")},
                node_id="10:1",
                group="Actions",
                set_name="Button",
                styles=ComponentStyle(colors=["#6750a4"]),
            ),
            ExtractedComponent(name="Card", node_id="4:1", group="Display"),
        ],
        "page_order": ["Actions", "Display"],
        "component_images": {"Button": "components/button.png"},
        "frames": [FrameExport(id="2:1", name="Home", filename="01-home.png")],
    }
    values.update(overrides)
    return DesignSystem(**values)


# ---------------------------------------------------------------------------
# design-tokens.json
# ---------------------------------------------------------------------------


class TestDesignTokensDocument:
    def test_top_level_keys(self) -> None:
        doc = design_tokens_document(_design_system())
        assert set(doc) == {
            "fileKey",
            "fileName",
            "colors",
            "typography",
            "effects",
            "publishedStyles",
            "components",
            "themes",
            "componentImages",
            "iconSvgs",
            "pageOrder",
            "theme",
        }
        assert doc["pageOrder"] == ["Actions", "Display"]
        assert doc["themes"] is None

    def test_camel_case_keys(self) -> None:
        doc = design_tokens_document(_design_system())
        assert doc["publishedStyles"]["textStyles"][0]["fontFamily"] == "Roboto"
        assert doc["publishedStyles"]["colors"][0]["styleId"] == "3:1"
        assert doc["typography"]["Roboto-14-500"]["fontSize"] == 14

    def test_component_entries(self) -> None:
        button, card = design_tokens_document(_design_system())["components"]
        assert button["nodeId"] == "10:1"
        assert button["variantCount"] == 2
        assert button["image"] == "components/button.png"
        assert button["properties"]["State"]["defaultValue"] == "Default"
        assert card["variantCount"] == 0
        assert card["image"] is None

    def test_theme_serialized(self) -> None:
        theme = derive_theme(["#000000", "#6750a4", "#ffffff"])
        doc = design_tokens_document(_design_system(theme=theme))
        assert doc["theme"]["accentLight"] == theme.accent_light
        assert doc["theme"]["brandDark"]["brandSoft"] == theme.brand_dark.brand_soft

    def test_document_is_json_serializable(self) -> None:
        json.dumps(design_tokens_document(_design_system()))


# ---------------------------------------------------------------------------
# manifest.json
# ---------------------------------------------------------------------------


class TestManifest:
    def test_counts(self) -> None:
        counts = build_manifest(_design_system()).counts
        assert counts.published_color_styles == 1
        assert counts.published_text_styles == 1
        assert counts.published_components == 2
        assert counts.raw_colors == 2
        assert counts.raw_typography == 1
        assert counts.component_images == 1
        assert counts.icon_svgs == 0
        assert counts.theme_collections == 0

    def test_theme_collection_count(self) -> None:
        themes = ThemeData(collections=[ThemeCollection(name="Colors", modes=["Light"])])
        assert build_manifest(_design_system(themes=themes)).counts.theme_collections == 1

    def test_frames_carried(self) -> None:
        manifest = build_manifest(_design_system())
        assert [f.filename for f in manifest.frames] == ["01-home.png"]


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


class TestWriteOutputs:
    def test_writes_three_files(self, tmp_path: Path) -> None:
        out = tmp_path / "nested" / "out"
        files = write_outputs(_design_system(), None, out)

        assert files.tokens == out / TOKENS_FILENAME
        assert files.manifest == out / MANIFEST_FILENAME
        assert files.markdown == out / MARKDOWN_FILENAME
        for path in (files.tokens, files.manifest, files.markdown):
            assert path.is_file()

    def test_manifest_json_shape(self, tmp_path: Path) -> None:
        files = write_outputs(_design_system(), None, tmp_path)
        manifest = json.loads(files.manifest.read_text(encoding="utf-8"))
        assert manifest["fileKey"] == "AbC123xyz"
        assert manifest["extractedAt"] == "2024-05-17T09:30:00+00:00"
        assert manifest["counts"]["publishedComponents"] == 2
        assert manifest["frames"][0]["filename"] == "01-home.png"

    def test_explicit_manifest_used(self, tmp_path: Path) -> None:
        ds = _design_system()
        manifest = build_manifest(ds).model_copy(update={"file_name": "Renamed"})
        files = write_outputs(ds, manifest, tmp_path)
        assert json.loads(files.manifest.read_text())["fileName"] == "Renamed"

    def test_tokens_round_trip_through_json(self, tmp_path: Path) -> None:
        files = write_outputs(_design_system(), None, tmp_path)
        doc = json.loads(files.tokens.read_text(encoding="utf-8"))
        assert doc["componentImages"] == {"Button": "components/button.png"}


# ---------------------------------------------------------------------------
# DESIGN_SYSTEM.md
# ---------------------------------------------------------------------------


class TestMarkdown:
    def test_header(self) -> None:
        md = render_design_system(_design_system())
        lines = md.splitlines()
        assert lines[0] == "# Design System — Demo Design System"
        assert lines[2] == "> Extracted from Figma on 2024-05-17"
        assert lines[3] == "> Source: https://www.figma.com/design/AbC123xyz/Demo"

    def test_published_colour_row(self) -> None:
        md = render_design_system(_design_system())
        assert "| Primary | `#6750a4` | 90% |" in md

    def test_raw_colours_by_usage(self) -> None:
        md = render_design_system(_design_system())
        assert md.index("| `#ffffff` | 4 |") < md.index("| `#6750a4` | 2 |")

    def test_text_style_row(self) -> None:
        md = render_design_system(_design_system())
        assert "| Body/Medium | Roboto | 14px | 500 | 20px | 0.1px |" in md

    def test_component_inventory_and_details(self) -> None:
        md = render_design_system(_design_system())
        assert "| Button | Actions | Primary action | 2 variants |" in md
        assert "| Card | Display | — | — |" in md
        assert "#### Button" in md
        assert "![Button](components/button.png)" in md
        assert "**Variants** (2):" in md
        assert "#### Card" not in md

    def test_long_description_truncated(self) -> None:
        long = "x" * 80
        ds = _design_system(components=[ExtractedComponent(name="A", node_id="1", description=long)])
        assert f"| A | — | {'x' * 60}... | — |" in render_design_system(ds)

    def test_empty_sections_omitted(self) -> None:
        md = render_design_system(_design_system())
        assert "## Shadows & Effects" not in md
        assert "## Themes" not in md
        assert "## Grid System" not in md
        assert "## Brand Theme" not in md

    def test_theme_variables_table(self) -> None:
        themes = ThemeData(
            collections=[
                ThemeCollection(
                    name="Colors",
                    modes=["Light", "Dark"],
                    variables=[
                        ThemeVariable(
                            name="surface",
                            type="COLOR",
                            values_by_mode={"Light": "#ffffff", "Dark": "#000000 (50%)"},
                        ),
                        ThemeVariable(name="gap", type="FLOAT", values_by_mode={"Light": 8.0}),
                    ],
                )
            ]
        )
        md = render_design_system(_design_system(themes=themes))
        assert "## Themes" in md
        assert "Modes: Light, Dark" in md
        assert "| surface | `#ffffff` | `#000000 (50%)` |" in md
        assert "| gap | FLOAT | 8 | — |" in md

    def test_grid_and_effect_sections(self) -> None:
        styles = PublishedStyles(
            grid_styles=[
                PublishedGridStyle(
                    name="12 col",
                    grids=[{"pattern": "COLUMNS", "count": 12, "gutterSize": 16}],
                    style_id="6:1",
                )
            ]
        )
        ds = _design_system(published_styles=styles, raw_tokens=RawTokens(effects=[SHADOW]))
        md = render_design_system(ds)
        assert "## Grid System" in md
        assert "| 12 col | COLUMNS | count:12, gutter:16px, offset:0px, alignment:— |" in md
        assert "### All Effects Found" in md

    def test_brand_theme_table(self) -> None:
        theme = derive_theme(["#000000", "#6750a4", "#ffffff"])
        md = render_design_system(_design_system(theme=theme))
        assert "## Brand Theme" in md
        assert f"| Accent | `{theme.accent}` | `{theme.accent_light}` |" in md
        assert f"| Background | `{theme.background}` | `#ffffff` |" in md


class TestFormatters:
    def test_shadow(self) -> None:
        assert format_effect(SHADOW) == "x:0 y:2 blur:4 spread:0 color:#000000/25%"

    def test_blur(self) -> None:
        assert format_effect({"type": "LAYER_BLUR", "radius": 8}) == "radius:8"

    def test_unknown_effect_as_json(self) -> None:
        assert format_effect({"type": "NOISE"}) == '{"type":"NOISE"}'

    def test_square_grid(self) -> None:
        assert format_grid({"pattern": "GRID", "sectionSize": 8}) == "size:8px"


# ---------------------------------------------------------------------------
# Reading an existing extraction
# ---------------------------------------------------------------------------


class TestLoadThemeColors:
    def test_published_colours_win(self, write_json: Callable[[str, Any], Path]) -> None:
        path = write_json(
            TOKENS_FILENAME,
            {
                "colors": {"#000000": 1},
                "publishedStyles": {
                    "colors": [{"name": "Primary", "hex": "#6750a4", "styleId": "3:1"}]
                },
            },
        )
        assert load_theme_colors(path) == ["#6750a4"]

    def test_raw_palette_fallback(self, write_json: Callable[[str, Any], Path]) -> None:
        path = write_json(TOKENS_FILENAME, {"colors": {"#000000": 3, "#ffffff": 1}})
        assert load_theme_colors(path) == ["#000000", "#ffffff"]

    def test_written_output_can_be_reloaded(self, tmp_path: Path) -> None:
        files = write_outputs(_design_system(), None, tmp_path)
        assert load_theme_colors(files.tokens) == ["#6750a4"]

    def test_invalid_json_raises_value_error(self, tmp_path: Path) -> None:
        path = tmp_path / TOKENS_FILENAME
        path.write_text("{not json")
        with pytest.raises(ValueError):
            load_theme_colors(path)
