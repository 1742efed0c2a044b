"""
Serialization of an extraction to disk.

Writes three files into the output directory:

- ``design-tokens.json``: the full model, camelCase keys
- ``manifest.json``: file identity, frame screenshots and per-category counts
- ``DESIGN_SYSTEM.md``: the human-readable summary
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from tokken.core.models import (
    DesignSystem,
    Manifest,
    ManifestCounts,
    PublishedStyles,
    RawTokens,
)
from tokken.core.theme import theme_source_colors

from .markdown import render_design_system

logger = logging.getLogger(__name__)

TOKENS_FILENAME = "design-tokens.json"
MANIFEST_FILENAME = "manifest.json"
MARKDOWN_FILENAME = "DESIGN_SYSTEM.md"


@dataclass
class WrittenFiles:
    tokens: Path
    manifest: Path
    markdown: Path


def _dump(model: Any) -> Any:
    return model.model_dump(mode="json", by_alias=True)


def design_tokens_document(ds: DesignSystem) -> dict[str, Any]:
    """The ``design-tokens.json`` payload.

    Raw tokens sit at the top level; each component additionally carries its
    variant count and exported image path (or ``null``).
    """
    components = []
    for comp in ds.components:
        entry = _dump(comp)
        entry["variantCount"] = len(comp.variants)
        entry["image"] = ds.component_images.get(comp.name)
        components.append(entry)

    raw = _dump(ds.raw_tokens)
    return {
        "fileKey": ds.file_key,
        "fileName": ds.file_name,
        "colors": raw["colors"],
        "typography": raw["typography"],
        "effects": raw["effects"],
        "publishedStyles": _dump(ds.published_styles),
        "components": components,
        "themes": _dump(ds.themes) if ds.themes is not None else None,
        "componentImages": ds.component_images,
        "iconSvgs": ds.icon_svgs,
        "pageOrder": ds.page_order,
        "theme": _dump(ds.theme) if ds.theme is not None else None,
    }


def build_manifest(ds: DesignSystem) -> Manifest:
    published = ds.published_styles
    return Manifest(
        file_key=ds.file_key,
        file_name=ds.file_name,
        figma_url=ds.figma_url,
        extracted_at=ds.extracted_at,
        frames=ds.frames,
        counts=ManifestCounts(
            published_color_styles=len(published.colors),
            published_text_styles=len(published.text_styles),
            published_effect_styles=len(published.effect_styles),
            published_grid_styles=len(published.grid_styles),
            published_components=len(ds.components),
            raw_colors=len(ds.raw_tokens.colors),
            raw_typography=len(ds.raw_tokens.typography),
            raw_effects=len(ds.raw_tokens.effects),
            theme_collections=len(ds.themes.collections) if ds.themes else 0,
            component_images=len(ds.component_images),
            icon_svgs=len(ds.icon_svgs),
        ),
    )


def write_outputs(
    design_system: DesignSystem, manifest: Manifest | None, output_dir: Path | str
) -> WrittenFiles:
    """Write all output files, creating ``output_dir`` if needed.

    A ``None`` manifest is built from ``design_system``.
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    if manifest is None:
        manifest = build_manifest(design_system)

    files = WrittenFiles(
        tokens=out / TOKENS_FILENAME,
        manifest=out / MANIFEST_FILENAME,
        markdown=out / MARKDOWN_FILENAME,
    )
    files.tokens.write_text(
        json.dumps(design_tokens_document(design_system), indent=2), encoding="utf-8"
    )
    files.manifest.write_text(json.dumps(_dump(manifest), indent=2), encoding="utf-8")
    files.markdown.write_text(render_design_system(design_system), encoding="utf-8")

    for path in (files.tokens, files.manifest, files.markdown):
        logger.info("Saved %s", path)
    return files


def load_theme_colors(tokens_path: Path | str) -> list[str]:
    """Theme source colours from an existing ``design-tokens.json``.

    Published colour styles win over the raw palette, as during extraction.
    """
    data = json.loads(Path(tokens_path).read_text(encoding="utf-8"))
    published = PublishedStyles.model_validate(data.get("publishedStyles") or {})
    raw = RawTokens(colors=data.get("colors") or {})
    return theme_source_colors(published, raw)
