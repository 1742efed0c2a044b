"""
Image export for components, icons and top-level frames.

Exports are requested in fixed-size batches and each batch's downloads run
concurrently. Asset export is best-effort: a missing URL or failed download
drops that one asset, and a failed batch request drops that batch. Neither
stops the run.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from tokken.core.errors import FigmaAPIError
from tokken.core.models import ExtractedComponent, FrameExport

from .walker import DesignNode, children_of

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50
DEFAULT_MAX_FRAMES = 20
FRAME_MAX_DEPTH = 2

COMPONENTS_DIR = "components"
ICONS_DIR = "icons"

_SLUG_RE = re.compile(r"[^a-zA-Z0-9]")


class ImageSource(Protocol):
    """The part of :class:`~tokken.figma.client.FigmaClient` used for export."""

    async def export_images(
        self, node_ids: list[str], format: str = "png", scale: float | None = 2
    ) -> dict[str, str | None]: ...

    async def download(self, url: str) -> bytes: ...


def slugify(name: str) -> str:
    """File-safe name: every non-alphanumeric character becomes ``-``, lowercased."""
    return _SLUG_RE.sub("-", name).lower()


@dataclass(frozen=True)
class _Target:
    key: str
    node_id: str
    relative_path: str


class AssetExporter:
    """Exports rendered assets into ``output_dir``.

    Args:
        client: API client providing ``export_images`` and ``download``.
        output_dir: Root directory; components and icons go in subdirectories.
        batch_size: Node ids per export request.
    """

    def __init__(
        self,
        client: ImageSource,
        output_dir: Path,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.client = client
        self.output_dir = Path(output_dir)
        self.batch_size = batch_size

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    async def export_component_images(
        self, components: Sequence[ExtractedComponent]
    ) -> dict[str, str]:
        """PNG (2x) preview of every non-icon component: ``{name: relative path}``."""
        targets = [
            _Target(c.name, c.node_id, f"{COMPONENTS_DIR}/{slugify(c.name)}.png")
            for c in components
            if not c.is_icon
        ]
        exported = await self._export(targets, format="png", scale=2, label="component images")
        logger.info("Exported %d component PNGs", len(exported))
        return exported

    async def export_icon_svgs(self, components: Sequence[ExtractedComponent]) -> dict[str, str]:
        """SVG of every icon-like component: ``{name: relative path}``."""
        targets = [
            _Target(c.name, c.node_id, f"{ICONS_DIR}/{slugify(c.name)}.svg")
            for c in components
            if c.is_icon
        ]
        exported = await self._export(targets, format="svg", scale=None, label="icon SVGs")
        logger.info("Exported %d icon SVGs", len(exported))
        return exported

    @staticmethod
    def find_frames(document: DesignNode) -> list[dict[str, Any]]:
        """FRAME nodes within two levels of the document root, in document order."""
        frames: list[dict[str, Any]] = []
        stack: list[tuple[DesignNode, int]] = [(document, 0)]
        while stack:
            node, depth = stack.pop()
            if node.get("type") == "FRAME" and depth <= FRAME_MAX_DEPTH:
                frames.append({"id": node.get("id"), "name": node.get("name", "")})
            if depth < FRAME_MAX_DEPTH:
                stack.extend((child, depth + 1) for child in reversed(children_of(node)))
        return frames

    async def export_frame_screenshots(
        self, frames: Sequence[dict[str, Any]], max_frames: int = DEFAULT_MAX_FRAMES
    ) -> list[FrameExport]:
        """PNG (2x) screenshots of the first ``max_frames`` frames as ``NN-<slug>.png``."""
        selected = list(frames)[:max_frames]
        targets = [
            _Target(frame["id"], frame["id"], f"{index:02d}-{slugify(frame['name'])}.png")
            for index, frame in enumerate(selected, start=1)
        ]
        exported = await self._export(targets, format="png", scale=2, label="frame screenshots")
        results = [
            FrameExport(id=frame["id"], name=frame["name"], filename=exported[frame["id"]])
            for frame in selected
            if frame["id"] in exported
        ]
        logger.info("Downloaded %d of %d frame screenshots", len(results), len(selected))
        return results

    # -------------------------------------------------------------------------
    # Batching
    # -------------------------------------------------------------------------

    async def _export(
        self, targets: list[_Target], format: str, scale: float | None, label: str
    ) -> dict[str, str]:
        exported: dict[str, str] = {}
        if not targets:
            return exported

        for start in range(0, len(targets), self.batch_size):
            batch = targets[start : start + self.batch_size]
            batch_number = start // self.batch_size + 1
            try:
                urls = await self.client.export_images(
                    [t.node_id for t in batch], format=format, scale=scale
                )
            except FigmaAPIError as e:
                logger.warning("Failed to export batch %d of %s: %s", batch_number, label, e)
                continue

            results = await asyncio.gather(*(self._download(t, urls.get(t.node_id)) for t in batch))
            for target, saved in zip(batch, results, strict=True):
                if saved:
                    exported[target.key] = target.relative_path

        return exported

    async def _download(self, target: _Target, url: str | None) -> bool:
        if not url:
            logger.warning("No image URL for %s (%s)", target.key, target.node_id)
            return False
        try:
            content = await self.client.download(url)
            path = self.output_dir / target.relative_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except (FigmaAPIError, OSError) as e:
            logger.warning("Failed to download %s: %s", target.key, e)
            return False
        logger.debug("Saved %s", target.relative_path)
        return True
