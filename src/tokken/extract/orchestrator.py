"""
Extraction pipeline.

Fetches the file once, then runs each phase in order over that payload:

1. Published style resolution (may fetch missing style nodes)
2. Component extraction
3. Raw token traversal
4. Theme variables (skipped when the API is unavailable)
5. Frame screenshots, component images and icon SVGs
6. Brand theme derivation

Only a failed file/node/variables fetch aborts the run; asset export
degrades per asset or per batch.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from tokken.config import ExtractionConfig
from tokken.core.models import DesignSystem
from tokken.core.theme import derive_theme, theme_source_colors
from tokken.figma.client import FigmaClient
from tokken.figma.retry import RetryPolicy

from .assets import AssetExporter
from .components import extract_components
from .raw_tokens import extract_raw_tokens
from .styles import StyleResolver
from .variables import extract_themes
from .walker import DesignNode

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ExtractionOrchestrator:
    """Runs one extraction against one design file.

    Args:
        config: Run settings.
        client: API client; when omitted one is built from ``config`` and
            closed at the end of :meth:`run`.
        now: Clock for ``extracted_at``.
    """

    def __init__(
        self,
        config: ExtractionConfig,
        client: FigmaClient | None = None,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.config = config
        self._client = client
        self._now = now

    def _build_client(self) -> FigmaClient:
        return FigmaClient(
            self.config.access_token,
            self.config.file_key,
            timeout=self.config.timeout,
            retry_policy=RetryPolicy(base_delay=self.config.base_delay),
        )

    async def run(self) -> DesignSystem:
        if self._client is not None:
            return await self._extract(self._client)
        async with self._build_client() as client:
            return await self._extract(client)

    async def _extract(self, client: FigmaClient) -> DesignSystem:
        config = self.config
        logger.info("Starting extraction of %s", config.file_key)

        file_data = await client.get_file()
        document: DesignNode = file_data.get("document") or {}
        file_name = file_data.get("name") or document.get("name") or config.file_key
        logger.info("File: %s", file_name)

        published = await StyleResolver(client.get_nodes).resolve(
            document, file_data.get("styles") or {}
        )
        extraction = extract_components(file_data)
        raw_tokens = extract_raw_tokens(document)

        themes = None
        variables = await client.get_variables()
        if variables is not None:
            themes = extract_themes(variables)
            if not themes.collections:
                logger.info("No variable collections found")
                themes = None

        exporter = AssetExporter(client, config.output_dir, batch_size=config.batch_size)
        frames = exporter.find_frames(document)
        logger.info("Found %d top-level frames", len(frames))
        frame_exports = await exporter.export_frame_screenshots(frames, config.max_frames)
        component_images = await exporter.export_component_images(extraction.components)
        icon_svgs = await exporter.export_icon_svgs(extraction.components)

        theme = derive_theme(
            theme_source_colors(published, raw_tokens), seed=config.brand_color
        )

        logger.info("Extraction of %s complete", config.file_key)
        return DesignSystem(
            file_key=config.file_key,
            file_name=file_name,
            figma_url=config.resolved_figma_url,
            extracted_at=self._now().isoformat(),
            published_styles=published,
            raw_tokens=raw_tokens,
            components=extraction.components,
            page_order=extraction.page_order,
            themes=themes,
            component_images=component_images,
            icon_svgs=icon_svgs,
            frames=frame_exports,
            theme=theme,
        )
