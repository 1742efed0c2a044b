"""
Extraction configuration.

Settings come from three places, highest priority first:

1. The ``FIGMA_ACCESS_TOKEN`` environment variable (a ``.env`` file in the
   working directory is loaded into the environment first).
2. Command-line options.
3. ``tokken.config.json`` in the working directory (``figmaUrl``,
   ``brandColor``, ``outputDir``).
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from .core.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "tokken.config.json"
TOKEN_ENV_VAR = "FIGMA_ACCESS_TOKEN"
DEFAULT_OUTPUT_DIR = ".tokken"

_FILE_KEY_RE = re.compile(r"/(file|design)/([a-zA-Z0-9_-]+)")


class ExtractionConfig(BaseModel):
    """Everything one extraction run needs."""

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(repr=False)
    file_key: str
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    figma_url: str | None = None
    brand_color: str | None = None
    batch_size: int = Field(default=50, ge=1)
    max_frames: int = Field(default=20, ge=0)
    base_delay: float = Field(default=1.0, ge=0)
    timeout: float = Field(default=60.0, gt=0)

    @property
    def resolved_figma_url(self) -> str:
        return self.figma_url or f"https://www.figma.com/file/{self.file_key}"


def extract_file_key(url: str) -> str:
    """
    Pull the file key out of a Figma file or design URL.

    Raises:
        ConfigError: If the URL has no ``/file/KEY`` or ``/design/KEY`` segment.
    """
    match = _FILE_KEY_RE.search(url)
    if not match:
        raise ConfigError(
            f"Invalid Figma URL: {url}",
            hint=(
                "Expected https://www.figma.com/file/FILE_KEY/... "
                "or https://www.figma.com/design/FILE_KEY/..."
            ),
        )
    return match.group(2)


def load_project_config(path: Path | str = CONFIG_FILENAME) -> dict[str, Any]:
    """Read ``tokken.config.json``; an absent file means no project settings."""
    config_path = Path(path)
    if not config_path.exists():
        return {}
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not read {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a JSON object")
    return data


def load_env(dotenv_path: Path | str | None = None) -> None:
    """Load ``.env`` into the process environment without overriding it.

    Without an explicit path the file is searched for from the working
    directory upwards.
    """
    load_dotenv(dotenv_path=dotenv_path or find_dotenv(usecwd=True), override=False)


def resolve_token(cli_token: str | None) -> str | None:
    """Environment variable wins over ``--token``."""
    return os.environ.get(TOKEN_ENV_VAR) or cli_token or None


def build_config(
    url: str | None = None,
    token: str | None = None,
    output_dir: Path | str | None = None,
    brand_color: str | None = None,
    project_config: dict[str, Any] | None = None,
) -> ExtractionConfig:
    """
    Merge command-line values with the project config file.

    Raises:
        ConfigError: No URL, no token, or a malformed URL.
    """
    project = project_config if project_config is not None else load_project_config()

    figma_url = url or project.get("figmaUrl")
    if not figma_url:
        raise ConfigError(
            "No Figma URL provided",
            hint=f"Pass a URL to `tokken extract` or set figmaUrl in {CONFIG_FILENAME}",
        )

    access_token = resolve_token(token)
    if not access_token:
        raise ConfigError(
            "No Figma access token found",
            hint=f"Set {TOKEN_ENV_VAR} (environment or .env) or pass --token",
        )

    return ExtractionConfig(
        access_token=access_token,
        file_key=extract_file_key(figma_url),
        output_dir=Path(output_dir or project.get("outputDir") or DEFAULT_OUTPUT_DIR),
        figma_url=figma_url,
        brand_color=brand_color or project.get("brandColor"),
    )
