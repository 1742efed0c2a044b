"""
tokken: design tokens, components and a brand theme from a Figma file.

Typical use::

    from tokken import ExtractionOrchestrator, build_config, write_outputs

    config = build_config(url="https://www.figma.com/design/KEY/Name", token="figd_...")
    design_system = await ExtractionOrchestrator(config).run()
    write_outputs(design_system, None, config.output_dir)
"""

from tokken._version import get_version
from tokken.config import ExtractionConfig, build_config, extract_file_key
from tokken.core.errors import ConfigError, FigmaAPIError, TokkenError
from tokken.core.models import DesignSystem, ExtractedComponent, Manifest, ThemePalette
from tokken.core.theme import derive_theme
from tokken.extract.orchestrator import ExtractionOrchestrator
from tokken.output.writer import write_outputs

__version__ = get_version()

__all__ = [
    "__version__",
    # Configuration
    "ExtractionConfig",
    "build_config",
    "extract_file_key",
    # Errors
    "TokkenError",
    "ConfigError",
    "FigmaAPIError",
    # Models
    "DesignSystem",
    "ExtractedComponent",
    "Manifest",
    "ThemePalette",
    # Operations
    "ExtractionOrchestrator",
    "derive_theme",
    "write_outputs",
]
