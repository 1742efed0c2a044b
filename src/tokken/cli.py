"""
tokken command-line interface.

Commands:

- ``tokken extract [URL]``: extract tokens, components and assets from a file
- ``tokken theme TOKENS_JSON``: derive the brand theme from an existing extraction
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from tokken._version import get_version
from tokken.config import build_config, load_env, load_project_config
from tokken.core.errors import TokkenError
from tokken.core.theme import derive_theme
from tokken.extract.orchestrator import ExtractionOrchestrator
from tokken.output.writer import build_manifest, load_theme_colors, write_outputs

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

app = typer.Typer(
    help="tokken: design tokens, components and a brand theme from a Figma file",
    no_args_is_help=True,
)

console = Console()


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        force=True,
    )


def _fail(error: TokkenError) -> None:
    console.print(f"Error: {error.message}", style="red", markup=False, highlight=False)
    if error.hint:
        console.print(error.hint, style="red", markup=False, highlight=False)
    raise typer.Exit(1)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"tokken version {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """tokken CLI main callback for global options."""


@app.command()
def extract(
    url: Annotated[
        str | None,
        typer.Argument(help="Figma file URL (defaults to figmaUrl in tokken.config.json)"),
    ] = None,
    token: Annotated[
        str | None,
        typer.Option("--token", "-t", help="Figma access token (FIGMA_ACCESS_TOKEN wins)"),
    ] = None,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Output directory (default: .tokken)")
    ] = None,
    brand_color: Annotated[
        str | None, typer.Option("--brand-color", help="Brand colour overriding the auto accent")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", help="Debug logging")] = False,
) -> None:
    """Extract design tokens, components and assets from a Figma file."""
    configure_logging(verbose)
    load_env()
    try:
        config = build_config(
            url=url,
            token=token,
            output_dir=output,
            brand_color=brand_color,
            project_config=load_project_config(),
        )
        output_dir = config.output_dir.resolve()
        config = config.model_copy(update={"output_dir": output_dir})

        typer.echo(f"Figma URL: {config.figma_url}")
        typer.echo(f"File Key:  {config.file_key}")
        typer.echo(f"Output:    {output_dir}\n")

        design_system = asyncio.run(ExtractionOrchestrator(config).run())
        manifest = build_manifest(design_system)
        write_outputs(design_system, manifest, output_dir)
    except TokkenError as e:
        _fail(e)
        return

    counts = manifest.counts
    table = Table(title="Summary", show_header=False)
    table.add_column("Item")
    table.add_column("Count", justify="right")
    table.add_row("Frames", str(len(manifest.frames)))
    table.add_row("Color styles", str(counts.published_color_styles))
    table.add_row("Text styles", str(counts.published_text_styles))
    table.add_row("Effect styles", str(counts.published_effect_styles))
    table.add_row("Components", str(counts.published_components))
    table.add_row("Component images", str(counts.component_images))
    table.add_row("Icon SVGs", str(counts.icon_svgs))
    console.print(table)
    typer.echo(f"\nAll files saved to: {output_dir}")


@app.command()
def theme(
    tokens_json: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, help="design-tokens.json from an extraction"),
    ],
    brand_color: Annotated[
        str | None, typer.Option("--brand-color", help="Brand colour overriding the auto accent")
    ] = None,
) -> None:
    """Derive the light/dark brand theme from an existing extraction."""
    try:
        colors = load_theme_colors(tokens_json)
    except (OSError, ValueError) as e:
        _fail(TokkenError(f"Could not read {tokens_json}: {e}"))
        return
    palette = derive_theme(colors, seed=brand_color)
    typer.echo(json.dumps(palette.model_dump(mode="json", by_alias=True), indent=2))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
