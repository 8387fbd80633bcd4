"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from lyric_mosaic.config import (
    CONTRAST_RANGE,
    FONT_SIZE_RANGE,
    SPACING_RANGE,
    UNDERLAY_RANGE,
    RenderSettings,
    StudioConfig,
)
from lyric_mosaic.export import render_preview, save_export
from lyric_mosaic.image_io import collect_images, load_raster

app = typer.Typer(
    name="lyric-mosaic",
    help="Compose photographs out of the words of a text.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=True)],
    )


def _read_text(text: str | None, text_file: Path | None, default: str) -> str:
    if text_file is not None:
        return text_file.read_text(encoding="utf-8")
    return default if text is None else text


# Defaults come from the config dataclasses - single source of truth
_DEFAULTS = RenderSettings()
_STUDIO = StudioConfig()

_TEXT = typer.Option(None, "--text", "-t", help="Text to draw (default: built-in lyric)")
_TEXT_FILE = typer.Option(
    None, "--text-file", "-f", exists=True, dir_okay=False, help="Read the text from a UTF-8 file",
)
_FONT_SIZE = typer.Option(
    _DEFAULTS.font_size, "--font-size", "-s",
    min=FONT_SIZE_RANGE[0], max=FONT_SIZE_RANGE[1], clamp=True, help="Base glyph size (px)",
)
_SPACING = typer.Option(
    _DEFAULTS.spacing, "--spacing",
    min=SPACING_RANGE[0], max=SPACING_RANGE[1], clamp=True, help="Grid spacing multiplier",
)
_CONTRAST = typer.Option(
    _DEFAULTS.contrast, "--contrast", "-c",
    min=CONTRAST_RANGE[0], max=CONTRAST_RANGE[1], clamp=True, help="Image contrast gain",
)
_UNDERLAY = typer.Option(
    _DEFAULTS.underlay, "--underlay",
    min=UNDERLAY_RANGE[0], max=UNDERLAY_RANGE[1], clamp=True, help="Opacity of the photo beneath the text",
)
_MONOCHROME = typer.Option(
    _DEFAULTS.monochrome, "--monochrome/--color", help="Dark ink instead of sampled colours",
)
_WIDTH = typer.Option(
    _STUDIO.preview_width, "--width", "-w",
    min=_STUDIO.min_preview_width, max=_STUDIO.max_preview_width, clamp=True,
    help="Base (preview) width in px; the export is 4x this",
)
_PREVIEW = typer.Option(False, "--preview/--no-preview", help="Also save the preview render")
_FONT = typer.Option(None, "--font", help="TrueType/OpenType font file (variable fonts get weights)")
_VERBOSE = typer.Option(False, "--verbose", "-v", help="Debug logging")


def _settings(font_size, spacing, contrast, monochrome, underlay) -> RenderSettings:
    return RenderSettings.clamped(
        font_size=font_size,
        spacing=spacing,
        contrast=contrast,
        monochrome=monochrome,
        underlay=underlay,
    )


def _render_one(
    img_path: Path,
    out_path: Path,
    text: str,
    settings: RenderSettings,
    config: StudioConfig,
    preview: bool,
) -> Path | None:
    image = load_raster(img_path, config.SUPPORTED_EXTENSIONS)
    saved = save_export(image, text, settings, out_path, config)
    if preview and saved is not None:
        surface = render_preview(image, text, settings, config)
        if surface is not None:
            surface.save(out_path.with_name(f"{out_path.stem}_preview.png"), format="PNG")
    return saved


# -- render command ----------------------------------------------------

@app.command()
def render(
    image: Path = typer.Argument(..., help="Path to the source photograph"),
    output: Path = typer.Option(
        _STUDIO.output_dir / _STUDIO.output_name, "--output", "-o", help="PNG to write",
    ),
    text: str | None = _TEXT,
    text_file: Path | None = _TEXT_FILE,
    font_size: float = _FONT_SIZE,
    spacing: float = _SPACING,
    contrast: float = _CONTRAST,
    underlay: float = _UNDERLAY,
    monochrome: bool = _MONOCHROME,
    width: int = _WIDTH,
    preview: bool = _PREVIEW,
    font: Path | None = _FONT,
    verbose: bool = _VERBOSE,
) -> None:
    """Render a single image as a high-resolution text mosaic."""
    _setup_logging(verbose)

    if not image.exists():
        console.print(f"[red]File not found:[/red] {image}")
        raise typer.Exit(1)

    config = StudioConfig(preview_width=width, font_path=str(font) if font else None)
    settings = _settings(font_size, spacing, contrast, monochrome, underlay)
    body = _read_text(text, text_file, config.default_text)

    t0 = time.perf_counter()
    try:
        saved = _render_one(image, output, body, settings, config, preview)
    except (OSError, ValueError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc

    if saved is None:
        console.print(f"[yellow]Nothing rendered:[/yellow] {image} has no pixels")
        raise typer.Exit(1)
    console.print(
        f"[green]✓[/green] Saved to {saved}  "
        f"[dim]time={time.perf_counter() - t0:.1f}s[/dim]"
    )


# -- batch command -----------------------------------------------------

@app.command()
def batch(
    input_dir: Path = typer.Option(
        _STUDIO.input_dir, "--input", "-i", help="Folder with source images",
    ),
    output_dir: Path = typer.Option(
        _STUDIO.output_dir, "--output", "-o", help="Results folder",
    ),
    text: str | None = _TEXT,
    text_file: Path | None = _TEXT_FILE,
    font_size: float = _FONT_SIZE,
    spacing: float = _SPACING,
    contrast: float = _CONTRAST,
    underlay: float = _UNDERLAY,
    monochrome: bool = _MONOCHROME,
    width: int = _WIDTH,
    preview: bool = _PREVIEW,
    font: Path | None = _FONT,
    verbose: bool = _VERBOSE,
) -> None:
    """Render every image in INPUT_DIR and write results to OUTPUT_DIR."""
    _setup_logging(verbose)
    logger = logging.getLogger("lyric_mosaic")

    config = StudioConfig(
        preview_width=width,
        font_path=str(font) if font else None,
        input_dir=input_dir,
        output_dir=output_dir,
    )
    settings = _settings(font_size, spacing, contrast, monochrome, underlay)
    body = _read_text(text, text_file, config.default_text)

    input_dir.mkdir(exist_ok=True)
    output_dir.mkdir(exist_ok=True)

    images = collect_images(input_dir, config.SUPPORTED_EXTENSIONS)
    if not images:
        console.print(f"\n[yellow]No images found in {input_dir}/[/yellow]")
        console.print("Place .jpg / .png / ... files there and re-run.\n")
        raise typer.Exit(0)

    console.print(Panel.fit(
        f"[bold]LYRIC MOSAIC[/bold]\n"
        f"Font size: {settings.font_size:g}  |  Spacing: {settings.spacing:.2f}\n"
        f"Contrast: {settings.contrast:.2f}x  |  Underlay: {settings.underlay:.0%}\n"
        f"Monochrome: {settings.monochrome}  |  Images: {len(images)}",
        border_style="cyan",
    ))

    for idx, img_path in enumerate(images, 1):
        console.rule(f"[bold cyan][{idx}/{len(images)}] {img_path.name}[/bold cyan]")
        out_path = output_dir / f"{img_path.stem}_mosaic.png"
        t0 = time.perf_counter()
        try:
            saved = _render_one(img_path, out_path, body, settings, config, preview)
        except (OSError, ValueError) as exc:
            logger.warning("Skipping %s: %s", img_path.name, exc)
            continue
        if saved is None:
            logger.warning("Skipping %s: empty image", img_path.name)
            continue
        console.print(
            f"  [green]✓[/green] {saved.name}  "
            f"[dim]time={time.perf_counter() - t0:.1f}s[/dim]"
        )

    console.print(Panel.fit(
        f"[bold green]ALL DONE[/bold green] - results in [bold]{output_dir}/[/bold]",
        border_style="green",
    ))


if __name__ == "__main__":
    app()
