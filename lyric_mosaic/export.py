"""Preview and high-resolution export renders of the same mosaic."""

from __future__ import annotations

import logging
import time
from pathlib import Path

from lyric_mosaic.config import RenderSettings, StudioConfig
from lyric_mosaic.renderer import render_mosaic, surface_size
from lyric_mosaic.sampling import RasterImage
from lyric_mosaic.surface import PillowSurface

logger = logging.getLogger(__name__)


def _render_at(
    image: RasterImage | None,
    text: str,
    settings: RenderSettings,
    config: StudioConfig,
    scale: float,
    detail_factor: float,
) -> PillowSurface | None:
    if image is None or image.is_empty:
        return None
    width, height = surface_size(config.preview_width, image.width, image.height, scale)
    surface = PillowSurface(width, height, font_path=config.font_path)

    t0 = time.perf_counter()
    render_mosaic(surface, image, text, settings, scale=scale, detail_factor=detail_factor)
    logger.info(
        "Rendered %dx%d mosaic at %sx (detail %.2f)  (%.2f s)",
        width, height, scale, detail_factor, time.perf_counter() - t0,
    )
    return surface


def render_preview(
    image: RasterImage | None,
    text: str,
    settings: RenderSettings,
    config: StudioConfig | None = None,
    pixel_ratio: float = 1.0,
) -> PillowSurface | None:
    """Coarser, cheaper render for interactive display.

    Returns:
        The painted surface, or None when there is no image to render.
    """
    config = config or StudioConfig()
    return _render_at(
        image, text, settings, config,
        scale=config.preview_scale(pixel_ratio),
        detail_factor=config.preview_detail,
    )


def export_mosaic(
    image: RasterImage | None,
    text: str,
    settings: RenderSettings,
    config: StudioConfig | None = None,
) -> PillowSurface | None:
    """Render the full-density mosaic on a fresh surface at the export scale.

    The surface is export_scale times the scale-1 preview surface and is not
    retained after it is returned.
    """
    config = config or StudioConfig()
    return _render_at(
        image, text, settings, config,
        scale=config.export_scale,
        detail_factor=config.export_detail,
    )


def save_export(
    image: RasterImage | None,
    text: str,
    settings: RenderSettings,
    path: str | Path,
    config: StudioConfig | None = None,
) -> Path | None:
    """Export the mosaic and write it as PNG. Returns the path, or None if nothing was rendered."""
    surface = export_mosaic(image, text, settings, config)
    if surface is None:
        return None
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    surface.save(path, format="PNG")
    return path
