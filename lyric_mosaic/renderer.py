"""Grid traversal that paints a text mosaic onto a surface."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

from lyric_mosaic.config import RenderSettings, clamp
from lyric_mosaic.glyphs import GlyphSequencer
from lyric_mosaic.intensity import style_glyph
from lyric_mosaic.sampling import RasterImage, sample_pixel
from lyric_mosaic.surface import Surface

logger = logging.getLogger(__name__)

BACKGROUND = (250, 250, 250)  # #FAFAFA
LINE_HEIGHT = 1.4
MIN_DETAIL, MAX_DETAIL = 0.5, 1.0


@dataclass(frozen=True)
class MosaicCell:
    x: float
    y: float
    rgb: tuple[float, float, float]
    intensity: float
    char: str
    size: float
    weight: int
    color: tuple[int, int, int]
    alpha: float


def surface_size(
    base_width: int,
    image_width: int,
    image_height: int,
    scale: float = 1.0,
) -> tuple[int, int]:
    """Pixel (w, h) of a surface showing the image *base_width* wide at *scale*.

    The height is floored at scale 1 before scaling, so integer scales give
    dimensions that are exact multiples of the scale-1 surface.
    """
    aspect = image_width / image_height
    width = math.floor(base_width * scale)
    height = math.floor(math.floor(base_width / aspect) * scale)
    return width, height


def grid_steps(
    settings: RenderSettings,
    scale: float,
    detail_factor: float = 1.0,
) -> tuple[float, float]:
    """Horizontal and vertical cell pitch in surface pixels."""
    if settings.font_size <= 0 or scale <= 0:
        raise ValueError(
            f"font_size and scale must be positive, got {settings.font_size} and {scale}"
        )
    detail = clamp(detail_factor, MIN_DETAIL, MAX_DETAIL)
    step_x = settings.font_size * scale * settings.spacing * detail
    if step_x <= 0:
        raise ValueError(f"Grid step must be positive, got {step_x}")
    return step_x, step_x * LINE_HEIGHT


def _cells(
    pixels: np.ndarray,
    glyphs: GlyphSequencer,
    settings: RenderSettings,
    scale: float,
    detail_factor: float,
) -> Iterator[MosaicCell]:
    height, width = pixels.shape[:2]
    step_x, step_y = grid_steps(settings, scale, detail_factor)

    index = 0
    y = 0.0
    while y < height:
        x = 0.0
        while x < width:
            rgb = sample_pixel(pixels, x, y)
            intensity, style = style_glyph(
                rgb, settings.contrast, settings.font_size, scale, settings.monochrome,
            )
            yield MosaicCell(
                x=x,
                y=y,
                rgb=rgb,
                intensity=intensity,
                char=glyphs.at(index),
                size=style.size,
                weight=style.weight,
                color=style.color,
                alpha=style.alpha,
            )
            index += 1
            x += step_x
        y += step_y


def iter_cells(
    image: RasterImage,
    text: str,
    settings: RenderSettings,
    scale: float,
    detail_factor: float,
    width: int,
    height: int,
) -> Iterator[MosaicCell]:
    """Yield every cell of a *width* x *height* mosaic in row-major order.

    The image is resampled to the surface size first; glyphs are taken from
    one shared index that never restarts per row.
    """
    if image is None or image.is_empty or width <= 0 or height <= 0:
        return iter(())
    return _cells(image.resized(width, height), GlyphSequencer(text), settings, scale, detail_factor)


def render_mosaic(
    surface: Surface | None,
    image: RasterImage | None,
    text: str,
    settings: RenderSettings,
    scale: float = 1.0,
    detail_factor: float = 1.0,
) -> bool:
    """Paint the mosaic of *image* and *text* onto *surface*.

    Without an image, a surface, or with a zero-sized one, nothing is drawn
    and False is returned. Otherwise the surface is fully overwritten and
    True signals that the render completed.
    """
    if surface is None or image is None or image.is_empty:
        return False
    width, height = surface.width, surface.height
    if width <= 0 or height <= 0:
        return False
    grid_steps(settings, scale, detail_factor)

    surface.clear()
    surface.fill_rect(0, 0, width, height, BACKGROUND)
    if settings.underlay > 0:
        surface.draw_image(image, settings.underlay)

    count = 0
    for cell in iter_cells(image, text, settings, scale, detail_factor, width, height):
        surface.draw_glyph(
            cell.char, cell.x, cell.y, cell.size, cell.weight, cell.color, cell.alpha,
        )
        count += 1

    logger.debug(
        "Rendered %d cells on %dx%d surface (scale=%s, detail=%s)",
        count, width, height, scale, detail_factor,
    )
    return True
