"""Luminance → ink intensity → glyph styling."""

from __future__ import annotations

import math
from dataclasses import dataclass

from lyric_mosaic.config import clamp

# ITU-R BT.709 luma weights
LUMA_WEIGHTS = (0.2126, 0.7152, 0.0722)
GAMMA = 0.65
MONOCHROME_INK = (26, 26, 26)


@dataclass(frozen=True)
class GlyphStyle:
    weight: int
    size: float
    alpha: float
    color: tuple[int, int, int]


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def luminance(r: float, g: float, b: float) -> float:
    wr, wg, wb = LUMA_WEIGHTS
    return wr * r + wg * g + wb * b


def apply_contrast(lum: float, contrast: float) -> float:
    """Stretch luminance around mid-grey, clamped to [0, 255]."""
    return clamp((lum - 128) * contrast + 128, 0, 255)


def ink_intensity(contrasted: float) -> float:
    """Map contrasted luminance to [0, 1]; darker input → more ink.

    The 0.65 exponent lifts mid-tones so mid-grey areas still carry weight.
    """
    return (1 - clamp(contrasted, 0, 255) / 255) ** GAMMA


def style_glyph(
    rgb: tuple[float, float, float],
    contrast: float,
    font_size: float,
    scale: float,
    monochrome: bool = False,
) -> tuple[float, GlyphStyle]:
    """Derive the styling of one glyph from its sampled colour.

    Returns:
        (intensity, style). Monochrome only replaces the colour; weight,
        size and alpha are the same in both modes.
    """
    intensity = ink_intensity(apply_contrast(luminance(*rgb), contrast))
    if monochrome:
        color = MONOCHROME_INK
    else:
        color = tuple(round_half_up(c) for c in rgb)
    style = GlyphStyle(
        weight=round_half_up(300 + intensity * 600),
        size=font_size * scale * (0.85 + intensity * 0.8),
        alpha=0.45 + intensity * 0.55,
        color=color,
    )
    return intensity, style
