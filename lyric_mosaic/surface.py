"""Drawing surfaces the renderer paints into, and glyph font loading."""

from __future__ import annotations

import functools
import logging
from typing import Protocol

from PIL import Image, ImageDraw, ImageFont

from lyric_mosaic.config import clamp
from lyric_mosaic.intensity import round_half_up
from lyric_mosaic.sampling import RasterImage

logger = logging.getLogger(__name__)

Color = tuple[int, int, int]

_missing_fonts: set[str] = set()


class Surface(Protocol):
    width: int
    height: int

    def clear(self) -> None:
        """Reset every pixel, discarding the previous render."""
        ...

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None: ...

    def draw_glyph(
        self,
        char: str,
        x: float,
        y: float,
        size: float,
        weight: int,
        color: Color,
        alpha: float,
    ) -> None:
        """Draw one character with its top-left corner at (x, y)."""
        ...

    def draw_image(self, image: RasterImage, alpha: float) -> None:
        """Composite *image*, stretched to the surface, at global opacity *alpha*."""
        ...


# -- Fonts -------------------------------------------------------------

def _open_font(path: str | None, size: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    if path:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            if path not in _missing_fonts:
                _missing_fonts.add(path)
                logger.warning("Cannot open font %s, falling back to default", path)
    return ImageFont.load_default(size=size)


def _apply_weight(font: ImageFont.FreeTypeFont | ImageFont.ImageFont, weight: int) -> bool:
    """Set the wght axis of a variable font. Returns False for static fonts."""
    try:
        axes = font.get_variation_axes()
    except (AttributeError, OSError):
        return False
    found = False
    values = []
    for axis in axes:
        name = axis.get("name", b"")
        if isinstance(name, bytes):
            name = name.decode("utf-8", "replace")
        if name.lower() == "weight":
            found = True
            values.append(clamp(weight, axis["minimum"], axis["maximum"]))
        else:
            values.append(axis["default"])
    if found:
        font.set_variation_by_axes(values)
    return found


@functools.lru_cache(maxsize=1024)
def load_font(
    path: str | None, size: float, weight: int,
) -> tuple[ImageFont.FreeTypeFont | ImageFont.ImageFont, int]:
    """Font at *size* px and *weight*, cached per (path, size, weight).

    Returns:
        (font, stroke_width). Variable fonts carry the weight themselves
        (stroke 0); static fonts get a synthetic bold stroke instead.
    """
    font = _open_font(path, size)
    if _apply_weight(font, weight):
        return font, 0
    return font, synthetic_stroke(weight, size)


def synthetic_stroke(weight: int, size: float) -> int:
    """Outline width that fakes weights above regular (400) on a static font."""
    return max(0, round((weight - 400) / 250 * size / 24))


def font_size_key(size: float) -> float:
    """Quantise a glyph size to quarter pixels so the font cache stays small."""
    return max(1.0, round(size * 4) / 4)


# -- Surfaces ----------------------------------------------------------

class PillowSurface:
    """RGB bitmap backed by a PIL image."""

    def __init__(self, width: int, height: int, font_path: str | None = None):
        self.width = width
        self.height = height
        self.font_path = font_path
        self.image = Image.new("RGB", (max(0, width), max(0, height)), (255, 255, 255))
        self._draw = ImageDraw.Draw(self.image, "RGBA")

    def clear(self) -> None:
        self.image.paste((0, 0, 0), (0, 0, self.width, self.height))

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        self._draw.rectangle([x, y, x + w - 1, y + h - 1], fill=color)

    def draw_glyph(
        self,
        char: str,
        x: float,
        y: float,
        size: float,
        weight: int,
        color: Color,
        alpha: float,
    ) -> None:
        font, stroke = load_font(self.font_path, font_size_key(size), weight)
        fill = (*color, round_half_up(clamp(alpha, 0.0, 1.0) * 255))
        self._draw.text(
            (x, y), char, font=font, fill=fill, anchor="la",
            stroke_width=stroke, stroke_fill=fill,
        )

    def draw_image(self, image: RasterImage, alpha: float) -> None:
        overlay = image.to_pil().resize((self.width, self.height), Image.LANCZOS)
        opacity = clamp(alpha, 0.0, 1.0)
        overlay.putalpha(overlay.getchannel("A").point(lambda v: round_half_up(v * opacity)))
        base = self.image.convert("RGBA")
        base.alpha_composite(overlay)
        # paste in place so the bound ImageDraw keeps pointing at self.image
        self.image.paste(base.convert("RGB"))

    def tobytes(self) -> bytes:
        return self.image.tobytes()

    def save(self, path, format: str | None = None) -> None:
        self.image.save(path, format=format)


class RecordingSurface:
    """Surface that records draw calls instead of painting them."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.ops: list[tuple] = []

    def clear(self) -> None:
        self.ops.append(("clear",))

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        self.ops.append(("fill_rect", x, y, w, h, color))

    def draw_glyph(
        self,
        char: str,
        x: float,
        y: float,
        size: float,
        weight: int,
        color: Color,
        alpha: float,
    ) -> None:
        self.ops.append(("draw_glyph", char, x, y, size, weight, color, alpha))

    def draw_image(self, image: RasterImage, alpha: float) -> None:
        self.ops.append(("draw_image", alpha))

    def glyphs(self) -> list[tuple]:
        return [op for op in self.ops if op[0] == "draw_glyph"]
