"""Decoded raster images and two-tap colour sampling."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from PIL import Image


@dataclass(frozen=True, eq=False)
class RasterImage:
    """A decoded RGBA8 image.

    Attributes:
        width:  Pixel width.
        height: Pixel height.
        pixels: (height, width, 4) uint8 array, row-major, read-only.
    """

    width: int
    height: int
    pixels: np.ndarray

    @classmethod
    def from_array(cls, array: np.ndarray) -> RasterImage:
        """Wrap an (H, W, 3) or (H, W, 4) uint8 array, adding opaque alpha if needed."""
        arr = np.asarray(array, dtype=np.uint8)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise ValueError(f"Expected (H, W, 3|4) array, got shape {arr.shape}")
        if arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr, alpha], axis=2)
        else:
            arr = arr.copy()
        arr.flags.writeable = False
        h, w = arr.shape[:2]
        return cls(width=w, height=h, pixels=arr)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def to_pil(self) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(self.pixels), "RGBA")

    def resized(self, width: int, height: int) -> np.ndarray:
        """Resample to (height, width, 4) uint8, the buffer cells are sampled from."""
        if (width, height) == (self.width, self.height):
            return self.pixels
        img = self.to_pil().resize((width, height), Image.LANCZOS)
        return np.asarray(img, dtype=np.uint8)


def sample_pixel(pixels: np.ndarray, x: float, y: float) -> tuple[float, float, float]:
    """Average colour of the pixel under (x, y) and its lower-right neighbour.

    Coordinates are floored and clamped to the buffer, so any real (x, y)
    yields a valid sample. The diagonal second tap smooths single-pixel noise
    at coarse grid spacings.

    Args:
        pixels: (H, W, 3|4) uint8 buffer at surface resolution.
        x, y:   Continuous grid coordinate.

    Returns:
        (r, g, b) floats in [0, 255].
    """
    h, w = pixels.shape[:2]
    sx = min(w - 1, max(0, math.floor(x)))
    sy = min(h - 1, max(0, math.floor(y)))
    ax = min(w - 1, sx + 1)
    ay = min(h - 1, sy + 1)

    p = pixels[sy, sx]
    q = pixels[ay, ax]
    return (
        (int(p[0]) + int(q[0])) / 2,
        (int(p[1]) + int(q[1])) / 2,
        (int(p[2]) + int(q[2])) / 2,
    )
