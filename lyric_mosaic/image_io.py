"""Image loading and saving."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image

from lyric_mosaic.config import StudioConfig
from lyric_mosaic.sampling import RasterImage


def raster_from_pil(img: Image.Image) -> RasterImage:
    """Decode a PIL image of any mode into an RGBA raster."""
    return RasterImage.from_array(np.array(img.convert("RGBA"), dtype=np.uint8))


def load_raster(
    path: str | Path,
    extensions: frozenset[str] = StudioConfig.SUPPORTED_EXTENSIONS,
) -> RasterImage:
    """Load an image file as an RGBA raster.

    Raises:
        ValueError: for file types outside *extensions*.
    """
    path = Path(path)
    if path.suffix.lower() not in extensions:
        raise ValueError(f"Unsupported image type: {path.suffix or path.name}")
    with Image.open(path) as img:
        return raster_from_pil(img)


def collect_images(folder: Path, extensions: frozenset[str]) -> list[Path]:
    if not folder.exists():
        return []
    return sorted(
        f for f in folder.iterdir()
        if f.is_file() and f.suffix.lower() in extensions
    )
