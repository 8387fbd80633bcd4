"""
Lyric Mosaic
============

Rebuild a photograph out of the characters of a text. Each glyph is
sized, weighted, coloured and faded by the brightness of the image
region it covers. The same renderer produces:

- a **preview** (coarser grid, screen resolution)
- an **export** (full density, 4x resolution)
"""

__version__ = "1.0.0"

from lyric_mosaic.config import RenderSettings, StudioConfig
from lyric_mosaic.export import export_mosaic, render_preview, save_export
from lyric_mosaic.glyphs import GlyphSequencer
from lyric_mosaic.image_io import load_raster, raster_from_pil
from lyric_mosaic.intensity import GlyphStyle, style_glyph
from lyric_mosaic.renderer import MosaicCell, iter_cells, render_mosaic, surface_size
from lyric_mosaic.sampling import RasterImage, sample_pixel
from lyric_mosaic.session import RenderSession, RenderState
from lyric_mosaic.surface import PillowSurface, RecordingSurface, Surface

__all__ = [
    "GlyphSequencer",
    "GlyphStyle",
    "MosaicCell",
    "PillowSurface",
    "RasterImage",
    "RecordingSurface",
    "RenderSession",
    "RenderSettings",
    "RenderState",
    "StudioConfig",
    "Surface",
    "export_mosaic",
    "iter_cells",
    "load_raster",
    "raster_from_pil",
    "render_mosaic",
    "render_preview",
    "sample_pixel",
    "save_export",
    "style_glyph",
    "surface_size",
]
