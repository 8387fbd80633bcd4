"""Centralised configuration via frozen dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

# (min, max) for every numeric render setting
FONT_SIZE_RANGE = (5, 36)
SPACING_RANGE = (0.8, 2.0)
CONTRAST_RANGE = (0.6, 1.8)
UNDERLAY_RANGE = (0.0, 0.2)

DEFAULT_TEXT = (
    "Every whispered line becomes a field of light. The chorus blooms, "
    "the silence fades, and the story stays."
)


def clamp(value: float, lo: float, hi: float) -> float:
    return min(max(value, lo), hi)


@dataclass(frozen=True)
class RenderSettings:
    """User-facing parameters of one mosaic render.

    Attributes:
        font_size:  Base glyph size in px at scale 1.
        spacing:    Grid density multiplier (larger = sparser).
        contrast:   Luminance contrast gain applied before intensity mapping.
        monochrome: Draw every glyph in dark ink instead of the sampled colour.
        underlay:   Opacity of the faint source-image copy beneath the glyphs.
    """

    font_size: float = 18
    spacing: float = 1.2
    contrast: float = 1.0
    monochrome: bool = False
    underlay: float = 0.08

    @classmethod
    def clamped(
        cls,
        font_size: float = 18,
        spacing: float = 1.2,
        contrast: float = 1.0,
        monochrome: bool = False,
        underlay: float = 0.08,
    ) -> RenderSettings:
        """Build settings with every numeric field forced into its range."""
        return cls(
            font_size=clamp(font_size, *FONT_SIZE_RANGE),
            spacing=clamp(spacing, *SPACING_RANGE),
            contrast=clamp(contrast, *CONTRAST_RANGE),
            monochrome=bool(monochrome),
            underlay=clamp(underlay, *UNDERLAY_RANGE),
        )


@dataclass(frozen=True)
class StudioConfig:
    """Parameters of the preview / export pipeline around the renderer.

    Attributes:
        preview_width:     Base width of the preview surface in px.
        preview_detail:    Detail factor used for the interactive preview.
        max_preview_scale: Upper bound on the preview pixel ratio.
        export_scale:      Scale of the high-resolution export.
        export_detail:     Detail factor of the export (full density).
        font_path:         TrueType/OpenType font for glyphs (None = Pillow default).
        output_name:       File name of the exported artwork.
        input_dir:         Folder scanned by the batch command.
        output_dir:        Folder for results.
    """

    preview_width: int = 720
    min_preview_width: int = 280
    max_preview_width: int = 820
    preview_detail: float = 0.7
    max_preview_scale: float = 2.0

    export_scale: int = 4
    export_detail: float = 1.0

    font_path: str | None = None
    default_text: str = DEFAULT_TEXT
    output_name: str = "lyric-artwork.png"

    input_dir: Path = field(default_factory=lambda: Path("images"))
    output_dir: Path = field(default_factory=lambda: Path("output"))

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".bmp", ".gif", ".tiff", ".tif", ".webp", ".jfif"}
    )

    def fit_preview_width(self, available: int) -> int:
        """Clamp an available container width into the preview range."""
        return int(clamp(available, self.min_preview_width, self.max_preview_width))

    def preview_scale(self, pixel_ratio: float = 1.0) -> float:
        """Device pixel ratio capped at max_preview_scale (0 or None = 1)."""
        return min(pixel_ratio or 1.0, self.max_preview_scale)
