"""Render lifecycle of one studio session: Idle → Dirty → Clean."""

from __future__ import annotations

import dataclasses
import enum
import logging

from lyric_mosaic.config import RenderSettings, StudioConfig
from lyric_mosaic.export import export_mosaic, render_preview
from lyric_mosaic.sampling import RasterImage
from lyric_mosaic.surface import PillowSurface

logger = logging.getLogger(__name__)


class RenderState(enum.Enum):
    IDLE = "idle"
    DIRTY = "dirty"
    CLEAN = "clean"


class RenderSession:
    """Holds the current image, text and settings and re-renders on demand.

    Every change marks the session dirty; ``render_preview`` brings it back
    to clean. Settings are replaced, never mutated, so a render always sees
    one consistent snapshot.
    """

    def __init__(
        self,
        config: StudioConfig | None = None,
        settings: RenderSettings | None = None,
        text: str | None = None,
    ):
        self.config = config or StudioConfig()
        self.settings = RenderSettings.clamped(**dataclasses.asdict(settings or RenderSettings()))
        self.text = self.config.default_text if text is None else text
        self.image: RasterImage | None = None
        self.preview: PillowSurface | None = None
        self.state = RenderState.IDLE

    @property
    def is_complete(self) -> bool:
        return self.state is RenderState.CLEAN

    def _mark_dirty(self) -> None:
        self.state = RenderState.DIRTY

    def load_image(self, image: RasterImage) -> None:
        self.image = image
        self.preview = None
        logger.debug("Loaded %dx%d image", image.width, image.height)
        self._mark_dirty()

    def set_text(self, text: str) -> None:
        self.text = text
        self._mark_dirty()

    def update_settings(self, **changes) -> RenderSettings:
        """Replace settings with clamped *changes* applied."""
        merged = dataclasses.replace(self.settings, **changes)
        self.settings = RenderSettings.clamped(**dataclasses.asdict(merged))
        self._mark_dirty()
        return self.settings

    def set_preview_width(self, available: int) -> int:
        width = self.config.fit_preview_width(available)
        if width != self.config.preview_width:
            self.config = dataclasses.replace(self.config, preview_width=width)
            self._mark_dirty()
        return width

    def render_preview(self, pixel_ratio: float = 1.0) -> PillowSurface | None:
        """Re-render the preview. Without an image this is a no-op returning None."""
        surface = render_preview(
            self.image, self.text, self.settings, self.config, pixel_ratio,
        )
        if surface is None:
            return None
        self.preview = surface
        self.state = RenderState.CLEAN
        return surface

    def export(self) -> PillowSurface | None:
        """Fresh high-resolution render; the session keeps no reference to it."""
        return export_mosaic(self.image, self.text, self.settings, self.config)
