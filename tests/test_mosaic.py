"""Tests for the lyric_mosaic rendering core."""

from __future__ import annotations

import dataclasses

import numpy as np
import pytest

from lyric_mosaic.config import RenderSettings
from lyric_mosaic.glyphs import PLACEHOLDER, GlyphSequencer, normalize_text
from lyric_mosaic.intensity import (
    MONOCHROME_INK,
    apply_contrast,
    ink_intensity,
    luminance,
    round_half_up,
    style_glyph,
)
from lyric_mosaic.renderer import (
    BACKGROUND,
    grid_steps,
    iter_cells,
    render_mosaic,
    surface_size,
)
from lyric_mosaic.sampling import RasterImage, sample_pixel
from lyric_mosaic.surface import PillowSurface, RecordingSurface, synthetic_stroke

# -- Fixtures ----------------------------------------------------------

W, H = 100, 100


def solid(color: tuple[int, int, int], w: int = W, h: int = H) -> RasterImage:
    return RasterImage.from_array(np.full((h, w, 3), color, dtype=np.uint8))


@pytest.fixture
def gradient() -> RasterImage:
    """Horizontal black → white ramp with a red band."""
    ramp = np.tile(np.linspace(0, 255, W, dtype=np.uint8), (H, 1))
    arr = np.stack([ramp, ramp, ramp], axis=2)
    arr[40:60, :, 0] = 255
    return RasterImage.from_array(arr)


@pytest.fixture
def settings() -> RenderSettings:
    return RenderSettings(font_size=10, spacing=1.0, contrast=1.0, underlay=0.0)


def recorded(image, text, settings, scale=1.0, detail=1.0, w=W, h=H) -> RecordingSurface:
    surface = RecordingSurface(w, h)
    assert render_mosaic(surface, image, text, settings, scale, detail)
    return surface


# -- Settings ----------------------------------------------------------

class TestSettings:
    def test_defaults(self) -> None:
        s = RenderSettings()
        assert s.font_size == 18
        assert s.spacing == 1.2
        assert s.monochrome is False

    def test_frozen(self) -> None:
        s = RenderSettings()
        with pytest.raises(dataclasses.FrozenInstanceError):
            s.font_size = 20  # type: ignore[misc]

    def test_clamped(self) -> None:
        s = RenderSettings.clamped(
            font_size=100, spacing=0.1, contrast=5, underlay=-1, monochrome=1,
        )
        assert s == RenderSettings(
            font_size=36, spacing=0.8, contrast=1.8, underlay=0.0, monochrome=True,
        )


# -- Glyph stream ------------------------------------------------------

class TestGlyphSequencer:
    def test_whitespace_collapsed_and_trimmed(self) -> None:
        assert normalize_text("  la\n\n la\t\tla  ") == "la la la"

    def test_cyclic(self) -> None:
        seq = GlyphSequencer("hello world")
        n = len(seq)
        assert n == 11
        for i in range(40):
            assert seq.at(i) == seq.at(i + n)
        assert seq.at(11) == "h"

    @pytest.mark.parametrize("text", ["", "   ", "\n\t \n", None])
    def test_empty_falls_back_to_placeholder(self, text) -> None:
        seq = GlyphSequencer(text)
        assert len(seq) == 1
        assert all(seq.at(i) == PLACEHOLDER for i in range(10))

    def test_newline_drawn_as_space(self) -> None:
        seq = GlyphSequencer("ab")
        seq.glyphs = ("a", "\n")
        assert seq.at(1) == " "

    def test_combining_marks_are_separate_positions(self) -> None:
        seq = GlyphSequencer("e\u0301")
        assert len(seq) == 2
        assert seq.at(1) == "\u0301"


# -- Pixel sampling ----------------------------------------------------

class TestSampling:
    def test_averages_diagonal_neighbour(self) -> None:
        arr = np.zeros((4, 4, 4), dtype=np.uint8)
        arr[1, 1] = (100, 50, 0, 255)
        arr[2, 2] = (200, 150, 11, 255)
        assert sample_pixel(arr, 1.7, 1.2) == (150.0, 100.0, 5.5)

    def test_clamps_out_of_range(self) -> None:
        arr = np.zeros((3, 3, 4), dtype=np.uint8)
        arr[0, 0] = (10, 10, 10, 255)
        arr[2, 2] = (90, 90, 90, 255)
        # negative coordinates clamp to (0, 0); partner is (1, 1) = black
        assert sample_pixel(arr, -5, -5) == (5.0, 5.0, 5.0)
        # beyond the edge both taps clamp to the corner
        assert sample_pixel(arr, 10, 10) == (90.0, 90.0, 90.0)

    def test_from_rgb_adds_opaque_alpha(self) -> None:
        img = solid((1, 2, 3), 5, 4)
        assert (img.width, img.height) == (5, 4)
        assert img.pixels.shape == (4, 5, 4)
        assert (img.pixels[..., 3] == 255).all()
        assert not img.pixels.flags.writeable

    def test_rejects_bad_shape(self) -> None:
        with pytest.raises(ValueError):
            RasterImage.from_array(np.zeros((4, 4), dtype=np.uint8))


# -- Intensity mapping -------------------------------------------------

class TestIntensity:
    @pytest.mark.parametrize("contrast", [0.6, 0.85, 1.0, 1.4, 1.8])
    def test_contrasted_in_range(self, contrast: float) -> None:
        for lum in np.linspace(0, 255, 52):
            assert 0 <= apply_contrast(float(lum), contrast) <= 255

    def test_intensity_monotonic_and_bounded(self) -> None:
        values = [ink_intensity(c) for c in np.linspace(0, 255, 256)]
        assert all(0 <= v <= 1 for v in values)
        assert all(a >= b for a, b in zip(values, values[1:]))
        assert values[0] == 1.0
        assert values[-1] == 0.0

    def test_mid_grey(self) -> None:
        intensity, style = style_glyph((128, 128, 128), 1.0, 18, 1.0)
        expected = (1 - 128 / 255) ** 0.65
        assert luminance(128, 128, 128) == pytest.approx(128)
        assert intensity == pytest.approx(expected, abs=1e-9)
        assert intensity == pytest.approx(0.636, abs=0.01)
        assert style.weight == 681
        assert style.alpha == pytest.approx(0.45 + expected * 0.55)
        assert style.size == pytest.approx(18 * (0.85 + expected * 0.8))
        assert style.color == (128, 128, 128)

    def test_extremes(self) -> None:
        _, black = style_glyph((0, 0, 0), 1.0, 10, 2.0)
        _, white = style_glyph((255, 255, 255), 1.0, 10, 2.0)
        assert black.weight == 900
        assert black.alpha == pytest.approx(1.0)
        assert black.size == pytest.approx(20 * 1.65)
        # the BT.709 weights sum to just under 1, so white is not exactly 255
        assert white.weight == 300
        assert white.alpha == pytest.approx(0.45)
        assert white.size == pytest.approx(20 * 0.85)

    def test_colour_rounds_half_up(self) -> None:
        _, style = style_glyph((10.5, 11.5, 0.5), 1.0, 10, 1.0)
        assert style.color == (11, 12, 1)
        assert round_half_up(2.5) == 3

    def test_monochrome_only_changes_colour(self) -> None:
        rgb = (200.0, 40.5, 90.0)
        i1, colour = style_glyph(rgb, 1.3, 12, 1.0, monochrome=False)
        i2, mono = style_glyph(rgb, 1.3, 12, 1.0, monochrome=True)
        assert i1 == i2
        assert mono.color == MONOCHROME_INK
        assert (mono.weight, mono.size, mono.alpha) == (colour.weight, colour.size, colour.alpha)


# -- Surface sizing ----------------------------------------------------

class TestSurfaceSize:
    def test_landscape(self) -> None:
        assert surface_size(720, 1920, 1080, 1) == (720, 405)

    def test_export_is_four_times_preview(self) -> None:
        for base in (280, 281, 555, 720, 820):
            w1, h1 = surface_size(base, 300, 200, 1)
            w4, h4 = surface_size(base, 300, 200, 4)
            assert (w4, h4) == (4 * w1, 4 * h1)

    def test_height_floored_before_scaling(self) -> None:
        # 281 / 1.5 = 187.33 → 187, then x4
        assert surface_size(281, 300, 200, 4) == (1124, 748)


# -- Grid traversal ----------------------------------------------------

class TestRenderer:
    def test_grid_steps(self, settings: RenderSettings) -> None:
        sx, sy = grid_steps(settings, scale=2.0, detail_factor=1.0)
        assert sx == pytest.approx(20)
        assert sy == pytest.approx(28)

    def test_spacing_two_halves_density(self, settings: RenderSettings) -> None:
        sx1, sy1 = grid_steps(settings, 1.0)
        sx2, sy2 = grid_steps(dataclasses.replace(settings, spacing=2.0), 1.0)
        assert sx2 == pytest.approx(2 * sx1)
        assert sy2 == pytest.approx(2 * sy1)

    def test_detail_factor_clamped(self, settings: RenderSettings) -> None:
        assert grid_steps(settings, 1.0, 0.1) == grid_steps(settings, 1.0, 0.5)
        assert grid_steps(settings, 1.0, 3.0) == grid_steps(settings, 1.0, 1.0)

    def test_rejects_non_positive_scale(self, gradient, settings) -> None:
        with pytest.raises(ValueError):
            render_mosaic(RecordingSurface(W, H), gradient, "x", settings, scale=0)
        with pytest.raises(ValueError):
            grid_steps(dataclasses.replace(settings, font_size=0), 1.0)

    def test_cell_count(self, gradient, settings) -> None:
        # step 10 x 14 over 100 x 100 → 10 columns, 8 rows
        surface = recorded(gradient, "abc", settings)
        assert len(surface.glyphs()) == 80
        sparse = recorded(gradient, "abc", dataclasses.replace(settings, spacing=2.0))
        assert len(sparse.glyphs()) == 20

    def test_draw_order(self, gradient, settings) -> None:
        surface = recorded(gradient, "lyric", dataclasses.replace(settings, underlay=0.1))
        assert surface.ops[0] == ("clear",)
        assert surface.ops[1] == ("fill_rect", 0, 0, W, H, BACKGROUND)
        assert surface.ops[2] == ("draw_image", 0.1)
        assert all(op[0] == "draw_glyph" for op in surface.ops[3:])

    def test_no_underlay_when_zero(self, gradient, settings) -> None:
        surface = recorded(gradient, "lyric", settings)
        assert not any(op[0] == "draw_image" for op in surface.ops)

    def test_glyphs_continue_across_rows(self, gradient, settings) -> None:
        text = "ab cde"
        seq = GlyphSequencer(text)
        chars = [op[1] for op in recorded(gradient, text, settings).glyphs()]
        assert chars == [seq.at(i) for i in range(len(chars))]
        # 10 columns per row, text length 6 → second row starts mid-text
        assert chars[10] == "d"

    def test_row_major_positions(self, gradient, settings) -> None:
        ops = recorded(gradient, "x", settings).glyphs()
        xs = [op[2] for op in ops[:10]]
        ys = {op[3] for op in ops[:10]}
        assert xs == pytest.approx([10.0 * i for i in range(10)])
        assert ys == {0.0}
        assert ops[10][3] == pytest.approx(14.0)

    def test_darker_cells_are_heavier(self, gradient, settings) -> None:
        cells = list(iter_cells(gradient, "x", settings, 1.0, 1.0, W, H))
        first_row = [c for c in cells if c.y == 0]
        weights = [c.weight for c in first_row]
        assert weights == sorted(weights, reverse=True)
        assert weights[0] > weights[-1]

    def test_monochrome_toggle(self, gradient, settings) -> None:
        colour = recorded(gradient, "abc", settings).glyphs()
        mono = recorded(gradient, "abc", dataclasses.replace(settings, monochrome=True)).glyphs()
        assert len(colour) == len(mono)
        for c, m in zip(colour, mono):
            assert c[:6] == m[:6]
            assert m[6] == MONOCHROME_INK
            assert c[7] == m[7]
        assert any(c[6] != MONOCHROME_INK for c in colour)

    def test_cells_match_drawn_glyphs(self, gradient, settings) -> None:
        cells = list(iter_cells(gradient, "abc", settings, 1.0, 1.0, W, H))
        ops = recorded(gradient, "abc", settings).glyphs()
        assert [(c.char, c.x, c.y, c.size, c.weight, c.color, c.alpha) for c in cells] == [
            op[1:] for op in ops
        ]

    def test_missing_inputs_are_no_ops(self, gradient, settings) -> None:
        assert render_mosaic(None, gradient, "x", settings) is False
        surface = RecordingSurface(W, H)
        assert render_mosaic(surface, None, "x", settings) is False
        empty = RasterImage.from_array(np.zeros((0, 5, 4), dtype=np.uint8))
        assert render_mosaic(surface, empty, "x", settings) is False
        assert render_mosaic(RecordingSurface(0, 10), gradient, "x", settings) is False
        assert surface.ops == []

    def test_settings_not_mutated(self, gradient, settings) -> None:
        before = dataclasses.asdict(settings)
        recorded(gradient, "abc", settings)
        assert dataclasses.asdict(settings) == before


# -- Pillow surface ----------------------------------------------------

class TestPillowSurface:
    def test_deterministic(self, gradient) -> None:
        s = RenderSettings(font_size=8, underlay=0.1)
        a = PillowSurface(80, 60)
        b = PillowSurface(80, 60)
        assert render_mosaic(a, gradient, "la la", s, 1.0, 0.7)
        assert render_mosaic(b, gradient, "la la", s, 1.0, 0.7)
        assert a.tobytes() == b.tobytes()

    def test_white_image_stays_light(self) -> None:
        surface = PillowSurface(60, 40)
        render_mosaic(surface, solid((255, 255, 255)), "text", RenderSettings(font_size=10, underlay=0))
        arr = np.asarray(surface.image)
        assert arr.min() >= 250

    def test_dark_image_draws_ink(self) -> None:
        surface = PillowSurface(60, 40)
        render_mosaic(surface, solid((0, 0, 0)), "MMMM", RenderSettings(font_size=12, underlay=0))
        assert np.asarray(surface.image).min() < 100

    def test_underlay_tints_background(self) -> None:
        surface = PillowSurface(50, 50)
        surface.fill_rect(0, 0, 50, 50, BACKGROUND)
        surface.draw_image(solid((0, 0, 0), 10, 10), 0.2)
        # 250 * 0.8 = 200, give or take integer rounding
        pixel = np.asarray(surface.image)[25, 25].astype(int)
        assert np.all(np.abs(pixel - 200) <= 1)

    def test_rerender_overwrites(self, gradient) -> None:
        s = RenderSettings(font_size=8, underlay=0.05)
        fresh = PillowSurface(80, 60)
        reused = PillowSurface(80, 60)
        render_mosaic(fresh, gradient, "abc", s)
        render_mosaic(reused, solid((0, 0, 0)), "zzz", RenderSettings(font_size=20))
        render_mosaic(reused, gradient, "abc", s)
        assert fresh.tobytes() == reused.tobytes()

    def test_weight_changes_static_font(self) -> None:
        light = PillowSurface(60, 40)
        heavy = PillowSurface(60, 40)
        for surface, weight in ((light, 300), (heavy, 900)):
            surface.fill_rect(0, 0, 60, 40, BACKGROUND)
            surface.draw_glyph("M", 4, 4, 24, weight, (0, 0, 0), 1.0)
        assert light.tobytes() != heavy.tobytes()
        # heavier weight lays down more ink
        assert np.asarray(heavy.image).sum() < np.asarray(light.image).sum()

    @pytest.mark.parametrize(
        "weight, size, expected",
        [(300, 24, 0), (400, 24, 0), (650, 24, 1), (900, 24, 2), (900, 96, 8)],
    )
    def test_synthetic_stroke(self, weight, size, expected) -> None:
        assert synthetic_stroke(weight, size) == expected
