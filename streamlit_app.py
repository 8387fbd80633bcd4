"""
Lyric Mosaic — Studio

Run with:
    streamlit run streamlit_app.py
"""

from __future__ import annotations

import io

import streamlit as st
from PIL import Image, ImageDraw

from lyric_mosaic.config import (
    CONTRAST_RANGE,
    FONT_SIZE_RANGE,
    SPACING_RANGE,
    UNDERLAY_RANGE,
    RenderSettings,
    StudioConfig,
)
from lyric_mosaic.image_io import raster_from_pil
from lyric_mosaic.session import RenderSession

# -- Page config -------------------------------------------------------
st.set_page_config(
    page_title="Lyric Mosaic",
    page_icon=None,
    layout="wide",
    initial_sidebar_state="collapsed",
)

_DEFAULTS = RenderSettings()
_STUDIO = StudioConfig()

# -- CSS ---------------------------------------------------------------
st.markdown("""
<style>
    @import url('https://fonts.googleapis.com/css2?family=Instrument+Serif&family=Urbanist:wght@300;400;500&display=swap');

    .stApp {
        background-color: #fafafa;
        color: #1a1a1a;
        font-family: 'Urbanist', 'Helvetica Neue', sans-serif;
    }
    .block-container {
        max-width: 1100px;
        padding-top: 3rem;
        padding-bottom: 4rem;
    }
    .studio-kicker {
        font-size: 0.7rem;
        letter-spacing: 0.35em;
        text-transform: uppercase;
        text-align: center;
        color: rgba(26, 26, 26, 0.6);
    }
    .studio-title {
        font-family: 'Instrument Serif', 'Georgia', serif;
        font-size: 2.4rem;
        text-align: center;
        color: #1a1a1a;
        margin-bottom: 0.4rem;
    }
    .studio-subtitle {
        font-size: 0.95rem;
        text-align: center;
        color: rgba(26, 26, 26, 0.7);
        margin-bottom: 2.5rem;
    }
    .label-detail {
        font-family: 'Instrument Serif', 'Georgia', serif;
        font-size: 0.85rem;
        font-style: italic;
        color: #a0a09a;
        text-align: center;
    }
    .stButton > button, .stDownloadButton > button {
        background-color: #ea87bc !important;
        color: #ffffff !important;
        border: 1px solid rgba(234, 135, 188, 0.4) !important;
        border-radius: 999px !important;
    }
    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
</style>
""", unsafe_allow_html=True)


# -- Helpers -----------------------------------------------------------

def _add_passepartout(img: Image.Image, border: int = 20) -> Image.Image:
    w, h = img.size
    bg = (250, 250, 250)
    canvas = Image.new("RGB", (w + border * 2, h + border * 2), bg)
    canvas.paste(img, (border, border))
    draw = ImageDraw.Draw(canvas)
    draw.rectangle(
        [border - 1, border - 1, border + w, border + h],
        outline=(255, 228, 238), width=1,
    )
    return canvas


def _session() -> RenderSession:
    if "render_session" not in st.session_state:
        st.session_state.render_session = RenderSession(_STUDIO)
    return st.session_state.render_session


# -- Title -------------------------------------------------------------
st.markdown('<div class="studio-kicker">Lyric to Image Studio</div>', unsafe_allow_html=True)
st.markdown(
    '<div class="studio-title">Compose print-ready artwork from the lines you love.</div>',
    unsafe_allow_html=True,
)
st.markdown(
    '<div class="studio-subtitle">'
    "Drop a photo, paste lyrics, and craft a typographic portrait. "
    "Every glyph takes its size, weight, colour and opacity from the "
    "patch of the photograph it covers."
    "</div>",
    unsafe_allow_html=True,
)

session = _session()
col_input, col_preview, col_controls = st.columns([1.1, 1.4, 0.8])

# -- Inputs ------------------------------------------------------------
with col_input:
    uploaded = st.file_uploader(
        "Image input",
        type=sorted(ext.lstrip(".") for ext in _STUDIO.SUPPORTED_EXTENSIONS),
    )
    # Only decode when a different file arrives so reruns keep the session clean
    if uploaded is not None and st.session_state.get("uploaded_id") != uploaded.file_id:
        st.session_state.uploaded_id = uploaded.file_id
        session.load_image(raster_from_pil(Image.open(io.BytesIO(uploaded.getvalue()))))

    lyrics = st.text_area(
        "Lyrics",
        value=session.text,
        height=220,
        placeholder="Paste your lyrics or poetic text here...",
    )
    if lyrics != session.text:
        session.set_text(lyrics)

# -- Controls ----------------------------------------------------------
with col_controls:
    font_size = st.slider("Font size", *FONT_SIZE_RANGE, int(_DEFAULTS.font_size), step=1)
    spacing = st.slider("Text spacing", *SPACING_RANGE, _DEFAULTS.spacing, step=0.05)
    contrast = st.slider("Image contrast", *CONTRAST_RANGE, _DEFAULTS.contrast, step=0.05)
    underlay = st.slider("Image underlay", *UNDERLAY_RANGE, _DEFAULTS.underlay, step=0.01)
    monochrome = st.toggle("Monochrome text", value=_DEFAULTS.monochrome)

    wanted = RenderSettings.clamped(
        font_size=font_size,
        spacing=spacing,
        contrast=contrast,
        monochrome=monochrome,
        underlay=underlay,
    )
    if wanted != session.settings:
        session.update_settings(
            font_size=wanted.font_size,
            spacing=wanted.spacing,
            contrast=wanted.contrast,
            monochrome=wanted.monochrome,
            underlay=wanted.underlay,
        )

# -- Preview -----------------------------------------------------------
with col_preview:
    if session.image is None:
        st.markdown(
            '<p class="label-detail" style="margin-top:6rem;">'
            "Upload an image to see the lyric mapping preview.</p>",
            unsafe_allow_html=True,
        )
    else:
        if not session.is_complete:
            with st.spinner("Composing ..."):
                session.render_preview()
        if session.preview is None:
            st.markdown(
                '<p class="label-detail">This image has no pixels to render.</p>',
                unsafe_allow_html=True,
            )
        else:
            st.image(_add_passepartout(session.preview.image), use_container_width=True)
            st.markdown(
                f'<div class="label-detail">HD export ready at {_STUDIO.export_scale}x scale</div>',
                unsafe_allow_html=True,
            )

with col_controls:
    if session.image is not None and st.button("Prepare artwork", use_container_width=True):
        with st.spinner("Rendering high-resolution artwork ..."):
            hd = session.export()
        if hd is not None:
            buf = io.BytesIO()
            hd.save(buf, format="PNG")
            st.download_button(
                "Download artwork",
                data=buf.getvalue(),
                file_name=_STUDIO.output_name,
                mime="image/png",
                use_container_width=True,
            )
    st.caption(f"Exports at {_STUDIO.export_scale}x scale for crisp print output.")
