"""
Streamlit viewer: sidebar (dataset, canvas, label metrics, boundary mode),
tabs Stream graph / Placements / Density. Run with:
    streamlit run bandlabel/ui/app.py
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

import streamlit as st

from bandlabel.core.config import (
    BOUNDARY_MODE,
    BOUNDARY_MODES,
    DEFAULT_DISTRICTS_PATH,
    DEFAULT_POPULATION_PATH,
    DEFAULT_PORTFOLIO_PATH,
    DEFAULT_STATES_PATH,
    FONT_HEIGHT_PX,
    FONT_WIDTH_PX,
    LOG_LEVEL,
    STACK_OFFSET,
    STACK_OFFSETS,
    STREAM_MIN_HEIGHT_PX,
    STREAM_MIN_WIDTH_PX,
)
from bandlabel.core.error_codes import user_message
from bandlabel.core.pipeline import layout_streamgraph, run_density, write_streamgraph
from bandlabel.core.portfolio import PortfolioFormatError, build_table, load_portfolio, parse_snapshots
from bandlabel.core.reporting import placement_to_dict

# Configure logging from env (e.g. LOG_LEVEL=DEBUG for placement decisions)
logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))


def _repo_root() -> Path:
    return Path.cwd().resolve()


def _load_table(uploaded_file):
    """Uploaded portfolio JSON, else the bundled sample. Returns (table, error_message)."""
    try:
        if uploaded_file is not None:
            records = json.loads(uploaded_file.read().decode("utf-8"))
            return build_table(parse_snapshots(records)), ""
        return load_portfolio(DEFAULT_PORTFOLIO_PATH, repo_root=_repo_root()), ""
    except (FileNotFoundError, PortfolioFormatError, json.JSONDecodeError) as e:
        return None, str(e).strip() or "Could not read portfolio data."


def _sidebar() -> dict:
    st.sidebar.header("Inputs")
    uploaded = st.sidebar.file_uploader("Portfolio JSON", type=["json"], help="Defaults to the bundled sample.")
    width = st.sidebar.number_input("Width (px)", min_value=STREAM_MIN_WIDTH_PX, value=STREAM_MIN_WIDTH_PX, step=100)
    height = st.sidebar.number_input("Height (px)", min_value=STREAM_MIN_HEIGHT_PX, value=STREAM_MIN_HEIGHT_PX, step=100)
    offset = st.sidebar.selectbox("Stack baseline", STACK_OFFSETS, index=STACK_OFFSETS.index(STACK_OFFSET))
    st.sidebar.header("Labels")
    font_width = st.sidebar.slider("Character width (px)", 1.0, 12.0, float(FONT_WIDTH_PX), 0.5)
    font_height = st.sidebar.slider("Line height (px)", 4.0, 24.0, float(FONT_HEIGHT_PX), 1.0)
    boundary = st.sidebar.radio("Edge points", BOUNDARY_MODES, index=BOUNDARY_MODES.index(BOUNDARY_MODE), horizontal=True)
    return {
        "uploaded": uploaded,
        "width": width,
        "height": height,
        "offset": offset,
        "font_width": font_width,
        "font_height": font_height,
        "boundary": boundary,
    }


def _stream_tab(opts: dict) -> None:
    table, err = _load_table(opts["uploaded"])
    if table is None:
        st.error(err)
        return
    layout = layout_streamgraph(
        table,
        width=opts["width"],
        height=opts["height"],
        offset=opts["offset"],
        font_width_px=opts["font_width"],
        font_height_px=opts["font_height"],
        boundary=opts["boundary"],
    )
    with tempfile.TemporaryDirectory() as tmp:
        paths = write_streamgraph(layout, Path(tmp), {"portfolio": "ui"}, debug=True)
        svg_text = paths[0].read_text(encoding="utf-8")
        st.image(str(paths[1]), caption="Stream graph")
        with st.expander("Candidates (debug)"):
            st.image(str(paths[3]))
        st.download_button("Download streamgraph.svg", data=svg_text, file_name="streamgraph.svg", mime="image/svg+xml")

    hidden = [r for r in layout.placements if not r.placed]
    st.caption(f"{len(layout.placements) - len(hidden)} labels placed, {len(hidden)} hidden")
    for r in hidden:
        st.warning(f"{r.label_text}: {user_message(r.reason)}")
    st.session_state["placements"] = [placement_to_dict(r) for r in layout.placements]


def _placements_tab() -> None:
    rows = st.session_state.get("placements") or []
    if not rows:
        st.info("Render the stream graph first.")
        return
    st.dataframe(
        [
            {
                "key": r["key"],
                "label": r["label"],
                "mode": r["mode"],
                "x": r["anchor"]["x"] if r["anchor"] else None,
                "y": r["anchor"]["y"] if r["anchor"] else None,
                "step": r["step_index"],
                "reason": r["message"],
            }
            for r in rows
        ],
        hide_index=True,
    )


def _density_tab() -> None:
    if not st.button("Render density map"):
        return
    with tempfile.TemporaryDirectory() as tmp:
        try:
            svg_path, json_path = run_density(
                DEFAULT_POPULATION_PATH,
                DEFAULT_DISTRICTS_PATH,
                DEFAULT_STATES_PATH,
                Path(tmp),
                repo_root=_repo_root(),
            )
        except (FileNotFoundError, ValueError) as e:
            st.error(str(e))
            return
        st.image(svg_path.read_text(encoding="utf-8"))
        st.json(json.loads(json_path.read_text(encoding="utf-8"))["summary"])


def main() -> None:
    st.set_page_config(page_title="Band labels", layout="wide")
    st.title("Stream graph labels")
    opts = _sidebar()
    tab_stream, tab_placements, tab_density = st.tabs(["Stream graph", "Placements", "Density"])
    with tab_stream:
        _stream_tab(opts)
    with tab_placements:
        _placements_tab()
    with tab_density:
        _density_tab()


main()
