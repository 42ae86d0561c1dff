# app.py
from pathlib import Path
from typing import List

import pandas as pd
import streamlit as st

from nba_clutch_analysis.config import config
from nba_clutch_analysis.eda import (
    clutch_vs_non_clutch_scatter,
    configure_logging,
    format_leaderboard,
    make_rate_differential_chart,
    season_trend_analysis,
    significance_chart,
)
from nba_clutch_analysis.exceptions import IngestionError
from nba_clutch_analysis.pipeline import ClutchAnalysisResult, run_pipeline

configure_logging()

# ───────────────────────── Streamlit page config ──────────────────────────────
st.set_page_config(
    page_title="NBA Clutch Shooting",
    page_icon="🏀",
    layout="wide",
)


@st.cache_resource(show_spinner=True)
def load_result(files: List[str], top_k: int) -> ClutchAnalysisResult:
    return run_pipeline([Path(f) for f in files], top_k=top_k)


st.sidebar.header("⚙️ Settings")
raw_dir = st.sidebar.text_input("Season file directory", str(config.RAW_DATA_DIR))
top_k = st.sidebar.slider("Top-K players by attempts", min_value=5, max_value=100, value=config.TOP_K)
playoffs_only = st.sidebar.toggle("Playoff games only", value=False)

files = [str(p) for p in config.season_files(Path(raw_dir))]
try:
    result = load_result(files, top_k)
except IngestionError as e:
    st.error(f"Could not load season files: {e}")
    st.stop()

st.title("🏀 Do NBA Shooters Rise in the Clutch?")
c1, c2, c3 = st.columns(3)
c1.metric("Shots", f"{len(result.shots):,}")
c2.metric("Clutch shots", f"{int(result.shots['clutch'].sum()):,}")
c3.metric("Unclassified dates dropped", f"{result.n_unclassified:,}")

tab_board, tab_seasons, tab_tests = st.tabs(["Leaderboard", "Seasons", "Significance"])

with tab_board:
    board = result.playoff_leaderboard if playoffs_only else result.leaderboard
    aggregates = result.playoff_aggregates if playoffs_only else result.player_aggregates
    if board.empty:
        st.info("No shots for this selection.")
    else:
        st.dataframe(format_leaderboard(board), hide_index=True, use_container_width=True)
        _, fig = make_rate_differential_chart(board)
        st.pyplot(fig)
        _, fig = clutch_vs_non_clutch_scatter(aggregates)
        st.pyplot(fig)

with tab_seasons:
    st.dataframe(result.season_summary, hide_index=True, use_container_width=True)
    _, fig = season_trend_analysis(result.season_summary)
    st.pyplot(fig)

with tab_tests:
    sig: pd.DataFrame = result.significance
    st.dataframe(sig, hide_index=True, use_container_width=True)
    _, fig = significance_chart(sig)
    st.pyplot(fig)
    st.caption(
        f"Logistic regression of made on clutch per player; labels use p < {config.SIGNIFICANCE_LEVEL}. "
        "'undefined' marks players whose fit is degenerate."
    )
