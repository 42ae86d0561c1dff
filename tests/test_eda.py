"""
Smoke tests for the reporting layer (tables, charts, full run).
"""
import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest

from nba_clutch_analysis.config import config
from nba_clutch_analysis.eda import (
    clutch_vs_non_clutch_scatter,
    format_leaderboard,
    make_rate_differential_chart,
    run_full_analysis,
    season_trend_analysis,
    significance_chart,
)
from nba_clutch_analysis.pipeline import run_pipeline


@pytest.fixture
def result(synthetic_files):
    return run_pipeline(synthetic_files, top_k=4)


def test_format_leaderboard():
    board = pd.DataFrame({
        "rank": [1, 2],
        "shooter": ["A", "B"],
        "total_attempts": [10, 8],
        "clutch_attempts": [2, 0],
        "clutch_make_rate": [0.5, np.nan],
        "non_clutch_make_rate": [0.25, 0.5],
        "make_rate_diff": [0.25, np.nan],
    })
    view = format_leaderboard(board)

    assert view["clutch_make_rate"].tolist() == ["50.0%", "n/a"]
    assert view["make_rate_diff"].tolist() == ["+25.0%", "n/a"]


def test_charts_return_data_and_figures(result):
    data, fig = make_rate_differential_chart(result.leaderboard)
    assert isinstance(fig, plt.Figure)
    assert not data["make_rate_diff"].isna().any()

    data, fig = clutch_vs_non_clutch_scatter(result.player_aggregates, min_attempts=1)
    assert isinstance(fig, plt.Figure)
    assert (data["clutch_attempts"] >= 1).all()

    long, fig = season_trend_analysis(result.season_summary)
    assert set(long["situation"]) == {"Clutch", "Non-clutch"}
    assert len(long) == 2 * len(result.season_summary)

    data, fig = significance_chart(result.significance)
    assert "neg_log10_p" in data.columns
    plt.close("all")


def test_run_full_analysis_writes_outputs(synthetic_files, tmp_path, capsys):
    out = tmp_path / "out"
    result = run_full_analysis(synthetic_files, output_dir=out, top_k=3)

    for name in (config.AGGREGATES_FILE.name, config.LEADERBOARD_FILE.name,
                 config.PLAYOFF_LEADERBOARD_FILE.name, config.SIGNIFICANCE_FILE.name,
                 config.SEASON_SUMMARY_FILE.name):
        assert (out / name).exists()
    for name in ("make_rate_diff.png", "clutch_scatter.png", "season_trend.png", "significance.png"):
        assert (out / name).exists()

    saved = pd.read_csv(out / config.LEADERBOARD_FILE.name)
    assert saved["shooter"].tolist() == result.leaderboard["shooter"].tolist()
    assert "Section 5" in capsys.readouterr().out
