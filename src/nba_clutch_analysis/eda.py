"""
NBA Clutch Shooting EDA & Reporting Utilities

"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from .config import config
from .pipeline import ClutchAnalysisResult, run_pipeline

# ───────────────────── configuration ────────────────────────────
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s │ %(levelname)s │ %(message)s"

plt.rcParams.update({
    "figure.figsize": config.FIGURE_SIZE,
    "axes.spines.top": False,
    "axes.spines.right": False,
})
sns.set_palette("husl")

_LEADERBOARD_COLUMNS = [
    "rank", "shooter", "total_attempts", "clutch_attempts", "clutch_make_rate",
    "non_clutch_make_rate", "make_rate_diff",
]


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def _save(fig: plt.Figure, savefig: Path | None) -> None:
    if savefig:
        fig.savefig(savefig, dpi=config.DPI, bbox_inches="tight")


# ─────────────────────── tables ────────────────────────────────
def format_leaderboard(board: pd.DataFrame) -> pd.DataFrame:
    """Presentation copy of a leaderboard with percentages as strings."""
    view = board[_LEADERBOARD_COLUMNS].copy()
    for col in ("clutch_make_rate", "non_clutch_make_rate"):
        view[col] = view[col].map(lambda v: "n/a" if pd.isna(v) else f"{v:.1%}")
    view["make_rate_diff"] = view["make_rate_diff"].map(lambda v: "n/a" if pd.isna(v) else f"{v:+.1%}")
    return view


# ─────────────────────── charts ────────────────────────────────
def make_rate_differential_chart(
    board: pd.DataFrame,
    *,
    title: str = "Clutch minus Non-Clutch Make Rate",
    savefig: Path | None = None,
) -> Tuple[pd.DataFrame, plt.Figure]:
    """Horizontal bars of make_rate_diff for the leaderboard players."""
    data = board.dropna(subset=["make_rate_diff"])
    fig, ax = plt.subplots(figsize=(10, max(4, 0.3 * len(data))))
    colours = np.where(data["make_rate_diff"] >= 0, "seagreen", "indianred")
    ax.barh(data["shooter"], data["make_rate_diff"], color=colours)
    ax.axvline(0, color="black", linewidth=1)
    ax.invert_yaxis()
    ax.set_title(title)
    ax.set_xlabel("Make-rate differential")
    plt.tight_layout()
    _save(fig, savefig)
    return data, fig


def clutch_vs_non_clutch_scatter(
    aggregates: pd.DataFrame,
    *,
    min_attempts: int = 1,
    savefig: Path | None = None,
) -> Tuple[pd.DataFrame, plt.Figure]:
    """Clutch vs non-clutch make rate per player (bubble = clutch attempts)."""
    data = aggregates.reset_index()
    data = data[(data["clutch_attempts"] >= min_attempts) & (data["non_clutch_attempts"] >= min_attempts)]

    fig, ax = plt.subplots()
    ax.scatter(data["non_clutch_make_rate"], data["clutch_make_rate"],
               s=data["clutch_attempts"].clip(lower=5), alpha=0.6, color="darkblue")
    ax.plot([0, 1], [0, 1], "r--", linewidth=1, label="No difference")
    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    ax.set_xlabel("Non-clutch make rate")
    ax.set_ylabel("Clutch make rate")
    ax.set_title("Clutch vs Non-Clutch Shooting (bubble = clutch attempts)")
    ax.legend()
    plt.tight_layout()
    _save(fig, savefig)
    return data, fig


def season_trend_analysis(
    season_summary: pd.DataFrame,
    *,
    savefig: Path | None = None,
) -> Tuple[pd.DataFrame, plt.Figure]:
    """League make rate by season, clutch vs non-clutch."""
    long = season_summary.melt(
        id_vars="season",
        value_vars=["clutch_make_rate", "non_clutch_make_rate"],
        var_name="situation",
        value_name="make_rate",
    )
    long["situation"] = long["situation"].map({
        "clutch_make_rate": "Clutch",
        "non_clutch_make_rate": "Non-clutch",
    })

    fig, ax = plt.subplots(figsize=(10, 5))
    sns.lineplot(data=long, x="season", y="make_rate", hue="situation", marker="o", ax=ax)
    ax.set_title("League Make Rate by Season")
    ax.set_ylabel("Make rate")
    ax.set_xlabel("")
    plt.tight_layout()
    _save(fig, savefig)

    print("\nClutch vs non-clutch make rate by season:")
    for row in season_summary.itertuples(index=False):
        print(f"{row.season}: clutch {row.clutch_make_rate:.1%} ({row.clutch_attempts:,}) | "
              f"non-clutch {row.non_clutch_make_rate:.1%} ({row.non_clutch_attempts:,})")
    return long, fig


def significance_chart(
    significance: pd.DataFrame,
    *,
    alpha: Optional[float] = None,
    savefig: Path | None = None,
) -> Tuple[pd.DataFrame, plt.Figure]:
    """−log10(p) per tested player with the significance threshold marked."""
    alpha = config.SIGNIFICANCE_LEVEL if alpha is None else alpha
    data = significance.dropna(subset=["p_value"]).copy()
    data["neg_log10_p"] = -np.log10(data["p_value"].clip(lower=1e-300))

    fig, ax = plt.subplots(figsize=(10, max(4, 0.3 * len(data))))
    colours = np.where(data["p_value"] < alpha, "darkorange", "steelblue")
    ax.barh(data["player"], data["neg_log10_p"], color=colours)
    ax.axvline(-np.log10(alpha), color="red", linestyle="--", label=f"p = {alpha}")
    ax.invert_yaxis()
    ax.set_xlabel("−log10(p-value) of clutch coefficient")
    ax.set_title("Per-Player Clutch Effect Significance")
    ax.legend()
    plt.tight_layout()
    _save(fig, savefig)
    return data, fig


# ───────────────────── orchestrator API ─────────────────────
def save_tables(result: ClutchAnalysisResult, output_dir: Path) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)
    result.player_aggregates.to_csv(output_dir / config.AGGREGATES_FILE.name)
    result.leaderboard.to_csv(output_dir / config.LEADERBOARD_FILE.name, index=False)
    result.playoff_leaderboard.to_csv(output_dir / config.PLAYOFF_LEADERBOARD_FILE.name, index=False)
    result.significance.to_csv(output_dir / config.SIGNIFICANCE_FILE.name, index=False)
    result.season_summary.to_csv(output_dir / config.SEASON_SUMMARY_FILE.name, index=False)


def run_full_analysis(
    season_files: Optional[Sequence[Union[str, Path]]] = None,
    *,
    output_dir: Path | str = config.OUTPUT_DIR,
    top_k: Optional[int] = None,
    players: Optional[Sequence[str]] = None,
    n_jobs: Optional[int] = None,
) -> ClutchAnalysisResult:
    """Single convenience entry – runs the pipeline, saves tables and figures."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    print("── Section 1 Load, Filter & Label ──")
    result = run_pipeline(season_files, top_k=top_k, players=players, n_jobs=n_jobs)
    clutch_share = result.shots["clutch"].mean() if len(result.shots) else float("nan")
    print(f"Events: {result.n_events:,} | shots: {len(result.shots):,} | "
          f"clutch share: {clutch_share:.1%} | unclassified seasons: {result.n_unclassified:,}")

    print("── Section 2 Player Leaderboard ──")
    print(format_leaderboard(result.leaderboard).to_string(index=False))
    make_rate_differential_chart(result.leaderboard, savefig=output_dir / "make_rate_diff.png")
    clutch_vs_non_clutch_scatter(result.player_aggregates, savefig=output_dir / "clutch_scatter.png")

    print("── Section 3 Playoff Leaderboard ──")
    if result.playoff_leaderboard.empty:
        print("No playoff shots in the input.")
    else:
        print(format_leaderboard(result.playoff_leaderboard).to_string(index=False))
        make_rate_differential_chart(
            result.playoff_leaderboard,
            title="Playoff Clutch minus Non-Clutch Make Rate",
            savefig=output_dir / "playoff_make_rate_diff.png",
        )

    print("── Section 4 Season Trends ──")
    season_trend_analysis(result.season_summary, savefig=output_dir / "season_trend.png")

    print("── Section 5 Significance Tests ──")
    print(result.significance[["player", "p_value", "pseudo_r2", "significant"]].to_string(index=False))
    significance_chart(result.significance, savefig=output_dir / "significance.png")

    save_tables(result, output_dir)
    plt.close("all")
    logger.info("All tables and figures saved in %s", output_dir.resolve())
    return result


# ─────────────────────────── CLI demo ───────────────────────────

if __name__ == "__main__":
    configure_logging()
    run_full_analysis()
