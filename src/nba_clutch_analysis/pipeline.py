"""
End-to-end clutch analysis: load → filter → label → aggregate → regress.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

import pandas as pd

from .config import config
from .data.loader import DataLoader
from .data.preprocessor import DataPreprocessor
from .models.significance import SignificanceResult, SignificanceTester
from .utils.metrics import ClutchAggregator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClutchAnalysisResult:
    """Every table produced by one pipeline run."""
    shots: pd.DataFrame
    player_aggregates: pd.DataFrame
    leaderboard: pd.DataFrame
    playoff_aggregates: pd.DataFrame
    playoff_leaderboard: pd.DataFrame
    season_summary: pd.DataFrame
    significance_results: List[SignificanceResult]
    significance: pd.DataFrame
    n_events: int
    n_unclassified: int


def run_pipeline(
    season_files: Optional[Sequence[Union[str, Path]]] = None,
    *,
    events: Optional[pd.DataFrame] = None,
    top_k: Optional[int] = None,
    players: Optional[Sequence[str]] = None,
    n_jobs: Optional[int] = None,
    loader: Optional[DataLoader] = None,
    preprocessor: Optional[DataPreprocessor] = None,
    tester: Optional[SignificanceTester] = None,
) -> ClutchAnalysisResult:
    """
    Run the full analysis on season files (or an already unioned event table).

    Args:
        season_files: Per-season files; defaults to the configured files
        events: Unioned event table, used instead of reading files
        top_k: Leaderboard size (default config.TOP_K)
        players: Shooters to test; defaults to config.SIGNIFICANCE_PLAYERS,
            then to the leaderboard order
        n_jobs: joblib workers for the per-player fits

    Returns:
        ClutchAnalysisResult with all tables
    """
    loader = loader or DataLoader()
    preprocessor = preprocessor or DataPreprocessor()
    tester = tester or SignificanceTester()
    aggregator = ClutchAggregator()

    # 1) Ingestion & union
    if events is None:
        files = list(season_files) if season_files is not None else config.season_files()
        events = loader.load_seasons(files)

    # 2-5) Shot filter, season / clutch / outcome labels
    shots = preprocessor.preprocess_complete(events, inplace=False)

    # 6) Player aggregates, full and playoff-only
    aggregates = aggregator.aggregate_players(shots)
    board = aggregator.leaderboard(aggregates, top_k)
    playoff_shots = preprocessor.filter_game_type(shots, config.PLAYOFF_VALUE)
    playoff_aggregates = aggregator.aggregate_players(playoff_shots)
    playoff_board = aggregator.leaderboard(playoff_aggregates, top_k)
    seasons = aggregator.season_summary(shots)

    # 7) Per-player significance
    if players is None:
        players = list(config.SIGNIFICANCE_PLAYERS) or board["shooter"].tolist()
    results = tester.test_players(shots, list(players), n_jobs=n_jobs)

    logger.info("Pipeline complete: %d shots, %d players, %d tested",
                len(shots), len(aggregates), len(results))
    return ClutchAnalysisResult(
        shots=shots,
        player_aggregates=aggregates,
        leaderboard=board,
        playoff_aggregates=playoff_aggregates,
        playoff_leaderboard=playoff_board,
        season_summary=seasons,
        significance_results=results,
        significance=tester.to_frame(results),
        n_events=len(events),
        n_unclassified=preprocessor.n_unclassified,
    )
