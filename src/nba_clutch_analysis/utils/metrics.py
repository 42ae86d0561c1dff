"""
Metrics utilities for NBA clutch analysis.
"""
from __future__ import annotations

import logging
from typing import Optional

import numpy as np
import pandas as pd
from scipy import stats

from ..config import config

logger = logging.getLogger(__name__)

AGGREGATE_COLUMNS = [
    "clutch_attempts", "clutch_makes", "non_clutch_attempts", "non_clutch_makes",
    "total_attempts", "total_makes",
    "clutch_make_rate", "non_clutch_make_rate", "total_make_rate", "make_rate_diff",
    "clutch_points", "non_clutch_points",
    "clutch_points_per_attempt", "non_clutch_points_per_attempt",
]


def _rate(numerator: pd.Series, attempts: pd.Series) -> pd.Series:
    """numerator / attempts, NaN where there were no attempts."""
    return numerator / attempts.where(attempts > 0)


class ClutchAggregator:
    """Per-player clutch vs non-clutch shooting tables."""

    def __init__(self, player_col: str = "shooter"):
        self.player_col = player_col

    def aggregate_players(self, shots: pd.DataFrame) -> pd.DataFrame:
        """
        Attempts, makes and make rates per shooter, split by the clutch flag.

        Rows without a shooter are excluded. A player with no shots in one
        partition keeps zero counts there and a NaN (undefined) make rate,
        so make_rate_diff is NaN as well.

        Args:
            shots: Derived shot DataFrame with clutch, made and weight columns

        Returns:
            DataFrame indexed by shooter with AGGREGATE_COLUMNS
        """
        named = shots[shots[self.player_col].notna()]
        dropped = len(shots) - len(named)
        if dropped:
            logger.info("Excluded %d shots without a shooter from player aggregates", dropped)
        if named.empty:
            return pd.DataFrame(columns=AGGREGATE_COLUMNS, index=pd.Index([], name=self.player_col))

        work = pd.DataFrame({
            self.player_col: named[self.player_col],
            "clutch": named["clutch"].astype(bool),
            "made": named["made"].astype(int),
            "points": named["made"].astype(int) * named["weight"],
        })
        grouped = (
            work.groupby([self.player_col, "clutch"])
            .agg(attempts=("made", "size"), makes=("made", "sum"), points=("points", "sum"))
            .unstack("clutch", fill_value=0)
        )
        full_columns = pd.MultiIndex.from_product([["attempts", "makes", "points"], [True, False]])
        grouped = grouped.reindex(columns=full_columns, fill_value=0)

        agg = pd.DataFrame(index=grouped.index)
        agg["clutch_attempts"] = grouped[("attempts", True)].astype(int)
        agg["clutch_makes"] = grouped[("makes", True)].astype(int)
        agg["non_clutch_attempts"] = grouped[("attempts", False)].astype(int)
        agg["non_clutch_makes"] = grouped[("makes", False)].astype(int)
        agg["total_attempts"] = agg["clutch_attempts"] + agg["non_clutch_attempts"]
        agg["total_makes"] = agg["clutch_makes"] + agg["non_clutch_makes"]

        agg["clutch_make_rate"] = _rate(agg["clutch_makes"], agg["clutch_attempts"])
        agg["non_clutch_make_rate"] = _rate(agg["non_clutch_makes"], agg["non_clutch_attempts"])
        agg["total_make_rate"] = _rate(agg["total_makes"], agg["total_attempts"])
        agg["make_rate_diff"] = agg["clutch_make_rate"] - agg["non_clutch_make_rate"]

        agg["clutch_points"] = grouped[("points", True)].astype(int)
        agg["non_clutch_points"] = grouped[("points", False)].astype(int)
        agg["clutch_points_per_attempt"] = _rate(agg["clutch_points"], agg["clutch_attempts"])
        agg["non_clutch_points_per_attempt"] = _rate(agg["non_clutch_points"], agg["non_clutch_attempts"])

        agg.index.name = self.player_col
        undefined = int(agg["make_rate_diff"].isna().sum())
        logger.info("Aggregated %d players (%d with an undefined make-rate differential)",
                    len(agg), undefined)
        return agg

    def leaderboard(self, aggregates: pd.DataFrame, k: Optional[int] = None) -> pd.DataFrame:
        """
        Top-K players by total attempts, presented by make-rate differential.

        Ties on attempts are broken by shooter so the slice is deterministic;
        players with an undefined differential sort last.
        """
        k = config.TOP_K if k is None else k
        by_volume = (
            aggregates.reset_index()
            .sort_values(["total_attempts", self.player_col], ascending=[False, True], kind="mergesort")
            .head(k)
        )
        board = by_volume.sort_values("make_rate_diff", ascending=False, kind="mergesort", na_position="last")
        board = board.reset_index(drop=True)
        board.insert(0, "rank", np.arange(1, len(board) + 1))
        return board

    def season_summary(self, shots: pd.DataFrame) -> pd.DataFrame:
        """
        League-wide clutch vs non-clutch make rates per season.

        Adds a chi-square test of independence between the clutch flag and
        the outcome for each season (NaN when a partition is empty).
        """
        records = []
        for season, grp in shots.groupby("season", sort=True):
            clutch = grp[grp["clutch"].astype(bool)]
            non_clutch = grp[~grp["clutch"].astype(bool)]
            record = {
                "season": season,
                "clutch_attempts": len(clutch),
                "clutch_makes": int(clutch["made"].sum()),
                "non_clutch_attempts": len(non_clutch),
                "non_clutch_makes": int(non_clutch["made"].sum()),
            }
            table = np.array([
                [record["clutch_makes"], record["clutch_attempts"] - record["clutch_makes"]],
                [record["non_clutch_makes"], record["non_clutch_attempts"] - record["non_clutch_makes"]],
            ])
            if (table.sum(axis=0) > 0).all() and (table.sum(axis=1) > 0).all():
                chi2, p_value, _, _ = stats.chi2_contingency(table)
            else:
                chi2, p_value = np.nan, np.nan
            record.update({"chi2": chi2, "p_value": p_value})
            records.append(record)

        summary = pd.DataFrame(records, columns=[
            "season", "clutch_attempts", "clutch_makes", "non_clutch_attempts",
            "non_clutch_makes", "chi2", "p_value",
        ])
        summary["clutch_make_rate"] = _rate(summary["clutch_makes"], summary["clutch_attempts"])
        summary["non_clutch_make_rate"] = _rate(summary["non_clutch_makes"], summary["non_clutch_attempts"])
        summary["make_rate_diff"] = summary["clutch_make_rate"] - summary["non_clutch_make_rate"]
        return summary
