"""
Feature engineering module for NBA clutch analysis.
Contains the per-shot classification rules (season, clutch, outcome, weight)
both as scalar functions and as DataFrame transforms built on the same rules.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..config import ClutchTier, config
from ..exceptions import ClassificationError

logger = logging.getLogger(__name__)

_LEADING_POINTS = re.compile(r"^\s*(\d+)")
_VALID_WEIGHTS = (1, 2, 3)


def _is_missing(value: Any) -> bool:
    return value is None or (not isinstance(value, str) and pd.isna(value))


# ---------------------------------------------------------------------
# Scalar rules
# ---------------------------------------------------------------------
def is_shot_attempt(shooter: Any, free_throw_shooter: Any) -> bool:
    """An event is a shot attempt iff either shooter field is present."""
    return not _is_missing(shooter) or not _is_missing(free_throw_shooter)


def season_intervals(
    boundaries: Sequence[Tuple[str, str]] | None = None,
    season_start: str | None = None,
) -> List[Tuple[str, pd.Timestamp, pd.Timestamp]]:
    """Expand cutoff dates into (label, exclusive lower, inclusive upper) triples."""
    boundaries = config.SEASON_BOUNDARIES if boundaries is None else boundaries
    lower = pd.Timestamp(config.SEASON_START if season_start is None else season_start)
    intervals = []
    for label, cutoff in boundaries:
        upper = pd.Timestamp(cutoff)
        if upper <= lower:
            raise ValueError(f"Season boundaries must be increasing: {label} ends {cutoff}")
        intervals.append((label, lower, upper))
        lower = upper
    return intervals


def parse_game_date(value: Any) -> Optional[pd.Timestamp]:
    """Parse a free-text date such as 'October 27 2015'; None if unparseable."""
    if _is_missing(value):
        return None
    ts = pd.to_datetime(value, errors="coerce")
    return None if pd.isna(ts) else pd.Timestamp(ts)


def classify_season(
    date: Any,
    boundaries: Sequence[Tuple[str, str]] | None = None,
    season_start: str | None = None,
    *,
    strict: bool = False,
) -> Optional[str]:
    """
    Map a game date to its season label.

    Dates on a cutoff belong to the earlier season. Dates outside every
    interval return None, or raise ClassificationError when *strict*.
    """
    ts = date if isinstance(date, pd.Timestamp) else parse_game_date(date)
    if ts is not None and not pd.isna(ts):
        for label, lower, upper in season_intervals(boundaries, season_start):
            if lower < ts <= upper:
                return label
    if strict:
        raise ClassificationError(f"Date {date!r} is outside every season boundary")
    return None


def score_differential(home_score: Any, away_score: Any) -> float:
    """Absolute score gap before the play."""
    return abs(home_score - away_score)


def clutch_tier(
    quarter: Any,
    seconds_left: Any,
    differential: Any,
    tiers: Sequence[ClutchTier] | None = None,
    clutch_quarter: int | None = None,
) -> int:
    """Number of the first matching clutch tier, or 0 when the shot is not clutch."""
    tiers = config.CLUTCH_TIERS if tiers is None else tiers
    clutch_quarter = config.CLUTCH_QUARTER if clutch_quarter is None else clutch_quarter
    if any(_is_missing(v) for v in (quarter, seconds_left, differential)):
        return 0
    if quarter != clutch_quarter:
        return 0
    for tier in tiers:
        if tier.contains(seconds_left, differential):
            return tier.tier
    return 0


def is_clutch(quarter: Any, seconds_left: Any, differential: Any, **kwargs) -> bool:
    return clutch_tier(quarter, seconds_left, differential, **kwargs) > 0


def is_made(shot_outcome: Any, free_throw_outcome: Any) -> bool:
    """True iff either outcome field records a make; nulls count as misses."""
    return shot_outcome == config.MAKE_VALUE or free_throw_outcome == config.MAKE_VALUE


def parse_shot_weight(shot_type: Any) -> int:
    """
    Point value from the leading digit of the shot type ('3PT Jump Shot' → 3).

    Free throws (null shot type) and anything unparseable weigh 1.
    """
    if _is_missing(shot_type):
        return 1
    match = _LEADING_POINTS.match(str(shot_type))
    if match is None:
        return 1
    points = int(match.group(1))
    return points if points in _VALID_WEIGHTS else 1


@dataclass(frozen=True)
class ShotClassification:
    """Derived labels of one shot; season is None when unclassified."""
    season: Optional[str]
    score_differential: float
    clutch_tier: int
    clutch: bool


def classify_shot(
    date: Any,
    quarter: Any,
    seconds_left: Any,
    home_score: Any,
    away_score: Any,
    *,
    boundaries: Sequence[Tuple[str, str]] | None = None,
    tiers: Sequence[ClutchTier] | None = None,
) -> ShotClassification:
    """Season and clutch labels for a single event, with no shared state."""
    diff = score_differential(home_score, away_score)
    tier = clutch_tier(quarter, seconds_left, diff, tiers=tiers)
    return ShotClassification(
        season=classify_season(date, boundaries),
        score_differential=diff,
        clutch_tier=tier,
        clutch=tier > 0,
    )


def split_player_label(label: Any) -> Tuple[Optional[str], Optional[str]]:
    """Split 'S. Curry - curryst01' into ('S. Curry', 'curryst01')."""
    if _is_missing(label):
        return None, None
    name, sep, player_id = str(label).rpartition(" - ")
    if not sep:
        return str(label).strip(), None
    return name.strip(), player_id.strip()


class FeatureEngineer:
    """Vectorised versions of the shot rules; every step returns a new frame."""

    def __init__(
        self,
        boundaries: Sequence[Tuple[str, str]] | None = None,
        season_start: str | None = None,
        tiers: Sequence[ClutchTier] | None = None,
        clutch_quarter: int | None = None,
    ):
        self.boundaries = list(config.SEASON_BOUNDARIES if boundaries is None else boundaries)
        self.season_start = config.SEASON_START if season_start is None else season_start
        self.tiers = list(config.CLUTCH_TIERS if tiers is None else tiers)
        self.clutch_quarter = config.CLUTCH_QUARTER if clutch_quarter is None else clutch_quarter

    # ------------------------------------------------------------------
    # Season labels
    # ------------------------------------------------------------------
    def create_season_features(self, df: pd.DataFrame) -> pd.DataFrame:
        """Adds game_date (NaT if unparseable) and season (None if unclassified)."""
        df = df.copy()
        df["game_date"] = pd.to_datetime(df["date"], format="mixed", errors="coerce")

        season = pd.Series(None, index=df.index, dtype="object")
        for label, lower, upper in season_intervals(self.boundaries, self.season_start):
            in_season = (df["game_date"] > lower) & (df["game_date"] <= upper)
            season = season.mask(in_season, label)
        df["season"] = season

        n_unclassified = int(df["season"].isna().sum())
        if n_unclassified:
            logger.warning("%d shots fall outside every season boundary", n_unclassified)
        logger.info("Created season labels for %d shots", len(df))
        return df

    # ------------------------------------------------------------------
    # Clutch labels
    # ------------------------------------------------------------------
    def create_clutch_features(self, df: pd.DataFrame) -> pd.DataFrame:
        """Adds score_differential, clutch_tier (0 = none) and clutch."""
        df = df.copy()
        df["score_differential"] = (df["home_score"] - df["away_score"]).abs()

        seconds = df["seconds_left"]
        diff = df["score_differential"]
        in_quarter = df["quarter"] == self.clutch_quarter

        conditions = []
        for tier in self.tiers:
            window = seconds <= tier.max_seconds
            if tier.min_seconds is not None:
                window &= seconds > tier.min_seconds
            conditions.append(in_quarter & window & (diff <= tier.max_differential))

        # np.select takes the first true condition, matching tier precedence
        df["clutch_tier"] = np.select(conditions, [t.tier for t in self.tiers], default=0).astype(int)
        df["clutch"] = df["clutch_tier"] > 0
        logger.info("Created clutch flags: %d of %d shots clutch", int(df["clutch"].sum()), len(df))
        return df

    # ------------------------------------------------------------------
    # Outcome / weight
    # ------------------------------------------------------------------
    def create_outcome_features(self, df: pd.DataFrame) -> pd.DataFrame:
        """Adds made (bool, never null), weight (1/2/3) and fills shot_type."""
        df = df.copy()
        df["made"] = (
            df["shot_outcome"].eq(config.MAKE_VALUE) | df["free_throw_outcome"].eq(config.MAKE_VALUE)
        ).astype(bool)

        points = pd.to_numeric(
            df["shot_type"].astype("string").str.extract(_LEADING_POINTS.pattern, expand=False),
            errors="coerce",
        ).astype(float)
        df["weight"] = points.where(points.isin(_VALID_WEIGHTS), 1).astype(int)
        df["shot_type"] = df["shot_type"].fillna(config.FREE_THROW_SHOT_TYPE)
        if len(df):
            logger.info("Created outcome features: %.1f%% made", 100 * df["made"].mean())
        return df

    def create_player_features(self, df: pd.DataFrame) -> pd.DataFrame:
        """Splits the shooter label into player_name and player_id."""
        df = df.copy()
        labels = df["shooter"].astype("string")
        # greedy name group splits on the last separator, like split_player_label
        parts = labels.str.extract(r"^(?P<name>.*) - (?P<id>.*)$")
        df["player_name"] = parts["name"].fillna(labels).str.strip()
        df["player_id"] = parts["id"].str.strip()
        return df

    # ------------------------------------------------------------------
    # Orchestration: build *all* features
    # ------------------------------------------------------------------
    def create_all_features(self, df: pd.DataFrame) -> pd.DataFrame:
        df = (
            df.pipe(self.create_season_features)
              .pipe(self.create_clutch_features)
              .pipe(self.create_outcome_features)
              .pipe(self.create_player_features)
        )
        logger.info("All shot features created, dataset shape: %s", df.shape)
        return df
