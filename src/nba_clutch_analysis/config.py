"""
Configuration module for NBA clutch shooting analysis.
Contains all constants, paths, and configuration parameters.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ClutchTier:
    """One late-game window: (min_seconds, max_seconds] with a score-gap cap."""
    tier: int
    max_seconds: int
    min_seconds: Optional[int]      # None = no lower bound (down to 0:00)
    max_differential: int

    def contains(self, seconds_left, differential) -> bool:
        if seconds_left > self.max_seconds:
            return False
        if self.min_seconds is not None and seconds_left <= self.min_seconds:
            return False
        return differential <= self.max_differential


class Config:
    """Main configuration class for the NBA clutch analysis package."""

    # Base paths - relative to the project root so they work from any cwd
    _CONFIG_DIR = Path(__file__).parent.parent.parent  # Go up to project root
    PROJECT_ROOT = _CONFIG_DIR.resolve()

    DATA_DIR = PROJECT_ROOT / "data"
    RAW_DATA_DIR = DATA_DIR / "raw"
    OUTPUT_DIR = PROJECT_ROOT / "output"

    # Raw data files: one play-by-play file per season
    SEASON_FILE_TEMPLATE = "NBA_PBP_{season}.csv"
    CSV_DELIMITER = ","

    # Report files
    AGGREGATES_FILE = OUTPUT_DIR / "player_aggregates.csv"
    LEADERBOARD_FILE = OUTPUT_DIR / "leaderboard.csv"
    PLAYOFF_LEADERBOARD_FILE = OUTPUT_DIR / "playoff_leaderboard.csv"
    SIGNIFICANCE_FILE = OUTPUT_DIR / "significance.csv"
    SEASON_SUMMARY_FILE = OUTPUT_DIR / "season_summary.csv"

    # Raw column name -> canonical column name
    COLUMN_MAP: Dict[str, str] = {
        "Date": "date",
        "Quarter": "quarter",
        "SecLeft": "seconds_left",
        "AwayScore": "away_score",
        "HomeScore": "home_score",
        "Shooter": "shooter",
        "FreeThrowShooter": "free_throw_shooter",
        "ShotOutcome": "shot_outcome",
        "FreeThrowOutcome": "free_throw_outcome",
        "ShotType": "shot_type",
        "GameType": "game_type",
    }

    # Enumerated values in the raw files
    MAKE_VALUE = "make"
    PLAYOFF_VALUE = "playoff"
    FREE_THROW_SHOT_TYPE = "Free Throw"
    UNCLASSIFIED_LABEL = "unclassified"

    # Season boundaries: (previous cutoff, cutoff] belongs to the season label.
    # Cutoffs are the final game of each NBA Finals.
    SEASON_START = "2015-07-01"
    SEASON_BOUNDARIES: List[Tuple[str, str]] = [
        ("2015-16", "2016-06-19"),
        ("2016-17", "2017-06-12"),
        ("2017-18", "2018-06-08"),
        ("2018-19", "2019-06-13"),
        ("2019-20", "2020-10-11"),
        ("2020-21", "2021-07-20"),
    ]

    # Clutch definition (first matching tier wins)
    CLUTCH_QUARTER = 4
    CLUTCH_TIERS: List[ClutchTier] = [
        ClutchTier(tier=1, max_seconds=300, min_seconds=180, max_differential=12),
        ClutchTier(tier=2, max_seconds=180, min_seconds=60, max_differential=8),
        ClutchTier(tier=3, max_seconds=60, min_seconds=None, max_differential=5),
    ]

    # What to do with shots whose date falls outside every season: drop | bucket | raise
    UNCLASSIFIED_SEASON_POLICY = "drop"

    # Reporting parameters
    TOP_K = 30
    SIGNIFICANCE_LEVEL = 0.05   # labels results only, never filters data

    # Players to run the significance test on; empty -> leaderboard order
    SIGNIFICANCE_PLAYERS: List[str] = []

    # Logistic fit (IRLS) settings
    LOGIT_TOL = 1e-8
    LOGIT_MAX_ITER = 100
    N_JOBS = 1

    # Visualization settings
    FIGURE_SIZE = (12, 8)
    DPI = 150

    def season_files(self, raw_dir: Optional[Path] = None) -> List[Path]:
        """Default per-season input files, in chronological order."""
        raw_dir = Path(raw_dir) if raw_dir is not None else self.RAW_DATA_DIR
        return [raw_dir / self.SEASON_FILE_TEMPLATE.format(season=label)
                for label, _ in self.SEASON_BOUNDARIES]


# Create global config instance
config = Config()

# ───────────────────────── Column catalogue ─────────────────────────
# Single source of truth for column roles across modules
COLUMN_LISTS: Dict[str, List[str]] = {
    "derived": [
        "game_date", "season", "score_differential", "clutch_tier",
        "clutch", "made", "weight", "player_name", "player_id",
    ],
}

config.COLUMN_LISTS = COLUMN_LISTS


if __name__ == "__main__":
    print("NBA Clutch Analysis Configuration")
    print("=" * 40)
    print(f"Data directory: {config.RAW_DATA_DIR}")
    print(f"Season files: {[p.name for p in config.season_files()]}")
    print(f"Clutch tiers: {config.CLUTCH_TIERS}")
    print(f"Top K: {config.TOP_K}")
