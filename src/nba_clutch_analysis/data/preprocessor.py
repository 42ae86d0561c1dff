"""
Data preprocessing module for NBA clutch analysis.
Handles filtering the event table down to labelled shot attempts.
"""
from __future__ import annotations

import logging
from typing import List, Optional, cast

import pandas as pd

from ..config import config
from ..exceptions import ClassificationError
from .feature_engineering import FeatureEngineer
from .feature_schema import EventSchema

logger = logging.getLogger(__name__)

_UNCLASSIFIED_POLICIES = ("drop", "bucket", "raise")


class DataPreprocessor:
    """Handles shot filtering, feature engineering and season policy."""

    def __init__(self, feature_engineer: Optional[FeatureEngineer] = None):
        """Create a preprocessor with defaults from central config."""
        self.UNCLASSIFIED_SEASON_POLICY: str | None = None
        self.GAME_TYPES: list[str] | None = None
        self.SEASONS: list[str] | None = None

        # Runtime artifacts
        self.feature_engineer = feature_engineer or FeatureEngineer()
        self.schema = EventSchema()
        self.raw_data: pd.DataFrame | None = None
        self.processed_data: pd.DataFrame | None = None
        self.n_unclassified: int = 0

        self.update_config(
            unclassified_season_policy=config.UNCLASSIFIED_SEASON_POLICY,
            game_types=None,
            seasons=None,
        )

    def update_config(self,
                      unclassified_season_policy: Optional[str] = None,
                      game_types: Optional[List[str]] = None,
                      seasons: Optional[List[str]] = None):
        """
        Update preprocessing configuration.

        Args:
            unclassified_season_policy: 'drop', 'bucket' or 'raise'
            game_types: Game types to keep (None keeps every type)
            seasons: Season labels to keep (None keeps every season)
        """
        if unclassified_season_policy is not None:
            if unclassified_season_policy not in _UNCLASSIFIED_POLICIES:
                raise ValueError(
                    f"unclassified_season_policy must be one of {_UNCLASSIFIED_POLICIES}, "
                    f"got {unclassified_season_policy!r}"
                )
            self.UNCLASSIFIED_SEASON_POLICY = unclassified_season_policy
        if game_types is not None:
            self.GAME_TYPES = list(game_types)
        if seasons is not None:
            self.SEASONS = list(seasons)

    def filter_shot_attempts(self, df: pd.DataFrame) -> pd.DataFrame:
        """Keep events with a shooter or a free-throw shooter, in original order."""
        mask = df["shooter"].notna() | df["free_throw_shooter"].notna()
        filtered_df = cast(pd.DataFrame, df[mask].copy())
        logger.info("Filtered to shot attempts: kept %d of %d events", len(filtered_df), len(df))
        return filtered_df

    def apply_season_policy(self, df: pd.DataFrame) -> pd.DataFrame:
        """Drop, bucket or reject shots whose season is unclassified."""
        unclassified = df["season"].isna()
        self.n_unclassified = int(unclassified.sum())
        if not self.n_unclassified:
            return df

        policy = self.UNCLASSIFIED_SEASON_POLICY
        if policy == "raise":
            dates = df.loc[unclassified, "date"].drop_duplicates().head(5).tolist()
            raise ClassificationError(
                f"{self.n_unclassified} shots fall outside every season boundary, e.g. {dates}"
            )
        if policy == "bucket":
            df = df.copy()
            df["season"] = df["season"].fillna(config.UNCLASSIFIED_LABEL)
            logger.warning("Bucketed %d unclassified shots as %r",
                           self.n_unclassified, config.UNCLASSIFIED_LABEL)
            return df

        logger.warning("Dropped %d shots with an unclassified season", self.n_unclassified)
        return cast(pd.DataFrame, df[~unclassified].copy())

    def filter_game_type(self, df: pd.DataFrame, game_type: str | List[str]) -> pd.DataFrame:
        """Keep only shots from the given game type(s), e.g. 'playoff'."""
        game_types = [game_type] if isinstance(game_type, str) else list(game_type)
        filtered_df = cast(pd.DataFrame, df[df["game_type"].isin(game_types)].copy())
        logger.info("Filtered to %s games: %d shots", game_types, len(filtered_df))
        return filtered_df

    def filter_seasons(self, df: pd.DataFrame, seasons: List[str]) -> pd.DataFrame:
        filtered_df = cast(pd.DataFrame, df[df["season"].isin(seasons)].copy())
        logger.info("Filtered to seasons %s: %d shots", seasons, len(filtered_df))
        return filtered_df

    def preprocess_slice(self, raw_df: pd.DataFrame) -> pd.DataFrame:
        """Run filters and feature engineering on an event table without storing state."""
        df = self.filter_shot_attempts(raw_df)
        df = self.feature_engineer.create_all_features(df)
        df = self.apply_season_policy(df)
        if self.GAME_TYPES:
            df = self.filter_game_type(df, self.GAME_TYPES)
        if self.SEASONS:
            df = self.filter_seasons(df, self.SEASONS)
        self.schema.assert_in_dataframe(df)
        logger.info("Preprocessed %d shots (%d clutch)", len(df), int(df["clutch"].sum()))
        return df

    def preprocess_complete(self, raw_df: pd.DataFrame, *, inplace: bool = True) -> pd.DataFrame:
        """
        Complete preprocessing pipeline.

        Args:
            raw_df: Unioned event DataFrame from DataLoader
            inplace: If True (default), keep raw and processed frames on the instance

        Returns:
            Derived shot DataFrame ready for aggregation
        """
        processed = self.preprocess_slice(raw_df)
        if inplace:
            self.raw_data = raw_df
            self.processed_data = processed
        return processed
