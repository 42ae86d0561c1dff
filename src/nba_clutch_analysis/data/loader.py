"""
Data loading module for NBA clutch analysis.
Handles loading and unioning the per-season play-by-play files.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

import pandas as pd

from ..config import config
from ..exceptions import IngestionError
from .feature_schema import EventSchema

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class DataLoader:
    """Handles loading and concatenating per-season event files."""

    def __init__(self, schema: Optional[EventSchema] = None, sep: Optional[str] = None):
        """Initialize the data loader."""
        self.schema = schema or EventSchema()
        self.sep = sep or config.CSV_DELIMITER
        self.events_df: pd.DataFrame | None = None

    def _read_header(self, filepath: Path) -> List[str]:
        try:
            return pd.read_csv(filepath, sep=self.sep, nrows=0).columns.tolist()
        except FileNotFoundError as e:
            raise IngestionError(f"Season file not found: {filepath}") from e
        except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError, OSError) as e:
            raise IngestionError(f"Season file unreadable: {filepath} ({e})") from e

    def load_season(self, filepath: PathLike) -> pd.DataFrame:
        """
        Load one season file, keeping only the required columns.

        Args:
            filepath: Path to a delimited play-by-play file

        Returns:
            DataFrame with canonical column names plus ``source_file``

        Raises:
            IngestionError: if the file is missing/unreadable or a column is absent
        """
        filepath = Path(filepath)
        header = self._read_header(filepath)
        missing = self.schema.missing_raw(header)
        if missing:
            raise IngestionError(f"{filepath.name} is missing required columns: {missing}")

        try:
            df = pd.read_csv(filepath, sep=self.sep, usecols=self.schema.raw_columns)
        except (pd.errors.ParserError, UnicodeDecodeError, ValueError, OSError) as e:
            raise IngestionError(f"Season file unreadable: {filepath} ({e})") from e

        df = df[self.schema.raw_columns].rename(columns=self.schema.column_map)
        df["source_file"] = filepath.name
        logger.info("Loaded %d events from %s", len(df), filepath.name)
        return df

    def load_seasons(self, filepaths: Sequence[PathLike]) -> pd.DataFrame:
        """
        Load and union several season files, preserving file-then-row order.

        No deduplication is performed.
        """
        if not filepaths:
            raise IngestionError("No season files given")
        frames = [self.load_season(fp) for fp in filepaths]
        self.events_df = pd.concat(frames, ignore_index=True)
        logger.info("Unioned %d files → %d events", len(frames), len(self.events_df))
        return self.events_df

    def load_complete_dataset(self, raw_dir: Optional[PathLike] = None) -> pd.DataFrame:
        """
        Load every configured season file in one call.

        Returns:
            Complete event DataFrame
        """
        return self.load_seasons(config.season_files(raw_dir))

    def get_data_summary(self) -> dict:
        """
        Get summary statistics of loaded data.

        Returns:
            Dictionary with data summary information
        """
        if self.events_df is None:
            raise ValueError("No data loaded. Call load_seasons() first.")

        df = self.events_df
        dates = pd.to_datetime(df["date"], format="mixed", errors="coerce").dropna()
        return {
            "total_events": len(df),
            "events_per_file": df["source_file"].value_counts(sort=False).to_dict(),
            "game_types": df["game_type"].value_counts().to_dict(),
            "shot_events": int((df["shooter"].notna() | df["free_throw_shooter"].notna()).sum()),
            "date_range": (dates.min(), dates.max()) if len(dates) else (None, None),
        }


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s │ %(levelname)s │ %(message)s")
    loader = DataLoader()
    try:
        events = loader.load_complete_dataset()
        print(events.head())
        print(loader.get_data_summary())
    except IngestionError as e:
        print(f"------------- Error loading seasons: {e}")
        print("Note: This is expected if data files are not present.")
