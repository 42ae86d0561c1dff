"""
EventSchema – canonical column lists for ingestion & derived shots.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

import pandas as pd

from ..config import config


@dataclass
class EventSchema:
    """Container class mapping raw play-by-play columns to canonical names."""
    column_map: Dict[str, str] = field(default_factory=lambda: dict(config.COLUMN_MAP))
    derived:    List[str]      = field(default_factory=lambda: list(config.COLUMN_LISTS["derived"]))

    # ───── convenience helpers ────────────────────────────────────
    @property
    def raw_columns(self) -> List[str]:
        """Raw header names to project from every season file."""
        return list(self.column_map)

    @property
    def canonical_columns(self) -> List[str]:
        """Event columns after renaming, in file order."""
        return list(self.column_map.values())

    def missing_raw(self, header: Iterable[str]) -> List[str]:
        """Required raw columns absent from *header*."""
        present = set(header)
        return [c for c in self.raw_columns if c not in present]

    def assert_in_dataframe(self, df: pd.DataFrame) -> None:
        """Raise if any canonical or derived column is missing from df.columns."""
        missing = [c for c in self.canonical_columns + self.derived
                   if c not in df.columns]
        if missing:
            raise ValueError(f"EventSchema mismatch – missing cols: {missing}")
