"""
Shared fixtures: raw play-by-play rows in the on-disk season file layout.
"""
from pathlib import Path
from typing import Callable, Dict, List

import numpy as np
import pandas as pd
import pytest

# Superset of the columns the loader needs, in the order the season files use
RAW_COLUMNS = [
    "URL", "GameType", "Location", "Date", "Time", "WinningTeam", "Quarter", "SecLeft",
    "AwayTeam", "AwayPlay", "AwayScore", "HomeTeam", "HomePlay", "HomeScore",
    "Shooter", "ShotType", "ShotOutcome", "ShotDist", "FreeThrowShooter",
    "FreeThrowOutcome", "FreeThrowNum",
]

PLAYERS = [
    "S. Curry - curryst01",
    "L. James - jamesle01",
    "K. Durant - duranke01",
    "D. Lillard - lillada01",
]


def raw_event(**overrides) -> Dict:
    """One raw event row with neutral defaults (a non-shot, non-clutch play)."""
    row = {
        "URL": "/boxscores/201611100GSW.html",
        "GameType": "regular",
        "Location": "Oracle Arena",
        "Date": "November 10 2016",
        "Time": "12:00",
        "WinningTeam": "GSW",
        "Quarter": 1,
        "SecLeft": 600,
        "AwayTeam": "LAL",
        "AwayPlay": None,
        "AwayScore": 10,
        "HomeTeam": "GSW",
        "HomePlay": None,
        "HomeScore": 12,
        "Shooter": None,
        "ShotType": None,
        "ShotOutcome": None,
        "ShotDist": None,
        "FreeThrowShooter": None,
        "FreeThrowOutcome": None,
        "FreeThrowNum": None,
    }
    row.update(overrides)
    return row


def synthetic_events(n: int = 800, seed: int = 7, dates: List[str] | None = None) -> pd.DataFrame:
    """Random but reproducible raw events covering every tier and both game types."""
    rng = np.random.default_rng(seed)
    dates = dates or ["December 1 2016", "April 20 2017", "January 15 2018", "May 10 2018"]
    rows = []
    for _ in range(n):
        home = int(rng.integers(60, 120))
        away = home + int(rng.integers(-14, 15))
        date = dates[int(rng.integers(len(dates)))]
        common = dict(
            Date=date,
            GameType="playoff" if date.startswith(("April", "May")) else "regular",
            Quarter=int(rng.choice([1, 2, 3, 4, 4, 4, 5])),
            SecLeft=int(rng.integers(0, 721)),
            HomeScore=home,
            AwayScore=away,
        )
        kind = rng.random()
        outcome = "make" if rng.random() < 0.45 else "miss"
        if kind < 0.7:
            rows.append(raw_event(
                Shooter=PLAYERS[int(rng.integers(len(PLAYERS)))],
                ShotType=str(rng.choice(["2-pt jump shot", "3-pt jump shot", "2-pt layup"])),
                ShotOutcome=outcome,
                **common,
            ))
        elif kind < 0.85:
            rows.append(raw_event(
                FreeThrowShooter=PLAYERS[int(rng.integers(len(PLAYERS)))],
                FreeThrowOutcome=outcome,
                **common,
            ))
        else:
            rows.append(raw_event(AwayPlay="Timeout", **common))
    return pd.DataFrame(rows, columns=RAW_COLUMNS)


@pytest.fixture
def write_season(tmp_path: Path) -> Callable[..., Path]:
    """Write raw rows (list of dicts or a DataFrame) to a CSV and return its path."""
    def _write(name: str, rows, columns: List[str] | None = None) -> Path:
        df = rows if isinstance(rows, pd.DataFrame) else pd.DataFrame(rows, columns=columns or RAW_COLUMNS)
        path = tmp_path / name
        df.to_csv(path, index=False)
        return path
    return _write


@pytest.fixture
def synthetic_files(write_season) -> List[Path]:
    return [
        write_season("NBA_PBP_2016-17.csv", synthetic_events(seed=1, dates=["December 1 2016", "April 20 2017"])),
        write_season("NBA_PBP_2017-18.csv", synthetic_events(seed=2, dates=["January 15 2018", "May 10 2018"])),
    ]
