"""
Per-player logistic significance test of clutch vs non-clutch shooting.

Each player's makes are regressed on the clutch flag alone:

    logit P(made) = β0 + β1 · clutch

fitted by IRLS on that player's own shots. The Wald p-value of β1 says
whether the player shoots differently in the clutch; McFadden's pseudo-R²
(1 − llf / llnull) says how much the flag explains.
"""
from __future__ import annotations

import logging
import math
import warnings
from dataclasses import asdict, dataclass
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
import statsmodels.api as sm
from joblib import Parallel, delayed
from statsmodels.tools.sm_exceptions import ConvergenceWarning, PerfectSeparationError

from ..config import config
from ..exceptions import ModelFitError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignificanceResult:
    """Outcome of one player's fit; statistics are NaN when the fit is undefined."""
    player: str
    p_value: float
    pseudo_r2: float
    coefficient: float = math.nan
    n_shots: int = 0
    n_clutch: int = 0
    converged: bool = False
    error: Optional[str] = None

    @property
    def is_missing(self) -> bool:
        return self.error is not None

    @classmethod
    def missing(cls, player: str, reason: str, n_shots: int = 0, n_clutch: int = 0) -> "SignificanceResult":
        return cls(player=player, p_value=math.nan, pseudo_r2=math.nan,
                   n_shots=n_shots, n_clutch=n_clutch, error=reason)


class SignificanceTester:
    """Fits the clutch logistic model independently for each player."""

    def __init__(
        self,
        player_col: str = "shooter",
        tol: Optional[float] = None,
        max_iter: Optional[int] = None,
        alpha: Optional[float] = None,
    ):
        self.player_col = player_col
        self.tol = config.LOGIT_TOL if tol is None else tol
        self.max_iter = config.LOGIT_MAX_ITER if max_iter is None else max_iter
        self.alpha = config.SIGNIFICANCE_LEVEL if alpha is None else alpha

    # ------------------------------------------------------------------
    # Single player
    # ------------------------------------------------------------------
    def _check_identifiable(self, player: str, clutch: np.ndarray, made: np.ndarray) -> None:
        """With one binary predictor the MLE exists iff every clutch cell has makes and misses."""
        if made.size == 0:
            raise ModelFitError(player, "no shots")
        if made.min() == made.max():
            raise ModelFitError(player, "no variance in outcome")
        for flag, label in ((1.0, "clutch"), (0.0, "non-clutch")):
            cell = made[clutch == flag]
            if cell.size == 0:
                raise ModelFitError(player, f"no {label} shots")
            if cell.min() == cell.max():
                raise ModelFitError(player, f"all {label} shots have the same outcome (separation)")

    def fit_player(self, shots: pd.DataFrame, player: str) -> SignificanceResult:
        """
        Fit made ~ clutch on one player's shots.

        Raises:
            ModelFitError: degenerate data, non-convergence or non-finite statistics
        """
        rows = shots[shots[self.player_col] == player]
        clutch = rows["clutch"].astype(float).to_numpy()
        made = rows["made"].astype(float).to_numpy()
        self._check_identifiable(player, clutch, made)

        exog = sm.add_constant(pd.DataFrame({"clutch": clutch}), has_constant="add")
        model = sm.GLM(made, exog, family=sm.families.Binomial())
        try:
            with warnings.catch_warnings():
                warnings.simplefilter("error", ConvergenceWarning)
                result = model.fit(method="IRLS", tol=self.tol, maxiter=self.max_iter)
        except (ConvergenceWarning, PerfectSeparationError, np.linalg.LinAlgError) as e:
            raise ModelFitError(player, f"fit failed: {e}") from e

        if not result.converged:
            raise ModelFitError(player, f"IRLS did not converge in {self.max_iter} iterations")

        p_value = float(result.pvalues["clutch"])
        pseudo_r2 = float(1.0 - result.llf / result.llnull)
        coefficient = float(result.params["clutch"])
        if not all(np.isfinite([p_value, pseudo_r2, coefficient])):
            raise ModelFitError(player, "non-finite statistics")

        return SignificanceResult(
            player=player,
            p_value=p_value,
            pseudo_r2=pseudo_r2,
            coefficient=coefficient,
            n_shots=int(made.size),
            n_clutch=int(clutch.sum()),
            converged=True,
        )

    def _fit_or_missing(self, shots: pd.DataFrame, player: str) -> SignificanceResult:
        try:
            return self.fit_player(shots, player)
        except ModelFitError as e:
            logger.warning("Significance test undefined for %s", e)
            n_clutch = int(shots["clutch"].sum()) if len(shots) else 0
            return SignificanceResult.missing(player, e.reason, n_shots=len(shots), n_clutch=n_clutch)

    # ------------------------------------------------------------------
    # Many players
    # ------------------------------------------------------------------
    def test_players(
        self,
        shots: pd.DataFrame,
        players: Sequence[str],
        n_jobs: Optional[int] = None,
    ) -> List[SignificanceResult]:
        """
        One independent fit per player, returned in the order of *players*.

        A degenerate player yields a missing result instead of aborting the run.
        """
        n_jobs = config.N_JOBS if n_jobs is None else n_jobs
        wanted = shots[shots[self.player_col].isin(players)]
        by_player = {p: grp for p, grp in wanted.groupby(self.player_col, sort=False)}
        empty = shots.iloc[0:0]

        # joblib returns results in submission order regardless of completion order
        results = Parallel(n_jobs=n_jobs)(
            delayed(self._fit_or_missing)(by_player.get(p, empty), p) for p in players
        )
        n_missing = sum(r.is_missing for r in results)
        logger.info("Tested %d players (%d undefined)", len(results), n_missing)
        return list(results)

    def to_frame(self, results: Sequence[SignificanceResult]) -> pd.DataFrame:
        """Tabulate results with a significance label; the threshold never filters rows."""
        df = pd.DataFrame([asdict(r) for r in results], columns=list(SignificanceResult.__dataclass_fields__))
        df["significant"] = np.select(
            [df["p_value"].isna(), df["p_value"] < self.alpha],
            ["undefined", "significant"],
            default="not significant",
        )
        return df
