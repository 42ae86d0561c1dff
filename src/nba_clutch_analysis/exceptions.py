"""Error taxonomy for the clutch analysis pipeline."""


class ClutchAnalysisError(Exception):
    """Base class for every error raised by this package."""


class IngestionError(ClutchAnalysisError, ValueError):
    """A season file is missing, unreadable, or lacks a required column."""


class ClassificationError(ClutchAnalysisError, ValueError):
    """A game date falls outside every configured season boundary."""


class ModelFitError(ClutchAnalysisError, RuntimeError):
    """A per-player logistic fit is degenerate or did not converge."""

    def __init__(self, player: str, reason: str):
        self.player = player
        self.reason = reason
        super().__init__(f"{player}: {reason}")
