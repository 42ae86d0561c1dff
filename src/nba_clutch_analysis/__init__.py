"""
NBA Clutch Analysis Package
Tests whether NBA shooters make shots at a different rate in the clutch.
"""

__version__ = "1.0.0"
__author__ = "NBA Analytics Team"

# Import main classes for easy access
from .config import config
from .data.loader import DataLoader
from .data.preprocessor import DataPreprocessor
from .exceptions import ClassificationError, IngestionError, ModelFitError
from .models.significance import SignificanceResult, SignificanceTester
from .pipeline import ClutchAnalysisResult, run_pipeline
from .utils.metrics import ClutchAggregator

__all__ = [
    'config',
    'DataLoader',
    'DataPreprocessor',
    'ClutchAggregator',
    'SignificanceTester',
    'SignificanceResult',
    'ClutchAnalysisResult',
    'run_pipeline',
    'IngestionError',
    'ClassificationError',
    'ModelFitError',
]
