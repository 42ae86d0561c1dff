"""
Data module for NBA clutch analysis.
"""

from .feature_engineering import FeatureEngineer
from .loader import DataLoader
from .preprocessor import DataPreprocessor

__all__ = ['DataLoader', 'DataPreprocessor', 'FeatureEngineer']
