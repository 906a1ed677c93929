"""
Data models for analyzer settings and published features using Pydantic.
"""

from .features import AnalyzerSettings, FeatureSnapshot

__all__ = [
    "AnalyzerSettings",
    "FeatureSnapshot",
]
