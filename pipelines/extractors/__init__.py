"""
Data Extractors

Reusable components for fetching data from external sources.
"""

from pipelines.extractors.base import BaseExtractor
from pipelines.extractors.gametools import GametoolsExtractor, MAX_BATCH_SIZE

__all__ = [
    "BaseExtractor",
    "GametoolsExtractor",
    "MAX_BATCH_SIZE",
]
