"""
Base Extractor

Common base for data extractors.
"""

from core.logging import get_logger


class BaseExtractor:
    """
    Base class for data extractors.

    Extractors fetch raw data from external sources. They raise the
    core.resilience exceptions on transport failures and return raw
    payloads; shaping is left to the transformers.
    """

    def __init__(self, name: str):
        self.name = name
        self.log = get_logger(f"extractor.{name}")
