"""
Pipeline Configuration

Immutable configuration dataclass for pipeline metadata.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PipelineConfig:
    """
    Immutable configuration for a pipeline.

    Attributes:
        name: Internal name used in logs (e.g., "tracked_players_sweep")
        display_name: Human-readable name
        description: What this pipeline does
        target_table: Primary table this pipeline writes to
    """

    name: str
    display_name: str
    description: str
    target_table: str

    def __post_init__(self):
        """Validate configuration."""
        if not self.name:
            raise ValueError("Pipeline name is required")
        if not self.target_table:
            raise ValueError("Pipeline target_table is required")
