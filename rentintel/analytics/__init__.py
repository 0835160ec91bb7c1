"""Competitive analytics over filtered unit inventories."""
from rentintel.analytics.competitive_analysis import (
    analyze_units,
    empty_analysis,
    generate_filtered_analysis,
    percentile_rank,
)

__all__ = ["analyze_units", "empty_analysis", "generate_filtered_analysis", "percentile_rank"]
