"""Unit inventory filtering."""
from rentintel.filters.soft_filters import (
    PassThroughStrategy,
    RentPercentileProxyStrategy,
    SoftFilterStrategy,
)
from rentintel.filters.unit_filter import filter_units, is_available_now

__all__ = [
    "filter_units",
    "is_available_now",
    "SoftFilterStrategy",
    "PassThroughStrategy",
    "RentPercentileProxyStrategy",
]
