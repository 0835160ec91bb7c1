"""
Soft filters for criteria the unit schema has no attribute for.

Scraped units carry no amenity, lease term, floor or renovation data. The
default strategy approximates those filters from rent (pricier units tend to
be better equipped, higher up, or recently renovated). This is a proxy, not
ground truth: a strategy backed by real attributes can replace it without
changing `filter_units`.
"""
import math
from typing import List, Optional

from loguru import logger

from rentintel.models import FilterCriteria, UnitRecord
from rentintel.parsing import parse_number

PREMIUM_AMENITIES = ("gym", "pool")
PREMIUM_AMENITY_RENT_RATIO = 0.9
TOP_FLOOR_DROP_FRACTION = 0.3
RENOVATED_RENT_RATIO = 1.1


class SoftFilterStrategy:
    """
    Base strategy: applies each soft filter that the criteria sets.

    Subclasses override the individual `filter_*` hooks; the default hooks pass
    every unit through.
    """

    def apply(self, units: List[UnitRecord], criteria: FilterCriteria) -> List[UnitRecord]:
        if criteria.amenities:
            units = self.filter_amenities(units, criteria.amenities)
        if criteria.lease_terms:
            units = self.filter_lease_terms(units, criteria.lease_terms)
        if criteria.floor_level:
            units = self.filter_floor_level(units, criteria.floor_level)
        if criteria.renovation_status:
            units = self.filter_renovation(units, criteria.renovation_status)
        return units

    def filter_amenities(self, units, amenities):
        return units

    def filter_lease_terms(self, units, lease_terms):
        return units

    def filter_floor_level(self, units, floor_level):
        return units

    def filter_renovation(self, units, renovation_status):
        return units


class PassThroughStrategy(SoftFilterStrategy):
    """Ignores soft criteria entirely."""


def _mean_known_rent(units: List[UnitRecord]) -> Optional[float]:
    rents = [r for r in (parse_number(u.rent) for u in units) if r is not None]
    if not rents:
        return None
    return sum(rents) / len(rents)


def _keep_at_or_above(units: List[UnitRecord], floor: float) -> List[UnitRecord]:
    kept = []
    for unit in units:
        rent = parse_number(unit.rent)
        # Units without rent data are kept
        if rent is None or rent >= floor:
            kept.append(unit)
    return kept


class RentPercentileProxyStrategy(SoftFilterStrategy):
    """Approximates soft criteria with rent bands."""

    def filter_amenities(self, units, amenities):
        if not any(a in PREMIUM_AMENITIES for a in amenities):
            return units
        mean_rent = _mean_known_rent(units)
        if mean_rent is None:
            return units
        kept = _keep_at_or_above(units, mean_rent * PREMIUM_AMENITY_RENT_RATIO)
        logger.debug(f"Premium amenity proxy kept {len(kept)}/{len(units)} units")
        return kept

    def filter_lease_terms(self, units, lease_terms):
        # No rent signal distinguishes lease terms well enough to filter on
        return units

    def filter_floor_level(self, units, floor_level):
        if floor_level != "top":
            return units
        priced = [(parse_number(u.rent), i) for i, u in enumerate(units)]
        priced = sorted((rent, i) for rent, i in priced if rent is not None)
        cutoff = math.floor(len(priced) * TOP_FLOOR_DROP_FRACTION)
        if cutoff == 0:
            return units
        dropped = {i for _, i in priced[:cutoff]}
        kept = [u for i, u in enumerate(units) if i not in dropped]
        logger.debug(f"Top floor proxy dropped the {cutoff} cheapest units")
        return kept

    def filter_renovation(self, units, renovation_status):
        if renovation_status != "newly_renovated":
            return units
        mean_rent = _mean_known_rent(units)
        if mean_rent is None:
            return units
        kept = _keep_at_or_above(units, mean_rent * RENOVATED_RENT_RATIO)
        logger.debug(f"Renovation proxy kept {len(kept)}/{len(units)} units")
        return kept
