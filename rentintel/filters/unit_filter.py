from typing import Iterable, List, Optional

from loguru import logger

from rentintel.filters.soft_filters import RentPercentileProxyStrategy, SoftFilterStrategy
from rentintel.models import FilterCriteria, UnitRecord
from rentintel.parsing import parse_bedroom_count, parse_number

BEDROOM_LABEL_COUNTS = {"Studio": 0, "1BR": 1, "2BR": 2, "3BR": 3}


def unit_bedroom_count(unit: UnitRecord) -> int:
    return parse_bedroom_count(unit.bedrooms, unit.unit_type)


def matches_bedroom_types(unit: UnitRecord, bedroom_types: Iterable[str]) -> bool:
    count = unit_bedroom_count(unit)
    for label in bedroom_types:
        if BEDROOM_LABEL_COUNTS.get(label) == count:
            return True
        if label == "Studio" and "studio" in (unit.unit_type or "").lower():
            return True
    return False


def in_range(value, lower: float, upper: float) -> bool:
    """Range check that keeps missing or unparsable values."""
    number = parse_number(value)
    if number is None:
        return True
    return lower <= number <= upper


def is_available_now(status: Optional[str]) -> bool:
    if not status:
        return False
    status = status.lower().strip()
    return status == "now" or "available" in status or "immediate" in status


def matches_availability(unit: UnitRecord, availability: str) -> bool:
    """
    Availability tiers widen progressively: "now" needs an available status,
    "30days" excludes only explicitly occupied units, "60days" keeps everything.
    """
    if availability == "60days":
        return True
    if availability == "30days":
        if not unit.status:
            return False
        return "occupied" not in unit.status.lower()
    return is_available_now(unit.status)


def filter_units(
    units: Iterable[UnitRecord],
    criteria: FilterCriteria,
    soft_filter: Optional[SoftFilterStrategy] = None,
) -> List[UnitRecord]:
    """
    Apply filter criteria to a unit inventory.

    Hard filters (bedrooms, price, square footage, availability) run first;
    amenity, lease, floor and renovation criteria are delegated to
    `soft_filter` (rent-based proxies by default). Missing or unparsable rent
    and square footage never exclude a unit. The input is not modified.

    Args:
        units (Iterable[UnitRecord]): Units from every property in the comparison.
        criteria (FilterCriteria): Filter to apply.
        soft_filter (Optional[SoftFilterStrategy]): Strategy for soft criteria.

    Returns:
        List[UnitRecord]: The retained units, in input order.
    """
    remaining = list(units)
    logger.debug(f"Filtering {len(remaining)} units")

    if criteria.bedroom_types:
        before = len(remaining)
        remaining = [u for u in remaining if matches_bedroom_types(u, criteria.bedroom_types)]
        logger.debug(f"After bedroom filter: {len(remaining)} units (filtered out {before - len(remaining)})")

    price = criteria.price_range
    before = len(remaining)
    remaining = [u for u in remaining if in_range(u.rent, price.min, price.max)]
    logger.debug(
        f"After price filter ({price.min}-{price.max}): {len(remaining)} units "
        f"(filtered out {before - len(remaining)})"
    )

    sq_ft = criteria.square_footage_range
    remaining = [u for u in remaining if in_range(u.square_footage, sq_ft.min, sq_ft.max)]

    before = len(remaining)
    remaining = [u for u in remaining if matches_availability(u, criteria.availability)]
    logger.debug(
        f"After availability filter ({criteria.availability}): {len(remaining)} units "
        f"(filtered out {before - len(remaining)})"
    )

    strategy = soft_filter or RentPercentileProxyStrategy()
    return strategy.apply(remaining, criteria)
