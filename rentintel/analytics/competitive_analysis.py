"""
Competitive position of a subject property's units against competitor units.

Everything here is rule-driven arithmetic over the filtered inventory. The
advantage/recommendation strings come from a fixed rule table; any narrative
generation happens downstream from `FilteredAnalysisResult.to_dict()`.
"""
from typing import Iterable, List, Optional, Sequence

from loguru import logger

from rentintel.filters import SoftFilterStrategy, filter_units, is_available_now
from rentintel.filters.unit_filter import unit_bedroom_count
from rentintel.models import (
    CompetitiveEdge,
    CompetitiveEdges,
    EdgeStatus,
    FilterCriteria,
    FilteredAnalysisResult,
    UnitComparison,
    UnitRecord,
)
from rentintel.parsing import clamp, parse_number, round_half_up

DEFAULT_PERCENTILE_RANK = 50

# Edge status bands
PRICING_EDGE_BAND = 10  # percent above/below competitor average rent
SIZE_EDGE_BAND = 50  # square feet
AVAILABILITY_EDGE_BAND = 2  # units

# Amenity tiers (proxy from percentile rank)
AMENITY_PREMIUM_PERCENTILE = 60
AMENITY_STANDARD_PERCENTILE = 40
AMENITY_PREMIUM_SCORE = 75
AMENITY_STANDARD_SCORE = 50
AMENITY_BASIC_SCORE = 25

# Pricing power bonuses
SIZE_BONUS = 10
AMENITY_BONUS = 5

# Rule table bands
PREMIUM_PERCENTILE = 75
ABOVE_AVERAGE_PERCENTILE = 50
BELOW_AVERAGE_PERCENTILE = 25
LOW_PERCENTILE = 30
LOCATION_SCORE_OFFSET = 5
STRONG_INVENTORY_UNITS = 5


def _mean(values: Sequence[Optional[float]]) -> float:
    known = [v for v in values if v is not None]
    if not known:
        return 0.0
    return sum(known) / len(known)


def percentile_rank(subject_avg_rent: float, competitor_rents: Iterable[Optional[float]]) -> int:
    """
    Share (0-100) of competitor units renting below the subject's average rent.

    Competitor units without a positive rent are ignored. Returns 50 when there
    is no competitor rent data or no subject rent.
    """
    rents = [r for r in competitor_rents if r is not None and r > 0]
    if not rents or subject_avg_rent <= 0:
        return DEFAULT_PERCENTILE_RANK
    below = sum(1 for r in rents if r < subject_avg_rent)
    return round_half_up(below / len(rents) * 100)


def pricing_edge(subject_avg_rent: float, competitor_avg_rent: float) -> CompetitiveEdge:
    edge = 0.0
    if competitor_avg_rent > 0:
        edge = (subject_avg_rent - competitor_avg_rent) / competitor_avg_rent * 100

    if edge > 0:
        label = f"+{round_half_up(abs(edge))}% above market"
    elif edge < 0:
        label = f"{round_half_up(abs(edge))}% below market"
    else:
        label = "At market rate"

    # Pricier than the market is the weaker position
    if edge > PRICING_EDGE_BAND:
        status = EdgeStatus.DISADVANTAGE
    elif edge < -PRICING_EDGE_BAND:
        status = EdgeStatus.ADVANTAGE
    else:
        status = EdgeStatus.NEUTRAL
    return CompetitiveEdge(edge=round_half_up(edge, 1), label=label, status=status)


def size_edge(subject_avg_sq_ft: float, competitor_avg_sq_ft: float) -> CompetitiveEdge:
    edge = subject_avg_sq_ft - competitor_avg_sq_ft if competitor_avg_sq_ft > 0 else 0.0

    if edge > 0:
        label = f"+{round_half_up(edge)} sq ft larger"
    elif edge < 0:
        label = f"{round_half_up(abs(edge))} sq ft smaller"
    else:
        label = "Similar size"

    if edge > SIZE_EDGE_BAND:
        status = EdgeStatus.ADVANTAGE
    elif edge < -SIZE_EDGE_BAND:
        status = EdgeStatus.DISADVANTAGE
    else:
        status = EdgeStatus.NEUTRAL
    return CompetitiveEdge(edge=round_half_up(edge), label=label, status=status)


def availability_edge(subject_available: int, competitor_available: int) -> CompetitiveEdge:
    edge = subject_available - competitor_available

    if edge > 0:
        label = f"{edge} more units available"
    elif edge < 0:
        label = f"{abs(edge)} fewer units available"
    else:
        label = "Similar availability"

    if edge > AVAILABILITY_EDGE_BAND:
        status = EdgeStatus.ADVANTAGE
    elif edge < -AVAILABILITY_EDGE_BAND:
        status = EdgeStatus.DISADVANTAGE
    else:
        status = EdgeStatus.NEUTRAL
    return CompetitiveEdge(edge=edge, label=label, status=status)


def amenity_edge(rank: int) -> CompetitiveEdge:
    # Amenity data is not modeled; the percentile tier stands in for it
    if rank > AMENITY_PREMIUM_PERCENTILE:
        return CompetitiveEdge(edge=AMENITY_PREMIUM_SCORE, label="Premium amenities", status=EdgeStatus.ADVANTAGE)
    if rank > AMENITY_STANDARD_PERCENTILE:
        return CompetitiveEdge(edge=AMENITY_STANDARD_SCORE, label="Standard amenities", status=EdgeStatus.NEUTRAL)
    return CompetitiveEdge(edge=AMENITY_BASIC_SCORE, label="Basic amenities", status=EdgeStatus.DISADVANTAGE)


def _status_bonus(status: EdgeStatus, bonus: int) -> int:
    if status == EdgeStatus.ADVANTAGE:
        return bonus
    if status == EdgeStatus.DISADVANTAGE:
        return -bonus
    return 0


def pricing_power_score(rank: int, edges: CompetitiveEdges) -> int:
    score = (
        rank
        + _status_bonus(edges.size.status, SIZE_BONUS)
        + _status_bonus(edges.amenities.status, AMENITY_BONUS)
    )
    return int(clamp(score, 0, 100))


def competitive_advantages(rank: int, edges: CompetitiveEdges) -> List[str]:
    advantages = []
    if rank > PREMIUM_PERCENTILE:
        advantages.append("Premium market positioning")
    if edges.size.status == EdgeStatus.ADVANTAGE:
        advantages.append("Larger than average units")
    if edges.pricing.status == EdgeStatus.ADVANTAGE:
        advantages.append("Competitive pricing advantage")
    if edges.availability.status == EdgeStatus.ADVANTAGE:
        advantages.append("Higher unit availability")
    if edges.amenities.status == EdgeStatus.ADVANTAGE:
        advantages.append("Superior amenity package")
    return advantages


def recommendations(rank: int, edges: CompetitiveEdges) -> List[str]:
    recs = []
    if rank < LOW_PERCENTILE:
        recs.append("Consider reviewing pricing strategy to better align with market")
    if edges.size.status == EdgeStatus.DISADVANTAGE:
        recs.append("Highlight other value propositions to offset smaller unit sizes")
    if edges.pricing.status == EdgeStatus.DISADVANTAGE:
        recs.append("Ensure premium pricing is justified by superior amenities or location")
    if edges.availability.status == EdgeStatus.DISADVANTAGE:
        recs.append("Limited availability may support premium pricing strategy")
    if not recs:
        recs.append("Maintain current competitive positioning")
    return recs


def market_position(rank: int) -> str:
    if rank > PREMIUM_PERCENTILE:
        return "Premium Market Leader"
    if rank > ABOVE_AVERAGE_PERCENTILE:
        return "Above Market Average"
    if rank > BELOW_AVERAGE_PERCENTILE:
        return "Below Market Average"
    return "Value Market Position"


def _insights(rank: int, edges: CompetitiveEdges, subject_unit_count: int) -> List[str]:
    if edges.pricing.status == EdgeStatus.ADVANTAGE:
        pricing = "Your pricing provides strong competitive advantage in the current market"
    elif edges.pricing.status == EdgeStatus.DISADVANTAGE:
        pricing = "Consider reviewing pricing strategy to improve market competitiveness"
    else:
        pricing = "Your pricing aligns well with market expectations"

    if subject_unit_count > 0:
        strength = "strong" if subject_unit_count > STRONG_INVENTORY_UNITS else "limited"
        inventory = (
            f"With {subject_unit_count} units matching filters, "
            f"you have {strength} inventory in this segment"
        )
    else:
        inventory = "No units match the current filter criteria - consider expanding criteria"

    return [
        f"Your property ranks in the {rank}th percentile for this filter criteria",
        pricing,
        inventory,
    ]


def _to_comparison(unit: UnitRecord) -> UnitComparison:
    return UnitComparison(
        unit_id=unit.unit_id,
        property_name=unit.property_name or "Unknown",
        unit_type=unit.unit_type,
        bedrooms=unit_bedroom_count(unit),
        bathrooms=parse_number(unit.bathrooms),
        square_footage=parse_number(unit.square_footage),
        rent=parse_number(unit.rent) or 0.0,
        is_subject=unit.is_subject,
        availability_date=unit.availability_date,
    )


def analyze_units(units: Iterable[UnitRecord]) -> FilteredAnalysisResult:
    """
    Compare the subject's units with competitor units.

    Args:
        units (Iterable[UnitRecord]): Filtered units, partitioned by `is_subject`.

    Returns:
        FilteredAnalysisResult: Averages, percentile rank, competitive edges,
                                pricing power and rule-table advice.
    """
    units = list(units)
    subject_units = [u for u in units if u.is_subject]
    competitor_units = [u for u in units if not u.is_subject]

    subject_avg_rent = _mean([parse_number(u.rent) for u in subject_units])
    competitor_avg_rent = _mean([parse_number(u.rent) for u in competitor_units])
    subject_avg_sq_ft = _mean([parse_number(u.square_footage) for u in subject_units])
    competitor_avg_sq_ft = _mean([parse_number(u.square_footage) for u in competitor_units])

    rank = percentile_rank(subject_avg_rent, (parse_number(u.rent) for u in competitor_units))
    amenities = amenity_edge(rank)
    edges = CompetitiveEdges(
        pricing=pricing_edge(subject_avg_rent, competitor_avg_rent),
        size=size_edge(subject_avg_sq_ft, competitor_avg_sq_ft),
        availability=availability_edge(
            sum(1 for u in subject_units if is_available_now(u.status)),
            sum(1 for u in competitor_units if is_available_now(u.status)),
        ),
        amenities=amenities,
    )
    power = pricing_power_score(rank, edges)

    logger.debug(
        f"Analysis: {len(subject_units)} subject vs {len(competitor_units)} competitor units, "
        f"percentile={rank}, pricing power={power}"
    )

    price_per_sq_ft = 0.0
    if subject_avg_sq_ft > 0:
        price_per_sq_ft = round_half_up(subject_avg_rent / subject_avg_sq_ft, 2)

    return FilteredAnalysisResult(
        subject_avg_rent=round_half_up(subject_avg_rent),
        competitor_avg_rent=round_half_up(competitor_avg_rent),
        subject_avg_sq_ft=round_half_up(subject_avg_sq_ft),
        competitor_avg_sq_ft=round_half_up(competitor_avg_sq_ft),
        percentile_rank=rank,
        pricing_power_score=power,
        competitive_edges=edges,
        competitive_advantages=competitive_advantages(rank, edges),
        recommendations=recommendations(rank, edges),
        market_position=market_position(rank),
        unit_count=len(subject_units),
        avg_rent=round_half_up(subject_avg_rent),
        location_score=int(clamp(rank + LOCATION_SCORE_OFFSET, 0, 100)),
        amenity_score=int(clamp(amenities.edge, 0, 100)),
        price_per_sq_ft=price_per_sq_ft,
        insights=_insights(rank, edges, len(subject_units)),
        subject_units=[_to_comparison(u) for u in subject_units],
        competitor_units=[_to_comparison(u) for u in competitor_units],
    )


def empty_analysis() -> FilteredAnalysisResult:
    """Placeholder result for when no subject property units have been scraped yet."""
    no_data = CompetitiveEdge(edge=0, label="No data", status=EdgeStatus.NEUTRAL)
    return FilteredAnalysisResult(
        subject_avg_rent=0,
        competitor_avg_rent=0,
        subject_avg_sq_ft=0,
        competitor_avg_sq_ft=0,
        percentile_rank=0,
        pricing_power_score=0,
        competitive_edges=CompetitiveEdges(
            pricing=no_data, size=no_data, availability=no_data, amenities=no_data
        ),
        competitive_advantages=["Scraping Required"],
        recommendations=["Please complete competitor scraping to generate analysis"],
        market_position="No Data Available",
        insights=[
            "Complete competitor property scraping to enable analysis",
            "Analysis requires unit-level data for the subject property",
        ],
    )


def generate_filtered_analysis(
    units: Iterable[UnitRecord],
    criteria: FilterCriteria,
    soft_filter: Optional[SoftFilterStrategy] = None,
) -> FilteredAnalysisResult:
    """
    Filter a unit inventory and analyze the subject's competitive position.

    Returns `empty_analysis()` when the inventory holds no subject units at all
    (before filtering); a filter that removes every subject unit still yields a
    regular analysis.
    """
    units = list(units)
    if not any(u.is_subject for u in units):
        logger.debug("No subject units in inventory, returning empty analysis")
        return empty_analysis()
    return analyze_units(filter_units(units, criteria, soft_filter=soft_filter))
