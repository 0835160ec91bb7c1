import pytest

from rentintel.analytics import analyze_units, empty_analysis, generate_filtered_analysis, percentile_rank
from rentintel.analytics.competitive_analysis import (
    amenity_edge,
    availability_edge,
    pricing_edge,
    pricing_power_score,
    size_edge,
)
from rentintel.models import (
    CompetitiveEdge,
    CompetitiveEdges,
    EdgeStatus,
    FilterCriteria,
    UnitRecord,
)


def _subject(rent, sq_ft=None, status="Available"):
    return UnitRecord(property_id="subject", property_name="Oakwood", rent=rent,
                      square_footage=sq_ft, status=status, is_subject=True)


def _competitor(rent, sq_ft=None, status="Occupied"):
    return UnitRecord(property_id="comp", property_name="Harbor Point", rent=rent,
                      square_footage=sq_ft, status=status, is_subject=False)


def test_percentile_rank_example():
    assert percentile_rank(1000, [800, 900, 1100, 1200]) == 50


def test_percentile_rank_defaults_without_competitor_rent():
    assert percentile_rank(1000, []) == 50
    assert percentile_rank(1000, [None, 0]) == 50
    assert percentile_rank(0, [900, 1100]) == 50


def test_percentile_rank_ignores_missing_rents():
    assert percentile_rank(1000, [800, None, 0, 1200]) == 50
    assert percentile_rank(1500, [800, 900, 1000]) == 100


@pytest.mark.parametrize(
    "subject,competitor,status,label",
    [
        (1200, 1000, EdgeStatus.DISADVANTAGE, "+20% above market"),
        (800, 1000, EdgeStatus.ADVANTAGE, "20% below market"),
        (1050, 1000, EdgeStatus.NEUTRAL, "+5% above market"),
        (1000, 1000, EdgeStatus.NEUTRAL, "At market rate"),
        (1000, 0, EdgeStatus.NEUTRAL, "At market rate"),
    ],
)
def test_pricing_edge(subject, competitor, status, label):
    edge = pricing_edge(subject, competitor)
    assert edge.status == status
    assert edge.label == label


def test_size_edge():
    assert size_edge(900, 800).status == EdgeStatus.ADVANTAGE
    assert size_edge(900, 800).label == "+100 sq ft larger"
    assert size_edge(700, 800).status == EdgeStatus.DISADVANTAGE
    assert size_edge(830, 800).status == EdgeStatus.NEUTRAL
    assert size_edge(900, 0).edge == 0


def test_availability_edge():
    assert availability_edge(5, 1).status == EdgeStatus.ADVANTAGE
    assert availability_edge(0, 3).status == EdgeStatus.DISADVANTAGE
    assert availability_edge(0, 3).label == "3 fewer units available"
    assert availability_edge(1, 0).status == EdgeStatus.NEUTRAL


def test_amenity_edge_tiers():
    assert amenity_edge(61) == CompetitiveEdge(edge=75, label="Premium amenities", status=EdgeStatus.ADVANTAGE)
    assert amenity_edge(60).status == EdgeStatus.NEUTRAL
    assert amenity_edge(41).edge == 50
    assert amenity_edge(40).status == EdgeStatus.DISADVANTAGE


def _edges(size_status, amenity_status):
    neutral = CompetitiveEdge(edge=0, label="", status=EdgeStatus.NEUTRAL)
    return CompetitiveEdges(
        pricing=neutral,
        size=CompetitiveEdge(edge=0, label="", status=size_status),
        availability=neutral,
        amenities=CompetitiveEdge(edge=0, label="", status=amenity_status),
    )


def test_pricing_power_score_is_clamped():
    assert pricing_power_score(100, _edges(EdgeStatus.ADVANTAGE, EdgeStatus.ADVANTAGE)) == 100
    assert pricing_power_score(0, _edges(EdgeStatus.DISADVANTAGE, EdgeStatus.DISADVANTAGE)) == 0
    assert pricing_power_score(50, _edges(EdgeStatus.ADVANTAGE, EdgeStatus.DISADVANTAGE)) == 55


def test_analyze_units_premium_subject():
    units = [
        _subject(2000, 1000),
        _subject("$2,000", 1000),
        _competitor(1000, 800),
        _competitor(1100, 800),
        _competitor(1200, 800),
        _competitor(1300, 800),
    ]
    result = analyze_units(units)

    assert result.subject_avg_rent == 2000
    assert result.competitor_avg_rent == 1150
    assert result.subject_avg_sq_ft == 1000
    assert result.competitor_avg_sq_ft == 800
    assert result.percentile_rank == 100
    assert result.competitive_edges.pricing.status == EdgeStatus.DISADVANTAGE
    assert result.competitive_edges.size.status == EdgeStatus.ADVANTAGE
    assert result.competitive_edges.availability.edge == 2
    assert result.competitive_edges.availability.status == EdgeStatus.NEUTRAL
    assert result.competitive_edges.amenities.status == EdgeStatus.ADVANTAGE
    assert result.pricing_power_score == 100
    assert result.competitive_advantages == [
        "Premium market positioning",
        "Larger than average units",
        "Superior amenity package",
    ]
    assert result.recommendations == [
        "Ensure premium pricing is justified by superior amenities or location",
    ]
    assert result.market_position == "Premium Market Leader"
    assert result.unit_count == 2
    assert result.location_score == 100
    assert result.price_per_sq_ft == 2.0
    assert len(result.subject_units) == 2
    assert len(result.competitor_units) == 4


def test_analyze_units_value_subject():
    units = [_subject(900, 700), _competitor(1000, 800), _competitor(1100, 800), _competitor(1200, 800)]
    result = analyze_units(units)

    assert result.percentile_rank == 0
    assert result.competitive_edges.pricing.status == EdgeStatus.ADVANTAGE
    assert result.competitive_edges.size.status == EdgeStatus.DISADVANTAGE
    assert result.pricing_power_score == 0
    assert "Competitive pricing advantage" in result.competitive_advantages
    assert result.recommendations[0] == "Consider reviewing pricing strategy to better align with market"
    assert result.market_position == "Value Market Position"


def test_averages_skip_missing_values():
    result = analyze_units([_subject(1000), _subject(None), _competitor(None)])
    assert result.subject_avg_rent == 1000
    assert result.competitor_avg_rent == 0
    assert result.percentile_rank == 50
    assert result.price_per_sq_ft == 0.0


def test_analysis_payload_serializes_enum_statuses():
    payload = analyze_units([_subject(1000, 800), _competitor(950, 800), _competitor(1050, 800)]).to_dict()

    assert payload["percentileRank"] == 50

    assert payload["competitiveEdges"]["pricing"]["status"] == "neutral"
    assert payload["subjectUnits"][0]["isSubject"] is True
    assert 0 <= payload["pricingPowerScore"] <= 100
    assert payload["recommendations"] == ["Maintain current competitive positioning"]


def test_generate_filtered_analysis_without_subject_units():
    result = generate_filtered_analysis([_competitor(1000)], FilterCriteria())
    assert result == empty_analysis()
    assert result.market_position == "No Data Available"


def test_generate_filtered_analysis_filters_before_ranking():
    units = [
        UnitRecord(bedrooms=1, rent=1000, status="Available", is_subject=True),
        UnitRecord(bedrooms=2, rent=3000, status="Available", is_subject=True),
        UnitRecord(bedrooms=1, rent=800, status="Available"),
        UnitRecord(bedrooms=1, rent=900, status="Available"),
        UnitRecord(bedrooms=1, rent=1100, status="Available"),
        UnitRecord(bedrooms=1, rent=1200, status="Available"),
    ]
    result = generate_filtered_analysis(units, FilterCriteria(bedroom_types=frozenset({"1BR"})))

    assert result.subject_avg_rent == 1000
    assert result.percentile_rank == 50
    assert result.unit_count == 1


def test_generate_filtered_analysis_when_filter_removes_subject_units():
    units = [
        UnitRecord(bedrooms=2, rent=3000, status="Available", is_subject=True),
        UnitRecord(bedrooms=1, rent=900, status="Available"),
    ]
    result = generate_filtered_analysis(units, FilterCriteria(bedroom_types=frozenset({"1BR"})))

    assert result.unit_count == 0
    assert result.percentile_rank == 50
    assert "No units match" in result.insights[2]
