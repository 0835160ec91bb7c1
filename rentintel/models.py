"""
Typed data models for property matching and competitive unit analysis.
All data structures used throughout the codebase should be defined here.

Matching inputs and unit records are plain frozen dataclasses. Filter criteria
and the analysis payload cross the API boundary, so they are pydantic models
that read and write the camelCase JSON the frontend uses.
"""
import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any, Dict, FrozenSet, List, Literal, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from rentintel.errors import InvalidCriteriaError


@dataclass(frozen=True)
class SubjectDescriptor:
    """The user's own property, as entered in their profile."""
    name: str
    address: str
    city: Optional[str] = None
    state: Optional[str] = None


@dataclass(frozen=True)
class CandidateRecord:
    """A scraped listing that may or may not be the subject property."""
    name: str
    address: str
    url: str = ""


@dataclass(frozen=True)
class MatchResult:
    """Outcome of matching one candidate against the subject."""
    score: int  # 0-100
    is_match: bool
    reasons: Tuple[str, ...]
    component_scores: Mapping[str, int]
    total_score: int = 0
    max_possible_score: int = 0
    threshold: int = 0

    def __post_init__(self):
        # Read-only view so a computed result cannot be altered afterwards
        object.__setattr__(self, "component_scores", MappingProxyType(dict(self.component_scores)))
        object.__setattr__(self, "reasons", tuple(self.reasons))


@dataclass(frozen=True)
class TaggedCandidate:
    """A candidate paired with its match result."""
    candidate: CandidateRecord
    result: MatchResult

    @property
    def is_subject(self) -> bool:
        return self.result.is_match


@dataclass(frozen=True)
class UnitRecord:
    """
    A scraped unit listing.

    Numeric fields are kept as scraped: they may be numbers, formatted strings
    such as "$1,234", or None.
    """
    unit_type: str = ""
    bedrooms: Any = None
    bathrooms: Any = None
    square_footage: Any = None
    rent: Any = None
    status: Optional[str] = None
    availability_date: Optional[str] = None
    property_id: str = ""
    is_subject: bool = False
    unit_id: str = ""
    property_name: str = ""


BedroomType = Literal["Studio", "1BR", "2BR", "3BR"]
Availability = Literal["now", "30days", "60days"]
Amenity = Literal["in_unit_laundry", "parking", "gym", "pool", "pet_friendly"]
LeaseTerm = Literal["6_month", "12_month", "month_to_month"]
FloorLevel = Literal["ground", "mid", "top"]
RenovationStatus = Literal["newly_renovated", "updated", "original"]

# Finite, non-negative, and a real number (JSON booleans and numeric strings are rejected)
Bound = Annotated[float, Field(ge=0, allow_inf_nan=False, strict=True)]


class ApiModel(BaseModel):
    """Immutable model that serializes to the frontend's camelCase JSON."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class PriceRange(ApiModel):
    min: Bound = 0
    max: Bound = math.inf


class SquareFootageRange(ApiModel):
    min: Bound = 0
    max: Bound = math.inf


class FilterCriteria(ApiModel):
    """Declarative filter over a unit inventory."""
    bedroom_types: FrozenSet[BedroomType] = frozenset()
    price_range: PriceRange = Field(default_factory=PriceRange)
    square_footage_range: SquareFootageRange = Field(default_factory=SquareFootageRange)
    availability: Availability = "now"
    amenities: Tuple[Amenity, ...] = ()
    lease_terms: Tuple[LeaseTerm, ...] = ()
    floor_level: Optional[FloorLevel] = None
    renovation_status: Optional[RenovationStatus] = None

    @field_validator("bedroom_types", "amenities", "lease_terms", mode="before")
    @classmethod
    def _label_list(cls, value):
        if value is None:
            return ()
        if isinstance(value, str):
            raise ValueError("must be a list of labels, not a single string")
        return value

    @classmethod
    def from_dict(cls, data: Any) -> "FilterCriteria":
        """
        Build criteria from the camelCase JSON payload sent by the API layer.

        Raises:
            InvalidCriteriaError: If an option label is unknown or a range is malformed.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'criteria'}: {err['msg']}"
                for err in e.errors()
            )
            raise InvalidCriteriaError(f"Invalid filter criteria: {problems}") from e


class EdgeStatus(str, Enum):
    ADVANTAGE = "advantage"
    NEUTRAL = "neutral"
    DISADVANTAGE = "disadvantage"


class CompetitiveEdge(ApiModel):
    edge: float
    label: str
    status: EdgeStatus


class CompetitiveEdges(ApiModel):
    pricing: CompetitiveEdge
    size: CompetitiveEdge
    availability: CompetitiveEdge
    amenities: CompetitiveEdge


class UnitComparison(ApiModel):
    """One unit row in the subject-vs-competitor comparison."""
    unit_id: str
    property_name: str
    unit_type: str
    bedrooms: int
    bathrooms: Optional[float] = None
    square_footage: Optional[float] = None
    rent: float
    is_subject: bool
    availability_date: Optional[str] = None


class FilteredAnalysisResult(ApiModel):
    """Competitive position of the subject's units against competitor units."""
    subject_avg_rent: int
    competitor_avg_rent: int
    subject_avg_sq_ft: int
    competitor_avg_sq_ft: int
    percentile_rank: int = Field(ge=0, le=100)
    pricing_power_score: int = Field(ge=0, le=100)
    competitive_edges: CompetitiveEdges
    competitive_advantages: List[str]
    recommendations: List[str]
    market_position: str = "Market Average"
    unit_count: int = 0
    avg_rent: int = 0
    location_score: int = Field(default=0, ge=0, le=100)
    amenity_score: int = Field(default=0, ge=0, le=100)
    price_per_sq_ft: float = 0.0
    insights: List[str] = Field(default_factory=list)
    subject_units: List[UnitComparison] = Field(default_factory=list)
    competitor_units: List[UnitComparison] = Field(default_factory=list)
