"""Candidate-to-subject property matching."""
from rentintel.matchers.similarity import similarity
from rentintel.matchers.property_matcher import match_property
from rentintel.matchers.matching_orchestrator import find_best_match, tag_candidates

__all__ = ["similarity", "match_property", "find_best_match", "tag_candidates"]
