from typing import Dict, List, Tuple

from loguru import logger

from rentintel.config import MATCH_THRESHOLD
from rentintel.matchers.similarity import similarity
from rentintel.models import CandidateRecord, MatchResult, SubjectDescriptor
from rentintel.normalizer import (
    extract_street_name,
    extract_street_number,
    normalize_address,
    normalize_property_name,
)
from rentintel.parsing import round_half_up

# Street number (max 30)
STREET_NUMBER_WEIGHT = 30
STREET_NUMBER_PREFIX_POINTS = 15
STREET_NUMBER_MISSING_POINTS = 10

# Street name (max 25)
STREET_NAME_WEIGHT = 25
STREET_NAME_PARTIAL_WEIGHT = 20
STREET_NAME_STRONG_SIMILARITY = 80
STREET_NAME_PARTIAL_SIMILARITY = 60

# Property name (max 20)
PROPERTY_NAME_WEIGHT = 20
PROPERTY_NAME_STRONG_SIMILARITY = 70
PROPERTY_NAME_PARTIAL_SIMILARITY = 50
PROPERTY_NAME_CONTAINMENT_POINTS = 10

# Full normalized address (max 15)
FULL_ADDRESS_WEIGHT = 15
FULL_ADDRESS_SIMILARITY = 70

# City / state context (max 10, only counted when the subject has either)
CITY_STATE_WEIGHT = 10
CITY_POINTS = 5
STATE_POINTS = 5

MATCH = "✅"
PARTIAL = "⚠️"
MISMATCH = "❌"


def _score_street_number(subject_number: str, candidate_number: str) -> Tuple[int, str]:
    if not subject_number or not candidate_number:
        return STREET_NUMBER_MISSING_POINTS, f"{PARTIAL} Street number missing in one address"
    if subject_number == candidate_number:
        return STREET_NUMBER_WEIGHT, f"{MATCH} Exact street number match: {subject_number}"
    # e.g. 222 vs 2221
    if subject_number.startswith(candidate_number) or candidate_number.startswith(subject_number):
        return (
            STREET_NUMBER_PREFIX_POINTS,
            f"{PARTIAL} Partial street number match: {subject_number} vs {candidate_number}",
        )
    return 0, f"{MISMATCH} Street number mismatch: {subject_number} vs {candidate_number}"


def _score_street_name(subject_street: str, candidate_street: str) -> Tuple[int, int, str]:
    if not subject_street or not candidate_street:
        return 0, 0, f"{MISMATCH} Street name missing in one address"

    sim = similarity(subject_street, candidate_street)
    detail = f"{sim}% ({subject_street} vs {candidate_street})"
    if sim >= STREET_NAME_STRONG_SIMILARITY:
        return round_half_up(sim / 100 * STREET_NAME_WEIGHT), sim, f"{MATCH} Street name similarity: {detail}"
    if sim >= STREET_NAME_PARTIAL_SIMILARITY:
        return (
            round_half_up(sim / 100 * STREET_NAME_PARTIAL_WEIGHT),
            sim,
            f"{PARTIAL} Partial street name match: {detail}",
        )
    return 0, sim, f"{MISMATCH} Low street name similarity: {detail}"


def _score_property_name(subject_name: str, candidate_name: str) -> Tuple[int, int, str]:
    if not subject_name or not candidate_name:
        return 0, 0, f"{MISMATCH} Property name missing on one side"

    sim = similarity(subject_name, candidate_name)
    detail = f"{sim}% ({subject_name} vs {candidate_name})"
    if sim >= PROPERTY_NAME_STRONG_SIMILARITY:
        return PROPERTY_NAME_WEIGHT, sim, f"{MATCH} Strong property name match: {detail}"
    if sim >= PROPERTY_NAME_PARTIAL_SIMILARITY:
        return (
            round_half_up(sim / 100 * PROPERTY_NAME_WEIGHT),
            sim,
            f"{PARTIAL} Property name similarity: {detail}",
        )
    if subject_name in candidate_name or candidate_name in subject_name:
        return (
            PROPERTY_NAME_CONTAINMENT_POINTS,
            sim,
            f'{PARTIAL} Property name containment: "{subject_name}" / "{candidate_name}"',
        )
    return 0, sim, f"{MISMATCH} Low property name similarity: {detail}"


def _score_full_address(subject_address: str, candidate_address: str) -> Tuple[int, int, str]:
    if not subject_address or not candidate_address:
        return 0, 0, f"{MISMATCH} Address missing on one side"

    sim = similarity(subject_address, candidate_address)
    if sim >= FULL_ADDRESS_SIMILARITY:
        return (
            round_half_up(sim / 100 * FULL_ADDRESS_WEIGHT),
            sim,
            f"{MATCH} Full address similarity: {sim}%",
        )
    return 0, sim, f"{MISMATCH} Low full address similarity: {sim}%"


def _score_city_state(subject: SubjectDescriptor, candidate_address: str) -> Tuple[int, List[str]]:
    city = normalize_address(subject.city)
    state = normalize_address(subject.state)
    points = 0
    reasons = []
    if city and city in candidate_address:
        points += CITY_POINTS
        reasons.append(f"{MATCH} City match in candidate address: {city}")
    if state and state in candidate_address:
        points += STATE_POINTS
        reasons.append(f"{MATCH} State match in candidate address: {state}")
    if not reasons:
        reasons.append(f"{MISMATCH} City/state not found in candidate address")
    return points, reasons


def match_property(
    subject: SubjectDescriptor,
    candidate: CandidateRecord,
    threshold: int = MATCH_THRESHOLD,
) -> MatchResult:
    """
    Decide whether a scraped candidate listing is the subject property.

    Five weighted signals are summed and scaled to 0-100: street number (30),
    street name similarity (25), property name similarity (20), full address
    similarity (15) and, only when the subject has a city or state, city/state
    presence in the candidate address (10).

    Args:
        subject (SubjectDescriptor): The user's property.
        candidate (CandidateRecord): The scraped listing.
        threshold (int): Minimum score for `is_match`.

    Returns:
        MatchResult: Score, decision, one reason per signal and the raw
                     per-signal contributions.
    """
    subject_name = normalize_property_name(subject.name)
    subject_address = normalize_address(subject.address)
    subject_number = extract_street_number(subject.address)
    subject_street = extract_street_name(subject.address)

    candidate_name = normalize_property_name(candidate.name)
    candidate_address = normalize_address(candidate.address)
    candidate_number = extract_street_number(candidate.address)
    candidate_street = extract_street_name(candidate.address)

    logger.debug(
        f"Matching '{subject_name}' / '{subject_address}' against "
        f"'{candidate_name}' / '{candidate_address}' ({candidate.url})"
    )

    reasons: List[str] = []
    component_scores: Dict[str, int] = {}
    total_score = 0
    max_possible_score = 0

    # 1) Street number
    max_possible_score += STREET_NUMBER_WEIGHT
    points, reason = _score_street_number(subject_number, candidate_number)
    component_scores["street_number"] = points
    total_score += points
    reasons.append(reason)

    # 2) Street name
    max_possible_score += STREET_NAME_WEIGHT
    points, sim, reason = _score_street_name(subject_street, candidate_street)
    component_scores["street_name"] = points
    component_scores["street_name_similarity"] = sim
    total_score += points
    reasons.append(reason)

    # 3) Property name
    max_possible_score += PROPERTY_NAME_WEIGHT
    points, sim, reason = _score_property_name(subject_name, candidate_name)
    component_scores["property_name"] = points
    component_scores["property_name_similarity"] = sim
    total_score += points
    reasons.append(reason)

    # 4) Full address
    max_possible_score += FULL_ADDRESS_WEIGHT
    points, sim, reason = _score_full_address(subject_address, candidate_address)
    component_scores["full_address"] = points
    component_scores["full_address_similarity"] = sim
    total_score += points
    reasons.append(reason)

    # 5) City / state context
    component_scores["city_state"] = 0
    if subject.city or subject.state:
        max_possible_score += CITY_STATE_WEIGHT
        points, city_state_reasons = _score_city_state(subject, candidate_address)
        component_scores["city_state"] = points
        total_score += points
        reasons.extend(city_state_reasons)

    if max_possible_score == 0:
        score = 0
        is_match = False
    else:
        score = round_half_up(total_score / max_possible_score * 100)
        is_match = score >= threshold

    logger.debug(
        f"Match score for '{candidate.name}': {score}% "
        f"({total_score}/{max_possible_score}, match={is_match})"
    )

    return MatchResult(
        score=score,
        is_match=is_match,
        reasons=tuple(reasons),
        component_scores=component_scores,
        total_score=total_score,
        max_possible_score=max_possible_score,
        threshold=threshold,
    )
