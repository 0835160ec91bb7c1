# rentintel/matchers/matching_orchestrator.py

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from loguru import logger

from rentintel.config import FALLBACK_MATCH_THRESHOLD
from rentintel.matchers.property_matcher import match_property
from rentintel.models import CandidateRecord, SubjectDescriptor, TaggedCandidate


def tag_candidates(
    subject: SubjectDescriptor,
    candidates: Sequence[CandidateRecord],
    max_workers: Optional[int] = None,
) -> List[TaggedCandidate]:
    """
    Score every scraped candidate against the subject property.

    Args:
        subject (SubjectDescriptor): The user's property.
        candidates (Sequence[CandidateRecord]): Scraped listings.
        max_workers (Optional[int]): When set above 1, candidates are scored on a
                                     thread pool. Output order always follows input order.

    Returns:
        List[TaggedCandidate]: One tagged candidate per input candidate.
    """
    if max_workers and max_workers > 1 and len(candidates) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(pool.map(lambda c: match_property(subject, c), candidates))
    else:
        results = [match_property(subject, c) for c in candidates]

    tagged = [TaggedCandidate(candidate=c, result=r) for c, r in zip(candidates, results)]
    matches = sum(1 for t in tagged if t.is_subject)
    logger.debug(f"Tagged {len(tagged)} candidates for '{subject.name}': {matches} subject match(es)")
    return tagged


def find_best_match(
    subject: SubjectDescriptor,
    candidates: Sequence[CandidateRecord],
    min_score: int = FALLBACK_MATCH_THRESHOLD,
) -> Optional[TaggedCandidate]:
    """
    Pick the highest-scoring candidate, used when no candidate clears the match threshold.

    Ties keep the earliest candidate. Returns None if there are no candidates
    or the best score is below `min_score`.
    """
    best: Optional[TaggedCandidate] = None
    for tagged in tag_candidates(subject, candidates):
        if best is None or tagged.result.score > best.result.score:
            best = tagged

    if best is None or best.result.score < min_score:
        logger.debug(f"No fallback match for '{subject.name}' at or above {min_score}%")
        return None

    logger.debug(f"Best match for '{subject.name}': '{best.candidate.name}' ({best.result.score}%)")
    return best
