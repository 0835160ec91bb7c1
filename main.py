import argparse
import csv
import json
import os
import sys
from typing import List

import pandas as pd
from loguru import logger

from rentintel.analytics import generate_filtered_analysis
from rentintel.config import BATCH_SIZE, INPUT_CSV, LOG_LEVEL, MATCH_WORKERS, OUTPUT_CSV
from rentintel.errors import InvalidCriteriaError
from rentintel.matchers import find_best_match, tag_candidates
from rentintel.models import CandidateRecord, FilterCriteria, SubjectDescriptor, UnitRecord


def _safe_get(row, col):
    """Read a column from a pandas row, converting NaN and absent columns to None."""
    if col not in row.index:
        return None
    val = row[col]
    if pd.isna(val):
        return None
    return val


def load_candidates_from_csv(file_path: str, nrows: int = None) -> List[CandidateRecord]:
    """Load scraped listings (Name, Address, URL columns) as CandidateRecord objects."""
    df = pd.read_csv(file_path, nrows=nrows, dtype=str)
    records = []
    for _, row in df.iterrows():
        records.append(CandidateRecord(
            name=_safe_get(row, "Name") or "",
            address=_safe_get(row, "Address") or "",
            url=_safe_get(row, "URL") or "",
        ))
    return records


def load_units_from_csv(file_path: str, subject_property_id: str) -> List[UnitRecord]:
    """
    Load scraped units as UnitRecord objects.

    Numeric columns are passed through as read; the filter and analytics
    engines treat unparsable values as missing.
    """
    df = pd.read_csv(file_path, dtype=str)
    units = []
    for _, row in df.iterrows():
        property_id = _safe_get(row, "Property ID") or ""
        units.append(UnitRecord(
            unit_id=_safe_get(row, "Unit ID") or "",
            property_id=property_id,
            property_name=_safe_get(row, "Property Name") or "",
            unit_type=_safe_get(row, "Unit Type") or "",
            bedrooms=_safe_get(row, "Bedrooms"),
            bathrooms=_safe_get(row, "Bathrooms"),
            square_footage=_safe_get(row, "Square Footage"),
            rent=_safe_get(row, "Rent"),
            status=_safe_get(row, "Status"),
            availability_date=_safe_get(row, "Availability Date"),
            is_subject=property_id == subject_property_id,
        ))
    return units


def batch_iter(records: list, batch_size: int):
    """
    Yield index and record slices of size `batch_size` for batched processing.
    """
    n = len(records)
    for i in range(0, n, batch_size):
        yield i, records[i:i+batch_size]


def run_match(args) -> int:
    """Match every candidate in the input CSV against the subject and write results."""
    subject = SubjectDescriptor(
        name=args.name,
        address=args.address,
        city=args.city,
        state=args.state,
    )
    candidates = load_candidates_from_csv(args.input)
    logger.info(f"Loaded {len(candidates)} candidates from {args.input}")

    output_path = args.output
    if os.path.exists(output_path):
        os.remove(output_path)
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["Name", "URL", "score", "isMatch", "reasons"])

    matched = 0
    for start_idx, batch in batch_iter(candidates, args.batch_size):
        logger.info(f"Processing rows {start_idx}..{start_idx + len(batch) - 1}")
        tagged = tag_candidates(subject, batch, max_workers=args.workers)

        with open(output_path, "a", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            for t in tagged:
                matched += int(t.is_subject)
                writer.writerow([
                    t.candidate.name,
                    t.candidate.url,
                    t.result.score,
                    t.result.is_match,
                    " | ".join(t.result.reasons),
                ])

    if matched == 0:
        best = find_best_match(subject, candidates)
        if best:
            logger.info(f"No match above threshold; best fallback is '{best.candidate.name}' ({best.result.score}%)")
        else:
            logger.info("No candidate matched the subject property")
    else:
        logger.info(f"{matched} candidate(s) matched the subject property")
    return 0


def run_analyze(args) -> int:
    """Filter the unit inventory and print the competitive analysis as JSON."""
    criteria_data = {}
    if args.criteria:
        with open(args.criteria) as f:
            criteria_data = json.load(f)
    try:
        criteria = FilterCriteria.from_dict(criteria_data)
    except InvalidCriteriaError as e:
        logger.error(str(e))
        return 2

    units = load_units_from_csv(args.input, args.subject_id)
    logger.info(f"Loaded {len(units)} units from {args.input}")
    analysis = generate_filtered_analysis(units, criteria)
    print(json.dumps(analysis.to_dict(), indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Property matching and competitive rent analysis")
    sub = parser.add_subparsers(dest="command", required=True)

    match = sub.add_parser("match", help="Tag scraped candidates as subject or competitor")
    match.add_argument("--name", required=True, help="Subject property name")
    match.add_argument("--address", required=True, help="Subject property address")
    match.add_argument("--city")
    match.add_argument("--state")
    match.add_argument("--input", default=INPUT_CSV)
    match.add_argument("--output", default=OUTPUT_CSV)
    match.add_argument("--batch-size", type=int, default=BATCH_SIZE)
    match.add_argument("--workers", type=int, default=MATCH_WORKERS)
    match.set_defaults(func=run_match)

    analyze = sub.add_parser("analyze", help="Filter units and compute competitive analysis")
    analyze.add_argument("--input", required=True, help="Units CSV")
    analyze.add_argument("--subject-id", required=True, help="Property ID of the subject property")
    analyze.add_argument("--criteria", help="JSON file with filter criteria")
    analyze.set_defaults(func=run_analyze)
    return parser


def main(argv=None) -> int:
    """
    Entry point for the batch CLI.

    - `match` tags every candidate in a CSV as subject match or competitor.
    - `analyze` filters a units CSV and prints the analysis payload.
    """
    # Initialize logs
    logger.remove()  # Remove default handler
    logger.add(sys.stderr, level=LOG_LEVEL, format="<green>{time:HH:mm:ss}</green> | <level>{message}</level>")

    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except (OSError, json.JSONDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        logger.error(f"Failed to read input: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
