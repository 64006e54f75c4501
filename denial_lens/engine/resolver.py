"""
Match resolution: many query terms -> one ranked, deduplicated list of claims.
"""

import logging
from typing import Iterable, List

from .csv_parser import Dataset, Record
from .errors import ConfigurationError
from .fuzzy_index import FuzzyIndex, Match, validate_threshold

logger = logging.getLogger(__name__)


class MatchConfig:
    """Which column identifies a claim, which column is matched, and how loosely."""

    def __init__(self, identity_column: str, match_column: str, threshold: float):
        if not isinstance(identity_column, str) or not identity_column.strip():
            raise ConfigurationError("Identity column name must not be empty")
        if not isinstance(match_column, str) or not match_column.strip():
            raise ConfigurationError("Match column name must not be empty")

        self.identity_column = identity_column
        self.match_column = match_column
        self.threshold = validate_threshold(threshold)

    def __repr__(self) -> str:
        return (
            f"MatchConfig(identity_column={self.identity_column!r}, "
            f"match_column={self.match_column!r}, threshold={self.threshold!r})"
        )


def resolve_matches(
    index: FuzzyIndex,
    query_terms: Iterable[str],
    identity_column: str,
) -> List[Record]:
    """
    Search every term and merge the hits into a single Match Set.

    All (record, distance) pairs from all terms are pooled and stably sorted
    by distance. Walking that order, the first record seen for each identity
    value is kept and later ones are dropped.

    Args:
        index: Index built over the claims dataset.
        query_terms: Terms already cleared of blanks and sentinels.
        identity_column: Column that identifies a claim (e.g. "Claim_ID").

    Returns:
        Unique records, closest first. Empty when there are no terms or no hits.
    """
    if not isinstance(identity_column, str) or not identity_column.strip():
        raise ConfigurationError("Identity column name must not be empty")
    columns = index.dataset.columns
    if columns and identity_column not in columns:
        raise ConfigurationError(f"Identity column {identity_column!r} is not a dataset column")

    all_matches: List[Match] = []
    for term in query_terms:
        all_matches.extend(index.search(term))

    all_matches.sort(key=lambda match: match[1])

    match_set: List[Record] = []
    seen_ids = set()
    for record, _ in all_matches:
        identity = record.get(identity_column)
        if identity in seen_ids:
            continue
        seen_ids.add(identity)
        match_set.append(record)

    return match_set


class MatchResolver:
    """
    Builds an index for a dataset according to a MatchConfig and resolves
    query terms against it.
    """

    def __init__(self, config: MatchConfig):
        self.config = config

    def build_index(self, dataset: Dataset) -> FuzzyIndex:
        """Index ``dataset`` on the configured match column."""
        if dataset.columns and self.config.identity_column not in dataset.columns:
            raise ConfigurationError(
                f"Identity column {self.config.identity_column!r} is not a dataset column"
            )
        return FuzzyIndex(dataset, [self.config.match_column], self.config.threshold)

    def resolve(self, index: FuzzyIndex, query_terms: Iterable[str]) -> List[Record]:
        terms = list(query_terms)
        matches = resolve_matches(index, terms, self.config.identity_column)
        logger.info("Resolved %d term(s) to %d claim(s)", len(terms), len(matches))
        return matches
