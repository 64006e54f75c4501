"""
Fuzzy search index over one or more text columns of a claims dataset.

The index is built once per dataset. Document frequencies, tokenization and
an inverted token map are computed up front; each search only scores records
that share at least one similar token with the query. Every other record has
similarity 0 (distance 1.0) and is only returned when the threshold is 1.
"""

import logging
import numbers
from collections import defaultdict
from typing import Dict, List, Sequence, Set, Tuple

from .csv_parser import Dataset, Record
from .errors import ConfigurationError
from .matcher import (
    TOKEN_SIM_THRESHOLD,
    compute_document_frequencies,
    similarity,
    token_similarity,
    tokenize,
)

logger = logging.getLogger(__name__)

# A (record, distance) pair; distance 0 is a perfect match.
Match = Tuple[Record, float]


def validate_threshold(threshold) -> float:
    """Return ``threshold`` as a float, or raise if it is not in [0, 1]."""
    if isinstance(threshold, bool) or not isinstance(threshold, numbers.Real):
        raise ConfigurationError(f"Threshold must be a number, got {threshold!r}")
    if not 0.0 <= threshold <= 1.0:
        raise ConfigurationError(f"Threshold must be in [0, 1], got {threshold!r}")
    return float(threshold)


class FuzzyIndex:
    """
    Searchable index over the given ``fields`` of a dataset.

    Args:
        dataset: Parsed claims dataset.
        fields: Column names whose text is matched against queries.
        threshold: Maximum distance kept by ``search`` (0 = exact only,
            1 = everything).

    Raises:
        ConfigurationError: threshold outside [0, 1], no fields, a blank field
            name, or a field missing from a non-empty dataset.
    """

    def __init__(self, dataset: Dataset, fields: Sequence[str], threshold: float):
        if isinstance(fields, str):
            fields = [fields]
        fields = list(fields or [])
        if not fields:
            raise ConfigurationError("At least one field must be indexed")
        for field in fields:
            if not isinstance(field, str) or not field.strip():
                raise ConfigurationError(f"Invalid field name: {field!r}")
            if dataset.columns and field not in dataset.columns:
                raise ConfigurationError(
                    f"Field {field!r} is not a dataset column; "
                    f"available: {', '.join(dataset.columns)}"
                )

        self.dataset = dataset
        self.fields: Tuple[str, ...] = tuple(fields)
        self.threshold = validate_threshold(threshold)

        # Distinct token sequences, and which (record index) carry each one.
        self._texts: List[Tuple[str, ...]] = []
        self._text_records: List[List[int]] = []
        text_ids: Dict[Tuple[str, ...], int] = {}
        self._token_texts: Dict[str, Set[int]] = defaultdict(set)

        for record_idx, record in enumerate(dataset.records):
            for field in self.fields:
                tokens = tuple(tokenize(str(record.get(field, "") or "")))
                if not tokens:
                    continue
                text_id = text_ids.get(tokens)
                if text_id is None:
                    text_id = len(self._texts)
                    text_ids[tokens] = text_id
                    self._texts.append(tokens)
                    self._text_records.append([])
                    for token in tokens:
                        self._token_texts[token].add(text_id)
                self._text_records[text_id].append(record_idx)

        # Document frequencies are taken over records, one document per
        # record and field.
        self._df, self._doc_count = compute_document_frequencies(
            [self._texts[text_id] for text_id, rows in enumerate(self._text_records) for _ in rows]
        )

        logger.debug(
            "Indexed %d records (%d distinct values) on %s",
            len(dataset), len(self._texts), ", ".join(self.fields),
        )

    def __len__(self) -> int:
        return len(self.dataset)

    def _candidate_texts(self, query_tokens: Sequence[str]) -> Set[int]:
        """Distinct texts holding at least one token similar to a query token."""
        candidates: Set[int] = set()
        for q_tok in set(query_tokens):
            for token, text_ids in self._token_texts.items():
                if token == q_tok or token_similarity(q_tok, token) >= TOKEN_SIM_THRESHOLD:
                    candidates.update(text_ids)
        return candidates

    def score(self, query: str, text: str) -> float:
        """Distance between ``query`` and ``text`` under this index's statistics."""
        sim = similarity(tokenize(query), tokenize(text), self._df, self._doc_count)
        return round(1.0 - sim, 4)

    def search(self, query: str) -> List[Match]:
        """
        Find records whose indexed fields are close to ``query``.

        Returns:
            (record, distance) pairs with distance <= threshold, best first.
            Records with equal distance keep their dataset order.
        """
        if not self.dataset:
            return []

        query_tokens = tokenize(query)
        if not query_tokens:
            return []

        best: Dict[int, float] = {}
        for text_id in self._candidate_texts(query_tokens):
            sim = similarity(query_tokens, self._texts[text_id], self._df, self._doc_count)
            distance = round(1.0 - sim, 4)
            for record_idx in self._text_records[text_id]:
                # With several fields, a record keeps its closest one.
                if distance < best.get(record_idx, 1.0):
                    best[record_idx] = distance

        results: List[Match] = []
        for record_idx, record in enumerate(self.dataset.records):
            distance = best.get(record_idx, 1.0)
            if distance <= self.threshold:
                results.append((record, distance))

        results.sort(key=lambda match: match[1])
        logger.debug("Query %r matched %d records", query, len(results))
        return results
