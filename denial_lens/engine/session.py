"""
Analysis session: the loaded claims dataset and the analyses run against it.

The session replaces the page-level globals of a single-user tool with an
explicit object. The dataset and its index form one immutable snapshot that
is swapped as a whole when a new file is loaded.
"""

import logging
import threading
from typing import Any, Dict, List, Optional

from denial_lens.analytics.charts import build_chart_series
from denial_lens.config.settings import Settings
from denial_lens.extraction.query_terms import select_query_terms

from .csv_parser import Dataset, Record, parse_csv_text
from .fuzzy_index import FuzzyIndex
from .resolver import MatchConfig, MatchResolver

logger = logging.getLogger(__name__)


class DatasetSnapshot:
    """A dataset together with the index built over it."""

    def __init__(self, dataset: Dataset, index: FuzzyIndex):
        self.dataset = dataset
        self.index = index


class AnalysisResult:
    """Outcome of analysing one extracted letter."""

    def __init__(
        self,
        fields: Dict[str, Any],
        query_terms: List[str],
        matches: List[Record],
        charts: Dict[str, Dict[str, Any]],
    ):
        self.fields = fields
        self.query_terms = query_terms
        self.matches = matches
        self.charts = charts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query_terms": list(self.query_terms),
            "match_count": len(self.matches),
            "matches": [dict(record) for record in self.matches],
            "charts": self.charts,
        }


class AnalysisSession:
    """
    Owns the current dataset snapshot for one user session.

    Args:
        settings: Application settings; supplies the match configuration,
            numeric columns and sentinel values.
        threshold: Optional override of ``settings.default_threshold``.
    """

    def __init__(self, settings: Optional[Settings] = None, threshold: Optional[float] = None):
        self.settings = settings or Settings()
        self.config: MatchConfig = self.settings.match_config(threshold)
        self._resolver = MatchResolver(self.config)
        self._lock = threading.Lock()
        self._snapshot = self._build_snapshot(Dataset())

    def _build_snapshot(self, dataset: Dataset) -> DatasetSnapshot:
        return DatasetSnapshot(dataset, self._resolver.build_index(dataset))

    @property
    def snapshot(self) -> DatasetSnapshot:
        with self._lock:
            return self._snapshot

    @property
    def dataset(self) -> Dataset:
        return self.snapshot.dataset

    def load_text(self, text: str) -> Dataset:
        """
        Parse ``text`` and make it the session's dataset.

        The new dataset and index are built completely before they replace
        the previous pair, so readers never see one without the other. If
        building fails the previous snapshot stays in place.
        """
        dataset = parse_csv_text(text, self.settings.numeric_fields)
        snapshot = self._build_snapshot(dataset)
        with self._lock:
            self._snapshot = snapshot
        logger.info("Loaded claims dataset: %d rows, %d columns", len(dataset), len(dataset.columns))
        return dataset

    def find_matches(self, query_terms: List[str]) -> List[Record]:
        """Resolve already-filtered terms against the current dataset."""
        snapshot = self.snapshot
        return self._resolver.resolve(snapshot.index, query_terms)

    def analyze(self, fields: Dict[str, Any]) -> AnalysisResult:
        """
        Match an extracted letter against the dataset and build chart series.

        Args:
            fields: Extracted letter fields (the sections of a Structured or
                Fallback extraction result).
        """
        terms = select_query_terms(fields, self.settings.sentinel_values)
        if not terms:
            logger.info("No valid search terms in extracted fields")
            return AnalysisResult(fields, [], [], {})

        matches = self.find_matches(terms)
        return AnalysisResult(fields, terms, matches, build_chart_series(matches))
