"""
Claims Matching Engine Module.

This module contains the dataset parser, the fuzzy index and the match
resolver. The analysis session and the Qt background worker live in
``denial_lens.engine.session`` and ``denial_lens.engine.analysis_worker``.
"""

from .errors import ConfigurationError
from .csv_parser import Dataset, Record, NUMERIC_FIELDS, parse_csv_text, parse_number
from .matcher import tokenize, similarity
from .fuzzy_index import FuzzyIndex, Match
from .resolver import MatchConfig, MatchResolver, resolve_matches

__all__ = [
    'ConfigurationError',
    'Dataset',
    'Record',
    'NUMERIC_FIELDS',
    'parse_csv_text',
    'parse_number',
    'tokenize',
    'similarity',
    'FuzzyIndex',
    'Match',
    'MatchConfig',
    'MatchResolver',
    'resolve_matches',
]
