"""
Extraction Module.

Turns the extraction model's reply into letter fields and picks the terms
to search the claims dataset for.
"""

from .response import (
    ExtractionResult,
    Structured,
    Fallback,
    ParseFailure,
    extract_value,
    parse_extraction_response,
)
from .query_terms import SENTINEL_VALUES, is_sentinel, select_query_terms

__all__ = [
    'ExtractionResult',
    'Structured',
    'Fallback',
    'ParseFailure',
    'extract_value',
    'parse_extraction_response',
    'SENTINEL_VALUES',
    'is_sentinel',
    'select_query_terms',
]
