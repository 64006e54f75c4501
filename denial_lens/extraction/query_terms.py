"""
Selecting the search terms for claim matching from extracted letter fields.
"""

from typing import Any, Dict, Iterable, List

# Placeholders the extraction prompt and the fallback parser use for "absent".
SENTINEL_VALUES = ("Not found in document", "Not found")


def is_sentinel(value: str, sentinels: Iterable[str] = SENTINEL_VALUES) -> bool:
    """True for blank values and for any sentinel (case-insensitive)."""
    cleaned = (value or "").strip().lower()
    if not cleaned:
        return True
    return any(cleaned == s.strip().lower() for s in sentinels)


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None]
    return [str(value)]


def select_query_terms(
    fields: Dict[str, Any],
    sentinels: Iterable[str] = SENTINEL_VALUES,
) -> List[str]:
    """
    Drug / service names to search the claims dataset for.

    Reads ``providerInfo.drugName`` (a string or a list of strings). When it
    yields nothing usable, ``providerInfo.requestedService`` is used instead,
    which is where the label fallback stores the service.

    Returns:
        Trimmed terms without blanks, sentinels or repeats, in order.
    """
    sentinels = tuple(sentinels)
    provider = (fields or {}).get("providerInfo") or {}
    if not isinstance(provider, dict):
        return []

    terms: List[str] = []
    for key in ("drugName", "requestedService"):
        for raw in _as_list(provider.get(key)):
            term = raw.strip()
            if is_sentinel(term, sentinels) or term in terms:
                continue
            terms.append(term)
        if terms:
            break

    return terms
