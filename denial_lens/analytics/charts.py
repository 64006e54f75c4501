"""
Chart data for a set of matched claims.

Each analysis run produces a fresh dict of series keyed by chart name. The
rendering side owns whatever it draws from them.
"""

import math
from collections import OrderedDict
from typing import Any, Dict, List, Mapping, Sequence

from denial_lens.engine.csv_parser import parse_number

AGE_GROUPS = ("0-20", "21-40", "41-60", "61-80", "81+")
GENDERS = ("Male", "Female")


def count_by(claims: Sequence[Mapping[str, Any]], column: str) -> Dict[str, int]:
    """Count claims per value of ``column`` in first-seen order; blanks count as "Unknown"."""
    counts: Dict[str, int] = OrderedDict()
    for claim in claims:
        key = claim.get(column) or "Unknown"
        counts[key] = counts.get(key, 0) + 1
    return counts


def age_group(age: Any) -> str:
    """Bucket an age (truncated to a whole number) into one of AGE_GROUPS."""
    years = parse_number("" if age is None else str(age))
    years = int(years) if math.isfinite(years) else 0
    if years <= 20:
        return "0-20"
    if years <= 40:
        return "21-40"
    if years <= 60:
        return "41-60"
    if years <= 80:
        return "61-80"
    return "81+"


def demographics(claims: Sequence[Mapping[str, Any]]) -> Dict[str, Dict[str, int]]:
    """Per age group, number of Male and Female patients. Other genders are not counted."""
    groups = OrderedDict((group, {gender: 0 for gender in GENDERS}) for group in AGE_GROUPS)
    for claim in claims:
        gender = claim.get("Patient_Gender") or "Unknown"
        if gender in GENDERS:
            groups[age_group(claim.get("Patient_Age"))][gender] += 1
    return groups


def _series(label: str, counts: Dict[str, int]) -> Dict[str, Any]:
    return {"label": label, "labels": list(counts), "data": list(counts.values())}


def build_chart_series(claims: Sequence[Mapping[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """
    Build the series behind the analysis charts.

    Returns:
        ``{}`` for no claims, otherwise series keyed ``payer``, ``insurance``,
        ``demographics`` and ``status``.
    """
    if not claims:
        return {}

    groups = demographics(claims)
    labels: List[str] = list(groups)
    return {
        "payer": _series("Payer Distribution", count_by(claims, "Payer_Name")),
        "insurance": _series(
            "Insurance Coverage Types", count_by(claims, "Insurance_Coverage_Type")
        ),
        "demographics": {
            "label": "Patient Demographics by Age and Gender",
            "labels": labels,
            "datasets": {
                gender: [groups[group][gender] for group in labels] for gender in GENDERS
            },
        },
        "status": _series("Claim Status", count_by(claims, "Claim_Status")),
    }
