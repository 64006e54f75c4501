"""
Risk score statistics grouped by a patient or payer attribute.
"""

import math
from typing import Any, Dict, Iterable, Mapping

from denial_lens.engine.csv_parser import leading_number

# factor -> (column, human-readable label)
RISK_FACTORS: Dict[str, tuple] = {
    "gender": ("Patient_Gender", "Patient Gender"),
    "payer": ("Payer_Type", "Payer Type"),
    "insurance": ("Insurance_Coverage_Type", "Insurance Coverage Type"),
}
DEFAULT_FACTOR = "gender"

HIGH_RISK_AVERAGE = 50
LOW_RISK_AVERAGE = 30


def _risk_score(value: Any) -> float:
    """Risk score as a float, or NaN when the value holds no number."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    number = leading_number(str(value or ""))
    return math.nan if number is None else number


def risk_summary(records: Iterable[Mapping[str, Any]], factor: str = DEFAULT_FACTOR) -> Dict[str, Any]:
    """
    Summarise ``Risk_Score`` per category of the chosen factor.

    Args:
        records: Claims, typically the whole dataset.
        factor: "gender", "payer" or "insurance"; anything else means "gender".

    Returns:
        Dict with the factor label, per-category count/total/min/max/average
        (categories in first-seen order) and the high- and low-risk categories.
    """
    column, label = RISK_FACTORS.get(factor, RISK_FACTORS[DEFAULT_FACTOR])

    stats: Dict[str, Dict[str, float]] = {}
    for record in records:
        score = _risk_score(record.get("Risk_Score"))
        if math.isnan(score):
            continue
        category = record.get(column) or "Unknown"
        entry = stats.setdefault(
            category, {"count": 0, "total": 0.0, "min": math.inf, "max": -math.inf}
        )
        entry["count"] += 1
        entry["total"] += score
        entry["min"] = min(entry["min"], score)
        entry["max"] = max(entry["max"], score)

    for entry in stats.values():
        entry["average"] = entry["total"] / entry["count"]

    return {
        "factor": label,
        "column": column,
        "categories": stats,
        "high_risk": [c for c, s in stats.items() if s["average"] > HIGH_RISK_AVERAGE],
        "low_risk": [c for c, s in stats.items() if s["average"] < LOW_RISK_AVERAGE],
    }
