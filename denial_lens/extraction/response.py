"""
Parsing of the extraction model's reply.

The vision model is asked for a strict JSON object describing the denial
letter. Replies are not always clean: they may be wrapped in a ```json fence,
surrounded by prose, or not be JSON at all. ``parse_extraction_response``
tries JSON first and otherwise falls back to label-based extraction from the
raw text.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

NOT_FOUND = "Not found"

_CODE_BLOCK = re.compile(r"```json\s*([\s\S]*?)\s*```")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

# (section, field, label alternatives) for label-based fallback extraction
FALLBACK_FIELDS: List[Tuple[str, str, str]] = [
    ("payerDetails", "payerName", "payer name|insurance company"),
    ("payerDetails", "payerAddress", "payer address|address"),
    ("payerDetails", "dateOfLetter", "date of letter|letter date"),
    ("payerDetails", "levelOfReview", "level of review|review level"),
    ("memberInfo", "memberName", "member name|patient name"),
    ("memberInfo", "memberId", "member id|insurance id"),
    ("memberInfo", "dateOfBirth", "date of birth|birth date|dob"),
    ("providerInfo", "providerName", "provider name|doctor name"),
    ("providerInfo", "providerNpi", "provider npi|npi"),
    ("providerInfo", "claimNumber", "claim number|request number"),
    ("providerInfo", "requestedService", "requested service|service|drug name|medication"),
    ("providerInfo", "hcpcsCode", "hcpcs code|cpt code"),
    ("providerInfo", "coverageDetermination", "coverage determination|determination"),
    ("denialInfo", "denialReasons", "denial reason|reason for denial"),
    ("denialInfo", "rationaleCategory", "rationale category|category"),
    ("denialInfo", "policyReference", "policy reference|reference"),
    ("denialInfo", "policyReviewDate", "policy review date|review date"),
    ("denialInfo", "sourcesCited", "sources cited|sources"),
    ("appealInfo", "appealWindow", "appeal window|window"),
    ("appealInfo", "appealOptions", "appeal options|options"),
    ("appealInfo", "appealTimelines", "appeal timelines|timelines"),
    ("appealInfo", "reviewerName", "reviewer name|reviewer"),
    ("appealInfo", "reviewerRole", "reviewer role|role"),
]


class ExtractionResult:
    """Base class for the three parse outcomes."""

    fields: Dict[str, Any]

    @property
    def ok(self) -> bool:
        return False


class Structured(ExtractionResult):
    """The reply was a JSON object."""

    def __init__(self, fields: Dict[str, Any]):
        self.fields = fields

    @property
    def ok(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Structured({self.fields!r})"


class Fallback(ExtractionResult):
    """The reply was not JSON; fields were scraped from labelled lines."""

    def __init__(self, fields: Dict[str, Any]):
        self.fields = fields

    @property
    def ok(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Fallback({self.fields!r})"


class ParseFailure(ExtractionResult):
    """Nothing usable could be read from the reply."""

    def __init__(self, reason: str, raw_text: str = ""):
        self.reason = reason
        self.raw_text = raw_text
        self.fields = {}

    def __repr__(self) -> str:
        return f"ParseFailure({self.reason!r})"


def _label_pattern(labels: str) -> re.Pattern:
    # "payer name" also matches "payerName", "payer_name" and "Payer Name"
    alternatives = [r"[\s_]*".join(map(re.escape, label.split())) for label in labels.split("|")]
    return re.compile(
        r"[\"']?(?:%s)[\"']?\s*[:=\-]\s*[\"']?(.*?)[\"']?\s*,?\s*$" % "|".join(alternatives),
        re.IGNORECASE | re.MULTILINE,
    )


def extract_value(text: str, labels: str, default: str = NOT_FOUND) -> str:
    """
    Return the text following the first ``label:`` found in ``text``.

    Args:
        text: Raw model reply.
        labels: Label alternatives separated by ``|``, tried as one pattern.
        default: Returned when no label is present or its value is empty.
    """
    match = _label_pattern(labels).search(text or "")
    if not match:
        return default
    value = match.group(1).strip()
    return value or default


def _json_candidate(text: str) -> str:
    block = _CODE_BLOCK.search(text)
    if block and block.group(1):
        return block.group(1).strip()
    obj = _JSON_OBJECT.search(text)
    if obj:
        return obj.group(0)
    return text


def _fallback_fields(text: str) -> Tuple[Dict[str, Dict[str, str]], int]:
    fields: Dict[str, Dict[str, str]] = {}
    found = 0
    for section, name, labels in FALLBACK_FIELDS:
        value = extract_value(text, labels)
        if value != NOT_FOUND:
            found += 1
        fields.setdefault(section, {})[name] = value
    return fields, found


def parse_extraction_response(text: Optional[str]) -> ExtractionResult:
    """
    Interpret the extraction model's reply.

    Returns:
        ``Structured`` when a JSON object could be decoded, ``Fallback`` when
        at least one labelled value was found in the raw text, otherwise
        ``ParseFailure``.
    """
    if not text or not text.strip():
        return ParseFailure("Empty response")

    try:
        parsed = json.loads(_json_candidate(text))
    except json.JSONDecodeError as e:
        logger.warning("Extraction reply is not valid JSON (%s); using label fallback", e)
    else:
        if isinstance(parsed, dict):
            return Structured(parsed)
        logger.warning("Extraction reply decoded to %s, not an object", type(parsed).__name__)

    fields, found = _fallback_fields(text)
    if not found:
        return ParseFailure("No recognizable fields in response", raw_text=text)
    return Fallback(fields)
