"""
Claims dataset parsing.

Turns the raw text of a comma-separated claims export into a ``Dataset`` of
read-only ``Record`` rows. Parsing is lenient: rows are split positionally
on commas, short rows are padded with empty strings, long rows are cut, and
numeric columns that do not hold a number become 0.
"""

import math
import re
from collections.abc import Mapping
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Optional, Sequence, Tuple

NUMERIC_FIELDS: FrozenSet[str] = frozenset(
    {"Risk_Score", "Patient_Age", "Claim_Amount", "Paid_Amount"}
)

# Leading number, read the way a lenient float parse reads "42.5", "  12", "3e2" or "7kg"
_NUMBER_PREFIX = re.compile(
    r"\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))"
)


class Record(Mapping):
    """A single parsed row. Behaves like a read-only dict."""

    __slots__ = ("_values",)

    def __init__(self, values: Dict[str, Any]):
        self._values = dict(values)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Record({self._values!r})"


class Dataset:
    """Ordered, immutable collection of records sharing one column schema."""

    def __init__(self, columns: Sequence[str] = (), records: Iterable[Record] = ()):
        self.columns: Tuple[str, ...] = tuple(columns)
        self.records: Tuple[Record, ...] = tuple(records)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __getitem__(self, index: int) -> Record:
        return self.records[index]

    def __bool__(self) -> bool:
        return bool(self.records)

    def __repr__(self) -> str:
        return f"Dataset(columns={list(self.columns)!r}, rows={len(self.records)})"


def leading_number(value: str) -> Optional[float]:
    """The number ``value`` starts with (after optional whitespace), or None."""
    match = _NUMBER_PREFIX.match(value or "")
    if not match:
        return None
    try:
        number = float(match.group(1))
    except (ValueError, OverflowError):
        return None
    if math.isnan(number):
        return None
    return number


def parse_number(value: str) -> float:
    """Leading number of ``value``; 0.0 when there is none (negative zero included)."""
    number = leading_number(value)
    if not number:
        return 0.0
    return number


def _split_lines(text: str) -> List[str]:
    # Tolerate Windows line endings without touching other whitespace.
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def parse_csv_text(text: str, numeric_fields: Iterable[str] = NUMERIC_FIELDS) -> Dataset:
    """
    Parse comma-separated text with a header line into a Dataset.

    Args:
        text: Full file contents, header first.
        numeric_fields: Column names whose values are parsed to float.

    Returns:
        Dataset with one record per non-blank data line. Empty input gives
        an empty Dataset with no columns.
    """
    if not text or not text.strip():
        return Dataset()

    lines = _split_lines(text)
    # A BOM can get embedded into the first header name when the export was
    # written by a spreadsheet tool.
    headers = lines[0].replace("\ufeff", "").split(",")
    numeric = set(numeric_fields or ())

    records = []
    for line in lines[1:]:
        if not line.strip():
            continue

        values = line.split(",")
        row: Dict[str, Any] = {}
        for j, header in enumerate(headers):
            if j >= len(values):
                row[header] = ""
            elif header in numeric:
                row[header] = parse_number(values[j])
            else:
                row[header] = values[j]
        records.append(Record(row))

    return Dataset(headers, records)
