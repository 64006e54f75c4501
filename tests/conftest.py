"""Shared fixtures for the denial_lens test suite."""

from pathlib import Path

import pytest

from denial_lens.engine.csv_parser import parse_csv_text

DATA_DIR = Path(__file__).resolve().parent.parent / "data"

HUMIRA_CSV = (
    "Claim_ID,Drug_Name,Risk_Score\n"
    "C1,Humira,42.5\n"
    "C2,Humira Pen,10\n"
)


@pytest.fixture
def humira_dataset():
    """Two claims: an exact "Humira" and a "Humira Pen" variant."""
    return parse_csv_text(HUMIRA_CSV)


@pytest.fixture
def data_dir():
    return DATA_DIR


@pytest.fixture
def claims_csv_text():
    """The bundled sample claims export."""
    return (DATA_DIR / "db" / "denial_df.csv").read_text(encoding="utf-8")


@pytest.fixture
def claims_dataset(claims_csv_text):
    return parse_csv_text(claims_csv_text)
