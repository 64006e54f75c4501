"""
Tests for parsing the claims export into records.

These tests verify:
1. One record per non-blank data line, every column present
2. Short rows are padded and long rows are cut
3. Numeric columns coerce to float, with 0 for anything non-numeric
4. Empty input and header-only input
5. Records cannot be modified
"""

import pytest

from denial_lens.engine.csv_parser import Dataset, parse_csv_text, parse_number


# =============================================================================
# Row Splitting
# =============================================================================

class TestRowSplitting:

    def test_blank_lines_are_skipped(self):
        text = "A,B\n1,2\n\n   \n3,4\n"
        dataset = parse_csv_text(text)
        assert len(dataset) == 2
        assert [r["A"] for r in dataset] == ["1", "3"]

    def test_every_record_has_every_column(self, claims_dataset):
        for record in claims_dataset:
            assert set(record) == set(claims_dataset.columns)

    def test_sample_dataset_row_count(self, claims_dataset):
        assert len(claims_dataset) == 10
        assert claims_dataset.columns[0] == "Claim_ID"

    def test_short_row_pads_with_empty_strings(self):
        dataset = parse_csv_text("A,B,C\nx\n")
        assert dict(dataset[0]) == {"A": "x", "B": "", "C": ""}

    def test_missing_numeric_column_is_empty_string(self):
        dataset = parse_csv_text("Claim_ID,Risk_Score\nC1\n")
        assert dataset[0]["Risk_Score"] == ""

    def test_extra_fields_are_ignored(self):
        dataset = parse_csv_text("A,B\n1,2,3,4\n")
        assert dict(dataset[0]) == {"A": "1", "B": "2"}

    def test_no_quote_handling(self):
        """Quoted commas still split; quoting is not supported."""
        dataset = parse_csv_text('A,B\n"x,y",z\n')
        assert dataset[0]["A"] == '"x'
        assert dataset[0]["B"] == 'y"'

    def test_windows_line_endings(self):
        dataset = parse_csv_text("A,B\r\n1,2\r\n")
        assert dataset.columns == ("A", "B")
        assert dataset[0]["B"] == "2"

    def test_bom_is_stripped_from_header(self):
        dataset = parse_csv_text("\ufeffClaim_ID,Drug_Name\nC1,Humira\n")
        assert dataset.columns == ("Claim_ID", "Drug_Name")
        assert dataset[0]["Claim_ID"] == "C1"

    def test_text_values_are_kept_verbatim(self):
        dataset = parse_csv_text("Drug_Name\n  Humira Pen \n")
        assert dataset[0]["Drug_Name"] == "  Humira Pen "


# =============================================================================
# Numeric Coercion
# =============================================================================

class TestNumericColumns:

    def test_valid_numbers_parse_exactly(self):
        dataset = parse_csv_text(
            "Risk_Score,Patient_Age,Claim_Amount,Paid_Amount\n42.5,61,6120.50,-12.25\n"
        )
        record = dataset[0]
        assert record["Risk_Score"] == 42.5
        assert record["Patient_Age"] == 61.0
        assert record["Claim_Amount"] == 6120.5
        assert record["Paid_Amount"] == -12.25
        assert isinstance(record["Patient_Age"], float)

    def test_non_numeric_value_becomes_zero(self):
        dataset = parse_csv_text("Risk_Score\nhigh\n")
        assert dataset[0]["Risk_Score"] == 0.0

    def test_empty_numeric_value_becomes_zero(self):
        dataset = parse_csv_text("Claim_ID,Risk_Score\nC1,\n")
        assert dataset[0]["Risk_Score"] == 0.0

    def test_other_columns_stay_text(self):
        dataset = parse_csv_text("Claim_ID,Risk_Score\n1001,5\n")
        assert dataset[0]["Claim_ID"] == "1001"

    def test_custom_numeric_fields(self):
        dataset = parse_csv_text("Score,Risk_Score\n7,8\n", numeric_fields=["Score"])
        assert dataset[0]["Score"] == 7.0
        assert dataset[0]["Risk_Score"] == "8"

    @pytest.mark.parametrize("raw, expected", [
        ("12", 12.0),
        ("  3.5", 3.5),
        ("7kg", 7.0),
        ("1e3", 1000.0),
        (".5", 0.5),
        ("-0", 0.0),
        ("abc", 0.0),
        ("", 0.0),
        ("NaN", 0.0),
    ])
    def test_parse_number(self, raw, expected):
        assert parse_number(raw) == expected


# =============================================================================
# Empty Input and Immutability
# =============================================================================

class TestEdgeCases:

    def test_empty_text_gives_empty_dataset(self):
        dataset = parse_csv_text("")
        assert len(dataset) == 0
        assert dataset.columns == ()
        assert not dataset

    def test_whitespace_only_text_gives_empty_dataset(self):
        assert parse_csv_text("  \n\n").columns == ()

    def test_header_only(self):
        dataset = parse_csv_text("Claim_ID,Drug_Name\n")
        assert dataset.columns == ("Claim_ID", "Drug_Name")
        assert len(dataset) == 0

    def test_record_is_read_only(self, humira_dataset):
        record = humira_dataset[0]
        with pytest.raises(TypeError):
            record["Drug_Name"] = "Enbrel"
        assert record["Drug_Name"] == "Humira"

    def test_dataset_records_are_a_tuple(self, humira_dataset):
        assert isinstance(humira_dataset.records, tuple)
        assert isinstance(Dataset().records, tuple)
