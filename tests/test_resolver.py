"""
Tests for merging per-term matches into one Match Set.

These tests verify:
1. The Humira example: exact claim first, variant second, variant dropped
   under a strict threshold
2. A claim hit by several terms appears once
3. Ties keep the first record seen
4. No terms, or an empty dataset, give an empty Match Set
5. MatchConfig validation
"""

import pytest

from denial_lens.engine.csv_parser import Dataset, parse_csv_text
from denial_lens.engine.errors import ConfigurationError
from denial_lens.engine.fuzzy_index import FuzzyIndex
from denial_lens.engine.resolver import MatchConfig, MatchResolver, resolve_matches


def _ids(records):
    return [record["Claim_ID"] for record in records]


# =============================================================================
# Resolution
# =============================================================================

class TestResolveMatches:

    def test_humira_example(self, humira_dataset):
        index = FuzzyIndex(humira_dataset, ["Drug_Name"], 0.4)
        match_set = resolve_matches(index, ["Humira"], "Claim_ID")

        assert _ids(match_set) == ["C1", "C2"]
        assert match_set[0]["Risk_Score"] == 42.5

    def test_humira_example_strict_threshold(self, humira_dataset):
        index = FuzzyIndex(humira_dataset, ["Drug_Name"], 0.05)
        assert _ids(resolve_matches(index, ["Humira"], "Claim_ID")) == ["C1"]

    def test_two_terms_hitting_same_claim_yield_it_once(self, humira_dataset):
        index = FuzzyIndex(humira_dataset, ["Drug_Name"], 0.4)
        match_set = resolve_matches(index, ["Humira", "HUMIRA", "Humira Pen"], "Claim_ID")

        assert sorted(_ids(match_set)) == ["C1", "C2"]
        assert len(match_set) == 2

    def test_ranking_is_global_across_terms(self, humira_dataset):
        """C2 is an exact hit for the second term, so it ranks with C1."""
        index = FuzzyIndex(humira_dataset, ["Drug_Name"], 0.4)
        match_set = resolve_matches(index, ["Humira Pen", "Humira"], "Claim_ID")
        # Both exact hits score 0; the stable sort keeps term order.
        assert _ids(match_set) == ["C2", "C1"]

    def test_duplicate_identity_keeps_first_record(self):
        dataset = parse_csv_text(
            "Claim_ID,Drug_Name,Claim_Status\n"
            "C1,Humira,Denied\n"
            "C1,Humira,Approved\n"
        )
        index = FuzzyIndex(dataset, ["Drug_Name"], 0.5)
        match_set = resolve_matches(index, ["Humira"], "Claim_ID")

        assert len(match_set) == 1
        assert match_set[0]["Claim_Status"] == "Denied"

    def test_records_pass_all_columns_through(self, claims_dataset):
        index = FuzzyIndex(claims_dataset, ["Drug_Name"], 0.7)
        match_set = resolve_matches(index, ["Stelara"], "Claim_ID")

        assert _ids(match_set) == ["CLM-1004"]
        assert set(match_set[0]) == set(claims_dataset.columns)
        assert match_set[0]["Paid_Amount"] == 11880.0

    def test_no_terms(self, humira_dataset):
        index = FuzzyIndex(humira_dataset, ["Drug_Name"], 0.4)
        assert resolve_matches(index, [], "Claim_ID") == []

    def test_no_hits(self, humira_dataset):
        index = FuzzyIndex(humira_dataset, ["Drug_Name"], 0.4)
        assert resolve_matches(index, ["Keytruda"], "Claim_ID") == []

    def test_empty_dataset(self):
        index = FuzzyIndex(Dataset(), ["Drug_Name"], 0.7)
        assert resolve_matches(index, ["Humira"], "Claim_ID") == []

    def test_blank_identity_column_raises(self, humira_dataset):
        index = FuzzyIndex(humira_dataset, ["Drug_Name"], 0.4)
        with pytest.raises(ConfigurationError):
            resolve_matches(index, ["Humira"], " ")

    def test_unknown_identity_column_raises(self, humira_dataset):
        index = FuzzyIndex(humira_dataset, ["Drug_Name"], 0.4)
        with pytest.raises(ConfigurationError):
            resolve_matches(index, ["Humira"], "ClaimID")


# =============================================================================
# MatchConfig / MatchResolver
# =============================================================================

class TestMatchResolver:

    def test_config_holds_values(self):
        config = MatchConfig("Claim_ID", "Drug_Name", 0.4)
        assert config.identity_column == "Claim_ID"
        assert config.match_column == "Drug_Name"
        assert config.threshold == 0.4

    def test_integer_threshold_is_converted(self):
        assert MatchConfig("Claim_ID", "Drug_Name", 1).threshold == 1.0

    @pytest.mark.parametrize("identity, column, threshold", [
        ("", "Drug_Name", 0.4),
        ("Claim_ID", "", 0.4),
        ("Claim_ID", "Drug_Name", 1.5),
        ("Claim_ID", "Drug_Name", -1),
    ])
    def test_invalid_config(self, identity, column, threshold):
        with pytest.raises(ConfigurationError):
            MatchConfig(identity, column, threshold)

    def test_resolver_end_to_end(self, humira_dataset):
        resolver = MatchResolver(MatchConfig("Claim_ID", "Drug_Name", 0.4))
        index = resolver.build_index(humira_dataset)
        assert _ids(resolver.resolve(index, ["Humira"])) == ["C1", "C2"]

    def test_identity_column_must_exist(self, humira_dataset):
        resolver = MatchResolver(MatchConfig("Member_ID", "Drug_Name", 0.4))
        with pytest.raises(ConfigurationError):
            resolver.build_index(humira_dataset)

    def test_match_column_must_exist(self, humira_dataset):
        resolver = MatchResolver(MatchConfig("Claim_ID", "Service", 0.4))
        with pytest.raises(ConfigurationError):
            resolver.build_index(humira_dataset)

    def test_empty_dataset_builds(self):
        resolver = MatchResolver(MatchConfig("Claim_ID", "Drug_Name", 0.4))
        index = resolver.build_index(Dataset())
        assert resolver.resolve(index, ["Humira"]) == []
