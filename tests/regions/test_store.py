"""Tests for region record validation and the region store."""

import logging

import pytest

from avalanchemap.regions.models import FilterCategory, RegionSummary
from avalanchemap.regions.schemas import RegionSummaryRecord
from avalanchemap.regions.store import RegionSummaryStore, iter_summaries, parse_record


class TestRegionSummaryRecord:
    """Tests for the pydantic record schema."""

    def test_valid_record(self):
        """Valid records pass unchanged."""
        record = RegionSummaryRecord.model_validate({
            "code": "AT-07-01",
            "name": "Allgäuer Alpen Ost",
            "rating_counts": {"1": 3, "2": 10},
            "avalanche_problem_counts": {"wind_drifted_snow": 8},
        })
        assert record.rating_counts == {"1": 3, "2": 10}
        assert record.avalanche_problem_counts == {"wind_drifted_snow": 8}

    def test_missing_counts_default_empty(self):
        """Missing or null count mappings default to empty."""
        record = RegionSummaryRecord.model_validate({
            "code": "CH-1111",
            "avalanche_problem_counts": None,
        })
        assert record.name == ""
        assert record.rating_counts == {}
        assert record.avalanche_problem_counts == {}

    def test_malformed_counts_dropped(self, caplog):
        """Non-numeric and negative counts are dropped with a warning."""
        with caplog.at_level(logging.WARNING):
            record = RegionSummaryRecord.model_validate({
                "code": "CH-1111",
                "rating_counts": {"1": "x", "2": -1, "3": True, "4": 2.0, "5": "3"},
            })

        assert record.rating_counts == {"4": 2, "5": 3}
        assert "Dropping malformed rating_counts" in caplog.text

    def test_non_mapping_counts(self):
        """Count fields that are not objects are ignored."""
        record = RegionSummaryRecord.model_validate({
            "code": "CH-1111",
            "rating_counts": [1, 2, 3],
        })
        assert record.rating_counts == {}

    def test_missing_code_rejected(self):
        """A record without a code fails validation."""
        with pytest.raises(ValueError):
            RegionSummaryRecord.model_validate({"name": "Nowhere"})

    def test_empty_code_rejected(self):
        """An empty code fails validation."""
        with pytest.raises(ValueError):
            RegionSummaryRecord.model_validate({"code": ""})


class TestParseRecord:
    """Tests for parse_record."""

    def test_returns_summary(self):
        """Valid records become RegionSummary objects."""
        summary = parse_record({"code": "DE-BY-11", "rating_counts": {"3": 2}})
        assert isinstance(summary, RegionSummary)
        assert summary.count_for(FilterCategory.DANGER_LEVEL, "3") == 2
        assert summary.count_for(FilterCategory.DANGER_LEVEL, "4") == 0

    def test_counts_read_only(self):
        """Count mappings cannot be mutated."""
        summary = parse_record({"code": "DE-BY-11", "rating_counts": {"3": 2}})
        with pytest.raises(TypeError):
            summary.rating_counts["3"] = 99

    def test_invalid_returns_none(self, caplog):
        """Unusable records are skipped with a warning."""
        with caplog.at_level(logging.WARNING):
            assert parse_record({"name": "no code"}) is None
            assert parse_record("not an object") is None
        assert "Skipping malformed region record" in caplog.text


class TestRegionSummaryStore:
    """Tests for RegionSummaryStore."""

    def test_from_records(self, sample_records):
        """Every valid record is indexed by code."""
        store = RegionSummaryStore.from_records(sample_records)
        assert len(store) == len(sample_records)
        assert store["AT-07-01"].name == "Allgäuer Alpen Ost"
        assert "IT-23-AO-01" in store

    def test_skips_invalid_records(self, sample_records):
        """Invalid records are dropped, the rest are kept."""
        store = RegionSummaryStore.from_records(sample_records + [{"name": "x"}, 42])
        assert len(store) == len(sample_records)

    def test_duplicate_codes_keep_first(self, caplog):
        """The first record of a duplicated code wins."""
        with caplog.at_level(logging.WARNING):
            store = RegionSummaryStore.from_records([
                {"code": "CH-1111", "name": "first"},
                {"code": "CH-1111", "name": "second"},
            ])
        assert len(store) == 1
        assert store["CH-1111"].name == "first"
        assert "Duplicate region code CH-1111" in caplog.text

    @pytest.mark.parametrize("payload", [{"code": "CH-1111"}, "[]", None, 3])
    def test_payload_must_be_array(self, payload):
        """Non-array payloads raise ValueError."""
        with pytest.raises(ValueError, match="JSON array"):
            RegionSummaryStore.from_records(payload)

    def test_empty_payload(self):
        """An empty array gives an empty store."""
        assert len(RegionSummaryStore.from_records([])) == 0

    def test_get_missing(self, sample_store):
        """Missing codes are not in the store."""
        assert sample_store.get("FR-01") is None

    def test_to_dataframe(self, sample_store):
        """DataFrame should have one row per region and zero-filled counts."""
        df = sample_store.to_dataframe()
        assert len(df) == len(sample_store)
        assert list(df.columns[:7]) == [
            "code", "name", "rating_1", "rating_2", "rating_3", "rating_4", "rating_5",
        ]
        row = df.set_index("code").loc["AT-05-03"]
        assert row["rating_4"] == 1
        assert row["rating_1"] == 0
        assert row["wind_drifted_snow"] == 0


class TestIterSummaries:
    """Tests for iter_summaries."""

    def test_accepts_store_list_and_none(self, sample_store):
        """Stores, sequences and None are all accepted."""
        assert len(list(iter_summaries(sample_store))) == len(sample_store)
        assert len(list(iter_summaries(sample_store.summaries))) == len(sample_store)
        assert list(iter_summaries(None)) == []
