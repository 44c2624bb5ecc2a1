"""Tests for dataset loading.

HTTP fetches are tested against a monkeypatched requests.get; no network.
"""

import pytest
import requests

from avalanchemap.regions import fetch
from avalanchemap.regions.fetch import (
    fetch_region_summaries,
    is_url,
    load_region_summaries,
    read_region_summaries,
)

DATASET_URL = "https://example.org/region_summary.json"


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, payload=None, status_code=200, body_error=None):
        self.payload = payload
        self.status_code = status_code
        self.body_error = body_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self.body_error is not None:
            raise self.body_error
        return self.payload


@pytest.fixture
def fake_get(monkeypatch):
    """Patch requests.get and record its calls."""
    calls = []
    responses = {}

    def get(url, timeout=None):
        calls.append((url, timeout))
        return responses.get(url, FakeResponse(status_code=404))

    monkeypatch.setattr(fetch.requests, "get", get)
    get.calls = calls
    get.responses = responses
    return get


class TestIsUrl:
    """Tests for is_url function."""

    def test_urls(self):
        assert is_url("https://example.org/x.json") is True
        assert is_url("http://localhost:8000/x.json") is True

    def test_paths(self, tmp_path):
        assert is_url("data/raw/region_summary.json") is False
        assert is_url(tmp_path / "x.json") is False


class TestReadRegionSummaries:
    """Tests for reading the dataset from disk."""

    def test_reads_json(self, dataset_file, sample_records):
        """Should return the decoded payload."""
        assert read_region_summaries(dataset_file) == sample_records

    def test_missing_file(self, tmp_path):
        """Missing files raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            read_region_summaries(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        """Invalid JSON raises ValueError."""
        path = tmp_path / "broken.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(ValueError):
            read_region_summaries(path)


class TestFetchRegionSummaries:
    """Tests for fetching the dataset over HTTP."""

    def test_fetch(self, fake_get, sample_records):
        """Should return the decoded response body."""
        fake_get.responses[DATASET_URL] = FakeResponse(sample_records)
        assert fetch_region_summaries(DATASET_URL, timeout=5) == sample_records
        assert fake_get.calls == [(DATASET_URL, 5)]

    def test_http_error(self, fake_get):
        """HTTP error codes raise."""
        with pytest.raises(requests.HTTPError):
            fetch_region_summaries(DATASET_URL)

    def test_invalid_body(self, fake_get):
        """Bodies that are not JSON raise ValueError."""
        fake_get.responses[DATASET_URL] = FakeResponse(body_error=ValueError("no json"))
        with pytest.raises(ValueError):
            fetch_region_summaries(DATASET_URL)


class TestLoadRegionSummaries:
    """Tests for source dispatch."""

    def test_path(self, dataset_file, sample_records, fake_get):
        """Paths are read from disk."""
        assert load_region_summaries(dataset_file) == sample_records
        assert fake_get.calls == []

    def test_url(self, fake_get, sample_records):
        """URLs are fetched over HTTP."""
        fake_get.responses[DATASET_URL] = FakeResponse(sample_records)
        assert load_region_summaries(DATASET_URL) == sample_records

    def test_default_source(self, monkeypatch, dataset_file, sample_records):
        """Without a source the configured default is used."""
        monkeypatch.setattr(fetch, "DEFAULT_SUMMARY_SOURCE", str(dataset_file))
        assert load_region_summaries() == sample_records


@pytest.mark.live
class TestLiveFetch:
    """Live fetch of a published dataset (set AVALANCHEMAP_SUMMARY_SOURCE)."""

    def test_live_dataset(self):
        """The configured dataset should decode to a JSON array."""
        payload = load_region_summaries()
        assert isinstance(payload, list)
