"""Shared pytest fixtures for avalanchemap tests.

Test Tiers:
- unit: Fast tests with fixtures, no network (default)
- integration: Tests across modules (loader -> session -> API)
- live: Real dataset fetch, slow, requires network

Run live tests with: pytest -m live --run-live
"""

import json
from pathlib import Path

import pytest

from avalanchemap.regions.session import DatasetSnapshot, MapSession
from avalanchemap.regions.store import RegionSummaryStore


def pytest_addoption(parser):
    """Add command line options for test configuration."""
    parser.addoption(
        "--run-live",
        action="store_true",
        default=False,
        help="Run live dataset tests (slow, requires network)",
    )


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: fast unit tests using fixtures")
    config.addinivalue_line("markers", "integration: tests across modules")
    config.addinivalue_line("markers", "live: real dataset tests (slow, requires network)")


def pytest_collection_modifyitems(config, items):
    """Skip live tests unless --run-live is specified."""
    if config.getoption("--run-live"):
        # --run-live given: don't skip live tests
        return

    skip_live = pytest.mark.skip(reason="need --run-live option to run")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


@pytest.fixture
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def sample_records() -> list[dict]:
    """Sample region_summary.json records covering every super-region."""
    return [
        {
            "code": "AT-07-01",
            "name": "Allgäuer Alpen Ost",
            "rating_counts": {"1": 3, "2": 10, "3": 5},
            "avalanche_problem_counts": {"wind_drifted_snow": 8, "persistent_weak_layers": 2},
        },
        {
            "code": "AT-07-02",
            "name": "Allgäuer Alpen West",
            "rating_counts": {"1": 2, "3": 9},
            "avalanche_problem_counts": {"wind_drifted_snow": 4, "new_snow": 6},
        },
        {
            "code": "AT-08-01",
            "name": "Bregenzerwaldgebirge",
            "rating_counts": {"2": 7},
            "avalanche_problem_counts": {"wet_snow": 3},
        },
        {
            "code": "AT-05-03",
            "name": "Hohe Tauern",
            "rating_counts": {"4": 1},
            "avalanche_problem_counts": {},
        },
        {
            "code": "AT-02-01",
            "name": "Gurktaler Alpen",
            "rating_counts": {"2": 4},
            "avalanche_problem_counts": {"gliding_snow": 5},
        },
        {
            "code": "CH-1111",
            "name": "Aargau",
            "rating_counts": {"1": 6},
            "avalanche_problem_counts": {"new_snow": 1},
        },
        {
            "code": "DE-BY-11",
            "name": "Allgäuer Hochalpen",
            "rating_counts": {"3": 2},
            "avalanche_problem_counts": {},
        },
        {
            "code": "IT-32-BZ-01",
            "name": "Vinschgau",
            "rating_counts": {"2": 3, "5": 1},
            "avalanche_problem_counts": {"persistent_weak_layers": 7},
        },
        {
            "code": "IT-23-AO-01",
            "name": "Valdigne",
            "rating_counts": {"1": 1},
            "avalanche_problem_counts": {},
        },
    ]


@pytest.fixture
def sample_store(sample_records) -> RegionSummaryStore:
    """Region store built from sample_records."""
    return RegionSummaryStore.from_records(sample_records)


@pytest.fixture
def sample_snapshot(sample_records) -> DatasetSnapshot:
    """Dataset snapshot built from sample_records."""
    return DatasetSnapshot.build(sample_records, generation=1)


@pytest.fixture
def loaded_session(sample_records) -> MapSession:
    """Map session with sample_records installed."""
    session = MapSession()
    assert session.refresh(lambda: sample_records)
    return session


@pytest.fixture
def dataset_file(tmp_path, sample_records) -> Path:
    """Write sample_records to a temporary region_summary.json."""
    path = tmp_path / "region_summary.json"
    path.write_text(json.dumps(sample_records), encoding="utf-8")
    return path
