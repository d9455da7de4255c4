"""Shared test fixtures and configuration for loadbench tests."""

import pytest
from pathlib import Path
import tempfile

from loadbench import FixtureForm, make_dataset, save_fixture, write_fixture_set


@pytest.fixture
def tmp_path():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def kv_dataset():
    """The smallest useful dataset."""
    return {"k": "v"}


@pytest.fixture
def unicode_dataset():
    """Dataset with values outside ASCII and outside Latin-1."""
    return {
        "plain": "hello",
        "latin": "café naïve",
        "euro": "€uro",
        "cjk": "日本語",
        "escapes": "tab\there\nnew line \\ backslash",
    }


@pytest.fixture
def kv_json(tmp_path, kv_dataset):
    """A JSON fixture holding {"k": "v"}."""
    return save_fixture(kv_dataset, tmp_path / "kv.json", FixtureForm.JSON).path


@pytest.fixture
def fixture_set(tmp_path, unicode_dataset):
    """The unicode dataset written once per form under stem 'table'."""
    write_fixture_set(unicode_dataset, tmp_path, "table")
    return tmp_path


@pytest.fixture
def medium_dataset():
    """Deterministic synthetic dataset."""
    return make_dataset(200, seed=7)


# Test configuration
def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
