"""Tests for writing fixture sets and reading them back."""

import pytest

from loadbench import FixtureForm, FixtureProvider, make_dataset, write_fixture_set
from loadbench.core.strategies import DEFAULT_REGISTRY
from loadbench.utils.hashing import compute_dataset_hash, compute_file_hash


class TestFixtureSet:
    """Test writing a dataset in every form."""

    def test_writes_every_form(self, tmp_path, medium_dataset):
        fixtures = write_fixture_set(medium_dataset, tmp_path, "table")

        assert [f.form for f in fixtures] == list(FixtureForm)
        assert all(f.path.exists() for f in fixtures)
        assert all(f.path.stat().st_size > 0 for f in fixtures)

    def test_writes_selected_forms(self, tmp_path, medium_dataset):
        fixtures = write_fixture_set(medium_dataset, tmp_path, "table", ["pickle", FixtureForm.JSON])

        assert [f.form for f in fixtures] == [FixtureForm.PICKLE, FixtureForm.JSON]

    def test_creates_directories(self, tmp_path, medium_dataset):
        write_fixture_set(medium_dataset, tmp_path / "a" / "b", "table", ["json"])

        assert (tmp_path / "a" / "b" / "table.json").exists()

    def test_forms_differ_on_disk(self, tmp_path, medium_dataset):
        fixtures = write_fixture_set(medium_dataset, tmp_path, "table")

        hashes = {compute_file_hash(str(f.path)) for f in fixtures}
        assert len(hashes) == len(fixtures)


@pytest.mark.integration
@pytest.mark.parametrize("name", DEFAULT_REGISTRY.names)
def test_every_strategy_recovers_synthetic_dataset(name, tmp_path, medium_dataset):
    write_fixture_set(medium_dataset, tmp_path, "table")
    strategy = DEFAULT_REGISTRY.get(name)

    loaded = strategy.load(FixtureProvider(tmp_path).resolve_for("table", strategy))

    assert compute_dataset_hash(loaded) == compute_dataset_hash(medium_dataset)
    assert list(loaded) == list(medium_dataset)


@pytest.mark.slow
def test_large_dataset_bytecode(tmp_path):
    dataset = make_dataset(20000, seed=3)
    write_fixture_set(dataset, tmp_path, "big", ["bytecode"])

    loaded = DEFAULT_REGISTRY.get("bytecode").load(tmp_path / "big.marshal")

    assert loaded == dataset
