"""Unit tests for loader strategies and the registry."""

import pytest

from loadbench import FixtureForm, Strategy, StrategyRegistry, save_fixture
from loadbench.core.errors import LoadError, NotFoundError, UnknownStrategyError
from loadbench.core.fixtures import FixtureProvider
from loadbench.core.io import MAGIC
from loadbench.core.strategies import DEFAULT_REGISTRY, build_default_registry, load_json


@pytest.mark.parametrize("name", DEFAULT_REGISTRY.names)
def test_every_strategy_loads_its_form(name, fixture_set, unicode_dataset):
    strategy = DEFAULT_REGISTRY.get(name)
    path = FixtureProvider(fixture_set).resolve_for("table", strategy)

    assert strategy.load(path) == unicode_dataset


@pytest.mark.parametrize("name", DEFAULT_REGISTRY.names)
def test_loads_are_independent(name, fixture_set):
    """Two loads give equal datasets that do not share state."""
    strategy = DEFAULT_REGISTRY.get(name)
    path = FixtureProvider(fixture_set).resolve_for("table", strategy)

    first = strategy.load(path)
    second = strategy.load(path)

    assert first == second
    assert first is not second
    first["added"] = "x"
    del first["plain"]
    assert "added" not in second
    assert second["plain"] == "hello"


def test_missing_fixture_raises_not_found(tmp_path):
    with pytest.raises(NotFoundError):
        DEFAULT_REGISTRY.get("json").load(tmp_path / "missing.json")


def test_wrong_form_raises_load_error(fixture_set):
    strategy = DEFAULT_REGISTRY.get("json")

    with pytest.raises(LoadError) as excinfo:
        strategy.load(fixture_set / "table.pickle")

    assert excinfo.value.strategy == "json"
    assert excinfo.value.__cause__ is not None


def test_json_ascii_rejects_non_ascii_bytes(fixture_set):
    with pytest.raises(LoadError):
        DEFAULT_REGISTRY.get("json-ascii").load(fixture_set / "table.json")


def test_non_mapping_raises_load_error(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2, 3]")

    with pytest.raises(LoadError, match="expected a mapping"):
        DEFAULT_REGISTRY.get("json").load(path)


def test_non_string_values_raise_load_error(tmp_path):
    path = tmp_path / "ints.json"
    path.write_text('{"k": 1}')

    with pytest.raises(LoadError, match="expected str -> str"):
        DEFAULT_REGISTRY.get("json").load(path)


def test_truncated_json_raises_load_error(tmp_path):
    path = tmp_path / "cut.json"
    path.write_text('{"k": "v", "k2": ')

    with pytest.raises(LoadError):
        DEFAULT_REGISTRY.get("json").load(path)


def test_literal_rejects_calls(tmp_path):
    path = tmp_path / "call.py"
    path.write_text('{"k": str(1)}\n')

    with pytest.raises(LoadError):
        DEFAULT_REGISTRY.get("literal").load(path)


def test_source_runs_without_builtins(tmp_path):
    path = tmp_path / "call.py"
    path.write_text('{"k": str(1)}\n')

    with pytest.raises(LoadError, match="NameError"):
        DEFAULT_REGISTRY.get("source").load(path)


def test_bytecode_rejects_foreign_magic(tmp_path):
    fixture = save_fixture({"k": "v"}, tmp_path / "t.marshal", FixtureForm.BYTECODE)
    raw = fixture.path.read_bytes()
    fixture.path.write_bytes(b"\xff\xff\r\n" + raw[len(MAGIC):])

    with pytest.raises(LoadError, match="bad magic number"):
        DEFAULT_REGISTRY.get("bytecode").load(fixture.path)


def test_tsv_requires_header(tmp_path):
    path = tmp_path / "t.tsv"
    path.write_text("k\tv\n", encoding="latin-1")

    with pytest.raises(LoadError, match="header"):
        DEFAULT_REGISTRY.get("tsv-latin1").load(path)


def test_tsv_rejects_malformed_line(tmp_path):
    path = tmp_path / "t.tsv"
    path.write_text("# loadbench tsv-latin1\nonly-one-field\n", encoding="latin-1")

    with pytest.raises(LoadError, match="line 2"):
        DEFAULT_REGISTRY.get("tsv-latin1").load(path)


class TestRegistry:
    """Test the strategy registry."""

    def test_registration_order_is_preserved(self):
        registry = StrategyRegistry()
        registry.register(Strategy("b", FixtureForm.JSON, load_json))
        registry.register(Strategy("a", FixtureForm.JSON, load_json))

        assert registry.names == ["b", "a"]
        assert [s.name for s in registry] == ["b", "a"]

    def test_duplicate_name_rejected(self):
        registry = StrategyRegistry()
        registry.register(Strategy("json", FixtureForm.JSON, load_json))

        with pytest.raises(ValueError):
            registry.register(Strategy("json", FixtureForm.JSON, load_json))

    def test_frozen_registry_rejects_registration(self):
        registry = build_default_registry().freeze()

        with pytest.raises(RuntimeError):
            registry.register(Strategy("extra", FixtureForm.JSON, load_json))

    def test_default_registry_is_frozen(self):
        assert DEFAULT_REGISTRY.frozen
        assert DEFAULT_REGISTRY.names[0] == "json"
        assert "bytecode" in DEFAULT_REGISTRY

    def test_add_decorator(self):
        registry = StrategyRegistry()

        @registry.add("custom", "json", description="custom json")
        def load_custom(path):
            return {"k": "v"}

        assert registry.get("custom").form == FixtureForm.JSON
        assert registry.get("custom").loader is load_custom

    def test_select_keeps_requested_order(self):
        selected = DEFAULT_REGISTRY.select(["pickle", "json"])

        assert [s.name for s in selected] == ["pickle", "json"]

    def test_select_all_when_empty(self):
        assert len(DEFAULT_REGISTRY.select(None)) == len(DEFAULT_REGISTRY)

    def test_select_unknown_raises(self):
        with pytest.raises(UnknownStrategyError) as excinfo:
            DEFAULT_REGISTRY.select(["json", "yaml"])

        assert excinfo.value.name == "yaml"
        assert "json" in str(excinfo.value)
        assert isinstance(excinfo.value, KeyError)
