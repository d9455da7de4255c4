"""Unit tests for harness configuration."""

from pathlib import Path

import pytest

from loadbench import BenchConfig, SortOrder
from loadbench.core.config import DEFAULT_ITERATIONS, ITERATIONS_ENV
from loadbench.core.errors import InvalidRunError


def test_defaults():
    config = BenchConfig()

    assert config.iterations == DEFAULT_ITERATIONS
    assert config.warmup == 0
    assert config.max_seconds is None
    assert config.sort == SortOrder.REGISTRATION


def test_env_overrides_iterations():
    config = BenchConfig.from_env({ITERATIONS_ENV: "7"})

    assert config.iterations == 7


def test_explicit_value_beats_env():
    config = BenchConfig.from_env({ITERATIONS_ENV: "7"}, iterations=3)

    assert config.iterations == 3


def test_none_overrides_are_ignored():
    config = BenchConfig.from_env({}, iterations=None, warmup=2)

    assert config.iterations == DEFAULT_ITERATIONS
    assert config.warmup == 2


def test_invalid_env_value():
    with pytest.raises(InvalidRunError, match=ITERATIONS_ENV):
        BenchConfig.from_env({ITERATIONS_ENV: "many"})


@pytest.mark.parametrize("kwargs", [
    {"iterations": 0},
    {"warmup": -1},
    {"max_seconds": 0},
])
def test_invalid_values_rejected(kwargs):
    with pytest.raises(InvalidRunError):
        BenchConfig(**kwargs)


def test_with_overrides(tmp_path):
    config = BenchConfig().with_overrides(fixture_root=tmp_path, sort=None)

    assert config.fixture_root == Path(tmp_path)
    assert config.sort == SortOrder.REGISTRATION
