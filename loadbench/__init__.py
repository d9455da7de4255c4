__version__ = "0.1.0"

from loadbench.bench.runner import (
    BenchmarkRunner,
    Measurement,
    StrategyFailure,
    SuiteResult,
    gc_suspended,
)
from loadbench.core.config import BenchConfig, SortOrder
from loadbench.core.errors import (
    CorrectnessError,
    HarnessError,
    InvalidRunError,
    LoadError,
    NotFoundError,
    RunTimeoutError,
    UnknownStrategyError,
)
from loadbench.core.fixtures import Fixture, FixtureForm, FixtureProvider
from loadbench.core.io import get_fixture_info, make_dataset, save_fixture, write_fixture_set
from loadbench.core.strategies import (
    DEFAULT_REGISTRY,
    Strategy,
    StrategyRegistry,
    build_default_registry,
)
from loadbench.visualization.reporter import Reporter, save_results

__all__ = [
    # Harness
    "BenchmarkRunner",
    "Measurement",
    "StrategyFailure",
    "SuiteResult",
    "gc_suspended",
    "Reporter",
    "save_results",
    # Strategies
    "Strategy",
    "StrategyRegistry",
    "DEFAULT_REGISTRY",
    "build_default_registry",
    # Fixtures and I/O
    "Fixture",
    "FixtureForm",
    "FixtureProvider",
    "save_fixture",
    "write_fixture_set",
    "get_fixture_info",
    "make_dataset",
    # Configuration
    "BenchConfig",
    "SortOrder",
    # Errors
    "HarnessError",
    "NotFoundError",
    "LoadError",
    "CorrectnessError",
    "RunTimeoutError",
    "UnknownStrategyError",
    "InvalidRunError",
    # Metadata
    "__version__",
]
