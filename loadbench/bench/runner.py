"""Benchmark runner: timed, verified, collector-isolated load loops."""

import gc
import logging
import time
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np
import psutil

from loadbench.core.config import BenchConfig
from loadbench.core.errors import (
    CorrectnessError,
    HarnessError,
    InvalidRunError,
    LoadError,
    NotFoundError,
    RunTimeoutError,
)
from loadbench.core.fixtures import FixtureForm, FixtureProvider
from loadbench.core.strategies import Strategy

logger = logging.getLogger(__name__)

# Failures that end one strategy's run but let the suite continue.
ISOLATED_ERRORS = (NotFoundError, LoadError, RunTimeoutError)


@dataclass(frozen=True)
class Measurement:
    """Timing and correctness result of one strategy over N iterations."""

    strategy: str
    iterations: int
    elapsed: float
    passed: bool = True
    fixture: Optional[str] = None
    form: Optional[str] = None
    timings: Tuple[float, ...] = field(default=(), repr=False)
    memory_delta_mb: float = 0.0

    @property
    def mean(self) -> float:
        if self.timings:
            return float(np.mean(self.timings))
        return self.elapsed / self.iterations if self.iterations else 0.0

    @property
    def median(self) -> float:
        return float(np.median(self.timings)) if self.timings else self.mean

    @property
    def p95(self) -> float:
        return float(np.percentile(self.timings, 95)) if self.timings else self.mean

    @property
    def stdev(self) -> float:
        return float(np.std(self.timings, ddof=1)) if len(self.timings) > 1 else 0.0

    @property
    def per_second(self) -> float:
        return self.iterations / self.elapsed if self.elapsed > 0 else float("inf")

    def to_dict(self) -> Dict:
        data = asdict(self)
        data.pop("timings")
        data.update({
            "mean": self.mean,
            "median": self.median,
            "p95": self.p95,
            "stdev": self.stdev,
        })
        return data


@dataclass(frozen=True)
class StrategyFailure:
    """A strategy whose run was aborted by an isolated error."""

    strategy: str
    kind: str
    message: str

    @classmethod
    def from_error(cls, strategy: str, error: HarnessError) -> "StrategyFailure":
        return cls(strategy=strategy, kind=type(error).__name__, message=str(error))


@dataclass
class SuiteResult:
    measurements: List[Measurement] = field(default_factory=list)
    failures: List[StrategyFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> Dict:
        return {
            "measurements": [m.to_dict() for m in self.measurements],
            "failures": [asdict(f) for f in self.failures],
        }


def measure_memory() -> float:
    """Memory usage in MB."""
    process = psutil.Process()
    return process.memory_info().rss / 1024 / 1024


@contextmanager
def gc_suspended() -> Iterator[None]:
    """Pause automatic garbage collection and start from a clean heap.

    The collector's previous enabled state is restored on every exit path.
    """
    was_enabled = gc.isenabled()
    gc.disable()
    try:
        gc.collect()
        yield
    finally:
        if was_enabled:
            gc.enable()


class BenchmarkRunner:
    """Runs loader strategies against fixtures and measures them."""

    def __init__(self, config: Optional[BenchConfig] = None):
        self.config = config or BenchConfig()

    def run(
        self,
        strategy: Strategy,
        path: Union[str, Path],
        key: str,
        expected: str,
        iterations: Optional[int] = None,
    ) -> Measurement:
        """Time ``iterations`` cold loads of ``path`` with ``strategy``.

        Every iteration looks up ``key`` and compares it with ``expected``.

        Raises:
            InvalidRunError: If ``iterations`` is less than 1
            NotFoundError: If the fixture is missing (before timing starts)
            LoadError: If any load fails
            CorrectnessError: If any lookup does not return ``expected``
            RunTimeoutError: If ``max_seconds`` is configured and exceeded
        """
        if iterations is None:
            iterations = self.config.iterations
        if iterations < 1:
            raise InvalidRunError(f"iterations must be at least 1, got {iterations}")

        path = Path(path)
        if not path.is_file():
            raise NotFoundError(path)

        for _ in range(self.config.warmup):
            strategy.load(path)

        limit = self.config.max_seconds
        timings: List[float] = []
        logger.info(f"{strategy.name}: {iterations} iterations on {path.name}")

        with gc_suspended():
            mem_before = measure_memory()
            start = time.perf_counter()

            for i in range(iterations):
                t0 = time.perf_counter()
                dataset = strategy.load(path)
                actual = dataset.get(key)
                if actual != expected:
                    raise CorrectnessError(strategy.name, key, expected, actual, i)
                t1 = time.perf_counter()
                timings.append(t1 - t0)

                if limit is not None and t1 - start > limit:
                    raise RunTimeoutError(strategy.name, limit, i + 1)

            elapsed = time.perf_counter() - start
            mem_used = measure_memory() - mem_before

        logger.info(f"{strategy.name}: {elapsed:.4f}s ({elapsed / iterations * 1e3:.3f} ms/load)")

        return Measurement(
            strategy=strategy.name,
            iterations=iterations,
            elapsed=elapsed,
            passed=True,
            fixture=str(path),
            form=strategy.form.value,
            timings=tuple(timings),
            memory_delta_mb=mem_used,
        )

    def run_suite(
        self,
        strategies: Sequence[Strategy],
        fixture: Union[str, Path],
        key: str,
        expected: str,
        provider: Optional[FixtureProvider] = None,
        iterations: Optional[int] = None,
    ) -> SuiteResult:
        """Run each strategy in turn, isolating per-strategy failures.

        ``fixture`` is either a file (used for every strategy) or a bare
        stem that is resolved per strategy form by ``provider``.

        Raises:
            CorrectnessError: Stops the suite at the first wrong lookup
        """
        provider = provider or FixtureProvider(self.config.fixture_root)
        # An existing file is used as is, whatever its suffix.
        per_form = not provider.exists(fixture) and FixtureForm.from_path(fixture) is None
        result = SuiteResult()

        for strategy in strategies:
            try:
                if per_form:
                    path = provider.resolve_for(str(fixture), strategy)
                else:
                    path = provider.resolve(fixture)
                measurement = self.run(strategy, path, key, expected, iterations)
            except ISOLATED_ERRORS as exc:
                logger.warning(f"{strategy.name}: {exc}")
                result.failures.append(StrategyFailure.from_error(strategy.name, exc))
                continue
            result.measurements.append(measurement)

        return result
