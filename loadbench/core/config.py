"""Harness configuration."""

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

from loadbench.core.errors import InvalidRunError

ITERATIONS_ENV = "LOADBENCH_ITERATIONS"
DEFAULT_ITERATIONS = 100


class SortOrder(str, Enum):
    REGISTRATION = "registration"
    ELAPSED = "elapsed"


@dataclass(frozen=True)
class BenchConfig:
    """Settings shared by every run of one harness invocation.

    Attributes:
        iterations: Timed loads per strategy
        warmup: Untimed loads per strategy before timing starts
        max_seconds: Optional wall-clock ceiling per run
        sort: Order of rows in the report
        fixture_root: Directory that relative fixture names resolve against
    """

    iterations: int = DEFAULT_ITERATIONS
    warmup: int = 0
    max_seconds: Optional[float] = None
    sort: SortOrder = SortOrder.REGISTRATION
    fixture_root: Path = field(default_factory=Path.cwd)

    def __post_init__(self) -> None:
        if self.iterations < 1:
            raise InvalidRunError(f"iterations must be at least 1, got {self.iterations}")
        if self.warmup < 0:
            raise InvalidRunError(f"warmup must be non-negative, got {self.warmup}")
        if self.max_seconds is not None and self.max_seconds <= 0:
            raise InvalidRunError(f"max_seconds must be positive, got {self.max_seconds}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "BenchConfig":
        """Build a config, taking the iteration count from the environment.

        Explicit keyword overrides win over the environment.
        """
        environ = os.environ if environ is None else environ
        values = {}

        raw = environ.get(ITERATIONS_ENV)
        if raw:
            try:
                values["iterations"] = int(raw)
            except ValueError:
                raise InvalidRunError(f"{ITERATIONS_ENV} must be an integer, got {raw!r}") from None

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def with_overrides(self, **overrides) -> "BenchConfig":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
