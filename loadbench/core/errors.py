"""Exception hierarchy for the benchmark harness."""


class HarnessError(Exception):
    """Base class for every error raised by loadbench."""


class NotFoundError(HarnessError, FileNotFoundError):
    """A fixture file does not exist or is not a regular file."""

    def __init__(self, path):
        self.path = str(path)
        super().__init__(f"Fixture not found: {self.path}")


class LoadError(HarnessError):
    """A loader strategy failed to read or parse a fixture."""

    def __init__(self, strategy: str, path, reason: str):
        self.strategy = strategy
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{strategy}: failed to load {self.path}: {reason}")


class CorrectnessError(HarnessError):
    """A loaded dataset did not hold the expected value.

    Fatal for the whole harness invocation: the fixture, key and expected
    value do not agree, so no timing from this run can be trusted.
    """

    def __init__(self, strategy: str, key: str, expected: str, actual, iteration: int):
        self.strategy = strategy
        self.key = key
        self.expected = expected
        self.actual = actual
        self.iteration = iteration
        super().__init__(
            f"{strategy}: key {key!r} gave {actual!r}, expected {expected!r} "
            f"(iteration {iteration})"
        )


class RunTimeoutError(HarnessError):
    """A run exceeded its wall-clock ceiling."""

    def __init__(self, strategy: str, limit: float, completed: int):
        self.strategy = strategy
        self.limit = limit
        self.completed = completed
        super().__init__(
            f"{strategy}: exceeded {limit:g}s after {completed} iterations"
        )


class UnknownStrategyError(HarnessError, KeyError):
    """No strategy is registered under the requested name."""

    def __init__(self, name: str, available):
        self.name = name
        self.available = list(available)
        super().__init__(name)

    def __str__(self) -> str:
        return f"Unknown strategy {self.name!r} (available: {', '.join(self.available)})"


class InvalidRunError(HarnessError, ValueError):
    """Run parameters are invalid (e.g. a non-positive iteration count)."""
