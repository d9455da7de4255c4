import json
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from rich.console import Console
from rich.table import Table

from loadbench.bench.runner import Measurement, StrategyFailure, SuiteResult
from loadbench.core.config import SortOrder


def _format_seconds(seconds: float) -> str:
    if seconds >= 1:
        return f"{seconds:.3f} s"
    if seconds >= 1e-3:
        return f"{seconds * 1e3:.3f} ms"
    return f"{seconds * 1e6:.1f} µs"


class Reporter:
    """Renders measurements as a comparison table."""

    def __init__(
        self,
        console: Console = None,
        sort: Union[SortOrder, str] = SortOrder.REGISTRATION,
    ):
        self.console = console or Console()
        self.sort = SortOrder(sort)

    def order(self, measurements: Sequence[Measurement]) -> List[Measurement]:
        if self.sort == SortOrder.ELAPSED:
            return sorted(measurements, key=lambda m: m.elapsed)
        return list(measurements)

    def report(
        self,
        measurements: Sequence[Measurement],
        failures: Sequence[StrategyFailure] = (),
    ):
        rows = self.order(measurements)

        if rows:
            fastest = min(m.mean for m in rows)

            table = Table(title="Load benchmark", show_header=True, header_style="bold magenta")
            table.add_column("Strategy", style="green")
            table.add_column("Form", style="dim")
            table.add_column("Iterations", justify="right")
            table.add_column("Total", justify="right", style="cyan")
            table.add_column("Mean", justify="right")
            table.add_column("Median", justify="right")
            table.add_column("p95", justify="right")
            table.add_column("Relative", justify="right", style="yellow")
            table.add_column("Δ RSS", justify="right", style="dim")

            for m in rows:
                relative = m.mean / fastest if fastest > 0 else 1.0
                table.add_row(
                    m.strategy,
                    m.form or "-",
                    str(m.iterations),
                    _format_seconds(m.elapsed),
                    _format_seconds(m.mean),
                    _format_seconds(m.median),
                    _format_seconds(m.p95),
                    f"{relative:.2f}x",
                    f"{m.memory_delta_mb:+.1f} MB",
                )

            self.console.print(table)

        for failure in failures:
            self.console.print(
                f"[bold red]✗ {failure.strategy}[/bold red] ({failure.kind}): {failure.message}"
            )

    def report_suite(self, suite: SuiteResult):
        self.report(suite.measurements, suite.failures)


def to_dict(suite: SuiteResult, metadata: Optional[Dict] = None) -> Dict:
    data = suite.to_dict()
    if metadata:
        data["metadata"] = metadata
    return data


def save_results(suite: SuiteResult, path: Union[str, Path], metadata: Optional[Dict] = None) -> None:
    """Write suite results as JSON."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(to_dict(suite, metadata), f, indent=2, ensure_ascii=False)
