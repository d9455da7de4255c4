"""
Compare loader strategies across dataset sizes.

For each size, writes the same synthetic dataset in every fixture form,
then times every registered strategy on its own form. Shows whether the
precompiled forms (bytecode, pickle) actually load faster than the
textual ones, and how the gap moves with dataset size.

Run from project root:
    python benchmarks/compare_loaders.py
"""

import sys
import tempfile
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from rich.console import Console

from loadbench import (
    DEFAULT_REGISTRY,
    BenchConfig,
    BenchmarkRunner,
    Reporter,
    SortOrder,
    SuiteResult,
    make_dataset,
    save_results,
    write_fixture_set,
)

SIZES = [10, 1000, 20000]
ITERATIONS = {10: 2000, 1000: 200, 20000: 10}


def run_size(size: int, workdir: Path, console: Console) -> SuiteResult:
    """Run every strategy against one dataset size."""
    dataset = make_dataset(size, seed=42)
    key = next(iter(dataset))
    write_fixture_set(dataset, workdir, f"table-{size}")

    config = BenchConfig(iterations=ITERATIONS[size], warmup=1, fixture_root=workdir)
    runner = BenchmarkRunner(config)
    suite = runner.run_suite(DEFAULT_REGISTRY.select(), f"table-{size}", key, dataset[key])

    console.print(f"\n[bold]{size} entries[/bold] ({config.iterations} iterations per strategy)")
    Reporter(console=console, sort=SortOrder.ELAPSED).report_suite(suite)
    return suite


def main():
    console = Console()
    console.print("[bold blue]Loader strategy comparison[/bold blue]")

    output_dir = Path(__file__).parent / "results"
    output_dir.mkdir(parents=True, exist_ok=True)

    with tempfile.TemporaryDirectory() as tmpdir:
        for size in SIZES:
            suite = run_size(size, Path(tmpdir), console)
            output_file = output_dir / f"compare_loaders_{size}.json"
            save_results(suite, output_file, metadata={"size": size})
            console.print(f"[bold green]✓[/bold green] Results saved to {output_file}")


if __name__ == "__main__":
    main()
