"""loadbench command-line interface."""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

import loadbench
from loadbench.core.config import ITERATIONS_ENV, BenchConfig, SortOrder
from loadbench.core.errors import CorrectnessError, InvalidRunError, NotFoundError, UnknownStrategyError
from loadbench.core.fixtures import FixtureForm, FixtureProvider

app = typer.Typer(
    name="loadbench",
    help="Compare strategies for loading serialized key/value fixtures",
    add_completion=False,
)
console = Console()


@app.command()
def run(
    strategies: Optional[List[str]] = typer.Argument(None, help="Strategies to run (all if omitted)"),
    fixture: str = typer.Option(
        ..., "--fixture", "-f", help="Fixture file, or a stem resolved per strategy form"
    ),
    key: str = typer.Option(..., "--key", "-k", help="Key looked up after every load"),
    expected: str = typer.Option(..., "--expected", "-e", help="Value the key must hold"),
    iterations: Optional[int] = typer.Option(
        None, "--iterations", "-n", help=f"Loads per strategy (default 100, or ${ITERATIONS_ENV})"
    ),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Directory fixture names resolve against"),
    sort: SortOrder = typer.Option(SortOrder.REGISTRATION, "--sort", "-s", help="Report row order"),
    warmup: int = typer.Option(0, "--warmup", help="Untimed loads before each run"),
    max_seconds: Optional[float] = typer.Option(None, "--max-seconds", help="Wall-clock ceiling per run"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write results as JSON"),
    verbose: bool = typer.Option(False, "--verbose", help="Log run progress"),
):
    """Benchmark loader strategies against a fixture."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format='%(message)s')

    try:
        config = BenchConfig.from_env(
            iterations=iterations,
            warmup=warmup,
            max_seconds=max_seconds,
            sort=sort,
            fixture_root=root,
        )
        selected = loadbench.DEFAULT_REGISTRY.select(strategies)
    except (InvalidRunError, UnknownStrategyError) as exc:
        console.print(f"[bold red]Error: {exc}[/bold red]")
        raise typer.Exit(1)

    runner = loadbench.BenchmarkRunner(config)
    try:
        suite = runner.run_suite(
            selected, fixture, key, expected, provider=FixtureProvider(config.fixture_root)
        )
    except CorrectnessError as exc:
        console.print(f"[bold red]Correctness check failed: {exc}[/bold red]")
        console.print("No timings reported: fixture, key and expected value disagree.")
        raise typer.Exit(2)

    loadbench.Reporter(console=console, sort=config.sort).report_suite(suite)

    if output:
        loadbench.save_results(suite, output, metadata={
            "fixture": fixture,
            "key": key,
            "iterations": config.iterations,
            "version": loadbench.__version__,
        })
        console.print(f"[bold green]✓[/bold green] Results saved to {output}")

    if not suite.ok:
        raise typer.Exit(1)


@app.command()
def generate(
    directory: Path = typer.Argument(..., help="Output directory"),
    stem: str = typer.Option("table", "--stem", help="File name stem shared by every form"),
    size: int = typer.Option(1000, "--size", help="Number of entries"),
    seed: int = typer.Option(42, "--seed", help="Random seed"),
    forms: Optional[List[FixtureForm]] = typer.Option(
        None, "--form", help="Forms to write (all if omitted)"
    ),
):
    """Write one synthetic dataset in several fixture forms."""
    if size < 1:
        console.print(f"[bold red]Error: size must be at least 1, got {size}[/bold red]")
        raise typer.Exit(1)

    dataset = loadbench.make_dataset(size, seed=seed)
    fixtures = loadbench.write_fixture_set(dataset, directory, stem, forms)

    for fixture in fixtures:
        console.print(f"[bold green]✓[/bold green] {fixture.form.value:<15} {fixture.path}")

    probe_key = next(iter(dataset))
    console.print(f"\nProbe: --key {probe_key} --expected {dataset[probe_key]!r}")


@app.command()
def inspect(
    path: Path = typer.Argument(..., help="Path to fixture"),
):
    """Show fixture metadata without loading it."""
    try:
        info = loadbench.get_fixture_info(path)
    except NotFoundError as exc:
        console.print(f"[bold red]Error: {exc}[/bold red]")
        raise typer.Exit(1)

    console.print("\n[bold]Fixture Information[/bold]")
    console.print(f"Name: {info['name']}")
    console.print(f"Form: {info['form'] or 'unknown'}")
    console.print(f"Encoding: {info['encoding'] or 'binary'}")
    console.print(f"Size: {info['size_bytes']} bytes")
    console.print(f"SHA256: {info['file_hash'][:16]}...")
    if "magic_ok" in info:
        state = "matches" if info["magic_ok"] else "does NOT match"
        console.print(f"Magic number: {state} this interpreter")


@app.command(name="strategies")
def list_strategies():
    """List registered strategies in reporting order."""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Name", style="green")
    table.add_column("Form")
    table.add_column("Suffix", style="dim")
    table.add_column("Description")

    for strategy in loadbench.DEFAULT_REGISTRY:
        table.add_row(strategy.name, strategy.form.value, strategy.form.suffix, strategy.description)

    console.print(table)


@app.command()
def version():
    """Show version information."""
    console.print(f"loadbench version {loadbench.__version__}")


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
