"""loadbench quickstart example."""

import tempfile
from pathlib import Path

import loadbench


def main():
    print("=" * 60)
    print("loadbench Quickstart Example")
    print("=" * 60)

    dataset = {
        "greeting": "hello",
        "cafe": "café",
        "currency": "€uro",
    }

    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)

        print("\n📁 Writing fixtures:")
        for fixture in loadbench.write_fixture_set(dataset, root, "table"):
            info = loadbench.get_fixture_info(fixture.path)
            print(f"  - {fixture.name:<20} {info['size_bytes']:>5} bytes")

        print("\n⏱  Timing strategies...")
        runner = loadbench.BenchmarkRunner(loadbench.BenchConfig(iterations=500, fixture_root=root))
        suite = runner.run_suite(
            loadbench.DEFAULT_REGISTRY.select(), "table", key="cafe", expected="café"
        )

        loadbench.Reporter(sort="elapsed").report_suite(suite)

        print("\n🚫 A wrong expected value aborts the run:")
        try:
            runner.run(loadbench.DEFAULT_REGISTRY.get("json"), root / "table.json", "cafe", "cafe", 10)
        except loadbench.CorrectnessError as exc:
            print(f"  {exc}")

    print("\n" + "=" * 60)
    print("✓ Quickstart complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
