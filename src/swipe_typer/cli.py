"""SwipeTyper CLI.

Usage:
    swipe-typer replay SCRIPT     — Replay a gesture script and print the words
    swipe-typer metrics SCRIPT    — Replay a script and print Prometheus metrics
    swipe-typer benchmark         — Time engine operations on synthetic swipes
    swipe-typer config            — Print or write the default configuration
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="swipe-typer",
    help="Swipe-to-type gesture engine tools.",
    add_completion=False,
)


def _load_config(path: Optional[str]):
    from swipe_typer.config import EngineConfig

    if path is None:
        return None
    if not Path(path).exists():
        typer.echo(f"❌ Config not found: {path}", err=True)
        raise typer.Exit(1)
    try:
        return EngineConfig.from_yaml(path).validate()
    except ValueError as e:
        typer.echo(f"❌ Invalid config: {e}", err=True)
        raise typer.Exit(1)


def _load_script(path: str):
    from swipe_typer.script import GestureScript

    if not Path(path).exists():
        typer.echo(f"❌ Script not found: {path}", err=True)
        raise typer.Exit(1)
    try:
        return GestureScript.load(path)
    except (KeyError, ValueError) as e:
        typer.echo(f"❌ Invalid script: {e}", err=True)
        raise typer.Exit(1)


@app.callback()
def main_options(
    log_level: str = typer.Option("warning", help="Log level"),
):
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


@app.command()
def replay(
    script_path: str = typer.Argument(..., help="Path to a YAML/JSON gesture script"),
    config: Optional[str] = typer.Option(None, "--config", help="Path to engine config YAML"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print every letter selection"),
):
    """Replay a gesture script on virtual time."""
    from swipe_typer.script import SimulatedLoop

    script = _load_script(script_path)
    engine_config = _load_config(config)

    loop = SimulatedLoop()
    engine = script.build_engine(loop, config=engine_config)

    if verbose:
        def on_letter(event):
            typer.echo(f"   {event.timestamp:6.3f}s  {event.label}  ({event.trigger.value})")
        engine.on_letter(on_letter)

    typer.echo(f"▶️  Replaying {Path(script_path).name} ({len(script.steps)} steps, {script.duration:.2f}s)")
    words = script.run(engine, loop)
    engine.dispose()

    for word in words:
        typer.echo(f"✍️  {word or '(empty)'}")
    typer.echo(f"✅ Replay complete. {len(words)} word(s).")


@app.command()
def metrics(
    script_path: str = typer.Argument(..., help="Path to a YAML/JSON gesture script"),
    config: Optional[str] = typer.Option(None, "--config", help="Path to engine config YAML"),
):
    """Replay a script and print the collected metrics."""
    from swipe_typer.metrics import MetricsCollector
    from swipe_typer.script import SimulatedLoop

    script = _load_script(script_path)
    engine_config = _load_config(config)

    collector = MetricsCollector()
    loop = SimulatedLoop()
    engine = script.build_engine(loop, config=engine_config, metrics=collector)
    script.run(engine, loop)
    engine.dispose()

    typer.echo(collector.render(), nl=False)


@app.command()
def benchmark(
    iterations: int = typer.Option(200, help="Number of synthetic swipes"),
    tiles: int = typer.Option(10, help="Tiles in the grid"),
    samples: int = typer.Option(60, help="Pointer samples per swipe"),
    seed: int = typer.Option(42, help="Random seed"),
):
    """Run synthetic swipes through the engine and report latency."""
    import numpy as np
    from swipe_typer.engine import SwipeEngine
    from swipe_typer.profiler import EngineProfiler
    from swipe_typer.script import SimulatedLoop, grid_bounds

    typer.echo(f"⚡ Running benchmark: {iterations} swipes, {tiles} tiles, {samples} samples each")

    labels = [chr(ord("A") + i % 26) for i in range(tiles)]
    columns = max(1, (tiles + 1) // 2)
    bounds = grid_bounds(tiles, columns=columns)
    width = columns * 110.0
    height = ((tiles + columns - 1) // columns) * 110.0

    loop = SimulatedLoop()
    profiler = EngineProfiler()
    engine = SwipeEngine(labels, loop=loop, profiler=profiler)
    for i, rect in enumerate(bounds):
        engine.register_tile_bounds(i, rect)

    rng = np.random.default_rng(seed)
    letters = 0
    t0 = time.perf_counter()

    for _ in range(iterations):
        path = rng.random((samples, 2)) * (width, height)
        engine.press(tuple(path[0]))
        for x, y in path[1:-1]:
            loop.advance(0.016)
            engine.move((x, y))
        word = engine.release(tuple(path[-1]))
        letters += len(word)

    elapsed = time.perf_counter() - t0
    engine.dispose()

    typer.echo(f"\n📊 Results:")
    typer.echo(f"   Total time:      {elapsed:.3f} s")
    typer.echo(f"   Letters emitted: {letters}")

    typer.echo(f"\n📈 Operation breakdown:")
    for name, stats in profiler.summary().items():
        typer.echo(f"   {name:10s} avg={stats['avg_ms']:.4f}ms  p95={stats['p95_ms']:.4f}ms  calls={stats['calls']}")


@app.command("config")
def show_config(
    output: Optional[str] = typer.Option(None, "-o", "--output", help="Write to this file instead of stdout"),
):
    """Print or save the default engine configuration as YAML."""
    from swipe_typer.config import EngineConfig

    cfg = EngineConfig()
    if output:
        cfg.to_yaml(output)
        typer.echo(f"💾 Saved to: {output}")
    else:
        typer.echo(cfg.dump(), nl=False)


def main():
    app()


if __name__ == "__main__":
    main()
