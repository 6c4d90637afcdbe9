from __future__ import annotations

import logging
import sys
import time
import typing as t

import click

from cache_db.core.engine import CacheEngine
from cache_db.diagnostics.selftest import run_all
from cache_db.event import InMemoryEventLog, LoggingEventSink, fan_out
from cache_db.exceptions import ConfigError
from cache_db.utils.config import CacheConfig, EngineSettings, StorageConfig


def _now() -> str:
    return time.strftime("%H:%M:%S")


@click.group()
@click.option(
    "--store",
    type=click.Choice(["memory", "file", "redis"], case_sensitive=False),
    default="file",
    help="Blob store that holds the snapshot",
)
@click.option("--path", default=".cache-db", help="Directory for the file store")
@click.option("--redis-url", default="redis://localhost:6379/0", help="Redis URL for the redis store")
@click.option("--prefix", default="cache", help="Redis key prefix")
@click.option("--storage-key", default="ttl-lru-cache", help="Key the snapshot is stored under")
@click.option("--max-size", default=5, type=int, help="Maximum number of resident entries")
@click.option("--default-ttl", default=5000, type=int, help="Default TTL in milliseconds")
@click.option("--show-events", is_flag=True, default=False, help="Print cache events after the command")
@click.option(
    "--log-level",
    default="WARNING",
    help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
)
@click.pass_context
def main(
    ctx: click.Context,
    store: str,
    path: str,
    redis_url: str,
    prefix: str,
    storage_key: str,
    max_size: int,
    default_ttl: int,
    show_events: bool,
    log_level: str,
) -> None:
    """Inspect and modify a persisted TTL + LRU cache."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    settings = EngineSettings(
        cache=CacheConfig(max_size=max_size, default_ttl_ms=default_ttl, storage_key=storage_key),
        storage=StorageConfig(type=store, path=path, connection_string=redis_url, prefix=prefix),
    )
    ctx.obj = {"settings": settings, "show_events": show_events}


def _engine(ctx: click.Context) -> t.Tuple[CacheEngine, InMemoryEventLog]:
    settings: EngineSettings = ctx.obj["settings"]
    log = InMemoryEventLog(settings.event_log_size)
    try:
        engine = CacheEngine(
            settings.cache,
            settings.build_blob_store(),
            on_event=fan_out(log, LoggingEventSink()),
        )
    except ConfigError as exc:
        raise click.BadParameter(str(exc)) from exc
    ctx.call_on_close(lambda: _print_events(ctx, log))
    return engine, log


def _print_events(ctx: click.Context, log: InMemoryEventLog) -> None:
    if not ctx.obj.get("show_events"):
        return
    for event in log.events:
        stamp = time.strftime("%H:%M:%S", time.localtime(event.timestamp / 1000))
        click.echo(f"  {stamp} [{event.kind.value}] {event.message}", err=True)


@main.command("set")
@click.argument("key")
@click.argument("value")
@click.option("--ttl", default=None, type=int, help="TTL in milliseconds (default: --default-ttl)")
@click.pass_context
def set_cmd(ctx: click.Context, key: str, value: str, ttl: t.Optional[int]) -> None:
    """Store VALUE under KEY."""
    engine, _ = _engine(ctx)
    if not engine.set(key, value, ttl):
        ctx.exit(2)
    click.echo(f"OK ({engine.size()}/{engine.config.max_size})")


@main.command("get")
@click.argument("key")
@click.pass_context
def get_cmd(ctx: click.Context, key: str) -> None:
    """Print the value stored under KEY."""
    engine, _ = _engine(ctx)
    value = engine.get(key)
    if value is None:
        click.echo("(absent)")
        ctx.exit(1)
    click.echo(value)


@main.command("delete")
@click.argument("key")
@click.pass_context
def delete_cmd(ctx: click.Context, key: str) -> None:
    """Remove KEY."""
    engine, _ = _engine(ctx)
    click.echo("deleted" if engine.delete(key) else "not found")


@main.command("clear")
@click.pass_context
def clear_cmd(ctx: click.Context) -> None:
    """Remove every entry."""
    engine, _ = _engine(ctx)
    engine.clear()
    click.echo("cleared")


@main.command("size")
@click.pass_context
def size_cmd(ctx: click.Context) -> None:
    """Print the number of live entries."""
    engine, _ = _engine(ctx)
    click.echo(str(engine.size()))


@main.command("ls")
@click.pass_context
def ls_cmd(ctx: click.Context) -> None:
    """List live entries, most recently used first."""
    engine, _ = _engine(ctx)
    entries = engine.get_all()
    click.echo(f"[{_now()}] {len(entries)}/{engine.config.max_size} entries (MRU -> LRU)")
    for position, (key, entry) in enumerate(entries, start=1):
        remaining = engine.remaining_ttl_ms(key) or 0
        click.echo(f"{position:>3}. {key} = {entry.value!r}  ttl={remaining / 1000:.1f}s")


@main.command("stats")
@click.pass_context
def stats_cmd(ctx: click.Context) -> None:
    """Print event counters for this invocation."""
    engine, _ = _engine(ctx)
    engine.size()
    stats = engine.stats()
    click.echo(f"resident={stats['resident']} max_size={stats['max_size']} hit_ratio={stats['hit_ratio']:.2f}")
    for kind, count in stats["events"].items():
        if count:
            click.echo(f"  {kind}: {count}")


@main.command("selftest")
def selftest_cmd() -> None:
    """Run the built-in scenario suite with a simulated clock."""
    report = run_all()
    for result in report.results:
        status = "PASS" if result.passed else "FAIL"
        click.echo(f"{result.id:<3} {status}  {result.name}: expected {result.expected}, observed {result.observed}")
    click.echo(f"{report.passed}/{report.total} passed, {report.failed} failed")
    if not report.ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
