#!/usr/bin/env python3

import logging
import random
import time

import click

from cache_db import CacheConfig, CacheEngine, EngineSettings, InMemoryEventLog, StorageConfig


def _now() -> str:
    return time.strftime("%H:%M:%S")


def render(engine: CacheEngine, log: InMemoryEventLog, tail: int) -> None:
    click.clear()
    entries = engine.get_all()
    config = engine.config
    click.echo(f"[{_now()}] {config.storage_key}: {len(entries)}/{config.max_size} entries (MRU -> LRU)")
    for position, (key, entry) in enumerate(entries, start=1):
        remaining = engine.remaining_ttl_ms(key) or 0
        click.echo(f"  {position:>2}. {key:<10} {entry.value!r:<12} expires in {remaining / 1000:5.1f}s")
    click.echo("")
    click.echo("Recent events:")
    for event in log.tail(tail):
        stamp = time.strftime("%H:%M:%S", time.localtime(event.timestamp / 1000))
        click.echo(f"  {stamp} {event.kind.value:<12} {event.message}")


@click.command()
@click.option(
    "--store",
    type=click.Choice(["memory", "file", "redis"], case_sensitive=False),
    default="memory",
    help="Blob store for snapshots",
)
@click.option("--path", default=".cache-db", help="Directory for the file store")
@click.option("--redis-url", default="redis://localhost:6379/0", help="Redis URL for the redis store")
@click.option("--max-size", default=5, type=int, help="Maximum resident entries")
@click.option("--default-ttl", default=5000, type=int, help="Default TTL in milliseconds")
@click.option("--interval", default=0.4, type=float, help="Display refresh interval seconds")
@click.option("--tail", default=8, type=int, help="Show N most recent events")
@click.option("--writes/--no-writes", default=True, help="Generate random traffic while monitoring")
def main(
    store: str,
    path: str,
    redis_url: str,
    max_size: int,
    default_ttl: int,
    interval: float,
    tail: int,
    writes: bool,
) -> None:
    logging.basicConfig(level=logging.WARNING)
    settings = EngineSettings(
        cache=CacheConfig(max_size=max_size, default_ttl_ms=default_ttl),
        storage=StorageConfig(type=store, path=path, connection_string=redis_url),
    )
    log = InMemoryEventLog(settings.event_log_size)
    engine = CacheEngine(settings.cache, settings.build_blob_store(), on_event=log)
    keys = [f"k{i}" for i in range(max_size * 2)]

    while True:
        try:
            if writes:
                key = random.choice(keys)
                if random.random() < 0.5:
                    engine.get(key)
                else:
                    engine.set(key, str(random.randint(0, 999)), random.choice([None, 1000, 3000]))
            render(engine, log, tail)
            time.sleep(interval)
        except KeyboardInterrupt:
            break


if __name__ == "__main__":
    main()
