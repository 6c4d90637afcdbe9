from .metrics import Counter, Histogram, cache_events_total, cache_persist_latency_seconds

__all__ = ["Counter", "Histogram", "cache_events_total", "cache_persist_latency_seconds"]
