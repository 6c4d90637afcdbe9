from .inmemory import InMemoryEventLog, LoggingEventSink, fan_out
from .types import CacheEvent, CacheEventKind, EventSink

__all__ = [
    "CacheEvent",
    "CacheEventKind",
    "EventSink",
    "InMemoryEventLog",
    "LoggingEventSink",
    "fan_out",
]
