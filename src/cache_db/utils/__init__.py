"""Configuration and time-source helpers."""

from .clock import Clock, ManualClock, system_clock
from .config import CacheConfig, EngineSettings, StorageConfig

__all__ = [
    "CacheConfig",
    "Clock",
    "EngineSettings",
    "ManualClock",
    "StorageConfig",
    "system_clock",
]
