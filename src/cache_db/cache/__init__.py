from .expiry import expires_at, is_live, resolve_ttl, sweep
from .recency import RecencyTable

__all__ = ["RecencyTable", "expires_at", "is_live", "resolve_ttl", "sweep"]
