"""
Process-local TTL cache for vibe rankings.

Entries are keyed by a hash of a JSON payload and carry their own expiry.
When the cache is full the entry closest to expiring is evicted.
"""
from __future__ import annotations

import hashlib
import json
import time
from dataclasses import dataclass
from typing import Any

MAX_ENTRIES = 256
DEFAULT_TTL = 300.0


@dataclass
class _Entry:
    value: Any
    expires_at: float


_entries: dict[str, _Entry] = {}
_stats = {"hits": 0, "misses": 0, "evictions": 0}


def make_key(payload: dict) -> str:
    """Stable key for *payload*; dict ordering does not matter."""
    normalized = json.dumps(payload, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def cache_get(payload: dict) -> Any | None:
    key = make_key(payload)
    entry = _entries.get(key)
    if entry is not None and entry.expires_at > time.monotonic():
        _stats["hits"] += 1
        return entry.value
    if entry is not None:
        del _entries[key]
    _stats["misses"] += 1
    return None


def cache_set(payload: dict, value: Any, ttl: float = DEFAULT_TTL) -> None:
    if ttl <= 0:
        return
    key = make_key(payload)
    if key not in _entries and len(_entries) >= MAX_ENTRIES:
        oldest = min(_entries, key=lambda k: _entries[k].expires_at)
        del _entries[oldest]
        _stats["evictions"] += 1
    _entries[key] = _Entry(value=value, expires_at=time.monotonic() + ttl)


def get_cache_stats() -> dict:
    total = _stats["hits"] + _stats["misses"]
    return {
        "size": len(_entries),
        **_stats,
        "hit_rate": round(_stats["hits"] / total * 100, 1) if total > 0 else 0.0,
    }


def clear_cache() -> None:
    _entries.clear()
    for name in _stats:
        _stats[name] = 0
