"""Deterministic luck function using xxhash.

The outcome of every spawn decision depends ONLY on the key string, so a
cell's initial contents can be recomputed at any time without persisting
them.
"""

from __future__ import annotations

import xxhash

LARGE_INTEGER = 1 << 30


def luck(key: str) -> float:
    """Return a deterministic float in [0.0, 1.0) for *key*.

    Use the result like ``random.random()``. Stable across processes and
    platforms (xxh32, seed 0, UTF-8 input).
    """
    digest = xxhash.xxh32(key.encode("utf-8")).intdigest()
    return (digest % LARGE_INTEGER) / LARGE_INTEGER
