from __future__ import annotations

from collections import defaultdict, deque
from threading import Lock
from typing import Deque


_MAX_SAMPLES = 500
_LATENCIES: dict[str, Deque[float]] = defaultdict(lambda: deque(maxlen=_MAX_SAMPLES))
_FAILURES: dict[str, int] = defaultdict(int)
_LOCK = Lock()


def _percentile(sorted_values: list[float], p: float) -> float:
    if not sorted_values:
        return 0.0
    if len(sorted_values) == 1:
        return float(sorted_values[0])
    rank = (len(sorted_values) - 1) * p
    low = int(rank)
    high = min(low + 1, len(sorted_values) - 1)
    weight = rank - low
    return float(sorted_values[low] * (1.0 - weight) + sorted_values[high] * weight)


def _key(kind: str, name: str) -> str:
    return f"{kind}:{str(name or 'unknown').strip() or 'unknown'}"


def observe(endpoint: str, latency_ms: float) -> None:
    with _LOCK:
        _LATENCIES[_key("http", endpoint)].append(float(max(0.0, latency_ms)))


def observe_rpc(name: str, latency_ms: float, ok: bool = True) -> None:
    key = _key("rpc", name)
    with _LOCK:
        _LATENCIES[key].append(float(max(0.0, latency_ms)))
        if not ok:
            _FAILURES[key] += 1


def reset() -> None:
    with _LOCK:
        _LATENCIES.clear()
        _FAILURES.clear()


def summary() -> dict:
    with _LOCK:
        items = {k: list(v) for k, v in _LATENCIES.items()}
        failures = dict(_FAILURES)
    out: dict[str, dict[str, dict[str, float | int]]] = {"http": {}, "rpc": {}}
    for key, values in items.items():
        if not values:
            continue
        kind, name = key.split(":", 1)
        arr = sorted(values)
        entry: dict[str, float | int] = {
            "count": len(arr),
            "p50_ms": round(_percentile(arr, 0.50), 2),
            "p95_ms": round(_percentile(arr, 0.95), 2),
            "max_ms": round(float(arr[-1]), 2),
        }
        if kind == "rpc":
            entry["failures"] = int(failures.get(key, 0))
        out.setdefault(kind, {})[name] = entry
    return out
