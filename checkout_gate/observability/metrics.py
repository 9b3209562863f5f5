"""
Synchronization Metrics
-----------------------
Lightweight Redis counters/timers for attribute synchronization runs and a single
snapshot function consumed by /admin/sync. If keys are missing (first boot) the
snapshot returns zeros rather than failing.
"""
from __future__ import annotations
import time
from typing import List, Tuple
from checkout_gate.store.redis_conn import get_redis

# Keys (best-effort, stable across restarts)
K_SYNC_ATT = "metrics:sync:attempts"             # INCR
K_SYNC_OK = "metrics:sync:succeeded"             # INCR
K_SYNC_FAIL = "metrics:sync:failed"              # INCR
K_SYNC_SUPERSEDED = "metrics:sync:superseded"    # INCR
K_SYNC_LAT = "metrics:sync:latencies"            # LPUSH ms
K_SYNC_FAIL_RECENT = "metrics:sync:failed_recent"  # LPUSH sessionId (trim window)

_MAX_SAMPLES = 500  # cap to bound percentile computation cost


def _percentile(data: List[float], p: float) -> float:
    """Deterministic percentile (nearest-rank on sorted data)."""
    if not data:
        return 0.0
    d = sorted(data)
    k = max(1, int(round(p * len(d))))
    return float(d[k - 1])


def increment_sync_attempt() -> None:
    get_redis().incr(K_SYNC_ATT, 1)


def increment_sync_succeeded() -> None:
    get_redis().incr(K_SYNC_OK, 1)


def increment_sync_superseded() -> None:
    get_redis().incr(K_SYNC_SUPERSEDED, 1)


def record_sync_failure(session_id: str) -> None:
    """Count the failure and remember the session for incident follow-up."""
    r = get_redis()
    r.incr(K_SYNC_FAIL, 1)
    if session_id:
        r.lpush(K_SYNC_FAIL_RECENT, session_id)
        r.ltrim(K_SYNC_FAIL_RECENT, 0, 49)  # keep last 50


def record_sync_latency(ms: int) -> None:
    try:
        ms = int(ms)
    except (TypeError, ValueError):
        return
    r = get_redis()
    r.lpush(K_SYNC_LAT, ms)
    r.ltrim(K_SYNC_LAT, 0, _MAX_SAMPLES - 1)


def _read_latency_list() -> List[float]:
    raw = get_redis().lrange(K_SYNC_LAT, 0, _MAX_SAMPLES - 1) or []
    out: List[float] = []
    for x in raw:
        try:
            out.append(float(x) / 1000.0)  # seconds
        except (TypeError, ValueError):
            continue
    return out


def _p50_p95(latencies_s: List[float]) -> Tuple[float, float]:
    if not latencies_s:
        return 0.0, 0.0
    return _percentile(latencies_s, 0.50), _percentile(latencies_s, 0.95)


def get_sync_snapshot() -> dict:
    r = get_redis()
    attempts = int(r.get(K_SYNC_ATT) or 0)
    ok = int(r.get(K_SYNC_OK) or 0)
    failed = int(r.get(K_SYNC_FAIL) or 0)
    superseded = int(r.get(K_SYNC_SUPERSEDED) or 0)
    rate = (ok / attempts) * 100.0 if attempts > 0 else 0.0

    p50, p95 = _p50_p95(_read_latency_list())
    recent_failed = [str(x) for x in (r.lrange(K_SYNC_FAIL_RECENT, 0, 19) or [])]

    return {
        "sync_attempts": attempts,
        "sync_succeeded": ok,
        "sync_failed": failed,
        "sync_superseded": superseded,
        "sync_success_rate": round(rate, 3),
        "p50_sync_latency": round(p50, 3),
        "p95_sync_latency": round(p95, 3),
        "recent_failed_sessions": recent_failed,
        "snapshot_at": int(time.time()),
    }
