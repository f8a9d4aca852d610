"""
Thread-safe in-memory metrics collector.

Tracks request and error counters per pipeline, latency samples per stage
and endpoint, and the last few errors for debugging. Data is ephemeral and
resets on restart; served as-is at GET /metrics.
"""

import time
import threading
from typing import Dict, List
from collections import defaultdict

_lock = threading.Lock()

_counters: Dict[str, int] = defaultdict(int)

# ── Latency samples (last 100 per key) ───────────────────────────────────────
_latency_samples: Dict[str, List[float]] = defaultdict(list)
MAX_SAMPLES = 100

_gauges: Dict[str, float] = defaultdict(float)

# ── Error log (last 50 errors) ───────────────────────────────────────────────
_recent_errors: List[dict] = []
MAX_ERRORS = 50


def inc_counter(name: str, amount: int = 1):
    """Increment a counter (e.g. 'requests.video-with-audio', 'errors.stage_timeout')."""
    with _lock:
        _counters[name] += amount


def record_latency(key: str, duration_ms: float):
    """Record a latency sample in milliseconds."""
    with _lock:
        samples = _latency_samples[key]
        samples.append(duration_ms)
        if len(samples) > MAX_SAMPLES:
            _latency_samples[key] = samples[-MAX_SAMPLES:]


def set_gauge(name: str, value: float):
    with _lock:
        _gauges[name] = value


def record_error(endpoint: str, error_type: str, message: str):
    """Record an error for the /metrics error log."""
    with _lock:
        _recent_errors.append({
            "timestamp": time.time(),
            "endpoint": endpoint,
            "error_type": error_type,
            "message": message[:300],
        })
        if len(_recent_errors) > MAX_ERRORS:
            _recent_errors.pop(0)


def reset():
    """Clear all collected data."""
    with _lock:
        _counters.clear()
        _latency_samples.clear()
        _gauges.clear()
        _recent_errors.clear()


def get_snapshot() -> dict:
    """Thread-safe read of all collected data."""
    now = time.time()

    with _lock:
        latency_stats = {}
        for key, samples in _latency_samples.items():
            if not samples:
                continue
            sorted_s = sorted(samples)
            n = len(sorted_s)
            latency_stats[key] = {
                "p50": sorted_s[n // 2],
                "p95": sorted_s[int(n * 0.95)] if n >= 20 else sorted_s[-1],
                "avg": sum(sorted_s) / n,
                "count": n,
            }

        error_patterns: Dict[str, int] = defaultdict(int)
        for err in _recent_errors:
            error_patterns[f"{err['endpoint']}:{err['error_type']}"] += 1

        total_requests = sum(v for k, v in _counters.items() if k.startswith("requests."))
        failed_requests = sum(v for k, v in _counters.items() if k.startswith("failures."))
        error_rate = (failed_requests / total_requests * 100) if total_requests > 0 else 0

        return {
            "timestamp": now,
            "counters": dict(_counters),
            "gauges": dict(_gauges),
            "latency": latency_stats,
            "error_rate": round(error_rate, 2),
            "recent_errors": list(_recent_errors[-10:]),
            "error_patterns": dict(error_patterns),
            "uptime_seconds": now - _gauges.get("start_time", now),
        }
