import collections, threading
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

P_REQUESTS = Counter('summarize_requests_total', 'Total summarize requests', ['outcome'])
H_LAT = Histogram('summarize_latency_ms', 'Summarize latency ms', buckets=(250, 500, 1000, 2000, 5000, 10000, 30000, 120000))

RESERVOIR_SIZE = 2000

_lock = threading.Lock()
_counts = collections.Counter()
_latencies: dict[str, collections.deque] = {}
_outcomes = collections.Counter()


def inc(name: str, amount: int = 1) -> None:
    with _lock:
        _counts[name] += amount

def observe_ms(name: str, duration_ms: float) -> None:
    with _lock:
        _latencies.setdefault(name, collections.deque(maxlen=RESERVOIR_SIZE)).append(duration_ms)

def record_summarize(outcome: str, duration_ms: float) -> None:
    """outcome is 'ok' or the error kind that ended the request."""
    with _lock:
        _counts['summarize_requests_total'] += 1
        _counts['summarize_ok_total' if outcome == 'ok' else 'summarize_errors_total'] += 1
        _outcomes[outcome] += 1
    observe_ms('summarize_latency_ms', duration_ms)
    P_REQUESTS.labels(outcome=outcome).inc()
    H_LAT.observe(duration_ms)

def prometheus_payload() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST

def latency_stats(values) -> dict:
    ordered = sorted(values)
    if not ordered:
        return {'count': 0, 'p50': 0, 'p95': 0, 'max': 0}
    last = len(ordered) - 1
    return {'count': len(ordered), 'p50': ordered[last // 2], 'p95': ordered[int(last * 0.95)], 'max': ordered[-1]}

def snapshot_metrics() -> dict:
    with _lock:
        counts = dict(_counts)
        outcomes = dict(_outcomes)
        series = {name: list(vals) for name, vals in _latencies.items()}
    total = counts.get('summarize_requests_total', 0)
    return {
        'counters': counts,
        'summarize': {
            'requests': total,
            'outcomes': outcomes,
            'error_rate': round(counts.get('summarize_errors_total', 0) / total, 4) if total else 0.0,
        },
        'timings_ms': {name: latency_stats(vals) for name, vals in series.items()},
    }
