"""Prometheus metrics and the in-memory collector behind the /metrics snapshot."""

import threading
from collections import deque
from typing import Any

from prometheus_client import Counter, Gauge, Histogram

wordstream_streams_started_total = Counter(
    "wordstream_streams_started_total", "Total number of word streams opened"
)

wordstream_streams_finished_total = Counter(
    "wordstream_streams_finished_total",
    "Total number of word streams that ended, by outcome",
    ["outcome"],
)

wordstream_words_emitted_total = Counter(
    "wordstream_words_emitted_total", "Total number of words written to stream bodies"
)

wordstream_active_streams = Gauge(
    "wordstream_active_streams", "Number of word streams currently emitting"
)

wordstream_stream_duration_seconds = Histogram(
    "wordstream_stream_duration_seconds",
    "Wall-clock time from first byte to terminator or abort",
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
)


class StreamMetrics:
    def stream_started(self) -> None:
        wordstream_streams_started_total.inc()
        wordstream_active_streams.inc()

    def word_emitted(self) -> None:
        wordstream_words_emitted_total.inc()

    def stream_finished(self, outcome: str, duration: float) -> None:
        wordstream_active_streams.dec()
        wordstream_streams_finished_total.labels(outcome=outcome).inc()
        wordstream_stream_duration_seconds.observe(duration)


stream_metrics = StreamMetrics()


class MetricsCollector:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, int] = {
            "requests_total": 0,
            "streams_started": 0,
            "streams_completed": 0,
            "streams_aborted": 0,
            "words_emitted": 0,
        }
        self._gauges: dict[str, int] = {"active_requests": 0, "active_streams": 0}
        self._counter_dicts: dict[str, dict[str, int]] = {
            "requests_by_status": {},
            "requests_by_endpoint": {},
        }
        self._observations: dict[str, deque[float]] = {
            "response_time_seconds": deque(maxlen=1000),
            "stream_duration_seconds": deque(maxlen=1000),
        }

    def increment(self, metric_name: str, amount: int = 1) -> None:
        with self._lock:
            if metric_name in self._counters:
                self._counters[metric_name] += amount
            elif metric_name in self._gauges:
                self._gauges[metric_name] += amount

    def decrement(self, metric_name: str, amount: int = 1) -> None:
        with self._lock:
            if metric_name in self._gauges:
                self._gauges[metric_name] -= amount

    def observe(self, metric_name: str, value: float) -> None:
        with self._lock:
            if metric_name in self._observations:
                self._observations[metric_name].append(value)

    def increment_dict(self, metric_name: str, key: str, amount: int = 1) -> None:
        with self._lock:
            if metric_name in self._counter_dicts:
                current = self._counter_dicts[metric_name].get(key, 0)
                self._counter_dicts[metric_name][key] = current + amount

    def gauge(self, metric_name: str) -> int:
        with self._lock:
            return self._gauges.get(metric_name, 0)

    def reset(self) -> None:
        # Gauges track live work and survive a reset
        with self._lock:
            self._counters = {k: 0 for k in self._counters}
            self._counter_dicts = {k: {} for k in self._counter_dicts}
            self._observations = {k: deque(maxlen=1000) for k in self._observations}

    def get_metrics(self) -> dict[str, Any]:
        with self._lock:
            response_times = list(self._observations["response_time_seconds"])
            stream_durations = list(self._observations["stream_duration_seconds"])
            counters_snapshot = dict(self._counters)
            gauges_snapshot = dict(self._gauges)
            by_status = dict(self._counter_dicts["requests_by_status"])
            by_endpoint = dict(self._counter_dicts["requests_by_endpoint"])
        avg_ms = 0.0
        p50_ms = 0.0
        p95_ms = 0.0
        p99_ms = 0.0
        if response_times:
            sorted_times = sorted(response_times)
            n = len(sorted_times)
            avg_ms = round(sum(sorted_times) / n * 1000, 1)
            p50_ms = round(sorted_times[int(n * 0.5)] * 1000, 1)
            p95_ms = round(sorted_times[min(int(n * 0.95), n - 1)] * 1000, 1)
            p99_ms = round(sorted_times[min(int(n * 0.99), n - 1)] * 1000, 1)
        avg_stream_s = (
            round(sum(stream_durations) / len(stream_durations), 3) if stream_durations else 0.0
        )
        return {
            "requests": {
                "total": counters_snapshot["requests_total"],
                "by_status": by_status,
                "by_endpoint": by_endpoint,
                "active": gauges_snapshot["active_requests"],
            },
            "performance": {
                "avg_response_time_ms": avg_ms,
                "p50_response_time_ms": p50_ms,
                "p95_response_time_ms": p95_ms,
                "p99_response_time_ms": p99_ms,
            },
            "streams": {
                "started": counters_snapshot["streams_started"],
                "completed": counters_snapshot["streams_completed"],
                "aborted": counters_snapshot["streams_aborted"],
                "active": gauges_snapshot["active_streams"],
                "words_emitted": counters_snapshot["words_emitted"],
                "avg_duration_seconds": avg_stream_s,
            },
        }


metrics = MetricsCollector()


def get_metrics() -> dict[str, Any]:
    return metrics.get_metrics()
