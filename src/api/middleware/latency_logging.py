"""Request latency logging middleware for performance monitoring."""

import logging
import threading
import time
from collections import deque
from typing import Any, Callable

from fastapi import Request, Response

logger = logging.getLogger(__name__)

# Thresholds for log levels (in milliseconds)
SLOW_REQUEST_THRESHOLD_MS = 1000
VERY_SLOW_REQUEST_THRESHOLD_MS = 3000

# Probes hit these every few seconds
PROBE_PATHS = ("/ping", "/health", "/health/ready")

# Recent requests outside PROBE_PATHS kept for the /health summary
LATENCY_WINDOW = 500


class LatencyStats:
    """Rolling window of recent request latencies."""

    def __init__(self, window: int = LATENCY_WINDOW) -> None:
        self._samples: deque[float] = deque(maxlen=window)
        self._errors: deque[bool] = deque(maxlen=window)
        self._total = 0
        self._lock = threading.Lock()

    def record(self, latency_ms: float, failed: bool) -> None:
        with self._lock:
            self._samples.append(latency_ms)
            self._errors.append(failed)
            self._total += 1

    def reset(self) -> None:
        with self._lock:
            self._samples.clear()
            self._errors.clear()
            self._total = 0

    def snapshot(self) -> dict[str, Any]:
        """Summarize the window.

        Returns:
            dict: Request count since start, window size, error count and
            average, p95 and max latency over the window in milliseconds.
        """
        with self._lock:
            samples = sorted(self._samples)
            errors = sum(self._errors)
            total = self._total

        if not samples:
            return {"total_requests": total, "window": 0, "errors": 0}

        p95_index = min(len(samples) - 1, int(len(samples) * 0.95))
        return {
            "total_requests": total,
            "window": len(samples),
            "errors": errors,
            "avg_ms": round(sum(samples) / len(samples), 2),
            "p95_ms": round(samples[p95_index], 2),
            "max_ms": round(samples[-1], 2),
        }


_stats = LatencyStats()


def get_latency_stats() -> LatencyStats:
    """Return the process-wide latency window."""
    return _stats


async def latency_logging_middleware(request: Request, call_next: Callable) -> Response:
    """Middleware to log request latency.

    Logs one line per request, with elevated log levels for failed or
    slow requests. Probe requests are only logged at debug level.

    Args:
        request: The incoming request.
        call_next: The next middleware/handler in the chain.

    Returns:
        Response: The response from the handler.
    """
    start_time = time.perf_counter()

    method = request.method
    path = request.url.path
    is_probe = path in PROBE_PATHS

    response = None
    error_occurred = False

    try:
        response = await call_next(request)
        return response
    except Exception:
        error_occurred = True
        raise
    finally:
        latency_ms = (time.perf_counter() - start_time) * 1000
        status_code = response.status_code if response else 500

        log_data = {
            "method": method,
            "path": path,
            "status_code": status_code,
            "latency_ms": round(latency_ms, 2),
            "error": error_occurred,
        }
        log_msg = f"{method} {path} - {status_code} - {latency_ms:.2f}ms"

        if not is_probe:
            _stats.record(latency_ms, error_occurred or status_code >= 500)

        if is_probe:
            logger.debug(log_msg, extra=log_data)
        elif error_occurred or status_code >= 500:
            logger.error(log_msg, extra=log_data)
        elif latency_ms > VERY_SLOW_REQUEST_THRESHOLD_MS:
            logger.error(f"VERY SLOW REQUEST: {log_msg}", extra=log_data)
        elif latency_ms > SLOW_REQUEST_THRESHOLD_MS:
            logger.warning(f"SLOW REQUEST: {log_msg}", extra=log_data)
        elif status_code >= 400:
            logger.warning(log_msg, extra=log_data)
        else:
            logger.info(log_msg, extra=log_data)
