from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from threading import Lock

STORAGE_UNAVAILABLE = 503


def _is_client_error(status_code: int) -> bool:
    return 400 <= status_code <= 499


@dataclass
class RouteStats:
    method: str
    path: str
    count: int = 0
    total_latency_ms: float = 0.0
    max_latency_ms: float = 0.0
    client_errors: int = 0
    server_errors: int = 0
    storage_unavailable: int = 0

    def record(self, duration_ms: float, status_code: int) -> None:
        self.count += 1
        self.total_latency_ms += duration_ms
        self.max_latency_ms = max(self.max_latency_ms, duration_ms)
        if _is_client_error(status_code):
            self.client_errors += 1
        elif status_code >= 500:
            self.server_errors += 1
            if status_code == STORAGE_UNAVAILABLE:
                self.storage_unavailable += 1

    def as_dict(self) -> dict[str, object]:
        return {
            "method": self.method,
            "path": self.path,
            "count": self.count,
            "avg_latency_ms": round(self.total_latency_ms / self.count, 2) if self.count else 0.0,
            "max_latency_ms": round(self.max_latency_ms, 2),
            "client_errors": self.client_errors,
            "server_errors": self.server_errors,
            "storage_unavailable": self.storage_unavailable,
        }


class RequestTracker:
    """Per-route request counters, keyed by method and route template."""

    def __init__(self) -> None:
        self._lock = Lock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self._started_at = datetime.utcnow()
            self._routes: dict[tuple[str, str], RouteStats] = {}

    def record(self, *, method: str, path: str, status_code: int, duration_ms: float) -> None:
        with self._lock:
            route = self._routes.setdefault((method, path), RouteStats(method=method, path=path))
            route.record(duration_ms=duration_ms, status_code=status_code)

    def snapshot(self) -> dict[str, object]:
        with self._lock:
            now = datetime.utcnow()
            routes = sorted(self._routes.values(), key=lambda item: (item.path, item.method))
            return {
                "generated_at": now,
                "uptime_seconds": int((now - self._started_at).total_seconds()),
                "total_requests": sum(route.count for route in routes),
                "total_client_errors": sum(route.client_errors for route in routes),
                "total_server_errors": sum(route.server_errors for route in routes),
                "total_storage_unavailable": sum(route.storage_unavailable for route in routes),
                "routes": [route.as_dict() for route in routes],
            }


request_tracker = RequestTracker()
