from datetime import datetime

from pydantic import BaseModel


class RouteMetricsRead(BaseModel):
    method: str
    path: str
    count: int
    avg_latency_ms: float
    max_latency_ms: float
    client_errors: int
    server_errors: int
    # 503 responses, raised when the batch store could not be written or read.
    storage_unavailable: int


class ObservabilityMetricsResponse(BaseModel):
    """Request counters for the register since the process started."""

    generated_at: datetime
    uptime_seconds: int
    total_requests: int
    total_client_errors: int
    total_server_errors: int
    total_storage_unavailable: int
    routes: list[RouteMetricsRead]
