from __future__ import annotations

import json
import logging
from time import perf_counter
from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from app.services.observability import request_tracker

logger = logging.getLogger("bryggeri.request")


def _route_path(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        request.state.request_id = request_id
        started = perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            self._report(request, request_id, 500, started, event="request_error")
            response = JSONResponse(
                status_code=500,
                content={"detail": "Internal server error", "request_id": request_id},
            )
        else:
            self._report(request, request_id, response.status_code, started, event="request_completed")

        response.headers["X-Request-ID"] = request_id
        return response

    @staticmethod
    def _report(request: Request, request_id: str, status_code: int, started: float, *, event: str) -> None:
        duration_ms = (perf_counter() - started) * 1000
        path = _route_path(request)
        request_tracker.record(method=request.method, path=path, status_code=status_code, duration_ms=duration_ms)

        message = json.dumps(
            {
                "event": event,
                "request_id": request_id,
                "method": request.method,
                "path": path,
                "status_code": status_code,
                "duration_ms": round(duration_ms, 2),
                "user_id": getattr(request.state, "user_id", None),
            }
        )
        if event == "request_error":
            logger.exception(message)
        elif status_code >= 500:
            logger.error(message)
        elif status_code >= 400:
            logger.warning(message)
        else:
            logger.info(message)
