"""Metrics middleware for API."""

import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from core.metrics import api_request_duration


def _endpoint(request: Request) -> str:
    """Route template (/admin/reports/{report_id}) so IDs don't become labels."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect API request metrics."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and collect metrics."""
        start_time = time.perf_counter()

        response = await call_next(request)

        duration = time.perf_counter() - start_time

        # Record metrics
        api_request_duration.labels(
            method=request.method, endpoint=_endpoint(request), status=response.status_code
        ).observe(duration)

        return response
