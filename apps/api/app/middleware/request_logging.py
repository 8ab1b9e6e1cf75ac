from __future__ import annotations

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from app.context import get_tenant_id
from app.metrics import observe_http_request, resolve_http_path_label


logger = logging.getLogger("app.request")


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one ``http.request`` record per request and feeds the HTTP metrics.

    Must sit inside ``RequestContextMiddleware`` so records carry the request's
    correlation and tenant ids.
    """

    async def dispatch(self, request: Request, call_next):  # type: ignore[no-untyped-def]
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._record(request, 500, _elapsed_ms(started), failed=True)
            raise
        self._record(request, response.status_code, _elapsed_ms(started))
        return response

    def _record(self, request: Request, status_code: int, duration_ms: float, *, failed: bool = False) -> None:
        # Routing has run by now, so the label is the route template rather than the raw path.
        path = resolve_http_path_label(request)
        observe_http_request(method=request.method, path=path, status=status_code, duration=duration_ms / 1000)
        extra = {
            "method": request.method,
            "path": path,
            "status_code": status_code,
            "duration_ms": duration_ms,
            "tenant_id": get_tenant_id(),
        }
        if failed:
            logger.error("http.error", exc_info=True, extra=extra)
        elif status_code >= 500:
            logger.warning("http.request", extra=extra)
        else:
            logger.info("http.request", extra=extra)
