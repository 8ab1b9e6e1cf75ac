from __future__ import annotations

import uuid
from dataclasses import dataclass

from opentelemetry import trace
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from app.context import reset_correlation_id, reset_tenant_id, set_correlation_id, set_tenant_id


@dataclass(slots=True)
class RequestContext:
    correlation_id: str
    tenant_id: str | None
    user_id: str | None

    @classmethod
    def from_request(cls, request: Request) -> RequestContext:
        headers = request.headers
        return cls(
            correlation_id=headers.get("x-correlation-id") or headers.get("x-request-id") or str(uuid.uuid4()),
            tenant_id=headers.get("x-tenant-id"),
            user_id=headers.get("x-user-id"),
        )


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Binds the correlation and tenant ids for the lifetime of a request.

    The correlation id is taken from ``x-correlation-id``, then ``x-request-id``,
    and generated when neither is sent. Both response headers echo it.
    """

    async def dispatch(self, request: Request, call_next):  # type: ignore[no-untyped-def]
        context = RequestContext.from_request(request)
        request.state.context = context

        span = trace.get_current_span()
        if span.is_recording():
            span.set_attribute("correlation_id", context.correlation_id)

        correlation_token = set_correlation_id(context.correlation_id)
        tenant_token = set_tenant_id(context.tenant_id)
        try:
            response = await call_next(request)
        finally:
            reset_tenant_id(tenant_token)
            reset_correlation_id(correlation_token)

        response.headers["x-correlation-id"] = context.correlation_id
        response.headers["x-request-id"] = context.correlation_id
        return response
