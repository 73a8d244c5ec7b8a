"""Request logging middleware with request_id propagation.

One ``http_request`` event per API call. The event names the matched route
template (``/api/documents/{document_id}``) rather than the raw path, and
copies the folder, document and tag ids out of the path parameters, so access
to a given entity can be traced across requests.
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from docvault.core.logging import request_id_var, user_id_var

logger = logging.getLogger(__name__)

SKIP_PATHS = frozenset({"/api/health", "/api/version", "/favicon.ico"})
TRACED_PATH_PARAMS = ("folder_id", "document_id", "tag_id")


def _route_fields(request: Request) -> dict:
    route = request.scope.get("route")
    fields = {"route": getattr(route, "path", request.url.path)}
    params = request.scope.get("path_params") or {}
    for name in TRACED_PATH_PARAMS:
        if name in params:
            fields[name] = params[name]
    return fields


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request_id_var.set(rid)
        user_id_var.set(None)

        start = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        if request.url.path in SKIP_PATHS:
            return response

        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            "http_request",
            extra={
                "method": request.method,
                "path": request.url.path,
                **_route_fields(request),
                "status_code": response.status_code,
                "latency_ms": round((time.perf_counter() - start) * 1000, 1),
                # Set by the auth dependency once the token resolves
                "user_id": getattr(request.state, "user_id", None),
            },
        )
        return response
