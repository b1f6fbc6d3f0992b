# src/moneyxfer/api/middleware.py
from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from moneyxfer.structured_logging import log_event

log = logging.getLogger("moneyxfer.http")


class RequestLogMiddleware(BaseHTTPMiddleware):
    """One `http_request` event per answered request; echoes x-request-id."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        t0 = time.perf_counter()

        response = await call_next(request)
        response.headers["x-request-id"] = request_id

        log_event(
            log,
            "http_request",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - t0) * 1000, 1),
        )
        return response
