"""
Request trace context.

Each request runs under a (trace_id, span_id) pair taken from an incoming W3C
traceparent header, or freshly generated when the header is missing or
malformed. The pair lives in context vars so log entries can carry it, and is
echoed back in the traceparent and X-Trace-ID response headers.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional, Tuple

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

TRACEPARENT_PATTERN = re.compile(r'^00-([0-9a-f]{32})-([0-9a-f]{16})-[0-9a-f]{2}$')
TRACE_ID_HEADER = "X-Trace-ID"

trace_id_ctx: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)
span_id_ctx: ContextVar[Optional[str]] = ContextVar("span_id", default=None)


def get_trace_id() -> Optional[str]:
    return trace_id_ctx.get()


def get_span_id() -> Optional[str]:
    return span_id_ctx.get()


def parse_traceparent(traceparent: Optional[str]) -> Optional[Tuple[str, str]]:
    """
    Parse a version 00 traceparent header into (trace_id, span_id).

    Returns None for a missing or malformed header, or one with all-zero ids.
    """
    if not traceparent:
        return None

    match = TRACEPARENT_PATTERN.match(traceparent)
    if not match:
        return None

    trace_id, span_id = match.groups()
    if trace_id == '0' * 32 or span_id == '0' * 16:
        return None
    return trace_id, span_id


def format_traceparent(trace_id: str, span_id: str) -> str:
    """traceparent header value with the sampled flag set"""
    return f"00-{trace_id}-{span_id}-01"


def new_trace_context() -> Tuple[str, str]:
    """Random (trace_id, span_id) pair of 32 and 16 hex chars"""
    return uuid.uuid4().hex, uuid.uuid4().hex[:16]


class TraceContextMiddleware(BaseHTTPMiddleware):
    """Binds the request's trace context and echoes it in the response headers"""

    async def dispatch(self, request: Request, call_next):
        trace_id, span_id = (
            parse_traceparent(request.headers.get("traceparent"))
            or new_trace_context()
        )
        trace_id_ctx.set(trace_id)
        span_id_ctx.set(span_id)

        response = await call_next(request)

        response.headers["traceparent"] = format_traceparent(trace_id, span_id)
        response.headers[TRACE_ID_HEADER] = trace_id
        return response
