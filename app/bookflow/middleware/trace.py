import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

TRACE_HEADER = "X-Trace-ID"
_MAX_TRACE_ID_LENGTH = 128


def resolve_trace_id(request: Request) -> str:
    incoming = (request.headers.get(TRACE_HEADER) or "").strip()
    if incoming and len(incoming) <= _MAX_TRACE_ID_LENGTH:
        return incoming
    return str(uuid.uuid4())


class TraceIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request.state.trace_id = resolve_trace_id(request)
        response: Response = await call_next(request)
        response.headers[TRACE_HEADER] = request.state.trace_id
        return response
