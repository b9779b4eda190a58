"""Request tracing middleware."""

from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from media_portal.utils.request_id import generate_request_id


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tags every request with an ID echoed in the ``X-Request-ID`` header.

    An incoming ``X-Request-ID`` is reused so traces can span a proxy.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Response],
    ) -> Response:
        incoming = request.headers.get("x-request-id", "")
        request.state.request_id = incoming[:64] if incoming else generate_request_id()

        response = await call_next(request)
        response.headers["X-Request-ID"] = request.state.request_id
        return response
