"""Middleware package."""

from media_portal.middleware.request_id_middleware import RequestIDMiddleware

__all__ = [
    "RequestIDMiddleware",
]
