"""Request ID generation utilities."""

import uuid


def generate_request_id() -> str:
    """Generate a unique request ID for tracing."""
    return str(uuid.uuid4())
