"""Rate limiting for login, password reset and public submission endpoints."""

import logging
from collections.abc import Sequence
from ipaddress import ip_address, ip_network

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from media_portal.config import get_settings

logger = logging.getLogger(__name__)


def _get_trusted_proxies() -> Sequence[str]:
    """Trusted proxy IPs or CIDR ranges from configuration."""
    settings = get_settings()

    if settings.trusted_proxies_list:
        return settings.trusted_proxies_list

    if settings.environment == "development":
        return ["127.0.0.1", "::1", "10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16"]

    return []


def _is_trusted_proxy(client_ip: str, trusted_proxies: Sequence[str]) -> bool:
    if not trusted_proxies:
        return False

    try:
        addr = ip_address(client_ip)
        for proxy in trusted_proxies:
            if "/" in proxy:
                if addr in ip_network(proxy, strict=False):
                    return True
            elif addr == ip_address(proxy):
                return True
    except ValueError:
        return False

    return False


def get_real_client_ip(request: Request) -> str:
    """Extract the client IP, honouring X-Forwarded-For only from trusted proxies.

    Also used to stamp activity log entries.
    """
    direct_ip = get_remote_address(request)

    if _is_trusted_proxy(direct_ip, _get_trusted_proxies()):
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            client_ip = forwarded_for.split(",")[0].strip()
            try:
                ip_address(client_ip)
                return client_ip
            except ValueError:
                pass

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            try:
                ip_address(real_ip)
                return real_ip
            except ValueError:
                pass

    return direct_ip


def _get_storage_uri() -> str | None:
    """Redis URI for shared counters, or None for in-memory storage."""
    settings = get_settings()
    if settings.redis_url:
        return settings.redis_url
    if settings.environment == "production":
        logger.warning("REDIS_URL not set; rate limits are tracked per worker process")
    return None


def _get_rate_limit_settings() -> dict[str, str]:
    settings = get_settings()
    return {
        "default": f"{settings.rate_limit_default}/minute",
        "auth_login": f"{settings.rate_limit_auth_login}/minute",
        "password_reset": f"{settings.rate_limit_password_reset}/minute",
        "submission": f"{settings.rate_limit_submission}/minute",
    }


_rate_limits = _get_rate_limit_settings()

limiter = Limiter(
    key_func=get_real_client_ip,
    default_limits=[_rate_limits["default"]],
    storage_uri=_get_storage_uri(),
    enabled=get_settings().rate_limit_enabled,
)

API_DEFAULT_LIMIT = _rate_limits["default"]
AUTH_LOGIN_LIMIT = _rate_limits["auth_login"]
PASSWORD_RESET_LIMIT = _rate_limits["password_reset"]
SUBMISSION_LIMIT = _rate_limits["submission"]
