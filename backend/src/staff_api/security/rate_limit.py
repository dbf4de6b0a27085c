"""Per-actor rate limiting for the admin API."""

import logging
from ipaddress import IPv4Network, IPv6Network, ip_address, ip_network

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from staff_api.config import get_settings

logger = logging.getLogger(__name__)

# Trusted by default in development only
DEVELOPMENT_TRUSTED_PROXIES = ("127.0.0.1", "::1", "10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16")

# Redis database holding limiter counters
LIMITER_REDIS_DB = 1


def _trusted_networks() -> list[IPv4Network | IPv6Network]:
    """Networks whose forwarding headers are believed.

    Single addresses are treated as one-host networks. Invalid entries are
    logged and skipped.
    """
    settings = get_settings()
    entries = settings.trusted_proxies_list
    if not entries and settings.environment == "development":
        entries = list(DEVELOPMENT_TRUSTED_PROXIES)

    networks = []
    for entry in entries:
        try:
            networks.append(ip_network(entry, strict=False))
        except ValueError:
            logger.warning("Ignoring invalid trusted proxy entry %r", entry)
    return networks


def _is_trusted_proxy(client_ip: str, networks: list[IPv4Network | IPv6Network]) -> bool:
    try:
        addr = ip_address(client_ip)
    except ValueError:
        return False
    return any(addr in network for network in networks)


def _first_valid_ip(*candidates: str | None) -> str | None:
    for candidate in candidates:
        if not candidate:
            continue
        candidate = candidate.strip()
        try:
            ip_address(candidate)
        except ValueError:
            continue
        return candidate
    return None


def get_real_client_ip(request: Request) -> str:
    """Client IP, honouring proxy headers only from trusted proxies.

    The first ``X-Forwarded-For`` hop wins, then ``X-Real-IP``; malformed
    values are ignored.

    Args:
        request: Incoming request

    Returns:
        Client IP address
    """
    direct_ip = get_remote_address(request)
    if not _is_trusted_proxy(direct_ip, _trusted_networks()):
        return direct_ip

    forwarded_for = request.headers.get("X-Forwarded-For", "").split(",")[0]
    return _first_valid_ip(forwarded_for, request.headers.get("X-Real-IP")) or direct_ip


def get_actor_or_client_ip(request: Request) -> str:
    """Rate limit key: the authenticated actor, else the client IP.

    ``request.state.actor_id`` is set by the authentication dependency.
    """
    actor_id = getattr(request.state, "actor_id", None)
    if actor_id is not None:
        return f"actor:{actor_id}"
    return f"ip:{get_real_client_ip(request)}"


def _get_storage_uri() -> str:
    """Limiter storage: Redis when configured, else process memory.

    Raises:
        ValueError: If Redis is missing in production
    """
    settings = get_settings()
    if settings.redis_url is None:
        if settings.environment == "production":
            raise ValueError("REDIS_URL must be configured in production for distributed rate limiting.")
        return "memory://"

    redis_url = str(settings.redis_url).rstrip("/")
    if redis_url.count("/") == 2:
        redis_url = f"{redis_url}/{LIMITER_REDIS_DB}"
    return redis_url


_settings = get_settings()

API_DEFAULT_LIMIT = f"{_settings.rate_limit_default}/minute"
ADMIN_OPERATION_LIMIT = f"{_settings.rate_limit_admin}/{_settings.rate_limit_admin_window_minutes} minutes"
ADMIN_RETRY_AFTER = f"{_settings.rate_limit_admin_window_minutes} minutes"

limiter = Limiter(
    key_func=get_real_client_ip,
    default_limits=[API_DEFAULT_LIMIT],
    storage_uri=_get_storage_uri(),
)
