"""Rate limit key function tests."""

from starlette.requests import Request

from staff_api.security.rate_limit import ADMIN_RETRY_AFTER, get_actor_or_client_ip, get_real_client_ip


def _request(client_ip: str, headers: dict[str, str] | None = None) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/api/v1/employees",
        "query_string": b"",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": (client_ip, 54321),
    }
    return Request(scope)


class TestClientIp:
    """Tests for proxy-aware client IP extraction (development defaults)."""

    def test_untrusted_peer_headers_ignored(self) -> None:
        request = _request("203.0.113.9", {"X-Forwarded-For": "198.51.100.4"})

        assert get_real_client_ip(request) == "203.0.113.9"

    def test_trusted_proxy_first_hop(self) -> None:
        request = _request("10.1.2.3", {"X-Forwarded-For": "198.51.100.4, 10.0.0.1"})

        assert get_real_client_ip(request) == "198.51.100.4"

    def test_malformed_forwarded_for_falls_back_to_real_ip(self) -> None:
        request = _request("10.1.2.3", {"X-Forwarded-For": "garbage", "X-Real-IP": "198.51.100.5"})

        assert get_real_client_ip(request) == "198.51.100.5"

    def test_trusted_proxy_without_headers(self) -> None:
        assert get_real_client_ip(_request("192.168.1.10")) == "192.168.1.10"


class TestActorKey:
    """Tests for the per-actor limiter key."""

    def test_actor_preferred(self) -> None:
        request = _request("203.0.113.9")
        request.state.actor_id = "5b0c4c1e-0000-4000-8000-000000000001"

        assert get_actor_or_client_ip(request) == "actor:5b0c4c1e-0000-4000-8000-000000000001"

    def test_ip_fallback(self) -> None:
        assert get_actor_or_client_ip(_request("203.0.113.9")) == "ip:203.0.113.9"


def test_retry_after_matches_window() -> None:
    assert ADMIN_RETRY_AFTER == "15 minutes"
