"""Tests for the HTTP side of rate limiting: client identity and limit classes."""

import pytest
from starlette.requests import Request

from app.core.config import RateLimitSettings
from app.core.rate_limit import (
    ACKNOWLEDGEMENT,
    GENERAL,
    HIGH_FIVE,
    PROOF,
    REGISTER,
    build_limit_classes,
    get_client_ip,
)


def _request(headers: dict[str, str] | None = None, client: tuple[str, int] | None = ("10.0.0.9", 5000)) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
    }
    return Request(scope)


@pytest.mark.parametrize(
    ("headers", "expected"),
    [
        ({"X-Forwarded-For": "203.0.113.9, 10.0.0.1"}, "203.0.113.9"),
        ({"X-Forwarded-For": "203.0.113.9", "X-Real-IP": "198.51.100.4"}, "203.0.113.9"),
        ({"X-Real-IP": " 198.51.100.4 "}, "198.51.100.4"),
        ({}, "10.0.0.9"),
    ],
)
def test_client_ip_precedence(headers, expected) -> None:
    assert get_client_ip(_request(headers)) == expected


def test_client_ip_unknown_without_any_source() -> None:
    assert get_client_ip(_request(client=None)) == "unknown"


def test_default_limit_classes() -> None:
    classes = build_limit_classes(RateLimitSettings())

    assert {name: cfg.max_requests for name, cfg in classes.items()} == {
        REGISTER: 10,
        PROOF: 60,
        HIGH_FIVE: 100,
        ACKNOWLEDGEMENT: 100,
        GENERAL: 1000,
    }
    assert all(cfg.window_ms == 3_600_000 for cfg in classes.values())


def test_limit_classes_follow_settings() -> None:
    classes = build_limit_classes(RateLimitSettings(window_seconds=60, high_five_max=3))

    assert classes[HIGH_FIVE].max_requests == 3
    assert classes[HIGH_FIVE].window_ms == 60_000
