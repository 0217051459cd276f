from __future__ import annotations

from flask import Flask

from blogger.shared.middleware.rate_limit import (RATE_LIMIT_ENABLED,
                                                  RATE_LIMIT_REQUESTS,
                                                  RATE_LIMIT_WINDOW,
                                                  InMemoryRateLimiter,
                                                  rate_limit)


def test_limiter_blocks_after_limit_and_recovers_after_window() -> None:
    limiter = InMemoryRateLimiter(limit=2, window_seconds=10.0)

    assert limiter.allow("ip", now=0.0)
    assert limiter.allow("ip", now=1.0)
    assert not limiter.allow("ip", now=2.0)
    assert limiter.allow("other", now=2.0)
    assert limiter.allow("ip", now=10.5)


def test_decorated_view_returns_429() -> None:
    app = Flask(__name__)

    @app.post("/limited")
    @rate_limit(limit=1, window_seconds=60.0)
    def limited():
        return "ok"

    with app.test_client() as client:
        assert client.post("/limited").status_code == 200
        blocked = client.post("/limited")

    assert blocked.status_code == 429
    assert blocked.get_json() == {"error": "rate_limited"}


def test_decorator_can_be_disabled() -> None:
    app = Flask(__name__)
    app.config[RATE_LIMIT_ENABLED] = False

    @app.post("/limited")
    @rate_limit(limit=1, window_seconds=60.0)
    def limited():
        return "ok"

    with app.test_client() as client:
        statuses = [client.post("/limited").status_code for _ in range(3)]

    assert statuses == [200, 200, 200]


def test_unset_bounds_come_from_app_config() -> None:
    app = Flask(__name__)
    app.config[RATE_LIMIT_REQUESTS] = 2
    app.config[RATE_LIMIT_WINDOW] = 60.0

    @app.post("/limited")
    @rate_limit()
    def limited():
        return "ok"

    with app.test_client() as client:
        statuses = [client.post("/limited").status_code for _ in range(3)]

    assert statuses == [200, 200, 429]
