from fastapi import FastAPI
from fastapi.testclient import TestClient

from portfolio_api.middleware.rate_limit import RateLimitMiddleware


def _app() -> FastAPI:
    app = FastAPI()

    @app.post("/api/contact")
    def contact():
        return {"success": True}

    @app.post("/api/auth/login")
    def login():
        return {"token": "t"}

    @app.get("/api/projects")
    def projects():
        return []

    return app


def _limited(max_requests: int = 2, **kwargs) -> RateLimitMiddleware:
    return RateLimitMiddleware(_app(), max_requests=max_requests, window_seconds=60, **kwargs)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_limited_route_returns_429_after_limit():
    client = TestClient(_limited(max_requests=2))
    assert client.post("/api/contact").status_code == 200
    assert client.post("/api/contact").status_code == 200
    resp = client.post("/api/contact")
    assert resp.status_code == 429
    assert resp.json()["error"] == "rate_limit_exceeded"


def test_routes_are_counted_separately():
    client = TestClient(_limited(max_requests=1))
    assert client.post("/api/contact").status_code == 200
    assert client.post("/api/auth/login").status_code == 200
    assert client.post("/api/contact").status_code == 429


def test_unlisted_routes_are_not_limited():
    client = TestClient(_limited(max_requests=1))
    for _ in range(5):
        assert client.get("/api/projects").status_code == 200


def test_forwarded_for_is_ignored_by_default():
    client = TestClient(_limited(max_requests=1))
    assert client.post("/api/auth/login", headers={"X-Forwarded-For": "10.0.0.1"}).status_code == 200
    assert client.post("/api/auth/login", headers={"X-Forwarded-For": "10.0.0.2"}).status_code == 429
    assert client.post("/api/auth/login", headers={"X-Forwarded-For": "10.0.0.3"}).status_code == 429


def test_clients_are_counted_by_forwarded_ip_behind_proxy():
    client = TestClient(_limited(max_requests=1, trust_forwarded_for=True))
    assert client.post("/api/contact", headers={"X-Forwarded-For": "10.0.0.1"}).status_code == 200
    assert client.post("/api/contact", headers={"X-Forwarded-For": "10.0.0.2, 172.16.0.1"}).status_code == 200
    assert client.post("/api/contact", headers={"X-Forwarded-For": "10.0.0.1"}).status_code == 429


def test_window_expiry_resets_the_count():
    clock = FakeClock()
    client = TestClient(_limited(max_requests=1, clock=clock))
    assert client.post("/api/contact").status_code == 200
    assert client.post("/api/contact").status_code == 429
    clock.now += 60
    assert client.post("/api/contact").status_code == 200


def test_expired_keys_are_removed():
    clock = FakeClock()
    limiter = _limited(max_requests=1, trust_forwarded_for=True, clock=clock)
    client = TestClient(limiter)
    for i in range(50):
        client.post("/api/auth/login", headers={"X-Forwarded-For": f"10.0.0.{i}"})
    assert len(limiter._storage) == 50

    clock.now += 61
    client.post("/api/auth/login", headers={"X-Forwarded-For": "10.0.1.1"})
    assert list(limiter._storage) == [("10.0.1.1", "/api/auth/login")]
