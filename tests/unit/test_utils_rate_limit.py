import time
from fastapi import FastAPI, Depends, Request
from fastapi.testclient import TestClient

from vault.utils.rate_limit import limit_key, optional_rate_limit, rate_limit_health_info


def _make_app(times=2, seconds=60):
    app = FastAPI()

    @app.get("/limitedA", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def limited_a():
        return {"ok": True}

    @app.get("/limitedB", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def limited_b():
        return {"ok": True}

    @app.get("/rl_info")
    def rl_info(request: Request):
        return rate_limit_health_info(request)

    return app


def test_local_fallback_blocks_after_limit(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    client = TestClient(_make_app(times=2, seconds=60))

    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 429


def test_local_fallback_is_per_path_and_token(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    client = TestClient(_make_app(times=1, seconds=60))
    alice = {"Authorization": "Bearer alice"}
    bob = {"Authorization": "Bearer bob"}

    assert client.get("/limitedA", headers=alice).status_code == 200
    assert client.get("/limitedA", headers=alice).status_code == 429
    # Autre chemin, autre acheteur: compteurs indépendants
    assert client.get("/limitedB", headers=alice).status_code == 200
    assert client.get("/limitedA", headers=bob).status_code == 200


def test_local_fallback_window_expires(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    client = TestClient(_make_app(times=1, seconds=1))

    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 429
    # Attendre > 1s pour vider la fenêtre
    time.sleep(1.1)
    assert client.get("/limitedA").status_code == 200


def test_disabled_flag_bypasses_limit(monkeypatch):
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    app = _make_app(times=1, seconds=60)
    app.state.rate_limit_enabled = False
    client = TestClient(app)

    for _ in range(3):
        assert client.get("/limitedA").status_code == 200


def test_uninitialized_limiter_does_not_block(monkeypatch):
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    app = _make_app(times=1, seconds=60)
    app.state.rate_limit_enabled = True
    client = TestClient(app)

    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 200


def test_limit_key_prefers_authorization_hash():
    class _Req:
        def __init__(self, headers, host="1.2.3.4"):
            self.headers = headers
            self.url = type("U", (), {"path": "/api/v1/product/braintree/payment"})()
            self.client = type("C", (), {"host": host})()

    with_token = limit_key(_Req({"Authorization": "Bearer secret"}))
    assert with_token.startswith("vault:rl:user:")
    assert "secret" not in with_token
    assert limit_key(_Req({})) == "vault:rl:ip:1.2.3.4:/api/v1/product/braintree/payment"


def test_rate_limit_health_info(monkeypatch):
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    app = _make_app()
    app.state.rate_limit_enabled = True
    client = TestClient(app)

    info = client.get("/rl_info").json()
    assert info == {"enabled": True, "ready": False, "backend": None}

    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    info = client.get("/rl_info").json()
    assert info["ready"] is True
    assert info["backend"] == "memory"


def test_rate_limit_health_info_with_redis(monkeypatch):
    from fastapi_limiter import FastAPILimiter

    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    monkeypatch.setattr(FastAPILimiter, "redis", object(), raising=False)
    monkeypatch.setenv("RATE_LIMIT_REDIS_URL", "redis://localhost:6379/0")
    client = TestClient(_make_app())

    info = client.get("/rl_info").json()
    assert info["backend"] == "redis"
    assert info["redis"] == {"scheme": "redis", "host": "localhost", "port": 6379}
