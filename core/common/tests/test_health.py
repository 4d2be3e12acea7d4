import pytest
import redis


class _Redis:
    def __init__(self, ok):
        self.ok = ok

    def ping(self):
        if not self.ok:
            raise redis.ConnectionError("refused")
        return True


@pytest.mark.django_db
def test_health_ok_when_db_and_redis_answer(client, monkeypatch):
    monkeypatch.setattr(redis.Redis, "from_url", classmethod(lambda cls, url, **kw: _Redis(True)))

    r = client.get("/health/")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["checks"] == {"db": True, "redis": True}


@pytest.mark.django_db
def test_health_degraded_when_redis_down(client, monkeypatch):
    monkeypatch.setattr(redis.Redis, "from_url", classmethod(lambda cls, url, **kw: _Redis(False)))

    r = client.get("/health/")
    assert r.status_code == 503
    body = r.json()
    assert body["status"] == "degraded"
    assert body["checks"]["db"] is True
    assert body["checks"]["redis"] is False
