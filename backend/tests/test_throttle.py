"""Request throttle — fixed window per client key."""
import pytest

from eventhub.exceptions import RateLimited
from eventhub.main import app
from eventhub.security.throttle import RequestThrottle
from tests.conftest import create_user_with_token


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class TestRequestThrottle:
    def test_rejects_after_ceiling(self):
        throttle = RequestThrottle(3, clock=FakeClock())
        assert [throttle.hit("ip:1.2.3.4") for _ in range(3)] == [1, 2, 3]
        with pytest.raises(RateLimited):
            throttle.hit("ip:1.2.3.4")

    def test_keys_are_independent(self):
        throttle = RequestThrottle(1, clock=FakeClock())
        throttle.hit("user:a")
        assert throttle.hit("user:b") == 1
        with pytest.raises(RateLimited):
            throttle.hit("user:a")

    def test_new_window_after_a_minute(self):
        clock = FakeClock()
        throttle = RequestThrottle(2, clock=clock)
        throttle.hit("k")
        throttle.hit("k")
        with pytest.raises(RateLimited):
            throttle.hit("k")

        clock.now += 60
        with pytest.raises(RateLimited):
            throttle.hit("k")

        clock.now += 0.5
        assert throttle.hit("k") == 1

    def test_disabled_never_rejects(self):
        throttle = RequestThrottle(1, enabled=False, clock=FakeClock())
        assert all(throttle.hit("k") == 0 for _ in range(10))

    def test_reset(self):
        throttle = RequestThrottle(1, clock=FakeClock())
        throttle.hit("k")
        throttle.reset()
        assert throttle.hit("k") == 1


class TestThrottledApi:
    def test_429_after_ceiling(self, client):
        app.state.throttle = RequestThrottle(3)
        for _ in range(3):
            assert client.get("/api/health").status_code == 200

        resp = client.get("/api/health")
        assert resp.status_code == 429
        body = resp.json()
        assert body["error"] == "Too Many Requests"
        assert body["message"] == "Rate limit exceeded. Please try again later."

    def test_authenticated_callers_have_their_own_budget(self, client):
        _, alice_h = create_user_with_token(client, "Alice", "alice@example.com")
        _, bob_h = create_user_with_token(client, "Bob", "bob@example.com")
        app.state.throttle = RequestThrottle(2)

        assert client.get("/api/events/my-hosted", headers=alice_h).status_code == 200
        assert client.get("/api/events/my-hosted", headers=alice_h).status_code == 200
        assert client.get("/api/events/my-hosted", headers=alice_h).status_code == 429
        assert client.get("/api/events/my-hosted", headers=bob_h).status_code == 200


class TestWindowSweep:
    def test_expired_windows_are_dropped(self):
        clock = FakeClock()
        throttle = RequestThrottle(10, clock=clock, sweep_every=2)
        throttle.hit("ip:1")
        throttle.hit("ip:2")
        assert len(throttle) == 2

        clock.now += 61
        throttle.hit("ip:3")
        throttle.hit("ip:3")
        assert len(throttle) == 1

    def test_live_windows_survive_a_sweep(self):
        clock = FakeClock()
        throttle = RequestThrottle(10, clock=clock, sweep_every=2)
        throttle.hit("ip:1")
        clock.now += 30
        throttle.hit("ip:2")
        assert len(throttle) == 2
        assert throttle.hit("ip:1") == 2
