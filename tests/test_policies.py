"""Tests for the retry and degrade policies."""

import pytest
from tenacity import wait_fixed

from estate_api import DegradePolicy, RetryPolicy
from estate_api.errors import AbortError, ConnectionFailure, TransportUnavailable
from estate_api.retry import is_transient


class TestRetryPolicy:
    """Tests for RetryPolicy."""

    @pytest.mark.asyncio
    async def test_returns_first_success(self):
        calls = []

        async def op(attempt):
            calls.append(attempt)
            return "ok"

        assert await RetryPolicy(attempts=3, delay=0).run(op) == "ok"
        assert calls == [0]

    @pytest.mark.asyncio
    async def test_retries_transient_failures(self):
        calls = []

        async def op(attempt):
            calls.append(attempt)
            if attempt < 2:
                raise ConnectionFailure("Failed to fetch")
            return "ok"

        assert await RetryPolicy(attempts=3, delay=0).run(op) == "ok"
        assert calls == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_gives_up_after_attempts(self):
        calls = []

        async def op(attempt):
            calls.append(attempt)
            raise AbortError("Timeout")

        with pytest.raises(AbortError):
            await RetryPolicy(attempts=3, delay=0).run(op)
        assert calls == [0, 1, 2, 3]

    @pytest.mark.asyncio
    async def test_starts_from_retry_count(self):
        calls = []

        async def op(attempt):
            calls.append(attempt)
            raise ConnectionFailure("down")

        with pytest.raises(ConnectionFailure):
            await RetryPolicy(attempts=3, delay=0).run(op, retry_count=2)
        assert calls == [2, 3]

    @pytest.mark.asyncio
    async def test_non_retriable_raises_immediately(self):
        calls = []

        async def op(attempt):
            calls.append(attempt)
            raise TransportUnavailable("blocked")

        with pytest.raises(TransportUnavailable):
            await RetryPolicy(attempts=3, delay=0).run(op)
        assert calls == [0]

    def test_constant_delay(self):
        retrying = RetryPolicy(attempts=3, delay=1.2).retrying()
        assert isinstance(retrying.wait, wait_fixed)
        assert retrying.wait.wait_fixed == 1.2

    def test_stop_counts_spent_retries(self):
        policy = RetryPolicy(attempts=3, delay=0)
        assert policy.retrying().stop.max_attempt_number == 4
        assert policy.retrying(retry_count=2).stop.max_attempt_number == 2
        assert policy.retrying(retry_count=5).stop.max_attempt_number == 1

    @pytest.mark.asyncio
    async def test_waits_between_attempts(self, caplog):
        calls = []

        async def op(attempt):
            calls.append(attempt)
            raise ConnectionFailure("down")

        with caplog.at_level("INFO", logger="estate_api.retry"):
            with pytest.raises(ConnectionFailure):
                await RetryPolicy(attempts=2, delay=0.01).run(op)
        assert calls == [0, 1, 2]
        assert "retry 2/2 in 0.01s" in caplog.text

    @pytest.mark.asyncio
    async def test_custom_classifier(self):
        policy = RetryPolicy(attempts=1, delay=0, is_retriable=lambda e: isinstance(e, KeyError))
        calls = []

        async def op(attempt):
            calls.append(attempt)
            raise KeyError("x")

        with pytest.raises(KeyError):
            await policy.run(op)
        assert calls == [0, 1]

    def test_is_transient(self):
        assert is_transient(AbortError())
        assert is_transient(ConnectionFailure())
        assert not is_transient(TransportUnavailable())
        assert not is_transient(ValueError())


class TestDegradePolicy:
    """Tests for DegradePolicy."""

    @pytest.mark.parametrize(
        "endpoint",
        ["properties", "/properties?status=active", "properties/featured", "plans", "banners", "ads/slots"],
    )
    def test_list_endpoints_under_get(self, endpoint):
        policy = DegradePolicy()
        assert policy.applies(endpoint, "GET")
        assert policy.envelope_for(endpoint).data == {"success": True, "data": []}

    @pytest.mark.parametrize("method", ["POST", "PUT", "DELETE"])
    def test_only_get(self, method):
        assert not DegradePolicy().applies("properties", method)

    @pytest.mark.parametrize("endpoint", ["admin/properties", "propertiesx", "favorites", "auth/login"])
    def test_other_endpoints(self, endpoint):
        assert not DegradePolicy().applies(endpoint, "GET")

    def test_unread_counters_degrade_to_zero(self):
        policy = DegradePolicy()
        assert policy.applies("chat/unread-count", "GET")
        assert policy.envelope_for("chat/unread-count").data == {
            "success": True,
            "data": {"totalUnread": 0},
        }
        assert policy.envelope_for("notifications/unread-count").data == {
            "success": True,
            "data": {"unread": 0},
        }

    def test_envelope_is_success(self):
        envelope = DegradePolicy().envelope_for("properties")
        assert envelope.ok is True
        assert envelope.status == 200
        assert envelope.synthetic is False

    def test_disabled(self):
        assert not DegradePolicy(enabled=False).applies("properties", "GET")

    def test_custom_prefixes(self):
        policy = DegradePolicy(list_prefixes=("projects",), counters={})
        assert policy.applies("projects", "get")
        assert not policy.applies("properties", "GET")
        assert not policy.applies("chat/unread-count", "GET")
