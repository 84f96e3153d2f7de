"""Tests for the push and email channel adapters and their registry."""

import pytest
from sharing.channel import get_channel, register_channel, reset_channels
from sharing.channel.email_port import EmailPort
from sharing.channel.fake_email import FakeEmailAdapter
from sharing.channel.fake_push import FakePushAdapter
from sharing.channel.push_port import PushPort


class TestRegistry:
    def setup_method(self):
        reset_channels()

    def teardown_method(self):
        reset_channels()

    def test_fakes_by_default(self):
        assert isinstance(get_channel("push"), FakePushAdapter)
        assert isinstance(get_channel("email"), FakeEmailAdapter)

    def test_singleton_per_channel(self):
        assert get_channel("push") is get_channel("push")

    def test_in_app_has_no_adapter(self):
        with pytest.raises(ValueError):
            get_channel("in_app")

    def test_register_replaces_adapter(self):
        adapter = FakePushAdapter()
        register_channel("push", adapter)
        assert get_channel("push") is adapter

    def test_register_unknown_channel(self):
        with pytest.raises(ValueError):
            register_channel("sms", FakePushAdapter())


class TestFakePushAdapter:
    def test_implements_port(self):
        assert isinstance(FakePushAdapter(), PushPort)

    def test_send_records_push(self):
        adapter = FakePushAdapter()
        result = adapter.send("u-1", {"title": "Hi"})

        assert result["status"] == "sent"
        assert result["message_id"].startswith("push-")
        assert adapter.sent_to("u-1")[0]["payload"] == {"title": "Hi"}

    def test_configured_failure(self):
        adapter = FakePushAdapter()
        adapter.configure(should_succeed=False, failure_reason="Token expired")
        result = adapter.send("u-1", {})

        assert result == {"message_id": None, "status": "failed", "error": "Token expired"}
        assert adapter.sent_pushes == []

    def test_configured_timeout_raises(self):
        adapter = FakePushAdapter()
        adapter.configure(raise_error=True)
        with pytest.raises(TimeoutError):
            adapter.send("u-1", {})

    def test_reset(self):
        adapter = FakePushAdapter()
        adapter.send("u-1", {})
        adapter.configure(should_succeed=False)
        adapter.reset()

        assert adapter.sent_pushes == []
        assert adapter.send("u-1", {})["status"] == "sent"


class TestFakeEmailAdapter:
    def test_implements_port(self):
        assert isinstance(FakeEmailAdapter(), EmailPort)

    def test_send_uses_title_as_subject(self):
        adapter = FakeEmailAdapter()
        adapter.send("u-1", {"title": "New claim", "body": "Ada claimed Drill"})

        [email] = adapter.sent_to("u-1")
        assert email["subject"] == "New claim"
        assert email["body"] == "Ada claimed Drill"

    def test_configured_failure(self):
        adapter = FakeEmailAdapter()
        adapter.configure(should_succeed=False)
        assert adapter.send("u-1", {})["status"] == "failed"
