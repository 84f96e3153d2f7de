"""Channel adapter registry: push and email sinks.

Provides singleton access to channel adapters. Fake adapters are used
unless a real adapter is installed with `register_channel` at startup.
In-app delivery is the notification row itself and has no adapter.
"""

from sharing.notification.notification import NotificationChannel

_channel_instances: dict[str, object] = {}


def get_channel(channel_type: str):
    """Return the adapter for a channel ("push" or "email")."""
    if channel_type not in _channel_instances:
        if channel_type == NotificationChannel.PUSH.value:
            from sharing.channel.fake_push import FakePushAdapter

            _channel_instances[channel_type] = FakePushAdapter()
        elif channel_type == NotificationChannel.EMAIL.value:
            from sharing.channel.fake_email import FakeEmailAdapter

            _channel_instances[channel_type] = FakeEmailAdapter()
        else:
            raise ValueError(f"Unknown channel type: {channel_type}")

    return _channel_instances[channel_type]


def register_channel(channel_type: str, adapter) -> None:
    """Install a specific adapter for a channel."""
    if channel_type not in (NotificationChannel.PUSH.value, NotificationChannel.EMAIL.value):
        raise ValueError(f"Unknown channel type: {channel_type}")
    _channel_instances[channel_type] = adapter


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()
