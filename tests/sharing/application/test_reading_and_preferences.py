"""Application tests for inbox reads, read-marking and preference commands."""

from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from sharing.exceptions import NotFound, Unauthorized
from sharing.notification import reading
from sharing.notification.notification import Notification, NotificationType
from sharing.notification.reading import (
    MarkAllNotificationsRead,
    MarkNotificationRead,
    fetch_notifications,
)
from sharing.preference.management import (
    UpdateGlobalPreference,
    UpdateTypePreference,
    get_or_create_preferences,
)
from sharing.projections.notification_inbox import unread_count


_LINKS = {
    NotificationType.SHOUTOUT_RECEIVED: {"shoutout_id": "so-1"},
    NotificationType.MESSAGE_RECEIVED: {"conversation_id": "conv-1"},
}


def _create_notification(user_id="user-1", notification_type=NotificationType.SHOUTOUT_RECEIVED, created_at=None):
    n = Notification.create(
        user_id=user_id,
        notification_type=notification_type,
        actor_id="user-9",
        links=_LINKS[notification_type],
    )
    if created_at is not None:
        n.created_at = created_at
    current_domain.repository_for(Notification).add(n)
    return str(n.id)


def _process(command):
    return current_domain.process(command, asynchronous=False)


class TestFetchNotifications:
    def test_newest_first(self):
        now = datetime.now(UTC)
        old = _create_notification(created_at=now - timedelta(hours=2))
        new = _create_notification(created_at=now)

        assert [str(n.id) for n in fetch_notifications("user-1")] == [new, old]

    def test_limit_keeps_the_newest(self):
        now = datetime.now(UTC)
        newest = _create_notification(created_at=now)
        _create_notification(created_at=now - timedelta(hours=1))
        _create_notification(created_at=now - timedelta(hours=2))

        assert [str(n.id) for n in fetch_notifications("user-1", limit=1)] == [newest]

    def test_unread_only_respects_limit(self):
        now = datetime.now(UTC)
        read_id = _create_notification(created_at=now)
        unread_id = _create_notification(created_at=now - timedelta(hours=1))
        _create_notification(created_at=now - timedelta(hours=2))
        _process(MarkNotificationRead(notification_id=read_id, user_id="user-1"))

        assert [str(n.id) for n in fetch_notifications("user-1", unread_only=True, limit=1)] == [unread_id]

    def test_only_callers_rows(self):
        _create_notification(user_id="user-1")
        _create_notification(user_id="user-2")
        assert len(fetch_notifications("user-1")) == 1

    def test_filter_by_type(self):
        _create_notification(notification_type=NotificationType.SHOUTOUT_RECEIVED)
        _create_notification(notification_type=NotificationType.MESSAGE_RECEIVED)

        rows = fetch_notifications("user-1", notification_type="message.received")
        assert [n.notification_type for n in rows] == ["message.received"]

    def test_unread_only(self):
        read_id = _create_notification()
        _create_notification()
        _process(MarkNotificationRead(notification_id=read_id, user_id="user-1"))

        rows = fetch_notifications("user-1", unread_only=True)
        assert len(rows) == 1
        assert str(rows[0].id) != read_id

    def test_limit(self):
        for _ in range(5):
            _create_notification()
        assert len(fetch_notifications("user-1", limit=3)) == 3


class TestMarkRead:
    def test_mark_single_read(self):
        nid = _create_notification()
        _process(MarkNotificationRead(notification_id=nid, user_id="user-1"))

        assert current_domain.repository_for(Notification).get(nid).read_at is not None
        assert unread_count("user-1") == 0

    def test_marking_twice_is_harmless(self):
        nid = _create_notification()
        _process(MarkNotificationRead(notification_id=nid, user_id="user-1"))
        first = current_domain.repository_for(Notification).get(nid).read_at

        _process(MarkNotificationRead(notification_id=nid, user_id="user-1"))
        assert current_domain.repository_for(Notification).get(nid).read_at == first

    def test_cannot_mark_someone_elses(self):
        nid = _create_notification(user_id="user-1")
        with pytest.raises(Unauthorized):
            _process(MarkNotificationRead(notification_id=nid, user_id="user-2"))

    def test_unknown_notification(self):
        with pytest.raises(NotFound):
            _process(MarkNotificationRead(notification_id="n-missing", user_id="user-1"))

    def test_mark_all_read(self):
        for _ in range(3):
            _create_notification()
        _create_notification(user_id="user-2")

        marked = _process(MarkAllNotificationsRead(user_id="user-1"))

        assert marked == 3
        assert unread_count("user-1") == 0
        assert unread_count("user-2") == 1

    def test_mark_all_read_walks_every_page(self, monkeypatch):
        monkeypatch.setattr(reading, "READ_BATCH", 2)
        for _ in range(5):
            _create_notification()
        read_id = _create_notification()
        _process(MarkNotificationRead(notification_id=read_id, user_id="user-1"))

        marked = _process(MarkAllNotificationsRead(user_id="user-1"))

        assert marked == 5
        assert fetch_notifications("user-1", unread_only=True) == []
        assert unread_count("user-1") == 0

    def test_mark_all_shares_one_timestamp(self):
        for _ in range(2):
            _create_notification()
        _process(MarkAllNotificationsRead(user_id="user-1"))

        stamps = {n.read_at for n in fetch_notifications("user-1")}
        assert len(stamps) == 1


class TestPreferenceCommands:
    def test_get_or_create_is_idempotent(self):
        first = get_or_create_preferences("user-1")
        second = get_or_create_preferences("user-1")
        assert first.id == second.id

    def test_update_type_preference(self):
        _process(UpdateTypePreference(user_id="user-1", notification_type="comment.replied", push=False))

        vector = get_or_create_preferences("user-1").channels_for("comment.replied")
        assert vector.push is False
        assert vector.in_app is True

    def test_update_type_creates_defaults_first(self):
        _process(UpdateTypePreference(user_id="user-new", notification_type="event.starting", email=True))
        pref = get_or_create_preferences("user-new")

        assert pref.channels_for("event.starting").email is True
        assert pref.channels_for("event.created").email is False

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            _process(UpdateTypePreference(user_id="user-1", notification_type="order.shipped", push=False))

    def test_update_global_preference(self):
        _process(UpdateGlobalPreference(user_id="user-1", field_name="email_enabled", value=True))
        assert get_or_create_preferences("user-1").email_enabled is True

    def test_unknown_global_field_rejected(self):
        with pytest.raises(ValidationError):
            _process(UpdateGlobalPreference(user_id="user-1", field_name="sms_enabled", value=True))
