"""Application tests for the notification dispatcher.

Covers the self-notification guard, uniqueness guards, preference gating
for every channel, actor enrichment and delivery failure isolation.
"""

from itertools import product

import pytest
from protean import current_domain
from sharing.channel import get_channel
from sharing.community.profile import Profile
from sharing.notification.dispatcher import (
    Suppression,
    dispatch,
    dispatch_all,
    should_email,
    should_push,
)
from sharing.notification.emitter import CandidateNotification
from sharing.notification.notification import (
    REQUIRED_LINKS,
    Notification,
    NotificationType,
)
from sharing.preference.management import get_or_create_preferences
from sharing.preference.preference import NotificationPreference
from sharing.realtime.bus import get_bus


def _candidate(notification_type=NotificationType.RESOURCE_COMMENTED, target="user-1", actor="user-2", **overrides):
    notification_type = NotificationType(notification_type)
    defaults = {
        "target_user_id": target,
        "actor_id": actor,
        "notification_type": notification_type,
        "links": {name: f"{name}-1" for name in REQUIRED_LINKS[notification_type]},
        "metadata_seed": {"resource_title": "Cordless drill"},
    }
    if notification_type == NotificationType.CLAIM_RESPONDED:
        defaults["action"] = "claim.approved"
        defaults["metadata_seed"] = {"response": "approved"}
    if notification_type == NotificationType.MEMBERSHIP_UPDATED:
        defaults["action"] = "member.joined"
        defaults["metadata_seed"] = {"action": "joined"}
    defaults.update(overrides)
    return CandidateNotification(**defaults)


def _set_preferences(user_id, push_enabled=None, email_enabled=None, **types):
    pref = get_or_create_preferences(user_id)
    if push_enabled is not None:
        pref.update_global("push_enabled", push_enabled)
    if email_enabled is not None:
        pref.update_global("email_enabled", email_enabled)
    for notification_type, vector in types.items():
        pref.update_type(notification_type, **vector)
    current_domain.repository_for(NotificationPreference).add(pref)


def _rows(user_id):
    return current_domain.repository_for(Notification)._dao.query.filter(user_id=user_id).all().items


# ---------------------------------------------------------------
# Self-notification guard
# ---------------------------------------------------------------
class TestSelfGuard:
    @pytest.mark.parametrize("notification_type", list(NotificationType))
    def test_actor_never_notified_of_own_action(self, notification_type):
        result = dispatch(_candidate(notification_type, target="user-1", actor="user-1"))

        assert result.suppressed == Suppression.SELF
        assert result.persisted is False
        assert _rows("user-1") == []

    def test_self_guard_skips_push_and_email(self):
        _set_preferences("user-1", push_enabled=True, email_enabled=True)
        dispatch(_candidate(target="user-1", actor="user-1"))

        assert get_channel("push").sent_pushes == []
        assert get_channel("email").sent_emails == []

    def test_system_notification_without_actor_is_delivered(self):
        result = dispatch(_candidate(NotificationType.RESOURCE_EXPIRING, actor=None))
        assert result.persisted is True


# ---------------------------------------------------------------
# Uniqueness guards
# ---------------------------------------------------------------
class TestDuplicateGuard:
    def test_claim_response_sent_once_per_claim(self):
        first = dispatch(_candidate(NotificationType.CLAIM_RESPONDED))
        second = dispatch(_candidate(NotificationType.CLAIM_RESPONDED))

        assert first.persisted is True
        assert second.suppressed == Suppression.DUPLICATE
        assert len(_rows("user-1")) == 1

    def test_handoff_confirmation_sent_once_per_claim(self):
        dispatch(_candidate(NotificationType.RESOURCE_GIVEN))
        assert dispatch(_candidate(NotificationType.RESOURCE_GIVEN)).suppressed == Suppression.DUPLICATE

    def test_different_claims_are_not_duplicates(self):
        dispatch(_candidate(NotificationType.RESOURCE_GIVEN))
        other = dispatch(
            _candidate(NotificationType.RESOURCE_GIVEN, links={"resource_id": "resource_id-1", "claim_id": "claim-2"})
        )
        assert other.persisted is True

    def test_reminder_sent_once_per_resource(self):
        dispatch(_candidate(NotificationType.EVENT_STARTING, actor=None))
        again = dispatch(_candidate(NotificationType.EVENT_STARTING, actor=None))
        assert again.suppressed == Suppression.DUPLICATE

    def test_unguarded_types_repeat(self):
        dispatch(_candidate(NotificationType.MESSAGE_RECEIVED))
        dispatch(_candidate(NotificationType.MESSAGE_RECEIVED))
        assert len(_rows("user-1")) == 2


# ---------------------------------------------------------------
# Channel gating
# ---------------------------------------------------------------
class TestShouldPush:
    @pytest.mark.parametrize("global_enabled,type_enabled,critical", list(product([True, False], repeat=3)))
    def test_matrix(self, global_enabled, type_enabled, critical):
        notification_type = NotificationType.EVENT_CANCELLED if critical else NotificationType.EVENT_UPDATED
        expected = global_enabled and (type_enabled or critical)
        assert should_push(global_enabled, type_enabled, notification_type) is expected

    def test_email_needs_both_switches(self):
        assert should_email(True, True) is True
        assert should_email(True, False) is False
        assert should_email(False, True) is False


class TestPreferenceGating:
    def test_defaults_persist_in_app_only(self):
        result = dispatch(_candidate())

        assert result.persisted is True
        assert result.pushed is False
        assert result.emailed is False
        assert get_channel("push").sent_pushes == []

    def test_first_dispatch_materializes_defaults(self):
        dispatch(_candidate(target="fresh-user"))
        prefs = current_domain.repository_for(NotificationPreference)._dao.query.filter(user_id="fresh-user")
        assert len(prefs.all().items) == 1

    def test_push_when_both_switches_on(self):
        _set_preferences("user-1", push_enabled=True)
        result = dispatch(_candidate())

        assert result.pushed is True
        [push] = get_channel("push").sent_to("user-1")
        assert push["payload"]["type"] == "resource.commented"
        assert push["payload"]["notification_id"] == result.notification_id

    def test_type_push_off_blocks_push(self):
        _set_preferences("user-1", push_enabled=True, **{"resource.commented": {"push": False}})
        result = dispatch(_candidate())

        assert result.persisted is True
        assert result.pushed is False

    def test_critical_type_overrides_type_push(self):
        _set_preferences("user-1", push_enabled=True, **{"event.cancelled": {"push": False}})
        result = dispatch(_candidate(NotificationType.EVENT_CANCELLED))
        assert result.pushed is True

    def test_critical_type_respects_global_switch(self):
        _set_preferences("user-1", push_enabled=False)
        result = dispatch(_candidate(NotificationType.EVENT_CANCELLED))
        assert result.pushed is False

    def test_email_when_enabled(self):
        _set_preferences("user-1", email_enabled=True, **{"resource.commented": {"email": True}})
        result = dispatch(_candidate())

        assert result.emailed is True
        [email] = get_channel("email").sent_to("user-1")
        assert email["subject"] == "New comment"

    def test_email_global_off_blocks_email(self):
        _set_preferences("user-1", email_enabled=False, **{"resource.commented": {"email": True}})
        assert dispatch(_candidate()).emailed is False

    def test_in_app_off_skips_row_but_keeps_push(self):
        _set_preferences("user-1", push_enabled=True, **{"resource.commented": {"in_app": False}})
        result = dispatch(_candidate())

        assert result.persisted is False
        assert _rows("user-1") == []
        assert result.pushed is True


# ---------------------------------------------------------------
# Enrichment
# ---------------------------------------------------------------
class TestActorEnrichment:
    def test_actor_name_and_avatar(self):
        current_domain.repository_for(Profile).add(
            Profile(user_id="user-2", first_name="Ada", last_name="Lovelace", avatar_url="https://cdn/ada.png")
        )
        dispatch(_candidate())

        [row] = _rows("user-1")
        metadata = row.metadata_dict()
        assert metadata["actor_name"] == "Ada Lovelace"
        assert metadata["actor_avatar_url"] == "https://cdn/ada.png"
        assert metadata["resource_title"] == "Cordless drill"

    def test_unknown_actor_has_no_name(self):
        dispatch(_candidate())
        [row] = _rows("user-1")
        assert row.metadata_dict()["actor_name"] is None


# ---------------------------------------------------------------
# Failure isolation
# ---------------------------------------------------------------
class TestDeliveryFailures:
    def test_failed_push_keeps_in_app_row(self):
        _set_preferences("user-1", push_enabled=True)
        get_channel("push").configure(should_succeed=False, failure_reason="Token expired")

        result = dispatch(_candidate())

        assert result.persisted is True
        assert result.pushed is False

    def test_push_timeout_is_contained(self):
        _set_preferences("user-1", push_enabled=True, email_enabled=True, **{"resource.commented": {"email": True}})
        get_channel("push").configure(raise_error=True)

        result = dispatch(_candidate())

        assert result.pushed is False
        assert result.emailed is True

    def test_failure_for_one_recipient_does_not_stop_the_rest(self):
        _set_preferences("user-1", push_enabled=True)
        _set_preferences("user-3", push_enabled=True)
        get_channel("push").configure(should_succeed=False)

        results = dispatch_all([_candidate(target="user-1"), _candidate(target="user-3")])

        assert [r.persisted for r in results] == [True, True]


# ---------------------------------------------------------------
# Realtime
# ---------------------------------------------------------------
class TestRealtimeFanout:
    def test_new_row_published_to_recipient(self):
        subscription = get_bus().subscribe("user-1")
        result = dispatch(_candidate())

        payload = subscription.get(timeout=1)
        assert payload["id"] == result.notification_id
        assert payload["type"] == "resource.commented"
        assert payload["read_at"] is None
        assert payload["metadata"]["resource_title"] == "Cordless drill"

    def test_suppressed_candidate_not_published(self):
        subscription = get_bus().subscribe("user-1")
        dispatch(_candidate(target="user-1", actor="user-1"))
        assert subscription.drain() == []
