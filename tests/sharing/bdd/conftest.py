"""Shared BDD fixtures and step definitions for claims and notifications."""

from datetime import UTC, datetime

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then, when
from sharing.channel import get_channel
from sharing.claim.creation import create_claim
from sharing.community.resource import Resource
from sharing.notification.notification import Notification
from sharing.notification.resource_events import ResourceEventsHandler
from sharing.preference.preference import NotificationPreference
from sharing.preference.management import get_or_create_preferences
from shared.events.community import ResourceCancelled


@pytest.fixture()
def context():
    """Scenario state: the resource, the claim and any captured error."""
    return {"resource_id": None, "claim_id": None, "error": None}


def _seed_resource(context, kind, title, owner, requires_approval):
    resource = Resource(
        owner_id=owner,
        community_id="comm-bdd",
        kind=kind,
        title=title,
        requires_approval=requires_approval,
    )
    current_domain.repository_for(Resource).add(resource)
    context["resource_id"] = str(resource.id)


def _notifications(user_id, notification_type):
    repo = current_domain.repository_for(Notification)
    return repo._dao.query.filter(user_id=user_id, notification_type=notification_type).all().items


# ---------------------------------------------------------------------------
# Given steps: resources and claims
# ---------------------------------------------------------------------------
@given(parsers.cfparse('an offer "{title}" owned by "{owner}" that requires approval'))
def offer_requiring_approval(context, title, owner):
    _seed_resource(context, "offer", title, owner, requires_approval=True)


@given(parsers.cfparse('an event "{title}" owned by "{owner}" that needs no approval'))
def event_without_approval(context, title, owner):
    _seed_resource(context, "event", title, owner, requires_approval=False)


@given(parsers.cfparse('"{user}" claims the resource'))
@when(parsers.cfparse('"{user}" claims the resource'))
def user_claims_resource(context, user):
    context["claim_id"] = create_claim(context["resource_id"], user)


# ---------------------------------------------------------------------------
# Given steps: preferences
# ---------------------------------------------------------------------------
@given(parsers.cfparse('"{user}" has push enabled globally'))
def push_enabled_globally(user):
    pref = get_or_create_preferences(user)
    pref.update_global("push_enabled", True)
    current_domain.repository_for(NotificationPreference).add(pref)


@given(parsers.cfparse('"{user}" sets "{notification_type}" to in_app "{in_app}", push "{push}", email "{email}"'))
def set_type_preference(user, notification_type, in_app, push, email):
    pref = get_or_create_preferences(user)
    pref.update_type(notification_type, in_app=in_app == "on", push=push == "on", email=email == "on")
    current_domain.repository_for(NotificationPreference).add(pref)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('"{user}" cancels the resource'))
def owner_cancels_resource(context, user):
    ResourceEventsHandler().on_resource_cancelled(
        ResourceCancelled(resource_id=context["resource_id"], cancelled_by=user, cancelled_at=datetime.now(UTC))
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{user}" has a "{notification_type}" notification from "{actor}"'))
def has_notification_from(user, notification_type, actor):
    notifications = _notifications(user, notification_type)
    assert len(notifications) == 1, f"Expected one {notification_type} for {user}, found {len(notifications)}"
    assert str(notifications[0].actor_id) == actor


@then(parsers.cfparse('"{user}" has exactly {count:d} "{notification_type}" notification'))
def has_exact_notifications(user, count, notification_type):
    assert len(_notifications(user, notification_type)) == count


@then(parsers.cfparse('no push or email was sent to "{user}"'))
def nothing_sent(user):
    assert get_channel("push").sent_to(user) == []
    assert get_channel("email").sent_to(user) == []


@then(parsers.cfparse('a push was sent to "{user}"'))
def push_sent(user):
    assert len(get_channel("push").sent_to(user)) == 1
