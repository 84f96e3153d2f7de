"""Tests for actor display names and delivery message rendering."""

import pytest
from sharing.notification.actor import display_name_for
from sharing.notification.messages import render
from sharing.notification.notification import NotificationType


class TestDisplayName:
    def test_full_name_wins(self):
        assert display_name_for("Ada", "Lovelace", "Countess Ada") == "Countess Ada"

    def test_first_and_last_joined(self):
        assert display_name_for("Ada", "Lovelace") == "Ada Lovelace"

    def test_first_name_alone(self):
        assert display_name_for("Ada") == "Ada"

    def test_last_name_alone_is_not_used(self):
        assert display_name_for(None, "Lovelace") is None

    def test_nothing_known(self):
        assert display_name_for() is None


class TestRender:
    @pytest.mark.parametrize("notification_type", list(NotificationType))
    def test_every_type_renders(self, notification_type):
        message = render(notification_type, None, {})
        assert message["title"]
        assert message["body"]

    def test_uses_actor_and_title(self):
        message = render("claim.created", None, {"actor_name": "Ada", "resource_title": "Drill"})
        assert message == {"title": "New claim", "body": "Ada claimed Drill"}

    def test_action_overrides_type(self):
        message = render("claim.responded", "claim.rejected", {"actor_name": "Ada", "resource_title": "Drill"})
        assert message["title"] == "Claim declined"

    def test_unknown_actor_reads_as_someone(self):
        message = render("shoutout.received", None, {"actor_name": None})
        assert message["body"] == "Someone gave you a shoutout"

    def test_trust_level_name(self):
        message = render("trustlevel.changed", None, {"new_level": 4, "new_level_name": "Crab"})
        assert message["body"] == "You are now Crab"
