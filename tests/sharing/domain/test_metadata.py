"""Tests for typed notification metadata parsing and building."""

import pytest
from pydantic import ValidationError as PydanticValidationError
from sharing.notification.actor import ActorInfo
from sharing.notification.metadata import (
    METADATA_BY_TYPE,
    ClaimResponseMetadata,
    MembershipMetadata,
    ResourceUpdateMetadata,
    TrustLevelMetadata,
    build_metadata,
    parse_metadata,
)
from sharing.notification.notification import NotificationType


class TestMetadataRegistry:
    def test_every_type_has_a_model(self):
        assert set(METADATA_BY_TYPE) == set(NotificationType)


class TestLenientParsing:
    def test_claim_response_taken_from_action(self):
        meta = parse_metadata("claim.responded", {}, action="claim.rejected")
        assert isinstance(meta, ClaimResponseMetadata)
        assert meta.response == "rejected"

    def test_claim_response_defaults_to_approved(self):
        meta = parse_metadata("claim.responded", {"response": "maybe"})
        assert meta.response == "approved"

    def test_membership_action_taken_from_action_label(self):
        meta = parse_metadata("membership.updated", {}, action="member.left")
        assert isinstance(meta, MembershipMetadata)
        assert meta.action == "left"

    def test_missing_trust_levels_read_as_zero(self):
        meta = parse_metadata("trustlevel.changed", {"old_level": "three"})
        assert isinstance(meta, TrustLevelMetadata)
        assert meta.old_level == 0
        assert meta.new_level == 0

    def test_malformed_changes_read_as_empty(self):
        meta = parse_metadata("resource.updated", {"changes": "title"})
        assert isinstance(meta, ResourceUpdateMetadata)
        assert meta.changes == []

    def test_non_string_changes_are_dropped(self):
        meta = parse_metadata("event.updated", {"changes": ["title", 3, None, "starts_at"]})
        assert meta.changes == ["title", "starts_at"]

    def test_null_title_reads_as_empty(self):
        meta = parse_metadata("resource.created", {"resource_title": None})
        assert meta.resource_title == ""

    def test_unknown_keys_are_ignored(self):
        meta = parse_metadata("message.received", {"content_preview": "hi", "legacy": 1})
        assert meta.content_preview == "hi"
        assert not hasattr(meta, "legacy")

    def test_handoff_role_must_be_known(self):
        with pytest.raises(PydanticValidationError):
            parse_metadata("resource.given", {"role": "courier"})


class TestBuildMetadata:
    def test_actor_details_added(self):
        actor = ActorInfo(user_id="u-1", display_name="Ada Lovelace", avatar_url="https://cdn/ada.png")
        data = build_metadata("claim.created", {"resource_title": "Drill"}, actor)

        assert data["actor_name"] == "Ada Lovelace"
        assert data["actor_avatar_url"] == "https://cdn/ada.png"
        assert data["resource_title"] == "Drill"

    def test_system_notification_has_no_actor(self):
        data = build_metadata("resource.expiring", {"resource_title": "Drill", "due_at": "2026-05-01T10:00:00+00:00"})
        assert data["actor_name"] is None
        assert data["due_at"].startswith("2026-05-01T10:00:00")

    def test_output_is_json_ready(self):
        data = build_metadata(
            "trustlevel.changed",
            {"old_level": 1, "new_level": 2, "old_level_name": "Plankton", "new_level_name": "Hatchling"},
        )
        assert data == {
            "actor_name": None,
            "actor_avatar_url": None,
            "old_level": 1,
            "new_level": 2,
            "old_level_name": "Plankton",
            "new_level_name": "Hatchling",
        }
