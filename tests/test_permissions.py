"""Tests for the content access policy."""

from __future__ import annotations

from uuid import uuid4

import pytest

from legacycore import PermissionDeniedError
from legacycore.exceptions import IllegalStateTransitionError
from legacycore.inheritance import transition_grant
from legacycore.permissions import (
    AccessLevel,
    ContentItem,
    PrivacyLevel,
    RecipientGrant,
    RecipientStatus,
    can_inherit_content,
    can_modify_privacy_level,
    default_access_level,
    default_privacy_level_for_generation,
    get_accessible_users,
    get_effective_access_level,
    has_access_level,
    has_content_access,
    is_content_visible_to_generation,
    is_sharing_allowed_between_generations,
    passes_privacy_gate,
    require_privacy_modification,
    validate_privacy_inheritance,
)


def _content(privacy: PrivacyLevel = PrivacyLevel.FAMILY, generation: int | None = 2, **kwargs) -> ContentItem:
    return ContentItem(creator_id=kwargs.pop("creator_id", uuid4()), generation_level=generation, privacy_level=privacy, **kwargs)


def _grant(content: ContentItem, recipient_id, level: AccessLevel, status: RecipientStatus) -> RecipientGrant:
    return RecipientGrant(content_id=content.id, recipient_id=recipient_id, access_level=level, status=status)


class TestPrivacyGate:
    """Tests for the privacy gate on its own."""

    def test_creator_always_passes(self) -> None:
        """The creator passes even on PRIVATE content."""
        content = _content(PrivacyLevel.PRIVATE)
        assert passes_privacy_gate(content.creator_id, content, False, False)

    def test_private_denies_family(self) -> None:
        """PRIVATE admits nobody but the creator."""
        content = _content(PrivacyLevel.PRIVATE)
        assert not passes_privacy_gate(uuid4(), content, True, True)

    def test_family_requires_family(self) -> None:
        """FAMILY admits family, not extended family."""
        content = _content(PrivacyLevel.FAMILY)
        assert passes_privacy_gate(uuid4(), content, True, False)
        assert not passes_privacy_gate(uuid4(), content, False, True)

    def test_extended_family_admits_both(self) -> None:
        """EXTENDED_FAMILY admits family and extended family."""
        content = _content(PrivacyLevel.EXTENDED_FAMILY)
        assert passes_privacy_gate(uuid4(), content, True, False)
        assert passes_privacy_gate(uuid4(), content, False, True)
        assert not passes_privacy_gate(uuid4(), content, False, False)

    def test_public_admits_strangers(self) -> None:
        """PUBLIC admits everyone."""
        assert passes_privacy_gate(uuid4(), _content(PrivacyLevel.PUBLIC), False, False)


class TestGenerationGate:
    """Tests for the one-generation-up visibility rule."""

    def test_same_generation(self) -> None:
        assert is_content_visible_to_generation(2, 2)

    def test_one_generation_older(self) -> None:
        assert is_content_visible_to_generation(3, 2)

    def test_two_generations_older(self) -> None:
        assert not is_content_visible_to_generation(3, 1)

    def test_any_younger_generation(self) -> None:
        assert is_content_visible_to_generation(0, 9)

    def test_negative_levels(self) -> None:
        """Levels are signed; the same arithmetic applies."""
        assert is_content_visible_to_generation(-1, -2)
        assert not is_content_visible_to_generation(-1, -3)

    def test_unknown_generation_bypasses(self) -> None:
        """A missing level on either side skips the gate."""
        assert is_content_visible_to_generation(None, 0)
        assert is_content_visible_to_generation(5, None)


class TestHasContentAccess:
    """Tests for the combined privacy + generation check."""

    def test_family_member_one_generation_up(self) -> None:
        """Parent generation may see a child's FAMILY content."""
        content = _content(PrivacyLevel.FAMILY, generation=2)
        assert has_content_access(uuid4(), content, 1, True, False)

    def test_family_member_two_generations_up(self) -> None:
        """Grandparent generation is stopped by the generation gate."""
        content = _content(PrivacyLevel.FAMILY, generation=2)
        assert not has_content_access(uuid4(), content, 0, True, False)

    def test_privacy_gate_fails_first(self) -> None:
        """Non-family on FAMILY content is denied regardless of generation."""
        content = _content(PrivacyLevel.FAMILY, generation=2)
        assert not has_content_access(uuid4(), content, 2, False, False)

    def test_creator_still_subject_to_generation_gate(self) -> None:
        """Both gates apply to every requester."""
        content = _content(PrivacyLevel.FAMILY, generation=2)
        assert has_content_access(content.creator_id, content, 2, False, False)
        assert not has_content_access(content.creator_id, content, 0, False, False)

    def test_accepted_grant_does_not_bypass_gates(self) -> None:
        """Explicit grants never override a failed gate."""
        user = uuid4()
        content = _content(PrivacyLevel.PRIVATE)
        content.recipients.append(_grant(content, user, AccessLevel.EDIT, RecipientStatus.ACCEPTED))
        assert not has_content_access(user, content, 2, True, True)


class TestEffectiveAccessLevel:
    """Tests for access-level resolution."""

    def test_creator_gets_edit(self) -> None:
        content = _content()
        assert get_effective_access_level(content.creator_id, content) == AccessLevel.EDIT

    def test_accepted_grant_level(self) -> None:
        """An ACCEPTED grant supplies its level."""
        user = uuid4()
        content = _content()
        content.recipients.append(_grant(content, user, AccessLevel.COMMENT, RecipientStatus.ACCEPTED))
        assert get_effective_access_level(user, content, 2, True) == AccessLevel.COMMENT

    def test_pending_grant_ignored(self) -> None:
        """Only ACCEPTED grants count; otherwise the privacy default applies."""
        user = uuid4()
        content = _content()
        content.recipients.append(_grant(content, user, AccessLevel.EDIT, RecipientStatus.PENDING))
        assert get_effective_access_level(user, content, 2, True) == AccessLevel.READ

    @pytest.mark.parametrize(
        "privacy", [PrivacyLevel.FAMILY, PrivacyLevel.EXTENDED_FAMILY, PrivacyLevel.PUBLIC]
    )
    def test_privacy_default_is_read(self, privacy: PrivacyLevel) -> None:
        assert get_effective_access_level(uuid4(), _content(privacy)) == AccessLevel.READ

    def test_private_without_grant_is_denied(self) -> None:
        """No grant and no default path resolves to None."""
        assert get_effective_access_level(uuid4(), _content(PrivacyLevel.PRIVATE)) is None


class TestHasAccessLevel:
    """Tests for minimum access-level checks."""

    def test_creator_has_every_level(self) -> None:
        content = _content()
        for level in AccessLevel:
            assert has_access_level(level, content.creator_id, content, 2, False, False)

    def test_family_reader_cannot_edit(self) -> None:
        content = _content()
        user = uuid4()
        assert has_access_level(AccessLevel.READ, user, content, 2, True, False)
        assert not has_access_level(AccessLevel.COMMENT, user, content, 2, True, False)

    def test_edit_grant_implies_comment(self) -> None:
        """EDIT implies COMMENT implies READ."""
        user = uuid4()
        content = _content()
        content.recipients.append(_grant(content, user, AccessLevel.EDIT, RecipientStatus.ACCEPTED))
        assert has_access_level(AccessLevel.COMMENT, user, content, 2, True, False)

    def test_gate_failure_denies_any_level(self) -> None:
        """Failing HasContentAccess denies even READ."""
        content = _content()
        assert not has_access_level(AccessLevel.READ, uuid4(), content, 0, True, False)


class TestPrivacyDefaults:
    """Tests for privacy defaults and inheritance validation."""

    @pytest.mark.parametrize(
        "generation, expected",
        [
            (None, PrivacyLevel.FAMILY),
            (-1, PrivacyLevel.FAMILY),
            (0, PrivacyLevel.FAMILY),
            (1, PrivacyLevel.FAMILY),
            (2, PrivacyLevel.EXTENDED_FAMILY),
            (3, PrivacyLevel.PRIVATE),
            (7, PrivacyLevel.PRIVATE),
        ],
    )
    def test_default_privacy_for_generation(self, generation, expected) -> None:
        assert default_privacy_level_for_generation(generation) == expected

    def test_default_access_level(self) -> None:
        assert default_access_level(PrivacyLevel.PRIVATE) is None
        assert default_access_level(PrivacyLevel.PUBLIC) == AccessLevel.READ

    def test_privacy_inheritance_monotonic(self) -> None:
        """Derived content may be as open or more open, never more private."""
        assert validate_privacy_inheritance(PrivacyLevel.FAMILY, PrivacyLevel.EXTENDED_FAMILY)
        assert validate_privacy_inheritance(PrivacyLevel.FAMILY, PrivacyLevel.FAMILY)
        assert not validate_privacy_inheritance(PrivacyLevel.EXTENDED_FAMILY, PrivacyLevel.FAMILY)
        assert not validate_privacy_inheritance(PrivacyLevel.PUBLIC, PrivacyLevel.PRIVATE)


class TestInheritanceEligibility:
    """Tests for can_inherit_content and generational sharing."""

    def test_private_cannot_be_inherited(self) -> None:
        assert not can_inherit_content(_content(PrivacyLevel.PRIVATE), 3)

    def test_no_generational_distance_limit(self) -> None:
        """Inheritance ignores the one-generation-up visibility rule."""
        content = _content(PrivacyLevel.FAMILY, generation=5)
        assert can_inherit_content(content, 0)
        assert not is_content_visible_to_generation(5, 0)

    def test_sharing_between_generations(self) -> None:
        assert is_sharing_allowed_between_generations(0, 10)
        assert is_sharing_allowed_between_generations(None, None)


class TestPrivacyModification:
    """Tests for creator-only privacy changes."""

    def test_creator_may_modify(self) -> None:
        content = _content()
        assert can_modify_privacy_level(content.creator_id, content, PrivacyLevel.PUBLIC)
        require_privacy_modification(content.creator_id, content, PrivacyLevel.PUBLIC)

    def test_other_user_denied(self) -> None:
        content = _content()
        other = uuid4()
        assert not can_modify_privacy_level(other, content, PrivacyLevel.PRIVATE)
        with pytest.raises(PermissionDeniedError):
            require_privacy_modification(other, content, PrivacyLevel.PRIVATE)

    def test_generation_level_is_immutable(self) -> None:
        """generation_level is fixed at creation."""
        content = _content(generation=2)
        with pytest.raises(ValueError):
            content.generation_level = 3

    def test_privacy_level_is_mutable(self) -> None:
        content = _content(PrivacyLevel.FAMILY)
        content.privacy_level = PrivacyLevel.PUBLIC
        assert content.privacy_level == PrivacyLevel.PUBLIC


class TestAccessibleUsers:
    """Tests for get_accessible_users."""

    def test_family_content(self) -> None:
        family, extended = [uuid4(), uuid4()], [uuid4()]
        content = _content(PrivacyLevel.FAMILY)
        assert get_accessible_users(content, family, extended) == [content.creator_id, *family]

    def test_extended_family_content(self) -> None:
        family, extended = [uuid4()], [uuid4()]
        content = _content(PrivacyLevel.EXTENDED_FAMILY)
        users = get_accessible_users(content, family, extended)
        assert set(users) == {content.creator_id, *family, *extended}

    def test_private_content_lists_accepted_recipients_only(self) -> None:
        accepted, pending = uuid4(), uuid4()
        content = _content(PrivacyLevel.PRIVATE)
        content.recipients.append(_grant(content, accepted, AccessLevel.READ, RecipientStatus.ACCEPTED))
        content.recipients.append(_grant(content, pending, AccessLevel.READ, RecipientStatus.PENDING))
        assert get_accessible_users(content, [uuid4()]) == [content.creator_id, accepted]

    def test_duplicates_removed(self) -> None:
        member = uuid4()
        content = _content(PrivacyLevel.FAMILY)
        content.recipients.append(_grant(content, member, AccessLevel.READ, RecipientStatus.ACCEPTED))
        assert get_accessible_users(content, [member, member]) == [content.creator_id, member]


class TestRecipientGrantTransitions:
    """Tests for the recipient grant lifecycle."""

    def test_accept(self) -> None:
        content = _content()
        grant = transition_grant(_grant(content, uuid4(), AccessLevel.READ, RecipientStatus.PENDING), RecipientStatus.ACCEPTED)
        assert grant.status == RecipientStatus.ACCEPTED
        assert grant.responded_at is not None

    def test_expire_pending(self) -> None:
        content = _content()
        grant = transition_grant(_grant(content, uuid4(), AccessLevel.READ, RecipientStatus.PENDING), RecipientStatus.EXPIRED)
        assert grant.status == RecipientStatus.EXPIRED

    def test_responded_grant_is_final(self) -> None:
        content = _content()
        rejected = _grant(content, uuid4(), AccessLevel.READ, RecipientStatus.REJECTED)
        with pytest.raises(IllegalStateTransitionError):
            transition_grant(rejected, RecipientStatus.ACCEPTED)
