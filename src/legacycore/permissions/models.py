"""Content and recipient-grant models consumed by the access policy.

These are Pydantic models. Persistence is owned by the host application;
the engine only reads them.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from .constants import AccessLevel, ContentStatus, PrivacyLevel, RecipientStatus, RecipientType


class RecipientGrant(BaseModel):
    """Explicit grant of a content item to one recipient.

    ``(content_id, recipient_id)`` is unique per content item.
    """

    id: UUID = Field(default_factory=uuid4)
    content_id: UUID
    recipient_id: UUID
    recipient_type: RecipientType = RecipientType.SPECIFIC_USER
    access_level: AccessLevel = AccessLevel.READ
    status: RecipientStatus = RecipientStatus.PENDING
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    responded_at: Optional[datetime] = None

    @property
    def is_accepted(self) -> bool:
        return self.status == RecipientStatus.ACCEPTED


class ContentItem(BaseModel):
    """A piece of legacy content as seen by the access policy.

    ``generation_level`` is fixed at creation; ``None`` means the creator's
    generation is unknown and the generation gate is bypassed.
    """

    id: UUID = Field(default_factory=uuid4)
    creator_id: UUID
    family_id: Optional[UUID] = None
    generation_level: Optional[int] = Field(default=None, frozen=True)
    privacy_level: PrivacyLevel = PrivacyLevel.FAMILY
    status: ContentStatus = ContentStatus.ACTIVE
    recipients: list[RecipientGrant] = Field(default_factory=list)

    def accepted_grant_for(self, user_id: UUID) -> RecipientGrant | None:
        """First ACCEPTED grant naming ``user_id``, if any."""
        for grant in self.recipients:
            if grant.recipient_id == user_id and grant.is_accepted:
                return grant
        return None

    model_config = {"validate_assignment": True}


__all__ = [
    "ContentItem",
    "RecipientGrant",
]
