"""Shared fixtures for inheritance tests."""

from __future__ import annotations

from uuid import uuid4

import pytest

from legacycore import ContentItem, InMemoryContentRepository, LegacyConfig, PrivacyLevel
from legacycore.inheritance import (
    InheritanceEngine,
    InheritanceTrigger,
    InMemoryRelationshipDirectory,
    TargetType,
)


@pytest.fixture
def creator():
    return uuid4()


@pytest.fixture
def content(creator):
    return ContentItem(creator_id=creator, generation_level=1, privacy_level=PrivacyLevel.FAMILY)


@pytest.fixture
def directory():
    return InMemoryRelationshipDirectory()


@pytest.fixture
def contents(content):
    return InMemoryContentRepository([content])


@pytest.fixture
def engine(directory, contents):
    return InheritanceEngine(directory, content_repository=contents, config=LegacyConfig())


@pytest.fixture
def son_rule_request(content):
    """MANUAL rule targeting the creator's sons."""
    return {
        "content_id": content.id,
        "target_type": TargetType.RELATIONSHIP_TYPE,
        "target_value": "Son",
        "trigger": InheritanceTrigger.MANUAL,
    }
