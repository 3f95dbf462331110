"""Convenience wiring of the inheritance components.

Example::

    engine = InheritanceEngine(directory=family_graph)
    rule = engine.rules.create(
        {"content_id": letter.id, "target_type": "RELATIONSHIP_TYPE",
         "target_value": "Son", "trigger": "IMMEDIATE"},
        creator_id=letter.creator_id,
    )
    for record in engine.tracker.list_by_rule(rule.id):
        ...
"""

from __future__ import annotations

from typing import Optional

from ..config import LegacyConfig
from ..interfaces import ContentRepository
from .directory import RelationshipDirectory
from .events import EventRecorder
from .processor import InheritanceProcessor
from .repository import InheritanceRepository, InMemoryInheritanceRepository
from .resolvers import ResolverRegistry
from .rules import InheritanceRuleStore
from .tracker import InheritanceStatusTracker


class InheritanceEngine:
    """Rule store, processor and tracker sharing one repository and directory.

    Creating an ACTIVE IMMEDIATE rule through ``rules`` processes it through
    ``processor`` before ``create`` returns (unless
    ``config.immediate_processing`` is off).
    """

    def __init__(
        self,
        directory: RelationshipDirectory,
        repository: Optional[InheritanceRepository] = None,
        *,
        resolvers: Optional[ResolverRegistry] = None,
        content_repository: Optional[ContentRepository] = None,
        config: Optional[LegacyConfig] = None,
    ) -> None:
        self.config = config or LegacyConfig()
        self.repository = repository if repository is not None else InMemoryInheritanceRepository()
        self.directory = directory
        self.events = EventRecorder(self.repository)
        self.processor = InheritanceProcessor(
            self.repository,
            directory,
            resolvers=resolvers,
            events=self.events,
            content_repository=content_repository,
            config=self.config,
        )
        self.rules = InheritanceRuleStore(
            self.repository,
            events=self.events,
            processor=self.processor.process,
            content_repository=content_repository,
            config=self.config,
        )
        self.tracker = InheritanceStatusTracker(self.repository, events=self.events)

    @property
    def resolvers(self) -> ResolverRegistry:
        return self.processor.resolvers


__all__ = ["InheritanceEngine"]
