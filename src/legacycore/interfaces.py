from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional
from uuid import UUID

from .exceptions import ContentNotFoundError
from .permissions.models import ContentItem


class ContentRepository(ABC):
    """Content lookup owned by the host application."""

    @abstractmethod
    def get_content(self, content_id: UUID) -> Optional[ContentItem]:
        raise NotImplementedError

    def load_content(self, content_id: UUID) -> ContentItem:
        content = self.get_content(content_id)
        if content is None:
            raise ContentNotFoundError(content_id)
        return content


class InMemoryContentRepository(ContentRepository):
    """Dict-backed repository for tests and embedded use."""

    def __init__(self, items: Optional[Iterable[ContentItem]] = None):
        self._items: Dict[UUID, ContentItem] = {item.id: item for item in items or ()}

    def add(self, item: ContentItem) -> ContentItem:
        self._items[item.id] = item
        return item

    def get_content(self, content_id: UUID) -> Optional[ContentItem]:
        return self._items.get(content_id)


__all__ = ["ContentRepository", "InMemoryContentRepository"]
