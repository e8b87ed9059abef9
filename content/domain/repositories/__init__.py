from content.domain.repositories.content_repository import ContentRepository

__all__ = ["ContentRepository"]
