"""Club content domain exports."""

from .service import ClubContentService

__all__ = ["ClubContentService"]
