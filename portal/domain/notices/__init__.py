"""Notices domain exports."""

from .service import NoticeService

__all__ = ["NoticeService"]
