"""Feed domain exports."""

from .membership import MembershipResolver
from .service import FeedService, merge_feed

__all__ = ["FeedService", "MembershipResolver", "merge_feed"]
