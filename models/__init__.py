"""Database models."""

from models.content import Comment, Post
from models.safety import ModerationAction, Report, Sanction
from models.user import User

__all__ = [
    "User",
    "Post",
    "Comment",
    "Report",
    "Sanction",
    "ModerationAction",
]
