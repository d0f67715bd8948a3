"""
Filmatch — ORM model registry.

Importing every model here ensures that Alembic (and any other tool that
inspects ``Base.metadata``) discovers all tables automatically.
"""

from app.models.profile import UserBlock, UserProfile
from app.models.match import Match, Swipe

__all__ = [
    "UserProfile",
    "UserBlock",
    "Swipe",
    "Match",
]
