from .base import db, metadata
from .users import User
from .swipes import Swipe
from .matches import Match

__all__ = [
    'db',
    'metadata',
    'User',
    'Swipe',
    'Match',
]
