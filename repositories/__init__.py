from .errors import store_errors
from .users import UserRepository
from .swipes import SwipeRepository

__all__ = ["store_errors", "UserRepository", "SwipeRepository"]
