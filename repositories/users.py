from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from models import User
from utils.errors import UsernameTaken
from .errors import store_errors


class UserRepository:
    """Data access for the users table, keyed by username."""

    def __init__(self, session):
        self.session = session

    @store_errors
    def get(self, username: str) -> Optional[User]:
        return self.session.get(User, username)

    @store_errors
    def list_all(self) -> List[User]:
        return self.session.query(User).order_by(User.username).all()

    @store_errors
    def create(self, username: str, password_hash: str) -> User:
        user = User(username=username, password=password_hash)
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise UsernameTaken() from e
        return user

    @store_errors
    def set_location(self, user: User, lat: float, long: float) -> User:
        user.lat = lat
        user.long = long
        self.session.commit()
        return user

    @store_errors
    def set_bio(self, user: User, bio: str) -> User:
        user.bio = bio
        self.session.commit()
        return user

    @store_errors
    def set_profile_pic_path(self, user: User, path: str) -> User:
        user.profile_pic_path = path
        self.session.commit()
        return user
