from typing import List, Tuple

from sqlalchemy import and_, exists, or_
from sqlalchemy.exc import IntegrityError

from models import Match, Swipe, User
from utils.errors import DuplicateSwipe
from .errors import store_errors


class SwipeRepository:
    """
    Data access for the append-only swipe log and the derived match table.

    Methods here only flush; the caller owns the transaction and decides when
    to commit or roll back.
    """

    def __init__(self, session):
        self.session = session

    # --- swipe log ---

    @store_errors
    def lock_pair(self, lo: str, hi: str) -> List[str]:
        """
        Lock both users' rows, always in canonical order, for the rest of the
        transaction. Returns the usernames that exist.
        """
        rows = (
            self.session.query(User.username)
            .filter(User.username.in_([lo, hi]))
            .order_by(User.username)
            .with_for_update()
            .all()
        )
        return [row.username for row in rows]

    @store_errors
    def add_swipe(self, swiper: str, swiped: str, status: bool) -> Swipe:
        swipe = Swipe(swiper=swiper, swiped=swiped, status=status)
        self.session.add(swipe)
        try:
            self.session.flush()
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateSwipe() from e
        return swipe

    @store_errors
    def has_interested_swipe(self, swiper: str, swiped: str) -> bool:
        return self.session.query(
            exists().where(and_(
                Swipe.swiper == swiper,
                Swipe.swiped == swiped,
                Swipe.status.is_(True),
            ))
        ).scalar()

    @store_errors
    def available_for(self, username: str) -> List[User]:
        # Anti-join: everyone with a location that `username` hasn't swiped on yet
        already_swiped = exists().where(and_(
            Swipe.swiper == username,
            Swipe.swiped == User.username,
        ))
        return (
            self.session.query(User)
            .filter(
                User.username != username,
                User.lat.isnot(None),
                User.long.isnot(None),
                ~already_swiped,
            )
            .all()
        )

    # --- matches ---

    @store_errors
    def add_match(self, lo: str, hi: str) -> bool:
        """
        Insert Match(lo, hi) inside a savepoint so a failure here leaves the
        surrounding swipe insert intact. Returns False if the pair was already matched.
        """
        if self.session.get(Match, (lo, hi)) is not None:
            return False
        with self.session.begin_nested():
            self.session.add(Match(username1=lo, username2=hi))
        return True

    @store_errors
    def matches_for(self, username: str) -> List[Match]:
        return (
            self.session.query(Match)
            .filter(or_(Match.username1 == username, Match.username2 == username))
            .all()
        )

    @store_errors
    def delete_match(self, pair: Tuple[str, str]) -> int:
        a, b = pair
        deleted = (
            self.session.query(Match)
            .filter(or_(
                and_(Match.username1 == a, Match.username2 == b),
                and_(Match.username1 == b, Match.username2 == a),
            ))
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    # --- transaction control ---

    @store_errors
    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()
