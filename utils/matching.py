import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

from sqlalchemy.exc import SQLAlchemyError

from utils.errors import AppError, InvalidSwipeTarget, NotFound

logger = logging.getLogger(__name__)


def canonical_pair(a: str, b: str) -> Tuple[str, str]:
    """Order two usernames so the unordered pair {a, b} has a single form."""
    return (a, b) if a < b else (b, a)


@dataclass(frozen=True)
class SwipeResult:
    swiper: str
    swiped: str
    status: bool
    matched: bool

    def to_dict(self) -> Dict:
        return {
            'swiper': self.swiper,
            'swiped': self.swiped,
            'status': self.status,
            'matched': self.matched,
        }


class MatchEngine:
    """
    Records swipes and turns reciprocal "interested" swipes into match rows.

    The swipe insert, the mirror check and the match insert all run in one
    transaction. Both user rows are locked in canonical order first, so two
    concurrent reciprocal swipes are serialized and the second one always
    sees the first.
    """

    def __init__(self, store):
        self.store = store

    def record_swipe(self, swiper: str, swiped: str, interested: bool) -> SwipeResult:
        if swiper == swiped:
            raise InvalidSwipeTarget()

        lo, hi = canonical_pair(swiper, swiped)
        try:
            existing = self.store.lock_pair(lo, hi)
            if swiped not in existing:
                raise NotFound(f"User {swiped} not found")

            # Duplicates surface as DuplicateSwipe and are never retried
            self.store.add_swipe(swiper, swiped, interested)

            matched = False
            if interested and self.store.has_interested_swipe(swiped, swiper):
                matched = self._materialize_match(lo, hi)

            self.store.commit()
        except Exception:
            self.store.rollback()
            raise

        logger.info(f"Swipe recorded: {swiper} -> {swiped} ({interested})")
        return SwipeResult(swiper=swiper, swiped=swiped, status=interested, matched=matched)

    def _materialize_match(self, lo: str, hi: str) -> bool:
        # Best effort: the swipe already succeeded, so a failure here is only logged
        try:
            created = self.store.add_match(lo, hi)
        except (SQLAlchemyError, AppError) as e:
            logger.warning(f"Failed to create match between {lo} and {hi}: {str(e)}")
            return False

        if created:
            logger.info(f"Match created between {lo} and {hi}")
        else:
            logger.info(f"{lo} and {hi} were already matched")
        return True

    def list_matches(self, username: str) -> List[Dict[str, str]]:
        return [{'name': m.other(username)} for m in self.store.matches_for(username)]

    def list_available(self, username: str) -> List[Dict]:
        return [user.to_public_dict() for user in self.store.available_for(username)]

    def delete_match(self, username: str, other: str) -> None:
        deleted = self.store.delete_match((username, other))
        if not deleted:
            raise NotFound(f"No match with {other}")
        logger.info(f"Match between {username} and {other} deleted")
