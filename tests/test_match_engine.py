"""Unit tests for MatchEngine - swipes, reciprocal matches and unmatching."""
import pytest
from unittest.mock import patch
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from models import db, Match, Swipe
from repositories import SwipeRepository
from utils.errors import DuplicateSwipe, InvalidSwipeTarget, NotFound, StoreUnavailable
from utils.matching import canonical_pair


@pytest.fixture
def alice_and_bob(make_user):
    make_user("alice", lat=1.0, long=2.0)
    make_user("bob", lat=1.5, long=2.5)


def match_rows():
    return db.session.query(Match).all()


class TestCanonicalPair:

    def test_orders_lexicographically(self):
        assert canonical_pair("bob", "alice") == ("alice", "bob")
        assert canonical_pair("alice", "bob") == ("alice", "bob")

    def test_uppercase_sorts_before_lowercase(self):
        assert canonical_pair("bob", "Zed") == ("Zed", "bob")


class TestRecordSwipe:

    def test_one_sided_interest_is_not_a_match(self, engine, alice_and_bob):
        result = engine.record_swipe("alice", "bob", True)

        assert result.matched is False
        assert engine.list_matches("alice") == []
        assert engine.list_matches("bob") == []

    def test_reciprocal_interest_creates_match(self, engine, alice_and_bob):
        engine.record_swipe("alice", "bob", True)
        result = engine.record_swipe("bob", "alice", True)

        assert result.matched is True
        assert engine.list_matches("alice") == [{"name": "bob"}]
        assert engine.list_matches("bob") == [{"name": "alice"}]

    @pytest.mark.parametrize("first,second", [("alice", "bob"), ("bob", "alice")])
    def test_match_row_is_canonical_regardless_of_order(self, engine, alice_and_bob, first, second):
        engine.record_swipe(first, second, True)
        engine.record_swipe(second, first, True)

        rows = match_rows()
        assert len(rows) == 1
        assert (rows[0].username1, rows[0].username2) == ("alice", "bob")

    def test_not_interested_then_interested_gives_no_match(self, engine, alice_and_bob):
        engine.record_swipe("alice", "bob", False)
        result = engine.record_swipe("bob", "alice", True)

        assert result.matched is False
        assert match_rows() == []

    def test_interested_then_not_interested_gives_no_match(self, engine, alice_and_bob):
        engine.record_swipe("alice", "bob", True)
        result = engine.record_swipe("bob", "alice", False)

        assert result.matched is False
        assert match_rows() == []

    def test_self_swipe_rejected(self, engine, alice_and_bob):
        with pytest.raises(InvalidSwipeTarget):
            engine.record_swipe("alice", "alice", True)
        assert db.session.query(Swipe).count() == 0

    def test_swipe_on_unknown_user_rejected(self, engine, alice_and_bob):
        with pytest.raises(NotFound):
            engine.record_swipe("alice", "ghost", True)
        assert db.session.query(Swipe).count() == 0

    def test_duplicate_swipe_rejected_and_first_decision_kept(self, engine, alice_and_bob):
        engine.record_swipe("alice", "bob", False)

        with pytest.raises(DuplicateSwipe):
            engine.record_swipe("alice", "bob", True)

        swipe = db.session.get(Swipe, ("alice", "bob"))
        assert swipe.status is False

    def test_match_failure_does_not_undo_swipe(self, engine, alice_and_bob):
        engine.record_swipe("alice", "bob", True)

        boom = IntegrityError("INSERT INTO matches", {}, Exception("constraint"))
        with patch.object(SwipeRepository, "add_match", side_effect=boom):
            result = engine.record_swipe("bob", "alice", True)

        assert result.matched is False
        assert db.session.get(Swipe, ("bob", "alice")) is not None
        assert match_rows() == []

    def test_existing_match_is_not_duplicated(self, engine, alice_and_bob):
        db.session.add(Match(username1="alice", username2="bob"))
        db.session.commit()

        engine.record_swipe("alice", "bob", True)
        result = engine.record_swipe("bob", "alice", True)

        assert result.matched is True
        assert len(match_rows()) == 1

    @pytest.mark.parametrize("first,second", [("alice", "bob"), ("bob", "alice")])
    def test_pair_locked_in_canonical_order(self, engine, alice_and_bob, first, second):
        with patch.object(SwipeRepository, "lock_pair", autospec=True,
                          side_effect=SwipeRepository.lock_pair) as lock:
            engine.record_swipe(first, second, True)
            engine.record_swipe(second, first, True)

        assert [c.args[1:] for c in lock.call_args_list] == [("alice", "bob"), ("alice", "bob")]

    def test_lost_connection_while_locking(self, engine, alice_and_bob):
        lost = OperationalError("SELECT users FOR UPDATE", {}, Exception("server closed the connection"))
        with patch.object(engine.store, "session") as fake_session:
            fake_session.query.side_effect = lost
            with pytest.raises(StoreUnavailable):
                engine.record_swipe("alice", "bob", True)
            fake_session.rollback.assert_called_once()

        assert db.session.query(Swipe).count() == 0

    def test_lost_connection_while_inserting_swipe(self, engine, alice_and_bob):
        real_flush = Session.flush

        def flush_failing_on_swipes(session, *args, **kwargs):
            if any(isinstance(obj, Swipe) for obj in session.new):
                raise OperationalError("INSERT INTO swipes", {}, Exception("server closed the connection"))
            return real_flush(session, *args, **kwargs)

        with patch.object(Session, "flush", autospec=True, side_effect=flush_failing_on_swipes):
            with pytest.raises(StoreUnavailable):
                engine.record_swipe("alice", "bob", True)

        # The pending swipe was rolled back, so nothing reaches the table on the next flush
        assert db.session.query(Swipe).count() == 0
        result = engine.record_swipe("alice", "bob", True)
        assert result.matched is False


class TestListAvailable:

    def test_excludes_self_swiped_and_unlocated(self, engine, make_user):
        make_user("alice", lat=0.0, long=0.0)
        make_user("bob", lat=1.0, long=1.0)
        make_user("carol", lat=2.0, long=2.0)
        make_user("dave")
        make_user("erin", lat=3.0)

        engine.record_swipe("alice", "bob", False)

        names = {u["username"] for u in engine.list_available("alice")}
        assert names == {"carol"}

    def test_public_fields_only(self, engine, make_user):
        make_user("alice", lat=0.0, long=0.0)
        make_user("bob", lat=1.0, long=1.0)

        [candidate] = engine.list_available("alice")
        assert set(candidate) == {"username", "lat", "long", "bio"}

    def test_swipes_by_others_do_not_hide_candidates(self, engine, make_user):
        make_user("alice", lat=0.0, long=0.0)
        make_user("bob", lat=1.0, long=1.0)
        make_user("carol", lat=2.0, long=2.0)

        engine.record_swipe("carol", "bob", True)

        names = {u["username"] for u in engine.list_available("alice")}
        assert names == {"bob", "carol"}


class TestDeleteMatch:

    @pytest.mark.parametrize("user,other", [("alice", "bob"), ("bob", "alice")])
    def test_delete_either_order(self, engine, alice_and_bob, user, other):
        engine.record_swipe("alice", "bob", True)
        engine.record_swipe("bob", "alice", True)

        engine.delete_match(user, other)

        assert engine.list_matches("alice") == []
        assert engine.list_matches("bob") == []

    def test_delete_missing_match(self, engine, alice_and_bob):
        with pytest.raises(NotFound):
            engine.delete_match("alice", "bob")

    def test_swipes_survive_unmatch(self, engine, alice_and_bob):
        engine.record_swipe("alice", "bob", True)
        engine.record_swipe("bob", "alice", True)
        engine.delete_match("alice", "bob")

        assert db.session.query(Swipe).count() == 2
        with pytest.raises(DuplicateSwipe):
            engine.record_swipe("alice", "bob", True)
