from .base import db


class Match(db.Model):
    __tablename__ = "matches"

    # username1 is always the smaller name by Python string ordering. The
    # application computes the order; a CHECK here would follow the database
    # collation instead.
    username1 = db.Column(db.String(64), primary_key=True)
    username2 = db.Column(db.String(64), primary_key=True)
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    __table_args__ = (
        db.Index('idx_matches_username2', 'username2'),
    )

    def other(self, username: str) -> str:
        """Return the participant that isn't ``username``."""
        return self.username2 if self.username1 == username else self.username1

    def __repr__(self):
        return f'<Match {self.username1}<->{self.username2}>'
