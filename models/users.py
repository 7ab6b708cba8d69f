# models/users.py
from datetime import datetime, timedelta, timezone
from sqlalchemy import Column, String, Text, Float, DateTime, Index, func
from sqlalchemy_serializer import SerializerMixin
from .base import db


EPOCH = datetime(1970, 1, 1)


def utcnow():
    return datetime.now(tz=timezone.utc).replace(tzinfo=None)


class User(db.Model, SerializerMixin):
    __tablename__ = "users"

    # Primary Key (the username is the account's stable identity)
    username = Column(String(64), primary_key=True)

    # Opaque password digest, never serialized
    password = Column(String(255), nullable=False)

    # Location (both-or-neither in practice)
    lat = Column(Float, nullable=True)
    long = Column(Float, nullable=True)

    bio = Column(Text, nullable=True)
    profile_pic_path = Column(String(500), nullable=True)

    # Naive UTC; also identifies this incarnation of the username in credentials
    created_at = Column(DateTime, default=utcnow, server_default=func.now())

    # Usernames name blob files, so they must also be unique ignoring case
    __table_args__ = (
        Index("ix_users_username_lower", func.lower(username), unique=True),
    )

    serialize_only = ('username', 'lat', 'long', 'bio')

    @property
    def account_stamp(self) -> int:
        """Microseconds since the epoch at which this account was created."""
        return (self.created_at - EPOCH) // timedelta(microseconds=1)

    def to_public_dict(self):
        return self.to_dict()

    def __repr__(self):
        return f'<User {self.username}>'
