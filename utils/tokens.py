from datetime import datetime, timedelta, timezone
from typing import Tuple

import jwt

ALGORITHM = "HS256"


def issue_token(username: str, account_stamp: int, secret: str, ttl_hours: int = 1) -> str:
    """
    Issue a bearer token for one account, valid for ttl_hours.

    ``account_stamp`` is the account's creation time in epoch microseconds; a
    username that is deleted and registered again gets a new stamp, which
    retires every token issued to the earlier account.
    """
    now = datetime.now(tz=timezone.utc)
    payload = {
        "username": username,
        "acct": account_stamp,
        "iat": now,
        "exp": now + timedelta(hours=ttl_hours),
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def decode_token(token: str, secret: str) -> Tuple[str, int]:
    """
    Return (username, account_stamp) from a bearer token.

    Raises jwt.InvalidTokenError (or a subclass) for malformed, tampered or
    expired tokens, and for tokens missing either claim.
    """
    payload = jwt.decode(
        token,
        key=secret,
        algorithms=[ALGORITHM],
        options={"verify_exp": True, "require": ["exp", "username", "acct"]},
        leeway=60  # Allow 60 seconds of clock skew
    )
    username = payload.get("username")
    if not isinstance(username, str) or not username:
        raise jwt.InvalidTokenError("username claim is empty")
    account_stamp = payload.get("acct")
    if isinstance(account_stamp, bool) or not isinstance(account_stamp, int):
        raise jwt.InvalidTokenError("acct claim must be an integer")
    return username, account_stamp
