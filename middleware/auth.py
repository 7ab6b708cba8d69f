import enum
import logging
from dataclasses import dataclass
from functools import wraps
from typing import Optional

import jwt
from flask import request, session

from models import User
from utils.errors import AppError, InvalidCredential, MissingCredential, StaleCredential
from utils.response import error_response
from utils.tokens import decode_token

logger = logging.getLogger(__name__)

SESSION_KEY = "username"
ACCOUNT_KEY = "acct"


class AuthState(enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    RESOLVING = "resolving"
    AUTHENTICATED = "authenticated"
    REJECTED = "rejected"


class CredentialSource(enum.Enum):
    COOKIE = "cookie"
    BEARER = "bearer"


@dataclass(frozen=True)
class RequestContext:
    """Identity resolved for one request, handed to handlers explicitly."""
    user: User
    source: CredentialSource

    @property
    def username(self) -> str:
        return self.user.username


@dataclass
class AuthOutcome:
    state: AuthState
    context: Optional[RequestContext] = None
    error: Optional[AppError] = None


class SessionAuthenticator:
    """
    Gate for protected requests.

    A credential (signed session cookie or bearer token) is only ever a
    claim: every request re-resolves it against the live user store, so an
    account that disappears invalidates its outstanding sessions at once.
    """

    def __init__(self, users, jwt_secret: str):
        self.users = users
        self.jwt_secret = jwt_secret

    def _extract_credential(self):
        username = session.get(SESSION_KEY)
        if username:
            return username, session.get(ACCOUNT_KEY), CredentialSource.COOKIE

        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            token = auth_header.split("Bearer ")[1]
            try:
                username, account_stamp = decode_token(token, self.jwt_secret)
            except jwt.ExpiredSignatureError as e:
                logger.warning("Bearer token expired")
                raise InvalidCredential("Token expired") from e
            except jwt.InvalidTokenError as e:
                logger.warning("Invalid bearer token: %s", str(e))
                raise InvalidCredential("Invalid token") from e
            return username, account_stamp, CredentialSource.BEARER

        raise MissingCredential()

    def authenticate(self) -> AuthOutcome:
        state = AuthState.UNAUTHENTICATED
        try:
            username, account_stamp, source = self._extract_credential()

            state = AuthState.RESOLVING
            user = self.users.get(username)
            # A credential issued to an earlier account with the same name is stale too
            if user is None or user.account_stamp != account_stamp:
                if source is CredentialSource.COOKIE:
                    end_session()
                logger.warning("Stale credential for %s rejected", username)
                raise StaleCredential()
        except AppError as e:
            logger.debug("Auth %s -> %s: %s", state.value, AuthState.REJECTED.value, e.message)
            return AuthOutcome(AuthState.REJECTED, error=e)

        logger.debug("Session resolved for user: %s", username)
        return AuthOutcome(AuthState.AUTHENTICATED, context=RequestContext(user=user, source=source))


def start_session(user: User):
    session[SESSION_KEY] = user.username
    session[ACCOUNT_KEY] = user.account_stamp


def end_session():
    session.pop(SESSION_KEY, None)
    session.pop(ACCOUNT_KEY, None)


def session_required(f):
    """
    Resource method decorator. The resource must carry an ``authenticator``;
    on success the wrapped method receives the RequestContext as its first
    argument after self, otherwise the error response is returned directly.
    """
    @wraps(f)
    def decorated(resource, *args, **kwargs):
        outcome = resource.authenticator.authenticate()
        if outcome.state is not AuthState.AUTHENTICATED:
            return error_response(outcome.error.message, outcome.error.status_code)
        return f(resource, outcome.context, *args, **kwargs)

    return decorated
