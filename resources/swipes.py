import logging
from middleware.auth import session_required
from flask_restful import Resource
from flask import request
from utils.errors import AppError
from utils.response import success_response, error_response
from utils.validators import require_json, validate_swipe

logger = logging.getLogger(__name__)


class SwipeResource(Resource):
    """Resource for recording a swipe (interested or not)"""

    def __init__(self, authenticator, engine):
        self.authenticator = authenticator
        self.engine = engine

    @session_required
    def post(self, ctx):
        """
        Record the current user's decision about another user.
        If both users are interested in each other, a match is created.
        """
        try:
            data = require_json(request.get_json(silent=True))
            swiped, status = validate_swipe(data)

            result = self.engine.record_swipe(ctx.username, swiped, status)
            message = "It's a match!" if result.matched else "Swipe recorded"
            return success_response(result.to_dict(), message, 201)
        except AppError as e:
            return error_response(e.message, e.status_code)
        except Exception:
            logger.exception(f"Error recording swipe for {ctx.username}")
            return error_response("Failed to record swipe", 500)


class AvailableResource(Resource):
    """Resource for users the current user can still swipe on"""

    def __init__(self, authenticator, engine):
        self.authenticator = authenticator
        self.engine = engine

    @session_required
    def get(self, ctx):
        try:
            candidates = self.engine.list_available(ctx.username)
            return success_response(candidates, f"Found {len(candidates)} available users")
        except AppError as e:
            return error_response(e.message, e.status_code)
        except Exception:
            logger.exception(f"Error listing available users for {ctx.username}")
            return error_response("Failed to fetch available users", 500)


class UserMatchesResource(Resource):
    """Resource for getting the current user's matches"""

    def __init__(self, authenticator, engine):
        self.authenticator = authenticator
        self.engine = engine

    @session_required
    def get(self, ctx):
        try:
            matches = self.engine.list_matches(ctx.username)
            return success_response(matches, "Matches retrieved successfully")
        except AppError as e:
            return error_response(e.message, e.status_code)
        except Exception:
            logger.exception(f"Error fetching matches for {ctx.username}")
            return error_response("Failed to fetch matches", 500)


class MatchDetailResource(Resource):
    """Resource for unmatching"""

    def __init__(self, authenticator, engine):
        self.authenticator = authenticator
        self.engine = engine

    @session_required
    def delete(self, ctx, username):
        try:
            self.engine.delete_match(ctx.username, username)
            return success_response(None, "Match deleted")
        except AppError as e:
            return error_response(e.message, e.status_code)
        except Exception:
            logger.exception(f"Error deleting match {ctx.username}/{username}")
            return error_response("Failed to delete match", 500)
