import logging
from middleware.auth import end_session, session_required, start_session
from flask_restful import Resource
from flask import request, Response
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.security import generate_password_hash, check_password_hash
from utils.errors import AppError, InvalidLogin, NotFound, ValidationError
from utils.response import success_response, error_response
from utils.tokens import issue_token
from utils.validators import (
    require_json,
    validate_username,
    validate_password,
    validate_coordinate,
    validate_bio,
)

logger = logging.getLogger(__name__)


class UserListResource(Resource):
    """Resource for listing users and registering new ones"""

    def __init__(self, users, jwt_secret, jwt_ttl_hours):
        self.users = users
        self.jwt_secret = jwt_secret
        self.jwt_ttl_hours = jwt_ttl_hours

    def get(self):
        """List public fields of every user"""
        try:
            users = [user.to_public_dict() for user in self.users.list_all()]
            return success_response(users, "Users retrieved successfully")
        except AppError as e:
            return error_response(e.message, e.status_code)
        except Exception:
            logger.exception("Error listing users")
            return error_response("Failed to fetch users", 500)

    def post(self):
        """Register a new user and log them in"""
        try:
            data = require_json(request.get_json(silent=True))
            username = validate_username(data.get('username'))
            password = validate_password(data.get('password'))

            user = self.users.create(username, generate_password_hash(password))
            start_session(user)
            logger.info(f"Registered user {user.username}")

            return success_response(
                {
                    'user': user.to_public_dict(),
                    'token': issue_token(user.username, user.account_stamp, self.jwt_secret, self.jwt_ttl_hours),
                },
                "User created successfully",
                201
            )
        except AppError as e:
            return error_response(e.message, e.status_code)
        except Exception:
            logger.exception("Error registering user")
            return error_response("Failed to create user", 500)


class LoginResource(Resource):
    """Resource for password login"""

    def __init__(self, users, jwt_secret, jwt_ttl_hours):
        self.users = users
        self.jwt_secret = jwt_secret
        self.jwt_ttl_hours = jwt_ttl_hours

    def post(self):
        try:
            data = require_json(request.get_json(silent=True))
            username = data.get('username')
            password = data.get('password')
            if not isinstance(username, str) or not isinstance(password, str):
                raise ValidationError("username and password are required")

            user = self.users.get(username)
            if user is None or not check_password_hash(user.password, password):
                logger.warning(f"Failed login for {username}")
                raise InvalidLogin()

            start_session(user)
            return success_response(
                {'token': issue_token(user.username, user.account_stamp, self.jwt_secret, self.jwt_ttl_hours)},
                "Logged in"
            )
        except AppError as e:
            return error_response(e.message, e.status_code)
        except Exception:
            logger.exception("Error logging in")
            return error_response("Failed to log in", 500)


class LogoutResource(Resource):
    def get(self):
        end_session()
        return success_response(None, "Logged out")


class UserResource(Resource):
    """Resource for viewing one user's public profile"""

    def __init__(self, users):
        self.users = users

    def get(self, username):
        try:
            user = self.users.get(username)
            if user is None:
                raise NotFound("User not found")
            return success_response(user.to_public_dict(), "User retrieved")
        except AppError as e:
            return error_response(e.message, e.status_code)
        except Exception:
            logger.exception(f"Error fetching user {username}")
            return error_response("Failed to fetch user", 500)


class UserPictureResource(Resource):
    """Resource serving profile picture bytes through the media cache"""

    def __init__(self, media):
        self.media = media

    def get(self, username):
        try:
            data = self.media.get_profile_picture(username)
            return Response(data, mimetype="application/octet-stream")
        except AppError as e:
            return error_response(e.message, e.status_code)
        except Exception:
            logger.exception(f"Error fetching picture for {username}")
            return error_response("Failed to fetch profile picture", 500)


class CheckLoginResource(Resource):
    """Resource confirming the current session"""

    def __init__(self, authenticator):
        self.authenticator = authenticator

    @session_required
    def get(self, ctx):
        return success_response({'username': ctx.username}, "Logged in")


class LocationResource(Resource):
    def __init__(self, authenticator, users):
        self.authenticator = authenticator
        self.users = users

    @session_required
    def post(self, ctx):
        """Set the current user's coordinates"""
        try:
            data = require_json(request.get_json(silent=True))
            lat = validate_coordinate(data.get('lat'), 'lat', 90)
            long = validate_coordinate(data.get('long'), 'long', 180)

            user = self.users.set_location(ctx.user, lat, long)
            return success_response(user.to_public_dict(), "Location updated")
        except AppError as e:
            return error_response(e.message, e.status_code)
        except Exception:
            logger.exception(f"Error updating location for {ctx.username}")
            return error_response("Failed to update location", 500)


class BioResource(Resource):
    def __init__(self, authenticator, users):
        self.authenticator = authenticator
        self.users = users

    @session_required
    def post(self, ctx):
        """Set the current user's bio"""
        try:
            data = require_json(request.get_json(silent=True))
            bio = validate_bio(data.get('bio'))

            user = self.users.set_bio(ctx.user, bio)
            return success_response(user.to_public_dict(), "Bio updated")
        except AppError as e:
            return error_response(e.message, e.status_code)
        except Exception:
            logger.exception(f"Error updating bio for {ctx.username}")
            return error_response("Failed to update bio", 500)


class ProfilePicResource(Resource):
    def __init__(self, authenticator, media):
        self.authenticator = authenticator
        self.media = media

    @session_required
    def post(self, ctx):
        """Upload (replace) the current user's profile picture"""
        try:
            upload = request.files.get('file') or next(iter(request.files.values()), None)
            if upload is None:
                raise ValidationError("No file uploaded")

            self.media.upload_profile_picture(ctx.user, upload.read())
            return success_response({'username': ctx.username}, "Profile picture updated")
        except RequestEntityTooLarge:
            return error_response("File too large", 413)
        except AppError as e:
            return error_response(e.message, e.status_code)
        except Exception:
            logger.exception(f"Error uploading picture for {ctx.username}")
            return error_response("Failed to upload profile picture", 500)
