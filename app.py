from flask import Flask
from flask_cors import CORS
from flask_restful import Api, Resource
from flask_migrate import Migrate
from models import db
from config import Config
import logging

migrate = Migrate()


class HealthCheck(Resource):
    def get(self):
        return {"status": "ok"}


def create_app(config_object=Config, cache_client=None):
    """
    Build the application. The database pool, the Redis client and the
    components below are created once here and injected into resources.
    """
    app = Flask(__name__)
    app.config.from_object(config_object)

    for key in ('SQLALCHEMY_DATABASE_URI', 'SECRET_KEY', 'JWT_SECRET', 'MEDIA_ROOT'):
        if not app.config.get(key):
            raise RuntimeError(f"{key} must be configured")

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s %(message)s'
    )

    CORS(app, supports_credentials=True)

    db.init_app(app)
    migrate.init_app(app, db)

    from middleware.auth import SessionAuthenticator
    from repositories import UserRepository, SwipeRepository
    from utils.cache import CacheManager, connect_redis
    from utils.matching import MatchEngine
    from utils.media import MediaCache
    from utils.storage import BlobStore

    if cache_client is None:
        cache_client = connect_redis(app.config['REDIS_URL'])

    users = UserRepository(db.session)
    authenticator = SessionAuthenticator(users, app.config['JWT_SECRET'])
    engine = MatchEngine(SwipeRepository(db.session))
    media = MediaCache(users, BlobStore(app.config['MEDIA_ROOT']), CacheManager(cache_client))
    tokens = {
        'jwt_secret': app.config['JWT_SECRET'],
        'jwt_ttl_hours': app.config['JWT_TTL_HOURS'],
    }

    api = Api(app)
    api.add_resource(HealthCheck, '/health')

    from resources.users import (
        UserListResource,
        LoginResource,
        LogoutResource,
        UserResource,
        UserPictureResource,
        CheckLoginResource,
        LocationResource,
        BioResource,
        ProfilePicResource
    )
    from resources.swipes import (
        SwipeResource,
        AvailableResource,
        UserMatchesResource,
        MatchDetailResource
    )

    # Public user routes
    api.add_resource(UserListResource, '/user', resource_class_kwargs={'users': users, **tokens})
    api.add_resource(LoginResource, '/user/login', resource_class_kwargs={'users': users, **tokens})
    api.add_resource(LogoutResource, '/user/logout')
    api.add_resource(UserResource, '/user/u/<string:username>',
                     resource_class_kwargs={'users': users})
    api.add_resource(UserPictureResource, '/user/u/<string:username>/pic',
                     resource_class_kwargs={'media': media})

    # Account management (session required)
    api.add_resource(CheckLoginResource, '/user/manage/li',
                     resource_class_kwargs={'authenticator': authenticator})
    api.add_resource(LocationResource, '/user/manage/location',
                     resource_class_kwargs={'authenticator': authenticator, 'users': users})
    api.add_resource(BioResource, '/user/manage/bio',
                     resource_class_kwargs={'authenticator': authenticator, 'users': users})
    api.add_resource(ProfilePicResource, '/user/manage/profile_pic',
                     resource_class_kwargs={'authenticator': authenticator, 'media': media})

    # Swipe and match routes (session required)
    swipe_kwargs = {'authenticator': authenticator, 'engine': engine}
    api.add_resource(SwipeResource, '/swipe', resource_class_kwargs=swipe_kwargs)
    api.add_resource(AvailableResource, '/swipe/available', resource_class_kwargs=swipe_kwargs)
    api.add_resource(UserMatchesResource, '/swipe/matches', resource_class_kwargs=swipe_kwargs)
    api.add_resource(MatchDetailResource, '/swipe/match/<string:username>',
                     resource_class_kwargs=swipe_kwargs)

    return app


if __name__ == '__main__':
    create_app().run(debug=True, threaded=True)
