import logging

from utils.cache import CacheManager, build_profile_pic_cache_key
from utils.errors import NotFound, ValidationError
from utils.storage import BlobStore

logger = logging.getLogger(__name__)


class MediaCache:
    """
    Cache-aside layer for profile pictures.

    The blob store is the source of truth; Redis only absorbs reads. Entries
    are filled on a miss and dropped on upload, so a reader sees a new
    picture at most one miss after it was written.
    """

    def __init__(self, users, blobs: BlobStore, cache: CacheManager):
        self.users = users
        self.blobs = blobs
        self.cache = cache

    def get_profile_picture(self, username: str) -> bytes:
        user = self.users.get(username)
        if user is None or not user.profile_pic_path:
            raise NotFound("Profile picture not found")

        cache_key = build_profile_pic_cache_key(username)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Cache HIT for profile picture - user: {username}")
            return cached

        logger.debug(f"Cache MISS for profile picture - user: {username}")
        data = self.blobs.read(user.profile_pic_path)

        if self.cache.is_available() and not self.cache.set(cache_key, data):
            logger.warning(f"Could not populate picture cache for {username}")

        return data

    def upload_profile_picture(self, user, data: bytes) -> str:
        if not data:
            raise ValidationError("Uploaded file is empty")

        path = self.blobs.write(user.username, data)
        try:
            self.users.set_profile_pic_path(user, path)
        finally:
            # The blob on disk has changed even if the path update failed
            cache_key = build_profile_pic_cache_key(user.username)
            if self.cache.is_available() and not self.cache.delete(cache_key):
                logger.warning(f"Could not invalidate picture cache for {user.username}")

        logger.info(f"Stored profile picture for {user.username} ({len(data)} bytes)")
        return path
