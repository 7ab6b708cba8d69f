import logging
import os

from utils.errors import BlobStorageError, NotFound

logger = logging.getLogger(__name__)


class BlobStore:
    """Filesystem storage for uploaded images, one current file per username."""

    def __init__(self, root: str):
        self.root = root

    def path_for(self, username: str) -> str:
        return os.path.join(self.root, username)

    def write(self, username: str, data: bytes) -> str:
        """Write (overwriting) the blob for username. Returns its path."""
        path = self.path_for(username)
        try:
            os.makedirs(self.root, exist_ok=True)
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            logger.error(f"Failed to write blob {path}: {str(e)}")
            raise BlobStorageError("Failed to store profile picture") from e
        return path

    def read(self, path: str) -> bytes:
        try:
            with open(path, "rb") as f:
                return f.read()
        except FileNotFoundError as e:
            logger.warning(f"Blob {path} is referenced but missing")
            raise NotFound("Profile picture not found") from e
        except OSError as e:
            logger.error(f"Failed to read blob {path}: {str(e)}")
            raise BlobStorageError("Failed to read profile picture") from e
