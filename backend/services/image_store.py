"""
Image Store — one PNG per Discord user id on the local filesystem.

Files are named `{user_id}.png` under the configured directory, so the mint
pipeline can find an image from the user id alone. Saving overwrites.
"""
import logging
import os
from pathlib import Path

from exceptions import ImageError

logger = logging.getLogger(__name__)

IMAGE_SUFFIX = ".png"


class ImageStore:
    """Flat-file store for generated NFT images."""

    def __init__(self, root: str | os.PathLike):
        self.root = Path(root)

    def ensure_root(self) -> Path:
        """Create the storage directory if it does not exist yet."""
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def resolve(self, user_id: str) -> Path:
        """Path of the image for user_id (the file may not exist)."""
        name = os.path.basename(str(user_id))
        if not name or name in (".", ".."):
            raise ImageError(f"Invalid image identifier: {user_id!r}")
        return self.root / f"{name}{IMAGE_SUFFIX}"

    def save(self, user_id: str, image_bytes: bytes) -> Path:
        """Write (or overwrite) the image for user_id and return its path."""
        self.ensure_root()
        path = self.resolve(user_id)
        try:
            path.write_bytes(image_bytes)
        except OSError as e:
            raise ImageError(f"Could not write image {path}: {e}") from e
        logger.info(f"Saved image path: {path}")
        return path

    def read(self, user_id: str) -> bytes:
        """Read back a stored image. Raises ImageError when it is missing."""
        path = self.resolve(user_id)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ImageError(f"Could not read image {path}: {e}") from e
        logger.info(f"Read image {path} ({len(data)} bytes)")
        return data


def user_id_from_reference(image_ref: str) -> str:
    """
    Extract the user id from an image reference like `/nft-images/123.png`.

    Only the final path component is used, so a reference can never point
    outside the store.
    """
    name = os.path.basename(image_ref.split("?", 1)[0].rstrip("/"))
    if name.endswith(IMAGE_SUFFIX):
        name = name[: -len(IMAGE_SUFFIX)]
    return name
