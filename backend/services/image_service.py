"""
Image Service — composes the profile-picture NFT image.

The generated image is a fixed 1000x1000 canvas:
  1. Background filled with the colour of the user's highest-priority role
     (first match in APPEARANCE_RULES, black when nothing matches)
  2. The avatar scaled to fit a 900x900 box, aspect ratio preserved
  3. Avatar centred on the canvas

compose_image() is pure; fetching the avatar is a separate async step so
tests can feed in-memory images.
"""
import io
import logging
from typing import Iterable

import httpx
from PIL import Image, UnidentifiedImageError

from domain.constants import APPEARANCE_RULES, AVATAR_MAX_SIZE, CANVAS_SIZE, DEFAULT_FILL_COLOR
from exceptions import ImageLoadError

logger = logging.getLogger(__name__)


def resolve_fill_color(memberships: Iterable[str]) -> tuple[int, int, int]:
    """Return the colour of the first appearance rule the user holds."""
    held = frozenset(memberships or ())
    for role_id, color in APPEARANCE_RULES:
        if role_id in held:
            return color
    return DEFAULT_FILL_COLOR


def fit_within(width: int, height: int, max_size: int = AVATAR_MAX_SIZE) -> tuple[float, float]:
    """
    Largest (width, height) with the source aspect ratio inside max_size².

    Landscape images are pinned to max_size wide, everything else to
    max_size tall.
    """
    if width <= 0 or height <= 0:
        raise ImageLoadError(f"Avatar has invalid dimensions {width}x{height}")
    aspect_ratio = width / height
    if aspect_ratio > 1:
        return float(max_size), max_size / aspect_ratio
    return max_size * aspect_ratio, float(max_size)


def center_offset(scaled_width: float, scaled_height: float, canvas_size: int = CANVAS_SIZE) -> tuple[float, float]:
    return (canvas_size - scaled_width) / 2, (canvas_size - scaled_height) / 2


def compose_image(avatar: Image.Image, memberships: Iterable[str]) -> bytes:
    """
    Render the NFT image and return it PNG-encoded.

    Args:
        avatar: Decoded avatar (any mode, any size)
        memberships: Role ids the user holds in the guild

    Returns:
        bytes: Opaque RGB PNG, CANVAS_SIZE x CANVAS_SIZE
    """
    fill = resolve_fill_color(memberships)
    canvas = Image.new("RGB", (CANVAS_SIZE, CANVAS_SIZE), fill)

    scaled_w, scaled_h = fit_within(*avatar.size)
    offset_x, offset_y = center_offset(scaled_w, scaled_h)
    size = (max(1, round(scaled_w)), max(1, round(scaled_h)))

    layer = avatar.convert("RGBA").resize(size, Image.LANCZOS)
    # Transparent avatar pixels show the fill; the canvas itself stays opaque.
    canvas.paste(layer, (round(offset_x), round(offset_y)), layer)

    buffer = io.BytesIO()
    canvas.save(buffer, format="PNG")
    return buffer.getvalue()


def decode_avatar(data: bytes) -> Image.Image:
    """Decode raw avatar bytes with Pillow."""
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
        return image
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ImageLoadError(f"Avatar could not be decoded: {e}") from e


async def fetch_avatar(url: str, client: httpx.AsyncClient) -> Image.Image:
    """Download and decode an avatar. Raises ImageLoadError on any failure."""
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise ImageLoadError(f"Avatar download failed for {url}: {e}") from e
    return decode_avatar(response.content)


class AvatarFetcher:
    """Callable avatar loader with its own HTTP client settings."""

    def __init__(self, timeout: float = 15.0, transport: httpx.AsyncBaseTransport | None = None):
        self.timeout = timeout
        self._transport = transport

    async def __call__(self, url: str) -> Image.Image:
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport, follow_redirects=True
        ) as client:
            return await fetch_avatar(url, client)
