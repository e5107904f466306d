"""Image codec: turns uploaded bytes into a transportable data URI.

The codec performs format/encoding handling only. It does not check size,
dimensions or content; whatever the user uploads is passed through to the
generation service as-is.
"""

import asyncio
import base64
import binascii
import io
import logging
import mimetypes
import re
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .errors import ImageReadError
from .models import SourceImage

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[^;,]+)*?);base64,(?P<data>.*)$", re.S)


def to_data_uri(data: bytes, mime_type: str) -> str:
    """Encode raw bytes as a base64 data URI."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{encoded}"


def parse_data_uri(uri: str) -> tuple[bytes, str]:
    """Decode a base64 data URI.

    Args:
        uri: ``data:<mime>;base64,<payload>`` string

    Returns:
        Tuple of (raw bytes, mime type)

    Raises:
        ValueError: If the string is not a base64 data URI
    """
    match = _DATA_URI_RE.match(uri or "")
    if match is None:
        raise ValueError("Not a base64 data URI")

    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 payload in data URI: {e}") from e

    return data, match.group("mime") or DEFAULT_MIME_TYPE


def sniff_mime_type(data: bytes) -> str | None:
    """Detect the media type of image bytes with Pillow.

    Only the header is parsed; the image is never decoded.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            return Image.MIME.get(img.format or "")
    except (UnidentifiedImageError, OSError):
        return None


def _read_source(source: bytes | str | Path) -> tuple[bytes, str | None]:
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source), None

    path = Path(source)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ImageReadError(f"Could not read image {path.name}: {e}", source=str(path)) from e

    guessed, _ = mimetypes.guess_type(path.name)
    return data, guessed


async def encode_image(source: bytes | str | Path, mime_type: str | None = None) -> SourceImage:
    """Read an uploaded image and encode it for the generation service.

    The read runs in a worker thread so the event loop stays responsive
    while large uploads are loaded from disk.

    Args:
        source: Raw image bytes or a path to the uploaded file
        mime_type: Media type declared by the file input, if any

    Returns:
        SourceImage holding the data URI and the media type

    Raises:
        ImageReadError: If the file cannot be read
    """
    data, guessed = await asyncio.to_thread(_read_source, source)

    resolved = mime_type or guessed or sniff_mime_type(data) or DEFAULT_MIME_TYPE
    logger.info(f"Encoded source image ({len(data)} bytes, {resolved})")

    return SourceImage(encoded_data=to_data_uri(data, resolved), mime_type=resolved)
