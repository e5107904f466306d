"""Export of finished results as downloadable PNG files."""

import io
import logging
import time
from pathlib import Path

from PIL import Image

from .codec import parse_data_uri
from .errors import PreconditionViolation
from .models import DownloadableImage

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "styleswap"


def suggested_filename(prefix: str = DEFAULT_PREFIX, timestamp_ms: int | None = None) -> str:
    """Build a download name from the current time in milliseconds."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{prefix}-{timestamp_ms}.png"


def _as_png(data: bytes, mime_type: str) -> bytes:
    if mime_type == "image/png":
        return data

    with Image.open(io.BytesIO(data)) as img:
        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
    logger.debug(f"Transcoded {mime_type} result to PNG")
    return buffer.getvalue()


def to_downloadable(
    result_image: str | None,
    prefix: str = DEFAULT_PREFIX,
    timestamp_ms: int | None = None,
) -> DownloadableImage:
    """Turn a result data URI into a downloadable PNG.

    Args:
        result_image: Data URI returned by the generation service
        prefix: Prefix of the suggested file name
        timestamp_ms: Override for the name timestamp (defaults to now)

    Returns:
        DownloadableImage with PNG bytes and a timestamped name

    Raises:
        PreconditionViolation: If there is no result to export
    """
    if not result_image:
        raise PreconditionViolation("No result image to export")

    data, mime_type = parse_data_uri(result_image)
    return DownloadableImage(
        data=_as_png(data, mime_type),
        suggested_name=suggested_filename(prefix, timestamp_ms),
        mime_type="image/png",
    )


def save_downloadable(image: DownloadableImage, directory: Path) -> Path:
    """Write a downloadable image into ``directory`` without overwriting.

    If a file with the suggested name already exists, a numeric suffix is
    added until a free name is found.

    Returns:
        Path of the written file
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    target = directory / image.suggested_name
    stem, suffix = target.stem, target.suffix
    counter = 1
    while True:
        try:
            with open(target, "xb") as handle:
                handle.write(image.data)
            break
        except FileExistsError:
            target = directory / f"{stem}-{counter}{suffix}"
            counter += 1

    logger.info(f"Saved download: {target}")
    return target
