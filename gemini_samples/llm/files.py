"""Loading local image files into request parts."""

from pathlib import Path

import structlog

from gemini_samples.llm.errors import InputFileError
from gemini_samples.llm.models import Blob, image_data


logger = structlog.get_logger()


def read_image(path: Path, image_format: str = "png") -> Blob:
    """Read an image file into a blob part.

    Args:
        path: Image file to read.
        image_format: Image subtype used for the MIME type.

    Returns:
        Blob tagged ``image/<image_format>``.

    Raises:
        InputFileError: If the file is missing, unreadable, or empty.
    """
    log = logger.bind(component="llm", subcomponent="files")

    try:
        data = path.read_bytes()
    except OSError as exc:
        log.warning("image_read_failed", path=str(path), error=str(exc))
        msg = f"Cannot read image {path}: {exc.strerror or exc}"
        raise InputFileError(msg, path=path) from exc

    if not data:
        msg = f"Image file is empty: {path}"
        raise InputFileError(msg, path=path)

    log.debug("image_loaded", path=str(path), bytes=len(data))
    return image_data(image_format, data)
