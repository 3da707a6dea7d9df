from __future__ import annotations
import logging
import os
import tempfile
from PIL import Image
from config import OUTPUT_FILE_NAME
from errors import IoError
from renderer import PixelBuffer

LOGGER = logging.getLogger(__name__)

def to_image(buffer: PixelBuffer) -> Image.Image:
    return Image.fromarray(buffer.rgba_array())

def encode_png(buffer: PixelBuffer, stream):
    try:
        to_image(buffer).save(stream, format='PNG')
    except OSError as e:
        raise IoError(f"Cannot write PNG: {e}") from e

def save_png(buffer: PixelBuffer, directory: str, name: str = OUTPUT_FILE_NAME) -> str:
    """Write the buffer as `directory/name`, replacing any earlier file of that name."""
    output_path = os.path.join(directory, name)
    tmp_path = None
    try:
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix='.' + name, suffix='.tmp', dir=directory)
        with os.fdopen(fd, 'wb') as out:
            encode_png(buffer, out)
        os.replace(tmp_path, output_path)
        tmp_path = None
    except OSError as e:
        raise IoError(f"Cannot save {output_path}: {e}") from e
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.remove(tmp_path)

    LOGGER.debug("Wrote %dx%d PNG to %s", buffer.width, buffer.height, output_path)
    return output_path
