from __future__ import annotations
import logging
from config import RenderConfig
from document import parse_document
from encoder import save_png
from errors import IoError
from renderer import PixelBuffer, rasterize
from transform import scale_document

LOGGER = logging.getLogger(__name__)

def render_stream(stream, config: RenderConfig = None) -> PixelBuffer:
    if config is None:
        config = RenderConfig()
    config.validate()

    document = parse_document(stream, config)
    shapes = scale_document(document)
    return rasterize(document.output_width_px, document.output_height_px, shapes,
                     tolerance=config.tolerance, workers=config.workers)

def convert_file(source_path: str, output_dir: str, config: RenderConfig = None) -> str:
    if config is None:
        config = RenderConfig()

    try:
        with open(source_path, 'rb') as stream:
            buffer = render_stream(stream, config)
    except OSError as e:
        raise IoError(f"Cannot open input stream: {e}") from e

    output_path = save_png(buffer, output_dir, config.output_name)
    LOGGER.info("PNG saved to: %s", output_path)
    return output_path
