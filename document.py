from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Tuple
from parser import Node, build_tree, read_markup, tokenize
from attributes import resolve_attribute
from colors import parse_color
from config import RenderConfig
from errors import InvalidDocumentError
from geometry import dp_to_px, parse_dp, parse_float
from path_data import parse_path_data

LOGGER = logging.getLogger(__name__)

SHAPE_TAG = 'path'

FILL_RULES = {
    'nonzero': 'nonzero',
    'evenodd': 'evenodd',
}

@dataclass(frozen=True)
class ShapeEntry:
    fill_color: Tuple[int, int, int, int]
    segments: tuple
    fill_rule: str = 'nonzero'

@dataclass(frozen=True)
class VectorDocument:
    output_width_px: int
    output_height_px: int
    viewport_width: float
    viewport_height: float
    shapes: Tuple[ShapeEntry, ...] = ()

def _parse_fill_rule(value: str | None) -> str:
    if not value:
        return 'nonzero'
    return FILL_RULES.get(value.strip().lower(), 'nonzero')

def parse_shape(node: Node) -> ShapeEntry | None:
    data = resolve_attribute(node, 'pathData')
    fill = resolve_attribute(node, 'fillColor')
    if not data or not data.strip() or not fill or not fill.strip():
        LOGGER.debug("Skipping <%s> without pathData or fillColor", node.tag)
        return None

    return ShapeEntry(
        fill_color=parse_color(fill),
        segments=tuple(parse_path_data(data)),
        fill_rule=_parse_fill_rule(resolve_attribute(node, 'fillType')),
    )

def _output_size(root: Node, attr_name: str, default_dp: int, density: float) -> int:
    dp = None
    value = resolve_attribute(root, attr_name)
    if value is not None:
        dp = parse_dp(value)
        if dp is None:
            LOGGER.debug("Ignoring non-dp %s %r, using default %ddp", attr_name, value, default_dp)
    if dp is None:
        dp = default_dp
    return dp_to_px(dp, density)

def parse_document(stream, config: RenderConfig = None) -> VectorDocument:
    """Parse a vector drawable into a VectorDocument.

    Every <path> below the root becomes a ShapeEntry in document order;
    group transforms, strokes and the rest are ignored. The viewport is
    validated only after the whole input has been consumed.
    """
    if config is None:
        config = RenderConfig()

    root = build_tree(tokenize(read_markup(stream)))

    width_px = _output_size(root, 'width', config.default_width_dp, config.density)
    height_px = _output_size(root, 'height', config.default_height_dp, config.density)

    viewport_width = parse_float(resolve_attribute(root, 'viewportWidth')) or 0.0
    viewport_height = parse_float(resolve_attribute(root, 'viewportHeight')) or 0.0

    shapes = []
    for node in root.iter():
        if node is root or node.tag != SHAPE_TAG:
            continue
        shape = parse_shape(node)
        if shape is not None:
            shapes.append(shape)

    if not (viewport_width > 0 and viewport_height > 0):
        raise InvalidDocumentError(viewport_width, viewport_height)

    LOGGER.debug("Parsed vector %dx%d px, viewport %gx%g, %d shape(s)",
                 width_px, height_px, viewport_width, viewport_height, len(shapes))

    return VectorDocument(
        output_width_px=width_px,
        output_height_px=height_px,
        viewport_width=viewport_width,
        viewport_height=viewport_height,
        shapes=tuple(shapes),
    )
