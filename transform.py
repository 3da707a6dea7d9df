from __future__ import annotations
from document import ShapeEntry, VectorDocument

class ScaleTransform:
    def __init__(self, sx: float = 1.0, sy: float = None):
        if sy is None:
            sy = sx
        self.sx = sx
        self.sy = sy

    @staticmethod
    def from_document(document: VectorDocument) -> 'ScaleTransform':
        return ScaleTransform(document.output_width_px / document.viewport_width,
                              document.output_height_px / document.viewport_height)

    def transform_point(self, x: float, y: float) -> tuple[float, float]:
        return (x * self.sx, y * self.sy)

    def apply(self, segment):
        return segment.transformed(self.transform_point)

    def apply_shape(self, shape: ShapeEntry) -> ShapeEntry:
        return ShapeEntry(
            fill_color=shape.fill_color,
            segments=tuple(self.apply(segment) for segment in shape.segments),
            fill_rule=shape.fill_rule,
        )

    def __repr__(self) -> str:
        return f"ScaleTransform(sx={self.sx!r}, sy={self.sy!r})"

def scale_document(document: VectorDocument) -> tuple[ShapeEntry, ...]:
    transform = ScaleTransform.from_document(document)
    return tuple(transform.apply_shape(shape) for shape in document.shapes)
