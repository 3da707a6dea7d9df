from __future__ import annotations

class VectorRenderError(Exception):
    pass

class SchemaError(VectorRenderError):
    pass

class InvalidDocumentError(VectorRenderError):
    def __init__(self, viewport_width: float, viewport_height: float):
        self.viewport_width = viewport_width
        self.viewport_height = viewport_height
        super().__init__(
            f"Invalid vector: viewportWidth/Height must be > 0 "
            f"(got {viewport_width} x {viewport_height})")

class PathSyntaxError(VectorRenderError):
    def __init__(self, message: str, offset: int, path_data: str = None):
        self.offset = offset
        self.path_data = path_data
        super().__init__(f"{message} at offset {offset}")

class ColorSyntaxError(VectorRenderError):
    def __init__(self, literal: str):
        self.literal = literal
        super().__init__(f"Unknown color literal: {literal!r}")

class IoError(VectorRenderError):
    pass
