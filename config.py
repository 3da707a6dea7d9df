from __future__ import annotations
from dataclasses import dataclass

OUTPUT_FILE_NAME = "ic_my_vector.png"

@dataclass(frozen=True)
class RenderConfig:
    default_width_dp: int = 128
    default_height_dp: int = 128
    density: float = 1.0
    tolerance: float = 0.2
    workers: int = 1
    output_name: str = OUTPUT_FILE_NAME

    def validate(self) -> 'RenderConfig':
        if self.default_width_dp <= 0 or self.default_height_dp <= 0:
            raise ValueError(
                f"Default size must be positive (got {self.default_width_dp} x {self.default_height_dp})")
        if self.density <= 0:
            raise ValueError(f"Density must be positive (got {self.density})")
        if self.tolerance <= 0:
            raise ValueError(f"Tolerance must be positive (got {self.tolerance})")
        if self.workers < 1:
            raise ValueError(f"Workers must be at least 1 (got {self.workers})")
        if not self.output_name:
            raise ValueError("Output name must not be empty")
        return self
