from __future__ import annotations
import numpy as np
import math
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Tuple
from document import ShapeEntry
from path_data import ClosePath, CubicTo, LineTo, MoveTo, QuadTo

LOGGER = logging.getLogger(__name__)

Point = Tuple[float, float]

DEFAULT_TOLERANCE = 0.2
SUBSAMPLES = 4
# far outside any buffer, yet small enough that edge slopes stay finite
COORDINATE_LIMIT = 1e12
MAX_SUBDIVISION_DEPTH = 10

class PixelBuffer:
    def __init__(self, width: int, height: int, data: Optional[np.ndarray] = None):
        if data is None:
            data = np.zeros((height, width, 4), dtype=np.uint8)
        if data.shape != (height, width, 4):
            raise ValueError(f"Buffer shape {data.shape} does not match {width}x{height}")
        self.width = width
        self.height = height
        self.data = data

    def pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        return tuple(int(c) for c in self.data[y, x, :])

    def rgba_array(self) -> np.ndarray:
        return self.data.copy()

    def finalize(self) -> 'PixelBuffer':
        self.data.flags.writeable = False
        return self

def _subdivide_cubic_bezier(p0: Point, p1: Point, p2: Point, p3: Point,
                            tolerance: float) -> List[Point]:
    points = [p0]
    threshold = 16 * tolerance * tolerance

    def midpoint(a, b):
        return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)

    def flatness(p0, p1, p2, p3):
        ux = 3 * p1[0] - 2 * p0[0] - p3[0]
        uy = 3 * p1[1] - 2 * p0[1] - p3[1]
        vx = 3 * p2[0] - 2 * p3[0] - p0[0]
        vy = 3 * p2[1] - 2 * p3[1] - p0[1]
        return max(ux * ux, vx * vx) + max(uy * uy, vy * vy)

    def subdivide(p0, p1, p2, p3, depth=0):
        if depth >= MAX_SUBDIVISION_DEPTH or flatness(p0, p1, p2, p3) <= threshold:
            points.append(p3)
            return

        m01 = midpoint(p0, p1)
        m12 = midpoint(p1, p2)
        m23 = midpoint(p2, p3)
        m012 = midpoint(m01, m12)
        m123 = midpoint(m12, m23)
        m0123 = midpoint(m012, m123)

        subdivide(p0, m01, m012, m0123, depth + 1)
        subdivide(m0123, m123, m23, p3, depth + 1)

    subdivide(p0, p1, p2, p3)
    return points

def _subdivide_quadratic_bezier(p0: Point, p1: Point, p2: Point,
                                tolerance: float) -> List[Point]:
    points = [p0]
    threshold = 16 * tolerance * tolerance

    def midpoint(a, b):
        return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)

    def flatness(p0, p1, p2):
        ux = 2 * p1[0] - p0[0] - p2[0]
        uy = 2 * p1[1] - p0[1] - p2[1]
        return ux * ux + uy * uy

    def subdivide(p0, p1, p2, depth=0):
        if depth >= MAX_SUBDIVISION_DEPTH or flatness(p0, p1, p2) <= threshold:
            points.append(p2)
            return

        m01 = midpoint(p0, p1)
        m12 = midpoint(p1, p2)
        m012 = midpoint(m01, m12)

        subdivide(p0, m01, m012, depth + 1)
        subdivide(m012, m12, p2, depth + 1)

    subdivide(p0, p1, p2)
    return points

def flatten_shape(segments: Iterable, tolerance: float = DEFAULT_TOLERANCE) -> List[List[Point]]:
    """Turn a segment sequence into closed polygons, one per subpath.

    Open subpaths are closed implicitly, the same way a fill treats them.
    """
    contours = []
    contour = None
    current = (0.0, 0.0)

    def finish():
        if contour is not None and len(contour) >= 2:
            contours.append(contour)

    for segment in segments:
        if isinstance(segment, MoveTo):
            finish()
            current = (segment.x, segment.y)
            contour = [current]
            continue

        if contour is None:
            contour = [current]

        if isinstance(segment, LineTo):
            current = (segment.x, segment.y)
            contour.append(current)
        elif isinstance(segment, CubicTo):
            curve = _subdivide_cubic_bezier(current, (segment.x1, segment.y1),
                                            (segment.x2, segment.y2), (segment.x, segment.y), tolerance)
            contour.extend(curve[1:])
            current = (segment.x, segment.y)
        elif isinstance(segment, QuadTo):
            curve = _subdivide_quadratic_bezier(current, (segment.x1, segment.y1),
                                                (segment.x, segment.y), tolerance)
            contour.extend(curve[1:])
            current = (segment.x, segment.y)
        elif isinstance(segment, ClosePath):
            current = (segment.x, segment.y)
            if contour[-1] != current:
                contour.append(current)
            finish()
            contour = None
        else:
            raise TypeError(f"Not a path segment: {segment!r}")

    finish()
    return contours

def _edge_arrays(contours: List[List[Point]]):
    starts = []
    ends = []
    for contour in contours:
        pts = np.asarray(contour, dtype=np.float64)
        pts = np.nan_to_num(pts, nan=0.0, posinf=COORDINATE_LIMIT, neginf=-COORDINATE_LIMIT)
        np.clip(pts, -COORDINATE_LIMIT, COORDINATE_LIMIT, out=pts)
        starts.append(pts)
        ends.append(np.roll(pts, -1, axis=0))

    if not starts:
        return None

    p0 = np.concatenate(starts)
    p1 = np.concatenate(ends)
    keep = p0[:, 1] != p1[:, 1]
    p0 = p0[keep]
    p1 = p1[keep]
    if len(p0) == 0:
        return None

    direction = np.where(p1[:, 1] > p0[:, 1], 1, -1)
    ymin = np.minimum(p0[:, 1], p1[:, 1])
    ymax = np.maximum(p0[:, 1], p1[:, 1])
    with np.errstate(over='ignore'):
        slope = (p1[:, 0] - p0[:, 0]) / (p1[:, 1] - p0[:, 1])
    slope = np.nan_to_num(slope, nan=0.0, posinf=COORDINATE_LIMIT, neginf=-COORDINATE_LIMIT)
    return p0[:, 0], p0[:, 1], slope, direction, ymin, ymax

def _accumulate_span(acc: np.ndarray, xa: float, xb: float, width: int):
    xa = max(xa, 0.0)
    xb = min(xb, float(width))
    if xb <= xa:
        return

    ia = int(math.floor(xa))
    ib = int(math.floor(xb))
    if ia == ib:
        acc[ia] += xb - xa
        return

    acc[ia] += ia + 1 - xa
    acc[ia + 1:ib] += 1.0
    if ib < width:
        acc[ib] += xb - ib

def coverage_mask(width: int, height: int, contours: List[List[Point]],
                  fill_rule: str = 'nonzero', samples: int = SUBSAMPLES) -> np.ndarray:
    """Fractional coverage of each pixel by the filled contours.

    Each pixel row is sampled on several sub-scanlines; within a sub-scanline
    the horizontal extent of every inside span is accounted exactly.
    """
    mask = np.zeros((height, width), dtype=np.float64)
    edges = _edge_arrays(contours)
    if edges is None:
        return mask

    x0, y0, slope, direction, ymin, ymax = edges
    first_row = max(0, int(math.floor(ymin.min())))
    last_row = min(height, int(math.ceil(ymax.max())))

    acc = np.zeros(width, dtype=np.float64)
    for row in range(first_row, last_row):
        acc[:] = 0.0
        for s in range(samples):
            sy = row + (s + 0.5) / samples
            active = (ymin <= sy) & (ymax > sy)
            if not active.any():
                continue

            xs = x0[active] + (sy - y0[active]) * slope[active]
            order = np.argsort(xs, kind='stable')
            xs = xs[order]

            if fill_rule == 'evenodd':
                for i in range(0, len(xs) - 1, 2):
                    _accumulate_span(acc, xs[i], xs[i + 1], width)
            else:
                winding = np.cumsum(direction[active][order])
                for i in range(len(xs) - 1):
                    if winding[i] != 0:
                        _accumulate_span(acc, xs[i], xs[i + 1], width)

        mask[row] = acc / samples

    return np.clip(mask, 0.0, 1.0, out=mask)

class Rasterizer:
    def __init__(self, width: int, height: int, tolerance: float = DEFAULT_TOLERANCE,
                 workers: int = 1):
        if width <= 0 or height <= 0:
            raise ValueError(f"Output size must be positive (got {width}x{height})")
        self.width = width
        self.height = height
        self.tolerance = tolerance
        self.workers = workers
        self._reset()

    def _reset(self):
        # premultiplied color and alpha, both in [0, 1]
        self._color = np.zeros((self.height, self.width, 3), dtype=np.float64)
        self._alpha = np.zeros((self.height, self.width), dtype=np.float64)

    def shape_mask(self, shape: ShapeEntry) -> np.ndarray:
        contours = flatten_shape(shape.segments, self.tolerance)
        return coverage_mask(self.width, self.height, contours, shape.fill_rule)

    def _composite(self, mask: np.ndarray, color: Tuple[int, int, int, int]):
        r, g, b, a = color
        alpha = mask * (a / 255.0)
        inv = 1.0 - alpha
        src = np.array([r, g, b], dtype=np.float64) / 255.0

        self._color *= inv[:, :, None]
        self._color += alpha[:, :, None] * src
        self._alpha *= inv
        self._alpha += alpha

    def _finalize(self) -> PixelBuffer:
        alpha = np.clip(self._alpha, 0.0, 1.0)
        straight = np.divide(self._color, alpha[:, :, None],
                             out=np.zeros_like(self._color), where=alpha[:, :, None] > 0)

        data = np.zeros((self.height, self.width, 4), dtype=np.uint8)
        data[:, :, 0:3] = np.rint(np.clip(straight, 0.0, 1.0) * 255.0)
        data[:, :, 3] = np.rint(alpha * 255.0)
        return PixelBuffer(self.width, self.height, data).finalize()

    def rasterize(self, shapes: Iterable[ShapeEntry]) -> PixelBuffer:
        self._reset()
        shapes = [shape for shape in shapes if shape.fill_color[3] > 0]

        if self.workers > 1 and len(shapes) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                # map yields in submission order, so paint order is kept
                for shape, mask in zip(shapes, executor.map(self.shape_mask, shapes)):
                    self._composite(mask, shape.fill_color)
        else:
            for shape in shapes:
                self._composite(self.shape_mask(shape), shape.fill_color)

        LOGGER.debug("Rasterized %d shape(s) into %dx%d", len(shapes), self.width, self.height)
        return self._finalize()

def rasterize(width: int, height: int, shapes: Iterable[ShapeEntry],
              tolerance: float = DEFAULT_TOLERANCE, workers: int = 1) -> PixelBuffer:
    return Rasterizer(width, height, tolerance, workers).rasterize(shapes)
