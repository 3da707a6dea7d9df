from __future__ import annotations
import math
import re
from dataclasses import dataclass
from typing import Callable, List, Tuple
from errors import PathSyntaxError

Point = Tuple[float, float]

@dataclass(frozen=True)
class MoveTo:
    x: float
    y: float

    def points(self) -> List[Point]:
        return [(self.x, self.y)]

    def transformed(self, fn: Callable[[float, float], Point]) -> 'MoveTo':
        return MoveTo(*fn(self.x, self.y))

@dataclass(frozen=True)
class LineTo:
    x: float
    y: float

    def points(self) -> List[Point]:
        return [(self.x, self.y)]

    def transformed(self, fn: Callable[[float, float], Point]) -> 'LineTo':
        return LineTo(*fn(self.x, self.y))

@dataclass(frozen=True)
class CubicTo:
    x1: float
    y1: float
    x2: float
    y2: float
    x: float
    y: float

    def points(self) -> List[Point]:
        return [(self.x1, self.y1), (self.x2, self.y2), (self.x, self.y)]

    def transformed(self, fn: Callable[[float, float], Point]) -> 'CubicTo':
        return CubicTo(*fn(self.x1, self.y1), *fn(self.x2, self.y2), *fn(self.x, self.y))

@dataclass(frozen=True)
class QuadTo:
    x1: float
    y1: float
    x: float
    y: float

    def points(self) -> List[Point]:
        return [(self.x1, self.y1), (self.x, self.y)]

    def transformed(self, fn: Callable[[float, float], Point]) -> 'QuadTo':
        return QuadTo(*fn(self.x1, self.y1), *fn(self.x, self.y))

@dataclass(frozen=True)
class ClosePath:
    # start point of the subpath being closed
    x: float
    y: float

    def points(self) -> List[Point]:
        return [(self.x, self.y)]

    def transformed(self, fn: Callable[[float, float], Point]) -> 'ClosePath':
        return ClosePath(*fn(self.x, self.y))

COMMANDS = 'MmLlHhVvCcSsQqTtAaZz'

# argument kinds per command: 'n' is a number, 'f' an arc flag
ARGUMENTS = {
    'M': 'nn',
    'L': 'nn',
    'H': 'n',
    'V': 'n',
    'C': 'nnnnnn',
    'S': 'nnnn',
    'Q': 'nnnn',
    'T': 'nn',
    'A': 'nnnffnn',
}

number_pattern = re.compile(r'[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?')

SEPARATORS = ' \t\n\r\f,'
NUMBER_START = '+-.0123456789'

class _Scanner:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def skip_separators(self):
        while self.pos < len(self.text) and self.text[self.pos] in SEPARATORS:
            self.pos += 1

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def at_number(self) -> bool:
        self.skip_separators()
        return not self.at_end() and self.text[self.pos] in NUMBER_START

    def error(self, message: str, offset: int = None):
        return PathSyntaxError(message, self.pos if offset is None else offset, self.text)

    def read_number(self) -> float:
        self.skip_separators()
        if self.at_end():
            raise self.error("Missing numeric argument")
        if self.text[self.pos] not in NUMBER_START:
            raise self.error(f"Expected a number, found {self.text[self.pos]!r}")

        match = number_pattern.match(self.text, self.pos)
        if not match:
            raise self.error("Malformed number")
        value = float(match.group(0))
        if not math.isfinite(value):
            raise self.error("Number out of range")
        self.pos = match.end()
        return value

    def read_flag(self) -> bool:
        self.skip_separators()
        if self.at_end():
            raise self.error("Missing arc flag")
        char = self.text[self.pos]
        if char not in '01':
            raise self.error(f"Arc flag must be 0 or 1, found {char!r}")
        self.pos += 1
        return char == '1'

    def read_group(self, kinds: str) -> list:
        values = []
        for kind in kinds:
            if kind == 'f':
                values.append(self.read_flag())
            else:
                values.append(self.read_number())
        return values

def arc_to_cubics(x1: float, y1: float, rx: float, ry: float, rotation: float,
                  large_arc: bool, sweep: bool, x2: float, y2: float) -> list:
    """Convert an endpoint-parameterized elliptical arc into cubic segments.

    Radii that are too small to span the endpoints are scaled up, a zero
    radius degrades to a straight line and coincident endpoints produce
    nothing at all.
    """
    if x1 == x2 and y1 == y2:
        return []

    rx = abs(rx)
    ry = abs(ry)
    if rx == 0 or ry == 0:
        return [LineTo(x2, y2)]

    phi = math.radians(rotation % 360.0)
    cos_phi = math.cos(phi)
    sin_phi = math.sin(phi)

    dx = (x1 - x2) / 2
    dy = (y1 - y2) / 2
    x1p = cos_phi * dx + sin_phi * dy
    y1p = -sin_phi * dx + cos_phi * dy

    lambda_val = (x1p * x1p) / (rx * rx) + (y1p * y1p) / (ry * ry)
    if lambda_val > 1:
        rx *= math.sqrt(lambda_val)
        ry *= math.sqrt(lambda_val)

    denominator = rx * rx * y1p * y1p + ry * ry * x1p * x1p
    factor = math.sqrt(max(0.0, (rx * rx * ry * ry - denominator) / denominator))
    if large_arc == sweep:
        factor = -factor

    cxp = factor * rx * y1p / ry
    cyp = -factor * ry * x1p / rx

    cx = cos_phi * cxp - sin_phi * cyp + (x1 + x2) / 2
    cy = sin_phi * cxp + cos_phi * cyp + (y1 + y2) / 2

    theta1 = math.atan2((y1p - cyp) / ry, (x1p - cxp) / rx)
    dtheta = math.atan2((-y1p - cyp) / ry, (-x1p - cxp) / rx) - theta1

    if sweep and dtheta < 0:
        dtheta += 2 * math.pi
    elif not sweep and dtheta > 0:
        dtheta -= 2 * math.pi

    def ellipse_point(theta):
        ex = rx * math.cos(theta)
        ey = ry * math.sin(theta)
        return (cx + ex * cos_phi - ey * sin_phi, cy + ex * sin_phi + ey * cos_phi)

    def ellipse_tangent(theta):
        ex = -rx * math.sin(theta)
        ey = ry * math.cos(theta)
        return (ex * cos_phi - ey * sin_phi, ex * sin_phi + ey * cos_phi)

    num_segments = max(1, int(math.ceil(abs(dtheta) / (math.pi / 2) - 1e-9)))
    delta = dtheta / num_segments
    k = 4.0 / 3.0 * math.tan(delta / 4)

    segments = []
    theta = theta1
    start = (x1, y1)
    for i in range(num_segments):
        next_theta = theta + delta
        d1 = ellipse_tangent(theta)
        d2 = ellipse_tangent(next_theta)
        end = (x2, y2) if i == num_segments - 1 else ellipse_point(next_theta)
        segments.append(CubicTo(start[0] + k * d1[0], start[1] + k * d1[1],
                                end[0] - k * d2[0], end[1] - k * d2[1],
                                end[0], end[1]))
        start = end
        theta = next_theta

    return segments

def parse_path_data(path_str: str) -> list:
    """Parse path data into absolute MoveTo/LineTo/CubicTo/QuadTo/ClosePath segments.

    Shorthand commands (H, V, S, T, A) are normalized here so that consumers
    only ever see the five segment kinds.
    """
    if path_str is None:
        return []

    scanner = _Scanner(path_str)
    segments = []
    current_x, current_y = 0.0, 0.0
    start_x, start_y = 0.0, 0.0
    prev_cp = None
    prev_qcp = None

    while True:
        scanner.skip_separators()
        if scanner.at_end():
            break

        offset = scanner.pos
        cmd = path_str[offset]
        if cmd not in COMMANDS:
            if cmd.isalpha():
                raise scanner.error(f"Unrecognized command {cmd!r}", offset)
            raise scanner.error(f"Unexpected character {cmd!r}", offset)
        scanner.pos += 1

        is_relative = cmd.islower()
        cmd_upper = cmd.upper()

        if cmd_upper == 'Z':
            segments.append(ClosePath(start_x, start_y))
            current_x, current_y = start_x, start_y
            prev_cp = None
            prev_qcp = None
            # numbers trailing a close have no meaning and are dropped
            while scanner.at_number():
                scanner.read_number()
            continue

        kinds = ARGUMENTS[cmd_upper]
        first = True
        while first or scanner.at_number():
            values = scanner.read_group(kinds)
            ox, oy = (current_x, current_y) if is_relative else (0.0, 0.0)
            cp = None
            qcp = None

            if cmd_upper == 'M':
                current_x, current_y = ox + values[0], oy + values[1]
                if first:
                    start_x, start_y = current_x, current_y
                    segments.append(MoveTo(current_x, current_y))
                else:
                    segments.append(LineTo(current_x, current_y))

            elif cmd_upper == 'L':
                current_x, current_y = ox + values[0], oy + values[1]
                segments.append(LineTo(current_x, current_y))

            elif cmd_upper == 'H':
                current_x = ox + values[0]
                segments.append(LineTo(current_x, current_y))

            elif cmd_upper == 'V':
                current_y = oy + values[0]
                segments.append(LineTo(current_x, current_y))

            elif cmd_upper == 'C':
                cp = (ox + values[2], oy + values[3])
                segments.append(CubicTo(ox + values[0], oy + values[1], cp[0], cp[1],
                                        ox + values[4], oy + values[5]))
                current_x, current_y = ox + values[4], oy + values[5]

            elif cmd_upper == 'S':
                if prev_cp is not None:
                    cp1 = (2 * current_x - prev_cp[0], 2 * current_y - prev_cp[1])
                else:
                    cp1 = (current_x, current_y)
                cp = (ox + values[0], oy + values[1])
                segments.append(CubicTo(cp1[0], cp1[1], cp[0], cp[1],
                                        ox + values[2], oy + values[3]))
                current_x, current_y = ox + values[2], oy + values[3]

            elif cmd_upper == 'Q':
                qcp = (ox + values[0], oy + values[1])
                segments.append(QuadTo(qcp[0], qcp[1], ox + values[2], oy + values[3]))
                current_x, current_y = ox + values[2], oy + values[3]

            elif cmd_upper == 'T':
                if prev_qcp is not None:
                    qcp = (2 * current_x - prev_qcp[0], 2 * current_y - prev_qcp[1])
                else:
                    qcp = (current_x, current_y)
                segments.append(QuadTo(qcp[0], qcp[1], ox + values[0], oy + values[1]))
                current_x, current_y = ox + values[0], oy + values[1]

            elif cmd_upper == 'A':
                end_x, end_y = ox + values[5], oy + values[6]
                segments.extend(arc_to_cubics(current_x, current_y, values[0], values[1],
                                              values[2], values[3], values[4], end_x, end_y))
                current_x, current_y = end_x, end_y

            prev_cp = cp
            prev_qcp = qcp
            first = False

    return segments

def _format_number(value: float) -> str:
    text = repr(float(value))
    if text.endswith('.0'):
        text = text[:-2]
    if text == '-0':
        text = '0'
    return text

def format_path_data(segments: list) -> str:
    parts = []
    for segment in segments:
        if isinstance(segment, ClosePath):
            parts.append('Z')
            continue

        if isinstance(segment, MoveTo):
            letter = 'M'
        elif isinstance(segment, LineTo):
            letter = 'L'
        elif isinstance(segment, CubicTo):
            letter = 'C'
        elif isinstance(segment, QuadTo):
            letter = 'Q'
        else:
            raise TypeError(f"Not a path segment: {segment!r}")

        coords = ' '.join(f"{_format_number(x)},{_format_number(y)}" for x, y in segment.points())
        parts.append(f"{letter}{coords}")

    return ' '.join(parts)
