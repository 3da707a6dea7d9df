from __future__ import annotations
import re
from errors import ColorSyntaxError

hex_color_pattern = re.compile(r'^#([0-9a-fA-F]{3,8})$')

def _expand(digits: str) -> str:
    return ''.join(ch * 2 for ch in digits)

def parse_color(literal: str) -> tuple[int, int, int, int]:
    """Parse #RGB, #ARGB, #RRGGBB or #AARRGGBB into an (r, g, b, a) tuple."""
    if literal is None:
        raise ColorSyntaxError(literal)

    match = hex_color_pattern.match(literal.strip())
    if not match:
        raise ColorSyntaxError(literal)

    digits = match.group(1)
    if len(digits) == 3:
        digits = 'ff' + _expand(digits)
    elif len(digits) == 4:
        digits = _expand(digits)
    elif len(digits) == 6:
        digits = 'ff' + digits
    elif len(digits) != 8:
        raise ColorSyntaxError(literal)

    a = int(digits[0:2], 16)
    r = int(digits[2:4], 16)
    g = int(digits[4:6], 16)
    b = int(digits[6:8], 16)
    return (r, g, b, a)

