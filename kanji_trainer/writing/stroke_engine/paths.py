"""
Key point extraction for reference stroke paths.

Reference data arrives either as an SVG path string (hanzi-writer-data
outlines, e.g. "M 263 743 Q 310 723 361 711 L 497 690 Z") or as a list of
[x, y] pairs (a stroke median). Both end up as an ordered list of (x, y)
tuples in the reference coordinate space: a 1024 unit square with y pointing
down, like the canvas. Sources that store y-up data flip it before handing
paths over.
"""
import re
from typing import List, Sequence, Tuple, Union

ReferenceStrokePath = Union[str, Sequence[Sequence[float]]]

_TOKEN_RE = re.compile(r"[MmLlHhVvCcSsQqTtAaZz]|[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

# Number of arguments each SVG path command consumes
_ARG_COUNTS = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "S": 4, "Q": 4, "T": 2, "A": 7, "Z": 0}


def _parse_svg_path(d: str) -> List[Tuple[float, float]]:
    tokens = _TOKEN_RE.findall(d)
    points: List[Tuple[float, float]] = []
    cx, cy = 0.0, 0.0
    sx, sy = 0.0, 0.0  # Subpath start, for Z
    command = None
    i = 0

    while i < len(tokens):
        tok = tokens[i]
        if tok.isalpha():
            command = tok
            i += 1
            if command in "Zz":
                cx, cy = sx, sy
                continue
        elif command is None or command in "Zz":
            # Stray numbers with no command to consume them
            i += 1
            continue

        upper = command.upper()
        relative = command != upper
        n = _ARG_COUNTS[upper]
        args = tokens[i:i + n]
        if len(args) < n or any(a.isalpha() for a in args):
            # Truncated segment; keep what was parsed so far
            break
        vals = [float(a) for a in args]
        i += n

        if upper == "H":
            nx, ny = (cx + vals[0] if relative else vals[0]), cy
        elif upper == "V":
            nx, ny = cx, (cy + vals[0] if relative else vals[0])
        else:
            # The segment end point is always the last pair of arguments
            nx, ny = vals[-2], vals[-1]
            if relative:
                nx, ny = cx + nx, cy + ny

        cx, cy = nx, ny
        points.append((cx, cy))

        if upper == "M":
            sx, sy = cx, cy
            # Extra pairs after a moveto are implicit linetos
            command = "l" if relative else "L"

    return points


def extract_key_points(path: ReferenceStrokePath) -> List[Tuple[float, float]]:
    """
    Ordered key coordinates of a reference path in its native space.
    Unparseable input yields an empty list rather than an error.
    """
    if isinstance(path, str):
        return _parse_svg_path(path)

    points: List[Tuple[float, float]] = []
    try:
        for p in path:
            points.append((float(p[0]), float(p[1])))
    except (TypeError, ValueError, IndexError):
        return []
    return points
