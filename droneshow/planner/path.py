"""
Path-sampled formation: trace a 2D outline described with SVG path syntax
and spread the swarm over its vertices.

Only straight segments produce vertices (M/L/H/V/Z, absolute and relative).
Curve commands are accepted so real-world outlines parse, but they only move
the pen to their end point.
"""
import re

import numpy as np

from ..core.state import InvalidRequestError
from .base import Formation


PATH_SCALE = 0.15

# stepped diamond, 100 units from centre to tip
DEFAULT_OUTLINE = (
    "M 0 -100 "
    + "h 10 v 10 " * 10
    + "h -10 v 10 " * 10
    + "h -10 v -10 " * 10
    + "h 10 v -10 " * 10
).strip()

_COMMAND_ARITY = {
    "M": 2, "L": 2, "T": 2,
    "H": 1, "V": 1,
    "C": 6, "S": 4, "Q": 4,
    "A": 7,
    "Z": 0,
}
# index of the end point (x, y) inside one argument group of a curve command
_CURVE_END = {"C": 4, "S": 2, "Q": 2, "T": 0, "A": 5}

_TOKEN = re.compile(r"[MmLlHhVvZzCcSsQqTtAa]|[-+]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][-+]?\d+)?")
_SEPARATOR = re.compile(r"[\s,]*")


def _tokenize(description: str) -> list[tuple[str, list[float]]]:
    if not isinstance(description, str):
        raise InvalidRequestError(f"path description must be a string, got {type(description).__name__}")

    commands = []
    pos = 0
    for m in _TOKEN.finditer(description):
        if not _SEPARATOR.fullmatch(description, pos, m.start()):
            raise InvalidRequestError(f"unexpected characters in path at offset {pos}")
        pos = m.end()
        tok = m.group()
        if tok.isalpha():
            commands.append((tok, []))
        elif not commands:
            raise InvalidRequestError("path description must start with a command")
        else:
            commands[-1][1].append(float(tok))
    if not _SEPARATOR.fullmatch(description, pos):
        raise InvalidRequestError(f"unexpected characters in path at offset {pos}")
    return commands


def parse_path(description: str) -> np.ndarray:
    """
    Parse a path description into an ordered polyline of (x, z) vertices.

    Raises:
      InvalidRequestError: bad characters, wrong argument counts, or no vertices.
    """
    points = []
    x = z = 0.0
    start_x = start_z = 0.0

    for cmd, args in _tokenize(description):
        upper = cmd.upper()
        relative = cmd.islower()
        arity = _COMMAND_ARITY[upper]

        if arity == 0:
            if args:
                raise InvalidRequestError(f"'{cmd}' takes no arguments")
            x, z = start_x, start_z
            points.append((x, z))
            continue
        if not args or len(args) % arity:
            raise InvalidRequestError(f"'{cmd}' expects arguments in groups of {arity}, got {len(args)}")

        for g in range(0, len(args), arity):
            group = args[g:g + arity]
            if upper in ("M", "L"):
                nx, nz = group
                if relative:
                    nx, nz = x + nx, z + nz
                x, z = nx, nz
                # later pairs after a move are implicit line-tos
                if upper == "M" and g == 0:
                    start_x, start_z = x, z
                points.append((x, z))
            elif upper == "H":
                x = x + group[0] if relative else group[0]
                points.append((x, z))
            elif upper == "V":
                z = z + group[0] if relative else group[0]
                points.append((x, z))
            else:
                end = _CURVE_END[upper]
                nx, nz = group[end], group[end + 1]
                x, z = (x + nx, z + nz) if relative else (nx, nz)

    if not points:
        raise InvalidRequestError("path description produced no vertices")
    return np.asarray(points, dtype=float)


def resample_indices(total: int, count: int) -> np.ndarray:
    """
    Source indices for `count` agents over `total` polyline vertices.
    Downsampling uses a uniform stride; when there are not enough vertices the
    polyline is walked again from the start rather than interpolated.
    """
    if count <= 0 or total <= 0:
        return np.zeros(0, dtype=int)
    if total > count:
        step = total / count
        return np.floor(np.arange(count) * step).astype(int)
    return np.arange(count) % total


def sample_path(points: np.ndarray, count: int, scale: float = PATH_SCALE, height: float = 5.0) -> np.ndarray:
    idx = resample_indices(len(points), count)
    chosen = points[idx]
    out = np.empty((len(idx), 3))
    out[:, 0] = chosen[:, 0] * scale
    out[:, 1] = height
    out[:, 2] = chosen[:, 1] * scale
    return out


class PathFormation(Formation):
    def __init__(self, description: str | None = None, scale: float = PATH_SCALE):
        self.description = description or DEFAULT_OUTLINE
        self.scale = scale
        self._points = parse_path(self.description)

    @property
    def vertex_count(self) -> int:
        return len(self._points)

    def positions(self, count: int) -> np.ndarray:
        return sample_path(self._points, count, scale=self.scale, height=self.height)
