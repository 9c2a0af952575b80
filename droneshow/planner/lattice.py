import math

import numpy as np

from .base import Formation


def ceil_sqrt(n: int) -> int:
    k = math.isqrt(n)
    return k if k * k >= n else k + 1


def ceil_cbrt(n: int) -> int:
    # float cbrt can land a hair above an exact cube (27 ** (1/3) > 3)
    k = max(1, int(round(n ** (1.0 / 3.0))))
    while k ** 3 < n:
        k += 1
    while k > 1 and (k - 1) ** 3 >= n:
        k -= 1
    return k


class GridFormation(Formation):
    """Square-ish grid on the ground plane, centred on the origin."""

    def positions(self, count: int) -> np.ndarray:
        s = self.spacing
        cols = ceil_sqrt(count)
        rows = math.ceil(count / cols)
        idx = np.arange(count)
        col = idx % cols
        row = idx // cols
        out = np.empty((count, 3))
        out[:, 0] = col * s - (cols - 1) * s / 2
        out[:, 1] = self.height
        out[:, 2] = row * s - (rows - 1) * s / 2
        return out


class CubeFormation(Formation):
    """Stacked square layers; layer 0 sits on y=0 and the stack grows upward."""

    def positions(self, count: int) -> np.ndarray:
        s = self.spacing
        layer = ceil_cbrt(count)
        offset = s * (layer - 1) / 2
        idx = np.arange(count)
        out = np.empty((count, 3))
        out[:, 0] = (idx % layer) * s - offset
        out[:, 1] = (idx // (layer * layer)) * s
        out[:, 2] = ((idx // layer) % layer) * s - offset
        return out
