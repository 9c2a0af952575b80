import numpy as np

from .base import Formation


AXES = {"x": 0, "y": 1, "z": 2}


class LineFormation(Formation):
    """Single file along one axis, offset (i - count/2) * spacing."""

    def __init__(self, axis: str):
        if axis not in AXES:
            raise ValueError(f"axis must be one of {sorted(AXES)}, got {axis!r}")
        self.axis = axis

    def positions(self, count: int) -> np.ndarray:
        out = np.zeros((count, 3))
        out[:, 1] = self.height
        out[:, AXES[self.axis]] = (np.arange(count) - count / 2) * self.spacing
        return out


class DeltaFormation(Formation):
    """
    Wedge squadrons: indices are chunked into groups of `group_size`, each
    group forms a chevron pointing toward +z, and successive groups trail
    one spacing further back.
    """

    def __init__(self, group_size: int = 25):
        self.group_size = max(1, int(group_size))

    def positions(self, count: int) -> np.ndarray:
        s = self.spacing
        g = self.group_size
        idx = np.arange(count)
        group_index = idx // g
        in_group = idx % g
        half = g // 2
        direction = np.where(in_group < half, -1, 1)
        dx = np.abs(in_group - half)
        out = np.empty((count, 3))
        out[:, 0] = dx * s * direction
        out[:, 1] = self.height
        out[:, 2] = -dx * s - group_index * s
        return out
