from abc import ABC, abstractmethod

import numpy as np


SPACING = 8.0
BASE_HEIGHT = 5.0


class Formation(ABC):
    """
    One layout variant. Maps agent indices 0..count-1 to target positions.
    Implementations must be pure: same count in, same array out.
    """

    spacing: float = SPACING
    height: float = BASE_HEIGHT

    @abstractmethod
    def positions(self, count: int) -> np.ndarray:
        """Return an array of shape (count, 3)."""
        ...

    def __call__(self, count: int) -> np.ndarray:
        if count <= 0:
            return np.zeros((0, 3))
        return self.positions(count)
