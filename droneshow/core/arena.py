import numpy as np

from .state import InvalidRequestError


class PositionArena:
    """
    Fixed-capacity per-agent storage indexed by agent id.

    Only slots below `size` are live. `high_water` remembers how far the arena
    has ever been used; it never shrinks.
    """

    def __init__(self, capacity: int = 1000):
        if capacity < 1:
            raise InvalidRequestError(f"arena capacity must be positive, got {capacity}")
        self.capacity = int(capacity)
        self.current = np.zeros((self.capacity, 3))
        self.target = np.zeros((self.capacity, 3))
        self.active = np.zeros(self.capacity, dtype=bool)
        self.seeded = np.zeros(self.capacity, dtype=bool)
        self.size = 0
        self.high_water = 0

    def resize(self, size: int):
        if size < 0 or size > self.capacity:
            raise InvalidRequestError(f"size {size} outside arena capacity {self.capacity}")
        if size < self.size:
            # forgotten slots start over when the arena grows back into them
            self.seeded[size:self.size] = False
            self.active[size:self.size] = False
        self.size = size
        self.high_water = max(self.high_water, size)

    def seed(self, indices, position):
        self.current[indices] = position
        self.seeded[indices] = True

    def unseeded(self) -> np.ndarray:
        return np.flatnonzero(~self.seeded[:self.size])

    def live_current(self) -> np.ndarray:
        return self.current[:self.size]

    def live_target(self) -> np.ndarray:
        return self.target[:self.size]

    def live_active(self) -> np.ndarray:
        return self.active[:self.size]

    def live_seeded(self) -> np.ndarray:
        return self.seeded[:self.size]
