import operator

import numpy as np
from loguru import logger

from .arena import PositionArena
from .state import FormationRequest, InvalidRequestError, TelemetryRecord, TelemetrySnapshot
from ..planner.registry import plan_request


OFFSCREEN_SENTINEL = np.array([200.0, -100.0, 200.0])
LERP_ALPHA = 0.015
TELEMETRY_PRECISION = 2
POV_OFFSET = (0.0, 3.0, -12.0)


def advance(current: np.ndarray, target: np.ndarray, alpha: float = LERP_ALPHA) -> np.ndarray:
    """One smoothing step toward target. Returns a new array; inputs are untouched."""
    return current + (target - current) * alpha


def project_telemetry(current: np.ndarray, active: np.ndarray, precision: int = TELEMETRY_PRECISION, ids=None):
    if ids is None:
        ids = range(len(current))
    # + 0.0 turns -0.0 into 0.0 after rounding
    rounded = np.round(current, precision) + 0.0
    return [TelemetryRecord(id=int(i), position=rounded[k], active=bool(active[k])) for k, i in enumerate(ids)]


def _as_index(value):
    try:
        return operator.index(value)
    except TypeError:
        return None


class SwarmIntegrator:
    def __init__(
        self,
        capacity: int = 1000,
        alpha: float = LERP_ALPHA,
        dt: float = 1.0 / 60.0,
        pov_offset=POV_OFFSET,
        precision: int = TELEMETRY_PRECISION,
    ):
        self.arena = PositionArena(capacity)
        self.alpha = alpha
        self.dt = dt
        self.pov_offset = np.asarray(pov_offset, dtype=float)
        self.precision = precision
        self.request: FormationRequest | None = None
        self.pov_index = None
        self.marker = None
        self.t = 0.0
        self.frame = 0

    @property
    def capacity(self) -> int:
        return self.arena.capacity

    @property
    def count(self) -> int:
        return self.request.count if self.request is not None else 0

    @property
    def size(self) -> int:
        """Live slots, including agents still flying away after a shrink."""
        return self.arena.size

    def apply(self, request: FormationRequest) -> bool:
        """
        Recompute targets for a new request. Returns False when the request is
        unchanged. Raises InvalidRequestError before touching any state.
        """
        if request == self.request:
            return False
        if request.count < 0:
            raise InvalidRequestError(f"count must not be negative, got {request.count}")
        if request.count > self.capacity:
            raise InvalidRequestError(f"count {request.count} exceeds capacity {self.capacity}")
        targets = plan_request(request)

        prev = self.count
        new = request.count
        arena = self.arena
        arena.resize(max(new, prev))
        arena.target[:new] = targets
        arena.active[:new] = True
        if new < prev:
            arena.target[new:prev] = OFFSCREEN_SENTINEL
            arena.active[new:prev] = False
        arena.seed(arena.unseeded(), OFFSCREEN_SENTINEL)

        self.request = request
        logger.debug(
            f"Formation recomputed: {request.kind.value} x{new} (previous {prev}, live slots {arena.size})"
        )
        return True

    def step_positions(self) -> np.ndarray:
        """Positions after one tick, without committing them."""
        arena = self.arena
        nxt = advance(arena.live_current(), arena.live_target(), self.alpha)
        stale = ~arena.live_seeded()
        nxt[stale] = arena.live_current()[stale]
        return nxt

    def tick(self) -> TelemetrySnapshot:
        """Advance one frame and return that frame's telemetry."""
        if self.arena.size:
            self.arena.current[:self.arena.size] = self.step_positions()
        self.frame += 1
        self.t += self.dt
        return self.telemetry()

    def telemetry(self) -> TelemetrySnapshot:
        arena = self.arena
        ids = np.flatnonzero(arena.live_seeded())
        records = project_telemetry(arena.current[ids], arena.active[ids], self.precision, ids=ids)
        return TelemetrySnapshot(t=self.t, frame=self.frame, records=records)

    def _in_range(self, index, limit):
        i = _as_index(index)
        if i is None or i < 0 or i >= limit:
            return None
        return i

    def position_of(self, index):
        i = self._in_range(index, self.count)
        if i is None:
            return None
        return self.arena.current[i].copy()

    def target_of(self, index):
        i = self._in_range(index, self.size)
        if i is None:
            return None
        return self.arena.target[i].copy()

    def record_of(self, index):
        i = self._in_range(index, self.size)
        if i is None or not self.arena.seeded[i]:
            return None
        return project_telemetry(self.arena.current[i:i + 1], self.arena.active[i:i + 1], self.precision, ids=[i])[0]

    def retiring(self) -> np.ndarray:
        return np.flatnonzero(~self.arena.live_active())

    def pov_anchor(self):
        """Camera anchor for the point-of-view agent, or None."""
        if self.pov_index is None:
            return None
        pos = self.position_of(self.pov_index)
        if pos is None:
            return None
        return pos + self.pov_offset

    def set_marker(self, point):
        marker = np.asarray(point, dtype=float)
        if marker.shape != (3,):
            raise InvalidRequestError(f"marker must be a 3D point, got shape {marker.shape}")
        self.marker = marker

    def clear_marker(self):
        self.marker = None
