import numpy as np
from .integrator import SwarmIntegrator


def target_distances(sim: SwarmIntegrator, include_retiring: bool = False) -> np.ndarray:
    """
    Per-agent distance between current and target position.
    """
    n = sim.size if include_retiring else sim.count
    if n == 0:
        return np.zeros(0)
    cur = sim.arena.current[:n]
    tgt = sim.arena.target[:n]
    return np.linalg.norm(tgt - cur, axis=1)


def mean_target_distance(sim: SwarmIntegrator) -> float:
    d = target_distances(sim)
    return float(d.mean()) if len(d) else 0.0


def max_target_distance(sim: SwarmIntegrator) -> float:
    d = target_distances(sim)
    return float(d.max()) if len(d) else 0.0


def settled_fraction(sim: SwarmIntegrator, tol: float = 0.5) -> float:
    """
    Share of active agents within `tol` of their target.
    """
    d = target_distances(sim)
    if len(d) == 0:
        return 1.0
    return float((d <= tol).mean())


def bounding_extent(positions: np.ndarray) -> np.ndarray:
    """
    Axis-aligned size (dx, dy, dz) of a set of positions.
    """
    positions = np.asarray(positions, dtype=float)
    if len(positions) == 0:
        return np.zeros(3)
    return positions.max(axis=0) - positions.min(axis=0)
