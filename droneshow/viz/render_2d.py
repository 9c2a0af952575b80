import matplotlib.pyplot as plt
import numpy as np
from ..core.state import TelemetrySnapshot


STATUS_COLORS = {True: "blue", False: "red"}


class SwarmRenderer2D:
    """Top-down (x/z) view of a telemetry snapshot."""

    def __init__(self, bounds=(-120, 120, -120, 120)):
        self.bounds = bounds
        self.fig, self.ax = plt.subplots(figsize=(7, 7))
        backend = plt.get_backend().lower()
        self._interactive = backend not in {"agg", "pdf", "svg"}
        if self._interactive:
            plt.ion()
        self.status_scatters = {}
        self.marker_scat = None
        self.pov_scat = None
        self.ax.set_xlim(bounds[0], bounds[1])
        self.ax.set_ylim(bounds[2], bounds[3])
        self.ax.set_aspect("equal")
        self.ax.set_xlabel("x")
        self.ax.set_ylabel("z")

    def _scatter(self, key, points, **kwargs):
        scat = getattr(self, key) if isinstance(key, str) else self.status_scatters.get(key)
        if scat is None:
            scat = self.ax.scatter(points[:, 0], points[:, 1], **kwargs)
        else:
            scat.set_offsets(points)
        return scat

    def render(self, snapshot: TelemetrySnapshot, marker=None, pov=None, title=None):
        by_status = {True: [], False: []}
        for rec in snapshot.records:
            by_status[rec.active].append(rec.position[[0, 2]])
        for active, pos_list in by_status.items():
            points = np.array(pos_list).reshape(-1, 2)
            self.status_scatters[active] = self._scatter(
                active,
                points,
                c=STATUS_COLORS[active],
                s=12,
                zorder=4 if active else 3,
                alpha=0.8,
                label="active" if active else "retiring",
            )
        if marker is not None:
            self.marker_scat = self._scatter(
                "marker_scat", np.array([[marker[0], marker[2]]]), c="red", s=60, marker="x", zorder=6
            )
        if pov is not None:
            self.pov_scat = self._scatter(
                "pov_scat", np.array([[pov[0], pov[2]]]), c="orange", s=40, marker="^", zorder=5
            )
        label = f"frame={snapshot.frame} t={snapshot.t:.2f}"
        if title:
            label = f"{title} | {label}"
        self.ax.set_title(label)
        if self._interactive:
            plt.pause(0.001)
