"""Tests for convergence metrics and the JSON telemetry log."""

from __future__ import annotations

import json

import numpy as np
import pytest

from droneshow.core.integrator import SwarmIntegrator
from droneshow.core.metrics import (
    bounding_extent,
    max_target_distance,
    mean_target_distance,
    settled_fraction,
    target_distances,
)
from droneshow.core.state import FormationRequest
from droneshow.viz.logger import TelemetryLogger


@pytest.fixture
def sim():
    s = SwarmIntegrator(capacity=100)
    s.apply(FormationRequest.build(16, "grid"))
    return s


class TestMetrics:
    def test_distances_shrink_each_tick(self, sim):
        before = mean_target_distance(sim)
        sim.tick()
        assert mean_target_distance(sim) < before
        assert max_target_distance(sim) >= mean_target_distance(sim)

    def test_retiring_excluded_by_default(self, sim):
        sim.apply(FormationRequest.build(10, "grid"))
        assert len(target_distances(sim)) == 10
        assert len(target_distances(sim, include_retiring=True)) == 16

    def test_settled_fraction(self):
        fast = SwarmIntegrator(alpha=0.5)
        fast.apply(FormationRequest.build(9, "circle"))
        assert settled_fraction(fast) == 0.0
        for _ in range(40):
            fast.tick()
        assert settled_fraction(fast) == 1.0

    def test_empty_swarm(self):
        empty = SwarmIntegrator()
        assert mean_target_distance(empty) == 0.0
        assert max_target_distance(empty) == 0.0
        assert settled_fraction(empty) == 1.0

    def test_bounding_extent(self):
        pts = np.array([[0.0, 5.0, -8.0], [8.0, 5.0, 8.0]])
        assert np.allclose(bounding_extent(pts), [8.0, 0.0, 16.0])
        assert np.allclose(bounding_extent([]), 0.0)


class TestTelemetryLogger:
    def test_writes_json(self, sim, tmp_path):
        path = tmp_path / "logs" / "show.json"
        log = TelemetryLogger(path)
        sim.set_marker([1.0, 0.0, 2.0])
        sim.pov_index = 0
        for _ in range(3):
            log.log_snapshot(sim.tick(), request=sim.request, marker=sim.marker, pov=sim.pov_anchor())
        log.flush()

        data = json.loads(path.read_text())
        assert [e["frame"] for e in data] == [1, 2, 3]
        assert data[0]["formation"] == {"kind": "grid", "count": 16, "group_size": 25}
        assert data[0]["marker"] == [1.0, 0.0, 2.0]
        assert len(data[0]["pov_anchor"]) == 3
        assert data[-1]["agents"][5]["id"] == 5
        assert set(data[-1]["agents"][5]["position"]) == {"x", "y", "z"}

    def test_every_n_frames(self, sim, tmp_path):
        log = TelemetryLogger(tmp_path / "show.json", every=2)
        for _ in range(6):
            log.log_snapshot(sim.tick())
        assert [e["frame"] for e in log.records] == [2, 4, 6]
