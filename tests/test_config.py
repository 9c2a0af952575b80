"""Tests for YAML config loading and schedule resolution."""

from __future__ import annotations

import pathlib

import numpy as np
import pytest

from droneshow.config import (
    DEFAULT_CONFIG,
    build_schedule,
    deep_update,
    load_config,
    make_integrator,
    make_request,
)
from droneshow.core.state import FormationKind, InvalidRequestError


CONFIG_DIR = pathlib.Path(__file__).resolve().parents[1] / "configs"


class TestLoadConfig:
    def test_none_gives_defaults(self):
        assert load_config(None) is DEFAULT_CONFIG

    def test_empty_file_gives_defaults(self, tmp_path):
        p = tmp_path / "empty.yaml"
        p.write_text("")
        assert load_config(p) is DEFAULT_CONFIG

    def test_override_merges(self, tmp_path):
        p = tmp_path / "c.yaml"
        p.write_text("formation:\n  kind: sphere\n")
        cfg = load_config(p)
        assert cfg["formation"]["kind"] == "sphere"
        assert cfg["formation"]["count"] == DEFAULT_CONFIG["formation"]["count"]

    def test_inherits(self, tmp_path):
        (tmp_path / "base.yaml").write_text("steps: 42\nformation:\n  count: 7\n")
        child = tmp_path / "child.yaml"
        child.write_text("inherits: base.yaml\nformation:\n  kind: cube\n")
        cfg = load_config(child)
        assert cfg["steps"] == 42
        assert cfg["formation"]["count"] == 7
        assert cfg["formation"]["kind"] == "cube"
        assert "inherits" not in cfg

    def test_nested_inherits(self, tmp_path):
        (tmp_path / "a.yaml").write_text("steps: 1\ndt: 0.5\n")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "b.yaml").write_text("inherits: ../a.yaml\nsteps: 2\n")
        c = tmp_path / "sub" / "c.yaml"
        c.write_text("inherits: b.yaml\nformation:\n  count: 3\n")
        cfg = load_config(str(c))
        assert (cfg["steps"], cfg["dt"], cfg["formation"]["count"]) == (2, 0.5, 3)

    def test_inherits_loop_rejected(self, tmp_path):
        (tmp_path / "a.yaml").write_text("inherits: b.yaml\n")
        (tmp_path / "b.yaml").write_text("inherits: a.yaml\n")
        with pytest.raises(ValueError, match="loop"):
            load_config(tmp_path / "a.yaml")

    def test_non_mapping_rejected(self, tmp_path):
        p = tmp_path / "list.yaml"
        p.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            load_config(p)

    def test_shipped_configs_load(self):
        for name in ("default.yaml", "logo.yaml"):
            cfg = load_config(CONFIG_DIR / name)
            make_request(cfg["formation"])
            build_schedule(cfg)

    def test_deep_update_does_not_mutate(self):
        base = {"a": {"b": 1, "c": 2}}
        out = deep_update(base, {"a": {"b": 5}})
        assert out == {"a": {"b": 5, "c": 2}}
        assert base == {"a": {"b": 1, "c": 2}}


class TestBuilders:
    def test_make_request_clamps_to_capacity(self):
        req = make_request({"count": 5000, "kind": "grid"}, max_count=1000)
        assert req.count == 1000

    def test_make_request_rejects_unknown_kind(self):
        with pytest.raises(InvalidRequestError):
            make_request({"kind": "blob"})

    def test_make_integrator(self):
        cfg = deep_update(DEFAULT_CONFIG, {"swarm": {"capacity": 50, "pov_index": 3, "marker": [1, 2, 3]}})
        sim = make_integrator(cfg)
        assert sim.capacity == 50
        assert sim.pov_index == 3
        assert np.array_equal(sim.marker, [1.0, 2.0, 3.0])

    def test_schedule_is_cumulative(self):
        cfg = deep_update(DEFAULT_CONFIG, {
            "formation": {"count": 100, "kind": "grid"},
            "schedule": [
                {"step": 200, "count": 40},
                {"step": 100, "kind": "delta", "group_size": 10},
            ],
        })
        schedule = build_schedule(cfg)
        assert sorted(schedule) == [100, 200]
        assert schedule[100].kind is FormationKind.DELTA
        assert schedule[100].count == 100
        assert schedule[200].kind is FormationKind.DELTA
        assert schedule[200].count == 40
        assert schedule[200].group_size == 10

    def test_logo_schedule_keeps_path(self):
        cfg = load_config(CONFIG_DIR / "logo.yaml")
        schedule = build_schedule(cfg)
        req = schedule[450]
        assert req.kind is FormationKind.PATH_SAMPLED
        assert req.count == 30
        assert req.path.startswith("M 0 0")
