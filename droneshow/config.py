import pathlib

import yaml

from .core.integrator import LERP_ALPHA, POV_OFFSET, SwarmIntegrator
from .core.state import FormationRequest


DEFAULT_CONFIG = {
    "dt": 1.0 / 60.0,
    "steps": 600,
    "render_every": 5,
    "swarm": {
        "capacity": 1000,
        "alpha": LERP_ALPHA,
        "pov_offset": list(POV_OFFSET),
        "pov_index": None,
        "marker": None,
    },
    "formation": {
        "count": 100,
        "kind": "grid",
        "group_size": 25,
        "path": None,
    },
    # list of {"step": int, <any formation key>: value}
    "schedule": [],
    "log": {"every": 1},
}


def deep_update(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = deep_update(out[k], v)
        else:
            out[k] = v
    return out


def load_config(path: str | pathlib.Path | None, _seen: frozenset = frozenset()) -> dict:
    """
    Read a YAML config and merge it over DEFAULT_CONFIG. An `inherits:` key
    names a base file, resolved relative to the including file; chains may
    nest but must not loop.
    """
    if path is None:
        return DEFAULT_CONFIG
    path = pathlib.Path(path).resolve()
    if path in _seen:
        raise ValueError(f"config inheritance loop at {path}")
    cfg = yaml.safe_load(path.read_text())
    if cfg is None:
        return DEFAULT_CONFIG
    if not isinstance(cfg, dict):
        raise ValueError(f"config {path} must be a mapping, got {type(cfg).__name__}")

    parent = cfg.pop("inherits", None)
    base = DEFAULT_CONFIG if parent is None else load_config(path.parent / parent, _seen | {path})
    return deep_update(base, cfg)


def make_request(formation_cfg: dict, max_count: int | None = None) -> FormationRequest:
    return FormationRequest.build(
        count=formation_cfg.get("count", 100),
        kind=formation_cfg.get("kind", "grid"),
        group_size=formation_cfg.get("group_size", 25),
        path=formation_cfg.get("path"),
        max_count=max_count,
    )


def make_integrator(cfg: dict) -> SwarmIntegrator:
    swarm_cfg = cfg.get("swarm", {})
    sim = SwarmIntegrator(
        capacity=swarm_cfg.get("capacity", 1000),
        alpha=swarm_cfg.get("alpha", LERP_ALPHA),
        dt=cfg.get("dt", 1.0 / 60.0),
        pov_offset=swarm_cfg.get("pov_offset", POV_OFFSET),
    )
    sim.pov_index = swarm_cfg.get("pov_index")
    if swarm_cfg.get("marker") is not None:
        sim.set_marker(swarm_cfg["marker"])
    return sim


def build_schedule(cfg: dict, max_count: int | None = None) -> dict[int, FormationRequest]:
    """
    Resolve the formation schedule into {step: request}. Each entry overrides
    the formation in force before it, so entries only need the keys that change.
    All entries are validated up front.
    """
    formation = dict(cfg.get("formation", {}))
    schedule = {}
    for entry in sorted(cfg.get("schedule", []), key=lambda e: e.get("step", 0)):
        formation = deep_update(formation, {k: v for k, v in entry.items() if k != "step"})
        schedule[int(entry.get("step", 0))] = make_request(formation, max_count=max_count)
    return schedule
