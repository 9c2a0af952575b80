import argparse
import pathlib
import sys

# Ensure repository root is on PYTHONPATH when running without installation.
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from droneshow.config import build_schedule, load_config, make_integrator, make_request
from droneshow.core.metrics import mean_target_distance, settled_fraction
from droneshow.core.state import InvalidRequestError
from droneshow.viz.logger import TelemetryLogger
from droneshow.viz.render_2d import SwarmRenderer2D


def main():
    parser = argparse.ArgumentParser(description="Animate a drone formation and record telemetry.")
    parser.add_argument("--config", type=pathlib.Path, help="Path to YAML config.")
    parser.add_argument("--count", type=int, help="Override drone count.")
    parser.add_argument("--formation", help="Override formation kind (grid, cube, circle, delta, ...).")
    parser.add_argument("--group-size", type=int, dest="group_size", help="Override delta group size.")
    parser.add_argument("--steps", type=int, help="Override total frames.")
    parser.add_argument("--render-every", type=int, dest="render_every", help="Render every N frames.")
    parser.add_argument("--pov", type=int, help="Point-of-view drone index.")
    parser.add_argument("--no-render", action="store_true", help="Disable live rendering (headless).")
    parser.add_argument("--log", type=pathlib.Path, help="Optional path to write JSON telemetry log.")
    args = parser.parse_args()

    cfg = load_config(args.config)
    formation_cfg = dict(cfg["formation"])
    if args.count is not None:
        formation_cfg["count"] = args.count
    if args.formation is not None:
        formation_cfg["kind"] = args.formation
    if args.group_size is not None:
        formation_cfg["group_size"] = args.group_size
    cfg = dict(cfg, formation=formation_cfg)
    if args.steps is not None:
        cfg["steps"] = args.steps
    if args.render_every is not None:
        cfg["render_every"] = args.render_every

    sim = make_integrator(cfg)
    if args.pov is not None:
        sim.pov_index = args.pov
    try:
        first = make_request(formation_cfg, max_count=sim.capacity)
        schedule = build_schedule(cfg, max_count=sim.capacity)
    except InvalidRequestError as e:
        parser.error(str(e))
    sim.apply(first)

    renderer = None if args.no_render else SwarmRenderer2D()
    logger = TelemetryLogger(args.log, every=cfg["log"].get("every", 1)) if args.log else None

    for step in range(cfg["steps"]):
        if step in schedule and sim.apply(schedule[step]):
            req = schedule[step]
            print(f"[{step}] formation -> {req.kind.value} x{req.count}")
        snapshot = sim.tick()
        if renderer and step % cfg["render_every"] == 0:
            renderer.render(snapshot, marker=sim.marker, pov=sim.pov_anchor(), title=sim.request.kind.value)
        if logger:
            logger.log_snapshot(snapshot, request=sim.request, marker=sim.marker, pov=sim.pov_anchor())

    print(
        f"Finished {cfg['steps']} frames: mean distance to target {mean_target_distance(sim):.2f}, "
        f"settled {settled_fraction(sim):.0%}"
    )
    if logger:
        logger.flush()


if __name__ == "__main__":
    main()
