#!/usr/bin/env python3
"""Simulate the roller racer and record telemetry.

Usage:
    # Default configuration
    python scripts/simulate.py --config configs/default.yaml

    # Override controls and save telemetry
    python scripts/simulate.py --steer 0.3 --brake 0.5 --output telemetry.csv
"""

import argparse
import sys
from pathlib import Path

import yaml

sys.path.insert(0, str(Path(__file__).parent.parent))

from roller_racer.analysis import RunLogger, compute_run_metrics, check_run_health
from roller_racer.telemetry import TelemetryRecorder
from roller_racer.vehicle import make_simulation
from scripts.validate_config import validate_config


def load_config(config_path: Path) -> dict:
    with open(config_path) as f:
        return yaml.safe_load(f)


def main():
    parser = argparse.ArgumentParser(description="Simulate the roller racer")
    parser.add_argument("--config", type=Path, default=Path("configs/default.yaml"))
    parser.add_argument("--duration", type=float, default=None, help="Override simulated time (s)")
    parser.add_argument("--dt", type=float, default=None, help="Override step size (s)")
    parser.add_argument("--steer", type=float, default=None, help="Override steer setpoint (rad)")
    parser.add_argument("--brake", type=float, default=None, help="Override brake command [0, 1]")
    parser.add_argument("--output", type=Path, default=None, help="Save telemetry to CSV")
    parser.add_argument("--run-dir", type=Path, default=Path("runs"))

    args = parser.parse_args()

    config = load_config(args.config)
    sim_cfg = config.setdefault("simulation", {})
    controls_cfg = config.setdefault("controls", {})
    if args.duration is not None:
        sim_cfg["duration"] = args.duration
    if args.dt is not None:
        sim_cfg["dt"] = args.dt
    if args.steer is not None:
        controls_cfg["steer_setpoint"] = args.steer
    if args.brake is not None:
        controls_cfg["brake"] = args.brake

    errors = validate_config(config)
    if errors:
        print("Configuration validation failed:")
        for error in errors:
            print(f"  - {error}")
        sys.exit(1)

    log_cfg = config.get("logging", {})
    run = RunLogger(
        run_name=config["experiment"]["name"],
        base_dir=args.run_dir,
        level=log_cfg.get("level", "INFO"),
    )
    run.save_config(config)

    try:
        racer, simulator = make_simulation(config)
    except ValueError as err:
        run.logger.error(str(err))
        sys.exit(1)

    recorder = TelemetryRecorder()
    recorder.on_step(simulator.time, racer)
    log_frequency = log_cfg.get("log_frequency", 100)

    def on_step(sim):
        recorder.on_step(sim.time, racer)
        if sim.num_steps % log_frequency == 0:
            run.log_metrics(sim.num_steps, {
                "t": sim.time,
                "speed": racer.speed,
                "heading": racer.heading,
                "slip_rate_rear": racer.slip_rate_rear,
                "slip_rate_front": racer.slip_rate_front,
            })

    simulator.run(sim_cfg["duration"], sim_cfg["dt"], callback=on_step)
    run.metrics.save_summary()

    metrics = compute_run_metrics(recorder.to_arrays())
    run.info(f"Run metrics: {metrics}")
    for warning in check_run_health(metrics):
        run.warning(warning)

    recorder.print_summary()
    print(f"Final position: ({racer.x_g:.3f}, {racer.z_g:.3f}) m, heading {racer.heading:.3f} rad")

    if args.output:
        recorder.save(args.output)
        print(f"Telemetry saved to {args.output}")


if __name__ == "__main__":
    main()
