#!/usr/bin/env python3
"""Validate configuration file."""

import argparse
import sys
from pathlib import Path

import yaml


INERTIA_KEYS = {"mass", "radius_of_gyration"}
GEOMETRY_KEYS = {
    "wheel_base", "cg_dist", "caster_len", "track_width",
    "rear_wheel_radius", "steer_wheel_radius",
}
GAIN_KEYS = {"kp_delta", "kd_delta", "kp_slip"}
INTEGRATORS = ["euler", "rk2", "rk4"]


def _check_keys(section: dict, name: str, expected: set) -> list:
    errors = []
    missing = expected - set(section)
    unknown = set(section) - expected
    if missing:
        errors.append(f"{name} is missing keys: {sorted(missing)}")
    if unknown:
        errors.append(f"{name} has unknown keys: {sorted(unknown)}")
    return errors


def validate_config(config: dict) -> list:
    """Validate configuration.

    Structural checks only. Physical bounds are enforced by the vehicle
    setters when the config is applied.

    Args:
        config: Configuration dictionary

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not isinstance(config, dict):
        return ["Configuration must be a mapping"]

    # Required sections
    required_sections = ["experiment", "vehicle", "controls", "simulation"]
    for section in required_sections:
        if section not in config:
            errors.append(f"Missing required section: {section}")

    # Validate experiment
    if "experiment" in config:
        if "name" not in config["experiment"]:
            errors.append("experiment.name is required")

    # Validate vehicle
    if "vehicle" in config:
        vehicle = config["vehicle"]
        if "inertia" in vehicle:
            errors.extend(_check_keys(vehicle["inertia"], "vehicle.inertia", INERTIA_KEYS))
        if "geometry" in vehicle:
            errors.extend(_check_keys(vehicle["geometry"], "vehicle.geometry", GEOMETRY_KEYS))
        if "gains" in vehicle:
            errors.extend(_check_keys(vehicle["gains"], "vehicle.gains", GAIN_KEYS))
        g = vehicle.get("g", 9.81)
        if g <= 0:
            errors.append(f"vehicle.g must be positive, got {g}")

    # Validate controls
    if "controls" in config:
        brake = config["controls"].get("brake", 0.0)
        if not 0.0 <= brake <= 1.0:
            errors.append(f"controls.brake must be in [0, 1], got {brake}")

    # Validate simulation
    if "simulation" in config:
        integrator = config["simulation"].get("integrator", "rk4")
        if integrator not in INTEGRATORS:
            errors.append(f"simulation.integrator must be one of {INTEGRATORS}, got '{integrator}'")

        dt = config["simulation"].get("dt", 0)
        if dt <= 0:
            errors.append(f"simulation.dt must be positive, got {dt}")

        duration = config["simulation"].get("duration", 0)
        if duration <= 0:
            errors.append(f"simulation.duration must be positive, got {duration}")

    return errors


def main():
    parser = argparse.ArgumentParser(description="Validate configuration file")
    parser.add_argument(
        "config",
        type=Path,
        help="Path to configuration file",
    )

    args = parser.parse_args()

    if not args.config.exists():
        print(f"Error: Config file not found: {args.config}")
        sys.exit(1)

    with open(args.config) as f:
        config = yaml.safe_load(f)

    errors = validate_config(config)

    if errors:
        print("Configuration validation failed:")
        for error in errors:
            print(f"  - {error}")
        sys.exit(1)
    else:
        print("Configuration is valid")
        sys.exit(0)


if __name__ == "__main__":
    main()
