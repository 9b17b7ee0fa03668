# Vehicle construction from configuration

import logging
from typing import Any, Dict, Tuple

from ..integration import Simulator, make_integrator
from .params import VehicleParameters
from .racer import RollerRacer

logger = logging.getLogger(__name__)


def make_vehicle(config: Dict[str, Any]) -> RollerRacer:
    """Build a configured roller racer.

    Sections that are missing keep the defaults. The brake command is
    applied after the inertia, since setting the inertia releases the brake.

    Args:
        config: Full configuration dict (vehicle and controls sections are read)

    Returns:
        RollerRacer ready to simulate

    Raises:
        ValueError: If any vehicle parameter group is rejected
    """
    vehicle_cfg = config.get("vehicle", {})
    controls_cfg = config.get("controls", {})

    params = VehicleParameters(
        g=vehicle_cfg.get("g", 9.81),
        mu_s=vehicle_cfg.get("mu_s", 0.9),
    )
    racer = RollerRacer(params)

    errors = []
    if "inertia" in vehicle_cfg:
        _, violations = racer.set_inertia(**vehicle_cfg["inertia"])
        errors.extend(violations)
    if "geometry" in vehicle_cfg:
        _, violations = racer.set_geometry(**vehicle_cfg["geometry"])
        errors.extend(violations)
    if "gains" in vehicle_cfg:
        _, violations = racer.set_gains(**vehicle_cfg["gains"])
        errors.extend(violations)

    if errors:
        raise ValueError(f"Invalid vehicle configuration: {errors}")

    racer.set_steer_setpoint(controls_cfg.get("steer_setpoint", 0.0))
    racer.set_brake_command(controls_cfg.get("brake", 0.0))
    racer.set_initial_speed(controls_cfg.get("initial_speed", 0.0))

    logger.info(f"Vehicle parameters: {racer.params.as_dict()}")
    return racer


def make_simulation(config: Dict[str, Any]) -> Tuple[RollerRacer, Simulator]:
    """Build a vehicle and the simulator that advances it."""
    racer = make_vehicle(config)
    sim_cfg = config.get("simulation", {})
    integrator = make_integrator(sim_cfg.get("integrator", "rk4"))
    return racer, racer.make_simulator(integrator)
