# Derived observables
# Read-only quantities computed from state and parameters, for monitoring.

import numpy as np
from typing import Dict, Tuple

from ..core.math_utils import normalize_angle, rotate_2d
from ..core import physics
from ..core.types import StateIndex
from .params import VehicleParameters


def speed(state: np.ndarray) -> float:
    return float(np.sqrt(state[StateIndex.X_DOT] ** 2 + state[StateIndex.Z_DOT] ** 2))


def kinetic_energy(state: np.ndarray, params: VehicleParameters) -> float:
    return physics.kinetic_energy(
        state[StateIndex.X_DOT],
        state[StateIndex.Z_DOT],
        state[StateIndex.PSI_DOT],
        params.inertia,
    )


def slip_rate_rear(state: np.ndarray, params: VehicleParameters) -> float:
    trig = physics.trig_terms(state[StateIndex.PSI], state[StateIndex.DELTA])
    return physics.rear_slip_rate(
        state[StateIndex.X_DOT],
        state[StateIndex.Z_DOT],
        state[StateIndex.PSI_DOT],
        trig,
        params.geometry.b,
    )


def slip_rate_front(state: np.ndarray, params: VehicleParameters) -> float:
    trig = physics.trig_terms(state[StateIndex.PSI], state[StateIndex.DELTA])
    return physics.front_slip_rate(
        state[StateIndex.X_DOT],
        state[StateIndex.Z_DOT],
        state[StateIndex.PSI_DOT],
        state[StateIndex.DELTA_DOT],
        trig,
        params.geometry.h,
        params.geometry.d,
    )


def axle_velocity(state: np.ndarray) -> float:
    trig = physics.trig_terms(state[StateIndex.PSI], state[StateIndex.DELTA])
    return physics.axle_velocity(state[StateIndex.X_DOT], state[StateIndex.Z_DOT], trig)


def brake_force(state: np.ndarray, params: VehicleParameters) -> float:
    """Brake force the evaluator would apply in this state."""
    return physics.brake_force(axle_velocity(state), params.brake)


def body_velocity(state: np.ndarray) -> Tuple[float, float]:
    """Center of mass velocity in the chassis frame.

    Returns:
        (longitudinal, lateral) in m/s. Longitudinal equals the axle velocity.
    """
    longitudinal, lateral = rotate_2d(
        state[StateIndex.X_DOT], state[StateIndex.Z_DOT], state[StateIndex.PSI]
    )
    return float(longitudinal), float(lateral)


def steer_angle(state: np.ndarray) -> float:
    return float(state[StateIndex.DELTA])


def heading(state: np.ndarray) -> float:
    """Heading as integrated, never wrapped."""
    return float(state[StateIndex.PSI])


def heading_wrapped(state: np.ndarray) -> float:
    return normalize_angle(state[StateIndex.PSI])


def position(state: np.ndarray) -> Tuple[float, float]:
    return float(state[StateIndex.X]), float(state[StateIndex.Z])


def wheel_angles(state: np.ndarray) -> Tuple[float, float, float]:
    """(left rear, right rear, front) wheel rotation angles."""
    return (
        float(state[StateIndex.THETA_L]),
        float(state[StateIndex.THETA_R]),
        float(state[StateIndex.THETA_F]),
    )


def snapshot(state: np.ndarray, params: VehicleParameters) -> Dict[str, float]:
    """All observables as a flat dict.

    Args:
        state: State array, shape (11,)
        params: Vehicle parameters

    Returns:
        Dict of observable name to value
    """
    x_g, z_g = position(state)
    theta_l, theta_r, theta_f = wheel_angles(state)
    v_long, v_lat = body_velocity(state)
    return {
        "x": x_g,
        "z": z_g,
        "heading": heading(state),
        "heading_wrapped": heading_wrapped(state),
        "yaw_rate": float(state[StateIndex.PSI_DOT]),
        "steer_angle": steer_angle(state),
        "steer_rate": float(state[StateIndex.DELTA_DOT]),
        "wheel_angle_l": theta_l,
        "wheel_angle_r": theta_r,
        "wheel_angle_f": theta_f,
        "speed": speed(state),
        "v_long": v_long,
        "v_lat": v_lat,
        "kinetic_energy": float(kinetic_energy(state, params)),
        "slip_rate_rear": float(slip_rate_rear(state, params)),
        "slip_rate_front": float(slip_rate_front(state, params)),
        "brake_force": brake_force(state, params),
    }
