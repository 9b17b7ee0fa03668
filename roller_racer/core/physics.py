# Physics calculations
# FORBIDDEN: logging, any I/O
# Force laws and kinematic relations shared by the dynamics evaluator
# and the derived observables. Both sides must call these functions so
# that their results agree bit for bit.

import numpy as np
from typing import NamedTuple, Union

from .types import BrakeSettings, ControllerGains, Inertia


class TrigTerms(NamedTuple):
    """Trig functions of heading and steer angle, computed once per evaluation."""
    cos_psi: float
    sin_psi: float
    cos_delta: float
    sin_delta: float
    cos_psi_delta: float
    sin_psi_delta: float


def trig_terms(psi: float, delta: float) -> TrigTerms:
    return TrigTerms(
        cos_psi=np.cos(psi),
        sin_psi=np.sin(psi),
        cos_delta=np.cos(delta),
        sin_delta=np.sin(delta),
        cos_psi_delta=np.cos(psi + delta),
        sin_psi_delta=np.sin(psi + delta),
    )


def steer_acceleration(
    delta: float,
    delta_dot: float,
    delta_des: float,
    gains: ControllerGains,
) -> float:
    """PD servo driving the steer angle toward its setpoint.

    deltaDDot = -kD * deltaDot - kP * (delta - deltaDes)

    Args:
        delta: Steer angle in radians
        delta_dot: Steer rate in rad/s
        delta_des: Desired steer angle in radians
        gains: Controller gains

    Returns:
        Steer acceleration in rad/s²
    """
    return -gains.kd_delta * delta_dot - gains.kp_delta * (delta - delta_des)


def rear_slip_rate(
    x_dot: float,
    z_dot: float,
    psi_dot: float,
    trig: TrigTerms,
    b: float,
) -> float:
    """Lateral velocity of the rear axle contact line."""
    return x_dot * trig.sin_psi + z_dot * trig.cos_psi + b * psi_dot


def front_slip_rate(
    x_dot: float,
    z_dot: float,
    psi_dot: float,
    delta_dot: float,
    trig: TrigTerms,
    h: float,
    d: float,
) -> float:
    """Lateral velocity of the steered wheel contact point."""
    return (
        x_dot * trig.sin_psi_delta
        + z_dot * trig.cos_psi_delta
        - h * psi_dot * trig.cos_delta
        + (psi_dot + delta_dot) * d
    )


def axle_velocity(x_dot: float, z_dot: float, trig: TrigTerms) -> float:
    """Velocity along the chassis axis."""
    return x_dot * trig.cos_psi - z_dot * trig.sin_psi


def brake_force(axle_vel: float, brake: BrakeSettings) -> float:
    """Braking force along the chassis axis.

    Above the velocity threshold the force is Coulomb-like with constant
    magnitude. Below it the force ramps linearly through zero so that
    there is no jump at standstill.

    Args:
        axle_vel: Velocity along the chassis axis in m/s
        brake: Actuator limits and current command

    Returns:
        Brake force in Newtons, opposite to axle_vel
    """
    if abs(axle_vel) > brake.vel_threshold:
        force = -np.sign(axle_vel) * brake.f_max
    else:
        force = -brake.f_max * axle_vel / brake.vel_threshold
    return float(force * brake.signal)


def kinetic_energy(
    x_dot: float,
    z_dot: float,
    psi_dot: float,
    inertia: Inertia,
) -> float:
    """Translational plus yaw kinetic energy. Wheel inertia is neglected."""
    translational = 0.5 * inertia.m * (x_dot * x_dot + z_dot * z_dot)
    rotational = 0.5 * inertia.ig * psi_dot * psi_dot
    return translational + rotational


def steer_damping_ratio(gains: ControllerGains) -> float:
    """Damping ratio of the steering servo, kD / (2 sqrt(kP))."""
    if gains.kp_delta <= 0.0:
        return float("inf")
    return gains.kd_delta / (2.0 * np.sqrt(gains.kp_delta))


def steer_step_response(
    t: Union[float, np.ndarray],
    delta0: float,
    delta_des: float,
    gains: ControllerGains,
    delta_dot0: float = 0.0,
) -> Union[float, np.ndarray]:
    """Closed-form steer angle of the servo for a constant setpoint.

    Solves e'' + kD e' + kP e = 0 with e = delta - deltaDes, covering the
    over-damped, critically damped and under-damped cases.

    Args:
        t: Time(s) since the setpoint step in seconds
        delta0: Steer angle at t = 0
        delta_des: Constant setpoint
        gains: Controller gains (kp_delta must be positive)
        delta_dot0: Steer rate at t = 0

    Returns:
        Steer angle at t, same shape as t
    """
    kp = gains.kp_delta
    kd = gains.kd_delta
    t = np.asarray(t, dtype=np.float64)
    e0 = delta0 - delta_des
    v0 = delta_dot0

    disc = kd * kd - 4.0 * kp
    if disc > 0.0:
        root = np.sqrt(disc)
        r1 = 0.5 * (-kd + root)
        r2 = 0.5 * (-kd - root)
        a = (v0 - r2 * e0) / (r1 - r2)
        e = a * np.exp(r1 * t) + (e0 - a) * np.exp(r2 * t)
    elif disc == 0.0:
        r = -0.5 * kd
        e = (e0 + (v0 - r * e0) * t) * np.exp(r * t)
    else:
        alpha = -0.5 * kd
        omega = 0.5 * np.sqrt(-disc)
        e = np.exp(alpha * t) * (
            e0 * np.cos(omega * t) + (v0 - alpha * e0) / omega * np.sin(omega * t)
        )

    result = delta_des + e
    if result.ndim == 0:
        return float(result)
    return result
