# Vehicle parameter model
# Validated configuration surface of the roller racer.

import logging
from dataclasses import replace
from typing import List, Tuple

from ..core.math_utils import clamp
from ..core.types import BrakeSettings, ControllerGains, Geometry, Inertia

logger = logging.getLogger(__name__)

# Lower bounds on physical parameters
MIN_MASS = 0.1             # kg, exclusive
MIN_RADIUS_OF_GYRATION = 0.03
MIN_WHEEL_BASE = 0.01
MIN_TRACK_WIDTH = 0.05
MIN_WHEEL_RADIUS = 0.05

BRAKE_FORCE_FRACTION = 0.3  # max brake force as a fraction of weight
BRAKE_VEL_THRESHOLD = 0.1   # m/s, Coulomb/viscous switch


class VehicleParameters:
    """Physical constants, controller gains and setpoints of the vehicle.

    Each group of parameters is held as a frozen dataclass and replaced as
    a whole by its setter, so a rejected call can never leave the groups
    partially updated. Validated setters return ``(ok, violations)``.
    """

    def __init__(
        self,
        g: float = 9.81,
        mu_s: float = 0.9,
        gains: ControllerGains = ControllerGains(),
    ):
        self.g = g
        self.mu_s = mu_s  # static friction coefficient, not used by the dynamics yet
        self.gains = gains
        self.delta_des = 0.0

        self.inertia = Inertia()
        self.geometry = Geometry()
        self.brake = BrakeSettings()

        self.set_inertia(25.0, 0.3)
        self.set_geometry(
            wheel_base=1.3,
            cg_dist=0.6,
            caster_len=0.3,
            track_width=1.0,
            rear_wheel_radius=0.5 * 0.75,
            steer_wheel_radius=0.15,
        )

    def set_inertia(self, mass: float, radius_of_gyration: float) -> Tuple[bool, List[str]]:
        """Set mass and yaw inertia.

        Also resets the brake: maximum force is recomputed from the new
        weight, the velocity threshold is restored and the command is
        released.

        Args:
            mass: Total mass in kg, must exceed 0.1
            radius_of_gyration: Yaw radius of gyration in m, at least 0.03

        Returns:
            (applied, list of violations)
        """
        violations = []
        if mass <= MIN_MASS:
            violations.append(f"mass must exceed {MIN_MASS}, got {mass}")
        if radius_of_gyration < MIN_RADIUS_OF_GYRATION:
            violations.append(
                f"radius_of_gyration must be at least {MIN_RADIUS_OF_GYRATION}, "
                f"got {radius_of_gyration}"
            )

        if violations:
            logger.warning(f"Inertia rejected: {'; '.join(violations)}")
            return False, violations

        self.inertia = Inertia.from_gyration(mass, radius_of_gyration)
        self.brake = BrakeSettings(
            f_max=BRAKE_FORCE_FRACTION * mass * self.g,
            vel_threshold=BRAKE_VEL_THRESHOLD,
            signal=0.0,
        )
        return True, []

    def set_geometry(
        self,
        wheel_base: float,
        cg_dist: float,
        caster_len: float,
        track_width: float,
        rear_wheel_radius: float,
        steer_wheel_radius: float,
    ) -> Tuple[bool, List[str]]:
        """Set the chassis geometry.

        Args:
            wheel_base: Rear axle to steer axis in m
            cg_dist: Rear axle to center of mass in m
            caster_len: Steer axis to front contact point in m
            track_width: Distance between the rear wheels in m
            rear_wheel_radius: Rear wheel radius in m
            steer_wheel_radius: Steered wheel radius in m

        Returns:
            (applied, list of violations)
        """
        violations = []
        if wheel_base < MIN_WHEEL_BASE:
            violations.append(f"wheel_base must be at least {MIN_WHEEL_BASE}, got {wheel_base}")
        if cg_dist <= 0.0:
            violations.append(f"cg_dist must be positive, got {cg_dist}")
        if caster_len < 0.0:
            violations.append(f"caster_len must be non-negative, got {caster_len}")
        if track_width < MIN_TRACK_WIDTH:
            violations.append(f"track_width must be at least {MIN_TRACK_WIDTH}, got {track_width}")
        if rear_wheel_radius < MIN_WHEEL_RADIUS:
            violations.append(
                f"rear_wheel_radius must be at least {MIN_WHEEL_RADIUS}, got {rear_wheel_radius}"
            )
        if steer_wheel_radius < MIN_WHEEL_RADIUS:
            violations.append(
                f"steer_wheel_radius must be at least {MIN_WHEEL_RADIUS}, got {steer_wheel_radius}"
            )
        # cg must lie between the rear axle and the steer contact point
        if wheel_base - caster_len < cg_dist:
            violations.append(
                f"cg_dist {cg_dist} lies beyond the steer contact point "
                f"(wheel_base - caster_len = {wheel_base - caster_len})"
            )

        if violations:
            logger.warning(f"Geometry rejected: {'; '.join(violations)}")
            return False, violations

        self.geometry = Geometry(
            b=cg_dist,
            c=0.5 * track_width,
            d=caster_len,
            h=wheel_base - cg_dist,
            r_w=rear_wheel_radius,
            r_ws=steer_wheel_radius,
        )
        return True, []

    def set_gains(
        self,
        kp_delta: float,
        kd_delta: float,
        kp_slip: float,
    ) -> Tuple[bool, List[str]]:
        """Set steering servo and slip stabilization gains (all >= 0)."""
        candidates = {"kp_delta": kp_delta, "kd_delta": kd_delta, "kp_slip": kp_slip}
        violations = [
            f"{name} must be non-negative, got {value}"
            for name, value in candidates.items()
            if value < 0.0
        ]

        if violations:
            logger.warning(f"Gains rejected: {'; '.join(violations)}")
            return False, violations

        self.gains = ControllerGains(**candidates)
        return True, []

    def set_steer_setpoint(self, angle: float) -> None:
        self.delta_des = angle

    def set_brake_command(self, signal: float) -> float:
        """Set the brake command, clamped to [0, 1].

        Returns:
            The command actually stored
        """
        value = clamp(signal, 0.0, 1.0)
        self.brake = replace(self.brake, signal=value)
        return value

    def as_dict(self) -> dict:
        """Flat view of every parameter, for logging and telemetry headers."""
        return {
            "m": self.inertia.m,
            "Ig": self.inertia.ig,
            "b": self.geometry.b,
            "c": self.geometry.c,
            "d": self.geometry.d,
            "h": self.geometry.h,
            "rW": self.geometry.r_w,
            "rWs": self.geometry.r_ws,
            "kPDelta": self.gains.kp_delta,
            "kDDelta": self.gains.kd_delta,
            "kPSlip": self.gains.kp_slip,
            "FbrakeMax": self.brake.f_max,
            "brakeVelTH": self.brake.vel_threshold,
            "brakeSignal": self.brake.signal,
            "deltaDes": self.delta_des,
            "g": self.g,
            "muS": self.mu_s,
        }
