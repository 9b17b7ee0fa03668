# Core type definitions
# FORBIDDEN: logging, any I/O

from dataclasses import dataclass
from enum import IntEnum
import numpy as np


STATE_DIM = 11
NUM_UNKNOWNS = 5  # [xDDot, zDDot, psiDDot, F_rear, F_front]


class StateIndex(IntEnum):
    """Fixed slots of the roller racer state vector."""
    X = 0          # x coordinate of center of mass
    X_DOT = 1
    Z = 2          # z coordinate of center of mass
    Z_DOT = 3
    PSI = 4        # heading
    PSI_DOT = 5    # yaw rate
    THETA_L = 6    # left rear wheel rotation
    THETA_R = 7    # right rear wheel rotation
    THETA_F = 8    # front steered wheel rotation
    DELTA = 9      # steer angle
    DELTA_DOT = 10


@dataclass(frozen=True)
class Inertia:
    """Mass properties of the chassis."""
    m: float = 25.0
    ig: float = 2.25   # yaw inertia about cg, m * r_gyr^2

    @classmethod
    def from_gyration(cls, mass: float, radius_of_gyration: float) -> "Inertia":
        return cls(m=mass, ig=mass * radius_of_gyration * radius_of_gyration)


@dataclass(frozen=True)
class Geometry:
    """Chassis geometry, names follow the equations of motion.

    b: cg ahead of rear axle
    c: half of the rear track width
    d: caster length
    h: cg to steer axis
    """
    b: float = 0.6
    c: float = 0.5
    d: float = 0.3
    h: float = 0.7
    r_w: float = 0.375   # rear wheel radius
    r_ws: float = 0.15   # steered wheel radius

    @property
    def wheel_base(self) -> float:
        return self.b + self.h

    @property
    def track_width(self) -> float:
        return 2.0 * self.c


@dataclass(frozen=True)
class ControllerGains:
    """Steering servo and slip stabilization gains."""
    kp_delta: float = 10.0
    kd_delta: float = 4.0
    kp_slip: float = 2.0


@dataclass(frozen=True)
class BrakeSettings:
    """Braking actuator. signal is the current command in [0, 1]."""
    f_max: float = 0.3 * 25.0 * 9.81
    vel_threshold: float = 0.1
    signal: float = 0.0


@dataclass
class VehicleState:
    """Named view of the 11-element state vector."""
    x: float
    x_dot: float
    z: float
    z_dot: float
    psi: float
    psi_dot: float
    theta_l: float
    theta_r: float
    theta_f: float
    delta: float
    delta_dot: float

    @property
    def dimension(self) -> int:
        return STATE_DIM

    def to_array(self) -> np.ndarray:
        """Flatten to numpy array."""
        return np.array([
            self.x, self.x_dot,
            self.z, self.z_dot,
            self.psi, self.psi_dot,
            self.theta_l, self.theta_r, self.theta_f,
            self.delta, self.delta_dot,
        ], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "VehicleState":
        """Reconstruct from numpy array."""
        assert arr.shape == (STATE_DIM,), f"Expected shape ({STATE_DIM},), got {arr.shape}"
        return cls(*(float(v) for v in arr))

    @classmethod
    def zeros(cls) -> "VehicleState":
        """Vehicle at rest at the origin, wheels straight."""
        return cls(*([0.0] * STATE_DIM))
