# Core module - Pure functions, no side effects
# FORBIDDEN: logging, pathlib, any I/O

from .types import (
    STATE_DIM,
    NUM_UNKNOWNS,
    StateIndex,
    VehicleState,
    Inertia,
    Geometry,
    ControllerGains,
    BrakeSettings,
)
from .math_utils import normalize_angle, rotate_2d, clamp
from .physics import (
    TrigTerms,
    trig_terms,
    steer_acceleration,
    rear_slip_rate,
    front_slip_rate,
    axle_velocity,
    brake_force,
    kinetic_energy,
)
