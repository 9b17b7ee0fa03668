# Roller racer vehicle
# Ties state, parameters and the dynamics evaluator together.

import logging
from typing import List, Optional, Tuple

import numpy as np

from ..core.types import StateIndex, VehicleState
from ..integration import Integrator, Simulator
from . import observables
from .dynamics import DynamicsEvaluator
from .params import VehicleParameters

logger = logging.getLogger(__name__)


class RollerRacer:
    """Three-wheeled roller racer: two fixed rear wheels, one casted steered wheel.

    Holds the state array that a Simulator advances, the validated
    parameters and the evaluator that computes the state derivative.
    """

    def __init__(self, params: Optional[VehicleParameters] = None):
        self.params = params if params is not None else VehicleParameters()
        self.evaluator = DynamicsEvaluator(self.params)
        self.state = VehicleState.zeros().to_array()

    @property
    def rhs(self) -> DynamicsEvaluator:
        """Callback for the integrator, rhs(state, t, out)."""
        return self.evaluator

    @property
    def sim_begun(self) -> bool:
        return self.evaluator.begun

    def make_simulator(self, integrator: Optional[Integrator] = None, t0: float = 0.0) -> Simulator:
        """Simulator that advances this vehicle's state array in place."""
        return Simulator(self.evaluator, self.state, integrator=integrator, t0=t0)

    # Configuration

    def set_inertia(self, mass: float, radius_of_gyration: float) -> Tuple[bool, List[str]]:
        return self.params.set_inertia(mass, radius_of_gyration)

    def set_geometry(
        self,
        wheel_base: float,
        cg_dist: float,
        caster_len: float,
        track_width: float,
        rear_wheel_radius: float,
        steer_wheel_radius: float,
    ) -> Tuple[bool, List[str]]:
        return self.params.set_geometry(
            wheel_base, cg_dist, caster_len, track_width,
            rear_wheel_radius, steer_wheel_radius,
        )

    def set_gains(self, kp_delta: float, kd_delta: float, kp_slip: float) -> Tuple[bool, List[str]]:
        return self.params.set_gains(kp_delta, kd_delta, kp_slip)

    def set_steer_setpoint(self, angle: float) -> None:
        self.params.set_steer_setpoint(angle)

    def set_brake_command(self, signal: float) -> float:
        return self.params.set_brake_command(signal)

    def set_initial_speed(self, value: float) -> bool:
        """Set the initial xDot. Ignored once the simulation has begun.

        Returns:
            True if the speed was written
        """
        if self.sim_begun:
            logger.debug(f"Initial speed {value} ignored, simulation has begun")
            return False

        self.state[StateIndex.X_DOT] = value
        return True

    # Raw state

    @property
    def x_g(self) -> float:
        return float(self.state[StateIndex.X])

    @property
    def z_g(self) -> float:
        return float(self.state[StateIndex.Z])

    @property
    def heading(self) -> float:
        return observables.heading(self.state)

    @property
    def steer_angle(self) -> float:
        return observables.steer_angle(self.state)

    @property
    def wheel_angle_l(self) -> float:
        return float(self.state[StateIndex.THETA_L])

    @property
    def wheel_angle_r(self) -> float:
        return float(self.state[StateIndex.THETA_R])

    @property
    def wheel_angle_f(self) -> float:
        return float(self.state[StateIndex.THETA_F])

    # Derived

    @property
    def speed(self) -> float:
        return observables.speed(self.state)

    @property
    def kinetic_energy(self) -> float:
        return observables.kinetic_energy(self.state, self.params)

    @property
    def slip_rate_front(self) -> float:
        return observables.slip_rate_front(self.state, self.params)

    @property
    def slip_rate_rear(self) -> float:
        return observables.slip_rate_rear(self.state, self.params)

    def snapshot(self) -> dict:
        return observables.snapshot(self.state, self.params)

    def vehicle_state(self) -> VehicleState:
        """Named copy of the current state."""
        return VehicleState.from_array(np.array(self.state))
