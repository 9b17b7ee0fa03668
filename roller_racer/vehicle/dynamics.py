# Dynamics evaluation
# Right-hand side of the roller racer equations of motion.

import logging
from typing import Optional, Tuple

import numpy as np

from ..core.physics import (
    axle_velocity,
    brake_force,
    front_slip_rate,
    rear_slip_rate,
    steer_acceleration,
    trig_terms,
)
from ..core.types import NUM_UNKNOWNS, STATE_DIM, StateIndex
from .params import VehicleParameters

logger = logging.getLogger(__name__)


class SingularSystemError(np.linalg.LinAlgError):
    """The constraint system could not be solved for the given state."""


class ConstraintWorkspace:
    """Reusable buffers for the 5x5 constraint system.

    Owned by a single evaluator and overwritten on every evaluation.
    Not safe to share between threads.
    """

    def __init__(self, size: int = NUM_UNKNOWNS):
        self.size = size
        self.A = np.zeros((size, size), dtype=np.float64)
        self.rhs = np.zeros(size, dtype=np.float64)
        self.sol = np.zeros(size, dtype=np.float64)

    def solve(self) -> np.ndarray:
        """Solve A @ sol = rhs in place.

        Raises:
            SingularSystemError: If A is singular or the solution is not finite
        """
        try:
            solution = np.linalg.solve(self.A, self.rhs)
        except np.linalg.LinAlgError as err:
            raise SingularSystemError(f"Constraint matrix is singular: {err}") from err

        if not np.all(np.isfinite(solution)):
            raise SingularSystemError(f"Constraint solution is not finite: {solution}")

        self.sol[:] = solution
        return self.sol


class DynamicsEvaluator:
    """Computes the state derivative of the roller racer.

    Unknowns of the constraint system are the world-frame accelerations of
    the center of mass, the yaw acceleration and the lateral contact forces
    at the rear axle and the steered wheel:

        y = [xDDot, zDDot, psiDDot, F_rear, F_front]

    Rows 0-2 are Newton-Euler in the world frame, rows 3-4 are the
    differentiated no-slip constraints with proportional slip feedback
    (kPSlip) so that constraint drift decays instead of accumulating.

    The evaluator matches the integrator callback contract
    ``rhs(state, t, out)`` and can be called directly.
    """

    def __init__(
        self,
        params: VehicleParameters,
        workspace: Optional[ConstraintWorkspace] = None,
    ):
        self.params = params
        self.workspace = workspace if workspace is not None else ConstraintWorkspace()
        self.begun = False
        self.num_evaluations = 0

    def __call__(self, state: np.ndarray, t: float, out: Optional[np.ndarray] = None) -> np.ndarray:
        return self.evaluate(state, t, out)

    def evaluate(self, state: np.ndarray, t: float, out: Optional[np.ndarray] = None) -> np.ndarray:
        """Evaluate the state derivative.

        Args:
            state: State array, shape (11,)
            t: Time in seconds. The model is autonomous so t is unused
            out: Optional output array, shape (11,), written in place

        Returns:
            Derivative array (out when provided)

        Raises:
            SingularSystemError: If the constraint system is singular
        """
        p = self.params
        geo = p.geometry
        inertia = p.inertia
        gains = p.gains

        x_dot = state[StateIndex.X_DOT]
        z_dot = state[StateIndex.Z_DOT]
        psi = state[StateIndex.PSI]
        psi_dot = state[StateIndex.PSI_DOT]
        delta = state[StateIndex.DELTA]
        delta_dot = state[StateIndex.DELTA_DOT]

        trig = trig_terms(psi, delta)
        cos_psi, sin_psi = trig.cos_psi, trig.sin_psi
        cos_delta, sin_delta = trig.cos_delta, trig.sin_delta
        cos_pd, sin_pd = trig.cos_psi_delta, trig.sin_psi_delta

        delta_ddot = steer_acceleration(delta, delta_dot, p.delta_des, gains)
        slip_rear = rear_slip_rate(x_dot, z_dot, psi_dot, trig, geo.b)
        slip_front = front_slip_rate(x_dot, z_dot, psi_dot, delta_dot, trig, geo.h, geo.d)

        axle_vel = axle_velocity(x_dot, z_dot, trig)
        f_brake = brake_force(axle_vel, p.brake)

        A = self.workspace.A
        r = self.workspace.rhs

        # translation along world x
        A[0, :] = (inertia.m, 0.0, 0.0, -sin_psi, -sin_pd)
        r[0] = f_brake * cos_psi

        # translation along world z
        A[1, :] = (0.0, inertia.m, 0.0, -cos_psi, -cos_pd)
        r[1] = -f_brake * sin_psi

        # yaw about the center of mass
        A[2, :] = (0.0, 0.0, inertia.ig, -geo.b, geo.h * cos_delta - geo.d)
        r[2] = 0.0

        # rear axle no-slip
        A[3, :] = (sin_psi, cos_psi, geo.b, 0.0, 0.0)
        r[3] = (
            -x_dot * psi_dot * cos_psi
            + z_dot * psi_dot * sin_psi
            - gains.kp_slip * slip_rear
        )

        # steered wheel no-slip
        heading_rate = psi_dot + delta_dot
        A[4, :] = (sin_pd, cos_pd, geo.d - geo.h * cos_delta, 0.0, 0.0)
        r[4] = (
            -geo.d * delta_ddot
            - x_dot * heading_rate * cos_pd
            + z_dot * heading_rate * sin_pd
            - geo.h * psi_dot * delta_dot * sin_delta
            - gains.kp_slip * slip_front
        )

        sol = self.workspace.solve()

        if out is None:
            out = np.empty(STATE_DIM, dtype=np.float64)

        out[StateIndex.X] = x_dot
        out[StateIndex.X_DOT] = sol[0]
        out[StateIndex.Z] = z_dot
        out[StateIndex.Z_DOT] = sol[1]
        out[StateIndex.PSI] = psi_dot
        out[StateIndex.PSI_DOT] = sol[2]
        # rolling without slip, rear wheels differ by the track offset
        out[StateIndex.THETA_L] = -(axle_vel - geo.c * psi_dot) / geo.r_w
        out[StateIndex.THETA_R] = -(axle_vel + geo.c * psi_dot) / geo.r_w
        out[StateIndex.THETA_F] = -(
            x_dot * cos_pd - z_dot * sin_pd + geo.h * psi_dot * sin_delta
        ) / geo.r_ws
        out[StateIndex.DELTA] = delta_dot
        out[StateIndex.DELTA_DOT] = delta_ddot

        if not self.begun:
            logger.debug("First dynamics evaluation, initial conditions are now locked")
        self.begun = True
        self.num_evaluations += 1

        return out

    @property
    def last_contact_forces(self) -> Tuple[float, float]:
        """Lateral (rear, front) contact forces from the most recent solve."""
        return float(self.workspace.sol[3]), float(self.workspace.sol[4])
