# Simulation driver
# Owns the state array and the clock, delegates stepping to an integrator.

import logging
from typing import Callable, Optional

import numpy as np

from .integrators import Integrator, RHSFunc, RK4Integrator

logger = logging.getLogger(__name__)


class Simulator:
    """Advances a state vector in time.

    The state array is owned here and modified in place by the integrator.
    The dynamics are supplied as a callback ``rhs(state, t, out)``; any
    Integrator strategy can be swapped in.
    """

    def __init__(
        self,
        rhs: RHSFunc,
        state: np.ndarray,
        integrator: Optional[Integrator] = None,
        t0: float = 0.0,
    ):
        state = np.asarray(state)
        if state.ndim != 1:
            raise ValueError(f"State must be one-dimensional, got shape {state.shape}")
        if state.dtype != np.float64:
            raise ValueError(f"State must be float64, got {state.dtype}")

        self.rhs = rhs
        self.state = state
        self.integrator = integrator if integrator is not None else RK4Integrator()
        self.time = t0
        self.num_steps = 0

    def step(self, dt: float) -> None:
        """Advance state and time by one step of size dt."""
        if dt <= 0.0:
            raise ValueError(f"dt must be positive, got {dt}")

        self.integrator.step(self.rhs, self.state, self.time, dt)
        self.time += dt
        self.num_steps += 1

    def run(
        self,
        duration: float,
        dt: float,
        callback: Optional[Callable[["Simulator"], None]] = None,
    ) -> int:
        """Step until duration has elapsed.

        Args:
            duration: Simulated time to cover in seconds
            dt: Step size in seconds
            callback: Called after every step with the simulator

        Returns:
            Number of steps taken
        """
        if dt <= 0.0:
            raise ValueError(f"dt must be positive, got {dt}")
        if duration < 0.0:
            raise ValueError(f"duration must be non-negative, got {duration}")

        num_steps = int(round(duration / dt))
        logger.info(
            f"Running {num_steps:,} {self.integrator.name} steps of {dt} s "
            f"from t={self.time:.3f}"
        )

        for _ in range(num_steps):
            self.step(dt)
            if callback is not None:
                callback(self)

        return num_steps
