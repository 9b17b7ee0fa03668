# State validation
# FORBIDDEN: vehicle.*, analysis.*

import numpy as np
from typing import Tuple, List

from ..core.types import STATE_DIM, StateIndex


class StateValidator:
    """Validate state values are physically plausible for a roller racer."""

    # Physical bounds
    BOUNDS = {
        "velocity": (-30.0, 30.0),        # m/s, per world axis
        "yaw_rate": (-20.0, 20.0),        # rad/s
        "steer_angle": (-np.pi / 2, np.pi / 2),
        "steer_rate": (-50.0, 50.0),      # rad/s
    }

    @classmethod
    def validate(cls, state: np.ndarray) -> Tuple[bool, List[str]]:
        """Check state is within physical bounds.

        Position, heading and wheel angles are unbounded and not checked.

        Args:
            state: State array, shape (11,)

        Returns:
            (is_valid, list of violations)
        """
        violations = []

        if state.shape != (STATE_DIM,):
            violations.append(f"State has shape {state.shape}, expected ({STATE_DIM},)")
            return False, violations

        # Check for NaN/Inf first
        if np.any(np.isnan(state)):
            violations.append("State contains NaN")
            return False, violations
        if np.any(np.isinf(state)):
            violations.append("State contains Inf")
            return False, violations

        vel = np.array([state[StateIndex.X_DOT], state[StateIndex.Z_DOT]])
        low, high = cls.BOUNDS["velocity"]
        if np.any(vel < low) or np.any(vel > high):
            violations.append(f"Velocity out of bounds: {vel}")

        yaw_rate = state[StateIndex.PSI_DOT]
        low, high = cls.BOUNDS["yaw_rate"]
        if yaw_rate < low or yaw_rate > high:
            violations.append(f"Yaw rate out of bounds: {yaw_rate}")

        steer = state[StateIndex.DELTA]
        low, high = cls.BOUNDS["steer_angle"]
        if steer < low or steer > high:
            violations.append(f"Steer angle out of bounds: {steer}")

        steer_rate = state[StateIndex.DELTA_DOT]
        low, high = cls.BOUNDS["steer_rate"]
        if steer_rate < low or steer_rate > high:
            violations.append(f"Steer rate out of bounds: {steer_rate}")

        return len(violations) == 0, violations

    @classmethod
    def check_nan_inf(cls, state: np.ndarray) -> bool:
        """Quick check for NaN or Inf values.

        Args:
            state: State array

        Returns:
            True if state is clean (no NaN/Inf)
        """
        return not (np.any(np.isnan(state)) or np.any(np.isinf(state)))
