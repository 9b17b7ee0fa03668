# Explicit fixed-step integrators
# FORBIDDEN: logging, any I/O
# Each integrator advances a state array in place through a callback
# rhs(state, t, out) that writes the derivative into out.

import numpy as np
from typing import Callable, Dict, Type

RHSFunc = Callable[[np.ndarray, float, np.ndarray], object]


class Integrator:
    """Base class: owns stage buffers sized on first use."""

    name = "base"
    order = 0

    def __init__(self):
        self._dim = 0

    def _ensure_buffers(self, dim: int) -> None:
        if dim != self._dim:
            self._allocate(dim)
            self._dim = dim

    def _allocate(self, dim: int) -> None:
        raise NotImplementedError

    def step(self, rhs: RHSFunc, state: np.ndarray, t: float, dt: float) -> None:
        """Advance state from t to t + dt in place."""
        raise NotImplementedError


class EulerIntegrator(Integrator):
    """Forward Euler: y += dt * f(t, y)."""

    name = "euler"
    order = 1

    def _allocate(self, dim: int) -> None:
        self._k1 = np.zeros(dim)

    def step(self, rhs: RHSFunc, state: np.ndarray, t: float, dt: float) -> None:
        self._ensure_buffers(state.shape[0])
        rhs(state, t, self._k1)
        state += dt * self._k1


class RK2Integrator(Integrator):
    """Explicit midpoint method."""

    name = "rk2"
    order = 2

    def _allocate(self, dim: int) -> None:
        self._k1 = np.zeros(dim)
        self._k2 = np.zeros(dim)
        self._tmp = np.zeros(dim)

    def step(self, rhs: RHSFunc, state: np.ndarray, t: float, dt: float) -> None:
        self._ensure_buffers(state.shape[0])
        rhs(state, t, self._k1)
        np.multiply(self._k1, 0.5 * dt, out=self._tmp)
        self._tmp += state
        rhs(self._tmp, t + 0.5 * dt, self._k2)
        state += dt * self._k2


class RK4Integrator(Integrator):
    """Classic fourth-order Runge-Kutta."""

    name = "rk4"
    order = 4

    def _allocate(self, dim: int) -> None:
        self._k1 = np.zeros(dim)
        self._k2 = np.zeros(dim)
        self._k3 = np.zeros(dim)
        self._k4 = np.zeros(dim)
        self._tmp = np.zeros(dim)

    def step(self, rhs: RHSFunc, state: np.ndarray, t: float, dt: float) -> None:
        self._ensure_buffers(state.shape[0])
        half = 0.5 * dt

        rhs(state, t, self._k1)

        np.multiply(self._k1, half, out=self._tmp)
        self._tmp += state
        rhs(self._tmp, t + half, self._k2)

        np.multiply(self._k2, half, out=self._tmp)
        self._tmp += state
        rhs(self._tmp, t + half, self._k3)

        np.multiply(self._k3, dt, out=self._tmp)
        self._tmp += state
        rhs(self._tmp, t + dt, self._k4)

        state += (dt / 6.0) * (self._k1 + 2.0 * self._k2 + 2.0 * self._k3 + self._k4)


INTEGRATORS: Dict[str, Type[Integrator]] = {
    cls.name: cls for cls in (EulerIntegrator, RK2Integrator, RK4Integrator)
}


def make_integrator(name: str) -> Integrator:
    """Create integrator by name.

    Args:
        name: One of 'euler', 'rk2', 'rk4'

    Returns:
        Integrator instance
    """
    name = name.lower()
    if name not in INTEGRATORS:
        raise ValueError(f"Unknown integrator: {name}. Available: {list(INTEGRATORS.keys())}")
    return INTEGRATORS[name]()
