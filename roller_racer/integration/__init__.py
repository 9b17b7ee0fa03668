# Integration module - Time stepping
# FORBIDDEN: vehicle.*

from .integrators import (
    Integrator,
    EulerIntegrator,
    RK2Integrator,
    RK4Integrator,
    make_integrator,
)
from .driver import Simulator
