# Vehicle module - Roller racer model
# FORBIDDEN: telemetry.*, analysis.*

from .params import VehicleParameters
from .dynamics import DynamicsEvaluator, ConstraintWorkspace, SingularSystemError
from .racer import RollerRacer
from .factory import make_vehicle, make_simulation
