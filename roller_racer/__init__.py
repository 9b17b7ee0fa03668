# Roller racer planar dynamics

from .vehicle import RollerRacer, VehicleParameters, DynamicsEvaluator, make_vehicle
from .integration import Simulator, make_integrator

__version__ = "0.1.0"
