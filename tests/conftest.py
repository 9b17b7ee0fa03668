# Pytest configuration and fixtures

import pytest
import numpy as np
from pathlib import Path
import tempfile
import yaml

from roller_racer.core.types import StateIndex, VehicleState
from roller_racer.vehicle import RollerRacer, VehicleParameters, DynamicsEvaluator


@pytest.fixture
def params():
    """Default vehicle parameters."""
    return VehicleParameters()


@pytest.fixture
def evaluator(params):
    """Evaluator bound to default parameters."""
    return DynamicsEvaluator(params)


@pytest.fixture
def racer():
    """Default roller racer at rest."""
    return RollerRacer()


@pytest.fixture
def zero_state():
    """State vector of a vehicle at rest."""
    return VehicleState.zeros().to_array()


@pytest.fixture
def moving_state(zero_state):
    """Generic state exercising every coupling term."""
    state = zero_state.copy()
    state[StateIndex.X_DOT] = 1.2
    state[StateIndex.Z_DOT] = -0.4
    state[StateIndex.PSI] = 0.7
    state[StateIndex.PSI_DOT] = 0.3
    state[StateIndex.DELTA] = -0.25
    state[StateIndex.DELTA_DOT] = 0.5
    return state


@pytest.fixture
def config():
    """Standard test configuration."""
    return {
        "experiment": {
            "name": "test",
            "seed": 42,
        },
        "vehicle": {
            "g": 9.81,
            "mu_s": 0.9,
            "inertia": {
                "mass": 25.0,
                "radius_of_gyration": 0.3,
            },
            "geometry": {
                "wheel_base": 1.3,
                "cg_dist": 0.6,
                "caster_len": 0.3,
                "track_width": 1.0,
                "rear_wheel_radius": 0.375,
                "steer_wheel_radius": 0.15,
            },
            "gains": {
                "kp_delta": 10.0,
                "kd_delta": 4.0,
                "kp_slip": 2.0,
            },
        },
        "controls": {
            "steer_setpoint": 0.2,
            "brake": 0.0,
            "initial_speed": 2.0,
        },
        "simulation": {
            "integrator": "rk4",
            "dt": 0.01,
            "duration": 1.0,
        },
        "logging": {
            "level": "WARNING",
            "log_frequency": 10,
        },
    }


@pytest.fixture
def temp_dir():
    """Create temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config_file(config, temp_dir):
    """Create temporary config file."""
    config_path = temp_dir / "config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(config, f)
    return config_path
