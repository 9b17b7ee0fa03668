# Tests for configuration validation

from pathlib import Path

import yaml
from scripts.validate_config import validate_config


class TestValidateConfig:

    def test_fixture_config_valid(self, config):
        """Standard test configuration passes."""
        assert validate_config(config) == []

    def test_shipped_config_valid(self):
        """configs/default.yaml passes."""
        with open(Path(__file__).parents[2] / "configs" / "default.yaml") as f:
            config = yaml.safe_load(f)
        assert validate_config(config) == []

    def test_missing_section(self, config):
        """Required sections are reported."""
        del config["simulation"]
        assert validate_config(config) == ["Missing required section: simulation"]

    def test_unknown_geometry_key(self, config):
        """Misspelled keys are caught before the vehicle is built."""
        config["vehicle"]["geometry"]["wheelbase"] = config["vehicle"]["geometry"].pop("wheel_base")
        errors = validate_config(config)
        assert len(errors) == 2

    def test_simulation_bounds(self, config):
        """Integrator, dt and duration are checked."""
        config["simulation"] = {"integrator": "leapfrog", "dt": 0.0, "duration": -1.0}
        errors = validate_config(config)
        assert len(errors) == 3

    def test_brake_range(self, config):
        """Brake command outside [0, 1] is reported."""
        config["controls"]["brake"] = 1.5
        assert len(validate_config(config)) == 1

    def test_not_a_mapping(self):
        """Non-dict YAML documents are rejected."""
        assert validate_config(["a", "b"]) == ["Configuration must be a mapping"]
