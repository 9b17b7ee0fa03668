# Telemetry recording
# Per-step observable frames of a running simulation.

import csv
from pathlib import Path
from typing import Dict, List

import numpy as np

from .validation import StateValidator


class TelemetryRecorder:
    """Collects one frame of observables per simulation step."""

    def __init__(self, record_every: int = 1):
        self.record_every = max(1, record_every)
        self.frames: List[Dict[str, float]] = []
        self.num_invalid = 0
        self._calls = 0

    def on_step(self, t: float, racer) -> None:
        """Record the racer's observables at time t.

        Args:
            t: Simulation time in seconds
            racer: RollerRacer being simulated
        """
        self._calls += 1
        if (self._calls - 1) % self.record_every != 0:
            return

        is_valid, _ = StateValidator.validate(racer.state)
        if not is_valid:
            self.num_invalid += 1

        frame = {"t": float(t), **racer.snapshot(), "valid": float(is_valid)}
        self.frames.append(frame)

    def reset(self) -> None:
        self.frames = []
        self.num_invalid = 0
        self._calls = 0

    def to_arrays(self) -> Dict[str, np.ndarray]:
        """Frames as column arrays keyed by observable name."""
        if not self.frames:
            return {}
        return {
            key: np.array([frame[key] for frame in self.frames])
            for key in self.frames[0]
        }

    def save(self, path: Path) -> None:
        """Write frames to CSV."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        if not self.frames:
            path.write_text("")
            return

        with open(path, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=list(self.frames[0].keys()))
            writer.writeheader()
            writer.writerows(self.frames)

    def summary(self) -> Dict[str, float]:
        """Headline numbers of the recorded run."""
        if not self.frames:
            return {}
        cols = self.to_arrays()
        return {
            "duration": float(cols["t"][-1] - cols["t"][0]),
            "num_frames": len(self.frames),
            "max_speed": float(np.max(cols["speed"])),
            "final_speed": float(cols["speed"][-1]),
            "max_abs_slip_rear": float(np.max(np.abs(cols["slip_rate_rear"]))),
            "max_abs_slip_front": float(np.max(np.abs(cols["slip_rate_front"]))),
            "num_invalid": self.num_invalid,
        }

    def print_summary(self) -> None:
        stats = self.summary()
        print("\n" + "=" * 40)
        print("TELEMETRY SUMMARY")
        print("=" * 40)
        if not stats:
            print("No frames recorded")
            return
        for key, value in stats.items():
            if isinstance(value, float):
                print(f"{key:>20s}: {value:.4f}")
            else:
                print(f"{key:>20s}: {value}")
