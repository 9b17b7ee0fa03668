# Metrics computation

import numpy as np
from typing import Dict, List


def compute_run_metrics(columns: Dict[str, np.ndarray]) -> Dict[str, float]:
    """Compute summary metrics of a recorded run.

    Args:
        columns: Telemetry columns, as returned by TelemetryRecorder.to_arrays

    Returns:
        Dict of computed metrics
    """
    metrics = {}
    if not columns:
        return metrics

    if "speed" in columns:
        metrics["final_speed"] = float(columns["speed"][-1])
        metrics["max_speed"] = float(np.max(columns["speed"]))

    if "x" in columns and "z" in columns:
        steps = np.hypot(np.diff(columns["x"]), np.diff(columns["z"]))
        metrics["distance"] = float(np.sum(steps))

    if "slip_rate_rear" in columns:
        metrics["max_abs_slip_rear"] = float(np.max(np.abs(columns["slip_rate_rear"])))
    if "slip_rate_front" in columns:
        metrics["max_abs_slip_front"] = float(np.max(np.abs(columns["slip_rate_front"])))

    if "kinetic_energy" in columns:
        energy = columns["kinetic_energy"]
        metrics["initial_energy"] = float(energy[0])
        metrics["final_energy"] = float(energy[-1])
        # Relative change, zero-energy runs report absolute change
        metrics["energy_drift"] = float((energy[-1] - energy[0]) / max(energy[0], 1e-9))

    if "heading" in columns:
        metrics["heading_change"] = float(columns["heading"][-1] - columns["heading"][0])

    return metrics


def check_run_health(
    metrics: Dict[str, float],
    slip_tolerance: float = 0.05,
) -> List[str]:
    """Check for signs of constraint drift or a diverged integration.

    Energy is not checked: steering oscillation propels the vehicle, so
    kinetic energy may legitimately grow.

    Args:
        metrics: Output of compute_run_metrics
        slip_tolerance: Largest acceptable |slip rate| in m/s

    Returns:
        List of warnings (empty if healthy)
    """
    warnings = []

    for key in ("max_abs_slip_rear", "max_abs_slip_front"):
        if metrics.get(key, 0.0) > slip_tolerance:
            warnings.append(f"{key} = {metrics[key]:.4f} exceeds {slip_tolerance}")

    for key in ("final_speed", "final_energy"):
        if not np.isfinite(metrics.get(key, 0.0)):
            warnings.append(f"{key} is not finite")

    return warnings
