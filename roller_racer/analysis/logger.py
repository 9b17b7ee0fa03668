# Logging utilities

import logging
import json
import csv
from pathlib import Path
from typing import Dict, List, Any, Optional
from datetime import datetime

import yaml


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """Setup logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file path for logging

    Returns:
        Configured logger
    """
    logger = logging.getLogger("roller_racer")
    logger.setLevel(getattr(logging, level.upper()))

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, level.upper()))
    console_format = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    # File handler
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_format = logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        )
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger


class MetricsLogger:
    """Structured metrics logging for analysis."""

    def __init__(self, log_dir: Path):
        """Initialize metrics logger.

        Args:
            log_dir: Directory for log files
        """
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.csv_path = self.log_dir / "metrics.csv"
        self.json_path = self.log_dir / "metrics.json"

        self._metrics_history: List[Dict[str, Any]] = []
        self._csv_initialized = False
        self._fieldnames: List[str] = []

    def log(self, step: int, metrics: Dict[str, float]) -> None:
        """Log metrics for a simulation step.

        Args:
            step: Simulation step
            metrics: Dict of metric values
        """
        record = {
            "step": step,
            "timestamp": datetime.now().isoformat(),
            **metrics,
        }
        self._metrics_history.append(record)

        # Initialize CSV with fieldnames from first record
        if not self._csv_initialized:
            self._fieldnames = list(record.keys())
            with open(self.csv_path, "w", newline="") as f:
                writer = csv.DictWriter(f, fieldnames=self._fieldnames)
                writer.writeheader()
            self._csv_initialized = True

        with open(self.csv_path, "a", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=self._fieldnames, extrasaction="ignore")
            writer.writerow(record)

    def save_summary(self) -> None:
        """Save complete metrics history as JSON."""
        with open(self.json_path, "w") as f:
            json.dump(self._metrics_history, f, indent=2)

    def get_metric_series(self, metric_name: str) -> List[float]:
        return [
            m.get(metric_name)
            for m in self._metrics_history
            if metric_name in m
        ]

    def get_latest(self, metric_name: str) -> Optional[float]:
        """Get latest value of a metric, or None if never logged."""
        for m in reversed(self._metrics_history):
            if metric_name in m:
                return m[metric_name]
        return None


class RunLogger:
    """Output directory, log file and metrics for one simulation run."""

    def __init__(
        self,
        run_name: str,
        base_dir: Path = Path("runs"),
        level: str = "INFO",
    ):
        """Initialize run logger.

        Args:
            run_name: Name of the run
            base_dir: Base directory for runs
            level: Console logging level
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.run_dir = Path(base_dir) / f"{timestamp}_{run_name}"
        self.run_dir.mkdir(parents=True, exist_ok=True)

        self.logger = setup_logging(
            level=level,
            log_file=self.run_dir / "simulate.log",
        )
        self.metrics = MetricsLogger(self.run_dir)

    def save_config(self, config: Dict[str, Any]) -> Path:
        """Save the run configuration as YAML next to the logs."""
        config_path = self.run_dir / "config.yaml"
        with open(config_path, "w") as f:
            yaml.dump(config, f, default_flow_style=False)
        return config_path

    def log_metrics(self, step: int, metrics: Dict[str, float]) -> None:
        self.metrics.log(step, metrics)

    def info(self, message: str) -> None:
        self.logger.info(message)

    def warning(self, message: str) -> None:
        self.logger.warning(message)
