# Analysis module - Logging, run metrics
# IMPURE - Has side effects (file I/O, logging)

from .logger import setup_logging, MetricsLogger, RunLogger
from .metrics import compute_run_metrics, check_run_health
