# Telemetry module - State records and validation
# FORBIDDEN: analysis.*

from .recorder import TelemetryRecorder
from .validation import StateValidator
