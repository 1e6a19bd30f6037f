"""
Monitoring - Structured logging of gate runs.
"""

from .logger import GateLogger, gate_logger

__all__ = ["GateLogger", "gate_logger"]
