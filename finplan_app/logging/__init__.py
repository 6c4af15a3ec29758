"""
Logging configuration and utilities for the goal planning system.
"""
from .config import configure_logging, get_logger, get_planning_logger

__all__ = ["configure_logging", "get_logger", "get_planning_logger"]
