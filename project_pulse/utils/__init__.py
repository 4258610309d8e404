"""
Shared utilities for Project Pulse.
"""

from .logging import configure_logging, get_logger, project_log_context, LoggerMixin
from .config import SystemConfig, get_config, set_config
from .error_handler import ErrorHandler

__all__ = [
    'configure_logging',
    'get_logger',
    'project_log_context',
    'LoggerMixin',
    'SystemConfig',
    'get_config',
    'set_config',
    'ErrorHandler',
]
