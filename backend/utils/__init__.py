"""
WatchCompile Utilities Package.

Configuration, logging and the error hierarchy shared by every module.
Requires Python 3.11+.
"""

from utils.config import Settings, get_settings
from utils.errors import BackendError, CompileError, DiagnosticError, WatchCompileError
from utils.logger import configure_logging, get_logger, logger, LoggerMixin

__all__ = [
    "Settings",
    "get_settings",
    "WatchCompileError",
    "DiagnosticError",
    "BackendError",
    "CompileError",
    "configure_logging",
    "get_logger",
    "logger",
    "LoggerMixin",
]
