from __future__ import annotations

from .core.dispatcher import (
    ScopeHandle,
    flush,
    get_config,
    get_recent_logs,
    get_scope,
    init,
    is_initialized,
    shutdown,
)
from .domain.config import LoggerConfig, Retention, build_config_from_dict
from .domain.severity import Severity
from .errors import ConfigurationMissingError, ScopeLogError, SinkConstructionError

__version__ = "1.0.0"

__all__ = [
    "ScopeHandle",
    "flush",
    "get_config",
    "get_recent_logs",
    "get_scope",
    "init",
    "is_initialized",
    "shutdown",
    "LoggerConfig",
    "Retention",
    "build_config_from_dict",
    "Severity",
    "ConfigurationMissingError",
    "ScopeLogError",
    "SinkConstructionError",
]
