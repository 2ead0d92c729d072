"""
Adaptive Scribe Common Module

Shared configuration and record schemas.
"""

from .config import ScribeConfig, AuditLogConfig, load_config, save_config

__all__ = [
    "ScribeConfig",
    "AuditLogConfig",
    "load_config",
    "save_config",
]
