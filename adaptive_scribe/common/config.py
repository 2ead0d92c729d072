"""
Configuration Management for the Adaptive Scribe

Loads configuration from ~/.scribe/config.json and environment variables.
"""

import os
import json
import logging
from pathlib import Path
from dataclasses import dataclass, field

logger = logging.getLogger("scribe.common.config")

# Default config paths
CONFIG_DIR = Path.home() / ".scribe"
CONFIG_PATH = CONFIG_DIR / "config.json"
LOGS_DIR = CONFIG_DIR / "logs"

DEFAULT_LOG_BASE_NAME = "scribe_interpretation"
DEFAULT_MAX_SEGMENT_BYTES = 10 * 1024 * 1024  # 10 MiB
DEFAULT_MAX_SEGMENTS = 5

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class AuditLogConfig:
    """Interpretation log configuration"""
    log_directory: str = str(LOGS_DIR)
    base_name: str = DEFAULT_LOG_BASE_NAME
    enabled: bool = True
    max_segment_bytes: int = DEFAULT_MAX_SEGMENT_BYTES
    max_segments: int = DEFAULT_MAX_SEGMENTS  # archived segments kept

    def __post_init__(self):
        # Zero or negative limits mean "use the default"
        if not self.max_segment_bytes or self.max_segment_bytes <= 0:
            self.max_segment_bytes = DEFAULT_MAX_SEGMENT_BYTES
        if not self.max_segments or self.max_segments <= 0:
            self.max_segments = DEFAULT_MAX_SEGMENTS
        if not self.base_name:
            self.base_name = DEFAULT_LOG_BASE_NAME
        self.log_directory = str(self.log_directory)


@dataclass
class ScribeConfig:
    """Main Scribe configuration"""
    audit_log: AuditLogConfig = field(default_factory=AuditLogConfig)
    source_orchestrator: str = ""


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def _parse_audit_log_config(data: dict) -> AuditLogConfig:
    """Parse audit_log section from config dict"""
    log_data = data.get("audit_log", {})
    return AuditLogConfig(
        log_directory=log_data.get("log_directory", str(LOGS_DIR)),
        base_name=log_data.get("base_name", DEFAULT_LOG_BASE_NAME),
        enabled=_parse_bool(log_data.get("enabled", True)),
        max_segment_bytes=int(log_data.get("max_segment_bytes", DEFAULT_MAX_SEGMENT_BYTES)),
        max_segments=int(log_data.get("max_segments", DEFAULT_MAX_SEGMENTS)),
    )


def load_config() -> ScribeConfig:
    """
    Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file (~/.scribe/config.json)
    3. Default values
    """
    config = ScribeConfig()

    # Load from config file if exists
    if CONFIG_PATH.exists():
        try:
            with open(CONFIG_PATH) as f:
                data = json.load(f)

            config.audit_log = _parse_audit_log_config(data)
            config.source_orchestrator = data.get("source_orchestrator", "")
        except (json.JSONDecodeError, IOError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Failed to load config file %s: %s", CONFIG_PATH, e)
            config = ScribeConfig()

    # Environment variable overrides
    if os.getenv("SCRIBE_LOG_DIR"):
        config.audit_log.log_directory = os.getenv("SCRIBE_LOG_DIR")
    if os.getenv("SCRIBE_LOG_BASE_NAME"):
        config.audit_log.base_name = os.getenv("SCRIBE_LOG_BASE_NAME")
    if os.getenv("SCRIBE_LOG_ENABLED"):
        config.audit_log.enabled = _parse_bool(os.getenv("SCRIBE_LOG_ENABLED"))
    if os.getenv("SCRIBE_LOG_MAX_BYTES"):
        config.audit_log.max_segment_bytes = int(os.getenv("SCRIBE_LOG_MAX_BYTES"))
    if os.getenv("SCRIBE_LOG_MAX_SEGMENTS"):
        config.audit_log.max_segments = int(os.getenv("SCRIBE_LOG_MAX_SEGMENTS"))
    if os.getenv("SCRIBE_SOURCE_ORCHESTRATOR"):
        config.source_orchestrator = os.getenv("SCRIBE_SOURCE_ORCHESTRATOR")

    # Re-apply defaults for anything the overrides zeroed out
    config.audit_log.__post_init__()

    return config


def save_config(config: ScribeConfig) -> None:
    """Save configuration to file."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    data = {
        "audit_log": {
            "log_directory": config.audit_log.log_directory,
            "base_name": config.audit_log.base_name,
            "enabled": config.audit_log.enabled,
            "max_segment_bytes": config.audit_log.max_segment_bytes,
            "max_segments": config.audit_log.max_segments,
        },
        "source_orchestrator": config.source_orchestrator,
    }

    with open(CONFIG_PATH, "w") as f:
        json.dump(data, f, indent=2)


def ensure_directories() -> None:
    """Ensure required directories exist"""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    LOGS_DIR.mkdir(parents=True, exist_ok=True)
