"""Configuration components."""

from .settings import (
    Settings,
    GateConfig,
    PolicyConfig,
    SourceConfig,
    ZAPConfig,
    SonarConfig,
    AuditConfig,
    ReportConfig,
    NotifyConfig,
    settings,
)
from .defaults import (
    DEFAULT_REPORT_FORMATS,
    SOURCE_FORMATS,
    EXIT_PASSED,
    EXIT_FAILED,
    EXIT_ERROR,
    EXIT_INTERRUPTED,
)

__all__ = [
    "Settings",
    "GateConfig",
    "PolicyConfig",
    "SourceConfig",
    "ZAPConfig",
    "SonarConfig",
    "AuditConfig",
    "ReportConfig",
    "NotifyConfig",
    "settings",
    "DEFAULT_REPORT_FORMATS",
    "SOURCE_FORMATS",
    "EXIT_PASSED",
    "EXIT_FAILED",
    "EXIT_ERROR",
    "EXIT_INTERRUPTED",
]
