"""Bridge components for live scanner integrations."""

from .zap_client import ZAPClient
from .sonar_client import SonarClient

__all__ = [
    "ZAPClient",
    "SonarClient",
]
