"""
Client and configuration
"""

from .client import BASClient
from .config import BASConfig, SERVICE_ENDPOINTS, SERVICES_VERSION

__all__ = [
    "BASClient",
    "BASConfig",
    "SERVICE_ENDPOINTS",
    "SERVICES_VERSION",
]
