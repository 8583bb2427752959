"""
Configuration management for the BAS client
"""

from typing import Dict, Any, Optional, List
import os

from ..exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://clarin.phonetik.uni-muenchen.de/BASWebServices/services"

# Service name -> endpoint path under the base URL
SERVICE_ENDPOINTS = {
    "maus_basic": "runMAUSBasic",
    "g2p": "runG2P",
    "maus": "runMAUS",
    "pho2syl": "runPho2Syl",
    "tts": "runTTSFile",
    "text_align": "runTextAlign",
}

# Version of the BAS services this client is designed for
SERVICES_VERSION = "2.10"


class BASConfig:
    """Configuration manager for the BAS client"""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration

        Args:
            config: Configuration dictionary or None to use environment variables
        """
        self.config = config or {}
        self._load_from_environment()
        self._validate_timeouts()

    def _load_from_environment(self):
        """Load configuration from environment variables"""

        base_url = os.getenv("BAS_BASE_URL", DEFAULT_BASE_URL).rstrip("/")

        # Per-service endpoints; an explicit URL beats one derived from the base URL
        env_configs = {}
        for service, endpoint in SERVICE_ENDPOINTS.items():
            env_configs[service] = {
                "url": os.getenv(f"BAS_{service.upper()}_URL", f"{base_url}/{endpoint}"),
            }

        # General settings
        general_settings = {
            "client": {
                "timeout": self._float_from_env("BAS_TIMEOUT", 300.0),
                "download_timeout": self._float_from_env("BAS_DOWNLOAD_TIMEOUT", 300.0),
                "user_agent": os.getenv("BAS_USER_AGENT"),
            }
        }

        # Merge general settings
        for section, settings in general_settings.items():
            if section not in self.config:
                self.config[section] = {}
            for key, value in settings.items():
                if key not in self.config[section] and value is not None:
                    self.config[section][key] = value

        # Merge service configs (provided config takes precedence)
        for service, service_config in env_configs.items():
            if service not in self.config:
                self.config[service] = {}

            for key, value in service_config.items():
                if key not in self.config[service] and value is not None:
                    self.config[service][key] = value

    @staticmethod
    def _float_from_env(name: str, default: float) -> float:
        value = os.getenv(name)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            raise ConfigurationError(f"{name} must be a number, got {value!r}", "config")

    @staticmethod
    def _check_timeout(timeout: Optional[float], source: str) -> None:
        if timeout is not None and timeout <= 0:
            raise ConfigurationError(f"Timeout must be positive, got {timeout}", source)

    def _validate_timeouts(self) -> None:
        """Reject non-positive timeouts, which aiohttp would treat as no timeout"""
        client = self.config["client"]
        self._check_timeout(client.get("timeout"), "client")
        self._check_timeout(client.get("download_timeout"), "client")
        for service in SERVICE_ENDPOINTS:
            self._check_timeout(self.config[service].get("timeout"), service)

    def _check_service(self, service: str) -> None:
        if service not in SERVICE_ENDPOINTS:
            raise ConfigurationError(
                f"Unknown service: {service}. Must be one of {list(SERVICE_ENDPOINTS)}",
                service
            )

    def get_service_config(self, service: str, key: Optional[str] = None) -> Any:
        """
        Get configuration for a specific service

        Args:
            service: Service name (e.g., 'maus', 'g2p')
            key: Specific config key (optional)

        Returns:
            Configuration value or dictionary
        """
        self._check_service(service)
        service_config = self.config.get(service, {})

        if key is None:
            return service_config

        return service_config.get(key)

    def set_service_config(self, service: str, key: str, value: Any) -> None:
        """
        Set configuration for a specific service

        Args:
            service: Service name
            key: Configuration key
            value: Configuration value
        """
        self._check_service(service)
        if service not in self.config:
            self.config[service] = {}

        self.config[service][key] = value

    def get_service_url(self, service: str) -> str:
        """Get the endpoint URL for a service"""
        return self.get_service_config(service, "url")

    def set_service_url(self, service: str, url: str) -> None:
        """Point a service at a different endpoint"""
        self.set_service_config(service, "url", url)

    def get_services(self) -> List[str]:
        """Names of the services this client can call"""
        return list(SERVICE_ENDPOINTS)

    def get_timeout(self, service: Optional[str] = None) -> Optional[float]:
        """
        Total request timeout in seconds

        A per-service ``timeout`` overrides the client-wide one.
        """
        if service is not None:
            timeout = self.get_service_config(service, "timeout")
            if timeout is not None:
                return timeout
        return self.config.get("client", {}).get("timeout")

    def set_timeout(self, timeout: Optional[float], service: Optional[str] = None) -> None:
        """Set the request timeout, client-wide or for a single service"""
        self._check_timeout(timeout, service or "config")
        if service is not None:
            self.set_service_config(service, "timeout", timeout)
            return
        if "client" not in self.config:
            self.config["client"] = {}
        self.config["client"]["timeout"] = timeout

    def get_download_timeout(self) -> Optional[float]:
        """Total timeout in seconds for fetching a result download"""
        return self.config.get("client", {}).get("download_timeout")

    def get_user_agent(self) -> Optional[str]:
        """User-Agent header to send, or None for aiohttp's default"""
        return self.config.get("client", {}).get("user_agent")

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary"""
        return self.config.copy()

    def __repr__(self) -> str:
        return f"BASConfig({self.config})"
