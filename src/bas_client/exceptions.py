"""
Exceptions raised by the BAS web services client
"""

from typing import Optional


class BASError(Exception):
    """Base exception for all BAS client errors"""

    def __init__(self, message: str, service: str = "unknown", code: Optional[str] = None, **kwargs):
        super().__init__(message)
        self.service = service
        self.code = code
        # Set any additional attributes from kwargs
        for key, value in kwargs.items():
            setattr(self, key, value)

    def __str__(self):
        return self.args[0] if self.args else ""


class ResourceLoadError(BASError):
    """A bundled reference table is missing or unreadable"""

    def __init__(self, message: str, resource: Optional[str] = None):
        super().__init__(message, "language")
        self.resource = resource


class ConfigurationError(BASError):
    """Client configuration error"""
    pass


class TransportError(BASError):
    """Network or HTTP-level failure talking to a service"""

    def __init__(self, message: str, service: str = "unknown", status: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message, service)
        self.status = status
        self.url = url


class ResponseParseError(BASError):
    """Response body is not a well-formed service response document"""

    def __init__(self, message: str, service: str = "unknown", body: Optional[str] = None):
        super().__init__(message, service)
        self.body = body
