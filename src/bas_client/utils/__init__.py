"""
Utilities for building service requests
"""

from .formats import detect_signal_format, signal_content_type
from .payload import Payload, Source, read_source, signal_payload, file_payload, text_payload

__all__ = [
    "detect_signal_format",
    "signal_content_type",
    "Payload",
    "Source",
    "read_source",
    "signal_payload",
    "file_payload",
    "text_payload",
]
