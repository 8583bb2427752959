"""
bas-client - Python client for the BAS web services

Forced alignment (MAUS), grapheme-to-phoneme conversion (G2P),
syllabification (Pho2Syl), text-to-speech and text alignment, as offered by
the Bavarian Archive for Speech Signals.
"""

from .core.client import BASClient
from .core.config import BASConfig
from .language import LanguageTag, LanguageTables
from .services import (
    G2POptions, MAUSOptions, Pho2SylOptions, TTSOptions, TextAlignOptions,
    BASResponse
)
from .exceptions import (
    BASError, ResourceLoadError, ConfigurationError, TransportError, ResponseParseError
)

# Version
__version__ = "0.1.0"

# Main exports
__all__ = [
    "BASClient",
    "BASConfig",
    "LanguageTag",
    "LanguageTables",
    "G2POptions",
    "MAUSOptions",
    "Pho2SylOptions",
    "TTSOptions",
    "TextAlignOptions",
    "BASResponse",
    "BASError",
    "ResourceLoadError",
    "ConfigurationError",
    "TransportError",
    "ResponseParseError",
]


# Convenience function for quick setup
def create_client(**config) -> BASClient:
    """
    Convenience function to create a BASClient

    Args:
        **config: Configuration sections, e.g. ``client={"timeout": 600}``

    Returns:
        Configured BASClient instance
    """
    return BASClient(config=config)
