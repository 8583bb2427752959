"""
Service option sets and response handling
"""

from .options import (
    ServiceOptions, G2POptions, MAUSOptions,
    Pho2SylOptions, TTSOptions, TextAlignOptions
)
from .response import BASResponse, tidy_text

__all__ = [
    "ServiceOptions",
    "G2POptions",
    "MAUSOptions",
    "Pho2SylOptions",
    "TTSOptions",
    "TextAlignOptions",
    "BASResponse",
    "tidy_text",
]
