"""
Language identification helpers
"""

from .tag import LanguageTag, LanguageTables, read_key_value_table

__all__ = [
    "LanguageTag",
    "LanguageTables",
    "read_key_value_table",
]
