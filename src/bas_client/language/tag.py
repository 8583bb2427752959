"""
Language tag normalization for the BAS web services

The services ostensibly take an RFC 5646 tag to identify the language, but
in practice only accept tags whose primary subtag is a three-letter
(ISO 639-2) code. LanguageTag maps whatever the caller has to hand, be it a
two-letter code, a three-letter code in the wrong case or an English
language name, onto that form. Any region or script suffix is passed
through untouched:

    >>> tagger = LanguageTag()
    >>> tagger.tag("en-NZ")
    'eng-NZ'
    >>> tagger.tag("German")
    'deu'
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Union

from ..exceptions import ResourceLoadError

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
CODE_TO_NAME_FILE = DATA_DIR / "iso639-2.txt"
TWO_TO_THREE_FILE = DATA_DIR / "iso639-1.txt"


def read_key_value_table(path: Union[str, Path]) -> Dict[str, str]:
    """
    Read a line-oriented ``key=value`` table

    Blank lines and lines starting with ``#`` or ``!`` are ignored. Keys and
    values are stripped of surrounding whitespace; later keys replace earlier
    ones.

    Args:
        path: Path of the table to read

    Returns:
        Dictionary of the table's entries, in file order

    Raises:
        ResourceLoadError: If the file is missing, unreadable or not UTF-8
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise ResourceLoadError(f"ISO 639 resource could not be read: {path}: {e}", str(path)) from e

    table: Dict[str, str] = {}
    for line in lines:
        line = line.strip()
        if not line or line[0] in "#!":
            continue
        key, sep, value = line.partition("=")
        if not sep:
            logger.warning(f"Ignoring malformed line in {path.name}: {line!r}")
            continue
        table[key.strip()] = value.strip()
    return table


@dataclass(frozen=True)
class LanguageTables:
    """Read-only ISO 639 lookup tables"""
    code_to_name: Mapping[str, str]
    name_to_code: Mapping[str, str]
    two_to_three: Mapping[str, str]

    @classmethod
    def load(
        cls,
        code_to_name_path: Union[str, Path] = CODE_TO_NAME_FILE,
        two_to_three_path: Union[str, Path] = TWO_TO_THREE_FILE
    ) -> "LanguageTables":
        """
        Build the lookup tables from the two reference files

        Args:
            code_to_name_path: ``code=Name`` table of three-letter codes
            two_to_three_path: ``two=three`` table of two-letter codes

        Returns:
            Immutable LanguageTables

        Raises:
            ResourceLoadError: If either reference file cannot be read
        """
        code_to_name = read_key_value_table(code_to_name_path)

        # names are matched case-insensitively; on a collision the later code wins
        name_to_code = {}
        for code, name in code_to_name.items():
            name_to_code[name.lower()] = code

        two_to_three = {
            two.lower(): three
            for two, three in read_key_value_table(two_to_three_path).items()
        }

        logger.debug(
            f"Loaded {len(code_to_name)} ISO 639-2 codes and "
            f"{len(two_to_three)} ISO 639-1 codes"
        )
        return cls(
            code_to_name=MappingProxyType(code_to_name),
            name_to_code=MappingProxyType(name_to_code),
            two_to_three=MappingProxyType(two_to_three)
        )


class LanguageTag:
    """Normalizes language identifiers to tags the BAS services accept"""

    def __init__(self, tables: Optional[LanguageTables] = None):
        """
        Initialize the normalizer

        Args:
            tables: Lookup tables to use (loads the bundled ones if None)

        Raises:
            ResourceLoadError: If the bundled tables cannot be loaded
        """
        self.tables = tables if tables is not None else LanguageTables.load()

    def tag(self, language: Optional[str]) -> str:
        """
        Convert a language identifier to a tag with a three-letter primary subtag

        Args:
            language: A language identifier, which may be an RFC 5646 tag
                or a language name

        Returns:
            The tag with its primary subtag normalized, or the given
            identifier unchanged if it could not be resolved
        """
        if not language:
            return ""

        code, hyphen, rest = language.partition("-")
        suffix = hyphen + rest

        if code not in self.tables.code_to_name:  # not a three-letter code
            lower = code.lower()
            # three-letter code in the wrong case
            if lower in self.tables.code_to_name:
                code = lower
            # two-letter code
            if lower in self.tables.two_to_three:
                code = self.tables.two_to_three[lower]
            # language name
            elif lower in self.tables.name_to_code:
                code = self.tables.name_to_code[lower]

        return code + suffix

    # RFC 5646 parlance
    normalize = tag

    def name(self, language: Optional[str]) -> Optional[str]:
        """English name of the language identified, or None if unknown"""
        code = self.tag(language).partition("-")[0]
        return self.tables.code_to_name.get(code)

    def is_known(self, language: Optional[str]) -> bool:
        """Whether the primary subtag resolves to a known three-letter code"""
        return self.tag(language).partition("-")[0] in self.tables.code_to_name
