"""
Binary parts of a service request
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Tuple, Union

from .formats import detect_signal_format, signal_content_type

# A file path, raw bytes, or a binary stream
Source = Union[str, os.PathLike, bytes, bytearray, BinaryIO]


@dataclass
class Payload:
    """A file part of a multipart request"""
    name: str
    data: bytes
    filename: str
    content_type: str

    @property
    def size_bytes(self) -> int:
        return len(self.data)


def read_source(source: Source) -> Tuple[bytes, Optional[str]]:
    """
    Read the content of an input

    Args:
        source: Path of a file, raw bytes, or a binary stream (read to its end)

    Returns:
        The content, and the file name it came from if known
    """
    if isinstance(source, (bytes, bytearray)):
        return bytes(source), None

    if isinstance(source, (str, os.PathLike)):
        path = Path(source)
        return path.read_bytes(), path.name

    if hasattr(source, "read"):
        data = source.read()
        if isinstance(data, str):
            raise TypeError("Streams must be opened in binary mode")
        name = getattr(source, "name", None)
        return data, os.path.basename(name) if isinstance(name, str) else None

    raise TypeError(f"Cannot read input from {type(source).__name__}")


def signal_payload(name: str, source: Source) -> Payload:
    """Build a signal part named after the signal's format"""
    data, file_name = read_source(source)
    signal_format = detect_signal_format(data, file_name)
    return Payload(
        name=name,
        data=data,
        filename=f"BAS.{signal_format}",
        content_type=signal_content_type(signal_format)
    )


def file_payload(
    name: str,
    source: Source,
    extension: str,
    content_type: str = "text/plain",
    filename: Optional[str] = None
) -> Payload:
    """Build a part for a text input such as a transcript or BPF file"""
    data, _ = read_source(source)
    return Payload(
        name=name,
        data=data,
        filename=filename or f"BAS.{extension}",
        content_type=content_type
    )


def text_payload(name: str, text: str, extension: str = "txt") -> Payload:
    """Build a part from a string"""
    return Payload(
        name=name,
        data=text.encode("utf-8"),
        filename=f"BAS.{extension}",
        content_type="text/plain"
    )
