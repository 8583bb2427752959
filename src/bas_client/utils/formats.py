"""
Signal format detection

The BAS services decide how to decode an uploaded signal from the file name
extension of its multipart part, so the part has to be named after the real
format of the audio.
"""

import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

# Map file extensions to format names
SIGNAL_FORMATS = {
    ".wav": "wav",
    ".wave": "wav",
    ".mp3": "mp3",
    ".flac": "flac",
    ".ogg": "ogg",
    ".nis": "nis",
    ".nist": "nis",
    ".sph": "sph",
    ".al": "al",
    ".dea": "dea",
    ".mp4": "mp4",
    ".mpeg": "mpeg",
    ".mpg": "mpg",
    ".avi": "avi",
}

CONTENT_TYPES = {
    "wav": "audio/wav",
    "mp3": "audio/mpeg",
    "flac": "audio/flac",
    "ogg": "audio/ogg",
    "mp4": "video/mp4",
    "mpeg": "video/mpeg",
    "mpg": "video/mpeg",
    "avi": "video/x-msvideo",
}


def detect_signal_format(data: bytes, file_name: Optional[Union[str, Path]] = None) -> str:
    """
    Detect the format of a signal from its file name or header

    Args:
        data: Signal bytes (only the first few are inspected)
        file_name: Name the signal was read from, if any

    Returns:
        Format name, "wav" if it cannot be determined
    """
    if file_name is not None:
        extension = Path(file_name).suffix.lower()
        detected_format = SIGNAL_FORMATS.get(extension)
        if detected_format:
            logger.debug(f"Detected format from extension: {detected_format}")
            return detected_format

    header = data[:12]
    if header.startswith(b'RIFF') and b'WAVE' in header:
        logger.debug("Detected WAV format from header")
        return "wav"
    elif header.startswith(b'ID3') or header.startswith(b'\xff\xfb'):
        logger.debug("Detected MP3 format from header")
        return "mp3"
    elif header.startswith(b'fLaC'):
        logger.debug("Detected FLAC format from header")
        return "flac"
    elif header.startswith(b'OggS'):
        logger.debug("Detected OGG format from header")
        return "ogg"
    elif header.startswith(b'NIST_1A'):
        logger.debug("Detected NIST SPHERE format from header")
        return "nis"

    # Default fallback
    logger.warning(f"Could not detect signal format for {file_name or 'signal'}, defaulting to WAV")
    return "wav"


def signal_content_type(signal_format: str) -> str:
    """MIME type to label a signal part with"""
    return CONTENT_TYPES.get(signal_format, "application/octet-stream")
