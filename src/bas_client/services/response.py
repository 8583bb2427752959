"""
Parsing of BAS service responses

Every service answers with a small XML envelope:

    <WebServiceResponseLink>
      <success>true</success>
      <downloadLink>https://.../result.TextGrid</downloadLink>
      <output>...</output>
      <warnings>...</warnings>
    </WebServiceResponseLink>

A response with success=false is a normal outcome, not an error; the
caller inspects output and warnings to find out what went wrong.
"""

import asyncio
import logging
import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional, Union
from urllib.parse import urlparse

import aiohttp
from lxml import etree

from ..exceptions import ResponseParseError, TransportError

logger = logging.getLogger(__name__)

ROOT_ELEMENT = "WebServiceResponseLink"


def tidy_text(text: Optional[str]) -> str:
    """Collapse runs of spaces and of newlines"""
    if text is None:
        return ""
    text = re.sub(r" +", " ", text)
    return re.sub(r"\n+", "\n", text)


@dataclass
class BASResponse:
    """Result of a BAS service call"""
    success: bool
    output: str = ""
    warnings: str = ""
    download_link: Optional[str] = None
    xml: str = ""
    service: str = "unknown"

    @classmethod
    def from_xml(cls, body: Union[bytes, str], service: str = "unknown") -> "BASResponse":
        """
        Parse a response envelope

        Args:
            body: Raw response body
            service: Name of the service that produced it

        Returns:
            BASResponse

        Raises:
            ResponseParseError: If the body is not XML or not a response envelope
        """
        if isinstance(body, str):
            body = body.encode("utf-8")
        text = body.decode("utf-8", errors="replace")

        # DTDs are never fetched
        parser = etree.XMLParser(resolve_entities=False, no_network=True, load_dtd=False)
        try:
            root = etree.fromstring(body, parser)
        except (etree.XMLSyntaxError, ValueError) as e:
            logger.error(f"{service} returned malformed XML: {e}")
            raise ResponseParseError(f"Error parsing response: {e}", service, body=text) from e

        if root.tag != ROOT_ELEMENT:
            raise ResponseParseError(
                f"Unexpected response document: expected <{ROOT_ELEMENT}>, got <{root.tag}>",
                service,
                body=text
            )

        def field(name: str) -> str:
            return tidy_text(root.findtext(name))

        download_link = field("downloadLink").strip() or None

        return cls(
            success=field("success").strip().lower() == "true",
            output=field("output"),
            warnings=field("warnings"),
            download_link=download_link,
            xml=text,
            service=service
        )

    @property
    def download_name(self) -> Optional[str]:
        """File name at the end of the download link"""
        if not self.download_link:
            return None
        return PurePosixPath(urlparse(self.download_link).path).name or None

    async def save_download(
        self,
        path: Optional[Union[str, Path]] = None,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: Optional[float] = 300.0,
        chunk_size: int = 8192
    ) -> Optional[Path]:
        """
        Download the result file

        The content is streamed to a ``.part`` file beside ``path`` and moved
        into place when complete. A failed download leaves ``path`` as it was.

        Args:
            path: Where to save it (a temporary file named after the
                download if None)
            session: Session to download with (a new one if None)
            timeout: Total download timeout in seconds
            chunk_size: Bytes to read at a time

        Returns:
            Path of the saved file, or None if there is nothing to download

        Raises:
            TransportError: If the download fails
        """
        if not self.download_link:
            return None

        created = path is None
        if created:
            fd, name = tempfile.mkstemp(prefix="BAS", suffix=self.download_name or "")
            os.close(fd)
            path = Path(name)
        path = Path(path)
        # the result only appears at path once it is complete
        partial = path.with_name(f"{path.name}.part")

        logger.info(f"Downloading {self.download_link} to {path}")
        client_timeout = aiohttp.ClientTimeout(total=timeout)

        completed = False
        try:
            try:
                if session is None:
                    async with aiohttp.ClientSession() as own_session:
                        total_bytes = await self._fetch(own_session, partial, client_timeout, chunk_size)
                else:
                    total_bytes = await self._fetch(session, partial, client_timeout, chunk_size)
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.error(f"Download of {self.download_link} failed: {e}")
                raise TransportError(
                    f"Download failed: {e}", self.service, url=self.download_link
                ) from e
            partial.replace(path)
            completed = True
        finally:
            if not completed:
                partial.unlink(missing_ok=True)
                if created:
                    path.unlink(missing_ok=True)

        logger.debug(f"Saved {total_bytes} bytes to {path}")
        return path

    async def _fetch(
        self,
        session: aiohttp.ClientSession,
        path: Path,
        timeout: aiohttp.ClientTimeout,
        chunk_size: int
    ) -> int:
        async with session.get(self.download_link, timeout=timeout) as response:
            if response.status != 200:
                error_text = await response.text()
                raise TransportError(
                    f"Download failed: {response.status} - {error_text}",
                    self.service,
                    status=response.status,
                    url=self.download_link
                )

            total_bytes = 0
            with open(path, "wb") as f:
                async for chunk in response.content.iter_chunked(chunk_size):
                    if chunk:
                        f.write(chunk)
                        total_bytes += len(chunk)
            return total_bytes
