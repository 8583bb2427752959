"""
BASClient - entry point to the BAS web services

Each service call normalizes the language tag, assembles a multipart POST,
sends it to the service's endpoint and parses the XML envelope that comes
back into a BASResponse.
"""

import asyncio
import logging
from pathlib import Path
from typing import Dict, Any, Optional, List, Union, Type, TypeVar

import aiohttp

from ..exceptions import TransportError
from ..language import LanguageTag
from ..services.options import (
    ServiceOptions, G2POptions, MAUSOptions,
    Pho2SylOptions, TTSOptions, TextAlignOptions
)
from ..services.response import BASResponse
from ..utils.payload import Payload, Source, signal_payload, file_payload, text_payload
from .config import BASConfig, SERVICES_VERSION

logger = logging.getLogger(__name__)

OptionsT = TypeVar("OptionsT", bound=ServiceOptions)
OptionsArg = Union[ServiceOptions, Dict[str, Any], None]


class BASClient:
    """
    Client for the BAS web services

    Calls can be made one at a time, each with its own HTTP session, or
    inside ``async with`` to share one session between calls:

        async with BASClient() as bas:
            response = await bas.maus_basic("en-NZ", "test.wav", "test.txt")
            if response.success:
                await bas.save_download(response, "test.TextGrid")
    """

    def __init__(
        self,
        config: Optional[Union[Dict[str, Any], BASConfig]] = None,
        session: Optional[aiohttp.ClientSession] = None,
        language_tag: Optional[LanguageTag] = None
    ):
        """
        Initialize BASClient

        Args:
            config: Configuration dictionary or BASConfig instance
            session: HTTP session to send requests with (a new one per call if None)
            language_tag: Language tag normalizer (loads the bundled tables if None)

        Raises:
            ResourceLoadError: If the language tables cannot be loaded
        """
        if isinstance(config, BASConfig):
            self.config = config
        else:
            self.config = BASConfig(config or {})

        self.language_tag = language_tag or LanguageTag()

        self._session = session
        self._owns_session = False

        self.usage_stats = {
            "requests": 0,
            "failures": 0,
            "unsuccessful": 0,
            "bytes_sent": 0
        }

    @property
    def version(self) -> str:
        """Version of the BAS services this client is designed for"""
        return SERVICES_VERSION

    async def __aenter__(self) -> "BASClient":
        if self._session is None:
            self._session = aiohttp.ClientSession(headers=self._headers())
            self._owns_session = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP session if this client opened it"""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
            self._owns_session = False

    def tag(self, language: Optional[str]) -> str:
        """Normalize a language identifier the way service calls do"""
        return self.language_tag.tag(language)

    # Services

    async def maus_basic(self, language: str, signal: Source, text: Source) -> BASResponse:
        """
        Invoke the MAUSBasic service

        Args:
            language: RFC 5646 tag, language code or name
            signal: The recording
            text: Plain text transcription of the recording

        Returns:
            BASResponse
        """
        fields = {"LANGUAGE": self.tag(language)}
        files = [
            signal_payload("SIGNAL", signal),
            file_payload("TEXT", text, "txt"),
        ]
        return await self._post("maus_basic", fields, files)

    async def g2p(
        self,
        language: str,
        input: Source,
        options: OptionsArg = None,
        **overrides
    ) -> BASResponse:
        """
        Invoke the G2P service for converting orthography into phonemic transcription

        Args:
            language: RFC 5646 tag, language code or name
            input: The text to transform, in the format given by ``iform``
            options: G2POptions, or a dict of them
            **overrides: Individual options, e.g. ``oform="tab"``

        Returns:
            BASResponse
        """
        opts = _resolve(G2POptions, options, overrides)
        fields = {"lng": self.tag(language)}
        fields.update(opts.to_fields())
        files = [file_payload("i", input, opts.iform)]
        return await self._post("g2p", fields, files)

    async def g2p_text(
        self,
        language: str,
        text: str,
        options: OptionsArg = None,
        **overrides
    ) -> BASResponse:
        """Invoke G2P on a string of connected text"""
        opts = _resolve(G2POptions, options, dict(overrides, iform="txt"))
        fields = {"lng": self.tag(language)}
        fields.update(opts.to_fields())
        files = [text_payload("i", text, "txt")]
        return await self._post("g2p", fields, files)

    async def maus(
        self,
        language: str,
        signal: Source,
        bpf: Source,
        options: OptionsArg = None,
        ruleset: Optional[Source] = None,
        **overrides
    ) -> BASResponse:
        """
        Invoke the MAUS forced-alignment service

        Args:
            language: RFC 5646 tag, language code or name
            signal: The recording
            bpf: BAS Partitur Format file with at least a KAN tier
            options: MAUSOptions, or a dict of them
            ruleset: Optional file of pronunciation rules
            **overrides: Individual options, e.g. ``outformat="emuDB"``

        Returns:
            BASResponse
        """
        opts = _resolve(MAUSOptions, options, overrides)
        fields = {"LANGUAGE": self.tag(language)}
        fields.update(opts.to_fields())
        files = [
            signal_payload("SIGNAL", signal),
            file_payload("BPF", bpf, "par", "text/plain-bas"),
        ]
        if ruleset is not None:
            files.append(file_payload("RULESET", ruleset, "txt", filename="RULESET.txt"))
        return await self._post("maus", fields, files)

    async def pho2syl(
        self,
        language: str,
        bpf: Source,
        options: OptionsArg = None,
        **overrides
    ) -> BASResponse:
        """
        Invoke the Pho2Syl syllabification service

        Args:
            language: RFC 5646 tag, language code or name
            bpf: BAS Partitur Format file containing the tier to syllabify
            options: Pho2SylOptions, or a dict of them
            **overrides: Individual options, e.g. ``tier="MAU"``

        Returns:
            BASResponse
        """
        opts = _resolve(Pho2SylOptions, options, overrides)
        fields = {"lng": self.tag(language)}
        fields.update(opts.to_fields())
        files = [file_payload("i", bpf, "par", "text/plain-bas")]
        return await self._post("pho2syl", fields, files)

    async def tts(self, input: Source, options: OptionsArg = None, **overrides) -> BASResponse:
        """
        Invoke the text-to-speech service

        Args:
            input: The text to speak, in the form given by ``input_type``
            options: TTSOptions, or a dict of them
            **overrides: Individual options, e.g. ``voice="..."``

        Returns:
            BASResponse
        """
        opts = _resolve(TTSOptions, options, overrides)
        fields = opts.to_fields()
        files = [file_payload("INPUT_TEXT", input, "txt")]
        return await self._post("tts", fields, files)

    async def tts_text(self, text: str, options: OptionsArg = None, **overrides) -> BASResponse:
        """Invoke the text-to-speech service on a string"""
        opts = _resolve(TTSOptions, options, overrides)
        files = [text_payload("INPUT_TEXT", text, "txt")]
        return await self._post("tts", opts.to_fields(), files)

    async def text_align(
        self,
        input: Source,
        options: OptionsArg = None,
        costfile: Optional[Source] = None,
        **overrides
    ) -> BASResponse:
        """
        Invoke the TextAlign service

        Args:
            input: Two-column CSV of the sequences to align
            options: TextAlignOptions, or a dict of them
            costfile: Optional CSV of costs, used with ``cost="import"``
            **overrides: Individual options, e.g. ``cost="g2p_nze"``

        Returns:
            BASResponse
        """
        opts = _resolve(TextAlignOptions, options, overrides)
        files = [file_payload("i", input, "csv", "text/csv")]
        if costfile is not None:
            files.append(file_payload("costfile", costfile, "cst.csv", "text/csv"))
        return await self._post("text_align", opts.to_fields(), files)

    # Transport

    def _headers(self) -> Dict[str, str]:
        user_agent = self.config.get_user_agent()
        return {"User-Agent": user_agent} if user_agent else {}

    def _build_form(self, fields: Dict[str, str], files: List[Payload]) -> aiohttp.FormData:
        """Assemble the multipart request body"""
        form = aiohttp.FormData()
        for name, value in fields.items():
            form.add_field(name, value)
        for payload in files:
            form.add_field(
                payload.name,
                payload.data,
                filename=payload.filename,
                content_type=payload.content_type
            )
        return form

    async def _post(self, service: str, fields: Dict[str, str], files: List[Payload]) -> BASResponse:
        """
        Send a request to a service and parse its response

        Raises:
            TransportError: On connection failure or a non-2xx status
            ResponseParseError: If the response is not a service response envelope
        """
        url = self.config.get_service_url(service)
        form = self._build_form(fields, files)
        size = sum(payload.size_bytes for payload in files)
        timeout = aiohttp.ClientTimeout(total=self.config.get_timeout(service))

        logger.info(f"Calling {service} at {url} ({len(files)} files, {size} bytes)")
        self.usage_stats["requests"] += 1
        self.usage_stats["bytes_sent"] += size

        try:
            if self._session is not None:
                body = await self._send(self._session, service, url, form, timeout)
            else:
                async with aiohttp.ClientSession(headers=self._headers()) as session:
                    body = await self._send(session, service, url, form, timeout)
        except TransportError as e:
            self.usage_stats["failures"] += 1
            logger.error(str(e))
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.usage_stats["failures"] += 1
            logger.error(f"{service} request failed: {e}")
            raise TransportError(f"{service} request failed: {e}", service, url=url) from e

        response = BASResponse.from_xml(body, service)
        if not response.success:
            self.usage_stats["unsuccessful"] += 1
            logger.warning(f"{service} reported failure: {response.output.strip()}")
        elif response.warnings.strip():
            logger.info(f"{service} warnings: {response.warnings.strip()}")
        return response

    async def _send(
        self,
        session: aiohttp.ClientSession,
        service: str,
        url: str,
        form: aiohttp.FormData,
        timeout: aiohttp.ClientTimeout
    ) -> bytes:
        async with session.post(url, data=form, timeout=timeout) as response:
            if not 200 <= response.status < 300:
                error_text = await response.text()
                raise TransportError(
                    f"{service} request failed: {response.status} - {error_text}",
                    service,
                    status=response.status,
                    url=url
                )
            return await response.read()

    async def save_download(
        self,
        response: BASResponse,
        path: Optional[Union[str, Path]] = None
    ) -> Optional[Path]:
        """Download a response's result file using this client's session and timeout"""
        return await response.save_download(
            path,
            session=self._session,
            timeout=self.config.get_download_timeout()
        )

    # Utility Methods

    def get_usage_stats(self) -> Dict[str, Any]:
        """Get usage statistics"""
        return self.usage_stats.copy()

    def reset_usage_stats(self) -> None:
        """Reset usage statistics"""
        self.usage_stats = {
            "requests": 0,
            "failures": 0,
            "unsuccessful": 0,
            "bytes_sent": 0
        }


def _resolve(cls: Type[OptionsT], options: OptionsArg, overrides: Dict[str, Any]) -> OptionsT:
    """Merge an options argument and keyword overrides into a validated option set"""
    if options is None:
        values = {}
    elif isinstance(options, cls):
        values = options.model_dump(exclude_unset=True)
    elif isinstance(options, dict):
        values = dict(options)
    else:
        raise TypeError(f"Expected {cls.__name__} or dict, got {type(options).__name__}")
    values.update(overrides)
    return cls(**values)
