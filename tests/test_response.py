"""
Unit tests for response envelope parsing and result downloads
"""

import aiohttp
import tempfile
import pytest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bas_client.services.response import BASResponse, tidy_text
from bas_client.exceptions import ResponseParseError, TransportError

from conftest import SUCCESS_XML, FAILURE_XML, FakeSession


class TestTidyText:

    def test_collapses_spaces_and_newlines(self):
        assert tidy_text("a   b\n\n\nc") == "a b\nc"

    def test_none(self):
        assert tidy_text(None) == ""


class TestParsing:

    def test_success(self):
        response = BASResponse.from_xml(SUCCESS_XML, "maus")
        assert response.success is True
        assert response.download_link.endswith("/BAS.TextGrid")
        assert response.output == "Processing finished\nok"
        assert response.warnings == ""
        assert response.service == "maus"
        assert response.xml == SUCCESS_XML

    def test_failure_is_not_an_error(self):
        response = BASResponse.from_xml(FAILURE_XML.encode("utf-8"))
        assert response.success is False
        assert response.download_link is None
        assert "unknown language" in response.output
        assert response.warnings == "Check the LANGUAGE parameter"

    def test_success_case_insensitive(self):
        body = "<WebServiceResponseLink><success>TRUE</success></WebServiceResponseLink>"
        assert BASResponse.from_xml(body).success is True

    def test_missing_elements(self):
        response = BASResponse.from_xml("<WebServiceResponseLink/>")
        assert response.success is False
        assert response.output == ""
        assert response.warnings == ""
        assert response.download_link is None

    def test_malformed_xml(self):
        with pytest.raises(ResponseParseError) as exc_info:
            BASResponse.from_xml("<html><body>Bad Gateway", "g2p")
        assert exc_info.value.service == "g2p"
        assert exc_info.value.body == "<html><body>Bad Gateway"

    def test_empty_body(self):
        with pytest.raises(ResponseParseError):
            BASResponse.from_xml(b"")

    def test_wrong_root_element(self):
        with pytest.raises(ResponseParseError) as exc_info:
            BASResponse.from_xml("<html><body>Service unavailable</body></html>")
        assert "html" in str(exc_info.value)

    def test_external_entities_not_resolved(self, temp_directory):
        secret = temp_directory / "secret.txt"
        secret.write_text("secret", encoding="utf-8")
        body = (
            f'<!DOCTYPE r [<!ENTITY x SYSTEM "file://{secret}">]>'
            "<WebServiceResponseLink><output>&x;</output></WebServiceResponseLink>"
        )
        try:
            response = BASResponse.from_xml(body)
        except ResponseParseError:
            return
        assert "secret" not in response.output

    def test_download_name(self):
        response = BASResponse.from_xml(SUCCESS_XML)
        assert response.download_name == "BAS.TextGrid"
        assert BASResponse(success=False).download_name is None


class TestSaveDownload:

    @pytest.mark.asyncio
    async def test_saves_to_path(self, temp_directory):
        response = BASResponse.from_xml(SUCCESS_XML)
        session = FakeSession(download=b"File type = \"ooTextFile\"\n" * 1000)
        target = temp_directory / "result.TextGrid"

        saved = await response.save_download(target, session=session, chunk_size=100)

        assert saved == target
        assert target.read_bytes() == session.download
        assert session.gets == [response.download_link]

    @pytest.mark.asyncio
    async def test_saves_to_temp_file(self):
        response = BASResponse.from_xml(SUCCESS_XML)
        session = FakeSession(download=b"data")

        saved = await response.save_download(session=session)
        try:
            assert saved.name.startswith("BAS")
            assert saved.name.endswith("BAS.TextGrid")
            assert saved.read_bytes() == b"data"
        finally:
            saved.unlink()

    @pytest.mark.asyncio
    async def test_nothing_to_download(self, temp_directory):
        response = BASResponse.from_xml(FAILURE_XML)
        session = FakeSession()
        assert await response.save_download(temp_directory / "x", session=session) is None
        assert session.gets == []

    @pytest.mark.asyncio
    async def test_http_error(self, temp_directory):
        response = BASResponse.from_xml(SUCCESS_XML, "maus")
        session = FakeSession(status=404, download=b"Not Found")
        with pytest.raises(TransportError) as exc_info:
            await response.save_download(temp_directory / "x", session=session)
        assert exc_info.value.status == 404
        assert exc_info.value.url == response.download_link

    @pytest.mark.asyncio
    async def test_connection_error(self, temp_directory):
        response = BASResponse.from_xml(SUCCESS_XML)
        session = FakeSession(error=aiohttp.ClientConnectionError("Connection refused"))
        with pytest.raises(TransportError) as exc_info:
            await response.save_download(temp_directory / "x", session=session)
        assert "Connection refused" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_timeout_applies_to_given_session(self, temp_directory):
        response = BASResponse.from_xml(SUCCESS_XML)
        session = FakeSession(download=b"data")

        await response.save_download(temp_directory / "x", session=session, timeout=30)

        assert session.get_kwargs[0]["timeout"].total == 30

    @pytest.mark.asyncio
    async def test_interrupted_download_leaves_nothing(self, temp_directory):
        response = BASResponse.from_xml(SUCCESS_XML)
        session = FakeSession(
            download=b"partial",
            stream_error=aiohttp.ClientPayloadError("Response payload is not completed")
        )
        target = temp_directory / "result.TextGrid"

        with pytest.raises(TransportError):
            await response.save_download(target, session=session)

        assert list(temp_directory.iterdir()) == []

    @pytest.mark.asyncio
    async def test_failed_download_keeps_existing_file(self, temp_directory):
        response = BASResponse.from_xml(SUCCESS_XML)
        session = FakeSession(
            download=b"partial",
            stream_error=aiohttp.ClientPayloadError("Response payload is not completed")
        )
        target = temp_directory / "result.TextGrid"
        target.write_bytes(b"previous result")

        with pytest.raises(TransportError):
            await response.save_download(target, session=session)

        assert target.read_bytes() == b"previous result"
        assert list(temp_directory.iterdir()) == [target]

    @pytest.mark.asyncio
    async def test_failed_download_removes_temp_file(self, temp_directory, monkeypatch):
        monkeypatch.setattr(tempfile, "tempdir", str(temp_directory))
        response = BASResponse.from_xml(SUCCESS_XML)
        session = FakeSession(status=404, download=b"Not Found")

        with pytest.raises(TransportError):
            await response.save_download(session=session)

        assert list(temp_directory.iterdir()) == []
