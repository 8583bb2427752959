"""
Pytest configuration for bas-client tests

Provides common fixtures and test configuration. Nothing here talks to the
network: HTTP is served by FakeSession, which records what it is sent.
"""

import pytest
import os
import tempfile
from pathlib import Path
import sys

# Add src to path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bas_client import BASClient, BASConfig, LanguageTag


SUCCESS_XML = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    "<WebServiceResponseLink>"
    "<success>true</success>"
    "<downloadLink>https://clarin.phonetik.uni-muenchen.de/BASWebServices/data/2026.10.19_10.00.00/BAS.TextGrid</downloadLink>"
    "<output>Processing   finished\n\n\nok</output>"
    "<warnings></warnings>"
    "</WebServiceResponseLink>"
)

FAILURE_XML = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    "<WebServiceResponseLink>"
    "<success>false</success>"
    "<downloadLink></downloadLink>"
    "<output>ERROR: unknown language code xyz</output>"
    "<warnings>Check the LANGUAGE parameter</warnings>"
    "</WebServiceResponseLink>"
)


class FakeContent:
    """Stands in for aiohttp's StreamReader"""

    def __init__(self, body: bytes, error=None):
        self.body = body
        self.error = error

    async def iter_chunked(self, size: int):
        for i in range(0, len(self.body), size):
            yield self.body[i:i + size]
        # a connection dropped after the body so far
        if self.error is not None:
            raise self.error


class FakeResponse:
    def __init__(self, status: int = 200, body: bytes = b"", stream_error=None):
        self.status = status
        self.body = body
        self.content = FakeContent(body, stream_error)

    async def read(self) -> bytes:
        return self.body

    async def text(self) -> str:
        return self.body.decode("utf-8")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Minimal aiohttp.ClientSession replacement that records requests"""

    def __init__(
        self,
        status: int = 200,
        body=SUCCESS_XML,
        download: bytes = b"",
        error=None,
        stream_error=None
    ):
        self.status = status
        self.body = body.encode("utf-8") if isinstance(body, str) else body
        self.download = download
        self.error = error
        self.stream_error = stream_error
        self.posts = []
        self.gets = []
        self.get_kwargs = []
        self.closed = False

    def post(self, url, data=None, timeout=None, **kwargs):
        self.posts.append({"url": url, "data": data, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status, self.body)

    def get(self, url, **kwargs):
        self.gets.append(url)
        self.get_kwargs.append(kwargs)
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status, self.download, self.stream_error)

    async def close(self):
        self.closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
        return False


@pytest.fixture(scope="session")
def tagger():
    """A LanguageTag using the bundled tables"""
    return LanguageTag()


@pytest.fixture
def test_config():
    """Provide a test configuration pointing at a fake host"""
    return BASConfig({
        "maus_basic": {"url": "https://bas.test/services/runMAUSBasic"},
        "g2p": {"url": "https://bas.test/services/runG2P"},
        "maus": {"url": "https://bas.test/services/runMAUS", "timeout": 900},
        "pho2syl": {"url": "https://bas.test/services/runPho2Syl"},
        "tts": {"url": "https://bas.test/services/runTTSFile"},
        "text_align": {"url": "https://bas.test/services/runTextAlign"},
        "client": {"timeout": 60, "download_timeout": 30},
    })


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def client(test_config, fake_session, tagger):
    """BASClient sending through a FakeSession"""
    return BASClient(config=test_config, session=fake_session, language_tag=tagger)


@pytest.fixture
def temp_directory():
    """Create a temporary directory for test files"""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def temp_audio_file():
    """Create a temporary audio file for testing"""
    with tempfile.NamedTemporaryFile(suffix=".wav", delete=False) as tmp_file:
        # Minimal WAV file header followed by 0.2 seconds of silence
        data_size = 6400
        file_size = 36 + data_size
        wav_header = (
            b'RIFF'
            + file_size.to_bytes(4, byteorder='little')
            + b'WAVE'
            + b'fmt '
            + (16).to_bytes(4, byteorder='little')
            + (1).to_bytes(2, byteorder='little')   # PCM
            + (1).to_bytes(2, byteorder='little')   # Mono
            + (16000).to_bytes(4, byteorder='little')  # 16kHz
            + (32000).to_bytes(4, byteorder='little')  # Byte rate
            + (2).to_bytes(2, byteorder='little')   # Block align
            + (16).to_bytes(2, byteorder='little')  # 16-bit
            + b'data'
            + data_size.to_bytes(4, byteorder='little')
        )

        tmp_file.write(wav_header + b'\x00' * data_size)
        tmp_file.flush()

        yield Path(tmp_file.name)

        # Cleanup
        try:
            os.unlink(tmp_file.name)
        except FileNotFoundError:
            pass


@pytest.fixture
def text_file(temp_directory):
    path = temp_directory / "test.txt"
    path.write_text("the quick brown fox\n", encoding="utf-8")
    return path


@pytest.fixture
def bpf_file(temp_directory):
    """A small BAS Partitur Format file with ORT and KAN tiers"""
    path = temp_directory / "test.par"
    path.write_text(
        "LHD: Partitur 1.3\n"
        "SAM: 16000\n"
        "LBD:\n"
        "ORT: 0 the\n"
        "ORT: 1 fox\n"
        "KAN: 0 D@\n"
        "KAN: 1 fQks\n",
        encoding="utf-8"
    )
    return path


@pytest.fixture
def csv_file(temp_directory):
    path = temp_directory / "test.csv"
    path.write_text("the quick fox;the fox\n", encoding="utf-8")
    return path


def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (call the live services)"
    )
    config.addinivalue_line(
        "markers", "network: marks tests that require network connectivity"
    )
