import pytest
import httpx
from fastapi.testclient import TestClient
from main import app
from docrelay.api.dependencies import get_upload_pipeline
from docrelay.core.config import RelayConfig
from docrelay.services.transfer_client import TransferClient
from docrelay.services.upload_pipeline import UploadPipeline


class RecordingStore:
    """In-memory metadata store that remembers every put."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.puts = []

    async def put(self, key, value, metadata):
        if self.fail:
            raise OSError("disk full")
        self.puts.append((key, value, metadata))


class RecordingSleep:
    """Replacement for asyncio.sleep that returns immediately."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


class FakeTelegram:
    """
    Scripted Telegram API for httpx.MockTransport.

    Each entry in `script` is either an exception class to raise as a
    transport failure or a (status_code, body) pair to answer with.
    """

    def __init__(self, *script):
        self.script = list(script)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(step, type) and issubclass(step, Exception):
            raise step("simulated failure", request=request)
        status_code, body = step
        if isinstance(body, (dict, list)):
            return httpx.Response(status_code, json=body)
        return httpx.Response(status_code, content=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def timeouts(self):
        return [request.extensions["timeout"]["read"] for request in self.requests]


def document_response(file_id="ABC123"):
    return 200, {"ok": True, "result": {"message_id": 1, "document": {"file_id": file_id}}}


@pytest.fixture
def relay_config():
    return RelayConfig(bot_token="123:TEST", chat_id="-100200300")


@pytest.fixture
def metadata_store():
    return RecordingStore()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def make_client(relay_config, recording_sleep):
    def _make(telegram: FakeTelegram, config: RelayConfig = None) -> TransferClient:
        return TransferClient(
            config or relay_config,
            transport=telegram.transport,
            sleep=recording_sleep,
        )
    return _make


@pytest.fixture
def use_pipeline(make_client, relay_config):
    """Route /upload through a pipeline talking to a fake Telegram API."""
    def _use(telegram: FakeTelegram, store=None, config: RelayConfig = None):
        config = config or relay_config
        app.dependency_overrides[get_upload_pipeline] = lambda: UploadPipeline(
            config=config,
            transfer_client=make_client(telegram, config),
            metadata_store=store,
        )
    yield _use
    app.dependency_overrides.clear()


@pytest.fixture
def test_client():
    """Create a test client for the FastAPI app."""
    return TestClient(app)
