import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Union
import httpx
from docrelay.core.config import RelayConfig
from docrelay.core.errors import TransferError

logger = logging.getLogger("transfer_client")

DEFAULT_FAILURE_MESSAGE = "Upload to Telegram failed"


@dataclass
class MultipartPayload:
    """
    Form fields plus file parts, kept in memory so each attempt resends them.
    """
    data: Dict[str, str] = field(default_factory=dict)
    files: Dict[str, Tuple[str, bytes, str]] = field(default_factory=dict)


@dataclass(frozen=True)
class TransferSuccess:
    provider_response: Dict[str, Any]


@dataclass(frozen=True)
class TransferFailure:
    message: str


TransferOutcome = Union[TransferSuccess, TransferFailure]


def attempt_timeout_ms(attempt: int, base_timeout_ms: int = 60000) -> int:
    """
    Timeout for a 0-indexed attempt; grows linearly with each retry.
    """
    return base_timeout_ms * (attempt + 1)


def backoff_delay_ms(attempt: int, base_backoff_ms: int = 2000) -> int:
    """
    Delay before retrying after a failed 0-indexed attempt.
    """
    return base_backoff_ms * 2 ** attempt


class TransferClient:
    """
    Sends multipart uploads to the Telegram Bot API.

    Transport failures (network errors, timeouts) are retried with
    exponential backoff. Responses from the API, including rejections,
    are never retried.
    """

    def __init__(
        self,
        config: RelayConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.config = config
        self._transport = transport
        self._sleep = sleep

    def build_url(self, endpoint: str) -> str:
        return f"{self.config.api_base.rstrip('/')}/bot{self.config.bot_token}/{endpoint}"

    async def send(self, payload: MultipartPayload, endpoint: str) -> TransferOutcome:
        url = self.build_url(endpoint)
        max_retries = self.config.max_retries
        attempt = 0

        while True:
            timeout_s = attempt_timeout_ms(attempt, self.config.base_timeout_ms) / 1000
            try:
                response = await asyncio.wait_for(
                    self._post(url, payload, timeout_s), timeout=timeout_s
                )
            except (httpx.TransportError, asyncio.TimeoutError) as e:
                logger.error(
                    f"Network error (attempt {attempt + 1}/{max_retries + 1}): {type(e).__name__}: {e}"
                )
                if attempt < max_retries:
                    delay = backoff_delay_ms(attempt, self.config.base_backoff_ms)
                    logger.info(f"Retrying in {delay}ms...")
                    await self._sleep(delay / 1000)
                    attempt += 1
                    continue
                return TransferFailure(
                    f"Network error occurred after {max_retries + 1} attempts"
                )

            return self._to_outcome(response)

    async def _post(self, url: str, payload: MultipartPayload, timeout_s: float) -> httpx.Response:
        async with httpx.AsyncClient(transport=self._transport, timeout=timeout_s) as client:
            return await client.post(url, data=payload.data, files=payload.files)

    def _to_outcome(self, response: httpx.Response) -> TransferOutcome:
        try:
            response_data = response.json()
        except ValueError:
            if response.is_success:
                raise TransferError(
                    f"Invalid JSON in Telegram API response (HTTP {response.status_code})"
                )
            response_data = {}

        logger.info(f"Telegram API response: {json.dumps(response_data)}")

        if not isinstance(response_data, dict):
            response_data = {}

        if response.is_success and response_data.get("ok", True):
            return TransferSuccess(provider_response=response_data)

        description = response_data.get("description") or DEFAULT_FAILURE_MESSAGE
        logger.error(f"Upload error: {description}")
        return TransferFailure(description)
