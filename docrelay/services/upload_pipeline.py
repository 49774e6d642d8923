import logging
from enum import Enum
from typing import Dict, List, Optional
from fastapi import UploadFile
from docrelay.core.config import RelayConfig
from docrelay.core.errors import ParseError, PersistenceError, TransferError, UploadError, ValidationError
from docrelay.schemas import IncomingUpload, StoredAssetMetadata
from docrelay.services.metadata_store import MetadataStore
from docrelay.services.response_parser import extract_identifier
from docrelay.services.transfer_client import MultipartPayload, TransferClient, TransferFailure
from docrelay.utils.file_utils import lookup_key

logger = logging.getLogger("upload_pipeline")

# Every file goes through sendDocument to avoid the photo/video/audio size limits
UPLOAD_ENDPOINT = "sendDocument"


class UploadState(str, Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    TRANSFERRED = "transferred"
    IDENTIFIER_RESOLVED = "identifier_resolved"
    PERSISTED = "persisted"
    RESPONDED = "responded"
    FAILED = "failed"


class UploadPipeline:
    """
    Relays one uploaded file to Telegram and records where it can be found.

    One instance handles one request. Any failure raises an UploadError
    subclass; nothing already done (the upstream upload, a metadata write)
    is rolled back.
    """

    def __init__(
        self,
        config: RelayConfig,
        transfer_client: TransferClient,
        metadata_store: Optional[MetadataStore] = None,
    ):
        self.config = config
        self.transfer_client = transfer_client
        self.metadata_store = metadata_store
        self.state = UploadState.RECEIVED

    def _advance(self, state: UploadState) -> None:
        logger.debug(f"Upload state: {self.state.value} -> {state.value}")
        self.state = state

    async def run(self, file: Optional[UploadFile]) -> List[Dict[str, str]]:
        try:
            upload = await self._validate(file)
            provider_response = await self._transfer(upload)
            identifier = self._resolve_identifier(provider_response)
            key = lookup_key(identifier, upload.file_name)
            await self._persist(key, upload)
        except UploadError:
            self._advance(UploadState.FAILED)
            raise

        self._advance(UploadState.RESPONDED)
        return [{"src": f"/file/{key}"}]

    async def _validate(self, file: Optional[UploadFile]) -> IncomingUpload:
        if file is None:
            raise ValidationError("No file uploaded")

        upload = await IncomingUpload.from_upload_file(file)
        logger.info(
            f"Uploading file: {upload.file_name}, size: {upload.size_bytes} bytes, "
            f"type: {upload.declared_mime_type}"
        )
        self._advance(UploadState.VALIDATED)
        return upload

    async def _transfer(self, upload: IncomingUpload) -> dict:
        payload = MultipartPayload(
            data={"chat_id": self.config.chat_id},
            files={"document": (upload.file_name, upload.file_bytes, upload.declared_mime_type)},
        )
        logger.info(f"Using {UPLOAD_ENDPOINT} for upload")

        outcome = await self.transfer_client.send(payload, UPLOAD_ENDPOINT)
        if isinstance(outcome, TransferFailure):
            raise TransferError(outcome.message)

        self._advance(UploadState.TRANSFERRED)
        return outcome.provider_response

    def _resolve_identifier(self, provider_response: dict) -> str:
        identifier = extract_identifier(provider_response)
        if not identifier:
            raise ParseError("Failed to get file ID")

        self._advance(UploadState.IDENTIFIER_RESOLVED)
        return identifier

    async def _persist(self, key: str, upload: IncomingUpload) -> None:
        if self.metadata_store is not None:
            metadata = StoredAssetMetadata(
                file_name=upload.file_name,
                file_size_bytes=upload.size_bytes,
            )
            try:
                await self.metadata_store.put(key, "", metadata.to_store())
            except Exception as e:
                logger.error(f"Error saving metadata for {key}: {str(e)}")
                if self.config.strict_metadata_writes:
                    raise PersistenceError(f"Failed to save file metadata: {str(e)}")

        self._advance(UploadState.PERSISTED)
