from typing import Optional
from docrelay.core.config import settings
from docrelay.services.metadata_store import FileMetadataStore, MetadataStore
from docrelay.services.transfer_client import TransferClient
from docrelay.services.upload_pipeline import UploadPipeline


def get_metadata_store() -> Optional[MetadataStore]:
    """
    File-backed store when METADATA_DIR is configured, otherwise no persistence.
    """
    if settings.METADATA_DIR is None:
        return None
    return FileMetadataStore(settings.METADATA_DIR)


# Dependency to get a fresh UploadPipeline for each request
def get_upload_pipeline() -> UploadPipeline:
    config = settings.relay_config()
    return UploadPipeline(
        config=config,
        transfer_client=TransferClient(config),
        metadata_store=get_metadata_store(),
    )
