import logging
from typing import Any, List, Optional, Union
from pydantic import BaseModel, ValidationError

logger = logging.getLogger("response_parser")


class PhotoSize(BaseModel):
    file_id: str
    file_size: Optional[int] = None


class MediaObject(BaseModel):
    file_id: str


class ProviderResult(BaseModel):
    photo: Optional[List[PhotoSize]] = None
    document: Optional[MediaObject] = None
    video: Optional[MediaObject] = None
    audio: Optional[MediaObject] = None


class ProviderResponse(BaseModel):
    ok: bool
    description: Optional[str] = None
    result: Optional[ProviderResult] = None


class ImageVariants(BaseModel):
    variants: List[PhotoSize]


class DocumentPayload(BaseModel):
    file_id: str


class VideoPayload(BaseModel):
    file_id: str


class AudioPayload(BaseModel):
    file_id: str


Payload = Union[ImageVariants, DocumentPayload, VideoPayload, AudioPayload, None]


def classify_payload(result: ProviderResult) -> Payload:
    """
    Pick the populated branch of a result: photo, then document, video, audio.
    """
    if result.photo:
        return ImageVariants(variants=result.photo)
    if result.document:
        return DocumentPayload(file_id=result.document.file_id)
    if result.video:
        return VideoPayload(file_id=result.video.file_id)
    if result.audio:
        return AudioPayload(file_id=result.audio.file_id)
    return None


def _largest_variant(variants: List[PhotoSize]) -> PhotoSize:
    # max() keeps the first element among equal keys
    return max(variants, key=lambda variant: variant.file_size or 0)


def extract_identifier(response: Any) -> Optional[str]:
    """
    Extract the file identifier from a provider response.

    Returns None when the response is not successful, has no result, or the
    result carries no photo/document/video/audio object.
    """
    if not isinstance(response, dict) or not response.get("ok") or not response.get("result"):
        return None

    try:
        parsed = ProviderResponse.model_validate(response)
    except ValidationError as e:
        logger.warning(f"Unexpected provider response shape: {str(e)}")
        return None

    payload = classify_payload(parsed.result)
    if isinstance(payload, ImageVariants):
        return _largest_variant(payload.variants).file_id
    if isinstance(payload, (DocumentPayload, VideoPayload, AudioPayload)):
        return payload.file_id
    return None
