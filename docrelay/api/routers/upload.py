import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from docrelay.api.dependencies import get_upload_pipeline
from docrelay.api.schemas import ErrorResponse, UploadedAsset
from docrelay.core.errors import UploadError, ValidationError
from docrelay.services.upload_pipeline import UploadPipeline

logger = logging.getLogger("upload_router")

router = APIRouter(tags=["upload"])


def _error_response(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error=message).model_dump(),
    )


async def _read_file_field(request: Request) -> Optional[UploadFile]:
    """
    Return the `file` form field, or None when it is absent or not a file.
    """
    try:
        form = await request.form()
    except HTTPException as e:
        raise ValidationError(f"Invalid form data: {e.detail}")
    except MultiPartException as e:
        raise ValidationError(f"Invalid form data: {e.message}")

    file = form.get("file")
    if not isinstance(file, UploadFile):
        return None
    return file


@router.post(
    "/upload",
    response_model=List[UploadedAsset],
    responses={500: {"model": ErrorResponse}},
)
async def upload_file(
    request: Request,
    pipeline: UploadPipeline = Depends(get_upload_pipeline),
):
    """
    Relay the `file` field of a multipart form to Telegram as a document.

    Every failure, including a malformed form, is reported as HTTP 500
    with an `error` message.
    """
    try:
        file = await _read_file_field(request)
        return await pipeline.run(file)
    except UploadError as e:
        logger.error(f"Upload error: {e.message}")
        return _error_response(e.message)
    except Exception as e:
        logger.exception("Unexpected upload error")
        return _error_response(str(e))
