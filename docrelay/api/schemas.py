from pydantic import BaseModel


class UploadedAsset(BaseModel):
    src: str  # "/file/<identifier>.<extension>"


class ErrorResponse(BaseModel):
    error: str
