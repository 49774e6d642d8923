import time
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from fastapi import UploadFile


class ListType(str, Enum):
    NONE = "None"
    WHITE = "White"
    BLOCK = "Block"


class IncomingUpload(BaseModel):
    file_bytes: bytes
    file_name: str
    declared_mime_type: str
    size_bytes: int

    @classmethod
    async def from_upload_file(cls, file: UploadFile) -> "IncomingUpload":
        """
        Read the whole upload into memory so retries can resend the same body.
        """
        file_bytes = await file.read()
        return cls(
            file_bytes=file_bytes,
            file_name=file.filename or "",
            declared_mime_type=file.content_type or "application/octet-stream",
            size_bytes=file.size if file.size is not None else len(file_bytes),
        )


class StoredAssetMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    timestamp: int = Field(default_factory=lambda: int(time.time() * 1000), alias="TimeStamp")
    list_type: ListType = Field(ListType.NONE, alias="ListType")
    label: str = Field("None", alias="Label")
    liked: bool = False
    file_name: str = Field(alias="fileName")
    file_size_bytes: int = Field(alias="fileSize")

    def to_store(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
