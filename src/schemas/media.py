# COMPONENT: MEDIA SCHEMAS
# REQUIREMENTS SATISFIED: request/response contracts for uploads, presigning and cleanup

"""
src/schemas/media.py

Pydantic models exchanged between the upload services and the HTTP layer.

Field names are snake_case in Python and camelCase on the wire
(`uploadUrl`, `publicUrl`, `fileName`, ...), which is what the browser
upload client sends and expects back.
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AssetReference(CamelModel):
    url: str
    key: str


class UploadResponse(AssetReference):
    success: bool = True


class PresignedUpload(CamelModel):
    upload_url: str
    key: str
    public_url: str


class PresignRequest(CamelModel):
    file_name: str
    content_type: str
    folder: str = "videos"
    file_size: Optional[int] = Field(default=None, ge=0)


class PresignResponse(CamelModel):
    success: bool = True
    upload_url: str
    key: str
    # kept as `url` for the existing browser client
    url: str


class PresignFile(CamelModel):
    name: str
    type: Optional[str] = None
    size: Optional[int] = Field(default=None, ge=0)


class BatchPresignRequest(CamelModel):
    files: List[PresignFile]
    folder: str


class BatchPresignItem(CamelModel):
    file_name: str
    key: Optional[str] = None
    presigned_url: Optional[str] = None
    public_url: Optional[str] = None
    content_type: Optional[str] = None
    file_size: Optional[int] = None
    error: Optional[str] = None


class BatchPresignResult(CamelModel):
    presigned_urls: List[BatchPresignItem]
    bucket: Optional[str] = None
    public_url: str
    timestamp: str


class UrlRequest(CamelModel):
    url: str


class ConfirmResponse(CamelModel):
    url: str
    confirmed: bool


class CleanupOutcome(CamelModel):
    deleted: bool
    key: Optional[str] = None
    reason: Optional[str] = None
