from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from stashgate.schemas.share import ShareLinkInfo


class FileInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    custom_name: str | None = None
    key: str
    path: str | None = None
    mime: str
    size: int
    metadata: dict[str, Any] | None = Field(default=None, validation_alias="file_metadata")
    created_at: datetime
    updated_at: datetime | None = None


class FileWithShares(FileInfo):
    share_links: list[ShareLinkInfo] = []


class FileDetail(FileWithShares):
    download_url: str


class PaginationInfo(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class FileListResponse(BaseModel):
    files: list[FileWithShares]
    pagination: PaginationInfo


class FileUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    custom_name: str | None = Field(default=None, max_length=255)
    metadata: dict[str, Any] | None = None
