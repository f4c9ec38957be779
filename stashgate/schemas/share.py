from datetime import datetime

from pydantic import BaseModel, Field


class ShareCreate(BaseModel):
    ttl: int | None = Field(default=None, gt=0, description="Seconds until the link expires")
    password: str | None = Field(default=None, min_length=4, max_length=72)


class ShareResponse(BaseModel):
    share_url: str
    token: str
    expires_at: datetime
    has_password: bool
    ttl: int


class ShareLinkInfo(BaseModel):
    token: str
    share_url: str
    expires_at: datetime
    has_password: bool
    access_count: int


class ShareAccessBody(BaseModel):
    password: str | None = None


class SharedFileInfo(BaseModel):
    id: int
    name: str
    custom_name: str | None = None
    mime: str
    size: int
    created_at: datetime


class ShareAccessResponse(BaseModel):
    file: SharedFileInfo
    download_url: str
    expires_at: datetime
    access_count: int
