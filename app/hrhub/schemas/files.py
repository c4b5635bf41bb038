from datetime import datetime

from pydantic import BaseModel, Field


class PresignUploadRequest(BaseModel):
    filename: str = Field(min_length=1, max_length=255)
    content_type: str = Field(min_length=1, max_length=100)
    folder: str = Field(default="documents", pattern=r"^[A-Za-z0-9_-]{1,50}$")


class PresignDownloadRequest(BaseModel):
    key: str = Field(min_length=1, max_length=1024)


class PresignedUrlOut(BaseModel):
    url: str
    key: str
    method: str
    expires_in: int
    expires_at: datetime
