from typing import Literal

from pydantic import BaseModel, Field


class S3PresignPostRequest(BaseModel):
    key_prefix: str = Field(default="uploads/", max_length=512)
    filename: str | None = Field(default=None, min_length=1, max_length=255)
    acl: str = Field(default="private", min_length=1)
    success_action_status: Literal[200, 201, 204] = 201
    content_type: str | None = Field(default=None, min_length=1)
    expires_in_sec: int | None = Field(default=None, ge=60, le=3600)
    max_size_bytes: int | None = Field(default=None, ge=1)


class S3FormField(BaseModel):
    name: str
    value: str


class S3PresignPostResponse(BaseModel):
    url: str
    bucket: str
    expiration: str
    upload_method: str = "POST"
    fields: list[S3FormField]
