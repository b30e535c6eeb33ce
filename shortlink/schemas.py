"""Pydantic schemas for request/response validation.

Schema Hierarchy
=================
::
    ShortenRequest (Input)
    ├─ url: str
    ├─ customSlug: str | None
    └─ expiresAt: str | None

    ShortenResponse (Output)
    ├─ success: bool
    ├─ short_url: str
    ├─ slug: str
    ├─ original_url: str
    └─ expires_at: str | None

    UrlRecordOut (Output, admin listing)
    UpdateExpiryRequest (Input, admin)
    DiscordUser / MeResponse (session identity)
    HealthResponse, SuccessResponse, ErrorResponse

Key Behaviours
===============
- The shorten body uses camelCase keys (``customSlug``, ``expiresAt``); the
  response and admin payloads use snake_case.
- URLs are opaque: no scheme or host validation. Emptiness is checked by the
  allocator so it maps to 400 rather than 422.
- ``expiresAt`` is passed through as the caller's string.
"""

import datetime

from pydantic import BaseModel, ConfigDict, Field

from shortlink.enums import HealthStatus

__all__ = [
    "ShortenRequest",
    "ShortenResponse",
    "UrlRecordOut",
    "UpdateExpiryRequest",
    "SuccessResponse",
    "ErrorResponse",
    "HealthResponse",
    "DiscordUser",
    "MeResponse",
]


class ShortenRequest(BaseModel):
    url: str
    custom_slug: str | None = Field(default=None, alias="customSlug")
    expires_at: str | None = Field(default=None, alias="expiresAt")

    model_config = ConfigDict(populate_by_name=True)


class ShortenResponse(BaseModel):
    success: bool = True
    short_url: str
    slug: str
    original_url: str
    expires_at: str | None = None


class UrlRecordOut(BaseModel):
    id: int
    slug: str
    original_url: str
    created_at: datetime.datetime
    clicks: int
    expires_at: str | None = None

    model_config = ConfigDict(from_attributes=True)


class UpdateExpiryRequest(BaseModel):
    expires_at: str | None = None


class SuccessResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: HealthStatus
    database: HealthStatus


class DiscordUser(BaseModel):
    id: str
    username: str
    avatar: str | None = None


class MeResponse(BaseModel):
    user: DiscordUser
