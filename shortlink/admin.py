"""Admin API, gated by the session cookie.

Endpoints:
    GET    /api/admin/urls:  All records, newest first.
    DELETE /api/admin/urls/{id}:  Remove a record.
    PATCH  /api/admin/urls/{id}:  Replace a record's expires_at.
    GET    /api/admin/me:  The logged-in Discord user.
"""

import logging

from fastapi import APIRouter, Depends

from shortlink.dependencies import get_current_user, get_store
from shortlink.errors import RecordNotFoundError
from shortlink.schemas import (
    DiscordUser,
    ErrorResponse,
    MeResponse,
    SuccessResponse,
    UpdateExpiryRequest,
    UrlRecordOut,
)
from shortlink.store import UrlStore

__all__ = ["router"]

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    responses={401: {"model": ErrorResponse, "description": "No valid session"}},
)


@router.get("/urls", response_model=list[UrlRecordOut])
async def list_urls(
    user: DiscordUser = Depends(get_current_user),
    store: UrlStore = Depends(get_store),
) -> list[UrlRecordOut]:
    records = await store.list_all()
    return [UrlRecordOut.model_validate(record) for record in records]


@router.delete("/urls/{record_id}", response_model=SuccessResponse, responses={404: {"model": ErrorResponse}})
async def delete_url(
    record_id: int,
    user: DiscordUser = Depends(get_current_user),
    store: UrlStore = Depends(get_store),
) -> SuccessResponse:
    if not await store.delete(record_id):
        raise RecordNotFoundError()
    logger.info(f"{user.username} deleted url {record_id}")
    return SuccessResponse()


@router.patch("/urls/{record_id}", response_model=SuccessResponse, responses={404: {"model": ErrorResponse}})
async def update_url(
    record_id: int,
    payload: UpdateExpiryRequest,
    user: DiscordUser = Depends(get_current_user),
    store: UrlStore = Depends(get_store),
) -> SuccessResponse:
    if not await store.update_expiry(record_id, payload.expires_at):
        raise RecordNotFoundError()
    logger.info(f"{user.username} set expires_at={payload.expires_at} on url {record_id}")
    return SuccessResponse()


@router.get("/me", response_model=MeResponse)
async def get_me(user: DiscordUser = Depends(get_current_user)) -> MeResponse:
    return MeResponse(user=user)
