"""Discord login, callback and logout routes."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, RedirectResponse, Response

from shortlink.dependencies import ServiceManager, get_oauth, get_service_manager
from shortlink.oauth import DiscordOAuth, OAuthError
from shortlink.session import clear_cookie_header, session_cookie_header

__all__ = ["router"]

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/discord")
async def discord_redirect(oauth: DiscordOAuth = Depends(get_oauth)) -> Response:
    if not oauth.configured:
        return PlainTextResponse("Discord Env Missing", status_code=500)
    return RedirectResponse(oauth.authorize_url(), status_code=307)


@router.get("/discord/callback")
async def discord_callback(
    code: str | None = None,
    manager: ServiceManager = Depends(get_service_manager),
    oauth: DiscordOAuth = Depends(get_oauth),
) -> Response:
    if not code:
        return PlainTextResponse("No code", status_code=400)

    try:
        user = await oauth.fetch_user(code)
    except OAuthError as exc:
        return PlainTextResponse(str(exc), status_code=500)

    settings = manager.settings
    logger.info(f"Admin login: {user.username} ({user.id})")
    response = RedirectResponse(f"{settings.BASE_URL}/dashboard", status_code=302)
    response.headers.append(
        "set-cookie",
        session_cookie_header(
            user,
            max_age=settings.SESSION_MAX_AGE_SECONDS,
            secure=settings.BASE_URL.startswith("https"),
        ),
    )
    return response


@router.get("/logout")
async def logout(manager: ServiceManager = Depends(get_service_manager)) -> Response:
    response = RedirectResponse(f"{manager.settings.BASE_URL}/", status_code=302)
    response.headers.append("set-cookie", clear_cookie_header())
    return response
