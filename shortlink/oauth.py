"""Discord OAuth2 client used by the admin login flow."""

import logging
from urllib.parse import urlencode

import httpx

from shortlink.schemas import DiscordUser

__all__ = ["DISCORD_API", "OAuthError", "DiscordOAuth"]

logger = logging.getLogger(__name__)

DISCORD_API = "https://discord.com/api"


class OAuthError(Exception):
    """The identity provider rejected the exchange or returned garbage."""


class DiscordOAuth:
    """Authorization-code flow against Discord.

    Args:
        client_id: Application client id.
        client_secret: Application client secret.
        redirect_uri: Callback URL registered with Discord.
        transport: Optional httpx transport, used by tests to stub Discord.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.redirect_uri)

    def authorize_url(self) -> str:
        query = urlencode(
            {
                "client_id": self.client_id,
                "redirect_uri": self.redirect_uri,
                "response_type": "code",
                "scope": "identify",
            }
        )
        return f"{DISCORD_API}/oauth2/authorize?{query}"

    async def fetch_user(self, code: str) -> DiscordUser:
        async with httpx.AsyncClient(transport=self._transport, timeout=10.0) as client:
            access_token = await self._exchange_code(client, code)
            return await self._get_user(client, access_token)

    async def _exchange_code(self, client: httpx.AsyncClient, code: str) -> str:
        try:
            response = await client.post(
                f"{DISCORD_API}/oauth2/token",
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "grant_type": "authorization_code",
                    "code": code,
                    "redirect_uri": self.redirect_uri,
                },
            )
        except httpx.HTTPError as exc:
            logger.error(f"Token request failed: {exc}")
            raise OAuthError("Auth Failed") from exc

        if response.is_error:
            logger.error(f"Token exchange failed: {response.text}")
            raise OAuthError("Auth Failed")
        try:
            return response.json()["access_token"]
        except (ValueError, KeyError, TypeError) as exc:
            logger.error(f"Failed to parse token response: {exc}")
            raise OAuthError("Auth Failed") from exc

    async def _get_user(self, client: httpx.AsyncClient, access_token: str) -> DiscordUser:
        try:
            response = await client.get(
                f"{DISCORD_API}/users/@me",
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as exc:
            logger.error(f"User request failed: {exc}")
            raise OAuthError("Failed to get user info") from exc

        if response.is_error:
            logger.error(f"User fetch failed: {response.text}")
            raise OAuthError("Failed to get user info")
        try:
            return DiscordUser.model_validate(response.json())
        except ValueError as exc:
            logger.error(f"Failed to parse user response: {exc}")
            raise OAuthError("Failed to get user info") from exc
