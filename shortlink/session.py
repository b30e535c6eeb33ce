"""Cookie session codec for the admin area.

The session value is the logged-in Discord user serialized as JSON and
base64-encoded. It is not signed: anyone can forge it. It identifies the
user for the admin UI; it does not authenticate them.
"""

import base64
import binascii

from pydantic import ValidationError

from shortlink.schemas import DiscordUser

__all__ = ["SESSION_COOKIE", "encode_session", "decode_session", "session_cookie_header", "clear_cookie_header"]

SESSION_COOKIE = "meo_session"


def encode_session(user: DiscordUser) -> str:
    return base64.b64encode(user.model_dump_json().encode("utf-8")).decode("ascii")


def decode_session(value: str | None) -> DiscordUser | None:
    if not value:
        return None
    try:
        raw = base64.b64decode(value, validate=True)
        return DiscordUser.model_validate_json(raw)
    except (binascii.Error, ValueError, ValidationError):
        return None


def session_cookie_header(user: DiscordUser, max_age: int, secure: bool) -> str:
    secure_flag = " Secure;" if secure else ""
    return f"{SESSION_COOKIE}={encode_session(user)}; Path=/; HttpOnly;{secure_flag} SameSite=Lax; Max-Age={max_age}"


def clear_cookie_header() -> str:
    return f"{SESSION_COOKIE}=; Path=/; HttpOnly; SameSite=Lax; Max-Age=0"
