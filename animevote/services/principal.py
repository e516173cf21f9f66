# animevote/services/principal.py
from __future__ import annotations

from animevote.errors import AuthRequiredError

MEMBER_PREFIX = "m:"
COOKIE_PREFIX = "c:"


def principal_key(member_id: int | None, cookie_id: str | None) -> str:
    """
    Stable voter identity for "one submission per principal per week".
    A logged-in member always wins over the vote cookie.
    """
    if member_id is not None:
        return f"{MEMBER_PREFIX}{member_id}"
    if cookie_id is not None and cookie_id.strip():
        return f"{COOKIE_PREFIX}{cookie_id}"
    raise AuthRequiredError("vote requires a member login or a vote cookie")
