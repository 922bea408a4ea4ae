"""Acting-user resolution from the hook's transport environment."""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Mapping

logger = logging.getLogger(__name__)

DEFAULT_PROXY_USER_HEADER = "HTTP_X_REMOTE_USER"
SESSION_USER_KEYS: tuple[str, ...] = ("REMOTE_USER", "GL_USER", "USER")


def _from_basic_auth(header: str) -> str | None:
    scheme, _, token = header.strip().partition(" ")
    if scheme.lower() != "basic" or not token:
        return None
    try:
        decoded = base64.b64decode(token.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        logger.debug("ignoring undecodable basic auth credential")
        return None
    user, sep, _ = decoded.partition(":")
    return user if sep and user else None


def _from_session(environ: Mapping[str, str]) -> str | None:
    keys = SESSION_USER_KEYS
    if environ.get("GATEWAY_INTERFACE"):
        # Under CGI, USER is the web server account, not the pusher.
        keys = tuple(key for key in keys if key != "USER")
    for key in keys:
        value = environ.get(key, "").strip()
        if value:
            return value
    return None


def resolve_username(
    environ: Mapping[str, str],
    *,
    proxy_header: str = DEFAULT_PROXY_USER_HEADER,
) -> str | None:
    """Return the pushing user, or ``None`` when no source identifies one.

    Sources in order: reverse-proxy identity header, HTTP basic auth, then the
    direct session identity.
    """
    proxied = environ.get(proxy_header, "").strip()
    if proxied:
        return proxied

    authorization = environ.get("HTTP_AUTHORIZATION", "")
    if authorization:
        user = _from_basic_auth(authorization)
        if user:
            return user

    return _from_session(environ)
