import base64
import binascii
import re
from typing import Callable, Optional, TypeVar
from urllib.parse import unquote

T = TypeVar("T")

_NON_B64 = re.compile(r"[^A-Za-z0-9+/]")


def decode_or(fallback: T, decoder: Callable[[str], T], value: str) -> T:
    """Run decoder on value, returning fallback if the input can't be decoded."""
    try:
        return decoder(value)
    except (binascii.Error, ValueError):
        return fallback


def decode_base64_bytes(data: str) -> bytes:
    """
    Lenient base64 decode accepting both the standard and URL-safe alphabets.

    Padding is optional, characters outside the alphabet are dropped and a
    dangling trailing symbol (which can't carry a full byte) is ignored.
    """
    b64 = data.replace("-", "+").replace("_", "/")
    b64 = _NON_B64.sub("", b64)
    if len(b64) % 4 == 1:
        b64 = b64[:-1]
    while len(b64) % 4:
        b64 += "="
    return base64.b64decode(b64)


def decode_base64url(token: Optional[str]) -> str:
    """
    Decode a URL-safe, padding-optional base64 token into text.

    Undecodable bytes become U+FFFD instead of raising.
    """
    if not token:
        return ""

    raw = decode_or(b"", decode_base64_bytes, token)
    return raw.decode("utf-8", errors="replace")


def url_decode(value: Optional[str]) -> str:
    # unquote leaves malformed %-sequences untouched
    if not value:
        return ""
    return unquote(value, errors="replace")


def escape_html(value) -> str:
    if value is None:
        return ""
    s = str(value)
    # '&' first so the entities introduced below are not re-escaped
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )
