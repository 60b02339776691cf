import logging
from typing import Mapping, Optional

from .config import Settings
from .encoding import decode_base64url, escape_html, url_decode
from .models import Avatar, AvatarKind, EmbedView, TextField

# Braille blank, keeps og:description non-empty
PLACEHOLDER_GLYPH = "⠀"

SMALL_AVATAR_SIZE = "45"


def _resolve_text_field(raw: Optional[str], default_text: str) -> TextField:
    """
    Three-state resolution for title / siteName:
    absent -> default text, "" -> hidden, anything else -> decoded custom text.
    """
    if raw is None:
        return TextField.default(default_text)
    if raw == "":
        return TextField.hidden()
    return TextField.custom(escape_html(decode_base64url(raw)))


def _resolve_avatar(params: Mapping[str, str]) -> Avatar:
    kind = AvatarKind.parse(params.get("avatarType"))
    url = params.get("avatarUrl") or ""
    width = params.get("avatarWidth") or ""
    height = params.get("avatarHeight") or ""

    if kind is AvatarKind.SMALL:
        return Avatar(kind, url, width or SMALL_AVATAR_SIZE, height or SMALL_AVATAR_SIZE)

    # Large avatars get no default size, both dimensions must be given
    if kind is AvatarKind.LARGE and width and height:
        return Avatar(kind, url, width, height)

    return Avatar(kind, url)


def resolve_embed_view(params: Mapping[str, str], settings: Settings) -> EmbedView:
    description = escape_html(decode_base64url(params.get("text")) or PLACEHOLDER_GLYPH)

    title = _resolve_text_field(params.get("title"), settings.default_title)
    site_name = _resolve_text_field(params.get("siteName"), settings.default_title)

    img = params.get("img")
    image_url = escape_html(url_decode(img)) if img else settings.default_image_url

    avatar = _resolve_avatar(params)
    # Any requested avatar type other than "none" overrides img, even one
    # without size or card handling
    avatar_type = params.get("avatarType") or "none"
    if avatar_type != "none" and avatar.url:
        image_url = escape_html(url_decode(avatar.url))

    theme_color = params.get("color") or settings.default_theme_color

    view = EmbedView(
        description=description,
        title=title,
        site_name=site_name,
        image_url=image_url,
        theme_color=theme_color,
        avatar=avatar,
    )
    logging.debug("[Embed] resolved view=%s", view.to_dict())
    return view
