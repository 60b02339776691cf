# shared/models.py
from enum import Enum
from typing import Optional

EMBED_FALLBACK_TITLE = "Embed Preview"


class FieldMode(str, Enum):
    DEFAULT = "default"
    HIDDEN = "hidden"
    CUSTOM = "custom"


class AvatarKind(str, Enum):
    NONE = "none"
    SMALL = "small"
    LARGE = "large"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "AvatarKind":
        """Unknown kinds get no image size and a summary card."""
        try:
            return cls(raw or "none")
        except ValueError:
            return cls.NONE


class TextField:
    """
    TextField is an optional text query param after resolution:
    - DEFAULT: param absent, the configured default text is shown
    - HIDDEN: param explicitly empty, nothing is rendered
    - CUSTOM: param supplied, the decoded + escaped text is shown
    """

    def __init__(self, mode: FieldMode, text: str = ""):
        self.mode = mode
        self.text = text

    @classmethod
    def default(cls, text: str) -> "TextField":
        return cls(FieldMode.DEFAULT, text)

    @classmethod
    def hidden(cls) -> "TextField":
        return cls(FieldMode.HIDDEN)

    @classmethod
    def custom(cls, text: str) -> "TextField":
        return cls(FieldMode.CUSTOM, text)

    @property
    def show(self) -> bool:
        return self.mode is not FieldMode.HIDDEN

    def __eq__(self, other):
        if not isinstance(other, TextField):
            return NotImplemented
        return self.mode is other.mode and self.text == other.text

    def __repr__(self):
        return f"TextField({self.mode.value!r}, {self.text!r})"


class Avatar:
    def __init__(
        self,
        kind: AvatarKind = AvatarKind.NONE,
        url: str = "",
        width: Optional[str] = None,
        height: Optional[str] = None,
    ):
        self.kind = kind
        self.url = url
        # Both set means og:image:width/height are emitted
        self.width = width
        self.height = height

    @property
    def has_size(self) -> bool:
        return self.width is not None and self.height is not None


class EmbedView:
    """
    EmbedView is the fully resolved embed for one request:
    - Pre-escaped text (description, title, site_name, image_url)
    - Caller-trusted theme color and avatar sizes (not escaped)
    - Derived card type and document title
    """

    def __init__(
        self,
        description: str,
        title: TextField,
        site_name: TextField,
        image_url: str,
        theme_color: str,
        avatar: Avatar,
    ):
        self.description = description
        self.title = title
        self.site_name = site_name
        self.image_url = image_url
        self.theme_color = theme_color
        self.avatar = avatar

    @property
    def card_type(self) -> str:
        if self.avatar.kind is AvatarKind.LARGE:
            return "summary_large_image"
        return "summary"

    @property
    def document_title(self) -> str:
        return self.title.text or self.site_name.text or EMBED_FALLBACK_TITLE

    def to_dict(self):
        """Optional helper for JSON debugging."""
        return {
            "description": self.description,
            "title": {"mode": self.title.mode.value, "text": self.title.text},
            "site_name": {"mode": self.site_name.mode.value, "text": self.site_name.text},
            "image_url": self.image_url,
            "theme_color": self.theme_color,
            "avatar": {
                "kind": self.avatar.kind.value,
                "url": self.avatar.url,
                "width": self.avatar.width,
                "height": self.avatar.height,
            },
            "card_type": self.card_type,
        }
