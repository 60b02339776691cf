import os
from functools import lru_cache

# Port for the local dev server (the Functions host picks its own)
PORT: int = int(os.getenv("PORT", "3000"))

# Default theme color for embeds, hex without the leading '#'
DEFAULT_THEME_COLOR: str = os.getenv("DEFAULT_THEME_COLOR", "fc7ea4")

# Default OpenGraph image when neither img nor an avatar is supplied
DEFAULT_OG_IMAGE_URL: str = os.getenv(
    "DEFAULT_OG_IMAGE_URL",
    "https://files.catbox.moe/1f995e.webp"
)

# Used for both og:title and og:site_name when the param is absent
DEFAULT_EMBED_TITLE: str = os.getenv("DEFAULT_EMBED_TITLE", "〔 ͟𝀛͟𝀛͟╹͟⌵͟╹͟𝀛͟𝀛͟ 〕")

# Upload relay: "catbox" or "blob"
UPLOAD_BACKEND: str = os.getenv("UPLOAD_BACKEND", "catbox")

CATBOX_API_URL: str = os.getenv("CATBOX_API_URL", "https://catbox.moe/user/api.php")
CATBOX_USERHASH: str = os.getenv("CATBOX_USERHASH", "")

STORAGE_CONNECTION_STRING: str = os.getenv("STORAGE_CONNECTION_STRING", "")
STORAGE_ACCOUNT_URL: str = os.getenv("STORAGE_ACCOUNT_URL", "")
UPLOAD_CONTAINER: str = os.getenv("UPLOAD_CONTAINER", "uploads")

UPLOAD_TIMEOUT: float = float(os.getenv("UPLOAD_TIMEOUT", "30"))
UPLOAD_RETRIES: int = int(os.getenv("UPLOAD_RETRIES", "0"))
UPLOAD_BACKOFF: float = float(os.getenv("UPLOAD_BACKOFF", "0.25"))


class Settings:
    """
    Settings is the configuration handed to every request handler.

    Built once per worker from the module-level environment values; tests
    construct it directly with overrides.
    """

    def __init__(
        self,
        port: int = PORT,
        default_theme_color: str = DEFAULT_THEME_COLOR,
        default_image_url: str = DEFAULT_OG_IMAGE_URL,
        default_title: str = DEFAULT_EMBED_TITLE,
        upload_backend: str = UPLOAD_BACKEND,
        catbox_api_url: str = CATBOX_API_URL,
        catbox_userhash: str = CATBOX_USERHASH,
        storage_connection_string: str = STORAGE_CONNECTION_STRING,
        storage_account_url: str = STORAGE_ACCOUNT_URL,
        upload_container: str = UPLOAD_CONTAINER,
        upload_timeout: float = UPLOAD_TIMEOUT,
        upload_retries: int = UPLOAD_RETRIES,
        upload_backoff: float = UPLOAD_BACKOFF,
    ):
        self.port = port
        self.default_theme_color = default_theme_color
        self.default_image_url = default_image_url
        self.default_title = default_title
        self.upload_backend = upload_backend.strip().lower()
        self.catbox_api_url = catbox_api_url
        self.catbox_userhash = catbox_userhash
        self.storage_connection_string = storage_connection_string
        self.storage_account_url = storage_account_url.rstrip("/")
        self.upload_container = upload_container
        self.upload_timeout = upload_timeout
        self.upload_retries = max(0, upload_retries)
        self.upload_backoff = upload_backoff


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
