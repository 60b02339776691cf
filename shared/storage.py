"""
shared/storage.py - upload relay to a public file host.

Backends:
 - catbox: multipart POST to the Catbox user API, response body is the URL
 - blob: Azure Blob Storage container, returns the blob URL

Every backend exposes store(data, filename, content_type) -> url and raises
UploadError on failure. Retries are bounded by UPLOAD_RETRIES (0 = one try).
"""

import logging
import time
import uuid
from urllib.parse import urlparse
from typing import Callable, TypeVar

import httpx
from azure.core.exceptions import AzureError
from azure.identity import DefaultAzureCredential
from azure.storage.blob import BlobServiceClient, ContentSettings

from .config import Settings

T = TypeVar("T")

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class UploadError(Exception):
    """The hosting backend rejected or failed the upload."""


def _is_valid_http_url(url: str) -> bool:
    p = urlparse(url)
    return p.scheme in ("http", "https") and bool(p.netloc)


def _with_retries(fn: Callable[[], T], retries: int, backoff: float) -> T:
    for attempt in range(retries + 1):
        try:
            return fn()
        except UploadError as ex:
            if attempt >= retries:
                raise
            logging.warning("[Upload] attempt %d failed: %s", attempt + 1, ex)
            time.sleep(backoff * (2 ** attempt))


# -----------------------------------------------------
# CATBOX
# -----------------------------------------------------

class CatboxUploader:
    def __init__(self, settings: Settings):
        self.api_url = settings.catbox_api_url
        self.userhash = settings.catbox_userhash
        self.timeout = settings.upload_timeout
        self.retries = settings.upload_retries
        self.backoff = settings.upload_backoff

    def _post(self, fields: dict, files: dict) -> str:
        try:
            with httpx.Client(timeout=self.timeout, headers={"User-Agent": "embed-preview-func"}) as client:
                response = client.post(self.api_url, data=fields, files=files)
        except httpx.TimeoutException as ex:
            logging.warning("[Catbox] Timed out after %ss", self.timeout)
            raise UploadError(f"Catbox request timed out after {self.timeout} seconds") from ex
        except httpx.HTTPError as ex:
            logging.warning("[Catbox] Exception: %s", ex)
            raise UploadError(f"Catbox request failed: {ex}") from ex

        text = response.text.strip()
        if response.status_code != 200:
            logging.warning("[Catbox] HTTP %d body=%s", response.status_code, text[:500])
            raise UploadError(f"Catbox returned HTTP {response.status_code}: {text[:500]}")

        if not _is_valid_http_url(text):
            logging.warning("[Catbox] Unexpected response body=%s", text)
            raise UploadError(f"Catbox returned an unexpected response: {text}")
        return text

    def store(self, data: bytes, filename: str, content_type: str = DEFAULT_CONTENT_TYPE) -> str:
        fields = {"reqtype": "fileupload"}
        if self.userhash:
            fields["userhash"] = self.userhash
        files = {"fileToUpload": (filename, data, content_type)}

        logging.info("[Catbox] POST %s filename=%s bytes=%d", self.api_url, filename, len(data))
        return _with_retries(lambda: self._post(fields, files), self.retries, self.backoff)


# -----------------------------------------------------
# AZURE BLOB
# -----------------------------------------------------

class BlobUploader:
    def __init__(self, settings: Settings):
        self.account_url = settings.storage_account_url
        self.connection_string = settings.storage_connection_string
        self.container = settings.upload_container
        self.timeout = settings.upload_timeout
        self.retries = settings.upload_retries
        self.backoff = settings.upload_backoff

    def _service_client(self) -> BlobServiceClient:
        """
        Build the service client using:
          1) DefaultAzureCredential (managed identity) when STORAGE_ACCOUNT_URL is set, else
          2) STORAGE_CONNECTION_STRING
        """
        if self.account_url:
            return BlobServiceClient(self.account_url, credential=DefaultAzureCredential())
        if self.connection_string:
            return BlobServiceClient.from_connection_string(self.connection_string)

        logging.error("[Blob] No credential. Set STORAGE_ACCOUNT_URL or STORAGE_CONNECTION_STRING.")
        raise UploadError("Blob storage is not configured")

    def _upload(self, blob_name: str, data: bytes, content_type: str) -> str:
        try:
            service = self._service_client()
            blob_client = service.get_container_client(self.container).get_blob_client(blob_name)
            blob_client.upload_blob(
                data,
                overwrite=True,
                content_settings=ContentSettings(content_type=content_type),
                timeout=int(self.timeout),
            )
        except (AzureError, ValueError) as ex:
            logging.warning("[Blob] upload failed for %s: %s", blob_name, ex)
            raise UploadError(f"Blob upload failed: {ex}") from ex
        return blob_client.url

    def store(self, data: bytes, filename: str, content_type: str = DEFAULT_CONTENT_TYPE) -> str:
        # Prefix keeps same-named uploads from overwriting each other
        blob_name = f"{uuid.uuid4().hex}/{filename}"
        logging.info("[Blob] PUT %s/%s bytes=%d", self.container, blob_name, len(data))
        return _with_retries(
            lambda: self._upload(blob_name, data, content_type), self.retries, self.backoff
        )


# -----------------------------------------------------
# PUBLIC ENTRYPOINT
# -----------------------------------------------------

_BACKENDS = {
    "catbox": CatboxUploader,
    "blob": BlobUploader,
}


def get_uploader(settings: Settings):
    backend = _BACKENDS.get(settings.upload_backend)
    if backend is None:
        raise ValueError(f"Unknown UPLOAD_BACKEND: {settings.upload_backend}")
    return backend(settings)
