"""Image resolution port: local image files -> uploaded blobs."""

from __future__ import annotations

import io
import logging
import mimetypes
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel, ConfigDict, ValidationError

from noteleaf.leaflet.errors import ParseError, UploadError
from noteleaf.leaflet.models import CID, Blob

logger = logging.getLogger(__name__)

PLACEHOLDER_CID = "bafkreiplaceholder"


@runtime_checkable
class BlobUploader(Protocol):
    """Uploads raw bytes and returns the blob reference the remote assigned."""

    def __call__(self, data: bytes, mime_type: str) -> Blob: ...


class ImageInfo(BaseModel):
    """A resolved image: its blob plus pixel dimensions."""

    model_config = ConfigDict(frozen=True)

    blob: Blob
    width: int
    height: int


@runtime_checkable
class ImageResolver(Protocol):
    """Turns a filesystem path into an uploaded image."""

    def resolve_image(self, path: Path) -> ImageInfo: ...


def placeholder_uploader(data: bytes, mime_type: str) -> Blob:
    """Uploader for dry runs: nothing leaves the machine."""
    return Blob(ref=CID(link=PLACEHOLDER_CID), mime_type=mime_type, size=len(data))


class LocalImageResolver:
    """Reads local image files, decodes their dimensions, and uploads them.

    The uploader is called exactly once per image and its failures are
    re-raised as UploadError; retrying is left to the uploader itself.
    """

    def __init__(
        self,
        uploader: BlobUploader,
        max_image_bytes: int | None = None,
    ) -> None:
        self._uploader = uploader
        self._max_image_bytes = max_image_bytes

    def resolve_image(self, path: Path) -> ImageInfo:
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ParseError(f"failed to read image: {e}", path=str(path)) from e

        if self._max_image_bytes is not None and len(data) > self._max_image_bytes:
            raise ParseError(
                f"image too large ({len(data)} bytes, limit {self._max_image_bytes})",
                path=str(path),
            )

        width, height, mime_type = _decode_image(data, path)
        logger.debug("decoded %s: %dx%d %s", path, width, height, mime_type)

        try:
            result = self._uploader(data, mime_type)
        except Exception as e:
            raise UploadError(str(path), e) from e

        blob = _coerce_blob(result, path)
        logger.info("uploaded %s (%d bytes, %s)", path, len(data), mime_type)
        return ImageInfo(blob=blob, width=width, height=height)


def _decode_image(data: bytes, path: Path) -> tuple[int, int, str]:
    """Return (width, height, mime type) read from the image header."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
            fmt = img.format
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ParseError(f"failed to decode image: {e}", path=str(path)) from e

    mime_type = Image.MIME.get(fmt or "")
    if mime_type is None:
        mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return width, height, mime_type


def _coerce_blob(result: Any, path: Path) -> Blob:
    """Accept a Blob or its wire record from the uploader."""
    if isinstance(result, Blob):
        return result
    if isinstance(result, Mapping):
        try:
            return Blob.model_validate(result)
        except ValidationError as e:
            raise UploadError(str(path), e) from e
    raise UploadError(
        str(path), TypeError(f"uploader returned {type(result).__name__}, not a Blob")
    )
