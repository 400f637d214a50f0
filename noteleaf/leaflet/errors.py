"""Errors raised while converting between markdown and leaflet blocks."""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for every converter failure.

    A conversion that raises never produced usable output; callers discard
    the attempt instead of publishing or storing a partial document.
    """


class ParseError(ConversionError):
    """Markdown could not be turned into blocks (bad fence, unreadable image)."""

    def __init__(
        self, message: str, *, line: int | None = None, path: str | None = None
    ) -> None:
        self.line = line
        self.path = path
        where = []
        if path is not None:
            where.append(path)
        if line is not None:
            where.append(f"line {line}")
        prefix = f"{', '.join(where)}: " if where else ""
        super().__init__(f"{prefix}{message}")


class UploadError(ConversionError):
    """The injected uploader failed for an image."""

    def __init__(self, path: str, cause: Exception) -> None:
        self.path = path
        super().__init__(f"failed to upload image {path}: {cause}")
        self.__cause__ = cause


class UnsupportedBlockError(ConversionError):
    """A block variant outside the supported set reached the serializer or codec."""

    def __init__(self, block: object) -> None:
        if isinstance(block, str):
            self.block_type = block
        else:
            self.block_type = getattr(block, "type", None) or type(block).__name__
        super().__init__(f"unsupported block type: {self.block_type}")


class RecordError(ConversionError):
    """A wire record is malformed and cannot be decoded into models."""
