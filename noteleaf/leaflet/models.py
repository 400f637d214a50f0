"""Pydantic models for leaflet documents (pub.leaflet.* lexicons)."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator

TYPE_DOCUMENT = "pub.leaflet.document"
TYPE_PUBLICATION = "pub.leaflet.publication"
TYPE_LINEAR_DOCUMENT = "pub.leaflet.pages.linearDocument"
TYPE_BLOCK = "pub.leaflet.pages.linearDocument#block"

TYPE_TEXT_BLOCK = "pub.leaflet.blocks.text"
TYPE_HEADER_BLOCK = "pub.leaflet.blocks.header"
TYPE_CODE_BLOCK = "pub.leaflet.blocks.code"
TYPE_IMAGE_BLOCK = "pub.leaflet.blocks.image"

TYPE_ASPECT_RATIO = "pub.leaflet.blocks.image#aspectRatio"
TYPE_BLOB = "blob"

# full date, time and offset; date-only or offset-less strings are rejected
_RFC3339_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:[Zz]|[+-]\d{2}:\d{2})$"
)


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class CID(_Record):
    """Content identifier of an uploaded blob."""

    link: str = Field(alias="$link")


class Blob(_Record):
    """Opaque reference to uploaded binary data, as returned by an uploader."""

    type: Literal["blob"] = Field(default=TYPE_BLOB, alias="$type")
    ref: CID
    mime_type: str = Field(alias="mimeType")
    size: int = Field(ge=0)


class AspectRatio(_Record):
    type: Literal["pub.leaflet.blocks.image#aspectRatio"] = Field(
        default=TYPE_ASPECT_RATIO, alias="$type"
    )
    width: int = Field(ge=1)
    height: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Block payloads
# ---------------------------------------------------------------------------


class HeaderBlock(_Record):
    type: Literal["pub.leaflet.blocks.header"] = Field(
        default=TYPE_HEADER_BLOCK, alias="$type"
    )
    level: int = Field(ge=1, le=6)
    plaintext: str


class TextBlock(_Record):
    type: Literal["pub.leaflet.blocks.text"] = Field(
        default=TYPE_TEXT_BLOCK, alias="$type"
    )
    plaintext: str


class CodeBlock(_Record):
    type: Literal["pub.leaflet.blocks.code"] = Field(
        default=TYPE_CODE_BLOCK, alias="$type"
    )
    plaintext: str
    language: str | None = None
    syntax_highlighting_theme: str | None = Field(
        default=None, alias="syntaxHighlightingTheme"
    )


class ImageBlock(_Record):
    type: Literal["pub.leaflet.blocks.image"] = Field(
        default=TYPE_IMAGE_BLOCK, alias="$type"
    )
    image: Blob
    alt: str = ""
    aspect_ratio: AspectRatio = Field(alias="aspectRatio")

    @property
    def width(self) -> int:
        return self.aspect_ratio.width

    @property
    def height(self) -> int:
        return self.aspect_ratio.height


# Closed set of payload variants. Adding one means extending both this tuple
# and the Block union, and teaching the serializer about it.
BLOCK_TYPES: tuple[
    type[HeaderBlock], type[TextBlock], type[CodeBlock], type[ImageBlock]
] = (HeaderBlock, TextBlock, CodeBlock, ImageBlock)


def _block_tag(value: Any) -> str | None:
    """Discriminator for both wire records (`$type` key) and model instances."""
    if isinstance(value, dict):
        return value.get("$type", value.get("type"))
    return getattr(value, "type", None)


Block = Annotated[
    Annotated[HeaderBlock, Tag(TYPE_HEADER_BLOCK)]
    | Annotated[TextBlock, Tag(TYPE_TEXT_BLOCK)]
    | Annotated[CodeBlock, Tag(TYPE_CODE_BLOCK)]
    | Annotated[ImageBlock, Tag(TYPE_IMAGE_BLOCK)],
    Discriminator(_block_tag),
]


class BlockWrap(_Record):
    """A page entry: one block payload plus optional layout metadata."""

    type: Literal["pub.leaflet.pages.linearDocument#block"] = Field(
        default=TYPE_BLOCK, alias="$type"
    )
    block: Block
    alignment: str | None = None

    @property
    def kind(self) -> str:
        """Lexicon tag of the wrapped payload."""
        return self.block.type


def wrap(block: HeaderBlock | TextBlock | CodeBlock | ImageBlock) -> BlockWrap:
    return BlockWrap(block=block)


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


class LinearDocument(_Record):
    """A single page: an ordered run of blocks."""

    type: Literal["pub.leaflet.pages.linearDocument"] = Field(
        default=TYPE_LINEAR_DOCUMENT, alias="$type"
    )
    id: str | None = None
    blocks: tuple[BlockWrap, ...] = ()


class Document(_Record):
    """A leaflet document (pub.leaflet.document).

    ``published_at`` is an RFC 3339 timestamp; empty or missing means the
    document is still a draft.
    """

    type: Literal["pub.leaflet.document"] = Field(default=TYPE_DOCUMENT, alias="$type")
    author: str
    title: str
    description: str = ""
    published_at: str | None = Field(default=None, alias="publishedAt")
    publication: str | None = None
    pages: tuple[LinearDocument, ...] = ()

    @field_validator("published_at")
    @classmethod
    def _check_timestamp(cls, v: str | None) -> str | None:
        if v:
            if not _RFC3339_RE.fullmatch(v):
                raise ValueError(f"not an RFC 3339 timestamp: {v!r}")
            # rejects impossible dates such as 2024-02-30
            datetime.fromisoformat(v.upper().replace("Z", "+00:00"))
        return v

    @property
    def is_draft(self) -> bool:
        return not self.published_at


class Publication(_Record):
    type: Literal["pub.leaflet.publication"] = Field(
        default=TYPE_PUBLICATION, alias="$type"
    )
    name: str
    description: str = ""
    created_at: datetime = Field(alias="createdAt")

