"""Markdown <-> leaflet block conversion."""

from noteleaf.leaflet.converter import MarkdownConverter
from noteleaf.leaflet.errors import (
    ConversionError,
    ParseError,
    RecordError,
    UnsupportedBlockError,
    UploadError,
)
from noteleaf.leaflet.models import (
    AspectRatio,
    Blob,
    Block,
    BlockWrap,
    CID,
    CodeBlock,
    Document,
    HeaderBlock,
    ImageBlock,
    LinearDocument,
    Publication,
    TextBlock,
    wrap,
)
from noteleaf.leaflet.parser import MarkdownParser
from noteleaf.leaflet.resolver import (
    BlobUploader,
    ImageInfo,
    ImageResolver,
    LocalImageResolver,
    placeholder_uploader,
)
from noteleaf.leaflet.serializer import DocumentSerializer, flatten_pages

__all__ = [
    "AspectRatio",
    "Blob",
    "BlobUploader",
    "Block",
    "BlockWrap",
    "CID",
    "CodeBlock",
    "ConversionError",
    "Document",
    "DocumentSerializer",
    "HeaderBlock",
    "ImageBlock",
    "ImageInfo",
    "ImageResolver",
    "LinearDocument",
    "LocalImageResolver",
    "MarkdownConverter",
    "MarkdownParser",
    "ParseError",
    "Publication",
    "RecordError",
    "TextBlock",
    "UnsupportedBlockError",
    "UploadError",
    "flatten_pages",
    "placeholder_uploader",
    "wrap",
]
