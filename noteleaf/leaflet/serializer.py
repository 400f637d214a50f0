"""Render leaflet blocks back to markdown."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import assert_never

from noteleaf.leaflet.errors import UnsupportedBlockError
from noteleaf.leaflet.models import (
    BLOCK_TYPES,
    BlockWrap,
    CodeBlock,
    Document,
    HeaderBlock,
    ImageBlock,
    TextBlock,
)

logger = logging.getLogger(__name__)

ImageReference = Callable[[ImageBlock], str]

_BLOCK_SEPARATOR = "\n\n"


def blob_link(block: ImageBlock) -> str:
    """Default image reference: the uploaded blob's content identifier."""
    return block.image.ref.link


def flatten_pages(document: Document) -> list[BlockWrap]:
    """All blocks of all pages, in page order. Page boundaries are not kept."""
    return [wrap for page in document.pages for wrap in page.blocks]


class DocumentSerializer:
    """Inverse of MarkdownParser for headers, paragraphs, code and images."""

    def __init__(self, image_reference: ImageReference | None = None) -> None:
        self._image_reference = image_reference or blob_link

    def render(self, blocks: Iterable[BlockWrap]) -> str:
        fragments = [self._render_block(wrap) for wrap in blocks]
        logger.debug("rendered %d blocks", len(fragments))
        return _BLOCK_SEPARATOR.join(fragments)

    def render_document(self, document: Document) -> str:
        return self.render(flatten_pages(document))

    def _render_block(self, wrap: BlockWrap) -> str:
        if not isinstance(wrap, BlockWrap):
            raise UnsupportedBlockError(wrap)

        block = wrap.block
        # wraps built with model_construct can hold anything
        if not isinstance(block, BLOCK_TYPES):
            raise UnsupportedBlockError(block)
        return self._render_payload(block)

    def _render_payload(
        self, block: HeaderBlock | TextBlock | CodeBlock | ImageBlock
    ) -> str:
        if isinstance(block, HeaderBlock):
            return "#" * block.level + " " + block.plaintext
        if isinstance(block, TextBlock):
            return block.plaintext
        if isinstance(block, CodeBlock):
            return "```" + (block.language or "") + "\n" + block.plaintext + "\n```"
        if isinstance(block, ImageBlock):
            return "![" + block.alt + "](" + self._image_reference(block) + ")"
        assert_never(block)
