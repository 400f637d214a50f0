"""Tests for DocumentSerializer: blocks -> markdown."""

from __future__ import annotations

import pytest
from pydantic import BaseModel

from noteleaf.leaflet.errors import UnsupportedBlockError
from noteleaf.leaflet.models import (
    BLOCK_TYPES,
    AspectRatio,
    Blob,
    BlockWrap,
    CID,
    CodeBlock,
    Document,
    HeaderBlock,
    ImageBlock,
    LinearDocument,
    TextBlock,
    wrap,
)
from noteleaf.leaflet.serializer import DocumentSerializer, flatten_pages


def _image(alt: str = "chart") -> ImageBlock:
    return ImageBlock(
        image=Blob(ref=CID(link="bafkreiimg"), mime_type="image/png", size=3),
        alt=alt,
        aspect_ratio=AspectRatio(width=4, height=3),
    )


class _Blockquote(BaseModel):
    type: str = "pub.leaflet.blocks.blockquote"
    plaintext: str = "quoted"


class TestRender:
    def test_empty(self):
        assert DocumentSerializer().render([]) == ""

    def test_header_and_text(self):
        blocks = [
            wrap(HeaderBlock(level=1, plaintext="Main Title")),
            wrap(TextBlock(plaintext="Content here")),
        ]
        assert DocumentSerializer().render(blocks) == "# Main Title\n\nContent here"

    def test_header_levels(self):
        assert DocumentSerializer().render([wrap(HeaderBlock(level=4, plaintext="Deep"))]) == "#### Deep"

    def test_code_with_language(self):
        blocks = [wrap(CodeBlock(language="go", plaintext='fmt.Println("hello")'))]
        assert DocumentSerializer().render(blocks) == '```go\nfmt.Println("hello")\n```'

    def test_code_without_language(self):
        assert DocumentSerializer().render([wrap(CodeBlock(plaintext="x"))]) == "```\nx\n```"

    def test_text_unchanged(self):
        text = "line one\nline two with *stars*"
        assert DocumentSerializer().render([wrap(TextBlock(plaintext=text))]) == text

    def test_image_uses_blob_link_by_default(self):
        assert DocumentSerializer().render([wrap(_image())]) == "![chart](bafkreiimg)"

    def test_image_reference_is_injectable(self):
        serializer = DocumentSerializer(image_reference=lambda b: f"attachments/{b.alt}.png")
        assert serializer.render([wrap(_image())]) == "![chart](attachments/chart.png)"

    def test_no_leading_or_trailing_blank_lines(self):
        out = DocumentSerializer().render(
            [wrap(TextBlock(plaintext="a")), wrap(TextBlock(plaintext="b"))]
        )
        assert not out.startswith("\n")
        assert not out.endswith("\n")
        assert out == "a\n\nb"

    def test_every_block_type_renders(self):
        samples = {
            HeaderBlock: (HeaderBlock(level=1, plaintext="H"), "# H"),
            TextBlock: (TextBlock(plaintext="body"), "body"),
            CodeBlock: (CodeBlock(language="py", plaintext="x = 1"), "```py\nx = 1\n```"),
            ImageBlock: (_image(), "![chart](bafkreiimg)"),
        }
        assert set(samples) == set(BLOCK_TYPES)
        for block, expected in samples.values():
            assert DocumentSerializer().render([wrap(block)]) == expected


class TestUnsupportedBlocks:
    def test_unknown_payload_raises(self):
        bad = BlockWrap.model_construct(block=_Blockquote())
        with pytest.raises(UnsupportedBlockError) as exc_info:
            DocumentSerializer().render([wrap(TextBlock(plaintext="ok")), bad])
        assert exc_info.value.block_type == "pub.leaflet.blocks.blockquote"

    def test_non_wrap_item_raises(self):
        with pytest.raises(UnsupportedBlockError):
            DocumentSerializer().render([TextBlock(plaintext="bare")])


class TestDocuments:
    def test_pages_flatten_without_markers(self):
        doc = Document(
            author="did:plc:abc",
            title="Two pages",
            pages=[
                LinearDocument(blocks=[wrap(TextBlock(plaintext="Page one"))]),
                LinearDocument(blocks=[wrap(TextBlock(plaintext="Page two"))]),
            ],
        )
        assert DocumentSerializer().render_document(doc) == "Page one\n\nPage two"

    def test_flatten_keeps_page_order(self):
        doc = Document(
            author="did:plc:abc",
            title="t",
            pages=[
                LinearDocument(blocks=[wrap(HeaderBlock(level=1, plaintext="A"))]),
                LinearDocument(),
                LinearDocument(
                    blocks=[wrap(TextBlock(plaintext="B")), wrap(TextBlock(plaintext="C"))]
                ),
            ],
        )
        assert [w.block.plaintext for w in flatten_pages(doc)] == ["A", "B", "C"]

    def test_empty_document(self):
        assert DocumentSerializer().render_document(Document(author="x", title="t")) == ""
