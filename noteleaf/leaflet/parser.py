"""Line-oriented markdown parser producing leaflet blocks."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from noteleaf.leaflet.errors import ConversionError, ParseError
from noteleaf.leaflet.models import (
    AspectRatio,
    BlockWrap,
    CodeBlock,
    HeaderBlock,
    ImageBlock,
    TextBlock,
    wrap,
)
from noteleaf.leaflet.resolver import ImageResolver

logger = logging.getLogger(__name__)

_HEADER_RE = re.compile(r"^(#{1,6})\s+(\S.*)$")
_FENCE_OPEN_RE = re.compile(r"^```([^`\s]*)$")
_FENCE_CLOSE = "```"
# A line holding nothing but one image: ![alt](path) or ![alt](path "title")
_IMAGE_RE = re.compile(r'^\s*!\[([^\]]*)\]\(\s*(\S+?)(?:\s+"[^"]*")?\s*\)\s*$')
# scheme://... or data:... references are never read from disk
_REMOTE_RE = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.-]*://|data:)")


class MarkdownParser:
    """Scans markdown line by line into an ordered tuple of blocks.

    Supports ATX headers, fenced code blocks, stand-alone images and plain
    paragraphs. Everything else is carried through as paragraph text.
    """

    def __init__(
        self,
        resolver: ImageResolver | None = None,
        note_dir: str | Path | None = None,
        code_theme: str | None = None,
    ) -> None:
        self._resolver = resolver
        self._note_dir = Path(note_dir) if note_dir is not None else None
        self._code_theme = code_theme

    def parse(self, markdown: str) -> tuple[BlockWrap, ...]:
        raw_lines = markdown.split("\n")
        # classification ignores a trailing CR; block text keeps the line as written
        lines = [line.removesuffix("\r") for line in raw_lines]
        blocks: list[BlockWrap] = []
        paragraph: list[str] = []

        def flush() -> None:
            if paragraph:
                blocks.append(wrap(TextBlock(plaintext="\n".join(paragraph))))
                paragraph.clear()

        i = 0
        while i < len(lines):
            line = lines[i]

            if not line.strip():
                flush()
                i += 1
                continue

            header = _HEADER_RE.match(line)
            if header:
                flush()
                blocks.append(
                    wrap(
                        HeaderBlock(
                            level=len(header.group(1)),
                            plaintext=header.group(2).strip(),
                        )
                    )
                )
                i += 1
                continue

            fence = _FENCE_OPEN_RE.match(line)
            if fence:
                flush()
                code, i = self._read_fence(lines, raw_lines, i, fence.group(1))
                blocks.append(wrap(code))
                continue

            image = _IMAGE_RE.match(line)
            resolver = self._resolver
            if image and resolver is not None and self._should_resolve(image.group(2)):
                flush()
                blocks.append(
                    wrap(self._resolve_image(resolver, image.group(1), image.group(2)))
                )
                i += 1
                continue

            paragraph.append(raw_lines[i])
            i += 1

        flush()
        logger.debug("parsed %d blocks from %d lines", len(blocks), len(lines))
        return tuple(blocks)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _read_fence(
        self, lines: list[str], raw_lines: list[str], start: int, language: str
    ) -> tuple[CodeBlock, int]:
        """Consume a fenced block opened at ``start``; return it and the next index."""
        for end in range(start + 1, len(lines)):
            if lines[end] == _FENCE_CLOSE:
                code = CodeBlock(
                    plaintext="\n".join(raw_lines[start + 1 : end]),
                    language=language or None,
                    syntax_highlighting_theme=self._code_theme,
                )
                return code, end + 1
        raise ParseError("unterminated code fence", line=start + 1)

    def _should_resolve(self, ref: str) -> bool:
        if _REMOTE_RE.match(ref):
            logger.warning("leaving remote image as text: %s", ref)
            return False
        return True

    def _image_path(self, ref: str) -> Path:
        path = Path(ref)
        if not path.is_absolute() and self._note_dir is not None:
            path = self._note_dir / path
        return path

    def _resolve_image(self, resolver: ImageResolver, alt: str, ref: str) -> ImageBlock:
        path = self._image_path(ref)
        try:
            info = resolver.resolve_image(path)
        except ConversionError:
            raise
        except Exception as e:
            raise ParseError(f"failed to resolve image: {e}", path=ref) from e

        return ImageBlock(
            image=info.blob,
            alt=alt,
            aspect_ratio=AspectRatio(width=info.width, height=info.height),
        )
