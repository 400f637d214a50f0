"""MarkdownConverter — markdown <-> leaflet blocks."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from noteleaf.config.models import ConverterConfig
from noteleaf.leaflet.models import BlockWrap
from noteleaf.leaflet.parser import MarkdownParser
from noteleaf.leaflet.resolver import ImageResolver
from noteleaf.leaflet.serializer import DocumentSerializer, ImageReference


class MarkdownConverter:
    """Converts note markdown to leaflet blocks and back.

    Instances are immutable: ``with_image_resolver`` returns a new converter
    and leaves this one untouched, so one instance can be shared between
    threads. A converter without a resolver never reads from disk.
    """

    def __init__(
        self,
        *,
        code_theme: str | None = None,
        image_reference: ImageReference | None = None,
        resolver: ImageResolver | None = None,
        note_dir: str | Path | None = None,
    ) -> None:
        self._code_theme = code_theme
        self._image_reference = image_reference
        self._resolver = resolver
        self._note_dir = Path(note_dir) if note_dir is not None else None

    @classmethod
    def from_config(cls, config: ConverterConfig) -> MarkdownConverter:
        return cls(code_theme=config.code_theme)

    @property
    def resolver(self) -> ImageResolver | None:
        return self._resolver

    @property
    def note_dir(self) -> Path | None:
        return self._note_dir

    def with_image_resolver(
        self, resolver: ImageResolver, note_dir: str | Path
    ) -> MarkdownConverter:
        """Return a copy that uploads local images through ``resolver``."""
        return MarkdownConverter(
            code_theme=self._code_theme,
            image_reference=self._image_reference,
            resolver=resolver,
            note_dir=note_dir,
        )

    def to_leaflet(self, markdown: str) -> tuple[BlockWrap, ...]:
        """Parse markdown into blocks. Raises ConversionError; never returns partial output."""
        parser = MarkdownParser(
            resolver=self._resolver,
            note_dir=self._note_dir,
            code_theme=self._code_theme,
        )
        return parser.parse(markdown)

    def from_leaflet(self, blocks: Iterable[BlockWrap]) -> str:
        """Render blocks as markdown. Raises UnsupportedBlockError for unknown variants."""
        return DocumentSerializer(self._image_reference).render(blocks)
