"""Lexicon record codec: the only place `$type` strings are dispatched on."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from noteleaf.leaflet.errors import RecordError, UnsupportedBlockError
from noteleaf.leaflet.models import (
    BLOCK_TYPES,
    TYPE_BLOCK,
    TYPE_DOCUMENT,
    TYPE_LINEAR_DOCUMENT,
    BlockWrap,
    Document,
    LinearDocument,
)

_BLOCK_TAGS: frozenset[str] = frozenset(
    cls.model_fields["type"].default for cls in BLOCK_TYPES
)


def to_record(model: BaseModel) -> dict[str, Any]:
    """Dump a model the way the lexicon expects it on the wire."""
    return model.model_dump(by_alias=True, exclude_none=True, mode="json")


def block_from_record(record: Mapping[str, Any]) -> BlockWrap:
    """Decode a wrapped block record, or a bare block payload record."""
    if not isinstance(record, Mapping):
        raise RecordError(f"block record must be an object, got {type(record).__name__}")

    if record.get("$type") == TYPE_BLOCK:
        payload = record.get("block")
        alignment = record.get("alignment")
    else:
        payload = record
        alignment = None

    if not isinstance(payload, Mapping):
        raise RecordError("block record has no block payload")

    tag = payload.get("$type")
    if tag not in _BLOCK_TAGS:
        raise UnsupportedBlockError(str(tag))

    try:
        return BlockWrap(block=payload, alignment=alignment)
    except ValidationError as e:
        raise RecordError(f"invalid {tag} record: {e}") from e


def page_from_record(record: Mapping[str, Any]) -> LinearDocument:
    if not isinstance(record, Mapping):
        raise RecordError(f"page record must be an object, got {type(record).__name__}")
    blocks = record.get("blocks") or []
    if not isinstance(blocks, list):
        raise RecordError("page blocks must be a list")
    try:
        return LinearDocument(
            id=record.get("id"),
            blocks=tuple(block_from_record(b) for b in blocks),
        )
    except ValidationError as e:
        raise RecordError(f"invalid page record: {e}") from e


def document_from_record(record: Mapping[str, Any]) -> Document:
    if not isinstance(record, Mapping):
        raise RecordError(
            f"document record must be an object, got {type(record).__name__}"
        )
    pages = record.get("pages") or []
    if not isinstance(pages, list):
        raise RecordError("document pages must be a list")
    fields = {k: v for k, v in record.items() if k not in ("$type", "pages")}
    try:
        return Document(pages=tuple(page_from_record(p) for p in pages), **fields)
    except ValidationError as e:
        raise RecordError(f"invalid document record: {e}") from e


def blocks_from_json(text: str) -> list[BlockWrap]:
    """Decode a JSON document, page, or list of block records into blocks."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise RecordError(f"invalid JSON: {e}") from e

    if isinstance(data, list):
        return [block_from_record(b) for b in data]
    if isinstance(data, Mapping):
        tag = data.get("$type")
        if tag == TYPE_DOCUMENT:
            doc = document_from_record(data)
            return [wrap for page in doc.pages for wrap in page.blocks]
        if tag == TYPE_LINEAR_DOCUMENT:
            return list(page_from_record(data).blocks)
        return [block_from_record(data)]
    raise RecordError(f"expected a JSON object or list, got {type(data).__name__}")
