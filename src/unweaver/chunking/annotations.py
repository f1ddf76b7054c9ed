"""
Merging enrichment results back onto chunks.

Theme, sentiment and tag assignment happen outside this package; their
results come back keyed by chunk id and are merged here without touching
chunk order or identity.
"""

from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

from ..core.logging import log
from ..core.models import Chunk


class ChunkAnnotation(BaseModel):
    chunk_id: str
    tags: list[str] | None = None
    sentiment: float | None = None
    analysis: str | None = None


def apply_annotations(chunks: List[Chunk], annotations: Iterable[ChunkAnnotation]) -> List[Chunk]:
    """Return chunks with annotations merged in by id.

    Fields left as None on an annotation keep the chunk's current value.
    Annotations for ids that are not present are dropped.
    """
    by_id: Dict[str, ChunkAnnotation] = {a.chunk_id: a for a in annotations}
    known = {chunk.id for chunk in chunks}
    unknown = sorted(set(by_id) - known)
    if unknown:
        log.warning("annotations.unknown_ids", count=len(unknown), chunk_ids=unknown[:10])

    merged = []
    for chunk in chunks:
        annotation = by_id.get(chunk.id)
        if annotation is None:
            merged.append(chunk)
            continue

        update = annotation.model_dump(exclude={"chunk_id"}, exclude_none=True)
        update["is_analyzed"] = True
        merged.append(chunk.model_copy(update=update))

    log.info("annotations.merged", annotated=len(by_id) - len(unknown), chunks=len(chunks))
    return merged


def _replace_chunk(chunks: List[Chunk], chunk_id: str, tags: List[str]) -> List[Chunk]:
    return [c.model_copy(update={"tags": tags}) if c.id == chunk_id else c for c in chunks]


def _find(chunks: List[Chunk], chunk_id: str) -> Optional[Chunk]:
    return next((c for c in chunks if c.id == chunk_id), None)


def realign_tag(chunks: List[Chunk], chunk_id: str, old_tag: str, new_tag: str) -> List[Chunk]:
    """Move a chunk from one tag to another (no-op for unknown ids)."""
    chunk = _find(chunks, chunk_id)
    if chunk is None:
        return chunks

    tags = [t for t in chunk.tags if t != old_tag]
    if new_tag not in tags:
        tags.append(new_tag)
    return _replace_chunk(chunks, chunk_id, tags)


def remove_tag(chunks: List[Chunk], chunk_id: str, tag: str) -> List[Chunk]:
    chunk = _find(chunks, chunk_id)
    if chunk is None:
        return chunks
    return _replace_chunk(chunks, chunk_id, [t for t in chunk.tags if t != tag])


def index_by_source(chunks: Iterable[Chunk]) -> Dict[str, List[Chunk]]:
    """Group chunks by source label, keeping first-seen label order."""
    groups: Dict[str, List[Chunk]] = {}
    for chunk in chunks:
        groups.setdefault(chunk.source_label or "", []).append(chunk)
    return groups
