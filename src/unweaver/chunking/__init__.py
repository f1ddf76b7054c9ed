"""
Unweaver Chunking Package

Granularity-driven segmentation of text, Markdown and tabular documents,
with heading analysis and merging of enrichment results by chunk id.
"""

from .annotations import ChunkAnnotation, apply_annotations, index_by_source, realign_tag, remove_tag
from .boundaries import split_flat
from .engine import SegmentationError, segment, split_sections
from .headings import (
    SegmentationSuggestion,
    analyze_heading_levels,
    suggest_segmentation,
    suggest_split_level,
)

__all__ = [
    "ChunkAnnotation",
    "SegmentationError",
    "SegmentationSuggestion",
    "analyze_heading_levels",
    "apply_annotations",
    "index_by_source",
    "realign_tag",
    "remove_tag",
    "segment",
    "split_flat",
    "split_sections",
    "suggest_segmentation",
    "suggest_split_level",
]
