"""Unweaver: document segmentation for qualitative text analysis."""

__version__ = "0.3.0"
