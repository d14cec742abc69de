"""
Select/transform stage: caps the component list and maps it to sheet rows.
"""

from .rows import PublishBatch, apply_usages, build_batch, format_link, select_components

__all__ = ["PublishBatch", "apply_usages", "build_batch", "format_link", "select_components"]
