"""High-level orchestration: single merge and sequential batch."""

from .merge import (
    PAGE_SIZE,
    Letterhead,
    compose_nodes,
    extract_target_texts,
    load_letterhead,
    merge_one,
    resolve_letterhead_images,
    select_letterhead_paragraphs,
    validate_composition,
)
from .batch import export_merged, merge_many, print_progress_bar

__all__ = [
    "PAGE_SIZE",
    "Letterhead",
    "compose_nodes",
    "extract_target_texts",
    "load_letterhead",
    "merge_one",
    "resolve_letterhead_images",
    "select_letterhead_paragraphs",
    "validate_composition",
    "export_merged",
    "merge_many",
    "print_progress_bar",
]
