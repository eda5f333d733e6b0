"""
Entry point and facade for the letterhead merge pipeline.

This module exposes a stable API and a CLI.

Packages:
- letterhead.docs: node model, input files, DOCX/HTML read and write
- letterhead.extract: content extraction (text, markup, images)
- letterhead.formatting: FormattingSpec and styled paragraph building
- letterhead.image: embedded image decoding and sizing
- letterhead.pipeline: single merge (`merge_one`) and batch (`merge_many`)
"""

from __future__ import annotations

import sys
from typing import List

from letterhead.config import CONFIG_PATH as CONFIG_PATH, Settings, load_settings
from letterhead.docs import (
    DocumentFile,
    MergedDocument,
    format_file_size,
    load_document_file,
    render_docx,
    validate_document_file,
    write_docx,
)
from letterhead.errors import (
    BatchError,
    CompositionError,
    EmptyLetterheadError,
    EmptyTargetError,
    ExtractionError,
    ImageDecodeError,
    LetterheadMergeError,
    UnsupportedDocumentError,
)
from letterhead.extract import extract_content
from letterhead.formatting import FormattingSpec, ParagraphSpacing, apply_formatting
from letterhead.image import resolve_image
from letterhead.log import configure_logging, get_logger
from letterhead.pipeline import (
    PAGE_SIZE,
    export_merged,
    merge_many,
    merge_one,
    print_progress_bar,
)

__all__ = [
    # config
    "CONFIG_PATH",
    "Settings",
    "load_settings",
    # documents
    "DocumentFile",
    "MergedDocument",
    "load_document_file",
    "render_docx",
    "write_docx",
    # core operations
    "extract_content",
    "apply_formatting",
    "resolve_image",
    "merge_one",
    "merge_many",
    "export_merged",
    "FormattingSpec",
    "ParagraphSpacing",
    "PAGE_SIZE",
    # errors
    "LetterheadMergeError",
    "ExtractionError",
    "EmptyLetterheadError",
    "EmptyTargetError",
    "ImageDecodeError",
    "CompositionError",
    "BatchError",
]

logger = get_logger("letterhead.cli")


def _cli(argv: List[str] | None = None) -> None:
    """CLI for merging a letterhead into one or more documents.

    --letterhead / -l: Path to the letterhead document (docx|html|txt)
    --target / -t: One or more target documents
    --out-dir / -o: Output directory (default: merged)
    --config: JSON settings file (default: config/formatting.json)
    --font, --size, --color, --bold, --italic, --underline: run style overrides
    --align: left|center|right|justify
    --line-spacing, --space-before, --space-after, --char-spacing, --scale: layout overrides
    --page-size: Target paragraphs between letterhead repeats
    --verbose / -v: Debug logging
    """
    import argparse

    parser = argparse.ArgumentParser(description="Merge a letterhead into each target document, repeating it every N paragraphs.")
    parser.add_argument("--letterhead", "-l", type=str, required=True, help="Path to the letterhead document")
    parser.add_argument("--target", "-t", type=str, nargs="+", required=True, help="Target documents to merge")
    parser.add_argument("--out-dir", "-o", type=str, default="merged", help="Output directory (default: merged)")
    parser.add_argument("--config", type=str, default=None, help="Settings JSON file (default: config/formatting.json)")
    parser.add_argument("--font", type=str, help="Font family for target text")
    parser.add_argument("--size", type=float, help="Font size in points")
    parser.add_argument("--color", type=str, help="Text color as hex, e.g. #1F3864")
    parser.add_argument("--bold", action="store_true", default=None, help="Bold target text")
    parser.add_argument("--italic", action="store_true", default=None, help="Italic target text")
    parser.add_argument("--underline", action="store_true", default=None, help="Underline target text")
    parser.add_argument("--align", type=str, choices=["left", "center", "right", "justify"], help="Paragraph alignment")
    parser.add_argument("--line-spacing", type=float, help="Line spacing multiplier (1.0 = single)")
    parser.add_argument("--space-before", type=float, help="Space before each paragraph in points")
    parser.add_argument("--space-after", type=float, help="Space after each paragraph in points")
    parser.add_argument("--char-spacing", type=float, help="Character spacing in points")
    parser.add_argument("--scale", type=float, help="Horizontal text scale multiplier (1.0 = 100%%)")
    parser.add_argument("--page-size", type=int, default=None, help=f"Target paragraphs per page (default: {PAGE_SIZE})")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
    except LetterheadMergeError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)

    configure_logging("DEBUG" if args.verbose else settings.log_level)

    try:
        spec = settings.formatting.with_overrides(
            font_family=args.font,
            font_size_pt=args.size,
            color_hex=args.color,
            bold=args.bold,
            italic=args.italic,
            underline=args.underline,
            text_alignment=args.align,
            line_spacing=args.line_spacing,
            character_spacing_pt=args.char_spacing,
            scaling=args.scale,
            before_pt=args.space_before,
            after_pt=args.space_after,
        )
    except (TypeError, ValueError) as e:
        print(f"Invalid formatting option: {e}", file=sys.stderr)
        raise SystemExit(2)

    page_size = args.page_size if args.page_size is not None else settings.page_size
    if page_size < 1:
        print("--page-size must be at least 1", file=sys.stderr)
        raise SystemExit(2)

    try:
        letterhead = load_document_file(args.letterhead)
        targets = [load_document_file(path) for path in args.target]
        for doc in [letterhead, *targets]:
            validate_document_file(doc)
    except (FileNotFoundError, UnsupportedDocumentError) as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)

    logger.info("Letterhead: %s (%s)", letterhead.name, format_file_size(letterhead.size))

    def _progress(index: int, total: int) -> None:
        print_progress_bar(index, total, label=targets[index - 1].name)

    try:
        merged = merge_many(letterhead, targets, spec, on_progress=_progress, page_size=page_size)
    except BatchError as e:
        print()
        print(str(e), file=sys.stderr)
        raise SystemExit(1)
    print()

    for path in export_merged(merged, args.out_dir):
        print(f"Saved: {path}")
    for doc in merged:
        for note in doc.diagnostics:
            print(f"Warning ({doc.source_name}): {note}")


if __name__ == "__main__":
    _cli()
