"""Sequential batch merging and export."""

from __future__ import annotations

import os
from typing import Callable, List, Optional, Sequence

from letterhead.docs.docx_io import write_docx
from letterhead.docs.files import DocumentFile
from letterhead.docs.model import MergedDocument
from letterhead.errors import BatchError
from letterhead.formatting import FormattingSpec
from letterhead.log import get_logger
from .merge import PAGE_SIZE, merge_one

logger = get_logger("letterhead.batch")

ProgressCallback = Callable[[int, int], None]


def print_progress_bar(done: int, total: int, label: str = "", width: int = 10) -> None:
    """Render a colored one-line progress bar.

    Doxygen:
    - @param done: Number of files started so far.
    - @param total: Total files.
    - @param label: Text shown after the counter (e.g. the file name).
    - @param width: Number of bar segments (default 10).
    """
    total = max(1, total)
    done = max(0, min(done, total))
    segments = max(1, int(width))
    filled = int(done / total * segments)
    pending = max(0, segments - filled)
    GREEN = "\x1b[32m"
    RED = "\x1b[31m"
    RESET = "\x1b[0m"
    bar = f"{GREEN}{'█'*filled}{RESET}{RED}{'█'*pending}{RESET} [{done}/{total}] {label}"
    print(f"\r{bar}", end="", flush=True)


def merge_many(
    letterhead: DocumentFile,
    targets: Sequence[DocumentFile],
    spec: Optional[FormattingSpec] = None,
    on_progress: Optional[ProgressCallback] = None,
    page_size: int = PAGE_SIZE,
) -> List[MergedDocument]:
    """Merge every target with the letterhead, one at a time.

    ``on_progress(index, total)`` is called with a 1-based index before each
    file. The first failure stops the batch; nothing is returned for files
    already merged.

    Doxygen:
    - @throws BatchError: Wrapping the first merge failure.
    """
    total = len(targets)
    merged: List[MergedDocument] = []
    for index, target in enumerate(targets, start=1):
        if on_progress is not None:
            on_progress(index, total)
        try:
            merged.append(merge_one(letterhead, target, spec, page_size=page_size))
        except Exception as exc:
            logger.error("Batch aborted at file %d/%d (%s): %s", index, total, target.name, exc)
            raise BatchError(index, target.name, exc) from exc
    logger.info("Batch finished: %d documents merged", len(merged))
    return merged


def export_merged(documents: Sequence[MergedDocument], out_dir: str) -> List[str]:
    """Write each merged document as .docx named by its source name."""
    os.makedirs(out_dir, exist_ok=True)
    paths: List[str] = []
    for doc in documents:
        name = doc.source_name
        if not name.lower().endswith(".docx"):
            name = os.path.splitext(name)[0] + ".docx"
        paths.append(write_docx(doc, os.path.join(out_dir, name)))
    return paths
