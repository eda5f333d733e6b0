"""Merge one target document with a letterhead.

Output order for a single merge:

1. letterhead images (center aligned), letterhead paragraphs,
2. two spacer paragraphs,
3. target paragraphs; before every ``page_size``-th target paragraph a
   page break, the letterhead images and paragraphs and two spacers are
   inserted again.

Letterhead paragraphs keep their source styling and are never passed
through the formatting applier. The same letterhead node values are
reused for every repeat within one merge.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from letterhead.docs.files import DocumentFile, validate_document_file
from letterhead.docs.model import ExtractedContent, ImageAsset, MergedDocument, ParagraphNode
from letterhead.docs.txt import split_paragraph_texts
from letterhead.errors import (
    CompositionError,
    EmptyLetterheadError,
    EmptyTargetError,
    ImageDecodeError,
    NoContentError,
)
from letterhead.extract import extract_content
from letterhead.formatting import FormattingSpec, apply_formatting
from letterhead.image import resolve_image
from letterhead.log import get_logger

logger = get_logger("letterhead.merge")

PAGE_SIZE = 20
SPACERS_AFTER_LETTERHEAD = 2
OUTPUT_PREFIX = "merged_"


@dataclass(frozen=True)
class Letterhead:
    """Letterhead nodes, built once per merge and reused for every page."""

    images: Tuple[ParagraphNode, ...]
    paragraphs: Tuple[ParagraphNode, ...]
    diagnostics: Tuple[str, ...] = ()

    def nodes(self) -> List[ParagraphNode]:
        return list(self.images) + list(self.paragraphs)


def select_letterhead_paragraphs(content: ExtractedContent) -> List[ParagraphNode]:
    """Pick letterhead paragraphs without applying any formatting.

    Priority: extracted paragraphs, then raw text split on line breaks,
    then the whole trimmed raw text as one paragraph.
    """
    if content.paragraphs:
        return list(content.paragraphs)

    lines = split_paragraph_texts(content.raw_text)
    if lines:
        logger.info("Letterhead has no parsed paragraphs, using %d raw text lines", len(lines))
        return [ParagraphNode.plain(line) for line in lines]

    whole = (content.raw_text or "").strip()
    if whole:
        logger.info("Letterhead raw text has no line breaks, using it as one paragraph")
        return [ParagraphNode.plain(whole)]

    raise EmptyLetterheadError("No letterhead content could be extracted")


def resolve_letterhead_images(assets: Sequence[ImageAsset]) -> Tuple[List[ParagraphNode], List[str]]:
    """Resolve images into center-aligned paragraphs, skipping broken ones.

    Doxygen:
    - @param assets: Letterhead image assets in document order.
    - @return: (image paragraphs, diagnostics for skipped images).
    """
    nodes: List[ParagraphNode] = []
    diagnostics: List[str] = []
    for index, asset in enumerate(assets, start=1):
        try:
            run = resolve_image(asset)
        except ImageDecodeError as exc:
            message = f"Skipped letterhead image {index} ({asset.alt_text or 'no alt text'}): {exc}"
            logger.warning(message)
            diagnostics.append(message)
            continue
        nodes.append(ParagraphNode.image(run, alignment="center"))
    return nodes, diagnostics


def load_letterhead(letterhead: DocumentFile) -> Letterhead:
    kind = validate_document_file(letterhead)
    try:
        content = extract_content(letterhead.data, kind)
    except NoContentError as exc:
        raise EmptyLetterheadError(
            f"Failed to extract any content from letterhead file: {letterhead.name}"
        ) from exc

    paragraphs = select_letterhead_paragraphs(content)
    images, diagnostics = resolve_letterhead_images(content.images)
    logger.debug(
        "Letterhead %s: %d paragraphs, %d/%d images",
        letterhead.name, len(paragraphs), len(images), len(content.images),
    )
    return Letterhead(images=tuple(images), paragraphs=tuple(paragraphs), diagnostics=tuple(diagnostics))


def extract_target_texts(target: DocumentFile) -> List[str]:
    """Paragraph texts of the target; its parsed structure and images are ignored."""
    kind = validate_document_file(target)
    try:
        content = extract_content(target.data, kind)
    except NoContentError as exc:
        raise EmptyTargetError(f"Target document has no content: {target.name}") from exc
    texts = split_paragraph_texts(content.raw_text)
    if not texts:
        raise EmptyTargetError(f"Target document has no paragraphs: {target.name}")
    return texts


def _spacers() -> List[ParagraphNode]:
    return [ParagraphNode.spacer() for _ in range(SPACERS_AFTER_LETTERHEAD)]


def compose_nodes(
    letterhead: Letterhead,
    body: Sequence[ParagraphNode],
    page_size: int = PAGE_SIZE,
) -> List[ParagraphNode]:
    """Interleave letterhead and body paragraphs.

    The repeat check runs only between body paragraphs and counts body
    paragraphs alone, so ``T`` body paragraphs produce
    ``(T - 1) // page_size`` repeats.
    """
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    header = letterhead.nodes()
    nodes: List[ParagraphNode] = header + _spacers()
    for emitted, paragraph in enumerate(body):
        if emitted > 0 and emitted % page_size == 0:
            nodes.append(ParagraphNode.page_break())
            nodes.extend(header)
            nodes.extend(_spacers())
        nodes.append(paragraph)
    return nodes


def validate_composition(nodes: Sequence[ParagraphNode]) -> None:
    if not nodes:
        raise CompositionError("Cannot create document: composed sequence is empty")
    if not any(node.has_content() for node in nodes):
        raise CompositionError("Composed document contains only spacer paragraphs")


def merge_one(
    letterhead: DocumentFile,
    target: DocumentFile,
    spec: Optional[FormattingSpec] = None,
    page_size: int = PAGE_SIZE,
) -> MergedDocument:
    """Compose ``target`` under ``letterhead`` into one MergedDocument.

    Doxygen:
    - @param letterhead: Letterhead template file.
    - @param target: Body document whose text is reformatted.
    - @param spec: Formatting for target paragraphs (defaults when None).
    - @param page_size: Target paragraphs between letterhead repeats.
    - @return: MergedDocument named ``merged_<target name>``.
    - @throws EmptyLetterheadError: Letterhead yields no paragraphs.
    - @throws EmptyTargetError: Target yields no paragraph texts.
    - @throws CompositionError: Result would render blank.
    """
    spec = spec if spec is not None else FormattingSpec()
    head = load_letterhead(letterhead)
    texts = extract_target_texts(target)
    body = [apply_formatting(text, spec) for text in texts]

    nodes = compose_nodes(head, body, page_size=page_size)
    validate_composition(nodes)
    logger.info(
        "Merged %s: %d target paragraphs, %d nodes, %d letterhead repeats",
        target.name, len(body), len(nodes), (len(body) - 1) // page_size,
    )
    return MergedDocument(
        source_name=OUTPUT_PREFIX + target.name,
        nodes=tuple(nodes),
        diagnostics=head.diagnostics,
    )
