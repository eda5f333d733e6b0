from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

ALIGNMENTS = ("left", "center", "right", "justify")


@dataclass(frozen=True)
class StyleAttributes:
    """Run-level style, stored in the units the DOCX writer emits."""

    font_family: Optional[str] = None
    size_half_points: Optional[int] = None
    color_hex: Optional[str] = None
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    character_spacing_twips: Optional[int] = None
    scale_percent: Optional[int] = None

    def is_plain(self) -> bool:
        return all(
            value is None
            for value in (
                self.font_family,
                self.size_half_points,
                self.color_hex,
                self.bold,
                self.italic,
                self.underline,
                self.character_spacing_twips,
                self.scale_percent,
            )
        )


@dataclass(frozen=True)
class TextRun:
    text: str
    style: StyleAttributes = field(default_factory=StyleAttributes)


@dataclass(frozen=True)
class ImageAsset:
    # raw bytes, or a base64 payload as found in markup
    data: Union[bytes, str]
    mime_type: str = "png"
    width_px: Optional[int] = None
    height_px: Optional[int] = None
    alt_text: Optional[str] = None


@dataclass(frozen=True)
class ImageRun:
    asset: ImageAsset
    data: bytes
    width_px: int
    height_px: int
    mime_type: str


@dataclass(frozen=True)
class BreakRun:
    kind: str = "page"


RunNode = Union[TextRun, ImageRun, BreakRun]


@dataclass(frozen=True)
class ParagraphFormat:
    spacing_before_twips: Optional[int] = None
    spacing_after_twips: Optional[int] = None
    line_spacing_240ths: Optional[int] = None


@dataclass(frozen=True)
class ParagraphNode:
    """A non-empty sequence of runs plus paragraph layout.

    Construction rejects an empty run sequence, so every instance that
    exists satisfies ``len(runs) >= 1``.
    """

    runs: Tuple[RunNode, ...]
    alignment: Optional[str] = None
    format: ParagraphFormat = field(default_factory=ParagraphFormat)

    def __post_init__(self) -> None:
        runs = tuple(self.runs or ())
        if not runs:
            raise ValueError("ParagraphNode requires at least one run")
        for run in runs:
            if not isinstance(run, (TextRun, ImageRun, BreakRun)):
                raise TypeError(f"Unsupported run type: {type(run).__name__}")
        if self.alignment is not None and self.alignment not in ALIGNMENTS:
            raise ValueError(f"Unknown alignment: {self.alignment!r}")
        object.__setattr__(self, "runs", runs)

    @classmethod
    def plain(cls, text: str) -> "ParagraphNode":
        """Unstyled single-run paragraph, text kept as given."""
        return cls(runs=(TextRun(text=text),))

    @classmethod
    def spacer(cls) -> "ParagraphNode":
        return cls(runs=(TextRun(text=""),))

    @classmethod
    def page_break(cls) -> "ParagraphNode":
        return cls(runs=(BreakRun(),))

    @classmethod
    def image(cls, run: ImageRun, alignment: str = "center") -> "ParagraphNode":
        return cls(runs=(run,), alignment=alignment)

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs if isinstance(run, TextRun))

    @property
    def has_image(self) -> bool:
        return any(isinstance(run, ImageRun) for run in self.runs)

    @property
    def is_page_break(self) -> bool:
        return any(isinstance(run, BreakRun) for run in self.runs)

    def has_content(self) -> bool:
        """True when the paragraph renders visible text or an image."""
        return self.has_image or bool(self.text.strip())


@dataclass(frozen=True)
class ExtractedContent:
    paragraphs: Tuple[ParagraphNode, ...] = ()
    raw_text: str = ""
    images: Tuple[ImageAsset, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "paragraphs", tuple(self.paragraphs))
        object.__setattr__(self, "images", tuple(self.images))

    def paragraph_texts(self) -> List[str]:
        return [p.text for p in self.paragraphs]


@dataclass(frozen=True)
class MergedDocument:
    source_name: str
    nodes: Tuple[ParagraphNode, ...]
    diagnostics: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "diagnostics", tuple(self.diagnostics))

    def texts(self) -> List[str]:
        """Text of every text paragraph in order; spacers appear as ''."""
        return [
            node.text
            for node in self.nodes
            if not node.has_image and not node.is_page_break
        ]

    def image_count(self) -> int:
        return sum(1 for node in self.nodes if node.has_image)

    def page_break_count(self) -> int:
        return sum(1 for node in self.nodes if node.is_page_break)
