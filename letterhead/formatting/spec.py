from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Mapping

from letterhead.docs.model import ALIGNMENTS

_NUMERIC_FIELDS = ("font_size_pt", "character_spacing_pt", "line_spacing", "scaling")
_STRING_FIELDS = ("font_family", "color_hex")
_FLAG_FIELDS = ("bold", "italic", "underline")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class ParagraphSpacing:
    before_pt: float = 0.0
    after_pt: float = 0.0

    def __post_init__(self) -> None:
        for name in ("before_pt", "after_pt"):
            value = getattr(self, name)
            if not _is_number(value):
                raise TypeError(f"paragraph_spacing.{name} must be a number, got {value!r}")


@dataclass(frozen=True)
class FormattingSpec:
    """Styling applied to every target paragraph of one merge call.

    Sizes are in points, ``line_spacing`` and ``scaling`` are multipliers
    (1.0 = single line / 100 %).
    """

    font_family: str = "Arial"
    font_size_pt: float = 12
    color_hex: str = "#000000"
    bold: bool = False
    italic: bool = False
    underline: bool = False
    character_spacing_pt: float = 0
    text_alignment: str = "left"
    line_spacing: float = 1.0
    paragraph_spacing: ParagraphSpacing = field(default_factory=ParagraphSpacing)
    scaling: float = 1.0

    def __post_init__(self) -> None:
        if self.text_alignment is not None and self.text_alignment not in ALIGNMENTS:
            raise ValueError(
                f"text_alignment must be one of {', '.join(ALIGNMENTS)}, got {self.text_alignment!r}"
            )
        for name in _NUMERIC_FIELDS:
            value = getattr(self, name)
            if value is not None and not _is_number(value):
                raise TypeError(f"{name} must be a number, got {value!r}")
        for name in _STRING_FIELDS:
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise TypeError(f"{name} must be a string, got {value!r}")
        for name in _FLAG_FIELDS:
            if not isinstance(getattr(self, name), bool):
                raise TypeError(f"{name} must be true or false, got {getattr(self, name)!r}")
        if isinstance(self.paragraph_spacing, Mapping):
            object.__setattr__(self, "paragraph_spacing", _spacing_from_dict(self.paragraph_spacing))
        elif not isinstance(self.paragraph_spacing, ParagraphSpacing):
            raise TypeError(f"paragraph_spacing must be a mapping, got {self.paragraph_spacing!r}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FormattingSpec":
        """Build a spec from a mapping, ignoring ``None`` values.

        Doxygen:
        - @param data: Keys named like the dataclass fields.
        - @return: New FormattingSpec with defaults for missing keys.
        - @throws ValueError: On unknown keys or an invalid alignment.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown formatting option(s): {', '.join(unknown)}")
        kwargs: Dict[str, Any] = {k: v for k, v in data.items() if v is not None}
        return cls(**kwargs)

    def with_overrides(self, **changes: Any) -> "FormattingSpec":
        """Return a copy with the non-None ``changes`` applied."""
        spacing = dict(before_pt=self.paragraph_spacing.before_pt, after_pt=self.paragraph_spacing.after_pt)
        for key in ("before_pt", "after_pt"):
            if changes.get(key) is not None:
                spacing[key] = changes[key]
            changes.pop(key, None)
        updates = {k: v for k, v in changes.items() if v is not None}
        updates["paragraph_spacing"] = ParagraphSpacing(**spacing)
        return replace(self, **updates)


def _spacing_from_dict(data: Mapping[str, Any]) -> ParagraphSpacing:
    unknown = sorted(set(data) - {"before_pt", "after_pt"})
    if unknown:
        raise ValueError(f"Unknown paragraph_spacing option(s): {', '.join(unknown)}")
    return ParagraphSpacing(
        before_pt=0.0 if data.get("before_pt") is None else data["before_pt"],
        after_pt=0.0 if data.get("after_pt") is None else data["after_pt"],
    )
