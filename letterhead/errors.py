"""Exception taxonomy for letterhead merging.

Everything raised on purpose by this package derives from
``LetterheadMergeError`` so callers can catch a single base class.
"""

from __future__ import annotations

from typing import Optional


class LetterheadMergeError(Exception):
    """Base class for all merge failures."""


class ExtractionError(LetterheadMergeError):
    """Input bytes could not be decoded into any text."""


class NoContentError(ExtractionError):
    """Input decoded fine but holds no text at all."""


class EmptyLetterheadError(LetterheadMergeError):
    """Letterhead produced zero usable paragraphs."""


class EmptyTargetError(LetterheadMergeError):
    """Target document produced zero usable paragraph texts."""


class ImageDecodeError(LetterheadMergeError):
    """An embedded image payload is not decodable. Recoverable."""


class CompositionError(LetterheadMergeError):
    """The composed node sequence carries no real content."""


class UnsupportedDocumentError(LetterheadMergeError, ValueError):
    """File kind is not one of the accepted document kinds."""


class ConfigError(LetterheadMergeError):
    """Configuration file is malformed or holds invalid values."""


class BatchError(LetterheadMergeError):
    """Wraps the first fatal error of a batch run.

    Doxygen:
    - @param index: 1-based position of the failing target file.
    - @param name: File name of the failing target.
    - @param cause: The original exception.
    """

    def __init__(self, index: int, name: str, cause: Optional[BaseException] = None) -> None:
        self.index = index
        self.name = name
        self.cause = cause
        reason = str(cause) if cause is not None else "unknown error"
        super().__init__(f"Failed to merge file {index} ({name}): {reason}")
