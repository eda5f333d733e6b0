"""Letterhead merging: compose a letterhead template with body documents.

Packages:
- letterhead.docs: node model, input files, DOCX/HTML collaborators
- letterhead.extract: content extraction with fallback text selection
- letterhead.formatting: FormattingSpec and the paragraph builder
- letterhead.image: embedded image decoding and sizing
- letterhead.pipeline: merge engine and batch orchestration
"""

__version__ = "0.1.0"
