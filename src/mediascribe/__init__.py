"""mediascribe - Transcripts from media URLs via captions or speech-to-text."""

from mediascribe.core.pipeline import build_processor, process_url
from mediascribe.services.url_parser import classify

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "build_processor",
    "classify",
    "process_url",
]
