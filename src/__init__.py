"""
pragmatext - Line-oriented directive preprocessor

Generates variant output files from one annotated source text.
"""

__version__ = "1.0.0"

from .lib import (
    Preprocessor,
    process,
    process_text,
    DirectiveRegistry,
    PreprocessError,
    LOG,
    state_connectToLogger,
)

__all__ = [
    "Preprocessor",
    "process",
    "process_text",
    "DirectiveRegistry",
    "PreprocessError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
