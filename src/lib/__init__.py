"""
pragmatext - Line-oriented directive preprocessor

Interprets prefix-marked directive lines: conditional blocks, named
templates and literal substitutions.
"""

__version__ = "1.0.0"

from .engine import Preprocessor, process, process_text
from .directives import DirectiveRegistry
from .errors import (
    PreprocessError,
    UnexpectedEnd,
    UnknownDirective,
    UnknownTemplate,
    MalformedReplace,
    MissingIfClause,
    MissingArgument,
    UnterminatedBlock,
)
from .log import LOG, state_connectToLogger

__all__ = [
    "Preprocessor",
    "process",
    "process_text",
    "DirectiveRegistry",
    "PreprocessError",
    "UnexpectedEnd",
    "UnknownDirective",
    "UnknownTemplate",
    "MalformedReplace",
    "MissingIfClause",
    "MissingArgument",
    "UnterminatedBlock",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
