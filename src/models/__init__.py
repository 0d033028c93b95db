"""
Models package for pragmatext

Contains data structures and type definitions for the preprocessing pipeline.
"""

from .state import ProgramState, pipeline
from .directives import DirectiveSpec, DirectiveCategory, TERMINATOR_DIRECTIVES
from .pragma import Pragma, Action, Transition
from .environment import FlagEnvironment, TemplateStore, ReplacementTable

__all__ = [
    "ProgramState",
    "pipeline",
    "DirectiveSpec",
    "DirectiveCategory",
    "TERMINATOR_DIRECTIVES",
    "Pragma",
    "Action",
    "Transition",
    "FlagEnvironment",
    "TemplateStore",
    "ReplacementTable",
]
