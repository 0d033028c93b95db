"""
Directive specification and metadata models

Defines the structure and categories of pragmatext directives for
dispatch, validation and registry management.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, List, Set


class DirectiveCategory(Enum):
    """
    Categories of pragmatext directives

    Used for organization and listing.
    """
    STRUCTURAL = "structural"      # end
    CONDITIONAL = "conditional"    # if, omit, include
    TEMPLATE = "template"          # def, template
    SUBSTITUTION = "substitution"  # replace


@dataclass
class DirectiveSpec:
    """
    Specification for a pragmatext directive

    Attributes:
        name: Directive name (first token after the prefix)
        category: Category for organization
        description: Human-readable description
        handler: Interpreter function (pragma, context) -> Transition
        examples: Example usage strings (without the prefix)
    """
    name: str
    category: DirectiveCategory
    description: str
    handler: Callable
    examples: List[str] = field(default_factory=list)


# Terminator tokens recognized only by the handler that owns the block
TERMINATOR_DIRECTIVES: Set[str] = {
    'enddef',  # closes a def capture block
}


def terminator_is(directive_name: str) -> bool:
    """Check if a directive name is a block terminator"""
    return directive_name in TERMINATOR_DIRECTIVES
