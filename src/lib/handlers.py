"""
Line handlers and the state stack

The handler on top of the stack receives every line read. Three variants
exist:

    DefaultHandler  - emits ordinary lines, dispatches directive lines
    SkipHandler     - discards lines of a false 'if' block
    CaptureHandler  - records the body of a 'def' block

Handlers never touch the stack themselves. They return a Transition and the
engine applies it, so each variant can be exercised on its own in tests.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..models.pragma import Transition
from .context import ScanContext
from .errors import UnexpectedEnd


@dataclass
class Handler:
    """
    Base handler

    Attributes:
        block: Directive that opened this scope ('if', 'def'), None for the base
        opened_at: Line number of the opening directive
    """
    block: Optional[str] = None
    opened_at: int = 0

    def handle(self, line: bytes, context: ScanContext) -> Transition:
        raise NotImplementedError

    def describe(self) -> str:
        return f"'{self.block}' block opened at line {self.opened_at}"


@dataclass
class DefaultHandler(Handler):
    """Neutral handler: substitute and emit text, interpret directives"""

    def handle(self, line: bytes, context: ScanContext) -> Transition:
        if not context.prefix_in(line):
            return Transition.emit(context.replacements.replacements_apply(line))
        return context.registry.dispatch(context.pragma_split(line), context)


@dataclass
class SkipHandler(Handler):
    """
    Discard lines until the 'end' matching the opening 'if'.

    A nested 'if' inside the skipped region pushes another SkipHandler, so
    its 'end' pops that one and skipping continues until the outer 'end'.
    """

    def handle(self, line: bytes, context: ScanContext) -> Transition:
        if not context.prefix_in(line):
            return Transition()

        pragma = context.pragma_split(line)
        if pragma.name == "end":
            return Transition.pop()
        if pragma.name == "if":
            return Transition.push(SkipHandler(block="if", opened_at=context.source.line_number))
        return Transition()


@dataclass
class CaptureHandler(Handler):
    """
    Record raw lines of a 'def' block until 'enddef'.

    Captured lines are neither substituted nor interpreted; a 'def' seen
    while capturing is recorded as text and the first 'enddef' closes the
    block.
    """
    name: str = ""
    buffer: bytearray = field(default_factory=bytearray)

    def handle(self, line: bytes, context: ScanContext) -> Transition:
        if context.prefix_in(line) and context.pragma_split(line).name == "enddef":
            context.templates.template_store(self.name, bytes(self.buffer))
            return Transition.pop()

        self.buffer += line
        return Transition()

    def describe(self) -> str:
        return f"'def {self.name}' block opened at line {self.opened_at}"


class StateStack:
    """
    Ordered handlers, base handler at the bottom

    The stack is never empty: popping the base handler is an UnexpectedEnd.
    """

    def __init__(self, base: Optional[Handler] = None):
        self.handlers: List[Handler] = [base or DefaultHandler()]

    @property
    def top(self) -> Handler:
        return self.handlers[-1]

    def state_push(self, handler: Handler) -> None:
        self.handlers.append(handler)

    def state_pop(self, context: ScanContext) -> Handler:
        if len(self.handlers) == 1:
            context.error(UnexpectedEnd, "unexpected end directive")
        return self.handlers.pop()

    def openBlocks_get(self) -> List[Handler]:
        """Handlers above the base, innermost last"""
        return self.handlers[1:]

    def __len__(self) -> int:
        return len(self.handlers)
