"""
Directive-line and handler-transition data models

Type-safe structures passed between the line handlers, the directive
interpreter and the engine loop.
"""

from enum import Enum
from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..lib.handlers import Handler


@dataclass
class Pragma:
    """
    A directive line split at the first prefix occurrence

    Attributes:
        before: Raw bytes preceding the prefix (kept by omit/include)
        tokens: Whitespace-separated tokens following the prefix

    Example:
        For line b"value = 1 //# omit if debug\\n" with prefix "//#":
        Pragma(before=b"value = 1 ", tokens=["omit", "if", "debug"])
    """
    before: bytes
    tokens: List[str]

    @property
    def name(self) -> str:
        """Directive name, or '' when nothing follows the prefix"""
        return self.tokens[0] if self.tokens else ""

    @property
    def args(self) -> List[str]:
        return self.tokens[1:]

    def arg_get(self, index: int) -> Optional[str]:
        """Argument at index (0 = first token after the name), or None"""
        args = self.args
        return args[index] if index < len(args) else None


class Action(Enum):
    """What the engine does with the state stack after a line is handled"""
    CONTINUE = "continue"
    PUSH = "push"
    POP = "pop"


@dataclass
class Transition:
    """
    Result of handing one line to the handler on top of the stack

    Attributes:
        action: Stack operation to perform
        handler: Handler to push (PUSH only)
        output: Bytes to append to the output buffer
        inject: Bytes to read back as input before the rest of the stream
        origin: Name of the template the injected bytes came from
    """
    action: Action = Action.CONTINUE
    handler: Optional["Handler"] = None
    output: bytes = b""
    inject: Optional[bytes] = None
    origin: Optional[str] = None

    @classmethod
    def push(cls, handler: "Handler") -> "Transition":
        return cls(action=Action.PUSH, handler=handler)

    @classmethod
    def pop(cls) -> "Transition":
        return cls(action=Action.POP)

    @classmethod
    def emit(cls, output: bytes) -> "Transition":
        return cls(output=output)
