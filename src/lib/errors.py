"""
Error taxonomy for the directive engine.

Every engine error carries the 1-based line number at which it was
detected. Line numbers count every line read, including lines replayed
from a template; for those, the template name is kept as the origin.
"""

from typing import Optional


class PreprocessError(Exception):
    """Base class for all fatal preprocessing errors"""

    def __init__(self, message: str, line_number: int = 0, origin: Optional[str] = None):
        self.message = message
        self.line_number = line_number
        self.origin = origin
        super().__init__(self.location_describe())

    def location_describe(self) -> str:
        """
        Format the message with its source location.

        Example:
            >>> str(UnknownDirective("unknown directive 'fi'", 3))
            "line 3: unknown directive 'fi'"
            >>> str(UnknownTemplate("unknown template 'x'", 9, origin='outer'))
            "line 9 (in template 'outer'): unknown template 'x'"
        """
        where = f"line {self.line_number}"
        if self.origin:
            where += f" (in template '{self.origin}')"
        return f"{where}: {self.message}"


class UnexpectedEnd(PreprocessError):
    """An 'end' directive with no open block"""
    pass


class UnknownDirective(PreprocessError):
    """First directive token not recognized"""
    pass


class UnknownTemplate(PreprocessError):
    """Template replayed before it was defined"""
    pass


class MalformedReplace(PreprocessError):
    """'replace' without exactly a sentinel and a replacement"""
    pass


class MissingIfClause(PreprocessError):
    """'include' not followed by 'if'"""
    pass


class MissingArgument(PreprocessError):
    """Directive missing its required name or flag operand"""
    pass


class UnterminatedBlock(PreprocessError):
    """Input ended inside an 'if' or 'def' block (strict mode only)"""
    pass
