"""
Per-run scanning context

Bundles everything a handler or directive may consult or mutate during one
run: the flag environment, template store, replacement table, the prefix,
the directive registry and the line source (for error locations). A fresh
context is built for every run, so runs never share state.
"""

from typing import Any, Iterable, NoReturn, Optional, Type

from ..config import AppSettings, appsettings
from ..models.environment import FlagEnvironment, TemplateStore, ReplacementTable
from ..models.pragma import Pragma
from .errors import PreprocessError
from .source import LineSource


class ScanContext:
    """
    Run state threaded through every handler and directive call

    Attributes:
        flags: Flags that are on for this run
        templates: Templates captured so far
        replacements: Sentinel substitutions registered so far
        prefix: Directive prefix as bytes
        source: Line source being scanned
        registry: DirectiveRegistry used to dispatch directive lines
        settings: Application settings in effect
    """

    def __init__(
        self,
        flags: Iterable[str],
        prefix: str,
        source: LineSource,
        registry: Any,
        settings: Optional[AppSettings] = None,
    ):
        self.settings = settings or appsettings
        self.flags = FlagEnvironment(
            flags,
            always_flag=self.settings.always_flag,
            negation_marker=self.settings.negation_marker,
        )
        self.templates = TemplateStore()
        self.replacements = ReplacementTable()
        self.prefix: bytes = self.text_encode(prefix)
        self.source = source
        self.registry = registry

    def text_encode(self, text: str) -> bytes:
        return text.encode(self.settings.encoding, errors="surrogateescape")

    def prefix_in(self, line: bytes) -> bool:
        """Check if a line is a directive line"""
        return self.prefix in line

    def pragma_split(self, line: bytes) -> Pragma:
        """
        Split a directive line at the first prefix occurrence.

        Args:
            line: Raw line containing the prefix

        Returns:
            Pragma with the bytes before the prefix and the tokens after it

        Example:
            With prefix "//#":
            b"x = 1 //# omit if debug\\n" -> Pragma(b"x = 1 ", ["omit", "if", "debug"])
        """
        before, _, after = line.partition(self.prefix)
        tokens = after.decode(self.settings.encoding, errors="surrogateescape").split()
        return Pragma(before=before, tokens=tokens)

    def error(self, kind: Type[PreprocessError], message: str) -> NoReturn:
        """
        Raise an engine error located at the current line

        Raises:
            kind: Always, annotated with line number and template origin
        """
        raise kind(message, line_number=self.source.line_number, origin=self.source.origin)
