"""
Preprocessing engine

Drives the line source and the state stack over one input:

    caller -> Preprocessor.process(stream)
        build ScanContext (flags + always-on flag, empty stores)
        for each line: top handler -> Transition -> apply to stack/output/source
        -> output bytes, or the first error raised

Example:
    >>> process(b"a\\n//# if debug\\nb\\n//# end\\n", flags={"debug"}, prefix="//#")
    b'a\\nb\\n'
"""

import io
from typing import BinaryIO, Iterable, Optional, Union

from ..config import AppSettings, appsettings
from ..models.pragma import Action, Transition
from .context import ScanContext
from .directives import DirectiveRegistry
from .errors import UnterminatedBlock
from .handlers import StateStack
from .log import LOG
from .source import LineSource


InputStream = Union[BinaryIO, bytes, bytearray]


class Preprocessor:
    """
    Directive interpreter for one flag set and prefix

    A Preprocessor holds configuration only. Every call to process() starts
    from empty template and replacement stores, so one instance can process
    any number of inputs independently.
    """

    def __init__(
        self,
        flags: Iterable[str] = (),
        prefix: Optional[str] = None,
        settings: Optional[AppSettings] = None,
        registry: Optional[DirectiveRegistry] = None,
        strict: Optional[bool] = None,
    ):
        """
        Initialize the preprocessor

        Args:
            flags: Flag names that are on
            prefix: Token marking directive lines (default from settings)
            settings: Application settings (default: appsettings singleton)
            registry: Directive registry (default: built-in directives)
            strict: Report unclosed blocks at end of input (default from settings)

        Raises:
            ValueError: If the prefix is empty
        """
        self.settings = settings or appsettings
        self.flags = frozenset(flags)
        self.prefix = prefix if prefix is not None else self.settings.default_prefix
        if not self.prefix:
            raise ValueError("directive prefix must not be empty")
        self.registry = registry or DirectiveRegistry()
        self.strict = self.settings.strict_mode if strict is None else strict

    def process(self, stream: InputStream) -> bytes:
        """
        Interpret every directive in the input and return the output

        Args:
            stream: Binary stream (or bytes) to read lines from

        Returns:
            Fully processed output

        Raises:
            PreprocessError: First directive error, with its line number
            UnterminatedBlock: Input ended inside a block (strict mode only)
            OSError: Read errors of the underlying stream
        """
        if isinstance(stream, (bytes, bytearray)):
            stream = io.BytesIO(bytes(stream))

        source = LineSource(stream)
        context = ScanContext(self.flags, self.prefix, source, self.registry, self.settings)
        stack = StateStack()
        output = io.BytesIO()

        LOG(f"Preprocessing with flags {sorted(context.flags.flags)} and prefix '{self.prefix}'", level=2)

        for line in source:
            transition = stack.top.handle(line, context)
            self.transition_apply(transition, stack, source, output, context)

        if len(stack) > 1:
            self.openBlocks_report(stack, context)

        LOG(f"Processed {source.line_number} lines, {len(context.templates)} templates, "
            f"{len(context.replacements)} replacements", level=2)
        return output.getvalue()

    def transition_apply(
        self,
        transition: Transition,
        stack: StateStack,
        source: LineSource,
        output: BinaryIO,
        context: ScanContext,
    ) -> None:
        """Apply a handler's Transition to the stack, output and line source"""
        if transition.output:
            output.write(transition.output)

        if transition.action is Action.PUSH:
            stack.state_push(transition.handler)
        elif transition.action is Action.POP:
            stack.state_pop(context)

        if transition.inject is not None:
            source.content_inject(transition.inject, transition.origin)

    def openBlocks_report(self, stack: StateStack, context: ScanContext) -> None:
        """
        Handle blocks still open at end of input

        In strict mode this is an error naming the innermost open block.
        Otherwise the blocks are dropped: their pending capture is discarded.
        """
        innermost = stack.openBlocks_get()[-1]
        if self.strict:
            context.error(UnterminatedBlock, f"input ended inside {innermost.describe()}")
        LOG(f"Warning: input ended inside {innermost.describe()}", level=1)


def process(stream: InputStream, flags: Iterable[str] = (), prefix: Optional[str] = None) -> bytes:
    """
    Process one input with the given flags and directive prefix.

    Args:
        stream: Binary stream or bytes
        flags: Flag names that are on
        prefix: Directive prefix (default from settings)

    Returns:
        Processed output bytes

    Raises:
        PreprocessError: On the first directive error
    """
    return Preprocessor(flags=flags, prefix=prefix).process(stream)


def process_text(text: str, flags: Iterable[str] = (), prefix: Optional[str] = None) -> str:
    """Process a str input, encoding and decoding with the configured encoding"""
    encoding = appsettings.encoding
    result = process(text.encode(encoding, errors="surrogateescape"), flags=flags, prefix=prefix)
    return result.decode(encoding, errors="surrogateescape")
