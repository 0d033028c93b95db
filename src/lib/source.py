"""
Line source with mid-stream content injection

Yields one line at a time from the input stream. Template replay injects
previously captured bytes that must be read before whatever remains of the
input, so the source keeps a stack of readers and always reads from the
top one:

    [base stream, template 'a', template 'b']   <- 'b' read first

When an injected reader runs dry its reader is dropped and reading carries
on from the one below, joining a trailing unterminated chunk with the
start of the next reader just like a concatenated stream would.
"""

import io
from dataclasses import dataclass
from typing import BinaryIO, List, Optional, Tuple

from .log import LOG


@dataclass
class _Reader:
    """A byte stream on the reader stack, tagged with its template name"""
    stream: BinaryIO
    origin: Optional[str] = None


class LineSource:
    """
    Line-at-a-time reader over an input stream plus injected content

    Attributes:
        line_number: 1-based number of the last line read (every line
                     counts, including replayed template lines)
        origin: Template the last line came from, None for the input stream
    """

    def __init__(self, stream: BinaryIO):
        self.readers: List[_Reader] = [_Reader(stream)]
        self.line_number = 0
        self.origin: Optional[str] = None
        self.base_exhausted = False

    @property
    def at_end(self) -> bool:
        """True once the input stream and all injected content are consumed"""
        return self.base_exhausted and len(self.readers) == 1

    def content_inject(self, content: bytes, origin: Optional[str] = None) -> None:
        """
        Splice content in front of everything not yet read.

        Args:
            content: Bytes to read next
            origin: Template name, reported in error locations
        """
        if not content:
            return
        LOG(f"Injecting {len(content)} bytes from template '{origin}'", level=3)
        self.readers.append(_Reader(io.BytesIO(content), origin))

    def line_next(self) -> Tuple[bytes, bool]:
        """
        Read up to and including the next newline.

        Returns:
            (line, is_end) where is_end is True when nothing is left to read
            after this line. The final line of the input may lack a newline
            and may be empty.

        Raises:
            OSError: Any read error of the underlying stream, unchanged
        """
        chunks: List[bytes] = []
        origin: Optional[str] = None

        while True:
            reader = self.readers[-1]
            if len(self.readers) == 1 and self.base_exhausted:
                break

            chunk = reader.stream.readline()
            if chunk and origin is None:
                origin = reader.origin
            chunks.append(chunk)
            if chunk.endswith(b"\n"):
                break

            if len(self.readers) > 1:
                # Injected content ran dry, continue with the reader below
                self.readers.pop()
            else:
                self.base_exhausted = True
                break

        line = b"".join(chunks)
        if line:
            self.line_number += 1
            self.origin = origin
        return line, self.at_end

    def __iter__(self):
        """Iterate over non-empty lines until the source is exhausted"""
        while not self.at_end:
            line, _ = self.line_next()
            if line:
                yield line
