"""
Error reporting tests

Every error is raised at the first failing line and carries its line
number, counting lines replayed from templates.
"""

import pytest

from pragmatext.lib.engine import Preprocessor, process
from pragmatext.lib.errors import (
    PreprocessError,
    UnexpectedEnd,
    UnknownDirective,
    UnknownTemplate,
    MalformedReplace,
    MissingIfClause,
    MissingArgument,
    UnterminatedBlock,
)


def run(source: bytes, flags=(), strict: bool = False) -> bytes:
    return Preprocessor(flags=flags, prefix="//#", strict=strict).process(source)


class TestErrorTaxonomy:
    """Each error kind with the line it is reported on"""

    @pytest.mark.parametrize(
        "source, error, line",
        [
            (b"a\n//# end\n", UnexpectedEnd, 2),
            (b"//# if true\n//# end\n//# end\n", UnexpectedEnd, 3),
            (b"a\nb\n//# frobnicate\n", UnknownDirective, 3),
            (b"text //#\n", UnknownDirective, 1),
            (b"//# enddef\n", UnknownDirective, 1),
            (b"x\n//# template nope\n", UnknownTemplate, 2),
            (b"//# replace onlyone\n", MalformedReplace, 1),
            (b"//# replace\n", MalformedReplace, 1),
            (b"//# replace a b c\n", MalformedReplace, 1),
            (b"x //# include\n", MissingIfClause, 1),
            (b"x //# include when debug\n", MissingIfClause, 1),
            (b"//# if\n", MissingArgument, 1),
            (b"//# def\n", MissingArgument, 1),
            (b"//# template\n", MissingArgument, 1),
            (b"x //# omit if\n", MissingArgument, 1),
            (b"x //# include if\n", MissingArgument, 1),
        ],
    )
    def test_error_and_line(self, source, error, line):
        with pytest.raises(error) as excinfo:
            run(source)

        assert excinfo.value.line_number == line
        assert isinstance(excinfo.value, PreprocessError)

    def test_message_format(self):
        with pytest.raises(UnexpectedEnd) as excinfo:
            run(b"a\n//# end\n")

        assert str(excinfo.value) == "line 2: unexpected end directive"

    def test_unknown_directive_named(self):
        with pytest.raises(UnknownDirective, match="'frobnicate'"):
            run(b"//# frobnicate now\n")

    def test_template_must_be_defined_first(self):
        """Forward references are errors even if defined later"""
        with pytest.raises(UnknownTemplate):
            run(b"//# template t\n//# def t\nx\n//# enddef\n")

    def test_first_error_wins(self):
        with pytest.raises(UnknownDirective) as excinfo:
            run(b"//# bad1\n//# end\n")

        assert excinfo.value.line_number == 1

    def test_errors_exported_from_package(self):
        import pragmatext

        with pytest.raises(pragmatext.PreprocessError):
            process(b"//# end\n", prefix="//#")


class TestTemplateLineNumbers:
    """Line numbers include lines replayed from templates"""

    SOURCE = (
        b"//# def t\n"      # 1
        b"fine\n"           # 2
        b"//# bogus\n"      # 3
        b"//# enddef\n"     # 4
        b"ok\n"             # 5
        b"//# template t\n" # 6, replays as lines 7 and 8
    )

    def test_replayed_line_counted(self):
        with pytest.raises(UnknownDirective) as excinfo:
            run(self.SOURCE)

        assert excinfo.value.line_number == 8
        assert excinfo.value.origin == "t"

    def test_origin_in_message(self):
        with pytest.raises(UnknownDirective) as excinfo:
            run(self.SOURCE)

        assert str(excinfo.value).startswith("line 8 (in template 't'): ")

    def test_lines_after_replay_keep_counting(self):
        source = b"//# def t\na\nb\n//# enddef\n//# template t\n//# end\n"

        with pytest.raises(UnexpectedEnd) as excinfo:
            run(source)

        assert excinfo.value.line_number == 8
        assert excinfo.value.origin is None


class TestStrictMode:
    """Unclosed blocks at end of input"""

    def test_open_if(self):
        with pytest.raises(UnterminatedBlock, match="'if' block opened at line 2"):
            run(b"a\n//# if debug\nb\n", strict=True)

    def test_open_true_if(self):
        with pytest.raises(UnterminatedBlock):
            run(b"//# if debug\nb\n", flags={"debug"}, strict=True)

    def test_open_def(self):
        with pytest.raises(UnterminatedBlock, match="'def hdr' block opened at line 1"):
            run(b"//# def hdr\nbody\n", strict=True)

    def test_innermost_block_reported(self):
        with pytest.raises(UnterminatedBlock, match="opened at line 2"):
            run(b"//# if a\n//# if b\nx\n", strict=True)

    def test_closed_blocks_pass(self):
        assert run(b"//# if a\nx\n//# end\n", strict=True) == b""

    def test_strict_from_settings(self, monkeypatch):
        from pragmatext.config import AppSettings

        monkeypatch.setenv("PRAGMATEXT_STRICT_MODE", "true")
        preprocessor = Preprocessor(prefix="//#", settings=AppSettings())

        with pytest.raises(UnterminatedBlock):
            preprocessor.process(b"//# if x\n")
