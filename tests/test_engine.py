"""
End-to-end engine tests

Runs complete inputs through process() and checks the produced output.
"""

import io

import pytest

from pragmatext.lib.engine import Preprocessor, process, process_text
from pragmatext.lib.errors import UnknownTemplate


def run(source: str, flags=(), prefix: str = "//#") -> str:
    return process_text(source, flags=flags, prefix=prefix)


class TestPassthrough:
    """Input without directives"""

    def test_plain_text_verbatim(self):
        source = "first line\n\n  indented\nlast without newline"
        assert run(source) == source

    def test_empty_input(self):
        assert process(b"", prefix="//#") == b""

    def test_binary_stream_input(self):
        stream = io.BytesIO(b"a\nb\n")
        assert process(stream, prefix="//#") == b"a\nb\n"

    def test_non_utf8_bytes_preserved(self):
        data = b"caf\xe9\n\xff\xfe\n"
        assert process(data, prefix="//#") == data

    def test_default_prefix(self):
        """Prefix falls back to the configured default"""
        assert process(b"a //# omit\nb\n") == b"b\n"

    def test_empty_prefix_rejected(self):
        with pytest.raises(ValueError):
            Preprocessor(prefix="")


class TestConditionals:
    """if / end blocks"""

    SOURCE = "x\n//# if debug\ny\n//# end\nz\n"

    def test_true_flag_emits_block(self):
        assert run(self.SOURCE, flags={"debug"}) == "x\ny\nz\n"

    def test_false_flag_skips_block(self):
        assert run(self.SOURCE) == "x\nz\n"

    def test_negated_unset_flag(self):
        assert run("//# if !release\nkept\n//# end\n") == "kept\n"

    def test_negated_set_flag(self):
        assert run("//# if !release\ndropped\n//# end\n", flags={"release"}) == ""

    def test_always_flag(self):
        assert run("//# if true\nkept\n//# end\n") == "kept\n"
        assert run("//# if !true\ndropped\n//# end\n") == ""

    def test_prefix_anywhere_on_line(self):
        source = "<!-- //# if debug -->\nshown\n<!-- //# end -->\n"
        assert run(source, flags={"debug"}) == "shown\n"

    def test_nested_true_blocks(self):
        source = "//# if a\n1\n//# if b\n2\n//# end\n3\n//# end\n4\n"
        assert run(source, flags={"a", "b"}) == "1\n2\n3\n4\n"
        assert run(source, flags={"a"}) == "1\n3\n4\n"

    def test_nested_block_inside_skipped_region(self):
        """An inner end does not end skipping of the outer block"""
        source = "//# if a\none\n//# if b\ntwo\n//# end\nthree\n//# end\nfour\n"
        assert run(source) == "four\n"
        assert run(source, flags={"b"}) == "four\n"

    def test_directives_ignored_while_skipping(self):
        source = "//# if a\n//# replace X Y\n//# template nope\n//# end\nX\n"
        assert run(source) == "X\n"

    def test_custom_prefix(self):
        source = "#pragma if linux\nlinux only\n#pragma end\n// //# not a directive here\n"
        assert run(source, flags={"linux"}, prefix="#pragma") == "linux only\n// //# not a directive here\n"


class TestOmitInclude:
    """omit / include line directives"""

    LINE = "TEXT  //# omit if debug MORE\n"

    def test_bare_omit_drops_line(self):
        assert run("keep\ndrop me //# omit\n") == "keep\n"

    def test_omit_if_set_drops_line(self):
        assert run(self.LINE, flags={"debug"}) == ""

    def test_omit_if_unset_keeps_text(self):
        assert run(self.LINE) == "TEXT\n"

    def test_omit_if_negated(self):
        assert run("v //# omit if !prod\n") == ""
        assert run("v //# omit if !prod\n", flags={"prod"}) == "v\n"

    def test_omit_kept_text_substituted(self):
        source = "//# replace @V@ 2\nvalue = @V@   //# omit if debug\n"
        assert run(source) == "value = 2\n"

    def test_omit_unterminated_line_gains_newline(self):
        assert run("last //# omit if debug") == "last\n"

    def test_include_if_set_keeps_text(self):
        assert run("debug_line() //# include if debug\n", flags={"debug"}) == "debug_line()\n"

    def test_include_if_unset_drops_line(self):
        assert run("debug_line() //# include if debug\n") == ""

    def test_include_if_negated(self):
        assert run("r //# include if !debug\n") == "r\n"
        assert run("r //# include if !debug\n", flags={"debug"}) == ""

    def test_include_is_complement_of_omit(self):
        for flags in (set(), {"debug"}):
            omitted = run("T //# omit if debug\n", flags=flags)
            included = run("T //# include if debug\n", flags=flags)
            assert {omitted, included} == {"", "T\n"}


class TestReplace:
    """replace directive"""

    def test_replace_subsequent_lines(self):
        source = "@V@ before\n//# replace @V@ 1.2\nversion @V@ (@V@)\n@W@\n"
        assert run(source) == "@V@ before\nversion 1.2 (1.2)\n@W@\n"

    def test_replace_overwrites(self):
        source = "//# replace @V@ 1\n@V@\n//# replace @V@ 2\n@V@\n"
        assert run(source) == "1\n2\n"

    def test_insertion_order(self):
        source = "//# replace AB X\n//# replace A Y\nAB A\n"
        assert run(source) == "X Y\n"

    def test_replace_inside_true_block(self):
        """Replacements registered in a block stay for the rest of the run"""
        source = "//# if true\n//# replace @N@ n\n//# end\n@N@\n"
        assert run(source) == "n\n"


class TestTemplates:
    """def / enddef / template"""

    def test_replay(self):
        source = (
            "//# def greet\n"
            "hello @NAME@\n"
            "//# enddef\n"
            "//# replace @NAME@ world\n"
            "start\n"
            "//# template greet\n"
            "//# template greet\n"
        )
        assert run(source) == "start\nhello world\nhello world\n"

    def test_definition_emits_nothing(self):
        assert run("//# def t\nbody\n//# enddef\n") == ""

    def test_substitution_applied_at_replay(self):
        source = (
            "//# replace @V@ old\n"
            "//# def t\n@V@\n//# enddef\n"
            "//# replace @V@ new\n"
            "//# template t\n"
        )
        assert run(source) == "new\n"

    def test_template_directives_reinterpreted(self):
        source = (
            "//# def dbg\n"
            "//# if debug\n"
            "debug on\n"
            "//# end\n"
            "//# enddef\n"
            "start\n"
            "//# template dbg\n"
            "finish\n"
        )
        assert run(source, flags={"debug"}) == "start\ndebug on\nfinish\n"
        assert run(source) == "start\nfinish\n"

    def test_template_replaying_template(self):
        source = (
            "//# def inner\nI\n//# enddef\n"
            "//# def outer\n<\n//# template inner\n>\n//# enddef\n"
            "//# template outer\n"
        )
        assert run(source) == "<\nI\n>\n"

    def test_nested_def_captured_as_text(self):
        """A def inside a def is text; replaying it defines the inner template"""
        source = (
            "//# def outer\n"
            "//# def inner\n"
            "body\n"
            "//# enddef\n"
            "//# template outer\n"
            "//# enddef\n"
            "//# template inner\n"
        )
        assert run(source) == "body\n"

    def test_redefinition_overwrites(self):
        source = "//# def t\nold\n//# enddef\n//# def t\nnew\n//# enddef\n//# template t\n"
        assert run(source) == "new\n"

    def test_template_on_final_line(self):
        assert run("//# def t\nx\n//# enddef\n//# template t") == "x\n"

    def test_template_block_spanning_replay(self):
        """A block opened inside a template can be closed by the input"""
        source = "//# def open\n//# if debug\n//# enddef\n//# template open\nguarded\n//# end\nafter\n"
        assert run(source) == "after\n"
        assert run(source, flags={"debug"}) == "guarded\nafter\n"


class TestRunIsolation:
    """Independent runs share no state"""

    def test_templates_do_not_leak(self):
        preprocessor = Preprocessor(prefix="//#")
        preprocessor.process(b"//# def t\nx\n//# enddef\n")

        with pytest.raises(UnknownTemplate):
            preprocessor.process(b"//# template t\n")

    def test_replacements_do_not_leak(self):
        preprocessor = Preprocessor(prefix="//#")
        assert preprocessor.process(b"//# replace A B\nA\n") == b"B\n"
        assert preprocessor.process(b"A\n") == b"A\n"


class TestUnclosedBlocks:
    """Blocks still open at end of input"""

    def test_lenient_open_if(self):
        assert Preprocessor(flags={"debug"}, prefix="//#", strict=False).process(b"//# if debug\nx\n") == b"x\n"

    def test_lenient_open_def_discarded(self):
        assert Preprocessor(prefix="//#", strict=False).process(b"a\n//# def t\nbody\n") == b"a\n"
