"""
Directive implementations for pragmatext

Each directive interprets one directive line and returns the Transition the
engine applies. Uses DirectiveSpec for metadata and dispatch.
"""

from typing import Dict, List, Optional

from ..models.directives import DirectiveSpec, DirectiveCategory, terminator_is
from ..models.pragma import Pragma, Transition
from .context import ScanContext
from .errors import (
    UnknownDirective,
    UnknownTemplate,
    MalformedReplace,
    MissingIfClause,
    MissingArgument,
)
from .handlers import DefaultHandler, SkipHandler, CaptureHandler
from .log import LOG


def argument_require(pragma: Pragma, index: int, what: str, context: ScanContext) -> str:
    """
    Fetch a required directive argument.

    Raises:
        MissingArgument: If the argument is absent
    """
    value = pragma.arg_get(index)
    if value is None:
        context.error(MissingArgument, f"'{pragma.name}' directive needs {what}")
    return value


def guarded_emit(pragma: Pragma, context: ScanContext) -> Transition:
    """Emit the text before the prefix, trailing whitespace trimmed, plus a newline"""
    left = pragma.before.rstrip()
    return Transition.emit(context.replacements.replacements_apply(left) + b"\n")


class DirectiveRegistry:
    """
    Registry of directive specifications and handlers

    Maps directive names to DirectiveSpec objects containing metadata
    and interpreter functions.
    """

    def __init__(self) -> None:
        """Initialize the directive registry and register all built-in directives"""
        self.specs: Dict[str, DirectiveSpec] = {}
        self.structuralDirectives_register()
        self.conditionalDirectives_register()
        self.templateDirectives_register()
        self.substitutionDirectives_register()

    def register(self, spec: DirectiveSpec) -> None:
        """Register a directive specification"""
        self.specs[spec.name] = spec

    def spec_get(self, name: str) -> Optional[DirectiveSpec]:
        """Get full directive specification by name"""
        return self.specs.get(name)

    def directives_listByCategory(self, category: DirectiveCategory) -> List[DirectiveSpec]:
        """Get all directives in a category"""
        return [spec for spec in self.specs.values() if spec.category == category]

    def dispatch(self, pragma: Pragma, context: ScanContext) -> Transition:
        """
        Interpret a directive line seen by the default handler

        Args:
            pragma: Split directive line
            context: Run context

        Returns:
            Transition for the engine to apply

        Raises:
            UnknownDirective: If the first token names no registered directive
        """
        spec = self.spec_get(pragma.name)
        if spec is None:
            if terminator_is(pragma.name):
                context.error(UnknownDirective, f"'{pragma.name}' without an open block")
            context.error(UnknownDirective, f"unknown directive {pragma.name!r}")

        LOG(f"line {context.source.line_number}: {' '.join(pragma.tokens)}", level=3)
        return spec.handler(pragma, context)

    def structuralDirectives_register(self) -> None:
        """Register block structure directives"""

        def end_handler(pragma: Pragma, context: ScanContext) -> Transition:
            """Handle 'end' - close the innermost if block"""
            return Transition.pop()

        self.register(DirectiveSpec(
            name='end',
            category=DirectiveCategory.STRUCTURAL,
            description='Closes the innermost open block',
            handler=end_handler,
            examples=['end'],
        ))

    def conditionalDirectives_register(self) -> None:
        """Register flag-driven directives"""

        def if_handler(pragma: Pragma, context: ScanContext) -> Transition:
            """Handle 'if <flag>' - process or skip lines up to the matching end"""
            flag = argument_require(pragma, 0, "a flag name", context)
            opened_at = context.source.line_number
            if context.flags.flag_test(flag):
                return Transition.push(DefaultHandler(block='if', opened_at=opened_at))
            return Transition.push(SkipHandler(block='if', opened_at=opened_at))

        def omit_handler(pragma: Pragma, context: ScanContext) -> Transition:
            """Handle 'omit [if <flag>]' - hide the line, keep its text when the flag is false"""
            if pragma.arg_get(0) != 'if':
                return Transition()
            flag = argument_require(pragma, 1, "a flag name after 'if'", context)
            if context.flags.flag_test(flag):
                return Transition()
            return guarded_emit(pragma, context)

        def include_handler(pragma: Pragma, context: ScanContext) -> Transition:
            """Handle 'include if <flag>' - keep the line's text only when the flag holds"""
            if pragma.arg_get(0) != 'if':
                context.error(MissingIfClause, "expected 'if' for include directive")
            flag = argument_require(pragma, 1, "a flag name after 'if'", context)
            if context.flags.flag_test(flag):
                return guarded_emit(pragma, context)
            return Transition()

        self.register(DirectiveSpec(
            name='if',
            category=DirectiveCategory.CONDITIONAL,
            description='Processes the block up to its end only when the flag holds',
            handler=if_handler,
            examples=['if debug', 'if !release'],
        ))

        self.register(DirectiveSpec(
            name='omit',
            category=DirectiveCategory.CONDITIONAL,
            description='Drops the line, or keeps the text before the prefix when the flag is false',
            handler=omit_handler,
            examples=['omit', 'omit if release'],
        ))

        self.register(DirectiveSpec(
            name='include',
            category=DirectiveCategory.CONDITIONAL,
            description='Keeps the text before the prefix only when the flag holds',
            handler=include_handler,
            examples=['include if debug'],
        ))

    def templateDirectives_register(self) -> None:
        """Register template capture and replay directives"""

        def def_handler(pragma: Pragma, context: ScanContext) -> Transition:
            """Handle 'def <name>' - capture lines up to enddef"""
            name = argument_require(pragma, 0, "a template name", context)
            return Transition.push(
                CaptureHandler(block='def', opened_at=context.source.line_number, name=name)
            )

        def template_handler(pragma: Pragma, context: ScanContext) -> Transition:
            """Handle 'template <name>' - replay captured lines as input"""
            name = argument_require(pragma, 0, "a template name", context)
            content = context.templates.template_get(name)
            if content is None:
                context.error(UnknownTemplate, f"unknown template {name!r} - must be defined beforehand")
            return Transition(inject=content, origin=name)

        self.register(DirectiveSpec(
            name='def',
            category=DirectiveCategory.TEMPLATE,
            description='Captures the following raw lines as a named template until enddef',
            handler=def_handler,
            examples=['def header'],
        ))

        self.register(DirectiveSpec(
            name='template',
            category=DirectiveCategory.TEMPLATE,
            description='Replays a named template as if its lines were written here',
            handler=template_handler,
            examples=['template header'],
        ))

    def substitutionDirectives_register(self) -> None:
        """Register literal substitution directives"""

        def replace_handler(pragma: Pragma, context: ScanContext) -> Transition:
            """Handle 'replace <sentinel> <replacement>'"""
            if len(pragma.args) != 2:
                context.error(MalformedReplace, "replace needs both sentinel and replacement")
            sentinel, replacement = pragma.args
            context.replacements.replacement_add(
                context.text_encode(sentinel), context.text_encode(replacement)
            )
            return Transition()

        self.register(DirectiveSpec(
            name='replace',
            category=DirectiveCategory.SUBSTITUTION,
            description='Substitutes every later occurrence of a sentinel in emitted text',
            handler=replace_handler,
            examples=['replace @VERSION@ 1.2.0'],
        ))
