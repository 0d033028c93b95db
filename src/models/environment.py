"""
Passive keyed stores consulted by the directive interpreter

    FlagEnvironment   - flags known to be on (read-only during a run)
    TemplateStore     - template name -> captured bytes
    ReplacementTable  - sentinel -> replacement bytes, applied to emitted lines
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional


class FlagEnvironment:
    """
    Set of flag names that are on for a single run.

    The always-on flag is added unconditionally, so 'if true' style
    conditions hold whatever the caller passes.
    """

    def __init__(self, flags: Iterable[str], always_flag: str = "true", negation_marker: str = "!"):
        self.always_flag = always_flag
        self.negation_marker = negation_marker
        self.flags: FrozenSet[str] = frozenset(flags) | {always_flag}

    def flag_isSet(self, name: str) -> bool:
        return name in self.flags

    def flag_test(self, name: str) -> bool:
        """
        Evaluate a flag condition as written in a directive.

        True when the flag is set, or when the name carries the negation
        marker and the bare name is not set.

        Example:
            >>> env = FlagEnvironment({'debug'})
            >>> env.flag_test('debug'), env.flag_test('!debug'), env.flag_test('!release')
            (True, False, True)
        """
        if self.flag_isSet(name):
            return True
        if name.startswith(self.negation_marker):
            return not self.flag_isSet(name[len(self.negation_marker):])
        return False

    def __contains__(self, name: str) -> bool:
        return self.flag_isSet(name)

    def __repr__(self) -> str:
        return f"FlagEnvironment({sorted(self.flags)!r})"


@dataclass
class TemplateStore:
    """
    Named templates captured by def/enddef blocks.

    Redefining a name overwrites the previous content.
    """
    templates: Dict[str, bytes] = field(default_factory=dict)

    def template_store(self, name: str, content: bytes) -> None:
        self.templates[name] = content

    def template_get(self, name: str) -> Optional[bytes]:
        return self.templates.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self.templates

    def __len__(self) -> int:
        return len(self.templates)


@dataclass
class ReplacementTable:
    """
    Literal sentinel substitutions applied to emitted content.

    Entries are applied in the order the sentinels were first registered.
    Re-registering a sentinel changes its replacement but keeps its place.
    """
    replacements: Dict[bytes, bytes] = field(default_factory=dict)

    def replacement_add(self, sentinel: bytes, replacement: bytes) -> None:
        self.replacements[sentinel] = replacement

    def replacements_apply(self, line: bytes) -> bytes:
        """
        Replace every occurrence of every sentinel in a line.

        Example:
            >>> table = ReplacementTable()
            >>> table.replacement_add(b'@NAME@', b'pragmatext')
            >>> table.replacements_apply(b'hello @NAME@ and @NAME@\\n')
            b'hello pragmatext and pragmatext\\n'
        """
        for sentinel, replacement in self.replacements.items():
            line = line.replace(sentinel, replacement)
        return line

    def __len__(self) -> int:
        return len(self.replacements)
