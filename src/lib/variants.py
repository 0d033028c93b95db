"""
Variant definitions for producing several outputs from one source.

A variants file is YAML mapping variant names to the flags that are on for
that variant, with optional per-variant prefix and output filename:

    prefix: "//#"              # default prefix for all variants (optional)
    variants:
      debug:
        flags: [debug, trace]
        output: app.debug.conf
      release:
        flags: [release]
      minimal: []              # shorthand: just the flag list
"""

import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, List, Optional


class VariantError(Exception):
    """Raised when a variants file cannot be loaded or is malformed"""
    pass


def filename_isPlain(value: str) -> bool:
    """
    Check that a name can be used as a file name inside the output directory.

    Example:
        >>> filename_isPlain('app.debug.conf'), filename_isPlain('../x'), filename_isPlain('')
        (True, False, False)
    """
    if not value or value in (".", ".."):
        return False
    return "/" not in value and "\\" not in value


@dataclass
class Variant:
    """
    One output variant

    Attributes:
        name: Variant name (used in the default output filename)
        flags: Flag names that are on for this variant
        prefix: Directive prefix, None to use the file or global default
        output: Output filename, None to derive it from the input name
    """
    name: str
    flags: List[str] = field(default_factory=list)
    prefix: Optional[str] = None
    output: Optional[str] = None


class VariantSet:
    """
    Variants loaded from a YAML file.
    """

    def __init__(self, variants: List[Variant], prefix: Optional[str] = None, path: Optional[Path] = None):
        self.variants = variants
        self.prefix = prefix
        self.path = path

    @classmethod
    def load(cls, path: Path) -> "VariantSet":
        """
        Load and validate a variants file.

        Args:
            path: Path to the YAML variants file

        Raises:
            VariantError: If the file is missing, unparsable or malformed
        """
        path = Path(path)
        if not path.exists():
            raise VariantError(f"Variants file not found: {path}")

        try:
            with open(path, 'r') as f:
                config: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise VariantError(f"Failed to parse {path.name}: {e}")

        return cls.config_parse(config or {}, path)

    @classmethod
    def config_parse(cls, config: Any, path: Optional[Path] = None) -> "VariantSet":
        """Build a VariantSet from already-parsed YAML content"""
        if not isinstance(config, dict):
            raise VariantError("Variants file must contain a mapping")

        prefix = config.get('prefix')
        if prefix is not None and (not isinstance(prefix, str) or not prefix):
            raise VariantError("'prefix' must be a non-empty string")

        entries = config.get('variants')
        if not isinstance(entries, dict) or not entries:
            raise VariantError("Variants file needs a non-empty 'variants' mapping")

        variants = [cls.variant_parse(str(name), entry) for name, entry in entries.items()]
        return cls(variants, prefix=prefix, path=path)

    @staticmethod
    def variant_parse(name: str, entry: Any) -> Variant:
        """Parse one variant entry (a flag list or a mapping)"""
        if not filename_isPlain(name):
            raise VariantError(f"Variant name '{name}' must not contain path separators")
        if entry is None:
            entry = []
        if isinstance(entry, list):
            entry = {'flags': entry}
        if not isinstance(entry, dict):
            raise VariantError(f"Variant '{name}' must be a flag list or a mapping")

        unknown = set(entry) - {'flags', 'prefix', 'output'}
        if unknown:
            raise VariantError(f"Variant '{name}' has unknown keys: {', '.join(sorted(unknown))}")

        flags = entry.get('flags') or []
        if not isinstance(flags, list):
            raise VariantError(f"Variant '{name}': 'flags' must be a list")

        prefix = entry.get('prefix')
        if prefix is not None and (not isinstance(prefix, str) or not prefix):
            raise VariantError(f"Variant '{name}': 'prefix' must be a non-empty string")

        output = entry.get('output')
        if output is not None and (not isinstance(output, str) or not filename_isPlain(output)):
            raise VariantError(f"Variant '{name}': 'output' must be a plain filename")

        return Variant(
            name=name,
            flags=[str(flag) for flag in flags],
            prefix=prefix,
            output=output,
        )

    def variant_get(self, name: str) -> Optional[Variant]:
        for variant in self.variants:
            if variant.name == name:
                return variant
        return None

    def prefix_resolve(self, variant: Variant, default: str) -> str:
        """Variant prefix, else the file's prefix, else the given default"""
        return variant.prefix or self.prefix or default

    def names_get(self) -> List[str]:
        return [variant.name for variant in self.variants]

    def __len__(self) -> int:
        return len(self.variants)

    def __repr__(self) -> str:
        return f"VariantSet(names={self.names_get()}, path='{self.path}')"


def variants_fromFlags(flags: List[str], name: str = "") -> VariantSet:
    """Single-variant set for a plain flag list given on the command line"""
    return VariantSet([Variant(name=name, flags=list(flags))])


def variants_validate(path: Path) -> tuple[bool, str]:
    """
    Validate a variants file.

    Returns:
        Tuple of (is_valid, message)
    """
    try:
        variant_set: VariantSet = VariantSet.load(path)
    except VariantError as e:
        return False, str(e)
    return True, f"{len(variant_set)} variants: {', '.join(variant_set.names_get())}"
