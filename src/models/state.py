"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the preprocessing pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as processing progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, flags, prefix,
          variantsFile, outputFile
        - env_check: inputSourceFile, variantSet, envOK
        - source_preprocess: processResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the annotated source file
        outputdir: Directory receiving the processed output files
        verbosity: Logging verbosity level (1-3)
        inputFile: Input filename (relative to inputdir)
        flags: Comma-separated flag names that are on
        prefix: Directive prefix (empty for the configured default)
        variantsFile: Optional YAML variants file (relative to inputdir)
        outputFile: Output filename for a single-variant run
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the input file
        variantSet: Variants to produce (VariantSet at runtime)
        processResult: Results (output_files, variant_count, status)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    flags: str = field(default="")
    prefix: str = field(default="")
    variantsFile: Optional[str] = field(default=None)
    outputFile: Optional[str] = field(default=None)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    variantSet: Optional[Any] = field(default=None)  # VariantSet at runtime
    processResult: Optional[Dict] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (inputFile, flags, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for processed output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Filter options_dict to only include fields that exist in ProgramState
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def flags_list(self) -> List[str]:
        """Flag names from the comma-separated flags option"""
        return [flag.strip() for flag in self.flags.split(",") if flag.strip()]

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_preprocess,
            results_report
        )

    This is equivalent to:
        results_report(source_preprocess(env_check(initial_state)))
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
