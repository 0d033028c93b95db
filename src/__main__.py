#!/usr/bin/env python3
"""
pragmatext - Line-oriented directive preprocessor

Generates variant output files from a single annotated source text.
Directive lines are marked by a prefix token and control conditional
inclusion, named template capture/replay and literal substitution.

As with other ChRIS plugins, the program reads from an input directory
and writes into an output directory.

Usage:
    pragmatext inputdir/ outputdir/ --inputFile app.conf --flags debug,trace

Examples:
    # One output with two flags on
    pragmatext . out/ --inputFile app.conf --flags debug,trace

    # Custom directive prefix
    pragmatext . out/ --inputFile main.c --prefix '#pragma' --flags linux

    # One output per variant listed in a YAML file
    pragmatext . out/ --inputFile app.conf --variantsFile variants.yaml -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import Preprocessor, PreprocessError, __version__, LOG, state_connectToLogger
from .lib.variants import VariantSet, variants_fromFlags, variants_validate
from .models import ProgramState, pipeline


# Define CLI arguments
parser = ArgumentParser(
    description="pragmatext - line-oriented directive preprocessor",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Annotated source file (relative to inputdir)"
)

parser.add_argument(
    "--flags",
    default="",
    type=str,
    help="Comma-separated flag names that are on",
)

parser.add_argument(
    "--prefix",
    default="",
    type=str,
    help=f"Directive prefix token (default: '{appsettings.default_prefix}')",
)

parser.add_argument(
    "--variantsFile",
    default=None,
    type=str,
    help="YAML file listing output variants (relative to inputdir); overrides --flags",
)

parser.add_argument(
    "--outputFile",
    default=None,
    type=str,
    help="Output filename for a single run. Defaults to the input name plus a suffix",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve the input file and variants.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the input file
            - variantSet: Variants to produce
            - envOK: True if environment is valid

    Exits:
        1 if the input file is missing or the variants file is invalid
    """

    state = inputstate.copy()

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile
    if not input_file.is_file():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    if state.variantsFile:
        variants_path = state.inputdir / state.variantsFile
        valid, message = variants_validate(variants_path)
        if not valid:
            print(f"Error: {message}", file=sys.stderr)
            state.envOK = False
            sys.exit(1)
        state.variantSet = VariantSet.load(variants_path)
        LOG(f"Variants file {variants_path.name}: {message}", level=2)
    else:
        state.variantSet = variants_fromFlags(state.flags_list())
        LOG(f"Flags: {', '.join(state.flags_list()) or '(none)'}", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.outputdir}", level=2)

    state.envOK = True
    return state


def source_preprocess(inputstate: ProgramState) -> ProgramState:
    """
    Read the input file and write one processed output per variant.

    Args:
        inputstate: Program state with inputSourceFile and variantSet

    Returns:
        ProgramState with added field:
            - processResult: Dict containing:
                - status: bool (all variants processed)
                - output_files: list of written paths
                - variant_count: int

    Exits:
        1 if reading fails or a directive error is raised
    """

    state = inputstate.copy()

    LOG("Reading source file...", level=1)
    try:
        source = state.inputSourceFile.read_bytes()
        LOG(f"Read {len(source)} bytes from {state.inputSourceFile.name}", level=2)
    except OSError as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    output_files = []
    for variant in state.variantSet.variants:
        prefix = state.variantSet.prefix_resolve(variant, state.prefix or appsettings.default_prefix)
        output_name = variant.output or (
            state.outputFile if not variant.name and state.outputFile
            else appsettings.outputName_make(state.inputSourceFile.name, variant.name)
        )

        LOG(f"Preprocessing variant '{variant.name or 'default'}'...", level=1)
        try:
            result = Preprocessor(flags=variant.flags, prefix=prefix).process(source)
        except PreprocessError as e:
            print(f"Preprocess error in {state.inputSourceFile.name}: {e}", file=sys.stderr)
            sys.exit(1)

        output_path = state.outputdir / output_name
        output_path.write_bytes(result)
        output_files.append(str(output_path))
        LOG(f"Wrote {output_path}", level=2)

    state.processResult = {
        "status": True,
        "output_files": output_files,
        "variant_count": len(output_files),
    }
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display processing results to user.

    Args:
        inputstate: Program state with processResult populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if processResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.processResult:
        print("Error: Preprocessing failed", file=sys.stderr)
        sys.exit(1)

    LOG("✓ Preprocessing successful!", level=1)
    for output_file in state.processResult["output_files"]:
        LOG(f"  Output: {output_file}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="pragmatext - line-oriented directive preprocessor",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - preprocess an annotated source into variant outputs.

    Orchestrates the pipeline:
        1. env_check: Validate paths, load variants
        2. source_preprocess: Run the engine once per variant
        3. results_report: Display results to user

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, source_preprocess, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
