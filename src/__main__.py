#!/usr/bin/env python3
"""
sty2dtx - Convert a LaTeX .sty or .cls file into a documented .dtx source

Reads a plain style or class file, wraps every macro and environment
definition in macro/environment + macrocode blocks, wraps all other code in
macrocode blocks, and inserts the result into a .dtx template together with
a usage section listing the user facing macros and environments.

The conversion is a heuristic: definitions are only recognized when they
start at the beginning of a line, and a definition body ends either on its
header line (balanced braces) or at a line holding a single "}".

Usage:
    sty2dtx [options] [--VAR VALUE ...] [--] [infile ...|-] [outfile|-]

Examples:
    # Convert to stdout
    sty2dtx mypkg.sty

    # Write mypkg.dtx and mypkg.ins, setting some template variables
    sty2dtx -B -I --author "Jane Doe" --email jane@example.org mypkg.sty

    # Export the built-in template for customization, then use it
    sty2dtx -e mytemplate.dtx
    sty2dtx -t mytemplate.dtx mypkg.sty mypkg.dtx
"""

import sys
from pathlib import Path
from typing import List, Optional
from argparse import ArgumentParser, Namespace, RawDescriptionHelpFormatter

from .lib import Converter, __version__, LOG, state_connectToLogger
from .lib.options import (
    KNOWN_VARIABLES,
    VariableError,
    fileBase_derive,
    variables_build,
    variables_extract,
    variablesFile_load,
)
from .lib.sources import SourceError, lines_collect, outputPath_check, texts_write
from .lib.template import (
    DTX_TEMPLATE,
    INS_TEMPLATE,
    TemplateError,
    template_export,
    template_load,
    template_render,
)
from .config import appsettings
from .models import ProgramState, pipeline


EXTENDED_HELP = """
Template variables:
  Every option of the form --NAME=VALUE or --NAME VALUE that is not one of
  the options above sets the template variable NAME. The template
  placeholder <+NAME+> is replaced by VALUE. Placeholders of unknown
  variables are left unchanged.

{variables}

  Always set by sty2dtx:
    ext             'sty' for packages, 'cls' for classes
    Type            'Package' or 'Class'
    USAGE           Usage section (\\DescribeMacro / \\DescribeEnv entries)
    IMPLEMENTATION  Converted source code

  Defaults can be set with STY2DTX_<NAME> environment variables
  (e.g. STY2DTX_AUTHOR) or in a .env file.

Variables file (-F):
  A YAML mapping of variable names to values. Command line variables take
  precedence over the file.

Conversion:
  - Lines starting with \\def, \\gdef, \\edef, \\xdef, \\newcommand,
    \\renewcommand, \\providecommand or \\@namedef (optionally behind
    \\global, \\long, \\protected, \\outer) open a macro block.
  - Lines starting with \\newenvironment, \\renewenvironment or
    \\provideenvironment open an environment block.
  - A definition ends on its first line if its braces are balanced, or at
    the next line holding only "}".
  - Other code is put into macrocode blocks. Empty lines are removed.
"""

# Define CLI arguments
parser = ArgumentParser(
    prog="sty2dtx",
    usage="%(prog)s [options] [--VAR VALUE ...] [--] [infile ...|-] [outfile|-]",
    description="sty2dtx - Convert a .sty or .cls file into a documented .dtx source",
    formatter_class=RawDescriptionHelpFormatter,
)

parser.add_argument(
    "inputFiles",
    nargs="*",
    metavar="FILE",
    help="Input files ('-' for stdin); with more than one file the last one is the output file",
)

parser.add_argument(
    "-H", "--extended-help", dest="extendedHelp", action="store_true",
    help="Print extended help (template variables) and exit",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")

parser.add_argument(
    "-v",
    "--verbose",
    dest="verbosity",
    action="count",
    default=0,
    help="Increase logging verbosity on stderr (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-o", "--output", default=None, type=str, help="Output file ('-' for stdout)")

parser.add_argument(
    "-O", "--overwrite", action="store_true", help="Overwrite already existing output files"
)

parser.add_argument(
    "-B", "--basename", dest="useBasename", action="store_true",
    help="Name the output file after the single input file (foo.sty -> foo.dtx)",
)

parser.add_argument(
    "-I", "--ins", dest="installFile", action="store_true",
    help="Also create an .ins installer file next to the output file",
)

parser.add_argument("-t", "--template", default=None, type=str, help="Use this .dtx template file")

parser.add_argument(
    "-T", "--ins-template", dest="insTemplate", default=None, type=str,
    help="Use this .ins template file",
)

parser.add_argument(
    "-e", "--export-template", dest="exportTemplate", default=None, type=str,
    help="Export the built-in .dtx template to this file ('-' for stdout) and exit",
)

parser.add_argument(
    "-E", "--export-ins-template", dest="exportInsTemplate", default=None, type=str,
    help="Export the built-in .ins template to this file ('-' for stdout) and exit",
)

parser.add_argument(
    "-D", "--use-date", dest="useDate", action="store_true",
    help="Use the current date for the 'date' variable",
)

parser.add_argument(
    "-F", "--variables-file", dest="variablesFile", default=None, type=str,
    help="Read template variables from this YAML file",
)

KNOWN_OPTIONS = {opt for action in parser._actions for opt in action.option_strings}


def extendedHelp_print() -> None:
    """Print the regular help followed by the template variable reference"""
    parser.print_help()
    variables = "\n".join(
        f"    {name:<15} {description}" for name, description in KNOWN_VARIABLES.items()
    )
    print(EXTENDED_HELP.format(variables=variables))


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Resolve input and output files and the template variables.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputFiles: Input files without a trailing output file
            - outputPath: Output file, "-" for stdout
            - insPath: .ins file if requested
            - variables: Complete template variable set
            - envOK: True if environment is valid

    Exits:
        1 if an output file exists (without -O) or variables are invalid
    """

    state = inputstate.copy()

    LOG("Checking environment...", level=2)

    files = list(state.inputFiles)
    try:
        if state.output:
            state.outputPath = state.output
        elif state.useBasename:
            if len(files) != 1 or files[0] == "-":
                raise SourceError("-B requires exactly one named input file")
            state.outputPath = str(Path(files[0]).with_suffix(".dtx"))
        elif len(files) > 1:
            state.outputPath = files.pop()
        else:
            state.outputPath = "-"
        state.inputFiles = files

        if state.installFile:
            if state.outputPath == "-":
                raise SourceError("-I requires an output file to derive the .ins file name from")
            state.insPath = str(Path(state.outputPath).with_suffix(".ins"))

        outputPath_check(state.outputPath, state.overwrite)
        if state.insPath:
            outputPath_check(state.insPath, state.overwrite)

        file_variables = variablesFile_load(state.variablesFile) if state.variablesFile else {}
        state.variables = variables_build(
            state.variablesCLI, file_variables, appsettings, use_date=state.useDate
        )
        if "file" not in state.variables:
            state.variables["file"] = fileBase_derive(state.inputFiles, state.outputPath)
    except (SourceError, VariableError) as e:
        print(f"Error: {e}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    LOG(f"Input: {', '.join(state.inputFiles) or 'stdin'}", level=2)
    LOG(f"Output: {'stdout' if state.outputPath == '-' else state.outputPath}", level=2)

    state.envOK = True
    return state


def source_read(inputstate: ProgramState) -> ProgramState:
    """
    Read all input lines.

    Returns:
        ProgramState with added field:
            - sourceLines: Concatenated lines of all input files

    Exits:
        1 if an input file cannot be read
    """

    state = inputstate.copy()

    try:
        state.sourceLines = lines_collect(state.inputFiles)
    except SourceError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Read {len(state.sourceLines)} lines", level=2)
    return state


def source_convert(inputstate: ProgramState) -> ProgramState:
    """
    Run the region state machine over the input lines.

    Returns:
        ProgramState with added field:
            - conversion: ConversionResult (implementation and usage text)
    """

    state = inputstate.copy()

    LOG("Converting source...", level=1)
    state.conversion = Converter().lines_process(state.sourceLines or [])
    return state


def template_apply(inputstate: ProgramState) -> ProgramState:
    """
    Render the .dtx (and optionally .ins) templates.

    Returns:
        ProgramState with added fields:
            - outputText: Rendered .dtx text
            - insText: Rendered .ins text, if requested

    Exits:
        1 if a template file cannot be read
    """

    state = inputstate.copy()

    if state.conversion is None:
        print("Error: No converted source available", file=sys.stderr)
        sys.exit(1)

    variables = {
        **state.variables,
        "USAGE": state.conversion.usage,
        "IMPLEMENTATION": state.conversion.implementation,
    }

    try:
        dtx_template = template_load(state.template or appsettings.template, DTX_TEMPLATE)
        state.outputText = template_render(dtx_template, variables)
        if state.insPath:
            ins_template = template_load(
                state.insTemplate or appsettings.ins_template, INS_TEMPLATE
            )
            state.insText = template_render(ins_template, variables)
    except TemplateError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    return state


def output_write(inputstate: ProgramState) -> ProgramState:
    """
    Write the rendered text to the output (and .ins) file.

    Both files are written or neither is.

    Exits:
        1 if a file cannot be written
    """

    state = inputstate.copy()

    try:
        outputs = {state.outputPath: state.outputText or ""}
        if state.insPath and state.insText is not None:
            outputs[state.insPath] = state.insText
        texts_write(outputs)
    except SourceError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """Log a summary of the conversion."""
    state: ProgramState = inputstate.copy()
    if state.conversion is not None:
        macros = sum(1 for entry in state.conversion.entries if entry.kind == "macro")
        environments = len(state.conversion.entries) - macros
        LOG(
            f"Done: {state.conversion.regions} regions, "
            f"{macros} user macros, {environments} user environments",
            level=1,
        )
    return state


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point - convert .sty/.cls sources into a .dtx file.

    Orchestrates the conversion pipeline:
        1. env_check: Resolve files and template variables
        2. source_read: Read the input lines
        3. source_convert: Run the region state machine
        4. template_apply: Render the templates
        5. output_write: Write the output files
        6. results_report: Log a summary

    Args:
        argv: Command line arguments, defaults to sys.argv[1:]

    Returns:
        Exit status (0)
    """
    args = sys.argv[1:] if argv is None else list(argv)

    try:
        args, variables = variables_extract(args, KNOWN_OPTIONS)
    except VariableError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    options: Namespace = parser.parse_args(args)
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, variables=variables
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    if options.extendedHelp:
        extendedHelp_print()
        return 0

    try:
        if options.exportTemplate:
            template_export(DTX_TEMPLATE, options.exportTemplate, options.overwrite)
        if options.exportInsTemplate:
            template_export(INS_TEMPLATE, options.exportInsTemplate, options.overwrite)
    except TemplateError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    if options.exportTemplate or options.exportInsTemplate:
        return 0

    pipeline(
        state, env_check, source_read, source_convert, template_apply, output_write, results_report
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
