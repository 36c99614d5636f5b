"""
Region and definition data models

Type-safe structures shared by the header matchers and the region state
machine: the region modes, the recognized definition commands, the match
results and the brace balance heuristic.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional, Union


# Wrapper text emitted around converted regions. Macro and environment
# starts are %-formatted with the definition name.
MACRO_START = "%% \\begin{macro}{\\%s}\n%%    \\begin{macrocode}\n"
MACRO_STOP = "%    \\end{macrocode}\n% \\end{macro}\n%\n"

ENVIRONMENT_START = "%% \\begin{environment}{%s}\n%%    \\begin{macrocode}\n"
ENVIRONMENT_STOP = "%    \\end{macrocode}\n% \\end{environment}\n%\n"

MACROCODE_START = "%    \\begin{macrocode}\n"
MACROCODE_STOP = "%    \\end{macrocode}\n%\n"

# Usage section entries
MACRO_USAGE = "%% \\DescribeMacro{\\%s}\n%%\n"
ENVIRONMENT_USAGE = "%% \\DescribeEnv{%s}\n%%\n"


class RegionMode(Enum):
    """
    Wrapping mode of the converter

    Exactly one mode is active at any time. Every mode except OUTSIDE
    has a closing wrapper that must be emitted before another region opens.
    """
    OUTSIDE = "outside"
    IN_MACRO = "macro"
    IN_MACROCODE = "macrocode"
    IN_ENVIRONMENT = "environment"

    @property
    def stop(self) -> str:
        """Closing wrapper text for this mode (empty for OUTSIDE)"""
        return {
            RegionMode.IN_MACRO: MACRO_STOP,
            RegionMode.IN_MACROCODE: MACROCODE_STOP,
            RegionMode.IN_ENVIRONMENT: ENVIRONMENT_STOP,
        }.get(self, "")


class DefinitionKind(Enum):
    """Definition commands recognized at the start of a line"""
    TEX_DEF = "def"                     # \def \gdef \edef \xdef
    NEW_COMMAND = "newcommand"
    RENEW_COMMAND = "renewcommand"
    PROVIDE_COMMAND = "providecommand"
    NAMEDEF = "@namedef"
    NEW_ENVIRONMENT = "newenvironment"
    RENEW_ENVIRONMENT = "renewenvironment"
    PROVIDE_ENVIRONMENT = "provideenvironment"

    @classmethod
    def command_classify(cls, command: str) -> "DefinitionKind":
        """
        Map the matched command text to its kind

        Args:
            command: Command text as captured by a header pattern
                     (e.g. "gdef\\", "newcommand*{\\", "@namedef{")

        Returns:
            The DefinitionKind for the command
        """
        for kind in (cls.NAMEDEF, cls.PROVIDE_ENVIRONMENT, cls.RENEW_ENVIRONMENT,
                     cls.NEW_ENVIRONMENT, cls.PROVIDE_COMMAND, cls.RENEW_COMMAND,
                     cls.NEW_COMMAND):
            if command.startswith(kind.value):
                return kind
        return cls.TEX_DEF


@dataclass(frozen=True)
class BraceBalance:
    """
    Open and close brace counts of a piece of text

    Equal counts are taken to mean that a definition body is already
    complete on its header line.
    """
    opened: int
    closed: int

    @classmethod
    def count(cls, text: str) -> "BraceBalance":
        return cls(opened=text.count("{"), closed=text.count("}"))

    @property
    def is_balanced(self) -> bool:
        return self.opened == self.closed


@dataclass(frozen=True)
class MacroHeader:
    r"""
    Macro definition found at the start of a line

    Attributes:
        prefix: \global, \long, \protected, \outer prefixes, verbatim
        command: Matched definer text (e.g. "def\\", "newcommand*{\\")
        kind: Classified definer
        name: Bare macro name (letters, @ and :)
        rest: Remainder of the line after the header, without terminator

    Example:
        For "\\long\\def\\foo#1{bar}":
        MacroHeader(prefix="\\long", command="def\\", kind=TEX_DEF,
                    name="foo", rest="#1{bar}")
    """
    prefix: str
    command: str
    kind: DefinitionKind
    name: str
    rest: str

    @property
    def opens_brace(self) -> bool:
        """True for the brace-opening forms: command{, command*{, @namedef{"""
        return self.command.rstrip("\\").rstrip().endswith("{")

    @property
    def balance(self) -> BraceBalance:
        return BraceBalance.count(self.prefix + self.rest)


@dataclass(frozen=True)
class EnvironmentHeader:
    """
    Environment definition found at the start of a line

    Attributes:
        command: Matched definer (e.g. "newenvironment")
        kind: Classified definer
        name: Environment name (letters, @ and :)
        rest: Remainder of the line after the closing brace of the name
    """
    command: str
    kind: DefinitionKind
    name: str
    rest: str

    @property
    def balance(self) -> BraceBalance:
        return BraceBalance.count(self.rest)


HeaderMatch = Optional[Union[MacroHeader, EnvironmentHeader]]


@dataclass(frozen=True)
class UsageEntry:
    """A user facing definition listed in the usage section"""
    kind: str   # "macro" or "environment"
    name: str

    @property
    def text(self) -> str:
        if self.kind == "environment":
            return ENVIRONMENT_USAGE % self.name
        return MACRO_USAGE % self.name


@dataclass
class ConversionResult:
    """
    Output of a complete conversion run

    Attributes:
        implementation: Annotated implementation text (wrappers and lines)
        usage: Usage section text, one entry per user facing definition
        entries: The usage entries in encounter order
        regions: Number of regions opened (and closed) during the run
    """
    implementation: str
    usage: str
    entries: List[UsageEntry] = field(default_factory=list)
    regions: int = 0
