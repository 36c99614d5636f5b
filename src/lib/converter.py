"""
Region state machine for .sty -> .dtx conversion

Consumes a style or class file line by line and wraps every recognized
macro or environment definition in a macro/environment region. Any other
non-empty code is wrapped in a generic macrocode region.

The converter owns its whole state: the current RegionMode, the
implementation buffer and the usage collector. Nothing is shared between
Converter instances.

Line handling, in priority order:
    1. Macro header           -> close open region, open macro region
    2. Environment header     -> close open region, open environment region
    3. "}" inside a macro     -> close macro region
    4. "}" inside environment -> close environment region
    5. Empty line             -> dropped
    6. Anything else          -> body line, or opens a macrocode region

Example:
    >>> converter = Converter()
    >>> result = converter.lines_process(["\\\\def\\\\foo{bar}\\n"])
    >>> result.entries[0].name
    'foo'
"""

import re
from typing import Iterable, List

from ..models.regions import (
    ConversionResult,
    EnvironmentHeader,
    MacroHeader,
    RegionMode,
    UsageEntry,
    ENVIRONMENT_START,
    MACRO_START,
    MACROCODE_START,
)
from .matchers import header_match, userName_is
from .log import LOG


MACRO_CLOSE_LINE = re.compile(r"\}\s*")
ENVIRONMENT_CLOSE_LINE = re.compile(r"\}")

# Minimum number of "{" on a one-line environment definition
ENVIRONMENT_ONELINE_BRACES = 2


class UsageCollector:
    """
    Collects usage entries for user facing definitions

    Entries are kept in encounter order. A name defined twice is listed
    twice.
    """

    def __init__(self) -> None:
        self.entries: List[UsageEntry] = []

    def entry_add(self, kind: str, name: str) -> bool:
        """
        Record a definition if its name is letters only

        Returns:
            True if an entry was added
        """
        if not userName_is(name):
            LOG(f"No usage entry for internal {kind} '{name}'", level=3)
            return False
        self.entries.append(UsageEntry(kind=kind, name=name))
        return True

    @property
    def text(self) -> str:
        return "".join(entry.text for entry in self.entries)


class Converter:
    """
    Line classifying state machine

    Attributes:
        mode: Current RegionMode, starts OUTSIDE
        chunks: Implementation buffer (wrapper text and raw lines, in order)
        usage: UsageCollector for the usage section
        regions: Number of regions opened so far
        line_number: Number of lines consumed so far
    """

    def __init__(self) -> None:
        self.mode: RegionMode = RegionMode.OUTSIDE
        self.chunks: List[str] = []
        self.usage = UsageCollector()
        self.regions = 0
        self.line_number = 0

    def lines_process(self, lines: Iterable[str]) -> ConversionResult:
        """
        Convert a complete sequence of lines

        Args:
            lines: Input lines, terminators included

        Returns:
            ConversionResult with implementation and usage text
        """
        for line in lines:
            self.line_process(line)
        return self.finish()

    def line_process(self, line: str) -> None:
        """Classify a single line and append the resulting output"""
        self.line_number += 1
        text = line.rstrip("\r\n")

        header = header_match(text)
        if isinstance(header, MacroHeader):
            self.macro_open(line, header)
        elif isinstance(header, EnvironmentHeader):
            self.environment_open(line, header)
        elif self.mode is RegionMode.IN_MACRO and MACRO_CLOSE_LINE.fullmatch(text):
            self.line_append(line)
            self.region_close()
        elif self.mode is RegionMode.IN_ENVIRONMENT and ENVIRONMENT_CLOSE_LINE.fullmatch(text):
            self.line_append(line)
            self.region_close()
        elif not text:
            pass
        elif self.mode is not RegionMode.OUTSIDE:
            self.line_append(line)
        else:
            self.region_open(RegionMode.IN_MACROCODE, MACROCODE_START)
            self.line_append(line)

    def macro_open(self, line: str, header: MacroHeader) -> None:
        """Start a macro region, closing it again if the body ends on this line"""
        self.usage.entry_add("macro", header.name)
        self.region_close()
        self.region_open(RegionMode.IN_MACRO, MACRO_START % header.name)
        self.line_append(line)

        balance = header.balance
        LOG(
            f"line {self.line_number}: macro '{header.name}' "
            f"({header.kind.value}, braces {balance.opened}/{balance.closed})",
            level=3,
        )
        if balance.is_balanced:
            self.region_close()

    def environment_open(self, line: str, header: EnvironmentHeader) -> None:
        """Start an environment region, closing it for one-line definitions"""
        self.usage.entry_add("environment", header.name)
        self.region_close()
        self.region_open(RegionMode.IN_ENVIRONMENT, ENVIRONMENT_START % header.name)
        self.line_append(line)

        balance = header.balance
        LOG(
            f"line {self.line_number}: environment '{header.name}' "
            f"(braces {balance.opened}/{balance.closed})",
            level=3,
        )
        if balance.opened >= ENVIRONMENT_ONELINE_BRACES and balance.is_balanced:
            self.region_close()

    def region_open(self, mode: RegionMode, start: str) -> None:
        self.chunks.append(start)
        self.mode = mode
        self.regions += 1

    def region_close(self) -> None:
        """Emit the closing wrapper of the open region, if any"""
        if self.mode is RegionMode.OUTSIDE:
            return
        self.chunks.append(self.mode.stop)
        self.mode = RegionMode.OUTSIDE

    def line_append(self, line: str) -> None:
        """Append a raw line; a missing terminator is supplied"""
        if not line.endswith("\n"):
            line += "\n"
        self.chunks.append(line)

    def finish(self) -> ConversionResult:
        """
        Flush the open region at end of input

        Returns:
            ConversionResult for everything consumed so far
        """
        self.region_close()
        LOG(
            f"Converted {self.line_number} lines into {self.regions} regions, "
            f"{len(self.usage.entries)} usage entries",
            level=2,
        )
        return ConversionResult(
            implementation="".join(self.chunks),
            usage=self.usage.text,
            entries=list(self.usage.entries),
            regions=self.regions,
        )
