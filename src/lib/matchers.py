r"""
Definition header matchers

Recognizes macro and environment definitions at the very start of a line.
Matching is a deliberate heuristic: a definition that does not start in
column one, or that hides behind catcode tricks, is simply not recognized
and ends up as plain code.

Recognized macro headers:
    \def\foo, \gdef\foo, \edef\foo, \xdef\foo
    \newcommand\foo, \renewcommand*{\foo}, \providecommand{\foo}
    \@namedef{foo}
    any of the above behind \global, \long, \protected, \outer prefixes

Recognized environment headers:
    \newenvironment{foo}, \renewenvironment{foo}, \provideenvironment{foo}

Example:
    header_match("\\newcommand{\\foo}{bar}") gives a MacroHeader with
    name "foo", command "newcommand{\\" and rest "{bar}".
"""

import re
from typing import Optional

from ..models.regions import (
    DefinitionKind,
    EnvironmentHeader,
    HeaderMatch,
    MacroHeader,
)


MACRO_HEADER = re.compile(
    r"(?P<prefix>(?:\\(?:global|long|protected|outer)\s*)*)"
    r"\\(?P<command>[gex]?def\s*\\|(?:new|renew|provide)command\*?\s*\{?\s*\\|@namedef\{?)"
    r"(?P<name>[a-zA-Z@:]+)\}?"
    r"(?P<rest>.*)"
)

ENVIRONMENT_HEADER = re.compile(
    r"\\(?P<command>(?:new|renew|provide)environment)\s*"
    r"\{\s*(?P<name>[a-zA-Z@:]+)\s*\}"
    r"(?P<rest>.*)"
)

# Names that get an entry in the usage section
USER_NAME = re.compile(r"[a-z]+", re.IGNORECASE)


def macroHeader_match(line: str) -> Optional[MacroHeader]:
    """
    Match a macro definition header at the start of a line

    For the brace-opening forms (\\newcommand{\\foo}, \\@namedef{foo}) one
    leading "}" left on the rest of the line is dropped, so that the brace
    balance only sees the definition body.

    Args:
        line: Input line, with or without its terminator

    Returns:
        MacroHeader, or None if the line does not start with a macro definition
    """
    match = MACRO_HEADER.match(line)
    if not match:
        return None

    header = MacroHeader(
        prefix=match.group("prefix"),
        command=match.group("command"),
        kind=DefinitionKind.command_classify(match.group("command")),
        name=match.group("name"),
        rest=match.group("rest"),
    )
    return rest_normalize(header)


def rest_normalize(header: MacroHeader) -> MacroHeader:
    """Strip one leading '}' from the rest of a brace-opening header"""
    if header.opens_brace and header.rest.startswith("}"):
        return MacroHeader(
            prefix=header.prefix,
            command=header.command,
            kind=header.kind,
            name=header.name,
            rest=header.rest[1:],
        )
    return header


def environmentHeader_match(line: str) -> Optional[EnvironmentHeader]:
    """
    Match an environment definition header at the start of a line

    Args:
        line: Input line, with or without its terminator

    Returns:
        EnvironmentHeader, or None if the line does not start with one
    """
    match = ENVIRONMENT_HEADER.match(line)
    if not match:
        return None

    return EnvironmentHeader(
        command=match.group("command"),
        kind=DefinitionKind.command_classify(match.group("command")),
        name=match.group("name"),
        rest=match.group("rest"),
    )


def header_match(line: str) -> HeaderMatch:
    """
    Classify a line as a macro header, an environment header or neither

    Macro headers take priority over environment headers.
    """
    return macroHeader_match(line) or environmentHeader_match(line)


def userName_is(name: str) -> bool:
    """True if a definition name is letters only (no @ or :)"""
    return USER_NAME.fullmatch(name) is not None
