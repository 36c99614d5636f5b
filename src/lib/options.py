"""
Template variable options

Template variables are given on the command line as --name=value or
--name value, mixed freely with the regular options. They are pulled out
of argv before argparse sees the rest.

Variables can also be read from a YAML mapping file (-F), e.g.:

    author: Jane Doe
    email: jane@example.org
    type: class

Precedence, lowest first: settings defaults, variables file, command line.
"""

import datetime
from pathlib import Path
from typing import Any, Collection, Dict, List, Mapping, Optional, Tuple

import yaml

from ..config import appsettings, AppSettings
from .log import LOG


# Names with a meaning beyond plain substitution
KNOWN_VARIABLES: Dict[str, str] = {
    "author": "Author name",
    "email": "Author email address",
    "maintainer": "Maintainer name (defaults to the author)",
    "year": "Copyright year (defaults to the current year)",
    "version": "Version string",
    "date": "Release date (YYYY/MM/DD)",
    "description": "One line description of the package or class",
    "type": "'package' or 'class'",
    "file": "Base name of the generated files",
}

FILE_TYPES: Dict[str, Tuple[str, str]] = {
    "package": ("sty", "Package"),
    "class": ("cls", "Class"),
}


class VariableError(Exception):
    """Raised for malformed variable options or invalid variable values"""
    pass


def variables_extract(
    argv: List[str], known_options: Collection[str]
) -> Tuple[List[str], Dict[str, str]]:
    """
    Split template variables from the remaining command line

    Args:
        argv: Command line arguments (without the program name)
        known_options: Long options that belong to the program itself
                       (e.g. "--output")

    Returns:
        (remaining argv, variables by name)

    Raises:
        VariableError: If a --name option has no value

    Example:
        >>> variables_extract(["--author", "Me", "-v", "--year=2024", "a.sty"], {"--output"})
        (['-v', 'a.sty'], {'author': 'Me', 'year': '2024'})
    """
    remaining: List[str] = []
    variables: Dict[str, str] = {}

    index = 0
    while index < len(argv):
        arg = argv[index]
        index += 1

        if arg == "--":
            remaining.append(arg)
            remaining.extend(argv[index:])
            break

        if not arg.startswith("--") or len(arg) == 2:
            remaining.append(arg)
            continue

        name, sep, value = arg[2:].partition("=")
        if f"--{name}" in known_options:
            remaining.append(arg)
            continue

        if not sep:
            if index >= len(argv):
                raise VariableError(f"Variable option '--{name}' requires a value")
            value = argv[index]
            index += 1

        variables[name] = value

    return remaining, variables


def variablesFile_load(path: str) -> Dict[str, str]:
    """
    Read template variables from a YAML mapping

    Raises:
        VariableError: If the file cannot be read or is not a mapping
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except OSError as e:
        raise VariableError(f"Can't read variables file '{path}': {e.strerror}")
    except yaml.YAMLError as e:
        raise VariableError(f"Failed to parse variables file '{path}': {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise VariableError(f"Variables file '{path}' must contain a mapping")

    LOG(f"Read {len(data)} variables from {path}", level=2)
    return {str(key): "" if value is None else str(value) for key, value in data.items()}


def fileBase_derive(paths: List[str], output: Optional[str]) -> str:
    """Base name for <+file+>: the output file, else the first input file"""
    for path in [output] + list(paths):
        if path and path != "-":
            return Path(path).stem
    return "unknown"


def variables_build(
    cli: Mapping[str, str],
    file_variables: Optional[Mapping[str, str]] = None,
    settings: AppSettings = appsettings,
    use_date: bool = False,
    today: Optional[datetime.date] = None,
) -> Dict[str, str]:
    """
    Merge all variable sources and fill in derived values

    Args:
        cli: Variables from the command line
        file_variables: Variables from a -F file
        settings: Defaults
        use_date: Default the date to today
        today: Date to use instead of the real current date

    Returns:
        Complete variable set, including ext and Type

    Raises:
        VariableError: If type is not 'package' or 'class'
    """
    today = today or datetime.date.today()

    variables: Dict[str, str] = settings.variables_default()
    variables.update(file_variables or {})
    variables.update(cli)

    if not variables.get("maintainer"):
        variables["maintainer"] = variables.get("author", "")
    if not variables.get("year"):
        variables["year"] = str(today.year)
    if use_date and "date" not in cli:
        variables["date"] = today.strftime("%Y/%m/%d")

    file_type = variables.get("type", "package").lower()
    if file_type not in FILE_TYPES:
        raise VariableError(
            f"Invalid type '{variables.get('type')}': must be 'package' or 'class'"
        )
    variables["type"] = file_type
    variables["ext"], variables["Type"] = FILE_TYPES[file_type]
    return variables
