"""
Template loading and placeholder substitution

Templates are plain text files containing <+NAME+> placeholders. Rendering
replaces every placeholder whose NAME is a known variable with its value
and leaves all other placeholders untouched.

Two templates ship with the package:
  - default.dtx: documented source skeleton with <+USAGE+> and
    <+IMPLEMENTATION+> slots
  - default.ins: docstrip installer for the generated .dtx file
"""

import re
from pathlib import Path
from typing import Dict, Mapping, Optional

from .log import LOG
from .sources import ENCODING, ERRORS, STDIO, SourceError, outputPath_check, text_write


TEMPLATES_DIR = Path(__file__).parent.parent / "templates"

DTX_TEMPLATE = "default.dtx"
INS_TEMPLATE = "default.ins"

PLACEHOLDER = re.compile(r"<\+(\w+)\+>")


class TemplateError(Exception):
    """Raised when a template cannot be read or written"""
    pass


def template_render(template: str, variables: Mapping[str, str]) -> str:
    """
    Substitute <+NAME+> placeholders

    Values are inserted verbatim. Placeholders naming unknown variables
    are left as they are.

    Args:
        template: Template text
        variables: Variable values by name (case sensitive)

    Returns:
        Rendered text

    Example:
        >>> template_render("<+a+> <+b+>", {"a": "x"})
        'x <+b+>'
    """

    def placeholder_expand(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in variables:
            return str(variables[name])
        LOG(f"Unknown template variable '{name}' left unchanged", level=3)
        return match.group(0)

    return PLACEHOLDER.sub(placeholder_expand, template)


def placeholders_find(template: str) -> Dict[str, int]:
    """Count the placeholders used by a template, by name"""
    counts: Dict[str, int] = {}
    for name in PLACEHOLDER.findall(template):
        counts[name] = counts.get(name, 0) + 1
    return counts


def builtin_get(name: str) -> str:
    """Text of a built-in template ("default.dtx" or "default.ins")"""
    return (TEMPLATES_DIR / name).read_text(encoding="utf-8")


def template_load(path: Optional[str], default: str) -> str:
    """
    Load a template file, falling back to a built-in template

    Args:
        path: User template file, or None for the built-in one
        default: Built-in template name

    Returns:
        Template text

    Raises:
        TemplateError: If the template file cannot be read
    """
    if not path:
        LOG(f"Using built-in template {default}", level=2)
        return builtin_get(default)

    try:
        text = Path(path).read_text(encoding=ENCODING, errors=ERRORS)
    except OSError as e:
        raise TemplateError(f"Can't read template file '{path}': {e.strerror}")
    LOG(f"Using template file {path}", level=2)
    return text


def template_export(name: str, path: str, overwrite: bool = False) -> None:
    """
    Write a built-in template to a file, or to stdout for "-"

    An existing file is only replaced when overwrite is set.

    Raises:
        TemplateError: If the file exists or cannot be written
    """
    text = builtin_get(name)
    try:
        outputPath_check(path, overwrite)
        text_write(path, text)
    except SourceError as e:
        raise TemplateError(f"Can't export template: {e}")
    if path != STDIO:
        LOG(f"Exported template {name} to {path}", level=1)
