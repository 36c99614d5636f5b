"""
sty2dtx - Convert LaTeX .sty and .cls files into documented .dtx sources
"""

__version__ = "2.4.0"
__author__ = "Martin Scharrer"
__email__ = "martin.scharrer@web.de"

from .converter import Converter, UsageCollector
from .matchers import header_match, macroHeader_match, environmentHeader_match
from .template import template_render, TemplateError
from .sources import SourceError
from .options import VariableError
from .log import LOG, state_connectToLogger

__all__ = [
    "Converter",
    "UsageCollector",
    "header_match",
    "macroHeader_match",
    "environmentHeader_match",
    "template_render",
    "TemplateError",
    "SourceError",
    "VariableError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
