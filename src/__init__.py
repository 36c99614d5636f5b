"""
sty2dtx - Convert LaTeX .sty and .cls files into documented .dtx sources

Wraps macro and environment definitions of a plain style or class file in
ltxdoc macro/environment blocks and fills a .dtx template with the result.
"""

__version__ = "2.4.0"
__author__ = "Martin Scharrer"
__email__ = "martin.scharrer@web.de"

from .lib import Converter, UsageCollector, header_match, template_render, LOG, state_connectToLogger

__all__ = [
    "Converter",
    "UsageCollector",
    "header_match",
    "template_render",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
