"""
Models package for sty2dtx

Contains data structures and type definitions for the conversion pipeline.
"""

from .state import ProgramState, pipeline
from .regions import (
    RegionMode,
    DefinitionKind,
    BraceBalance,
    MacroHeader,
    EnvironmentHeader,
    UsageEntry,
    ConversionResult,
)

__all__ = [
    "ProgramState",
    "pipeline",
    "RegionMode",
    "DefinitionKind",
    "BraceBalance",
    "MacroHeader",
    "EnvironmentHeader",
    "UsageEntry",
    "ConversionResult",
]
