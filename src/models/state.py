"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing conversion stages.
"""

from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable
from dataclasses import dataclass, field
import dataclasses

from .regions import ConversionResult


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the conversion pipeline (state bus pattern).

    Each stage receives the state of the previous one and returns a copy
    with its own fields filled in.

    Pipeline stages and their state additions:
        - Initial: CLI options, variablesCLI
        - env_check: outputPath, insPath, variables, envOK
        - source_read: sourceLines
        - source_convert: conversion
        - template_apply: outputText, insText
        - output_write: (writes files, no additions)
        - results_report: (no additions, terminal stage)

    Attributes:
        inputFiles: Input file paths ("-" for stdin)
        output: Output file from -o
        overwrite: Overwrite existing output files (-O)
        useBasename: Derive the output name from the input file (-B)
        installFile: Also write an .ins file (-I)
        template: Custom .dtx template file (-t)
        insTemplate: Custom .ins template file (-T)
        useDate: Use today's date (-D)
        variablesFile: YAML file with template variables (-F)
        verbosity: Logging verbosity level (0-3)
        variablesCLI: Template variables given on the command line
        envOK: Environment validation passed
        outputPath: Resolved output file ("-" for stdout)
        insPath: Resolved .ins file, or None
        variables: Complete template variable set
        sourceLines: Input lines
        conversion: Converter result
        outputText: Rendered .dtx text
        insText: Rendered .ins text, or None
    """

    # CLI arguments
    inputFiles: List[str] = field(default_factory=list)
    output: Optional[str] = field(default=None)
    overwrite: bool = field(default=False)
    useBasename: bool = field(default=False)
    installFile: bool = field(default=False)
    template: Optional[str] = field(default=None)
    insTemplate: Optional[str] = field(default=None)
    useDate: bool = field(default=False)
    variablesFile: Optional[str] = field(default=None)
    verbosity: int = field(default=0)
    variablesCLI: Dict[str, str] = field(default_factory=dict)

    # Pipeline state
    envOK: bool = field(default=False)
    outputPath: str = field(default="-")
    insPath: Optional[str] = field(default=None)
    variables: Dict[str, str] = field(default_factory=dict)
    sourceLines: Optional[List[str]] = field(default=None)
    conversion: Optional[ConversionResult] = field(default=None)
    outputText: Optional[str] = field(default=None)
    insText: Optional[str] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, variables: Dict[str, str]
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and template variables.

        Args:
            options: Parsed CLI arguments
            variables: Template variables extracted from the command line

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args: Dict[str, Any] = {**filtered_options, "variablesCLI": dict(variables)}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_read,
            source_convert,
            template_apply,
            output_write,
            results_report
        )
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
