"""
Logging via Loguru, gated by the verbosity of the running ProgramState.

Output (the .dtx text) may go to stdout, so all log messages go to stderr.
The LOG() function looks up the ProgramState bound to the current context
and drops messages above its verbosity, so lib modules can log without
having the state passed in.

Usage:
    from .log import LOG, state_connectToLogger

    state_connectToLogger(state)          # once, at pipeline start
    LOG("Wrote foo.dtx", level=1)         # -v
    LOG("Reading foo.sty", level=2)       # -vv
    LOG("line 12: macro 'foo'", level=3)  # -vvv
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# ProgramState of the current run
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{module: <10}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Bind a ProgramState to the logging context.

    Args:
        state: ProgramState instance with a verbosity attribute
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if the current state's verbosity allows.

    Without a connected state (e.g. when the converter is used as a
    library) nothing is logged.

    Args:
        message: Log message
        level: Minimum verbosity required (1=-v, 2=-vv, 3=-vvv)
        **kwargs: Additional loguru arguments
    """
    state = _program_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)
