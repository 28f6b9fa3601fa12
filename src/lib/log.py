"""
Centralized logging using Loguru with context-aware verbosity.

LOG() checks the verbosity of the ProgramState connected to the current
context, so library code (compiler, transformer, server handlers) can log
without being handed the state.

All log output goes to stderr: in file mode stdout may be carrying the
rendered document.

Usage:
    from .log import LOG, state_connectToLogger

    state_connectToLogger(state)

    LOG("Rendering notes.md", level=1)
    LOG("Parsed 42 events", level=2)
    LOG("Pikchr block at event 7", level=3)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# Context variable to hold current ProgramState
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{module: <12}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Tasks and worker threads started afterwards inherit the connection,
    which is how request handlers in serve mode pick up the CLI verbosity.

    Args:
        state: ProgramState instance with verbosity attribute
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru formatting arguments

    With no connected state nothing is logged; tests and library callers
    stay quiet unless they opt in.
    """
    state = _program_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)
