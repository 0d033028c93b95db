"""
Verbosity-gated logging for pragmatext, built on loguru.

The engine is a library first: it must print nothing unless a program
has asked for output. LOG() therefore stays silent until a ProgramState
is connected to the current context, and then emits only messages at or
below that state's verbosity.

Verbosity maps onto loguru levels so sinks can filter as usual:

    1 -> INFO     progress of the CLI pipeline
    2 -> DEBUG    files, flags and variants in use
    3 -> TRACE    one line per interpreted directive

Usage:
    from lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)
    LOG("Preprocessing variant 'debug'...", level=1)
    LOG("line 12: if debug", level=3)
"""

import sys
from contextvars import ContextVar
from typing import Any, Optional, TextIO

from loguru import logger

# ProgramState whose verbosity gates LOG() in this context
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

VERBOSITY_LEVELS = {1: "INFO", 2: "DEBUG", 3: "TRACE"}

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{extra[component]: <10}</cyan> ║ "
    "<level>{message}</level>"
)

_log = logger.bind(component="pragmatext")


def logger_configure(sink: TextIO = sys.stderr) -> int:
    """
    Route pragmatext messages to a sink, replacing loguru's default handler.

    Returns:
        loguru handler id
    """
    logger.remove()
    return logger.add(sink, format=logger_format, level="TRACE")


logger_configure()


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Args:
        state: ProgramState instance with verbosity attribute
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if the connected state's verbosity allows it.

    Args:
        message: Log message to display
        level: Verbosity needed to see the message (1-3)
        **kwargs: Formatting arguments passed on to loguru
    """
    state = _program_state.get()
    if state is None or getattr(state, 'verbosity', 0) < level:
        return

    loguru_level = VERBOSITY_LEVELS.get(level, "TRACE")
    _log.opt(depth=1).log(loguru_level, message, **kwargs)
