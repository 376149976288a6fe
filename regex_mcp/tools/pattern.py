from __future__ import annotations
import logging
import re

from ..errors import InvalidPattern

"""
Pattern compilation. Patterns use Python `re` syntax and are compiled with
MULTILINE so ^ and $ anchor at line boundaries. Nothing is cached between
invocations.
"""

logger = logging.getLogger(__name__)

DEFAULT_FLAGS = re.MULTILINE


def compile_pattern(pattern: str, flags: int = DEFAULT_FLAGS) -> re.Pattern:
    if not isinstance(pattern, str):
        raise InvalidPattern(repr(pattern), "pattern must be a string")
    if pattern == "":
        raise InvalidPattern(pattern, "pattern must not be empty")
    try:
        rx = re.compile(pattern, flags)
    except re.error as e:
        logger.debug("pattern %r failed to compile: %s", pattern, e)
        raise InvalidPattern(pattern, str(e)) from e
    except (OverflowError, RecursionError) as e:
        raise InvalidPattern(pattern, f"{type(e).__name__}: {e}") from e
    return rx
