from __future__ import annotations

"""
Error taxonomy for regex search/replace.

InvalidPattern and GroupIndexOutOfRange abort a whole batch before any file
is touched. NotText only ever annotates a single file's result.
"""


class RegexToolError(Exception):
    """Base class for errors raised by the search/replace engine."""


class InvalidPattern(RegexToolError):
    """The regex pattern could not be compiled."""

    def __init__(self, pattern: str, message: str):
        self.pattern = pattern
        self.message = message
        super().__init__(f"Invalid regex pattern {pattern!r}: {message}")


class GroupIndexOutOfRange(RegexToolError):
    """A replacement references a group index that can never exist."""

    def __init__(self, index: int, maximum: int):
        self.index = index
        self.maximum = maximum
        super().__init__(f"Group reference ${index} exceeds the maximum group index {maximum}")


class NotText(RegexToolError):
    """File content is binary or not valid text in the configured encoding."""


class InvalidArguments(RegexToolError):
    """A tool invocation is missing arguments or has arguments of the wrong type."""
