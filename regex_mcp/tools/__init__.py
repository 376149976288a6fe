from __future__ import annotations
from typing import Dict, Any, Callable, Optional
import json as _json
import logging

from ..config import Settings
from ..errors import InvalidArguments, RegexToolError
from .grep_replace import regex_search, regex_replace

logger = logging.getLogger(__name__)

ToolFn = Callable[[Dict[str, Any]], Dict[str, Any]]

TOOL_SPECS: Dict[str, Dict[str, Any]] = {
    "regex_search": {
        "description": (
            "Search for regex pattern matches across files. Returns matching lines with "
            "file paths, line and column numbers, matched text and capture groups."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "pattern": {"type": "string", "description": "Regex pattern to search for (Python re syntax)"},
                "files": {"type": "string", "description": "Glob pattern for files (e.g., 'src/**/*.php')"},
                "limit": {"type": "integer", "minimum": 0, "description": "Maximum matches to return (default: 50)"},
            },
            "required": ["pattern", "files"],
        },
    },
    "regex_replace": {
        "description": (
            "Replace text matching a regex pattern across multiple files. Supports capture groups "
            "($1, $2, etc.; $0 for the entire match) in the replacement; any other $ is kept literally. "
            "Returns a summary of changes made."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "pattern": {"type": "string", "description": "Regex pattern to match (Python re syntax)"},
                "replacement": {"type": "string", "description": "Replacement string. Use $1, $2 for capture groups, $0 for entire match"},
                "files": {"type": "string", "description": "Glob pattern for files (e.g., 'src/**/*.php')"},
                "dry_run": {"type": "boolean", "description": "Preview changes without writing (default: false)"},
                "limit": {"type": "integer", "minimum": 0, "description": "Maximum matches to replace across all files (default: no limit)"},
            },
            "required": ["pattern", "replacement", "files"],
        },
    },
}

_TYPES = {"string": str, "integer": int, "boolean": bool}


def validate_args(tool: str, args: Dict[str, Any]) -> Dict[str, Any]:
    """Check `args` against the tool's input schema; drops explicit nulls."""
    schema = TOOL_SPECS[tool]["inputSchema"]
    props = schema["properties"]
    if not isinstance(args, dict):
        raise InvalidArguments(f"arguments must be an object, got {type(args).__name__}")
    args = {k: v for k, v in args.items() if v is not None}
    unknown = sorted(set(args) - set(props))
    if unknown:
        raise InvalidArguments(f"unknown argument(s): {', '.join(unknown)}")
    missing = [k for k in schema["required"] if k not in args]
    if missing:
        raise InvalidArguments(f"missing required argument(s): {', '.join(missing)}")
    for name, value in args.items():
        spec = props[name]
        expected = _TYPES[spec["type"]]
        # bool is an int subclass; keep them apart
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise InvalidArguments(f"{name} must be a {spec['type']}")
        if "minimum" in spec and value < spec["minimum"]:
            raise InvalidArguments(f"{name} must be >= {spec['minimum']}")
    return args


class ToolRegistry:
    def __init__(self, settings: Optional[Settings] = None, runner=None):
        from ..runner import BatchRunner
        self.settings = settings or Settings()
        self.runner = runner or BatchRunner(settings=self.settings)
        self._tools: dict[str, ToolFn] = {
            "regex_search": lambda a: regex_search(self.runner, **a),
            "regex_replace": lambda a: regex_replace(self.runner, **a),
        }

    @property
    def names(self) -> list[str]:
        return list(self._tools)

    def invoke(self, tool: str, args: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run a tool and wrap the outcome in a status envelope."""
        if tool not in self._tools:
            return {"status": "error", "tool": tool, "error": "unknown tool"}
        try:
            out = self._tools[tool](validate_args(tool, args or {}))
            return {"status": "ok", "tool": tool, **out}
        except (RegexToolError, ValueError) as e:
            logger.info("%s failed: %s", tool, e)
            return {"status": "error", "tool": tool, "error": f"{type(e).__name__}: {e}"}
        except Exception as e:
            logger.exception("%s crashed", tool)
            return {"status": "error", "tool": tool, "error": f"{type(e).__name__}: {e}"}

    def dispatch(self, tool: str, args: Optional[Dict[str, Any]] = None) -> str:
        return _json.dumps(self.invoke(tool, args))
