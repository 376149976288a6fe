from __future__ import annotations
from typing import TYPE_CHECKING, Any, Dict, Optional

from ..report import format_replace, format_search

if TYPE_CHECKING:
    from ..runner import BatchRunner

"""
Tool: regex_search
Description: Search for regex pattern matches across files. Returns each match with file path, line, column, matched text and capture groups.
Args: {"pattern": "regex", "files": "src/**/*.py", "limit": 50}

Tool: regex_replace
Description: Replace text matching a regex pattern across files. $1, $2 ... insert capture groups and $0 the whole match; any other $ is literal. Set dry_run to preview without writing.
Args: {"pattern": "regex", "replacement": "string", "files": "src/**/*.py", "dry_run": false}
"""


def regex_search(runner: BatchRunner, pattern: str, files: str, limit: Optional[int] = None) -> Dict[str, Any]:
    result = runner.search(pattern, files, limit)
    return {"output": format_search(result), "data": result.to_dict()}


def regex_replace(runner: BatchRunner, pattern: str, replacement: str, files: str,
                  dry_run: bool = False, limit: Optional[int] = None) -> Dict[str, Any]:
    result = runner.replace(pattern, replacement, files, dry_run=dry_run, limit=limit)
    return {"output": format_replace(result), "data": result.to_dict()}
