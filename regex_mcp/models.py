"""Result records produced by the search/replace engine."""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class MatchRecord:
    """A single regex match inside one file."""
    path: str
    start: int  # character offsets into the decoded content
    end: int
    line: int  # 1-based
    column: int  # 1-based
    text: str
    groups: Tuple[Optional[str], ...]  # groups[0] is the whole match
    line_text: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Span:
    """One replaced region: old text at [start, end) becomes new."""
    start: int
    end: int
    old: str
    new: str
    line: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class FileResult:
    path: str
    matches: List[MatchRecord] = field(default_factory=list)
    new_content: Optional[str] = None
    spans: List[Span] = field(default_factory=list)
    diff: str = ""
    line_changes: List[Tuple[int, str, str]] = field(default_factory=list)
    added: int = 0  # diff line counts
    removed: int = 0
    written: bool = False
    error: Optional[str] = None

    @property
    def changed(self) -> bool:
        # a failed write leaves the file as it was
        return bool(self.matches) and self.new_content is not None and self.error is None

    def to_dict(self, include_content: bool = False) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "path": self.path,
            "matches": [m.to_dict() for m in self.matches],
            "spans": [s.to_dict() for s in self.spans],
            "diff": self.diff,
            "added": self.added,
            "removed": self.removed,
            "line_changes": [
                {"line": n, "old": old, "new": new} for n, old, new in self.line_changes
            ],
            "written": self.written,
            "error": self.error,
        }
        if include_content:
            data["new_content"] = self.new_content
        return data


@dataclass
class BatchResult:
    mode: str  # "search" | "replace"
    files: List[FileResult] = field(default_factory=list)
    total_matches: int = 0
    truncated: bool = False
    dry_run: bool = False

    @property
    def files_changed(self) -> List[FileResult]:
        return [f for f in self.files if f.changed]

    @property
    def files_failed(self) -> List[FileResult]:
        return [f for f in self.files if f.error]

    def to_dict(self, include_content: bool = False) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "dry_run": self.dry_run,
            "total_matches": self.total_matches,
            "truncated": self.truncated,
            "files": [f.to_dict(include_content) for f in self.files],
        }
