from __future__ import annotations
import difflib
import re
from typing import List, Tuple

from unidiff import PatchSet
from unidiff.constants import LINE_TYPE_NO_NEWLINE

"""
Unified diffs for replace previews.

unified_diff() renders old/new content as a git-style diff, diff_stats()
counts added/removed lines and apply_diff() replays a single-file diff onto
the original content, so a dry-run diff can be applied later.
"""

_NO_EOL = "\\ No newline at end of file\n"


def _lines(text: str) -> List[str]:
    # split on "\n" only; str.splitlines also breaks on \r, \x0c and friends
    return re.findall(r"[^\n]*\n|[^\n]+\Z", text)


def unified_diff(path: str, old: str, new: str, context: int = 3) -> str:
    if old == new:
        return ""
    out: List[str] = []
    for line in difflib.unified_diff(_lines(old), _lines(new),
                                     fromfile=f"a/{path}", tofile=f"b/{path}", n=context):
        if line.endswith("\n"):
            out.append(line)
        else:
            out.append(line + "\n")
            out.append(_NO_EOL)
    return "".join(out)


def diff_stats(diff: str) -> Tuple[int, int]:
    """(added, removed) line counts of a unified diff."""
    if not diff:
        return 0, 0
    patch = PatchSet(_lines(diff))
    return sum(p.added for p in patch), sum(p.removed for p in patch)


def apply_diff(original: str, diff: str) -> str:
    if not diff:
        return original
    patch = PatchSet(_lines(diff))
    if len(patch) != 1:
        raise ValueError(f"expected a single-file diff, got {len(patch)} files")

    lines = _lines(original)
    new_lines: List[str] = []
    idx = 0
    for h in patch[0]:
        src_pos = max(h.source_start - 1, 0)
        new_lines.extend(lines[idx:src_pos])
        idx = src_pos
        for l in h:
            if l.line_type == LINE_TYPE_NO_NEWLINE:
                continue
            if l.is_added:
                new_lines.append(l.value)
            elif l.is_removed:
                idx += 1
            else:
                new_lines.append(lines[idx])
                idx += 1
    new_lines.extend(lines[idx:])
    text = "".join(new_lines)
    if _added_last_line_lacks_eol(diff) and text.endswith("\n"):
        text = text[:-1]
    return text


def _added_last_line_lacks_eol(diff: str) -> bool:
    # unified_diff() appends "\n" to an added line before the marker; that
    # newline is not part of the new content
    prev = ""
    for line in _lines(diff):
        if line == _NO_EOL and prev.startswith("+") and not prev.startswith("+++"):
            return True
        prev = line
    return False
