from __future__ import annotations
from bisect import bisect_right
from typing import List, Sequence, Tuple

from ..models import MatchRecord, Span
from .template import ReplacementTemplate

"""
Builds replaced content from a match list. Matches are consumed in ascending
offset order and the output is never rescanned, so a replacement that itself
matches the pattern cannot expand again.
"""


def _ordered(matches: Sequence[MatchRecord]) -> List[MatchRecord]:
    ordered = sorted(matches, key=lambda m: (m.start, m.end))
    for prev, cur in zip(ordered, ordered[1:]):
        if cur.start < prev.end:
            raise ValueError(f"overlapping matches at offsets {prev.start} and {cur.start}")
    return ordered


def preview(content: str, matches: Sequence[MatchRecord], template: ReplacementTemplate) -> List[Span]:
    return [
        Span(start=m.start, end=m.end, old=content[m.start:m.end], new=template.render(m), line=m.line)
        for m in _ordered(matches)
    ]


def apply_spans(content: str, spans: Sequence[Span]) -> str:
    out: List[str] = []
    pos = 0
    for s in sorted(spans, key=lambda s: (s.start, s.end)):
        if s.start < pos:
            raise ValueError(f"overlapping span at offset {s.start}")
        out.append(content[pos:s.start])
        out.append(s.new)
        pos = s.end
    out.append(content[pos:])
    return "".join(out)


def apply(content: str, matches: Sequence[MatchRecord], template: ReplacementTemplate) -> str:
    if not matches:
        return content
    return apply_spans(content, preview(content, matches, template))


def line_changes(content: str, new_content: str, spans: Sequence[Span]) -> List[Tuple[int, str, str]]:
    """(line number, old line, new line) for each original line a span touches.

    A span that swallows newlines reports the whole rewritten block as the new
    "line".
    """
    if not spans:
        return []
    old_lines = content.split("\n")
    # offset of each old line start
    starts = [0]
    for line in old_lines[:-1]:
        starts.append(starts[-1] + len(line) + 1)

    # Group spans into runs of touched lines, tracking the length delta so the
    # same region can be sliced out of new_content.
    changes: List[Tuple[int, str, str]] = []
    delta = 0
    i = 0
    ordered = sorted(spans, key=lambda s: s.start)
    while i < len(ordered):
        first = _line_of(starts, ordered[i].start)
        last = _last_line(starts, ordered[i])
        block_end = ordered[i].end
        block_delta = delta
        delta += len(ordered[i].new) - (ordered[i].end - ordered[i].start)
        i += 1
        while i < len(ordered) and _line_of(starts, ordered[i].start) <= last:
            last = max(last, _last_line(starts, ordered[i]))
            block_end = max(block_end, ordered[i].end)
            delta += len(ordered[i].new) - (ordered[i].end - ordered[i].start)
            i += 1
        old_start = starts[first]
        # a span that eats a trailing newline reaches past its last line
        old_end = max(starts[last] + len(old_lines[last]), block_end)
        old_block = content[old_start:old_end]
        new_block = new_content[old_start + block_delta:old_end + delta]
        changes.append((first + 1, old_block, new_block))
    return changes


def _line_of(starts: List[int], offset: int) -> int:
    return bisect_right(starts, offset) - 1


def _last_line(starts: List[int], span: Span) -> int:
    # the line holding the last replaced character, not the one after it
    return _line_of(starts, max(span.end - 1, span.start))
