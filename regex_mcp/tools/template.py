from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Sequence, Tuple, Union

from ..config import MAX_GROUP_INDEX
from ..errors import GroupIndexOutOfRange

"""
Replacement templates.

Only `$` followed by one or more ASCII digits is special: the longest digit run
is the group index, so `$12` is group 12 and `$1_v2` is group 1 then "_v2".
Every other `$` is literal text (`$request`, `$$`, `${1}`, a trailing `$`).
Backslashes carry no meaning.

Rendering policy: a reference to a group the pattern does not have, or to a
group that did not take part in the match, renders as "". Only an index above
the configured maximum is an error, and that is raised while parsing.
"""

_ASCII_DIGITS = "0123456789"


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class GroupRef:
    index: int


Segment = Union[Literal, GroupRef]


def _group(match, index: int) -> str:
    if isinstance(match, re.Match):
        if index > match.re.groups:
            return ""
        return match.group(index) or ""
    # MatchRecord: groups[0] is the whole match
    groups = match.groups
    if index >= len(groups):
        return ""
    return groups[index] or ""


@dataclass(frozen=True)
class ReplacementTemplate:
    segments: Tuple[Segment, ...]
    source: str = ""

    @classmethod
    def parse(cls, replacement: str, max_group_index: int = MAX_GROUP_INDEX) -> "ReplacementTemplate":
        segments: list[Segment] = []
        literal: list[str] = []
        i, n = 0, len(replacement)
        while i < n:
            ch = replacement[i]
            if ch == "$" and i + 1 < n and replacement[i + 1] in _ASCII_DIGITS:
                j = i + 1
                while j < n and replacement[j] in _ASCII_DIGITS:
                    j += 1
                index = int(replacement[i + 1:j])
                if index > max_group_index:
                    raise GroupIndexOutOfRange(index, max_group_index)
                if literal:
                    segments.append(Literal("".join(literal)))
                    literal = []
                segments.append(GroupRef(index))
                i = j
                continue
            literal.append(ch)
            i += 1
        if literal:
            segments.append(Literal("".join(literal)))
        return cls(tuple(segments), replacement)

    @property
    def group_indices(self) -> Tuple[int, ...]:
        return tuple(s.index for s in self.segments if isinstance(s, GroupRef))

    @property
    def is_literal(self) -> bool:
        return not self.group_indices

    def render(self, match) -> str:
        """Render against an `re.Match` or a `MatchRecord`."""
        out = []
        for seg in self.segments:
            if isinstance(seg, Literal):
                out.append(seg.text)
            else:
                out.append(_group(match, seg.index))
        return "".join(out)

    def to_python_template(self) -> str:
        """Equivalent template for `re.Match.expand` and `re.sub`.

        Only valid for patterns that actually define every referenced group;
        `re` raises on unknown group numbers where `render` yields "".
        """
        out = []
        for seg in self.segments:
            if isinstance(seg, Literal):
                out.append(seg.text.replace("\\", "\\\\"))
            else:
                out.append(f"\\g<{seg.index}>")
        return "".join(out)


def parse(replacement: str, max_group_index: int = MAX_GROUP_INDEX) -> ReplacementTemplate:
    return ReplacementTemplate.parse(replacement, max_group_index)


def render(template: ReplacementTemplate, match) -> str:
    return template.render(match)


def unknown_groups(template: ReplacementTemplate, group_count: int) -> Sequence[int]:
    """Group indices the template references that the pattern does not define."""
    return sorted({i for i in template.group_indices if i > group_count})
