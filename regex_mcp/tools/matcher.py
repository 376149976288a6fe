from __future__ import annotations
import re
from itertools import islice
from typing import List, Optional, Union

from ..errors import NotText
from ..models import MatchRecord

"""
Match discovery for a single file's content.

Binary policy: content is text only if it decodes in the configured encoding
and contains no NUL character. Anything else raises NotText and the file is
skipped rather than rewritten.
"""


def decode_text(data: Union[bytes, str], encoding: str = "utf-8") -> str:
    if isinstance(data, str):
        text = data
    else:
        if b"\x00" in data:
            raise NotText("binary content (NUL byte)")
        try:
            text = data.decode(encoding)
        except UnicodeDecodeError as e:
            raise NotText(f"not valid {encoding}: {e.reason} at byte {e.start}") from e
    if "\x00" in text:
        raise NotText("binary content (NUL character)")
    return text


class _LineIndex:
    """Maps offsets to (line, column) for offsets visited in ascending order."""

    def __init__(self, content: str):
        self.content = content
        self.line = 1
        self.line_start = 0
        self.pos = 0

    def locate(self, offset: int) -> tuple[int, int, str]:
        c = self.content
        nl = c.find("\n", self.pos, offset)
        while nl != -1:
            self.line += 1
            self.line_start = nl + 1
            nl = c.find("\n", nl + 1, offset)
        self.pos = offset
        line_end = c.find("\n", self.line_start)
        if line_end == -1:
            line_end = len(c)
        return self.line, offset - self.line_start + 1, c[self.line_start:line_end].strip()


def find(pattern: re.Pattern, content: Union[str, bytes], limit: Optional[int] = None,
         path: str = "") -> List[MatchRecord]:
    """Non-overlapping leftmost matches in document order, at most `limit`."""
    text = decode_text(content)
    if limit is not None and limit <= 0:
        return []
    # finditer steps past empty matches, so `a*` terminates
    it = pattern.finditer(text)
    if limit is not None:
        it = islice(it, limit)
    index = _LineIndex(text)
    records: List[MatchRecord] = []
    for m in it:
        line, column, line_text = index.locate(m.start())
        records.append(MatchRecord(
            path=path,
            start=m.start(),
            end=m.end(),
            line=line,
            column=column,
            text=m.group(0),
            groups=(m.group(0),) + m.groups(),
            line_text=line_text,
        ))
    return records
