"""Plain-text summaries of batch results, returned as tool output."""

from __future__ import annotations
from typing import List

from .models import BatchResult

NO_FILES = "No files matched the glob pattern."
NO_MATCHES = "No matches found."


def _plural(n: int, word: str, plural: str = "") -> str:
    return f"{n} {word if n == 1 else (plural or word + 's')}"


def _errors(result: BatchResult) -> List[str]:
    return [f"Skipping {f.path}: {f.error}" for f in result.files_failed]


def format_search(result: BatchResult) -> str:
    if not result.files and not result.truncated:
        return NO_FILES
    lines: List[str] = []
    for f in result.files:
        for m in f.matches:
            lines.append(f"{f.path}:{m.line}:{m.column}: {m.line_text}")
    errors = _errors(result)
    if not lines:
        return "\n".join(errors + [NO_MATCHES])
    out = "\n".join(lines)
    if errors:
        out += "\n\n" + "\n".join(errors)
    if result.truncated:
        out += f"\n\n... and more (showing first {result.total_matches})"
    out += f"\n\nTotal: {_plural(result.total_matches, 'match', 'matches')}"
    return out


def format_replace(result: BatchResult) -> str:
    if not result.files and not result.truncated:
        return NO_FILES
    out: List[str] = []
    for f in result.files_changed:
        out.append(f"--- {f.path} (+{f.added} -{f.removed})")
        for n, old, new in f.line_changes:
            out.append(f"{n}:- {old}")
            out.append(f"{n}:+ {new}")
        out.append("")
    failed = result.files_failed
    out.extend(_errors(result))
    if not result.total_matches:
        out.append(NO_MATCHES)
        return "\n".join(out)
    changed = result.files_changed
    replaced = sum(len(f.spans) for f in changed)
    summary = (f"Total: {_plural(replaced, 'replacement')} in "
               f"{_plural(len(changed), 'file')}")
    if failed:
        summary += f", {_plural(len(failed), 'file')} failed"
    if result.dry_run:
        summary += " (dry run)"
    out.append(summary)
    if result.truncated:
        out.append("Stopped at the match limit; later matches were left untouched.")
    return "\n".join(out)
