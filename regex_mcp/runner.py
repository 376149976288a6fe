from __future__ import annotations
import logging
import re
from typing import Callable, List, Optional

from .config import Settings
from .errors import NotText
from .models import BatchResult, FileResult
from .tools.filesystem import expand_glob, read_file, resolve, write_file
from .tools.matcher import decode_text, find
from .tools.patch import diff_stats, unified_diff
from .tools.pattern import compile_pattern
from .tools.substitute import apply_spans, line_changes, preview
from .tools.template import ReplacementTemplate, unknown_groups

"""
BatchRunner: runs search or replace over every file a glob resolves to.

- Files are processed one at a time in expansion order.
- `limit` caps matches across the whole batch. Once it is reached the
  remaining files are never read and the result is marked truncated.
- Pattern and replacement errors are raised before the glob is expanded.
  Read, decode and write errors are recorded on the file's result and the
  batch carries on.
"""

logger = logging.getLogger(__name__)

ExpandFn = Callable[[str], List[str]]
ReadFn = Callable[[str], bytes]
WriteFn = Callable[[str, str], None]


class BatchRunner:
    def __init__(self, expand: Optional[ExpandFn] = None, read: Optional[ReadFn] = None,
                 write: Optional[WriteFn] = None, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        root = self.settings.root
        encoding = self.settings.encoding
        self.expand: ExpandFn = expand or (lambda g: expand_glob(g, root))
        self.read: ReadFn = read or (lambda p: read_file(resolve(root, p)))
        self.write: WriteFn = write or (lambda p, text: write_file(resolve(root, p), text, encoding))

    def search(self, pattern: str, glob: str, limit: Optional[int] = None) -> BatchResult:
        if limit is None:
            limit = self.settings.default_limit
        _check_limit(limit)
        rx = compile_pattern(pattern)
        result = self._run("search", rx, glob, limit)
        logger.info("search %r in %r: %d matches in %d files%s", pattern, glob,
                    result.total_matches, len(result.files),
                    " (truncated)" if result.truncated else "")
        return result

    def replace(self, pattern: str, replacement: str, glob: str, dry_run: bool = False,
                limit: Optional[int] = None) -> BatchResult:
        """Replace matches of `pattern` with `replacement` in every file.

        `limit` of None means no cap. With `dry_run` the result carries spans,
        diffs and new content but nothing is written.
        """
        if limit is not None:
            _check_limit(limit)
        rx = compile_pattern(pattern)
        template = ReplacementTemplate.parse(replacement, self.settings.max_group_index)
        missing = unknown_groups(template, rx.groups)
        if missing:
            logger.warning("replacement references groups %s but the pattern has %d; they render empty",
                           missing, rx.groups)
        result = self._run("replace", rx, glob, limit, template=template, dry_run=dry_run)
        logger.info("replace %r in %r: %d replacements in %d files%s", pattern, glob,
                    result.total_matches, len(result.files_changed),
                    " (dry run)" if dry_run else "")
        return result

    def _run(self, mode: str, rx: re.Pattern, glob: str, limit: Optional[int],
             template: Optional[ReplacementTemplate] = None, dry_run: bool = False) -> BatchResult:
        result = BatchResult(mode=mode, dry_run=dry_run)
        remaining = limit
        for path in self.expand(glob):
            if remaining is not None and remaining <= 0:
                result.truncated = True
                break
            fr = FileResult(path=path)
            result.files.append(fr)
            try:
                content = decode_text(self.read(path), self.settings.encoding)
                # one extra match tells us whether this file was cut short
                matches = find(rx, content, None if remaining is None else remaining + 1, path)
            except NotText as e:
                fr.error = f"NotText: {e}"
                logger.warning("skipping %s: %s", path, e)
                continue
            except OSError as e:
                fr.error = f"IOError: {e}"
                logger.warning("skipping %s: %s", path, e)
                continue

            if remaining is not None and len(matches) > remaining:
                matches = matches[:remaining]
                result.truncated = True
            fr.matches = matches
            result.total_matches += len(matches)
            if remaining is not None:
                remaining -= len(matches)
            for m in matches:
                logger.debug("%s:%d:%d: %r", path, m.line, m.column, m.text)

            if template is not None and matches:
                self._substitute(fr, content, template, dry_run)
            if result.truncated:
                break
        return result

    def _substitute(self, fr: FileResult, content: str, template: ReplacementTemplate,
                    dry_run: bool) -> None:
        spans = preview(content, fr.matches, template)
        new_content = apply_spans(content, spans)
        fr.spans = spans
        fr.new_content = new_content
        fr.diff = unified_diff(fr.path, content, new_content)
        fr.added, fr.removed = diff_stats(fr.diff)
        fr.line_changes = line_changes(content, new_content, spans)
        if dry_run or new_content == content:
            return
        try:
            self.write(fr.path, new_content)
            fr.written = True
        except OSError as e:
            fr.error = f"IOError: {e}"
            logger.warning("failed to write %s: %s", fr.path, e)
        except UnicodeError as e:
            fr.error = f"EncodeError: {e}"
            logger.warning("failed to write %s: %s", fr.path, e)


def _check_limit(limit: int) -> None:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise ValueError(f"limit must be a non-negative integer, got {limit!r}")
