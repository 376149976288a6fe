from __future__ import annotations
import glob as _glob
import os
from typing import List, Optional

"""
Filesystem collaborators for the batch runner: glob expansion, raw reads and
text writes. Relative globs resolve against `root`; absolute globs are used
as given. Reported paths keep the form the glob produced.
"""


def resolve(root: Optional[str], path: str) -> str:
    return os.path.join(root, path) if root else path


def expand_glob(pattern: str, root: Optional[str] = None) -> List[str]:
    """Files matching `pattern`, sorted so every call yields the same order.

    `**` recurses; hidden entries only match when the pattern names them.
    Directories are skipped.
    """
    if os.path.isabs(pattern) or not root:
        hits = _glob.glob(pattern, recursive=True)
    else:
        hits = _glob.glob(pattern, root_dir=root, recursive=True)
    return sorted(p for p in hits if os.path.isfile(resolve(root, p)))


def read_file(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def write_file(path: str, content: str, encoding: str = "utf-8") -> None:
    # encode before opening so an unencodable replacement never truncates the file;
    # bytes go out as-is, keeping CRLF and lone CR exactly as they were read
    data = content.encode(encoding)
    with open(path, "wb") as f:
        f.write(data)
