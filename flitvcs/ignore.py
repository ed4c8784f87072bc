"""Matching of work-tree paths against ``.flitignore`` patterns."""

from __future__ import annotations

import os
import posixpath
from pathlib import Path, PurePath
from typing import Union

IGNORE_FILE_NAME = ".flitignore"
_WHITESPACE = " \t\n\r"

PathLike = Union[str, "os.PathLike[str]"]


def _posix_text(path: PathLike) -> str:
    if isinstance(path, PurePath):
        return path.as_posix()
    text = os.fspath(path)
    if os.sep != "/":
        text = text.replace(os.sep, "/")
    return text


def _lexically_normal(text: str) -> str:
    """Normalise a path lexically, keeping a trailing separator as given."""
    if not text:
        return text
    normal = posixpath.normpath(text)
    if normal not in (".", "/") and text.endswith(("/", "/.")):
        normal += "/"
    return normal


class Ignore:
    """Patterns loaded from a work tree's ``.flitignore`` file.

    A pattern matches a path with the same file name, the same full path,
    or any path below it treated as a directory.
    """

    def __init__(self, worktree: PathLike) -> None:
        self.worktree = Path(worktree)
        self.patterns: tuple[str, ...] = self._load(self.worktree / IGNORE_FILE_NAME)

    @staticmethod
    def _load(ignore_path: Path) -> tuple[str, ...]:
        try:
            text = ignore_path.read_text(encoding="utf-8", errors="surrogateescape")
        except OSError:
            return ()
        stripped = (line.strip(_WHITESPACE) for line in text.split("\n"))
        return tuple(line for line in stripped if line and not line.startswith("#"))

    def matches(self, relative_path: PathLike) -> bool:
        """Return True if ``relative_path`` is covered by any pattern."""
        relative = _lexically_normal(_posix_text(relative_path))
        filename = posixpath.basename(relative)
        for pattern in self.patterns:
            pattern_path = _lexically_normal(pattern)
            if filename == pattern_path or relative == pattern_path:
                return True
            if relative.startswith(pattern_path + "/"):
                return True
        return False