"""The staging index: an ordered list of path and object hash pairs."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path, PurePath, PurePosixPath
from typing import Union

from flitvcs.errors import FlitError

PathLike = Union[str, "os.PathLike[str]"]

_TEXT_ERRORS = "surrogateescape"


@dataclass(frozen=True)
class IndexEntry:
    """A staged file and the hash of the blob holding its contents."""

    path: str
    object_hash: str


def _path_text(path: PathLike) -> str:
    if isinstance(path, PurePath):
        return path.as_posix()
    text = os.fspath(path)
    if os.sep != "/":
        text = text.replace(os.sep, "/")
    return text


def _same_path(left: str, right: str) -> bool:
    return PurePosixPath(left) == PurePosixPath(right)


class Index:
    """Index file holding one ``hash<TAB>path`` line per staged file."""

    def __init__(self, path: PathLike) -> None:
        self.path = Path(path)

    def load(self) -> list[IndexEntry]:
        """Return the staged entries; an unreadable index reads as empty."""
        try:
            text = self.path.read_text(encoding="utf-8", errors=_TEXT_ERRORS)
        except OSError:
            return []
        entries = []
        for line in text.split("\n"):
            object_hash, sep, path_text = line.partition("\t")
            if not sep or not object_hash or not path_text:
                continue
            entries.append(IndexEntry(path=path_text, object_hash=object_hash))
        return entries

    def _write(self, entries: list[IndexEntry]) -> None:
        try:
            with open(
                self.path, "w", encoding="utf-8", errors=_TEXT_ERRORS, newline=""
            ) as handle:
                handle.writelines(
                    f"{entry.object_hash}\t{entry.path}\n" for entry in entries
                )
        except OSError as exc:
            raise FlitError(f"cannot write index {self.path}: {exc}") from exc

    def add(self, path: PathLike, object_hash: str) -> None:
        """Stage ``path`` with ``object_hash``, replacing any earlier hash."""
        path_text = _path_text(path)
        entries = self.load()
        found = any(_same_path(entry.path, path_text) for entry in entries)
        if found:
            entries = [
                IndexEntry(entry.path, object_hash)
                if _same_path(entry.path, path_text)
                else entry
                for entry in entries
            ]
        else:
            entries.append(IndexEntry(path=path_text, object_hash=object_hash))
        self._write(entries)

    def remove(self, path: PathLike) -> None:
        """Remove the first entry for ``path``; raise if there is none."""
        path_text = _path_text(path)
        entries = self.load()
        if not entries:
            raise FlitError("index is empty")
        position = next(
            (i for i, entry in enumerate(entries) if _same_path(entry.path, path_text)),
            None,
        )
        if position is None:
            raise FlitError(f"path is not in the index: {path_text}")
        del entries[position]
        self._write(entries)