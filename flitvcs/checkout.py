"""Switching the work tree, index and HEAD to a branch or commit."""

from __future__ import annotations

import os
import posixpath
from pathlib import Path
from typing import Iterator

from flitvcs.commands import HEADS_PREFIX
from flitvcs.errors import FlitError
from flitvcs.index import IndexEntry
from flitvcs.objects import Blob, CommitObject, Tree, TreeEntryType
from flitvcs.repository import Repository

_SKIPPED_NAMES = frozenset({".flit", ".git"})


def _key(path: str) -> str:
    return posixpath.normpath(path.replace(os.sep, "/"))


def _tree_entries(repository: Repository, tree_hash: str, prefix: str) -> Iterator[IndexEntry]:
    tree = repository.objects.retrieve_object(tree_hash)
    if not isinstance(tree, Tree):
        raise FlitError(f"object {tree_hash} is not a tree")
    for entry in tree.entries:
        joined = posixpath.join(prefix, entry.name) if prefix else entry.name
        relative = posixpath.normpath(joined)
        if entry.type is TreeEntryType.BLOB:
            yield IndexEntry(path=relative, object_hash=entry.object_hash)
        else:
            yield from _tree_entries(repository, entry.object_hash, relative)


def _snapshot(repository: Repository, commit_hash: str) -> list[IndexEntry]:
    commit = repository.objects.retrieve_object(commit_hash)
    if not isinstance(commit, CommitObject):
        raise FlitError(f"object {commit_hash} is not a commit")
    return list(_tree_entries(repository, commit.tree_hash, ""))


def _worktree_files(worktree: Path) -> Iterator[str]:
    for current, dirnames, filenames in os.walk(worktree):
        dirnames[:] = [name for name in dirnames if name not in _SKIPPED_NAMES]
        for name in filenames:
            if name in _SKIPPED_NAMES:
                continue
            full = Path(current, name)
            if full.is_file():
                yield _key(full.relative_to(worktree).as_posix())


def _ensure_clean(repository: Repository, current: list[IndexEntry]) -> None:
    for entry in current:
        try:
            content = (repository.worktree / entry.path).read_bytes()
        except OSError as exc:
            raise FlitError(f"cannot read tracked file {entry.path}: {exc}") from exc
        if Blob(content).object_id() != entry.object_hash:
            raise FlitError(f"tracked file has uncommitted changes: {entry.path}")


def _prune_empty_dirs(worktree: Path, start: Path) -> None:
    directory = start
    while directory != worktree and directory != directory.parent:
        if directory.name in _SKIPPED_NAMES:
            break
        try:
            if any(directory.iterdir()):
                break
            directory.rmdir()
        except OSError:
            break
        directory = directory.parent


def _unique_by_key(entries: list[IndexEntry]) -> Iterator[IndexEntry]:
    seen: set[str] = set()
    for entry in entries:
        key = _key(entry.path)
        if key not in seen:
            seen.add(key)
            yield entry


def checkout(repository: Repository, target: str) -> str:
    """Switch to a branch name or commit hash and return the new HEAD value.

    Refuses when tracked files differ from the index or when an untracked
    file would be overwritten; nothing is changed in that case.
    """
    branch_ref = f"{HEADS_PREFIX}/{target}"
    if (repository.path / branch_ref).exists():
        head_value = branch_ref
        commit_hash = repository.refs.read_ref(branch_ref)
    else:
        head_value = target
        commit_hash = target

    target_entries = [] if commit_hash is None else _snapshot(repository, commit_hash)
    current_entries = repository.index.load()

    current_keys = {_key(entry.path) for entry in current_entries}
    target_keys = {_key(entry.path) for entry in target_entries}

    _ensure_clean(repository, current_entries)

    for key in _worktree_files(repository.worktree):
        if key not in current_keys and key in target_keys:
            raise FlitError(f"untracked file would be overwritten: {key}")

    worktree = repository.worktree
    for entry in current_entries:
        if _key(entry.path) in target_keys:
            continue
        absolute = worktree / entry.path
        try:
            absolute.unlink(missing_ok=True)
        except OSError as exc:
            raise FlitError(f"cannot remove {entry.path}: {exc}") from exc
        _prune_empty_dirs(worktree, absolute.parent)

    for entry in target_entries:
        blob = repository.objects.retrieve_object(entry.object_hash)
        if not isinstance(blob, Blob):
            raise FlitError(f"object {entry.object_hash} is not a blob")
        absolute = worktree / entry.path
        try:
            absolute.parent.mkdir(parents=True, exist_ok=True)
            absolute.write_bytes(blob.data())
        except OSError as exc:
            raise FlitError(f"cannot write {entry.path}: {exc}") from exc

    for entry in _unique_by_key(current_entries):
        repository.index.remove(entry.path)
    for entry in _unique_by_key(target_entries):
        repository.index.add(entry.path, entry.object_hash)

    repository.refs.write_head(head_value)
    return head_value