"""Repository commands: staging, snapshots, history and branches."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path, PurePath, PurePosixPath
from typing import Iterable, Iterator, Optional, Union

from flitvcs.errors import FlitError
from flitvcs.objects import Blob, CommitObject, Tree, TreeEntry, TreeEntryType
from flitvcs.repository import Repository

PathLike = Union[str, "os.PathLike[str]"]

ROOT_COMMIT = "ROOT_COMMIT"
HEADS_PREFIX = "refs/heads"
_SKIPPED_NAMES = frozenset({".flit", ".git"})


@dataclass(frozen=True)
class LogEntry:
    """One commit in the history walked from HEAD."""

    commit_hash: str
    tree_hash: str
    parent_hash: Optional[str]
    message: str

    def __str__(self) -> str:
        lines = [f"commit {self.commit_hash}", f"tree {self.tree_hash}"]
        if self.parent_hash is not None:
            lines.append(f"parent {self.parent_hash}")
        lines.append(f"    {self.message}")
        return "\n".join(lines) + "\n"


def _read_worktree_file(repository: Repository, path: PathLike) -> bytes:
    try:
        return (repository.worktree / path).read_bytes()
    except OSError as exc:
        raise FlitError(f"cannot read {os.fspath(path)}: {exc}") from exc


def init_repository(repository: Repository) -> bool:
    """Create the repository; return False if it already existed."""
    return repository.init()


def hash_object(
    repository: Repository, file_path: PathLike, object_type: str = "blob", write: bool = False
) -> str:
    """Return the hash of a file as an object, storing it if ``write`` is set."""
    content = _read_worktree_file(repository, file_path)
    if object_type != "blob":
        raise FlitError(f"unsupported object type: {object_type!r}")
    obj = Blob(content)
    if write:
        repository.objects.write_object(obj)
    return obj.object_id()


def cat_file(repository: Repository, object_hash: str) -> bytes:
    """Return the payload of a stored object."""
    return repository.objects.retrieve_object(object_hash).data()


def _add_file(repository: Repository, path: PathLike) -> None:
    blob = Blob(_read_worktree_file(repository, path))
    object_hash = repository.objects.write_object(blob)
    repository.index.add(path, object_hash)


def _add_directory(repository: Repository, directory: PurePath) -> None:
    try:
        children = sorted((repository.worktree / directory).iterdir())
    except OSError as exc:
        raise FlitError(f"cannot list directory {directory}: {exc}") from exc
    for child in children:
        relative = directory / child.name
        if child.is_file():
            _add_file(repository, relative)
        elif child.is_dir():
            _add_directory(repository, relative)


def add(repository: Repository, paths: Iterable[PathLike]) -> None:
    """Store the given files, or every file below given directories, and stage them."""
    for path in paths:
        if (repository.worktree / path).is_dir():
            _add_directory(repository, PurePath(path))
        else:
            _add_file(repository, path)


def untracked_files(repository: Repository) -> list[str]:
    """Return sorted work-tree files that are neither staged nor ignored."""
    tracked = {PurePosixPath(entry.path) for entry in repository.index.load()}
    worktree = repository.worktree
    found: list[PurePosixPath] = []
    for current, dirnames, filenames in os.walk(worktree):
        dirnames[:] = [name for name in dirnames if name not in _SKIPPED_NAMES]
        for name in filenames:
            if name in _SKIPPED_NAMES:
                continue
            full = Path(current, name)
            if not full.is_file():
                continue
            relative = PurePosixPath(full.relative_to(worktree).as_posix())
            if relative in tracked or repository.ignore.matches(relative):
                continue
            found.append(relative)
    return [str(path) for path in sorted(found)]


def format_status(repository: Repository) -> str:
    """Return the status report text."""
    lines = [
        "On branch main",
        "",
        "Staged changes:",
        "",
        "Unstaged changes:",
        "",
        "Untracked files",
    ]
    lines.extend(untracked_files(repository))
    return "\n".join(lines) + "\n"


@dataclass
class _DirNode:
    subdirs: dict[str, "_DirNode"] = field(default_factory=dict)
    blobs: list[TreeEntry] = field(default_factory=list)

    def add_path(self, path: str, object_hash: str) -> None:
        *directories, name = PurePosixPath(path).parts
        node = self
        for directory in directories:
            node = node.subdirs.setdefault(directory, _DirNode())
        node.blobs.append(TreeEntry(name=name, object_hash=object_hash, type=TreeEntryType.BLOB))


def _build_tree(node: _DirNode, repository: Repository) -> Tree:
    entries = list(node.blobs)
    for dirname in sorted(node.subdirs):
        child = _build_tree(node.subdirs[dirname], repository)
        child_hash = repository.objects.write_object(child)
        entries.append(TreeEntry(name=dirname, object_hash=child_hash, type=TreeEntryType.TREE))
    return Tree(entries)


def write_tree(repository: Repository) -> Tree:
    """Store trees for the staged index and return the root tree."""
    root = _DirNode()
    for entry in repository.index.load():
        root.add_path(entry.path, entry.object_hash)
    tree = _build_tree(root, repository)
    repository.objects.write_object(tree)
    return tree


def commit(repository: Repository, message: str) -> CommitObject:
    """Snapshot the index as a commit on the current HEAD reference."""
    tree = write_tree(repository)
    head = repository.refs.read_head()
    parent_hash = repository.refs.read_ref(head) or ROOT_COMMIT
    commit_object = CommitObject(tree_hash=tree.object_id(), message=message, parent_hash=parent_hash)
    commit_hash = repository.objects.write_object(commit_object)
    repository.refs.write_ref(head, commit_hash)
    return commit_object


def log(repository: Repository) -> Iterator[LogEntry]:
    """Yield commits from HEAD back to the root commit."""
    head = repository.refs.read_head()
    current = repository.refs.read_ref(head)
    while current is not None:
        obj = repository.objects.retrieve_object(current)
        if not isinstance(obj, CommitObject):
            raise FlitError(f"object {current} is not a commit")
        is_root = obj.parent_hash == ROOT_COMMIT
        yield LogEntry(
            commit_hash=current,
            tree_hash=obj.tree_hash,
            parent_hash=None if is_root else obj.parent_hash,
            message=obj.message,
        )
        current = None if is_root else obj.parent_hash


def display_hashes(repository: Repository) -> list[str]:
    """Return the sorted hashes of every stored object."""
    objects_path = repository.path / "objects"
    if not objects_path.is_dir():
        raise FlitError(f"object directory missing: {objects_path}")
    hashes = []
    try:
        for prefix_dir in objects_path.iterdir():
            if not prefix_dir.is_dir():
                continue
            hashes.extend(
                prefix_dir.name + object_file.name
                for object_file in prefix_dir.iterdir()
                if object_file.is_file()
            )
    except OSError as exc:
        raise FlitError(f"cannot list objects: {exc}") from exc
    return sorted(hashes)


def _branch_ref(name: str) -> str:
    return f"{HEADS_PREFIX}/{name}"


def list_branches(repository: Repository) -> list[tuple[str, bool]]:
    """Return sorted ``(name, is_current)`` pairs for every branch."""
    head = repository.refs.read_head()
    heads_path = repository.path / HEADS_PREFIX
    try:
        names = sorted(entry.name for entry in heads_path.iterdir() if entry.is_file())
    except OSError as exc:
        raise FlitError(f"cannot list branches: {exc}") from exc
    return [(name, head == _branch_ref(name)) for name in names]


def create_branch(repository: Repository, name: str) -> None:
    """Create a branch pointing at the commit HEAD refers to."""
    if not name:
        raise FlitError("branch name is empty")
    target = _branch_ref(name)
    head = repository.refs.read_head()
    current_commit = repository.refs.read_ref(head)
    if current_commit is None:
        raise FlitError("HEAD has no commit to branch from")
    if repository.refs.read_ref(target) is not None:
        raise FlitError(f"branch already exists: {name}")
    repository.refs.write_ref(target, current_commit)


def delete_branch(repository: Repository, name: str) -> None:
    """Delete a branch that is not the current one."""
    if not name:
        raise FlitError("branch name is empty")
    target = _branch_ref(name)
    if repository.refs.read_head() == target:
        raise FlitError(f"cannot delete the current branch: {name}")
    repository.refs.delete_ref(target)