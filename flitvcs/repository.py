"""A work tree together with its ``.flit`` repository directory."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from flitvcs.errors import FlitError
from flitvcs.ignore import Ignore
from flitvcs.index import Index
from flitvcs.object_store import ObjectStore
from flitvcs.refs import RefStore

PathLike = Union[str, "os.PathLike[str]"]

REPOSITORY_DIR_NAME = ".flit"
DEFAULT_HEAD = "refs/heads/main"


class Repository:
    """Access to the object store, references, index and ignore rules."""

    def __init__(self, worktree: PathLike) -> None:
        self.worktree = Path(worktree)
        self.path = self.worktree / REPOSITORY_DIR_NAME
        self.objects = ObjectStore(self.path / "objects")
        self.refs = RefStore(self.path)
        self.index = Index(self.path / "index")
        self.ignore = Ignore(self.worktree)

    def init(self) -> bool:
        """Create the repository layout.

        Returns True if it was created and False if it already existed.
        """
        if self.path.exists():
            if self.path.is_dir():
                return False
            raise FlitError(f"{self.path} exists and is not a directory")

        try:
            self.path.mkdir()
            for subdirectory in (self.path / "objects", self.path / "refs" / "heads"):
                subdirectory.mkdir(parents=True, exist_ok=True)
            index_path = self.path / "index"
            if not index_path.exists():
                index_path.touch()
        except OSError as exc:
            raise FlitError(f"cannot create repository in {self.path}: {exc}") from exc

        self.refs.write_head(DEFAULT_HEAD)
        self.refs.write_ref(DEFAULT_HEAD, "")
        return True