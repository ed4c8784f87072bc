"""Stored object kinds: blobs, trees and commits."""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass, field
from typing import ClassVar, Iterable, Union

from flitvcs.codec import serialize_object, sha256_hex
from flitvcs.errors import MalformedObjectError

_TEXT_ERRORS = "surrogateescape"


def _as_text(data: Union[bytes, str]) -> str:
    if isinstance(data, bytes):
        return data.decode("utf-8", _TEXT_ERRORS)
    return data


class TreeEntryType(enum.Enum):
    """Kind of object a tree entry points at."""

    BLOB = "blob"
    TREE = "tree"


@dataclass(frozen=True)
class TreeEntry:
    """One named entry of a tree."""

    name: str
    object_hash: str
    type: TreeEntryType


class FlitObject(abc.ABC):
    """Base of every object kept in the object store."""

    object_type: ClassVar[str]

    @abc.abstractmethod
    def data(self) -> bytes:
        """Return the object's payload bytes."""

    def serialize(self) -> bytes:
        """Return the payload with its type and size header."""
        return serialize_object(self.data(), self.object_type)

    def object_id(self) -> str:
        """Return the SHA-256 hex digest identifying this object."""
        return sha256_hex(self.serialize())


@dataclass(frozen=True)
class Blob(FlitObject):
    """Raw file contents."""

    object_type: ClassVar[str] = "blob"

    content: bytes

    def data(self) -> bytes:
        return self.content


@dataclass(frozen=True)
class CommitObject(FlitObject):
    """A commit: a tree, its parent commit and a message."""

    object_type: ClassVar[str] = "commit"

    tree_hash: str
    message: str
    parent_hash: str

    def data(self) -> bytes:
        text = f"{self.tree_hash}\t{self.parent_hash}\t{self.message}"
        return text.encode("utf-8", _TEXT_ERRORS)

    @classmethod
    def parse(cls, data: Union[bytes, str]) -> "CommitObject":
        """Build a commit from its ``tree<TAB>parent<TAB>message`` payload."""
        parts = _as_text(data).split("\t", 2)
        if len(parts) < 3:
            raise MalformedObjectError("commit payload needs three tab-separated fields")
        tree_hash, parent_hash, message = parts
        if not tree_hash:
            raise MalformedObjectError("commit payload has an empty tree hash")
        return cls(tree_hash=tree_hash, message=message, parent_hash=parent_hash)


@dataclass(frozen=True)
class Tree(FlitObject):
    """A directory listing of blobs and subtrees."""

    object_type: ClassVar[str] = "tree"

    entries: tuple[TreeEntry, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", tuple(self.entries))

    def data(self) -> bytes:
        lines = (
            f"{entry.type.value}\t{entry.object_hash}\t{entry.name}\n"
            for entry in sorted(self.entries, key=lambda e: e.name)
        )
        return "".join(lines).encode("utf-8", _TEXT_ERRORS)

    @staticmethod
    def parse_entries(data: Union[bytes, str]) -> list[TreeEntry]:
        """Parse ``type<TAB>hash<TAB>name`` lines into tree entries."""
        return list(_parse_tree_lines(_as_text(data).split("\n")))


def _parse_tree_lines(lines: Iterable[str]) -> Iterable[TreeEntry]:
    for line in lines:
        if not line:
            continue
        parts = line.split("\t", 2)
        if len(parts) < 3:
            raise MalformedObjectError(f"tree line lacks tab separators: {line!r}")
        type_text, object_hash, name = parts
        try:
            entry_type = TreeEntryType(type_text)
        except ValueError as exc:
            raise MalformedObjectError(f"unknown tree entry type: {type_text!r}") from exc
        if not object_hash or not name:
            raise MalformedObjectError(f"tree line has an empty field: {line!r}")
        yield TreeEntry(name=name, object_hash=object_hash, type=entry_type)