"""Content-addressed storage of compressed objects."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from flitvcs.codec import deserialize_data, deserialize_type, z_compress, z_decompress
from flitvcs.errors import FlitError, MalformedObjectError
from flitvcs.objects import Blob, CommitObject, FlitObject, Tree

PathLike = Union[str, "os.PathLike[str]"]


class ObjectStore:
    """Objects kept under ``<root>/<first two hex digits>/<rest>``."""

    def __init__(self, root: PathLike) -> None:
        self.root = Path(root)

    def _object_path(self, object_hash: str) -> Path:
        if len(object_hash) < 3:
            raise FlitError(f"object hash is too short: {object_hash!r}")
        return self.root / object_hash[:2] / object_hash[2:]

    def write_object(self, obj: FlitObject) -> str:
        """Store ``obj`` compressed and return its hash."""
        object_hash = obj.object_id()
        target = self._object_path(object_hash)
        try:
            target.parent.mkdir(exist_ok=True)
            target.write_bytes(z_compress(obj.serialize()))
        except OSError as exc:
            raise FlitError(f"cannot write object {object_hash}: {exc}") from exc
        return object_hash

    def retrieve_object(self, object_hash: str) -> FlitObject:
        """Load the object stored under ``object_hash``."""
        try:
            compressed = self._object_path(object_hash).read_bytes()
        except OSError as exc:
            raise FlitError(f"object not found: {object_hash}") from exc

        raw = z_decompress(compressed)
        payload = deserialize_data(raw)
        kind = deserialize_type(raw)

        if kind == "blob":
            return Blob(payload)
        if kind == "tree":
            entries = Tree.parse_entries(payload)
            if not entries:
                raise MalformedObjectError(f"tree {object_hash} has no entries")
            return Tree(entries)
        if kind == "commit":
            return CommitObject.parse(payload)
        raise MalformedObjectError(f"unknown object type {kind!r} in {object_hash}")