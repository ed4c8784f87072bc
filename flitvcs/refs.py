"""HEAD and branch references stored as small text files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

from flitvcs.errors import FlitError

PathLike = Union[str, "os.PathLike[str]"]

HEAD_FILE_NAME = "HEAD"
_TEXT_ERRORS = "surrogateescape"


def _first_line(text: str) -> str:
    return text.partition("\n")[0]


class RefStore:
    """References kept below a repository directory."""

    def __init__(self, root: PathLike) -> None:
        self.root = Path(root)

    def _read(self, path: Path) -> Optional[str]:
        try:
            text = path.read_text(encoding="utf-8", errors=_TEXT_ERRORS)
        except OSError:
            return None
        return _first_line(text)

    def _write(self, path: Path, value: str) -> None:
        try:
            with open(path, "w", encoding="utf-8", errors=_TEXT_ERRORS, newline="") as handle:
                handle.write(value)
        except OSError as exc:
            raise FlitError(f"cannot write {path}: {exc}") from exc

    def read_head(self) -> str:
        """Return the first line of HEAD."""
        value = self._read(self.root / HEAD_FILE_NAME)
        if value is None:
            raise FlitError("cannot read HEAD")
        return value

    def write_head(self, value: str) -> None:
        """Replace the contents of HEAD with ``value``."""
        self._write(self.root / HEAD_FILE_NAME, value)

    def read_ref(self, ref_path: PathLike) -> Optional[str]:
        """Return the value of a reference, or None if missing or empty."""
        value = self._read(self.root / ref_path)
        return value or None

    def write_ref(self, ref_path: PathLike, value: str) -> None:
        """Replace the contents of a reference with ``value``."""
        self._write(self.root / ref_path, value)

    def delete_ref(self, ref_path: PathLike) -> None:
        """Remove an existing reference file."""
        full_path = self.root / ref_path
        if not full_path.exists():
            raise FlitError(f"reference does not exist: {ref_path}")
        try:
            full_path.unlink()
        except OSError as exc:
            raise FlitError(f"cannot delete reference {ref_path}: {exc}") from exc