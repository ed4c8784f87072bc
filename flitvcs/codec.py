"""Low-level encoding of stored objects: headers, hashing and compression."""

import hashlib
import zlib

from flitvcs.errors import MalformedObjectError


def serialize_object(data: bytes, object_type: str) -> bytes:
    """Prefix ``data`` with the ``"<type> <size>\\0"`` header."""
    header = f"{object_type} {len(data)}".encode("ascii")
    return header + b"\0" + data


def deserialize_data(raw: bytes) -> bytes:
    """Return the payload that follows the header of a serialized object."""
    header, sep, payload = raw.partition(b"\0")
    if not sep:
        raise MalformedObjectError("object has no header terminator")
    return payload


def deserialize_type(raw: bytes) -> str:
    """Return the type name stored in the header of a serialized object."""
    type_name, sep, _ = raw.partition(b" ")
    if not sep:
        raise MalformedObjectError("object header has no type separator")
    try:
        return type_name.decode("ascii")
    except UnicodeDecodeError as exc:
        raise MalformedObjectError("object type is not ASCII") from exc


def sha256_hex(data: bytes) -> str:
    """Return the lower-case hexadecimal SHA-256 digest of ``data``."""
    return hashlib.sha256(data).hexdigest()


def z_compress(data: bytes) -> bytes:
    """Compress ``data`` as a zlib stream at the highest compression level."""
    return zlib.compress(data, zlib.Z_BEST_COMPRESSION)


def z_decompress(data: bytes) -> bytes:
    """Decompress a complete zlib stream."""
    try:
        return zlib.decompress(data)
    except zlib.error as exc:
        raise MalformedObjectError(f"inflate failed: {exc}") from exc