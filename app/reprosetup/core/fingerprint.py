"""Content fingerprints for idempotent change detection.

All fingerprints are SHA-256 hex digests. Descriptors are hashed over a
canonical JSON rendering of their managed attributes, so key order and
unset optional fields never change the result. Directory trees are hashed
over their files in sorted relative-path order.
"""

import hashlib
import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel

_CHUNK_SIZE = 64 * 1024


def fingerprint_data(data: Mapping[str, Any]) -> str:
    """Hash a JSON-compatible mapping.

    Args:
        data: Mapping of managed attributes.

    Returns:
        Hex digest of the canonical JSON encoding.
    """
    canonical = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def fingerprint_model(key: str, model: BaseModel) -> str:
    """Hash a declared descriptor together with its resource key.

    Fields left as None are unmanaged and are excluded from the hash, so
    omitting them in configuration never changes the fingerprint.

    Args:
        key: Resource key (package name, container name, ...).
        model: Declared descriptor.

    Returns:
        Hex digest over the key and the managed attributes.
    """
    attributes = model.model_dump(mode="json", exclude_none=True)
    return fingerprint_data({"key": key, "attributes": attributes})


def _update_from_file(digest: "hashlib._Hash", path: Path) -> None:
    with path.open("rb") as f:
        while chunk := f.read(_CHUNK_SIZE):
            digest.update(chunk)


def fingerprint_file(path: Path) -> str:
    """Hash a file's byte content.

    Args:
        path: File to hash.

    Returns:
        Hex digest of the file content.

    Raises:
        OSError: If the file cannot be read.
    """
    digest = hashlib.sha256()
    _update_from_file(digest, path)
    return digest.hexdigest()


def fingerprint_tree(root: Path) -> str:
    """Hash a directory tree independent of filesystem listing order.

    Each regular file contributes its relative path and content; symlinks
    contribute their target instead of being followed.

    Args:
        root: Directory to hash.

    Returns:
        Hex digest of the tree.

    Raises:
        OSError: If a file cannot be read.
    """
    digest = hashlib.sha256()
    for path in sorted(root.rglob("*"), key=lambda p: p.relative_to(root).as_posix()):
        relative = path.relative_to(root).as_posix()
        if path.is_symlink():
            digest.update(f"L:{relative}\0{path.readlink()}\0".encode())
        elif path.is_file():
            digest.update(f"F:{relative}\0".encode())
            _update_from_file(digest, path)
            digest.update(b"\0")
    return digest.hexdigest()


def fingerprint_path(path: Path) -> str | None:
    """Hash a file or directory, whichever the path points at.

    Args:
        path: File or directory.

    Returns:
        Hex digest, or None if the path does not exist.
    """
    if path.is_dir() and not path.is_symlink():
        return fingerprint_tree(path)
    if path.exists():
        return fingerprint_file(path)
    return None
