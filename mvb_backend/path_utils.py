"""
Shared path normalization and safety helpers.
"""

from __future__ import annotations

import os
from pathlib import Path


def media_name_error(name: str) -> str:
    """Return why `name` is not a bare media filename, or "" when it is."""
    if not name or not name.strip():
        return "Filename cannot be empty"
    if "/" in name or "\\" in name:
        return "Filename cannot contain path separators"
    if "\x00" in name:
        return "Filename cannot contain null bytes"
    if any(ord(char) < 32 for char in name):
        return "Filename cannot contain control characters"
    if name in (".", ".."):
        return "Filename cannot be a directory reference"
    return ""


def is_within_root(candidate: Path, root: Path) -> bool:
    try:
        root_resolved = root.resolve(strict=True)
        cand_resolved = candidate.resolve(strict=True)
    except (OSError, RuntimeError, ValueError):
        return False
    try:
        return cand_resolved == root_resolved or cand_resolved.is_relative_to(root_resolved)
    except AttributeError:
        try:
            common = os.path.commonpath([str(cand_resolved), str(root_resolved)])
            return os.path.normcase(common) == os.path.normcase(str(root_resolved))
        except ValueError:
            return False


def resolve_media_file(root: Path, name: str) -> Path | None:
    """
    Resolve a media filename to a regular file directly inside `root`.

    Symlinks are followed; the target must still live under the resolved root.
    Returns None for unsafe names, missing files, and anything outside the root.
    """
    if media_name_error(name):
        return None
    candidate = Path(root) / name
    if not is_within_root(candidate, Path(root)):
        return None
    try:
        resolved = candidate.resolve(strict=True)
    except (OSError, RuntimeError, ValueError):
        return None
    if resolved == Path(root).resolve() or not resolved.is_file():
        return None
    return resolved
