"""Longest shared path prefix tracking for readable summaries."""

from __future__ import annotations

import os


def update_common_root(current: str, path: str) -> str:
    """
    Return the common root of `current` and `path`.

    An empty `current` starts from the parent of `path`. When no more than
    the volume is shared the root collapses to the separator itself.
    """
    if current == "":
        return os.path.dirname(path) + os.sep

    current_elems = current.split(os.sep)
    if len(current_elems) < 2:
        return current
    path_elems = path.split(os.sep)

    shared = 0
    for i, elem in enumerate(current_elems):
        if i >= len(path_elems) or elem != path_elems[i]:
            break
        shared += 1

    if shared > 1:
        joined = os.sep.join(path_elems[:shared])
        if path_elems[shared - 1] != "":
            return joined + os.sep
        return joined
    return os.sep


def relative_to_root(directory: str, root: str) -> str:
    """Strip `root` from the front of `directory` when it is a prefix."""
    if root and directory.startswith(root):
        return directory[len(root):]
    return directory
