"""Module-definition file kinds."""

from __future__ import annotations

import os

RUNNABLE_EXTENSION = ".hcl"
LIBRARY_EXTENSION = ".tf"
MODULE_EXTENSIONS: tuple[str, ...] = (RUNNABLE_EXTENSION, LIBRARY_EXTENSION)


def is_module_file(path: str) -> bool:
    return os.path.splitext(path)[1] in MODULE_EXTENSIONS


def is_runnable_file(path: str) -> bool:
    return os.path.splitext(path)[1] == RUNNABLE_EXTENSION


def contains_runnable_file(directory: str) -> bool:
    """
    Return True if `directory` holds at least one runnable definition file.

    Raises:
        OSError: if the directory cannot be listed.
    """
    with os.scandir(directory) as entries:
        return any(entry.is_file() and is_runnable_file(entry.name) for entry in entries)
