"""Static dependency extraction from module-definition files.

Matching is textual. Each pattern covers one block from its opening brace
up to the attribute, across newlines, but never across a nested brace: an
attribute written after a nested block (or inside a comment within the
block) is not understood. Only local paths are returned; remote sources
and interpolated values do not match.
"""

from __future__ import annotations

import os
import re

from tgbatch.errors import ReadError

_PATH = r'"([./\w\-]+)"'

# dependency "vpc" { config_path = "../vpc" }
_DEPENDENCY_RE = re.compile(r'\bdependency\s+[\w\-"]+\s*\{[^{}]*?\bconfig_path\s*=\s*' + _PATH)
# terraform { source = "../modules/vpc" }
_TERRAFORM_RE = re.compile(r'\bterraform\s*\{[^{}]*?\bsource\s*=\s*' + _PATH)
# module "vpc" { source = "../modules/vpc" }
_MODULE_RE = re.compile(r'\bmodule\s+[\w\-"]+\s*\{[^{}]*?\bsource\s*=\s*' + _PATH)

_PATTERNS: tuple[re.Pattern[str], ...] = (_DEPENDENCY_RE, _TERRAFORM_RE, _MODULE_RE)


def find_declared_paths(text: str) -> list[str]:
    """Return the raw (unresolved) dependency paths declared in `text`."""
    found: list[str] = []
    for pattern in _PATTERNS:
        found.extend(m.group(1) for m in pattern.finditer(text))
    return found


def extract_dependencies(path: str) -> set[str]:
    """
    Return the dependency directories declared by the file at `path`.

    Paths are resolved relative to the file's own directory and normalized.

    Raises:
        ReadError: if the file cannot be read.
    """
    try:
        with open(path, encoding="utf-8", errors="replace") as fh:
            text = fh.read()
    except OSError as exc:
        raise ReadError(
            f"reading module file {path}: {exc}",
            details={"path": path},
            cause=exc,
        ) from exc

    base = os.path.dirname(path)
    return {os.path.normpath(os.path.join(base, rel)) for rel in find_declared_paths(text)}
