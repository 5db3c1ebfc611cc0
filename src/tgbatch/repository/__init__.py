"""Public repository exports for tgbatch."""

from __future__ import annotations

from .contracts import CodeRepository
from .git_repository import GitRepository

__all__ = ["CodeRepository", "GitRepository"]
