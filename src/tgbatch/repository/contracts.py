"""Version-control contract consumed by the runner."""

from __future__ import annotations

from typing import Protocol


class CodeRepository(Protocol):
    """What the runner needs from the version-control client."""

    def get_changed_files(self, base_branch: str) -> list[str]: ...

    def checkout_branch(self, branch: str) -> None: ...

    def get_current_branch(self) -> str: ...
