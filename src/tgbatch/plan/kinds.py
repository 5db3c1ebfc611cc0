"""Operation kinds for tgbatch."""

from __future__ import annotations

from enum import Enum


class OperationKind(str, Enum):
    """What to do with a directory."""

    RUN = "RUN"
    SCAN = "SCAN"
    DESTROY = "DESTROY"
