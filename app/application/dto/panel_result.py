from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class PanelLoaded:
    data: Any
    status: str = "loaded"


@dataclass(frozen=True)
class PanelFailed:
    message: str
    retryable: bool = True
    status: str = "failed"


PanelResult = Union[PanelLoaded, PanelFailed]
