from __future__ import annotations

from typing import Optional, Protocol

from .model import Reason


class ReasonRepository(Protocol):
    def get_by_name(self, name: str) -> Optional[Reason]:
        raise NotImplementedError
