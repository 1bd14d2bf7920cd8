"""Fetch attempt dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..errors import ClassifiedError


@dataclass
class FetchAttempt:
    attempt_number: int
    error: ClassifiedError | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None
