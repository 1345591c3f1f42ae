"""Outcome tagging for data that may come from an external feed or a simulator.

Callers receive a :class:`Sourced` value instead of a payload with a buried
``is_simulated`` flag, so "real", "real failed, simulated instead" and
"simulated by configuration" stay distinguishable.
"""

import enum
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class SourceOutcome(str, enum.Enum):
    EXTERNAL = "external_api"
    FALLBACK = "fallback"     # external source failed, simulated data used
    SIMULATED = "simulated"   # no external source configured


@dataclass(frozen=True)
class Sourced(Generic[T]):
    value: T
    outcome: SourceOutcome
    error: Optional[str] = None

    @property
    def is_simulated(self) -> bool:
        return self.outcome is not SourceOutcome.EXTERNAL

    @property
    def source_label(self) -> str:
        """Public label used in API responses: 'external_api' or 'simulated'."""
        return "simulated" if self.is_simulated else SourceOutcome.EXTERNAL.value
