from __future__ import annotations

from dataclasses import dataclass, field

from homebase.domain.value_objects.enums import (
    Difficulty,
    Priority,
    TaskCategory,
    TaskSource,
)


@dataclass(frozen=True, slots=True)
class CostEstimate:
    diy_min: int
    diy_max: int
    pro_min: int
    pro_max: int
    currency: str = "USD"

    @property
    def label(self) -> str:
        if self.diy_max == 0:
            return f"${self.pro_min}-${self.pro_max} (professional)"
        return f"${self.diy_min}-${self.diy_max} DIY / ${self.pro_min}-${self.pro_max} pro"


@dataclass(frozen=True, slots=True)
class GeneratedTaskContent:
    action_summary: str
    steps: list[str] = field(default_factory=list)
    tools_and_supplies: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class MaintenanceTask:
    id: str
    title: str
    description: str
    region: str
    month: int | None
    source: TaskSource
    priority: Priority | None = None
    category: TaskCategory | None = None
    difficulty: Difficulty | None = None
    cost_estimate: CostEstimate | None = None
    content: GeneratedTaskContent | None = None
