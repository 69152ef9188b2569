"""Keyword heuristics that classify maintenance tasks and price them.

Rules are evaluated in order and the first match wins, so more specific
categories must come before broader ones.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Callable

from homebase.domain.entities.maintenance_task import CostEstimate, MaintenanceTask
from homebase.domain.value_objects.enums import Difficulty, Priority, TaskCategory
from homebase.services.task_content import generate_task_content


def _any(*words: str) -> Callable[[str], bool]:
    return lambda text: any(w in text for w in words)


def _all(*checks: Callable[[str], bool]) -> Callable[[str], bool]:
    return lambda text: all(check(text) for check in checks)


_CATEGORY_RULES: list[tuple[TaskCategory, Callable[[str], bool]]] = [
    (TaskCategory.HVAC, _any("hvac", "air conditioning", "furnace", "heating system", "thermostat")),
    (TaskCategory.HEATING, _any("fireplace", "chimney")),
    (TaskCategory.PLUMBING, _any("plumbing", "pipe", "faucet", "drain", "toilet", "sink", "sump pump")),
    (TaskCategory.WATER_HEATER, _any("water heater")),
    (TaskCategory.ELECTRICAL, _any("electrical", "outlet", "gfci", "afci", "breaker", "wiring")),
    (TaskCategory.ROOF, _any("roof", "shingle", "flashing")),
    (TaskCategory.GUTTERS, _any("gutter", "downspout")),
    (TaskCategory.ROOF, _any("ice dam")),
    (TaskCategory.EXTERIOR, _any("siding", "exterior", "trim")),
    (TaskCategory.DECK, _any("deck", "railing")),
    (TaskCategory.PATIO, _any("patio", "concrete")),
    (TaskCategory.WINDOWS, _any("window")),
    (TaskCategory.DOORS, _any("door")),
    (TaskCategory.SAFETY, _any("smoke detector", "carbon monoxide", "fire extinguisher")),
    (TaskCategory.INSULATION, _any("insulation")),
    (TaskCategory.VENTILATION, _any("ventilation", "exhaust fan")),
    (TaskCategory.DRAINAGE, lambda t: "drainage" in t or ("foundation" in t and "water" in t)),
    (TaskCategory.LAWN, _any("lawn", "grass", "mow")),
    (TaskCategory.LANDSCAPING, _any("landscaping", "shrub", "tree", "garden")),
    (TaskCategory.APPLIANCES, _any("appliance", "refrigerator", "washer", "dryer", "dishwasher")),
    (TaskCategory.PAINTING, lambda t: "paint" in t or ("stain" in t and ("deck" in t or "wood" in t))),
    (TaskCategory.GARAGE, _all(_any("garage"), _any("door", "opener"))),
    (TaskCategory.POOL, _any("pool", "spa", "hot tub")),
    (TaskCategory.SEPTIC, _any("septic", "sewer")),
    (TaskCategory.CLEANING, _any("clean", "vacuum", "dust")),
]

_DIFFICULT = _any(
    "professional", "hire", "contractor", "licensed", "certified", "complex",
    "dangerous", "electrical panel", "roof repair", "structural", "foundation",
)
_MODERATE = _any("repair", "replace", "install", "service", "maintenance", "schedule")

_HIGH_PRIORITY = _any(
    "smoke detector", "carbon monoxide", "fire extinguisher", "gas leak", "leak",
    "freez", "frozen", "ice dam", "hurricane", "tornado", "wildfire", "earthquake",
    "flood", "mold", "sump pump", "storm",
)
_LOW_PRIORITY = _any(
    "paint", "stain", "lawn", "mow", "garden", "landscaping", "furniture",
    "decor", "optional", "if applicable",
)

# (diy_min, diy_max, pro_min, pro_max) in USD for an easy job.
_COST_BASELINES: dict[TaskCategory, tuple[int, int, int, int]] = {
    TaskCategory.HVAC: (20, 60, 100, 250),
    TaskCategory.HEATING: (15, 40, 150, 350),
    TaskCategory.PLUMBING: (10, 50, 120, 300),
    TaskCategory.WATER_HEATER: (10, 30, 120, 250),
    TaskCategory.ELECTRICAL: (10, 40, 150, 350),
    TaskCategory.ROOF: (0, 50, 250, 600),
    TaskCategory.GUTTERS: (10, 40, 120, 250),
    TaskCategory.EXTERIOR: (25, 100, 200, 600),
    TaskCategory.DECK: (50, 200, 300, 900),
    TaskCategory.PATIO: (30, 120, 250, 700),
    TaskCategory.WINDOWS: (10, 50, 100, 300),
    TaskCategory.DOORS: (10, 50, 100, 300),
    TaskCategory.SAFETY: (10, 40, 75, 150),
    TaskCategory.INSULATION: (50, 200, 400, 1500),
    TaskCategory.VENTILATION: (15, 60, 150, 400),
    TaskCategory.DRAINAGE: (25, 100, 300, 1000),
    TaskCategory.LAWN: (10, 50, 50, 150),
    TaskCategory.LANDSCAPING: (20, 100, 150, 500),
    TaskCategory.APPLIANCES: (10, 40, 100, 250),
    TaskCategory.PAINTING: (50, 200, 300, 1200),
    TaskCategory.GARAGE: (10, 40, 100, 300),
    TaskCategory.POOL: (25, 100, 100, 300),
    TaskCategory.SEPTIC: (0, 0, 300, 600),
    TaskCategory.CLEANING: (5, 30, 75, 200),
    TaskCategory.GENERAL_MAINTENANCE: (10, 50, 100, 250),
}

_DIFFICULTY_MULTIPLIER = {
    Difficulty.EASY: 1.0,
    Difficulty.MODERATE: 1.5,
    Difficulty.DIFFICULT: 2.5,
}

_REGION_MULTIPLIER = {
    "northeast": 1.2,
    "southeast": 0.9,
    "midwest": 0.95,
    "southwest": 1.0,
    "west coast": 1.25,
    "mountain west": 1.05,
}


def _text(title: str, description: str) -> str:
    return f"{title} {description}".lower()


def infer_task_category(title: str, description: str = "") -> TaskCategory:
    text = _text(title, description)
    for category, matches in _CATEGORY_RULES:
        if matches(text):
            return category
    return TaskCategory.GENERAL_MAINTENANCE


def infer_task_difficulty(title: str, description: str = "") -> Difficulty:
    text = _text(title, description)
    if _DIFFICULT(text):
        return Difficulty.DIFFICULT
    if _MODERATE(text) or ("inspect" in text and "visual" not in text):
        return Difficulty.MODERATE
    return Difficulty.EASY


def _round5(value: float) -> int:
    return int(5 * round(value / 5))


def get_cost_estimate(
    category: TaskCategory,
    difficulty: Difficulty,
    region: str | None = None,
) -> CostEstimate:
    diy_min, diy_max, pro_min, pro_max = _COST_BASELINES[category]
    factor = _DIFFICULTY_MULTIPLIER[difficulty]
    if region:
        factor *= _REGION_MULTIPLIER.get(region.strip().lower(), 1.0)
    if difficulty == Difficulty.DIFFICULT:
        # Not a DIY job.
        diy_min = diy_max = 0
    return CostEstimate(
        diy_min=_round5(diy_min * factor),
        diy_max=_round5(diy_max * factor),
        pro_min=_round5(pro_min * factor),
        pro_max=_round5(pro_max * factor),
    )


def classify_priority(title: str, description: str = "", base: Priority = Priority.MEDIUM) -> Priority:
    text = _text(title, description)
    if _HIGH_PRIORITY(text):
        return Priority.HIGH
    if _LOW_PRIORITY(text):
        return Priority.MEDIUM if base == Priority.HIGH else Priority.LOW
    return base


def enrich_task(
    task: MaintenanceTask,
    region: str | None = None,
    base_priority: Priority = Priority.MEDIUM,
) -> MaintenanceTask:
    """Fill in whatever the task is missing; fields already set are kept."""
    category = task.category or infer_task_category(task.title, task.description)
    difficulty = task.difficulty or infer_task_difficulty(task.title, task.description)
    return replace(
        task,
        category=category,
        difficulty=difficulty,
        cost_estimate=task.cost_estimate or get_cost_estimate(category, difficulty, region or task.region),
        priority=task.priority or classify_priority(task.title, task.description, base_priority),
        content=task.content or generate_task_content(task.title, task.description),
    )


def enrich_tasks(
    tasks: list[MaintenanceTask],
    region: str | None = None,
    base_priority: Priority = Priority.MEDIUM,
) -> list[MaintenanceTask]:
    return [enrich_task(t, region, base_priority) for t in tasks]
