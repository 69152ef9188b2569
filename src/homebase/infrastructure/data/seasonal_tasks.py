"""Static seasonal maintenance table for the six US regions.

Months within a season share one task block; the table is a representative
subset, not the full catalogue.
"""
from __future__ import annotations

from homebase.domain.entities.region import MonthlyTasks, RegionProfile
from homebase.domain.value_objects.enums import Priority

WINTER = (12, 1, 2)
SPRING = (3, 4, 5)
SUMMER = (6, 7, 8)
FALL = (9, 10, 11)

DEFAULT_REGION = "Midwest"

_CLIMATE_ZONE_REGIONS = {
    "1": "Northeast",
    "2": "Southeast",
    "3": "Southeast",
    "4": "Midwest",
    "5": "Midwest",
    "6": "Mountain West",
    "7": "Southwest",
    "8": "West Coast",
}


def _seasons(**blocks: tuple[tuple[str, ...], tuple[str, ...], Priority]) -> dict[int, MonthlyTasks]:
    months = {"winter": WINTER, "spring": SPRING, "summer": SUMMER, "fall": FALL}
    table: dict[int, MonthlyTasks] = {}
    for season, (seasonal, weather, priority) in blocks.items():
        for month in months[season]:
            table[month] = MonthlyTasks(seasonal=seasonal, weather_specific=weather, priority=priority)
    return table


REGIONS: dict[str, RegionProfile] = {
    "Northeast": RegionProfile(
        region="Northeast",
        climate_zone="Cold/Humid Continental",
        monthly_tasks=_seasons(
            winter=(
                (
                    "Check heating system efficiency",
                    "Inspect and clean fireplace/chimney",
                    "Check for ice dams on roof",
                    "Test carbon monoxide detectors",
                    "Inspect weatherstripping on doors and windows",
                ),
                (
                    "Check pipes for freezing in unheated areas",
                    "Ensure adequate insulation in attic and basement",
                    "Monitor humidity levels (30-50%)",
                ),
                Priority.HIGH,
            ),
            spring=(
                (
                    "Schedule HVAC system transition maintenance",
                    "Clean and inspect gutters",
                    "Inspect roof shingles and flashing",
                    "Test outdoor water spigots",
                ),
                (
                    "Check foundation for frost damage",
                    "Test sump pump before spring rains",
                    "Check basement for moisture issues",
                ),
                Priority.MEDIUM,
            ),
            summer=(
                (
                    "Service air conditioning system",
                    "Inspect and seal deck",
                    "Check exterior paint and siding",
                ),
                (
                    "Monitor for pest activity",
                    "Clean dryer vent to prevent lint buildup",
                ),
                Priority.MEDIUM,
            ),
            fall=(
                (
                    "Schedule furnace service before heating season",
                    "Clean gutters after leaves fall",
                    "Winterize outdoor faucets and irrigation",
                    "Test smoke detectors",
                ),
                (
                    "Seal gaps around windows and doors",
                    "Store outdoor furniture before first freeze",
                ),
                Priority.HIGH,
            ),
        ),
        year_round_tasks=(
            "Test smoke and carbon monoxide detectors monthly",
            "Check HVAC filters monthly",
            "Inspect plumbing for leaks quarterly",
            "Professional HVAC service twice yearly",
        ),
        special_considerations=(
            "Ice dam prevention and removal",
            "Frozen pipe prevention in winter",
            "Nor'easter storm preparation",
        ),
    ),
    "Southeast": RegionProfile(
        region="Southeast",
        climate_zone="Humid Subtropical",
        monthly_tasks=_seasons(
            winter=(
                (
                    "Service heating system during cooler months",
                    "Inspect weatherstripping",
                    "Test carbon monoxide detectors",
                ),
                (
                    "Monitor for freeze protection of pipes",
                    "Check for pest activity (active year-round)",
                ),
                Priority.MEDIUM,
            ),
            spring=(
                (
                    "Service air conditioning before summer",
                    "Clean and inspect gutters",
                    "Inspect roof for storm damage",
                ),
                (
                    "Check drainage around foundation",
                    "Inspect for termite activity",
                ),
                Priority.MEDIUM,
            ),
            summer=(
                (
                    "Change HVAC filter monthly during peak cooling",
                    "Inspect attic ventilation",
                    "Clean dehumidifier and check humidity levels",
                ),
                (
                    "Prepare hurricane emergency supplies",
                    "Trim trees away from roof and power lines",
                    "Check for mold in bathrooms and crawl spaces",
                ),
                Priority.HIGH,
            ),
            fall=(
                (
                    "Schedule heating system service",
                    "Clean gutters and downspouts",
                    "Test smoke detectors",
                ),
                (
                    "Inspect roof after hurricane season",
                    "Check sump pump operation",
                ),
                Priority.MEDIUM,
            ),
        ),
        year_round_tasks=(
            "Test smoke and carbon monoxide detectors monthly",
            "Check HVAC filters monthly (more frequent due to humidity)",
            "Inspect for mold and moisture quarterly",
            "Hurricane preparedness supplies check quarterly",
        ),
        special_considerations=(
            "Hurricane season preparation (June-November)",
            "High humidity and mold prevention",
            "Termite and pest control",
        ),
    ),
    "Midwest": RegionProfile(
        region="Midwest",
        climate_zone="Continental/Humid Continental",
        monthly_tasks=_seasons(
            winter=(
                (
                    "Check heating system efficiency",
                    "Inspect and clean fireplace/chimney",
                    "Test carbon monoxide detectors",
                    "Check insulation and weatherstripping",
                ),
                (
                    "Monitor for extreme cold effects on pipes",
                    "Check for ice dams and roof snow load",
                    "Check for drafts and heat loss",
                ),
                Priority.HIGH,
            ),
            spring=(
                (
                    "Test sump pump before spring storms",
                    "Clean and inspect gutters",
                    "Service air conditioning before summer",
                ),
                (
                    "Inspect roof for hail damage",
                    "Check basement for water intrusion",
                    "Review tornado shelter supplies",
                ),
                Priority.HIGH,
            ),
            summer=(
                (
                    "Clean air conditioning condenser coils",
                    "Inspect and stain deck",
                    "Mow and water lawn deeply",
                ),
                (
                    "Check foundation for drainage problems after storms",
                ),
                Priority.MEDIUM,
            ),
            fall=(
                (
                    "Schedule furnace service",
                    "Clean gutters after leaves fall",
                    "Winterize outdoor faucets and irrigation",
                ),
                (
                    "Seal exterior cracks before freeze",
                    "Test smoke detectors",
                ),
                Priority.HIGH,
            ),
        ),
        year_round_tasks=(
            "Test smoke and carbon monoxide detectors monthly",
            "Check HVAC filters monthly",
            "Check sump pump operation seasonally",
            "Professional HVAC service twice yearly",
        ),
        special_considerations=(
            "Tornado season preparedness",
            "Extreme temperature swings",
            "Spring flooding and basement water",
        ),
    ),
    "Southwest": RegionProfile(
        region="Southwest",
        climate_zone="Arid/Desert",
        monthly_tasks=_seasons(
            winter=(
                (
                    "Monitor heating system for cool season",
                    "Inspect exterior for UV and heat damage",
                    "Test carbon monoxide detectors",
                ),
                (
                    "Monitor for occasional freeze protection",
                    "Check pool heating systems if applicable",
                ),
                Priority.MEDIUM,
            ),
            spring=(
                (
                    "Service evaporative cooler or air conditioning",
                    "Inspect roof for sun damage",
                    "Check irrigation system for leaks",
                ),
                (
                    "Clear brush for wildfire defensible space",
                ),
                Priority.MEDIUM,
            ),
            summer=(
                (
                    "Replace HVAC filter (dust and sand)",
                    "Inspect attic ventilation",
                    "Clean pool filter and check chemistry",
                ),
                (
                    "Check windows for seal failure from heat",
                    "Prepare for monsoon flash flooding",
                ),
                Priority.HIGH,
            ),
            fall=(
                (
                    "Schedule heating system service",
                    "Clean gutters after monsoon season",
                    "Test smoke detectors",
                ),
                (
                    "Inspect stucco for cracks",
                ),
                Priority.LOW,
            ),
        ),
        year_round_tasks=(
            "Test smoke and carbon monoxide detectors monthly",
            "Check HVAC filters frequently (dust/sand)",
            "Monitor water conservation systems monthly",
            "Inspect for UV and heat damage quarterly",
        ),
        special_considerations=(
            "Extreme heat and UV exposure",
            "Monsoon season flash flooding",
            "Water conservation",
        ),
    ),
    "West Coast": RegionProfile(
        region="West Coast",
        climate_zone="Mediterranean/Marine West Coast",
        monthly_tasks=_seasons(
            winter=(
                (
                    "Check for winter storm damage",
                    "Inspect weatherstripping",
                    "Test carbon monoxide detectors",
                ),
                (
                    "Check earthquake preparedness supplies",
                    "Inspect for rain and moisture damage",
                    "Monitor for mudslide and flooding risks",
                ),
                Priority.MEDIUM,
            ),
            spring=(
                (
                    "Clean and inspect gutters",
                    "Inspect roof for moss growth",
                    "Service air conditioning",
                ),
                (
                    "Check drainage around foundation",
                ),
                Priority.MEDIUM,
            ),
            summer=(
                (
                    "Clear vegetation for wildfire defensible space",
                    "Clean exterior vents and install ember-resistant screens",
                    "Inspect deck for dry rot",
                ),
                (
                    "Monitor air quality during fire season",
                    "Check irrigation timers for drought restrictions",
                ),
                Priority.HIGH,
            ),
            fall=(
                (
                    "Clean gutters before rainy season",
                    "Schedule heating system service",
                    "Test smoke detectors",
                ),
                (
                    "Secure water heater strapping for earthquakes",
                ),
                Priority.MEDIUM,
            ),
        ),
        year_round_tasks=(
            "Test smoke and carbon monoxide detectors monthly",
            "Check earthquake emergency supplies quarterly",
            "Monitor air quality systems regularly",
            "Professional HVAC service twice yearly",
        ),
        special_considerations=(
            "Wildfire season preparation (June-September)",
            "Earthquake preparedness and safety",
            "Year-round moisture and mold management",
        ),
    ),
    "Mountain West": RegionProfile(
        region="Mountain West",
        climate_zone="High Desert/Alpine",
        monthly_tasks=_seasons(
            winter=(
                (
                    "Check heating system efficiency",
                    "Inspect fireplace and chimney",
                    "Check insulation and weatherproofing",
                ),
                (
                    "Check for ice dam formation",
                    "Monitor roof snow load after heavy storms",
                    "Check pipes for freezing in crawl spaces",
                ),
                Priority.HIGH,
            ),
            spring=(
                (
                    "Inspect roof for winter damage",
                    "Clean and inspect gutters",
                    "Test outdoor water spigots",
                ),
                (
                    "Check drainage for snowmelt runoff",
                ),
                Priority.MEDIUM,
            ),
            summer=(
                (
                    "Clear brush for wildfire defensible space",
                    "Inspect and seal deck",
                    "Service evaporative cooler",
                ),
                (
                    "Inspect exterior for UV damage at altitude",
                ),
                Priority.MEDIUM,
            ),
            fall=(
                (
                    "Schedule furnace service before heating season",
                    "Winterize outdoor faucets and irrigation",
                    "Test carbon monoxide detectors",
                ),
                (
                    "Prepare snow removal equipment",
                ),
                Priority.HIGH,
            ),
        ),
        year_round_tasks=(
            "Test smoke and carbon monoxide detectors monthly",
            "Check HVAC filters monthly (altitude effects)",
            "Monitor emergency supplies quarterly",
            "Professional HVAC service twice yearly",
        ),
        special_considerations=(
            "Heavy snow loads and ice dams",
            "Wildfire risk in dry summers",
            "Intense UV exposure at altitude",
        ),
    ),
}


class StaticRegionRepository:
    """Implements application.repositories.region.RegionReader from REGIONS."""

    def __init__(self, regions: dict[str, RegionProfile] | None = None) -> None:
        self._regions = regions if regions is not None else REGIONS
        self._by_lower = {name.lower(): profile for name, profile in self._regions.items()}

    def list_regions(self) -> list[RegionProfile]:
        return list(self._regions.values())

    def get_region(self, name: str) -> RegionProfile | None:
        return self._by_lower.get(name.strip().lower())

    def region_for_climate_zone(self, zone: str) -> str:
        return _CLIMATE_ZONE_REGIONS.get(zone.strip(), DEFAULT_REGION)
