from __future__ import annotations

from enum import StrEnum


class AttachmentKind(StrEnum):
    IMAGE = "image"
    PDF = "pdf"
    DOCUMENT = "document"


class ComposerStatus(StrEnum):
    IDLE = "idle"
    SENDING = "sending"


class ListStatus(StrEnum):
    LOADING = "loading"
    EMPTY = "empty"
    READY = "ready"


class Priority(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Difficulty(StrEnum):
    EASY = "easy"
    MODERATE = "moderate"
    DIFFICULT = "difficult"


class TaskSource(StrEnum):
    SEASONAL = "seasonal"
    WEATHER_SPECIFIC = "weather_specific"
    YEAR_ROUND = "year_round"


class TaskCategory(StrEnum):
    HVAC = "hvac"
    HEATING = "heating"
    PLUMBING = "plumbing"
    WATER_HEATER = "water_heater"
    ELECTRICAL = "electrical"
    ROOF = "roof"
    GUTTERS = "gutters"
    EXTERIOR = "exterior"
    DECK = "deck"
    PATIO = "patio"
    WINDOWS = "windows"
    DOORS = "doors"
    SAFETY = "safety"
    INSULATION = "insulation"
    VENTILATION = "ventilation"
    DRAINAGE = "drainage"
    LAWN = "lawn"
    LANDSCAPING = "landscaping"
    APPLIANCES = "appliances"
    PAINTING = "painting"
    GARAGE = "garage"
    POOL = "pool"
    SEPTIC = "septic"
    CLEANING = "cleaning"
    GENERAL_MAINTENANCE = "general_maintenance"
