from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from typing import Dict, List

from soil_predictor.config import (
    DEFAULT_PH,
    DEFAULT_TEMPERATURE,
    DEFAULT_MOISTURE,
    DEFAULT_EC,
    DEFAULT_ORGANIC_CARBON,
    DEFAULT_SOIL_TYPE,
)


class SoilType(str, Enum):
    CLAY = "clay"
    SANDY = "sandy"
    LOAM = "loam"
    SILT = "silt"
    PEAT = "peat"
    CHALK = "chalk"


class Parameter(str, Enum):
    PH = "pH"
    TEMPERATURE = "temperature"
    MOISTURE = "moisture"
    EC = "ec"
    ORGANIC_CARBON = "organicCarbon"


class ParameterStatus(str, Enum):
    LOW = "Low"
    OPTIMAL = "Optimal"
    GOOD = "Good"
    HIGH = "High"
    UNKNOWN = "Unknown"


class CropSuitability(str, Enum):
    EXCELLENT = "Excellent for all crops"
    GOOD = "Good for most crops"
    SUITABLE_WITH_AMENDMENTS = "Suitable with amendments"
    NEEDS_IMPROVEMENT = "Requires significant improvement"


class RecommendationCategory(str, Enum):
    PH = "pH Correction"
    NITROGEN = "Nitrogen"
    PHOSPHORUS = "Phosphorus"
    POTASSIUM = "Potassium"
    ORGANIC_MATTER = "Organic Matter"


class Priority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"


class NutrientLevel(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


class SoilInput(BaseModel):
    """
    One soil reading. Missing or null readings fall back to the form defaults,
    and an unrecognized soil type falls back to loam. Out-of-range values
    (e.g. pH 20) are accepted; only non-finite numbers are rejected.
    """
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    ph: float = Field(DEFAULT_PH, description="pH level of soil")
    temperature: float = Field(DEFAULT_TEMPERATURE, description="Soil temperature in Celsius")
    moisture: float = Field(DEFAULT_MOISTURE, description="Soil moisture percentage")
    electrical_conductivity: float = Field(DEFAULT_EC, description="Electrical conductivity in dS/m")
    organic_carbon: float = Field(DEFAULT_ORGANIC_CARBON, description="Organic carbon percentage")
    soil_type: SoilType = Field(SoilType(DEFAULT_SOIL_TYPE), description="Soil texture class")

    @field_validator("ph", "temperature", "moisture", "electrical_conductivity", "organic_carbon", mode="before")
    @classmethod
    def fill_missing_reading(cls, v, info: ValidationInfo):
        if v is None or (isinstance(v, str) and not v.strip()):
            return cls.model_fields[info.field_name].default
        return v

    @field_validator("soil_type", mode="before")
    @classmethod
    def fallback_to_loam(cls, v):
        if isinstance(v, SoilType):
            return v
        if isinstance(v, str):
            try:
                return SoilType(v.strip().lower())
            except ValueError:
                pass
        return SoilType.LOAM


class NutrientEstimate(BaseModel):
    model_config = ConfigDict(frozen=True)

    nitrogen: float = Field(..., ge=0, le=100)
    phosphorus: float = Field(..., ge=0, le=100)
    potassium: float = Field(..., ge=0, le=100)


class Recommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: RecommendationCategory
    action: str
    priority: Priority


class NutrientStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: NutrientLevel
    description: str


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    nitrogen: float
    phosphorus: float
    potassium: float
    soil_health: float
    fertility_index: float
    risk_labels: List[str]
    risk_assessment: str
    crop_suitability: CropSuitability
    confidence: float = Field(..., description="Cosmetic display value, not a statistical confidence")
    recommendations: List[Recommendation]
    nutrient_status: Dict[str, NutrientStatus]


class ClassificationResponse(BaseModel):
    parameter: str
    value: float
    status: ParameterStatus


class BatchSummary(BaseModel):
    count: int
    metrics: Dict[str, Dict[str, float]]
    suitability_counts: Dict[str, int]
    risk_counts: Dict[str, int]
