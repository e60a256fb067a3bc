"""
Threshold rules for soil risk labels, crop suitability and remediation advice.

Each rule is an independent threshold check evaluated in a fixed order, and
the output keeps that order rather than sorting by severity. Risk thresholds
and recommendation thresholds differ on purpose: a nitrogen estimate of 35
reports no deficiency risk but still triggers a nitrogen recommendation, so
"Low risk" may appear next to fertilizer advice.
"""

import logging
from typing import List

from soil_predictor.models.soil import (
    SoilInput,
    NutrientEstimate,
    CropSuitability,
    Recommendation,
    RecommendationCategory,
    Priority,
)

logger = logging.getLogger(__name__)

LOW_RISK = "Low risk"

# Risk thresholds
ACIDITY_PH = 5.5
ALKALINITY_PH = 8.5
SALINITY_EC = 2.5
DEFICIENCY_THRESHOLDS = {
    "nitrogen": 30,
    "phosphorus": 25,
    "potassium": 35,
}

# Recommendation thresholds
LIME_PH = 6.0
SULFUR_PH = 8.0
FERTILIZER_THRESHOLDS = {
    "nitrogen": 40,
    "phosphorus": 30,
    "potassium": 40,
}
MIN_ORGANIC_CARBON = 2.0

# Lower bounds (inclusive) on the mean of soil health and fertility index
SUITABILITY_BANDS = (
    (80, CropSuitability.EXCELLENT),
    (65, CropSuitability.GOOD),
    (50, CropSuitability.SUITABLE_WITH_AMENDMENTS),
)


def assess_risks(soil_input: SoilInput, nutrients: NutrientEstimate) -> List[str]:
    """
    Collect risk labels for one reading.

    Returns:
        Labels in rule order, or [LOW_RISK] when no rule fires
    """
    risks = []
    if soil_input.ph < ACIDITY_PH:
        risks.append("Soil acidity")
    if soil_input.ph > ALKALINITY_PH:
        risks.append("Soil alkalinity")
    if soil_input.electrical_conductivity > SALINITY_EC:
        risks.append("High salinity")
    if nutrients.nitrogen < DEFICIENCY_THRESHOLDS["nitrogen"]:
        risks.append("Nitrogen deficiency")
    if nutrients.phosphorus < DEFICIENCY_THRESHOLDS["phosphorus"]:
        risks.append("Phosphorus deficiency")
    if nutrients.potassium < DEFICIENCY_THRESHOLDS["potassium"]:
        risks.append("Potassium deficiency")
    return risks if risks else [LOW_RISK]


def format_risks(risk_labels: List[str]) -> str:
    return ", ".join(risk_labels)


def assess_crop_suitability(soil_health: float, fertility_index: float) -> CropSuitability:
    avg_score = (soil_health + fertility_index) / 2
    for lower_bound, suitability in SUITABILITY_BANDS:
        if avg_score >= lower_bound:
            return suitability
    return CropSuitability.NEEDS_IMPROVEMENT


def generate_recommendations(soil_input: SoilInput, nutrients: NutrientEstimate) -> List[Recommendation]:
    """
    Build the remediation list for one reading.

    An empty list means no remediation is needed.
    """
    recommendations = []

    # Lime and sulfur are mutually exclusive
    if soil_input.ph < LIME_PH:
        recommendations.append(Recommendation(
            category=RecommendationCategory.PH,
            action="Apply lime to raise pH",
            priority=Priority.HIGH,
        ))
    elif soil_input.ph > SULFUR_PH:
        recommendations.append(Recommendation(
            category=RecommendationCategory.PH,
            action="Apply sulfur to lower pH",
            priority=Priority.HIGH,
        ))

    if nutrients.nitrogen < FERTILIZER_THRESHOLDS["nitrogen"]:
        recommendations.append(Recommendation(
            category=RecommendationCategory.NITROGEN,
            action="Apply nitrogen fertilizer or compost",
            priority=Priority.MEDIUM,
        ))

    if nutrients.phosphorus < FERTILIZER_THRESHOLDS["phosphorus"]:
        recommendations.append(Recommendation(
            category=RecommendationCategory.PHOSPHORUS,
            action="Apply phosphate fertilizer",
            priority=Priority.MEDIUM,
        ))

    if nutrients.potassium < FERTILIZER_THRESHOLDS["potassium"]:
        recommendations.append(Recommendation(
            category=RecommendationCategory.POTASSIUM,
            action="Apply potash fertilizer",
            priority=Priority.MEDIUM,
        ))

    if soil_input.organic_carbon < MIN_ORGANIC_CARBON:
        recommendations.append(Recommendation(
            category=RecommendationCategory.ORGANIC_MATTER,
            action="Add compost or organic amendments",
            priority=Priority.HIGH,
        ))

    logger.debug(f"Generated {len(recommendations)} recommendations")
    return recommendations
