import logging
from types import MappingProxyType

import pandas as pd

from soil_predictor.models.soil import Parameter, ParameterStatus, NutrientLevel

logger = logging.getLogger(__name__)

# (low, optimal, high) reference bands for the live per-field status
PARAMETER_BANDS = MappingProxyType({
    Parameter.PH: (5.5, 7.0, 8.5),
    Parameter.TEMPERATURE: (18.0, 25.0, 30.0),
    Parameter.MOISTURE: (30.0, 50.0, 70.0),
    Parameter.EC: (0.5, 1.2, 2.0),
    Parameter.ORGANIC_CARBON: (1.0, 2.5, 3.5),
})

# Fraction of the optimal value still counted as optimal
OPTIMAL_TOLERANCE = 0.2

NUTRIENT_DESCRIPTIONS = MappingProxyType({
    "nitrogen": {
        "high": "Excellent for leafy growth and protein synthesis",
        "medium": "Adequate for most plant growth requirements",
        "low": "May limit plant growth and yield potential",
    },
    "phosphorus": {
        "high": "Optimal for root development and flowering",
        "medium": "Sufficient for normal plant development",
        "low": "Could restrict root growth and fruit production",
    },
    "potassium": {
        "high": "Excellent for disease resistance and water regulation",
        "medium": "Adequate for plant health and stress tolerance",
        "low": "May reduce plant immunity and drought resistance",
    },
})

NUTRIENTS = ("nitrogen", "phosphorus", "potassium")
SUMMARY_METRICS = ("nitrogen", "phosphorus", "potassium", "soil_health", "fertility_index", "confidence")


def resolve_parameter(parameter):
    """Map an enum member, its value ("organicCarbon") or its name ("ORGANIC_CARBON") to a Parameter, ignoring case"""
    if isinstance(parameter, Parameter):
        return parameter
    if not isinstance(parameter, str):
        return None
    key = parameter.strip().lower()
    for candidate in Parameter:
        if key == candidate.value.lower() or key == candidate.name.lower():
            return candidate
    return None


def classify_parameter(parameter, value):
    """
    Classify a single soil reading against its reference band.

    Returns ParameterStatus.UNKNOWN for parameters without a band instead of
    raising, so callers can feed arbitrary form field names.
    """
    resolved = resolve_parameter(parameter)
    if resolved is None:
        return ParameterStatus.UNKNOWN

    low, optimal, high = PARAMETER_BANDS[resolved]
    if value < low:
        return ParameterStatus.LOW
    if value > high:
        return ParameterStatus.HIGH
    if abs(value - optimal) <= optimal * OPTIMAL_TOLERANCE:
        return ParameterStatus.OPTIMAL
    return ParameterStatus.GOOD


def categorize_nutrient_level(value):
    if value >= 70:
        return NutrientLevel.EXCELLENT
    elif value >= 50:
        return NutrientLevel.GOOD
    elif value >= 30:
        return NutrientLevel.FAIR
    else:
        return NutrientLevel.POOR


def describe_nutrient(nutrient, value):
    descriptions = NUTRIENT_DESCRIPTIONS.get(nutrient)
    if descriptions is None:
        return "Analysis complete"

    if value >= 60:
        return descriptions["high"]
    elif value >= 35:
        return descriptions["medium"]
    else:
        return descriptions["low"]


def results_to_dataframe(results):
    """Flatten analysis results into one row per reading"""
    rows = []
    for result in results:
        rows.append({
            "nitrogen": result.nitrogen,
            "phosphorus": result.phosphorus,
            "potassium": result.potassium,
            "soil_health": result.soil_health,
            "fertility_index": result.fertility_index,
            "confidence": result.confidence,
            "crop_suitability": result.crop_suitability.value,
            "risk_assessment": result.risk_assessment,
            "recommendation_count": len(result.recommendations),
        })
    return pd.DataFrame(rows, columns=list(SUMMARY_METRICS) + [
        "crop_suitability", "risk_assessment", "recommendation_count"
    ])


def summarize_results(results):
    """Descriptive statistics and label counts over a batch of analysis results"""
    results = list(results)
    results_df = results_to_dataframe(results)

    if results_df.empty:
        return {"count": 0, "metrics": {}, "suitability_counts": {}, "risk_counts": {}}

    stats = results_df[list(SUMMARY_METRICS)].agg(["mean", "min", "max"]).round(1)
    metrics = {
        metric: {stat: float(stats.at[stat, metric]) for stat in stats.index}
        for metric in SUMMARY_METRICS
    }

    suitability_counts = {
        label: int(count) for label, count in results_df["crop_suitability"].value_counts().items()
    }

    risk_series = pd.Series([label for result in results for label in result.risk_labels], dtype="object")
    risk_counts = {label: int(count) for label, count in risk_series.value_counts().items()}

    logger.info(f"Summarized batch of {len(results_df)} analyses")

    return {
        "count": int(len(results_df)),
        "metrics": metrics,
        "suitability_counts": suitability_counts,
        "risk_counts": risk_counts,
    }
