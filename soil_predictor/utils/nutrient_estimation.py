"""
Heuristic nutrient estimation from basic soil readings.

Nitrogen, phosphorus and potassium are estimated from organic carbon,
electrical conductivity, moisture, pH and temperature with fixed weighted
formulas, scaled by a soil texture modifier and clamped to a 0-100 scale.
A small uniform noise term is added to each estimate to emulate measurement
spread, so repeated calls with the same reading are NOT guaranteed to return
the same values. Pass a seeded numpy Generator for reproducible output, or
no generator at all for the noise-free formula value.
"""

from types import MappingProxyType
from typing import Mapping, Optional, Tuple

import numpy as np

from soil_predictor.models.soil import SoilInput, SoilType, NutrientEstimate

# Multiplicative (N, P, K) modifiers per soil texture
SOIL_TYPE_MODIFIERS: Mapping[SoilType, Tuple[float, float, float]] = MappingProxyType({
    SoilType.CLAY: (1.1, 0.9, 1.0),
    SoilType.SANDY: (0.8, 1.1, 0.9),
    SoilType.LOAM: (1.0, 1.0, 1.0),
    SoilType.SILT: (0.9, 1.0, 1.1),
    SoilType.PEAT: (1.2, 0.8, 0.8),
    SoilType.CHALK: (0.7, 1.2, 0.9),
})

# Upper (exclusive) bound of the uniform noise added to each base estimate
NOISE_CEILINGS = MappingProxyType({
    "nitrogen": 10.0,
    "phosphorus": 15.0,
    "potassium": 12.0,
})

NUTRIENT_SCALE = (0.0, 100.0)

# Index weights
HEALTH_WEIGHTS = {"nutrients": 0.4, "ph": 0.3, "organic": 0.3}
FERTILITY_WEIGHTS = {"N": 0.4, "P": 0.35, "K": 0.25}
HEALTH_OPTIMAL_PH = 6.8


def get_soil_modifiers(soil_type) -> Tuple[float, float, float]:
    """Look up the (N, P, K) modifiers, falling back to loam"""
    return SOIL_TYPE_MODIFIERS.get(soil_type, SOIL_TYPE_MODIFIERS[SoilType.LOAM])


def _noise(rng: Optional[np.random.Generator], nutrient: str) -> float:
    if rng is None:
        return 0.0
    return float(rng.uniform(0.0, NOISE_CEILINGS[nutrient]))


def clamp(value: float, low: float = NUTRIENT_SCALE[0], high: float = NUTRIENT_SCALE[1]) -> float:
    """Clip to [low, high]; NaN maps to low and infinities to the nearest bound"""
    return float(np.clip(np.nan_to_num(value, nan=low, posinf=high, neginf=low), low, high))


def calculate_nitrogen(ph: float, temperature: float, moisture: float, organic_carbon: float,
                       rng: Optional[np.random.Generator] = None) -> float:
    base = organic_carbon * 15
    ph_factor = 1 - abs(ph - 6.75) * 0.15
    temp_factor = 1 - abs(temperature - 25) * 0.02
    moisture_factor = 1.1 if 40 < moisture < 70 else 0.9
    return base * ph_factor * temp_factor * moisture_factor + _noise(rng, "nitrogen")


def calculate_phosphorus(ph: float, ec: float, organic_carbon: float, temperature: float,
                         rng: Optional[np.random.Generator] = None) -> float:
    base = organic_carbon * 8 + ec * 10
    # Phosphorus availability drops as soil turns alkaline
    ph_factor = 1.2 if ph < 7 else 1 - (ph - 7) * 0.1
    temp_factor = 1.1 if temperature > 20 else 0.9
    return base * ph_factor * temp_factor + _noise(rng, "phosphorus")


def calculate_potassium(ph: float, ec: float, moisture: float, soil_type,
                        rng: Optional[np.random.Generator] = None) -> float:
    base = ec * 15 + moisture * 0.5
    ph_factor = 1.1 if 6 < ph < 8 else 0.9
    # Clay retains exchangeable potassium
    type_factor = 1.2 if soil_type == SoilType.CLAY else 1.0
    return base * ph_factor * type_factor + _noise(rng, "potassium")


def estimate_nutrients(soil_input: SoilInput, rng: Optional[np.random.Generator] = None) -> NutrientEstimate:
    """
    Estimate N, P and K on a 0-100 scale for one soil reading.

    Args:
        soil_input: Validated soil reading
        rng: Noise source; None gives the noise-free formula value

    Returns:
        NutrientEstimate with unrounded, clamped values
    """
    n_mod, p_mod, k_mod = get_soil_modifiers(soil_input.soil_type)

    nitrogen = calculate_nitrogen(
        soil_input.ph, soil_input.temperature, soil_input.moisture, soil_input.organic_carbon, rng
    ) * n_mod
    phosphorus = calculate_phosphorus(
        soil_input.ph, soil_input.electrical_conductivity, soil_input.organic_carbon, soil_input.temperature, rng
    ) * p_mod
    potassium = calculate_potassium(
        soil_input.ph, soil_input.electrical_conductivity, soil_input.moisture, soil_input.soil_type, rng
    ) * k_mod

    return NutrientEstimate(
        nitrogen=clamp(nitrogen),
        phosphorus=clamp(phosphorus),
        potassium=clamp(potassium),
    )


def calculate_soil_health(nutrients: NutrientEstimate, ph: float, organic_carbon: float) -> float:
    """
    Weighted blend of nutrient balance, pH closeness to 6.8 and organic matter.

    The pH and organic terms are each kept within 0-100 so extreme readings
    cannot drive the score negative; the total is clamped as well.
    """
    nutrient_balance = (nutrients.nitrogen + nutrients.phosphorus + nutrients.potassium) / 3
    ph_score = max(0.0, 100 - abs(ph - HEALTH_OPTIMAL_PH) * 10)
    organic_score = clamp(organic_carbon * 25)
    health = (
        nutrient_balance * HEALTH_WEIGHTS["nutrients"]
        + ph_score * HEALTH_WEIGHTS["ph"]
        + organic_score * HEALTH_WEIGHTS["organic"]
    )
    return clamp(health)


def calculate_fertility_index(nutrients: NutrientEstimate) -> float:
    fertility = (
        nutrients.nitrogen * FERTILITY_WEIGHTS["N"]
        + nutrients.phosphorus * FERTILITY_WEIGHTS["P"]
        + nutrients.potassium * FERTILITY_WEIGHTS["K"]
    )
    return clamp(fertility)
