import logging
import threading
import traceback
from typing import Iterable, List, Optional

import numpy as np

from soil_predictor.config import CONFIDENCE_FLOOR, CONFIDENCE_SPAN
from soil_predictor.models.soil import SoilInput, AnalysisResult, NutrientStatus
from soil_predictor.utils.data_processing import (
    NUTRIENTS,
    categorize_nutrient_level,
    describe_nutrient,
    summarize_results,
)
from soil_predictor.utils.nutrient_estimation import (
    estimate_nutrients,
    calculate_soil_health,
    calculate_fertility_index,
)
from soil_predictor.utils.recommendations import (
    assess_risks,
    format_risks,
    assess_crop_suitability,
    generate_recommendations,
)

logger = logging.getLogger(__name__)


class PredictionService:
    """
    Prediction engine. Each call works on its own noise source, so one
    instance can serve concurrent requests.
    """

    def __init__(self, seed: Optional[int] = None):
        # Seeded services spawn one independent child stream per call
        self._seed_sequence = np.random.SeedSequence(seed) if seed is not None else None
        self._spawn_lock = threading.Lock()

    def _new_rng(self) -> np.random.Generator:
        if self._seed_sequence is None:
            return np.random.default_rng()
        with self._spawn_lock:
            child = self._seed_sequence.spawn(1)[0]
        return np.random.default_rng(child)

    def predict(self, soil_input: SoilInput, rng: Optional[np.random.Generator] = None) -> AnalysisResult:
        """Estimate nutrients, indices, risks and recommendations for one soil reading"""
        try:
            if rng is None:
                rng = self._new_rng()

            nutrients = estimate_nutrients(soil_input, rng)

            soil_health = calculate_soil_health(nutrients, soil_input.ph, soil_input.organic_carbon)
            fertility_index = calculate_fertility_index(nutrients)
            risk_labels = assess_risks(soil_input, nutrients)
            crop_suitability = assess_crop_suitability(soil_health, fertility_index)
            recommendations = generate_recommendations(soil_input, nutrients)

            nutrient_values = {
                "nitrogen": round(nutrients.nitrogen, 1),
                "phosphorus": round(nutrients.phosphorus, 1),
                "potassium": round(nutrients.potassium, 1),
            }
            nutrient_status = {
                nutrient: NutrientStatus(
                    level=categorize_nutrient_level(nutrient_values[nutrient]),
                    description=describe_nutrient(nutrient, nutrient_values[nutrient]),
                )
                for nutrient in NUTRIENTS
            }

            confidence = round(CONFIDENCE_FLOOR + float(rng.random()) * CONFIDENCE_SPAN, 1)

            result = AnalysisResult(
                **nutrient_values,
                soil_health=round(soil_health, 1),
                fertility_index=round(fertility_index, 1),
                risk_labels=risk_labels,
                risk_assessment=format_risks(risk_labels),
                crop_suitability=crop_suitability,
                confidence=confidence,
                recommendations=recommendations,
                nutrient_status=nutrient_status,
            )
            logger.info(
                f"Prediction successful: {crop_suitability.value} "
                f"({len(recommendations)} recommendations)"
            )
            return result
        except Exception as e:
            logger.error(f"Error in prediction service: {e}")
            logger.error(traceback.format_exc())
            raise

    def predict_batch(self, soil_inputs: Iterable[SoilInput],
                      rng: Optional[np.random.Generator] = None) -> List[AnalysisResult]:
        """Run predict over several readings, sharing one noise source for the batch only"""
        if rng is None:
            rng = self._new_rng()
        return [self.predict(soil_input, rng) for soil_input in soil_inputs]

    def summarize_batch(self, soil_inputs: Iterable[SoilInput],
                        rng: Optional[np.random.Generator] = None):
        results = self.predict_batch(soil_inputs, rng)
        return summarize_results(results)
