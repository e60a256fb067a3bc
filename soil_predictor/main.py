import logging
from typing import List

from fastapi import FastAPI, HTTPException, Depends
from fastapi.middleware.cors import CORSMiddleware

from soil_predictor.config import APP_TITLE, APP_VERSION, LOG_LEVEL, CORS_ORIGINS
from soil_predictor.models.soil import SoilInput, AnalysisResult, ClassificationResponse, BatchSummary
from soil_predictor.services.prediction_service import PredictionService
from soil_predictor.utils.data_processing import classify_parameter

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=APP_TITLE,
    description="Heuristic soil nutrient estimation, risk assessment and remediation advice",
    version=APP_VERSION,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Dependency injections
def get_prediction_service():
    return PredictionService()


@app.get("/")
def read_root():
    return {"service": APP_TITLE, "version": APP_VERSION}


@app.post("/predict", response_model=AnalysisResult)
async def predict_soil(
        soil_input: SoilInput,
        prediction_service: PredictionService = Depends(get_prediction_service)
):
    """
    Analyze one soil reading.

    Returns:
    - Estimated nitrogen, phosphorus and potassium (0-100)
    - Soil health score and fertility index
    - Risk assessment and crop suitability
    - Prioritized remediation recommendations
    """
    try:
        return prediction_service.predict(soil_input)
    except Exception as e:
        logger.error(f"Error processing prediction: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/classify/{parameter}", response_model=ClassificationResponse)
async def classify_reading(parameter: str, value: float):
    """
    Classify a single reading as Low, Optimal, Good or High.
    Unknown parameters return status "Unknown".
    """
    status = classify_parameter(parameter, value)
    return {"parameter": parameter, "value": value, "status": status}


@app.post("/predict/batch", response_model=List[AnalysisResult])
async def predict_batch(
        soil_inputs: List[SoilInput],
        prediction_service: PredictionService = Depends(get_prediction_service)
):
    """
    Analyze several soil readings; results keep the request order
    """
    try:
        return prediction_service.predict_batch(soil_inputs)
    except Exception as e:
        logger.error(f"Error processing batch prediction: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/predict/batch/summary", response_model=BatchSummary)
async def summarize_batch(
        soil_inputs: List[SoilInput],
        prediction_service: PredictionService = Depends(get_prediction_service)
):
    """
    Analyze several soil readings and return aggregate statistics
    """
    try:
        return prediction_service.summarize_batch(soil_inputs)
    except Exception as e:
        logger.error(f"Error summarizing batch: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/health")
async def health_check():
    """
    Health check endpoint
    """
    return {"status": "healthy"}
