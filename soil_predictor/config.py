import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# API settings
APP_TITLE = os.getenv("APP_TITLE", "Soil Nutrient Predictor API")
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

# Cosmetic confidence value is drawn from [CONFIDENCE_FLOOR, CONFIDENCE_FLOOR + CONFIDENCE_SPAN)
CONFIDENCE_FLOOR = 85.0
CONFIDENCE_SPAN = 15.0

# Defaults used when a reading is missing from the request
DEFAULT_PH = 6.5
DEFAULT_TEMPERATURE = 25.0
DEFAULT_MOISTURE = 50.0
DEFAULT_EC = 1.2
DEFAULT_ORGANIC_CARBON = 2.2
DEFAULT_SOIL_TYPE = "loam"
