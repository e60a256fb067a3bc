"""
Endpoint tests for the FastAPI application.
"""
import pytest
from fastapi.testclient import TestClient

from soil_predictor.main import app, get_prediction_service
from soil_predictor.services.prediction_service import PredictionService


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seeded_client():
    service = PredictionService(seed=7)
    app.dependency_overrides[get_prediction_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


class FailingPredictionService(PredictionService):

    def predict(self, soil_input, rng=None):
        raise RuntimeError("estimator unavailable")

    def predict_batch(self, soil_inputs, rng=None):
        raise RuntimeError("estimator unavailable")


@pytest.fixture
def failing_client():
    app.dependency_overrides[get_prediction_service] = lambda: FailingPredictionService()
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestMetaEndpoints:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "service" in response.json()

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestPredictEndpoint:

    def test_empty_body_uses_defaults(self, client):
        response = client.post("/predict", json={})
        assert response.status_code == 200
        body = response.json()
        assert body["risk_labels"] == ["Low risk"]
        assert body["risk_assessment"] == "Low risk"
        assert body["crop_suitability"] == "Suitable with amendments"
        assert 85 <= body["confidence"] <= 100
        assert set(body["nutrient_status"]) == {"nitrogen", "phosphorus", "potassium"}

    def test_unknown_soil_type_is_accepted(self, client):
        response = client.post("/predict", json={"soil_type": "granite"})
        assert response.status_code == 200

    def test_recommendation_shape(self, client):
        response = client.post("/predict", json={"ph": 4.5, "organic_carbon": 0.5})
        assert response.status_code == 200
        recommendations = response.json()["recommendations"]
        assert recommendations[0] == {
            "category": "pH Correction",
            "action": "Apply lime to raise pH",
            "priority": "High",
        }
        assert recommendations[-1]["category"] == "Organic Matter"

    def test_invalid_number_is_rejected(self, client):
        response = client.post("/predict", json={"ph": "acidic"})
        assert response.status_code == 422

    def test_seeded_service_requests_are_independent(self, seeded_client):
        nitrogen_values = {
            seeded_client.post("/predict", json={}).json()["nitrogen"] for _ in range(20)
        }
        assert len(nitrogen_values) > 1

    def test_overflowing_reading_is_clamped(self, client):
        response = client.post(
            "/predict", json={"organic_carbon": 1e308, "electrical_conductivity": -1e308}
        )
        assert response.status_code == 200
        body = response.json()
        for key in ("nitrogen", "phosphorus", "potassium", "soil_health", "fertility_index"):
            assert 0 <= body[key] <= 100

    def test_service_error_returns_500(self, failing_client):
        response = failing_client.post("/predict", json={})
        assert response.status_code == 500
        assert response.json() == {"detail": "estimator unavailable"}


class TestClassifyEndpoint:

    @pytest.mark.parametrize("parameter,value,expected", [
        ("pH", 7.0, "Optimal"),
        ("pH", 4.0, "Low"),
        ("pH", 12.0, "High"),
        ("moisture", 65, "Good"),
        ("unknown", 5, "Unknown"),
    ])
    def test_classify(self, client, parameter, value, expected):
        response = client.get(f"/classify/{parameter}", params={"value": value})
        assert response.status_code == 200
        body = response.json()
        assert body["parameter"] == parameter
        assert body["status"] == expected

    def test_missing_value(self, client):
        response = client.get("/classify/pH")
        assert response.status_code == 422


class TestBatchEndpoints:

    def test_batch(self, client):
        response = client.post("/predict/batch", json=[{"ph": 4.0}, {}, {"ph": 9.0}])
        assert response.status_code == 200
        results = response.json()
        assert len(results) == 3
        assert results[0]["risk_labels"][0] == "Soil acidity"
        assert results[2]["risk_labels"][0] == "Soil alkalinity"

    def test_batch_summary(self, client):
        response = client.post("/predict/batch/summary", json=[{}, {}, {}])
        assert response.status_code == 200
        summary = response.json()
        assert summary["count"] == 3
        assert summary["risk_counts"] == {"Low risk": 3}
        assert summary["suitability_counts"] == {"Suitable with amendments": 3}

    @pytest.mark.parametrize("path", ["/predict/batch", "/predict/batch/summary"])
    def test_batch_service_error_returns_500(self, failing_client, path):
        response = failing_client.post(path, json=[{}])
        assert response.status_code == 500
        assert response.json() == {"detail": "estimator unavailable"}

    def test_empty_batch_summary(self, client):
        response = client.post("/predict/batch/summary", json=[])
        assert response.status_code == 200
        assert response.json()["count"] == 0
