"""
Tests for properties, scenarios, renovations and analysis API endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.db.models import DealScenario

# Database setup is handled by conftest.py


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


def scenario_payload(property_id, **overrides):
    payload = {
        "property_id": property_id,
        "name": "API Rental",
        "purchase_price": 250000,
        "rehab_cost": 20000,
        "holding_costs": 5000,
        "closing_costs": 5000,
        "interest_rate": 6,
        "hold_time_months": 12,
        "exit_strategy": "rent",
        "monthly_rent": 2200,
        "occupancy_rate": 95,
    }
    payload.update(overrides)
    return payload


class TestHealth:
    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestPropertiesAPI:
    """Test property endpoints."""

    def test_list_properties(self, client, test_property):
        response = client.get("/api/properties/")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["properties"][0]["name"] == "Test Property"

    def test_filter_by_status(self, client, test_property):
        response = client.get("/api/properties/", params={"status": "owned"})
        assert response.json()["total"] == 0

    def test_create_property(self, client):
        response = client.post(
            "/api/properties/",
            json={
                "name": "New Duplex",
                "address_city": "Tampa",
                "property_type": "airbnb",
                "purchase_price": 320000,
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "New Duplex"
        assert data["property_type"] == "airbnb"
        assert data["status"] == "lead"

    def test_get_property(self, client, test_property):
        response = client.get(f"/api/properties/{test_property.id}")
        assert response.status_code == 200
        assert response.json()["current_value"] == 300000

    def test_get_property_not_found(self, client):
        response = client.get("/api/properties/nonexistent-id")
        assert response.status_code == 404

    def test_update_property(self, client, test_property):
        response = client.put(
            f"/api/properties/{test_property.id}",
            json={"status": "under_contract", "arv": 320000},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "under_contract"
        assert data["arv"] == 320000
        assert data["name"] == "Test Property"

    def test_delete_property(self, client, test_property):
        response = client.delete(f"/api/properties/{test_property.id}")
        assert response.status_code == 200
        assert client.get(f"/api/properties/{test_property.id}").status_code == 404

    def test_property_scenarios(self, client, test_property, test_scenario):
        response = client.get(f"/api/properties/{test_property.id}/scenarios")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["scenarios"][0]["name"] == "Base Rental"


class TestScenariosAPI:
    """Test scenario endpoints."""

    def test_create_scenario_computes_metrics(self, client, test_property):
        response = client.post("/api/scenarios/", json=scenario_payload(test_property.id))
        assert response.status_code == 201
        data = response.json()
        assert data["exit_strategy"] == "rent"
        assert data["roi"] is not None
        assert data["monthly_noi"] is not None
        assert data["analyzed_at"] is not None

    def test_create_flip(self, client, test_property):
        response = client.post(
            "/api/scenarios/",
            json={
                "property_id": test_property.id,
                "name": "API Flip",
                "purchase_price": 100000,
                "rehab_cost": 30000,
                "holding_costs": 5000,
                "closing_costs": 3000,
                "hold_time_months": 6,
                "exit_strategy": "flip",
                "sale_price": 180000,
                "selling_costs": 12000,
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["total_profit"] == 30000
        assert data["roi"] == 21.7
        assert data["cap_rate"] == 0
        assert data["irr"] == pytest.approx(48.2, abs=0.1)
        assert data["npv"] is not None

    def test_invalid_input_stores_nothing(self, client, test_property, db_session):
        response = client.post(
            "/api/scenarios/", json=scenario_payload(test_property.id, rehab_cost=-1)
        )
        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "invalid_input"
        assert data["fields"] == ["rehab_cost"]
        assert db_session.query(DealScenario).count() == 0

    def test_strategy_mismatch(self, client, test_property):
        response = client.post(
            "/api/scenarios/",
            json=scenario_payload(test_property.id, exit_strategy="airbnb"),
        )
        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "strategy_mismatch"
        assert "daily_rate" in data["fields"]

    def test_hold_too_long(self, client, test_property):
        response = client.post(
            "/api/scenarios/",
            json=scenario_payload(test_property.id, hold_time_months=1201),
        )
        assert response.status_code == 400
        assert response.json()["error"] == "unbounded_input"

    def test_unknown_property(self, client):
        response = client.post("/api/scenarios/", json=scenario_payload("missing"))
        assert response.status_code == 404

    def test_rehab_defaults_to_renovation_estimate(
        self, client, test_property, test_renovations
    ):
        payload = scenario_payload(test_property.id)
        del payload["rehab_cost"]

        response = client.post("/api/scenarios/", json=payload)

        assert response.status_code == 201
        assert response.json()["rehab_cost"] == 20000

    def test_list_scenarios(self, client, test_scenario, test_flip_scenario):
        response = client.get("/api/scenarios/")
        assert response.json()["total"] == 2

        response = client.get("/api/scenarios/", params={"exit_strategy": "flip"})
        data = response.json()
        assert data["total"] == 1
        assert data["scenarios"][0]["name"] == "Quick Flip"

    def test_get_scenario(self, client, test_scenario):
        response = client.get(f"/api/scenarios/{test_scenario.id}")
        assert response.status_code == 200
        assert response.json()["roi"] is None

    def test_update_reanalyzes(self, client, test_scenario):
        response = client.put(
            f"/api/scenarios/{test_scenario.id}", json={"monthly_rent": 2600}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["monthly_rent"] == 2600
        assert data["monthly_noi"] is not None

    def test_switch_to_flip_clears_rent_fields(self, client, test_scenario):
        response = client.put(
            f"/api/scenarios/{test_scenario.id}",
            json={"exit_strategy": "flip", "sale_price": 330000, "selling_costs": 20000},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["exit_strategy"] == "flip"
        assert data["monthly_rent"] is None
        assert data["occupancy_rate"] is None
        assert data["monthly_noi"] == 0

    def test_invalid_update_leaves_row(self, client, test_scenario):
        response = client.put(
            f"/api/scenarios/{test_scenario.id}", json={"interest_rate": 101}
        )
        assert response.status_code == 400
        assert response.json()["fields"] == ["interest_rate"]

        stored = client.get(f"/api/scenarios/{test_scenario.id}").json()
        assert stored["interest_rate"] == 6

    def test_delete_scenario(self, client, test_scenario):
        response = client.delete(f"/api/scenarios/{test_scenario.id}")
        assert response.status_code == 200
        assert client.get(f"/api/scenarios/{test_scenario.id}").status_code == 404

    def test_analyze_persists_metrics(self, client, test_scenario):
        response = client.post(f"/api/scenarios/{test_scenario.id}/analyze")
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["analysis"]["total_cash_invested"] == 280000
        assert data["analysis"]["schedule"] is None
        assert data["scenario"]["roi"] == data["analysis"]["roi"]

    def test_analyze_persists_irr_and_npv(self, client, test_flip_scenario):
        response = client.post(f"/api/scenarios/{test_flip_scenario.id}/analyze")
        analysis = response.json()["analysis"]
        assert analysis["irr"] == pytest.approx(48.2, abs=0.1)
        assert analysis["npv"] == pytest.approx(
            -138000 + 168000 / (1 + 0.10 / 12) ** 6, abs=0.01
        )
        assert analysis["equity_multiple"] == 1.22

        stored = client.get(f"/api/scenarios/{test_flip_scenario.id}").json()
        assert stored["irr"] == analysis["irr"]
        assert stored["npv"] == analysis["npv"]

    def test_analyze_with_schedule(self, client, test_scenario):
        response = client.post(
            f"/api/scenarios/{test_scenario.id}/analyze",
            params={"include_schedule": True},
        )
        schedule = response.json()["analysis"]["schedule"]
        assert len(schedule) == 360
        assert schedule[-1]["remaining_balance"] == 0

    def test_analyze_not_found(self, client):
        assert client.post("/api/scenarios/missing/analyze").status_code == 404

    def test_schedule(self, client, test_scenario):
        response = client.get(f"/api/scenarios/{test_scenario.id}/schedule")
        assert response.status_code == 200
        data = response.json()
        assert data["summary"]["principal"] == 187500
        assert data["summary"]["months"] == 360

    def test_flip_has_no_schedule(self, client, test_flip_scenario):
        response = client.get(f"/api/scenarios/{test_flip_scenario.id}/schedule")
        assert response.status_code == 400


class TestRenovationsAPI:
    """Test renovation tracking endpoints."""

    def test_list_renovations(self, client, test_property, test_renovations):
        response = client.get(f"/api/properties/{test_property.id}/renovations")
        assert response.status_code == 200
        assert response.json()["total"] == 2

    def test_create_renovation(self, client, test_property):
        response = client.post(
            f"/api/properties/{test_property.id}/renovations",
            json={"category": "roof", "description": "Full tear-off", "estimated_cost": 9000},
        )
        assert response.status_code == 201
        assert response.json()["status"] == "pending"

    def test_rejects_bad_estimate(self, client, test_property):
        response = client.post(
            f"/api/properties/{test_property.id}/renovations",
            json={"category": "roof", "description": "Free roof", "estimated_cost": 0},
        )
        assert response.status_code == 400
        assert response.json()["fields"] == ["estimated_cost"]

    def test_update_and_delete(self, client, test_property, test_renovations):
        item_id = test_renovations[1].id
        url = f"/api/properties/{test_property.id}/renovations/{item_id}"

        response = client.put(url, json={"status": "in_progress", "actual_cost": 2000})
        assert response.status_code == 200
        assert response.json()["status"] == "in_progress"

        assert client.delete(url).status_code == 200
        assert client.put(url, json={"notes": "gone"}).status_code == 404

    def test_summary(self, client, test_property, test_renovations):
        response = client.get(f"/api/properties/{test_property.id}/renovations/summary")
        assert response.status_code == 200
        data = response.json()
        assert data["property_id"] == test_property.id
        assert data["estimated_total"] == 20000
        assert data["actual_total"] == 16500
        assert data["variance"] == 1500
        assert data["percent_complete"] == 50.0


class TestAnalysisAPI:
    """Test stateless and comparison analysis endpoints."""

    def test_inline_analyze(self, client):
        response = client.post(
            "/api/analysis/analyze",
            json={
                "scenario": {
                    "purchase_price": 100000,
                    "rehab_cost": 30000,
                    "holding_costs": 5000,
                    "closing_costs": 3000,
                    "hold_time_months": 6,
                    "exit_strategy": "flip",
                    "sale_price": 180000,
                    "selling_costs": 12000,
                }
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total_profit"] == 30000
        assert data["irr"] == pytest.approx(48.2, abs=0.1)

    def test_inline_analyze_error(self, client):
        response = client.post(
            "/api/analysis/analyze",
            json={
                "scenario": {
                    "purchase_price": 100000,
                    "hold_time_months": 6,
                    "exit_strategy": "flip",
                    "sale_price": 180000,
                }
            },
        )
        assert response.status_code == 400
        assert response.json()["fields"] == ["selling_costs"]

    def test_compare(self, client, test_property, test_scenario, test_flip_scenario):
        response = client.post(
            "/api/analysis/compare", json={"property_id": test_property.id}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["metric"] == "roi"
        assert [c["rank"] for c in data["comparisons"]] == [1, 2]
        assert data["best"]["cap_rate"] == test_scenario.id

    def test_compare_by_profit(self, client, test_property, test_scenario, test_flip_scenario):
        response = client.post(
            "/api/analysis/compare",
            json={"property_id": test_property.id, "metric": "total_profit"},
        )
        profits = [c["analysis"]["total_profit"] for c in response.json()["comparisons"]]
        assert profits == sorted(profits, reverse=True)

    def test_compare_subset(self, client, test_property, test_scenario, test_flip_scenario):
        response = client.post(
            "/api/analysis/compare",
            json={"property_id": test_property.id, "scenario_ids": [test_flip_scenario.id]},
        )
        assert len(response.json()["comparisons"]) == 1

    def test_compare_unknown_property(self, client):
        response = client.post("/api/analysis/compare", json={"property_id": "missing"})
        assert response.status_code == 404

    def test_compare_missing_scenario(self, client, test_property, test_scenario):
        response = client.post(
            "/api/analysis/compare",
            json={"property_id": test_property.id, "scenario_ids": ["missing"]},
        )
        assert response.status_code == 404

    def test_compare_bad_metric(self, client, test_property, test_scenario):
        response = client.post(
            "/api/analysis/compare",
            json={"property_id": test_property.id, "metric": "vibes"},
        )
        assert response.status_code == 400
        assert response.json()["fields"] == ["metric"]

    def test_mortgage_schedule(self, client):
        response = client.post(
            "/api/analysis/mortgage-schedule",
            json={"principal": 187500, "annual_rate": 6, "months": 360},
        )
        assert response.status_code == 200
        data = response.json()
        assert len(data["schedule"]) == 360
        assert data["schedule"][-1]["remaining_balance"] == 0
        assert 1100 < data["summary"]["monthly_payment"] < 1150

    def test_mortgage_schedule_rejects_zero_months(self, client):
        response = client.post(
            "/api/analysis/mortgage-schedule",
            json={"principal": 187500, "annual_rate": 6, "months": 0},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_input"

    def test_sensitivity(self, client, test_flip_scenario):
        response = client.post(
            "/api/analysis/sensitivity", json={"scenario_id": test_flip_scenario.id}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["variation_percent"] == 10.0
        assert data["base"] == 30000
        assert [v["variable"] for v in data["variables"]] == [
            "sale_price",
            "purchase_price",
            "rehab_cost",
        ]

    def test_sensitivity_not_found(self, client):
        response = client.post("/api/analysis/sensitivity", json={"scenario_id": "missing"})
        assert response.status_code == 404
