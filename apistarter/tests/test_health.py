from __future__ import annotations

from flask import Flask
from flask.testing import FlaskClient

from apistarter.infrastructure.db import create_db_engine
from apistarter.interfaces.http.controllers.health_controller import HealthController
from apistarter.shared.config import AppConfig, DatabaseConfig


def test_health_reports_database(client: FlaskClient, config: AppConfig) -> None:
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["status"] == "healthy"
    assert payload["environment"] == "test"
    assert payload["version"] == config.app_version
    assert payload["checks"]["database"]["status"] == "healthy"


def test_ready_and_live(client: FlaskClient) -> None:
    assert client.get("/api/v1/health/ready").get_json()["status"] == "ready"
    assert client.get("/api/v1/health/live").get_json()["status"] == "alive"


def test_unreachable_database_is_unhealthy(config: AppConfig) -> None:
    engine = create_db_engine(
        DatabaseConfig(DATABASE_URL="sqlite:////nonexistent-dir/for-health/app.db")
    )
    app = Flask(__name__)
    app.register_blueprint(HealthController(engine=engine, config=config).as_blueprint())
    client = app.test_client()

    health = client.get("/api/v1/health")
    ready = client.get("/api/v1/health/ready")

    assert health.status_code == 503
    assert health.get_json()["checks"]["database"]["status"] == "unhealthy"
    assert ready.status_code == 503
    assert client.get("/api/v1/health/live").status_code == 200
