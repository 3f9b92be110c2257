# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from datetime import UTC, datetime

from flask import Blueprint, jsonify
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from apistarter.infrastructure.health import check_database
from apistarter.shared.config import AppConfig
from apistarter.shared.logging import logger


class HealthController:
    def __init__(self, *, engine: Engine, config: AppConfig) -> None:
        self._engine = engine
        self._config = config
        self._started = time.monotonic()

    def as_blueprint(self, base_path: str = "/api/v1") -> Blueprint:
        bp = Blueprint("health", __name__, url_prefix=f"{base_path}/health")
        bp.add_url_rule("", "health", self.health, methods=["GET"])
        bp.add_url_rule("/ready", "ready", self.ready, methods=["GET"])
        bp.add_url_rule("/live", "live", self.live, methods=["GET"])
        return bp

    def _database_check(self) -> dict[str, object]:
        started = time.perf_counter()
        try:
            check_database(self._engine)
        except SQLAlchemyError as exc:
            logger.error(f"health: database check failed: {type(exc).__name__}")
            return {"status": "unhealthy", "message": "Database unreachable"}
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 1)
        return {"status": "healthy", "message": "Database reachable", "responseTime": elapsed_ms}

    def health(self):
        database = self._database_check()
        healthy = database["status"] == "healthy"
        status: dict[str, object] = {
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "uptime": round(time.monotonic() - self._started, 3),
            "environment": self._config.app_env,
            "version": self._config.app_version,
            "checks": {"database": database},
        }
        return jsonify(status), 200 if healthy else 503

    def ready(self):
        database = self._database_check()
        if database["status"] != "healthy":
            return jsonify({"status": "not ready", "checks": {"database": database}}), 503
        return jsonify({"status": "ready", "checks": {"database": database}}), 200

    def live(self):
        return jsonify({"status": "alive", "timestamp": datetime.now(UTC).isoformat()}), 200
