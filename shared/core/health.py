"""
Health and metrics endpoints: a liveness summary, Kubernetes-style live/ready
probes and a process metrics snapshot.
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.engine import Engine
from typing import Dict, Any
from datetime import datetime, timezone
from enum import Enum
import time
import psutil
import logging

logger = logging.getLogger(__name__)

class HealthStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    WARN = "warn"

def _now() -> str:
    return datetime.now(timezone.utc).isoformat()

class ServiceHealth:
    """Builds the health router for one service bound to one database engine."""

    def __init__(self, service_name: str, engine: Engine, version: str = "1.0.0", environment: str = "development"):
        self.service_name = service_name
        self.engine = engine
        self.version = version
        self.environment = environment
        self.start_time = time.time()
        self.checks_performed = 0

    def create_health_router(self, prefix: str = "") -> APIRouter:
        router = APIRouter(prefix=prefix, tags=["health"])

        @router.get("/health")
        def health_check() -> Dict[str, Any]:
            """Service summary including database reachability."""
            database = self._check_database()
            return {
                "status": "healthy" if database["status"] == HealthStatus.PASS else "degraded",
                "service": self.service_name,
                "timestamp": _now(),
                "version": self.version,
                "environment": self.environment,
                "database": "connected" if database["status"] == HealthStatus.PASS else "disconnected",
            }

        @router.get("/health/live", status_code=status.HTTP_200_OK)
        def liveness() -> Dict[str, Any]:
            return {"status": "alive"}

        @router.get("/health/ready")
        def readiness() -> JSONResponse:
            """Readiness probe; 503 when any dependency check fails."""
            self.checks_performed += 1
            checks = {
                "database:connectivity": self._check_database(),
                "storage:disk_space": self._check_disk_space(),
                "system:memory": self._check_memory(),
            }
            overall = self._calculate_overall_status(checks)
            status_code = status.HTTP_503_SERVICE_UNAVAILABLE if overall == HealthStatus.FAIL else status.HTTP_200_OK
            return JSONResponse(
                status_code=status_code,
                content={
                    "status": overall.value,
                    "serviceId": self.service_name,
                    "version": self.version,
                    "checks": checks,
                    "timestamp": _now(),
                },
            )

        @router.get("/metrics")
        def metrics() -> Dict[str, Any]:
            process = psutil.Process()
            memory = process.memory_info()
            return {
                "service": self.service_name,
                "version": self.version,
                "uptime_seconds": time.time() - self.start_time,
                "checks_performed": self.checks_performed,
                "timestamp": _now(),
                "system": {
                    "memory_rss_bytes": memory.rss,
                    "memory_vms_bytes": memory.vms,
                    "cpu_percent": process.cpu_percent(),
                    "num_threads": process.num_threads(),
                },
            }

        return router

    def _check_database(self) -> Dict[str, Any]:
        try:
            start_time = time.perf_counter()
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            response_time = (time.perf_counter() - start_time) * 1000
            return {
                "status": HealthStatus.PASS.value,
                "componentType": "datastore",
                "observedValue": round(response_time, 2),
                "observedUnit": "ms",
                "time": _now(),
            }
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return {
                "status": HealthStatus.FAIL.value,
                "componentType": "datastore",
                "output": str(e),
                "time": _now(),
            }

    def _check_disk_space(self) -> Dict[str, Any]:
        free_gb = psutil.disk_usage('/').free / (1024 ** 3)
        if free_gb < 1:
            status_val = HealthStatus.FAIL
        elif free_gb < 5:
            status_val = HealthStatus.WARN
        else:
            status_val = HealthStatus.PASS
        return {
            "status": status_val.value,
            "componentType": "system",
            "observedValue": round(free_gb, 2),
            "observedUnit": "GB",
            "time": _now(),
        }

    def _check_memory(self) -> Dict[str, Any]:
        available_mb = psutil.virtual_memory().available / (1024 ** 2)
        if available_mb < 100:
            status_val = HealthStatus.FAIL
        elif available_mb < 500:
            status_val = HealthStatus.WARN
        else:
            status_val = HealthStatus.PASS
        return {
            "status": status_val.value,
            "componentType": "system",
            "observedValue": round(available_mb, 2),
            "observedUnit": "MB",
            "time": _now(),
        }

    def _calculate_overall_status(self, checks: Dict[str, Dict[str, Any]]) -> HealthStatus:
        statuses = {check.get("status") for check in checks.values()}
        if HealthStatus.FAIL.value in statuses:
            return HealthStatus.FAIL
        if HealthStatus.WARN.value in statuses:
            return HealthStatus.WARN
        return HealthStatus.PASS
