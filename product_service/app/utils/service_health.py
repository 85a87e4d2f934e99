"""
Product Service Health Check Utilities
======================================

Health checks run against the resources the application holds on
``app.state``. Each check is an async callable returning a dict with a
``status`` key.
"""

import time
from typing import Any, Awaitable, Callable, Dict

from ..core.database import ProductServiceDatabaseManager

HealthCheck = Callable[[], Awaitable[Dict[str, Any]]]


class ProductServiceHealthChecker:
    """Product Service specific health checker"""

    def __init__(self, service_name: str = "product-service", version: str = "1.0.0") -> None:
        self.service_name = service_name
        self.version = version
        self.checks: Dict[str, HealthCheck] = {}
        self.start_time = time.time()

    def add_check(self, name: str, check_func: HealthCheck) -> None:
        """Add a health check function"""
        self.checks[name] = check_func

    async def run_checks(self) -> Dict[str, Any]:
        """Run all health checks and aggregate the result"""
        results = {}
        check_start_time = time.time()

        for name, check_func in self.checks.items():
            individual_start = time.time()
            try:
                result = await check_func()
            except Exception as e:
                result = {"status": "unhealthy", "error": str(e)}
            result["duration_ms"] = round((time.time() - individual_start) * 1000, 2)
            results[name] = result

        total_time = (time.time() - check_start_time) * 1000

        return {
            "service": self.service_name,
            "version": self.version,
            "status": "healthy"
            if all(r.get("status") == "healthy" for r in results.values())
            else "unhealthy",
            "checks": results,
            "total_duration_ms": round(total_time, 2),
            "uptime_seconds": round(time.time() - self.start_time, 2),
            "timestamp": time.time(),
        }

    def add_database_check(self, database_manager: ProductServiceDatabaseManager) -> None:
        async def database_check() -> Dict[str, Any]:
            await database_manager.ping()
            return {
                "status": "healthy",
                "message": "Product database reachable",
                "component": "database",
            }

        self.add_check("database", database_check)


def create_product_service_health_checker(
    database_manager: ProductServiceDatabaseManager,
    service_name: str = "product-service",
    version: str = "1.0.0",
) -> ProductServiceHealthChecker:
    """Build the health checker used by the /health endpoint"""
    health_checker = ProductServiceHealthChecker(service_name, version)
    health_checker.add_database_check(database_manager)
    return health_checker
