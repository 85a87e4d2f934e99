"""
Order Service Health Check Utilities
====================================

Aggregates async checks for the database and the event publisher.
"""

import time
from typing import Any, Awaitable, Callable, Dict

from ..core.database import OrderServiceDatabaseManager
from ..events.base import EventPublisher


class OrderServiceHealthChecker:
    """Order Service specific health checker"""

    def __init__(self, service_name: str = "order-service", version: str = "1.0.0") -> None:
        self.service_name = service_name
        self.version = version
        self.checks: Dict[str, Callable[[], Awaitable[Dict[str, Any]]]] = {}
        self.start_time = time.time()

    def add_check(
        self, name: str, check_func: Callable[[], Awaitable[Dict[str, Any]]]
    ) -> None:
        """Add a health check function"""
        self.checks[name] = check_func

    async def run_checks(self) -> Dict[str, Any]:
        """Run all health checks with Order Service specific context"""
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

        overall = all(r.get("status") == "healthy" for r in results.values())
        return {
            "service": self.service_name,
            "version": self.version,
            "status": "healthy" if overall else "unhealthy",
            "checks": results,
            "total_duration_ms": round((time.time() - check_start_time) * 1000, 2),
            "uptime_seconds": round(time.time() - self.start_time, 2),
            "timestamp": time.time(),
        }

    def add_order_specific_checks(
        self,
        database_manager: OrderServiceDatabaseManager,
        event_publisher: EventPublisher,
    ) -> None:
        """Add database and event publisher checks"""

        async def database_check() -> Dict[str, Any]:
            await database_manager.ping()
            return {"status": "healthy", "component": "database"}

        async def events_check() -> Dict[str, Any]:
            healthy = await event_publisher.health_check()
            return {
                "status": "healthy" if healthy else "unhealthy",
                "component": "events",
                "backend": type(event_publisher).__name__,
            }

        self.add_check("database", database_check)
        self.add_check("events", events_check)
