"""
Order Service configuration
"""

from pathlib import Path
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the order service directory path
ORDER_SERVICE_DIR = Path(__file__).parent.parent.parent
ENV_FILE = ORDER_SERVICE_DIR / ".env"


class OrderSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Order Service"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Service specific
    SERVICE_NAME: str = "order-service"

    # Database
    ORDER_DATABASE_URL: str = "sqlite+aiosqlite:///./order_service.db"
    DATABASE_POOL_SIZE: int = 20
    DATABASE_MAX_OVERFLOW: int = 40

    # Product Service
    PRODUCT_SERVICE_URL: str = "http://localhost:8001"
    PRODUCT_SERVICE_TIMEOUT: float = 10.0

    # Events
    EVENT_BACKEND: Literal["kafka", "memory"] = "kafka"
    KAFKA_BOOTSTRAP_SERVERS: str = "localhost:9092"
    KAFKA_TOPIC_ORDER_EVENTS: str = "order.events"
    KAFKA_ROUTING_KEY: str = "order.event"
    KAFKA_MAX_RETRIES: int = 10
    KAFKA_RETRY_DELAY: float = 2.0
    EVENT_GRACEFUL_DEGRADATION: bool = False

    # CORS
    CORS_ORIGINS: List[str] = ["*"]
    CORS_CREDENTIALS: bool = False
    CORS_METHODS: List[str] = ["*"]
    CORS_HEADERS: List[str] = ["*"]


_settings_instance: Optional[OrderSettings] = None


def get_settings() -> OrderSettings:
    """Get settings singleton instance"""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = OrderSettings()
    return _settings_instance
