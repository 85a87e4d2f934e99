"""
Notification Service configuration
"""

from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

NOTIFICATION_SERVICE_DIR = Path(__file__).parent.parent.parent
ENV_FILE = NOTIFICATION_SERVICE_DIR / ".env"


class NotificationServiceSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields from .env file
    )

    # Application
    APP_NAME: str = "Notification Service"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Service specific
    SERVICE_NAME: str = "notification-service"

    # Kafka for events
    EVENTS_ENABLED: bool = True
    KAFKA_BOOTSTRAP_SERVERS: str = "localhost:9092"
    KAFKA_GROUP_ID: str = "notification-service"
    KAFKA_TOPIC_ORDER_EVENTS: str = "order.events"
    KAFKA_MAX_RETRIES: int = 5
    KAFKA_RETRY_DELAY: float = 2.0
    EVENT_GRACEFUL_DEGRADATION: bool = True

    # CORS
    CORS_ORIGINS: List[str] = ["*"]
    CORS_CREDENTIALS: bool = False
    CORS_METHODS: List[str] = ["*"]
    CORS_HEADERS: List[str] = ["*"]

    # Logging
    LOG_LEVEL: str = "INFO"


# Create a singleton instance
_settings_instance: Optional[NotificationServiceSettings] = None


def get_settings() -> NotificationServiceSettings:
    """Get settings singleton instance"""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = NotificationServiceSettings()
    return _settings_instance
