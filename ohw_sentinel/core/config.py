from typing import Any, Dict, List, Optional, Union
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from enum import Enum


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


# A reminder rule as it appears in configuration: a bare offset or an object
# such as {"days": 39, "message": "...", "group": 1, "type": "anc_visit"}
RawReminderRule = Union[int, float, str, Dict[str, Any]]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="OHW_",
        env_file=".env",
        extra="ignore",
    )

    # Environment Configuration
    ENVIRONMENT: Environment = Environment.DEVELOPMENT

    # Project Information
    PROJECT_NAME: str = "OHW Sentinel"
    API_V1_STR: str = "/api/v1"

    # Database
    SQLALCHEMY_DATABASE_URI: str = "sqlite:///./ohw_sentinel.db"

    # Timezone used for "now" and for the pregnancy timeline
    DEFAULT_TIMEZONE: str = "UTC"
    # 0=Monday ... 6=Sunday
    WEEK_START: int = 0

    # Registration rules
    SERIAL_NUMBER_WINDOW_MONTHS: int = 12
    ID_MAX_ATTEMPTS: int = 100

    # Reminder schedules
    REMINDER_SCHEDULE_WEEKS: List[RawReminderRule] = []
    REMINDER_SCHEDULE_DAYS: List[RawReminderRule] = []
    MISO_REMINDER_DAYS: List[RawReminderRule] = []
    UPCOMING_DELIVERY_DAYS: List[RawReminderRule] = []
    OUTCOME_REQUEST_WEEKS: List[RawReminderRule] = []
    OUTCOME_REQUEST_DAYS: List[RawReminderRule] = []

    # i18n: source text -> translated text for the active locale
    LOCALE: str = "en"
    TRANSLATIONS: Dict[str, str] = {}

    # API security
    REQUIRE_API_KEY: bool = False
    VALID_API_KEYS: List[str] = []

    # Celery
    CELERY_BROKER_URL: str = "memory://"
    CELERY_RESULT_BACKEND: Optional[str] = None
    CELERY_TASK_QUEUE: str = "ohw_registrations"
    CELERY_TASK_ALWAYS_EAGER: bool = False
    WORKER_CONCURRENCY: int = 4

    # Metrics
    METRICS_ENABLED: bool = False

    @field_validator("WEEK_START")
    @classmethod
    def _valid_week_start(cls, v: int) -> int:
        if not 0 <= v <= 6:
            raise ValueError("WEEK_START must be between 0 (Monday) and 6 (Sunday)")
        return v

    @field_validator("SERIAL_NUMBER_WINDOW_MONTHS", "ID_MAX_ATTEMPTS")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be a positive integer")
        return v


settings = Settings()
