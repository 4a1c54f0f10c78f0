from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Seat Reservation Engine'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production
    LOG_FILE_ENABLED: bool = False  # Rotating file sink, only honoured when DEBUG

    # Departure times and "today" for promo validity are read in this zone
    TIMEZONE: str = 'UTC'

    # Money is rounded half-up to this many decimal places (2 -> cents)
    CURRENCY_DECIMAL_PLACES: int = 2

    # Lock wait deadlines (seconds)
    SEAT_CLAIM_TIMEOUT_SECONDS: float = 5.0
    BOOKING_LOCK_TIMEOUT_SECONDS: float = 5.0

    # Per-subscriber buffer of the in-memory notification broadcaster
    EVENT_STREAM_BUFFER_SIZE: int = 10

    @field_validator('CURRENCY_DECIMAL_PLACES')
    @classmethod
    def check_decimal_places(cls, v: int) -> int:
        if v < 0:
            raise ValueError('CURRENCY_DECIMAL_PLACES must be >= 0')
        return v

    @field_validator('SEAT_CLAIM_TIMEOUT_SECONDS', 'BOOKING_LOCK_TIMEOUT_SECONDS')
    @classmethod
    def check_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError('lock timeouts must be positive')
        return v


settings = Settings()  # type: ignore
