from pathlib import Path

from pydantic import BaseModel, Field, field_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class HotelConfig(BaseModel):
    """Настройки приложения. Задаются в коде, переменные окружения не читаются."""

    state_file: Path = Path("hotel_data.json")
    payment_delay_seconds: float = Field(1.0, ge=0)
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level
