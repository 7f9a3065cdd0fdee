import os
from dataclasses import dataclass, field
from functools import lru_cache

from .rules import DEFAULT_DELIMITER


@dataclass(frozen=True)
class Settings:
    """Service configuration.

    Values can be overridden via environment variables:
    - CSV_EDITOR_DELIMITER
    - CSV_EDITOR_MAX_UPLOAD_BYTES
    - CSV_EDITOR_LOG_LEVEL
    - CSV_EDITOR_NOTIFICATION_BUFFER
    """

    delimiter: str = field(
        default_factory=lambda: os.getenv("CSV_EDITOR_DELIMITER", DEFAULT_DELIMITER)
    )
    max_upload_bytes: int = field(
        default_factory=lambda: int(os.getenv("CSV_EDITOR_MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
    )
    log_level: str = field(
        default_factory=lambda: os.getenv("CSV_EDITOR_LOG_LEVEL", "INFO").upper()
    )
    notification_buffer: int = field(
        default_factory=lambda: int(os.getenv("CSV_EDITOR_NOTIFICATION_BUFFER", "50"))
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
