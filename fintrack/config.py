import os
from functools import lru_cache


class Settings:
    def __init__(
        self,
        api_base_url: str,
        page_size: int,
        timeout_secs: float,
        log_level: str,
        default_range_days: int,
        currency: str,
    ) -> None:
        self.api_base_url = api_base_url
        self.page_size = page_size
        self.timeout_secs = timeout_secs
        self.log_level = log_level
        self.default_range_days = default_range_days
        self.currency = currency


def _positive_int(name: str, default: str) -> int:
    value = int(os.getenv(name, default))
    if value < 1:
        raise ValueError(f"{name} must be at least 1, got {value}")
    return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        api_base_url=os.getenv("FINTRACK_API_BASE_URL", "http://localhost:8000/api/v1"),
        page_size=_positive_int("FINTRACK_PAGE_SIZE", "10"),
        timeout_secs=float(os.getenv("FINTRACK_TIMEOUT_SECS", "10")),
        log_level=os.getenv("FINTRACK_LOG_LEVEL", "INFO"),
        default_range_days=_positive_int("FINTRACK_DEFAULT_RANGE_DAYS", "30"),
        currency=os.getenv("FINTRACK_CURRENCY", "PLN"),
    )
