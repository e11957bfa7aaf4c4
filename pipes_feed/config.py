from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)


class CustomSettings(BaseSettings):
    """Application settings loaded from environment variables.

    Validates configuration at startup to catch misconfiguration early.
    """

    catalog_source: str = "./data/catalog.json"
    base_url: str = "http://localhost:3000/"
    default_per_page: int = 20
    max_per_page: int = 100  # Hard ceiling regardless of perPage
    default_max_page: int = 100
    epg_max_results: int = 100
    search_score_cutoff: float = 60.0
    cache_max_age_sec: int = 300
    catalog_download_timeout_sec: float = 30.0
    catalog_download_max_retries: int = 3
    default_time_zone: str = "UTC"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("catalog_source")
    @classmethod
    def validate_catalog_source(cls, value: str) -> str:
        """Validate catalog source is an HTTP/HTTPS URL or a local path."""
        value = value.strip()
        if not value:
            raise ValueError("catalog_source must not be empty")
        if "://" in value and not value.lower().startswith(("http://", "https://")):
            raise ValueError(f"Catalog source URL must be HTTP/HTTPS: {value}")
        return value

    @field_validator("base_url")
    @classmethod
    def normalize_base_url(cls, value: str) -> str:
        """Ensure base URL ends with a slash so paths can be appended."""
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError(f"base_url must be HTTP/HTTPS: {value}")
        return value if value.endswith("/") else f"{value}/"

    @field_validator(
        "default_per_page",
        "max_per_page",
        "default_max_page",
        "epg_max_results",
        "catalog_download_max_retries",
    )
    @classmethod
    def validate_positive_ints(cls, value: int, info) -> int:
        """Ensure integer settings are positive."""
        if value <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return value

    @field_validator("cache_max_age_sec")
    @classmethod
    def validate_cache_max_age(cls, value: int) -> int:
        """Validate Cache-Control max-age (seconds)."""
        if value < 0:
            raise ValueError("cache_max_age_sec must be >= 0")
        return value

    @field_validator("catalog_download_timeout_sec")
    @classmethod
    def validate_download_timeout(cls, value: float) -> float:
        """Validate catalog download timeout (seconds)."""
        if value <= 0:
            raise ValueError("catalog_download_timeout_sec must be > 0")
        return value

    @field_validator("search_score_cutoff")
    @classmethod
    def validate_score_cutoff(cls, value: float) -> float:
        """Fuzzy scores are percentages."""
        if not 0 <= value <= 100:
            raise ValueError("search_score_cutoff must be between 0 and 100")
        return value

    @field_validator("default_time_zone")
    @classmethod
    def validate_time_zone(cls, value: str) -> str:
        """Validate timezone string"""
        if value == "UTC":
            return value
        try:
            ZoneInfo(value)
            return value
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Invalid timezone: {value}. Must be a valid IANA timezone or 'UTC'")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate logging level name."""
        normalized = value.upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if normalized not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return normalized

    @model_validator(mode="after")
    def validate_paging_configuration(self):
        """Validate cross-field configuration."""
        if self.default_per_page > self.max_per_page:
            raise ValueError("default_per_page must be <= max_per_page")

        if "://" not in self.catalog_source and not Path(self.catalog_source).exists():
            logger.warning(
                "Catalog snapshot %s does not exist - startup will fail until it is provided",
                self.catalog_source,
            )

        return self

    def __init__(self, **data):
        """Initialize settings and log configuration."""
        super().__init__(**data)

        logger.info("Configuration loaded:")
        logger.info("  Catalog Source: %s", self.catalog_source)
        logger.info("  Base URL: %s", self.base_url)
        logger.info(
            "  Paging: perPage=%s (max %s), maxPage=%s",
            self.default_per_page,
            self.max_per_page,
            self.default_max_page,
        )
        logger.info("  EPG Max Results: %s", self.epg_max_results)
        logger.info("  Search Score Cutoff: %.1f", self.search_score_cutoff)
        logger.info("  Cache Max Age: %ss", self.cache_max_age_sec)
        logger.info(
            "  Catalog Download: timeout=%.1fs retries=%s",
            self.catalog_download_timeout_sec,
            self.catalog_download_max_retries,
        )
        logger.info("  Default Time Zone: %s", self.default_time_zone)


settings = CustomSettings()


def setup_logging() -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
