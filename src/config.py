"""Application configuration via pydantic-settings.

All values can be overridden from environment variables (.env file).
Settings are organized into logical groups and composed into a single Settings object.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BrandingSettings(BaseSettings):
    """Company identity printed on every quote document."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    company_name: str = Field(default="Serengeti Nexus")
    site_url: str = Field(default="www.serengetinexus.com")
    info_email: str = Field(default="info@serengetinexus.com")
    phone: str = Field(default="+255759964985")
    address: str = Field(default="Moshono - Arusha Tanzania")
    quote_prefix: str = Field(default="SN-", description="Prefix for derived quote reference numbers")
    closing_heading: str = Field(default="Karibu Sana!")


class FirebaseSettings(BaseSettings):
    """Firestore document store connection."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    firebase_credentials_path: str = Field(
        default="",
        description="Path to the service account JSON. Empty disables the store.",
    )
    firebase_project_id: str = Field(default="", description="Optional explicit project id")
    quotes_collection: str = Field(default="quotes")
    tours_collection: str = Field(default="tours")

    @property
    def enabled(self) -> bool:
        """Check whether credentials are configured."""
        return bool(self.firebase_credentials_path)


class RenderSettings(BaseSettings):
    """PDF rendering and image fetching."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    currency_symbol: str = Field(default="$")
    image_timeout: float = Field(default=10.0, description="Per-image download timeout in seconds")
    max_image_bytes: int = Field(default=8_000_000, description="Images larger than this are skipped")
    rates_per_page: int = Field(default=5, description="Default page size for the rate calendar")
    base_category: str = Field(default="2 Persons", description="Canonical base-rate category label")


class Settings(BaseSettings):
    """Root settings composing all sub-settings.

    Usage:
        settings = Settings()
        settings.branding.company_name
        settings.firebase.quotes_collection
        settings.render.currency_symbol
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    environment: str = Field(default="development")
    log_level: str = Field(default="DEBUG")

    # Composed settings (loaded from same .env)
    branding: BrandingSettings = Field(default_factory=BrandingSettings)
    firebase: FirebaseSettings = Field(default_factory=FirebaseSettings)
    render: RenderSettings = Field(default_factory=RenderSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            msg = f"Invalid log level: {v}. Must be one of {valid}"
            raise ValueError(msg)
        return upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


# Module-level singleton: import this wherever settings are needed.
settings = Settings()
