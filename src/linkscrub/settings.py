"""Global settings loaded from environment variables via pydantic-settings."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LINKSCRUB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    rules_path: str = "rules.json"
    log_dir: str = "./data/logs"
    strip_referral_marketing: bool = False
    # Prefilter providers by domain key; results are identical either way
    use_domain_keys: bool = True
