"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# Values are read from two sources (in priority order):
#
#   1. **Environment variables** -- e.g. PROXY_AUDIO=true
#   2. **.env file** -- key=value lines in the project root .env file
#
# Field ``cache_max_age`` maps to env var ``CACHE_MAX_AGE`` and so on.
# Defaults below are used when neither source sets a field.
#
# The provider table itself is not a setting: it lives in
# config/providers.yaml (see yomi_audio/config/loader.py).
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Yomi audio server settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Edge cache ===
    cache_enabled: bool = True
    cache_max_age: int = 86400  # seconds; also sent as Cache-Control max-age
    cache_max_entries: int = 4096

    # === Resolution policy ===
    # When True, result URLs point back at this service's /{source}/{file}
    # passthrough instead of the provider origin.
    proxy_audio: bool = False
    remove_forvo_dupes: bool = True
    dedup_family_prefix: str = "forvo"

    # === Entry store ===
    entries_db_path: str = "data/entries.db"
    providers_config_path: str = "config/providers.yaml"

    # === Request limits ===
    max_term_length: int = 100
    max_results: int = 100
    max_regex_length: int = 200

    # === Provider origins ===
    upstream_timeout: float = 30.0

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"
