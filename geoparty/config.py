from pydantic_settings import BaseSettings, SettingsConfigDict

from geoparty.services.scoring import ScoringPolicyName


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="GEOPARTY_", extra="ignore")

    database_url: str = "sqlite+aiosqlite:///./geoparty.db"

    secret_key: str = "change-me-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]
    log_level: str = "INFO"

    # Round engine
    scoring_policy: ScoringPolicyName = ScoringPolicyName.exponential
    location_jitter_degrees: float = 0.075

    # Ground-level imagery
    imagery_base_url: str = "https://maps.googleapis.com/maps/api/streetview"
    imagery_api_key: str = ""
    imagery_size: str = "640x480"
    imagery_placeholder_url: str = "/static/placeholder-panorama.jpg"


settings = Settings()
