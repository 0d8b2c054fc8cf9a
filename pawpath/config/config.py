from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Google Maps API configuration
    google_maps_api_key: str = ""
    places_max_radius_m: float = 50000.0
    places_max_results: int = 20

    # API configuration
    api_version: str = "1.0"
    log_level: str = "INFO"

    # Feature flag for AI route generation
    ai_recommendations_enabled: bool = False

    # OpenAI configuration
    openai_model: str = "gpt-4o-mini"
    openai_api_key: str = ""
    openai_base_url: Optional[str] = None
    llm_temperature: float = 0.7
    llm_max_tokens: int = 800

    # Outbound HTTP behaviour shared by every upstream client
    http_timeout_seconds: float = 30.0
    http_max_retries: int = 2

    # Number of candidates described to the model
    poi_prompt_limit: int = 20

    # MongoDB configuration for saved walks
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "pawpath"
    mongo_walks_collection: str = "walks"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)


settings = Settings()
