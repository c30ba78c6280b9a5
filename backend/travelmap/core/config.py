from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TRAVELMAP_", case_sensitive=False)

    app_name: str = "TravelPlanner Map Explorer"
    environment: str = "local"
    log_level: str = "INFO"

    geocoder_url: str = "https://nominatim.openstreetmap.org"
    # Nominatim usage policy requires an identifying client marker
    geocoder_user_agent: str = "TravelPlannerDemo/1.0 (travelmap@example.com)"
    geocoder_limit: int = Field(5, ge=1, le=50)
    geocoder_timeout: float = Field(8.0, gt=0)

    storage_path: Path = Path("data/storage.json")
    bookings_key: str = "tp_bookings"
    catalog_path: Optional[Path] = None

    default_latitude: float = Field(48.8566, ge=-90, le=90)
    default_longitude: float = Field(2.3522, ge=-180, le=180)
    default_zoom: float = 2.5
    found_zoom: float = 6
    detail_zoom: float = 10


@lru_cache()
def get_settings() -> Settings:
    load_dotenv(".env")
    return Settings()


settings = get_settings()
