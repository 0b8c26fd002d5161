"""Runtime settings, read from the environment (and a local .env file)."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel

from .geometry import BUFFER_DEG

BASEMAPS = {
    "OpenStreetMap": "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png",
    "CartoLight": "https://{s}.basemaps.cartocdn.com/light_all/{z}/{x}/{y}{r}.png",
    "CartoDark": "https://{s}.basemaps.cartocdn.com/dark_all/{z}/{x}/{y}{r}.png",
}


class Settings(BaseModel):
    ors_api_key: str = ""
    ors_base_url: str = "https://api.openrouteservice.org"
    ors_profile: str = "driving-car"
    nominatim_url: str = "https://nominatim.openstreetmap.org/search"
    http_timeout: float = 10.0
    closure_buffer_deg: float = BUFFER_DEG
    animation_interval: float = 0.03
    default_basemap: str = "OpenStreetMap"


_ENV_FIELDS = {
    "ORS_API_KEY": "ors_api_key",
    "ORS_BASE_URL": "ors_base_url",
    "ORS_PROFILE": "ors_profile",
    "NOMINATIM_URL": "nominatim_url",
    "HTTP_TIMEOUT": "http_timeout",
    "CLOSURE_BUFFER_DEG": "closure_buffer_deg",
    "ANIMATION_INTERVAL": "animation_interval",
    "DEFAULT_BASEMAP": "default_basemap",
}


def load_settings() -> Settings:
    """Build settings from environment variables, loading ``.env`` first."""
    load_dotenv()
    values = {field: os.environ[var] for var, field in _ENV_FIELDS.items() if var in os.environ}
    return Settings(**values)
