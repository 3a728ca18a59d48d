"""Application configuration settings."""

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _first_env(*names: str, default: str = "") -> str:
    """Return the first non-empty environment variable among names."""
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


@dataclass
class MapboxConfig:
    """Mapbox access configuration."""

    # MAPBOX_API_KEY is the variable pydeck itself reads
    access_token: str = field(
        default_factory=lambda: _first_env(
            "MAPBOX_TOKEN", "VITE_MAPBOX_TOKEN", "MAPBOX_API_KEY"
        )
    )


@dataclass
class MapConfig:
    """Map view configuration."""

    center_lat: float = field(
        default_factory=lambda: float(os.getenv("MAP_CENTER_LAT", "0"))
    )
    center_lon: float = field(
        default_factory=lambda: float(os.getenv("MAP_CENTER_LON", "0"))
    )
    default_zoom: int = field(
        default_factory=lambda: int(os.getenv("MAP_ZOOM", "16"))
    )
    default_pitch: int = 0
    default_bearing: int = 0

    # Base style selected on first load
    default_style: str = field(
        default_factory=lambda: os.getenv("MAP_DEFAULT_STYLE", "satellite-streets-v12")
    )

    height: int = 1000


@dataclass
class OverlayConfig:
    """Overlay layer sources."""

    # Directory of extra *.geojson overlays, one overlay per file
    geojson_dir: Optional[str] = field(
        default_factory=lambda: os.getenv("OVERLAY_GEOJSON_DIR") or None
    )
    include_demo_route: bool = field(
        default_factory=lambda: os.getenv("OVERLAY_DEMO_ROUTE", "true").lower() == "true"
    )


@dataclass
class Settings:
    """Main application settings."""

    mapbox: MapboxConfig = field(default_factory=MapboxConfig)
    map: MapConfig = field(default_factory=MapConfig)
    overlays: OverlayConfig = field(default_factory=OverlayConfig)

    log_level: str = field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper()
    )


# Singleton settings instance
settings = Settings()
